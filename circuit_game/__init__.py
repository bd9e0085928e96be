"""Hex grid circuit puzzle package."""

from .game import (
    CircuitBoard,
    CircuitEvaluator,
    CircuitGame,
    Level,
    LevelLoader,
    MoveEngine,
    SolutionValidator,
)
from .hexmap import AxialCoordinate, HexMap
from .progress import GameProgress, ProgressStore
from .ui import HexBoardUI

__all__ = [
    "AxialCoordinate",
    "CircuitBoard",
    "CircuitEvaluator",
    "CircuitGame",
    "GameProgress",
    "HexBoardUI",
    "HexMap",
    "Level",
    "LevelLoader",
    "MoveEngine",
    "ProgressStore",
    "SolutionValidator",
]
