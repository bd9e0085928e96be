"""User interface package for the circuit puzzle."""

from .main import (
    LEVEL_ENV_VAR,
    PROGRESS_ENV_VAR,
    SOLUTION_ENV_VAR,
    CircuitGameApp,
    UIDirectories,
    main,
    resolve_directories,
    run,
)
from .toolkit import HexBoardUI

__all__ = [
    "LEVEL_ENV_VAR",
    "PROGRESS_ENV_VAR",
    "SOLUTION_ENV_VAR",
    "UIDirectories",
    "CircuitGameApp",
    "HexBoardUI",
    "main",
    "resolve_directories",
    "run",
]
