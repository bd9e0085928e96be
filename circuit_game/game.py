"""Core game logic for the hex circuit puzzle."""

from __future__ import annotations

import json
import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Set, Tuple

from . import hexmap
from .hexmap import ORIGIN, AxialCoordinate

logger = logging.getLogger(__name__)


class ComponentType(Enum):
    """Kinds of circuit elements placed on the board."""

    BATTERY = "battery"
    BULB = "bulb"
    SWITCH = "switch"
    CONNECTOR = "connector"
    GENERIC = "generic"

    @staticmethod
    def from_name(name: str) -> "ComponentType":
        try:
            return ComponentType(str(name).lower())
        except ValueError:
            logger.warning("Unknown component type %r, treating it as generic", name)
            return ComponentType.GENERIC


@dataclass(frozen=True)
class PlacedComponent:
    type: ComponentType
    coordinate: AxialCoordinate


class LevelFormatError(ValueError):
    """Raised when a level definition cannot be decoded."""


@dataclass
class Level:
    """In-memory representation of a level definition."""

    id: int
    title: str
    size: int
    start_position: AxialCoordinate = ORIGIN
    components: List[PlacedComponent] = field(default_factory=list)
    star_threshold: int = 3
    float_offset: Tuple[float, float] = (0.0, 0.0)

    @property
    def metadata(self) -> Dict[str, object]:
        counts: Dict[str, int] = {}
        for component in self.components:
            counts[component.type.value] = counts.get(component.type.value, 0) + 1
        return {
            "id": self.id,
            "title": self.title,
            "radius": self.size,
            "star": self.star_threshold,
            "components": counts,
        }


class LevelLoader:
    """Load level files stored as JSON."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def names(self) -> List[str]:
        return sorted(path.stem for path in self.root.glob("*.json"))

    def load(self, name: str) -> Level:
        path = self.root / f"{name}.json"
        if not path.exists():
            raise FileNotFoundError(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise LevelFormatError(f"{path}: invalid JSON ({exc})") from exc
        return self.parse_level(data)

    def load_all(self) -> List[Level]:
        return sorted((self.load(name) for name in self.names()), key=lambda level: level.id)

    @staticmethod
    def parse_level(data: Dict) -> Level:
        try:
            level = Level(
                id=int(data["id"]),
                title=str(data.get("title", "")),
                size=int(data["size"]),
                start_position=AxialCoordinate.of(data["startPos"]),
                star_threshold=int(data.get("star", 3)),
            )
            offset = data.get("floatOffset")
            if offset:
                level.float_offset = (float(offset[0]), float(offset[1]))
            seen: Set[AxialCoordinate] = set()
            for entry in data.get("components", []):
                coordinate = AxialCoordinate(int(entry["q"]), int(entry["r"]))
                if coordinate in seen:
                    raise LevelFormatError(f"Duplicate component at {coordinate}")
                seen.add(coordinate)
                level.components.append(
                    PlacedComponent(ComponentType.from_name(entry["type"]), coordinate)
                )
        except LevelFormatError:
            raise
        except (KeyError, TypeError, ValueError) as exc:
            raise LevelFormatError(f"Malformed level data: {exc!r}") from exc
        return level


@dataclass
class CircuitBoard:
    """Mutable state of one level attempt."""

    radius: int
    components: Dict[AxialCoordinate, PlacedComponent]
    start_position: AxialCoordinate
    player_position: AxialCoordinate
    activated: Set[AxialCoordinate] = field(default_factory=set)
    traversed_path: List[AxialCoordinate] = field(default_factory=list)

    @classmethod
    def from_level(cls, level: Level) -> "CircuitBoard":
        return cls(
            radius=level.size,
            components={component.coordinate: component for component in level.components},
            start_position=level.start_position,
            player_position=level.start_position,
        )

    def inside(self, coordinate: AxialCoordinate) -> bool:
        return hexmap.is_in_range(coordinate, ORIGIN, self.radius)

    def activated_of_type(self, component_type: ComponentType) -> List[AxialCoordinate]:
        return [
            coordinate
            for coordinate in self.activated
            if self.components[coordinate].type is component_type
        ]

    @property
    def all_activated(self) -> bool:
        return all(coordinate in self.activated for coordinate in self.components)


@dataclass(frozen=True)
class MoveHistoryEntry:
    position: AxialCoordinate
    activated_snapshot: FrozenSet[AxialCoordinate]


class MoveStatus(Enum):
    APPLIED = "applied"
    NOT_ARMED = "not_armed"
    OUT_OF_BOUNDS = "out_of_bounds"
    NO_OP = "no_op"


@dataclass(frozen=True)
class MoveResult:
    status: MoveStatus
    path: Tuple[AxialCoordinate, ...] = ()
    newly_activated: Tuple[AxialCoordinate, ...] = ()

    @property
    def applied(self) -> bool:
        return self.status is MoveStatus.APPLIED


class UndoStatus(Enum):
    UNDONE = "undone"
    NOTHING_TO_UNDO = "nothing_to_undo"


@dataclass(frozen=True)
class UndoResult:
    status: UndoStatus
    position: Optional[AxialCoordinate] = None


class MoveEngine:
    """Applies player moves to a board and keeps an undo stack."""

    def __init__(self) -> None:
        self.history: List[MoveHistoryEntry] = []

    @property
    def can_undo(self) -> bool:
        return bool(self.history)

    def clear(self) -> None:
        self.history.clear()

    def request_move(
        self, board: CircuitBoard, destination: AxialCoordinate, *, armed: bool
    ) -> MoveResult:
        if not armed:
            return MoveResult(MoveStatus.NOT_ARMED)
        if not board.inside(destination):
            return MoveResult(MoveStatus.OUT_OF_BOUNDS)
        path = hexmap.find_path(board.player_position, destination)
        if len(path) <= 1:
            return MoveResult(MoveStatus.NO_OP)

        self.history.append(
            MoveHistoryEntry(board.player_position, frozenset(board.activated))
        )
        board.player_position = destination
        newly_activated: List[AxialCoordinate] = []
        for coordinate in path:
            if coordinate in board.components and coordinate not in board.activated:
                board.activated.add(coordinate)
                newly_activated.append(coordinate)
        board.traversed_path.extend(path[1:])
        logger.debug(
            "Moved to %s along %d cells, activated %s", destination, len(path), newly_activated
        )
        return MoveResult(MoveStatus.APPLIED, tuple(path), tuple(newly_activated))

    def undo(self, board: CircuitBoard) -> UndoResult:
        if not self.history:
            return UndoResult(UndoStatus.NOTHING_TO_UNDO)
        entry = self.history.pop()
        board.player_position = entry.position
        board.activated = {
            coordinate for coordinate in entry.activated_snapshot if coordinate in board.components
        }
        # The path is rebuilt from the restored activations only; order and
        # repeats of the undone route are not recoverable.
        board.traversed_path = [
            coordinate for coordinate in board.components if coordinate in board.activated
        ]
        logger.debug("Undo restored position %s", entry.position)
        return UndoResult(UndoStatus.UNDONE, entry.position)


class VerdictStatus(Enum):
    VICTORY = "victory"
    INCOMPLETE = "incomplete"
    NO_BATTERY = "no_battery"
    NO_BULB = "no_bulb"
    NOT_CLOSED = "not_closed"
    NOT_CONNECTED = "not_connected"


@dataclass(frozen=True)
class VictoryVerdict:
    status: VerdictStatus
    stars: int = 0

    @property
    def victory(self) -> bool:
        return self.status is VerdictStatus.VICTORY


class CircuitEvaluator:
    """Decides whether the activated components close the circuit."""

    def __init__(self, *, strict: bool = False) -> None:
        self.strict = strict

    def check(self, board: CircuitBoard) -> VerdictStatus:
        if not board.all_activated:
            return VerdictStatus.INCOMPLETE
        if not board.activated_of_type(ComponentType.BATTERY):
            return VerdictStatus.NO_BATTERY
        if not board.activated_of_type(ComponentType.BULB):
            return VerdictStatus.NO_BULB
        if (
            not board.traversed_path
            or hexmap.distance(board.start_position, board.player_position) > 1
        ):
            return VerdictStatus.NOT_CLOSED
        if self.strict and not self.is_connected(board):
            return VerdictStatus.NOT_CONNECTED
        return VerdictStatus.VICTORY

    def evaluate(self, board: CircuitBoard, level: Optional[Level] = None) -> VictoryVerdict:
        status = self.check(board)
        if status is not VerdictStatus.VICTORY:
            return VictoryVerdict(status)
        component_count = len(level.components) if level is not None else len(board.components)
        return VictoryVerdict(status, stars_for_steps(component_count, len(board.traversed_path)))

    @staticmethod
    def compute_stars(board: CircuitBoard, level: Level) -> int:
        return stars_for_steps(len(level.components), len(board.traversed_path))

    @staticmethod
    def is_connected(board: CircuitBoard) -> bool:
        """Breadth-first search from any activated battery to an activated bulb.

        Current flows through the traversed cells and the start hex. A cell
        holding a component only conducts while that component is activated,
        so an inactive switch breaks the circuit.
        """

        wire = set(board.traversed_path)
        wire.add(board.start_position)

        def conducts(cell: AxialCoordinate) -> bool:
            if cell in board.components:
                return cell in board.activated
            return cell in wire

        bulbs = set(board.activated_of_type(ComponentType.BULB))
        batteries = board.activated_of_type(ComponentType.BATTERY)
        visited: Set[AxialCoordinate] = set(batteries)
        queue = deque(batteries)
        while queue:
            current = queue.popleft()
            if current in bulbs:
                return True
            for cell in hexmap.neighbors(current):
                if cell not in visited and conducts(cell):
                    visited.add(cell)
                    queue.append(cell)
        return False


def stars_for_steps(component_count: int, steps: int) -> int:
    optimal = component_count + 1
    if steps <= optimal:
        return 3
    if steps <= int(optimal * 1.5):
        return 2
    return 1


class GameStatus(Enum):
    PLAYING = "playing"
    CONNECTING = "connecting"
    COMPLETED = "completed"


@dataclass(frozen=True)
class TurnResult:
    move: MoveResult
    verdict: Optional[VictoryVerdict] = None


class CircuitGame:
    """Play session tying a level, its board, the move engine and arming together."""

    def __init__(self, level: Level, *, strict: bool = False):
        self.level = level
        self.evaluator = CircuitEvaluator(strict=strict)
        self.engine = MoveEngine()
        self.reset()

    def reset(self) -> None:
        self.board = CircuitBoard.from_level(self.level)
        self.engine.clear()
        self.armed = False
        self.last_verdict: Optional[VictoryVerdict] = None

    restart = reset

    @property
    def status(self) -> GameStatus:
        if self.last_verdict is not None and self.last_verdict.victory:
            return GameStatus.COMPLETED
        return GameStatus.CONNECTING if self.armed else GameStatus.PLAYING

    def arm(self) -> None:
        self.armed = True

    def disarm(self) -> None:
        self.armed = False

    def toggle_arm(self) -> bool:
        self.armed = not self.armed
        return self.armed

    def move_to(self, destination: object) -> TurnResult:
        coordinate = AxialCoordinate.of(destination)
        move = self.engine.request_move(self.board, coordinate, armed=self.armed)
        if not move.applied:
            return TurnResult(move)
        self.armed = False
        verdict = self.evaluate()
        return TurnResult(move, verdict)

    def undo(self) -> UndoResult:
        result = self.engine.undo(self.board)
        if result.status is UndoStatus.UNDONE:
            self.evaluate()
        return result

    def evaluate(self) -> VictoryVerdict:
        verdict = self.evaluator.evaluate(self.board, self.level)
        if verdict.victory and not (self.last_verdict and self.last_verdict.victory):
            logger.info("Level %s solved with %d stars", self.level.id, verdict.stars)
        self.last_verdict = verdict
        return verdict

    def hint(self) -> Optional[AxialCoordinate]:
        """Next hex worth visiting: the nearest inactive component, else the start."""

        if self.last_verdict is not None and self.last_verdict.victory:
            return None
        pending = [
            component.coordinate
            for component in self.level.components
            if component.coordinate not in self.board.activated
        ]
        if not pending:
            return self.board.start_position
        position = self.board.player_position
        return min(pending, key=lambda coordinate: hexmap.distance(position, coordinate))

    def playthrough(self, moves: Iterable[object]) -> VictoryVerdict:
        """Arm and move through ``moves`` in order, returning the final verdict."""

        for destination in moves:
            self.arm()
            self.move_to(destination)
        self.disarm()
        return self.evaluate()


class SolutionValidator:
    """Validate that a recorded move list solves its level."""

    def __init__(self, level_loader: LevelLoader, solutions_root: Path):
        self.level_loader = level_loader
        self.solutions_root = Path(solutions_root)

    def load_solution(self, name: str) -> Dict:
        path = self.solutions_root / f"{name}.json"
        if not path.exists():
            raise FileNotFoundError(path)
        return json.loads(path.read_text(encoding="utf-8"))

    def replay(
        self,
        level_name: str,
        solution_name: Optional[str] = None,
        *,
        strict: bool = False,
    ) -> Tuple[CircuitGame, VictoryVerdict]:
        level = self.level_loader.load(level_name)
        solution = self.load_solution(solution_name or level_name)
        game = CircuitGame(level, strict=strict)
        moves: Sequence[object] = solution.get("moves", [])
        verdict = game.playthrough(moves)
        return game, verdict

    def validate(self, level_name: str, solution_name: Optional[str] = None) -> bool:
        solution = self.load_solution(solution_name or level_name)
        _game, verdict = self.replay(level_name, solution_name)
        if verdict.victory != bool(solution.get("expected_victory", True)):
            return False
        expected_stars = solution.get("expected_stars")
        if expected_stars is not None and verdict.stars != int(expected_stars):
            return False
        return True


__all__ = [
    "CircuitBoard",
    "CircuitEvaluator",
    "CircuitGame",
    "ComponentType",
    "GameStatus",
    "Level",
    "LevelFormatError",
    "LevelLoader",
    "MoveEngine",
    "MoveHistoryEntry",
    "MoveResult",
    "MoveStatus",
    "PlacedComponent",
    "SolutionValidator",
    "TurnResult",
    "UndoResult",
    "UndoStatus",
    "VerdictStatus",
    "VictoryVerdict",
    "stars_for_steps",
]
