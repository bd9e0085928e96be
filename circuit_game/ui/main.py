"""Interactive UI and command line entry point for the circuit puzzle."""

from __future__ import annotations

import argparse
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from ..game import CircuitGame, GameStatus, Level, LevelLoader, SolutionValidator
from ..progress import ProgressError, ProgressStore, default_progress_path
from . import layout
from .toolkit import HexBoardUI, ensure_pygame

logger = logging.getLogger(__name__)

LEVEL_ENV_VAR = "CIRCUIT_GAME_LEVEL_ROOT"
SOLUTION_ENV_VAR = "CIRCUIT_GAME_SOLUTION_ROOT"
PROGRESS_ENV_VAR = "CIRCUIT_GAME_PROGRESS_PATH"


@dataclass(frozen=True)
class UIDirectories:
    """Bundle with resolved locations required by the UI."""

    level_root: Path
    solution_root: Path
    progress_path: Path


def _default_level_root() -> Path:
    return Path(__file__).resolve().parents[1] / "levels"


def _default_solution_root() -> Path:
    return Path(__file__).resolve().parents[1] / "solutions"


def _read_path(env_var: str, fallback: Path) -> Path:
    value = os.environ.get(env_var)
    if value:
        return Path(value).expanduser()
    return fallback


def resolve_directories(check_exists: bool = True) -> UIDirectories:
    """Resolve UI locations using environment variables.

    Parameters
    ----------
    check_exists:
        When *True*, raise :class:`FileNotFoundError` if a resolved directory does
        not exist on disk. The progress file is created on first save and is
        never checked.
    """

    level_root = _read_path(LEVEL_ENV_VAR, _default_level_root())
    solution_root = _read_path(SOLUTION_ENV_VAR, _default_solution_root())
    progress_path = _read_path(PROGRESS_ENV_VAR, default_progress_path())

    if check_exists:
        missing = [path for path in (level_root, solution_root) if not path.exists()]
        if missing:
            missing_str = ", ".join(str(path) for path in missing)
            raise FileNotFoundError(
                f"Required resource directories do not exist: {missing_str}"
            )

    return UIDirectories(
        level_root=level_root, solution_root=solution_root, progress_path=progress_path
    )


STATUS_TEXT = {
    GameStatus.PLAYING: "Click the player to start connecting",
    GameStatus.CONNECTING: "Connecting the circuit...",
    GameStatus.COMPLETED: "Level complete!",
}


class CircuitGameApp:
    """Pygame driven application for the circuit puzzle."""

    def __init__(
        self,
        *,
        directories: Optional[UIDirectories] = None,
        level_name: Optional[str] = None,
        strict: bool = False,
    ) -> None:
        pygame = ensure_pygame()
        self.directories = directories or resolve_directories()
        self.level_loader = LevelLoader(self.directories.level_root)
        self.level_names: List[str] = self.level_loader.names()
        if not self.level_names:
            raise RuntimeError("No levels available to load.")
        self.progress = ProgressStore(self.directories.progress_path)
        self.strict = strict
        self.clock = pygame.time.Clock()
        self.font = pygame.font.Font(None, 26)
        self.small_font = pygame.font.Font(None, 20)
        self.level_index = (
            self.level_names.index(level_name) if level_name in self.level_names else 0
        )
        self.recorded = False
        self.load_level(self.level_names[self.level_index])

    # ------------------------------------------------------------------
    # Level handling
    def load_level(self, name: str) -> None:
        """Load a level and prepare the runtime artefacts."""

        pygame = ensure_pygame()
        self.level: Level = self.level_loader.load(name)
        self.game = CircuitGame(self.level, strict=self.strict)
        self.geometry = layout.compute_geometry(self.level.size)
        self.screen = pygame.display.set_mode(self.geometry.window)
        pygame.display.set_caption(f"Circuit Puzzle - {self.level.title}")
        board_rect = pygame.Rect(*self.geometry.board)
        self.board_ui = HexBoardUI(self.game, surface=self.screen.subsurface(board_rect))
        self.recorded = False
        logger.debug("Loaded level %s (%s)", name, self.level.title)

    def cycle_level(self, direction: int) -> None:
        self.level_index = (self.level_index + direction) % len(self.level_names)
        self.load_level(self.level_names[self.level_index])

    def _record_victory(self) -> None:
        # Restart and undo leave COMPLETED; the next win must be saved again.
        if self.game.status is not GameStatus.COMPLETED:
            self.recorded = False
            return
        if self.recorded:
            return
        verdict = self.game.last_verdict
        try:
            self.progress.record_completion(self.level.id, verdict.stars if verdict else 1)
        except ProgressError as exc:
            logger.warning("Progress not saved: %s", exc)
        self.recorded = True

    # ------------------------------------------------------------------
    # Events
    def handle_event(self, event) -> bool:
        pygame = ensure_pygame()
        if event.type == pygame.QUIT:
            return False
        if event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                return False
            if event.key == pygame.K_n:
                self.cycle_level(1)
            elif event.key == pygame.K_p:
                self.cycle_level(-1)
            else:
                self.board_ui.handle_key(event.key)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            x, y, width, height = self.geometry.board
            if x <= event.pos[0] < x + width and y <= event.pos[1] < y + height:
                self.board_ui.handle_click((event.pos[0] - x, event.pos[1] - y))
        self._record_victory()
        return True

    # ------------------------------------------------------------------
    # Drawing
    def draw(self) -> None:
        pygame = ensure_pygame()
        self.screen.fill(layout.BACKGROUND_COLOR)
        self.board_ui.render()
        panel = pygame.Rect(*self.geometry.panel)
        pygame.draw.rect(self.screen, layout.PANEL_BACKGROUND_COLOR, panel, border_radius=18)

        x = panel.x + layout.UI_PANEL_PADDING
        y = panel.y + layout.UI_PANEL_PADDING
        lines = [
            (self.font, f"#{self.level.id} {self.level.title}"),
            (self.small_font, STATUS_TEXT[self.game.status]),
            (self.small_font, f"Steps: {len(self.game.board.traversed_path)}"),
            (
                self.small_font,
                f"Active: {len(self.game.board.activated)}/{len(self.game.board.components)}",
            ),
            (self.small_font, f"Best: {self.progress.progress.stars_for(self.level.id)} stars"),
        ]
        verdict = self.game.last_verdict
        if verdict is not None and verdict.victory:
            lines.append((self.font, "*" * verdict.stars))
        lines.append((self.small_font, "Space arm  U undo  R restart"))
        lines.append((self.small_font, "H hint  N/P level  Esc quit"))
        for font, text in lines:
            surface = font.render(text, True, layout.TEXT_COLOR)
            self.screen.blit(surface, (x, y))
            y += surface.get_height() + layout.UI_PANEL_SPACING
        pygame.display.flip()

    def run(self) -> None:
        pygame = ensure_pygame()
        running = True
        while running:
            for event in pygame.event.get():
                if not self.handle_event(event):
                    running = False
                    break
            self.draw()
            self.clock.tick(60)
        pygame.quit()


def run(level_name: Optional[str] = None, *, strict: bool = False) -> None:
    """Entry point helper that instantiates and runs the UI."""

    app = CircuitGameApp(level_name=level_name, strict=strict)
    app.run()


def bootstrap_directories() -> UIDirectories:
    """Return resolved locations and print a short bootstrap message."""

    directories = resolve_directories()
    message = (
        "Circuit Puzzle bootstrap\n"
        f"  levels: {directories.level_root}\n"
        f"  solutions: {directories.solution_root}\n"
        f"  progress: {directories.progress_path}\n"
        "Set the environment variables to point to custom locations if needed."
    )
    print(message)
    return directories


def _list_levels(directories: UIDirectories) -> int:
    loader = LevelLoader(directories.level_root)
    progress = ProgressStore(directories.progress_path).progress
    print("Available levels:")
    for name in loader.names():
        level = loader.load(name)
        lock = "" if progress.is_level_unlocked(level.id) else " [locked]"
        stars = progress.stars_for(level.id)
        print(f"  {name}: #{level.id} {level.title} (radius {level.size}, best {stars}/3){lock}")
    return 0


def _replay(directories: UIDirectories, name: str, strict: bool) -> int:
    loader = LevelLoader(directories.level_root)
    validator = SolutionValidator(loader, directories.solution_root)
    game, verdict = validator.replay(name, strict=strict)
    print(f"Level: {game.level.title} (#{game.level.id})")
    print(f"Steps: {len(game.board.traversed_path)}")
    print(f"Verdict: {verdict.status.value} ({verdict.stars} stars)")
    return 0 if verdict.victory else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Circuit puzzle launcher")
    parser.add_argument(
        "--info",
        action="store_true",
        help="Print resolved resource locations and exit without launching the UI.",
    )
    parser.add_argument("--list-levels", action="store_true", help="List bundled levels and exit.")
    parser.add_argument("--level", help="Level to open in the interactive UI.")
    parser.add_argument("--replay", metavar="LEVEL", help="Replay the recorded solution of LEVEL.")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Require a connected battery-to-bulb circuit in addition to the closed loop.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.info:
        bootstrap_directories()
        return 0
    directories = resolve_directories()
    if args.list_levels:
        return _list_levels(directories)
    if args.replay:
        return _replay(directories, args.replay, args.strict)

    app = CircuitGameApp(directories=directories, level_name=args.level, strict=args.strict)
    app.run()
    return 0


if __name__ == "__main__":  # pragma: no cover - manual invocation entry point
    raise SystemExit(main())
