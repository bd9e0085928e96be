"""Minimal pygame based board widget for headless testing.

This module intentionally keeps the rendering deterministic so it can be
exercised in automated tests using the SDL ``dummy`` video driver.
"""

from __future__ import annotations

import os
from typing import Iterable, Optional, Tuple

from ..game import CircuitGame, TurnResult, UndoResult
from ..hexmap import AxialCoordinate, HexMap, coordinates_in_range, ORIGIN
from . import layout


# Pygame is optional for the library but required for the UI helpers.  The
# import is performed lazily in ``ensure_pygame`` so test environments can
# control the SDL configuration (e.g. select the ``dummy`` video driver).
_PYGAME = None


def ensure_pygame():
    global _PYGAME
    if _PYGAME is None:
        os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
        _PYGAME = __import__("pygame")
        _PYGAME.display.init()
        _PYGAME.font.init()
    return _PYGAME


class HexBoardUI:
    """Draws a :class:`CircuitGame` and turns input events into game intents."""

    def __init__(
        self,
        game: CircuitGame,
        *,
        hex_size: int = layout.HEX_SIZE,
        surface=None,
        use_display: bool = False,
    ) -> None:
        pygame = ensure_pygame()
        self.game = game
        self.hex_size = hex_size
        size = layout.board_extent(game.level.size, hex_size)
        self.surface = surface if surface is not None else pygame.Surface(size)
        self.screen = None
        if use_display:
            self.screen = pygame.display.set_mode(self.surface.get_size())
        width, height = self.surface.get_size()
        self.hexmap = HexMap(hex_size=hex_size, center_offset=(width / 2.0, height / 2.0))
        self.last_turn: Optional[TurnResult] = None
        self.last_undo: Optional[UndoResult] = None
        self.hint_target: Optional[AxialCoordinate] = None

    # ------------------------------------------------------------------
    # Input handling
    def process_events(self, events: Iterable[object]) -> None:
        pygame = ensure_pygame()
        for event in events:
            if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self.handle_click(event.pos)
            elif event.type == pygame.KEYDOWN:
                self.handle_key(event.key)

    def handle_click(self, pos: Tuple[int, int]) -> None:
        coordinate = self.hexmap.axial_coordinate(pos)
        if coordinate == self.game.board.player_position:
            self.game.toggle_arm()
            return
        if not self.game.board.inside(coordinate):
            return
        self.hint_target = None
        self.last_turn = self.game.move_to(coordinate)

    def handle_key(self, key: int) -> None:
        pygame = ensure_pygame()
        if key == pygame.K_SPACE:
            self.game.toggle_arm()
        elif key == pygame.K_u:
            self.last_undo = self.game.undo()
            self.hint_target = None
        elif key == pygame.K_r:
            self.game.restart()
            self.last_turn = None
            self.hint_target = None
        elif key == pygame.K_h:
            self.hint_target = self.game.hint()

    # ------------------------------------------------------------------
    # Rendering helpers
    def render(self):
        pygame = ensure_pygame()
        self.surface.fill(layout.BOARD_BACKGROUND_COLOR)
        for layer in layout.DRAW_ORDER:
            if layer == "tiles":
                self._draw_tiles()
            elif layer == "path":
                self._draw_path()
            elif layer == "components":
                self._draw_components()
            elif layer == "player":
                self._draw_player()
        if self.screen is not None:
            self.screen.blit(self.surface, (0, 0))
            pygame.display.flip()
        return self.surface

    def _draw_tiles(self) -> None:
        pygame = ensure_pygame()
        for coordinate in sorted(coordinates_in_range(ORIGIN, self.game.level.size)):
            points = self.hexmap.corners(coordinate, layout.TILE_SCALE)
            pygame.draw.polygon(self.surface, layout.TILE_FILL_COLOR, points)
            pygame.draw.polygon(self.surface, layout.TILE_BORDER_COLOR, points, 1)
        if self.hint_target is not None:
            points = self.hexmap.corners(self.hint_target, layout.TILE_SCALE)
            pygame.draw.polygon(self.surface, layout.HINT_COLOR, points, 3)

    def _draw_path(self) -> None:
        pygame = ensure_pygame()
        route = [self.game.board.start_position] + list(self.game.board.traversed_path)
        if len(route) < 2:
            return
        points = [self.hexmap.pixel_position(coordinate) for coordinate in route]
        pygame.draw.lines(self.surface, layout.PATH_COLOR, False, points, 4)

    def _draw_components(self) -> None:
        pygame = ensure_pygame()
        radius = self.hex_size * 0.45
        for coordinate, component in self.game.board.components.items():
            center = self.hexmap.pixel_position(coordinate)
            color = layout.COMPONENT_COLORS.get(component.type.value, layout.COMPONENT_COLORS["generic"])
            if coordinate in self.game.board.activated:
                color = _blend(color, layout.ACTIVE_TINT, 0.3)
            else:
                color = _blend(color, layout.TILE_FILL_COLOR, 0.3)
            pygame.draw.circle(self.surface, color, center, radius)

    def _draw_player(self) -> None:
        pygame = ensure_pygame()
        center = self.hexmap.pixel_position(self.game.board.player_position)
        pygame.draw.circle(self.surface, layout.PLAYER_COLOR, center, self.hex_size * 0.3)
        if self.game.armed:
            pygame.draw.circle(self.surface, layout.ARMED_RING_COLOR, center, self.hex_size * 0.6, 3)


def _blend(
    base: Tuple[int, int, int], tint: Tuple[int, int, int], factor: float
) -> Tuple[int, int, int]:
    return tuple(int(round(b + (t - b) * factor)) for b, t in zip(base, tint))  # type: ignore[return-value]


__all__ = ["HexBoardUI", "ensure_pygame"]
