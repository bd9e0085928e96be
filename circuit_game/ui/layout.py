"""Layout constants for the circuit puzzle UI."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Tuple

# Hex metrics
HEX_SIZE: int = 35
TILE_SCALE: float = 0.9
BOARD_OUTER_PADDING: int = 32

# UI panel metrics
UI_PANEL_WIDTH: int = 300
UI_PANEL_PADDING: int = 24
UI_PANEL_SPACING: int = 14
GRID_PADDING: int = 24

# Colors expressed as RGB tuples
BACKGROUND_COLOR: Tuple[int, int, int] = (13, 38, 89)
BOARD_BACKGROUND_COLOR: Tuple[int, int, int] = (26, 51, 102)
PANEL_BACKGROUND_COLOR: Tuple[int, int, int] = (32, 36, 60)
TILE_FILL_COLOR: Tuple[int, int, int] = (52, 60, 84)
TILE_BORDER_COLOR: Tuple[int, int, int] = (102, 110, 130)
PATH_COLOR: Tuple[int, int, int] = (0, 220, 230)
PLAYER_COLOR: Tuple[int, int, int] = (230, 70, 60)
ARMED_RING_COLOR: Tuple[int, int, int] = (60, 220, 90)
HINT_COLOR: Tuple[int, int, int] = (255, 170, 40)
TEXT_COLOR: Tuple[int, int, int] = (232, 236, 244)
ACTIVE_TINT: Tuple[int, int, int] = (255, 240, 120)

COMPONENT_COLORS: Dict[str, Tuple[int, int, int]] = {
    "battery": (52, 199, 89),
    "bulb": (255, 204, 0),
    "switch": (255, 149, 0),
    "connector": (0, 122, 255),
    "generic": (142, 142, 147),
}

# Rendering order for composed scenes
DRAW_ORDER = ("tiles", "path", "components", "player")


@dataclass(frozen=True)
class BoardGeometry:
    """Pixel rectangles for the major UI regions."""

    board: Tuple[int, int, int, int]
    panel: Tuple[int, int, int, int]
    window: Tuple[int, int]

    @property
    def board_center(self) -> Tuple[float, float]:
        x, y, width, height = self.board
        return x + width / 2.0, y + height / 2.0


def board_extent(radius: int, hex_size: int = HEX_SIZE) -> Tuple[int, int]:
    """Pixel size of a hexagonal board of the given radius with flat-top tiles."""

    width = 2 * hex_size * (1.5 * radius + 1)
    height = 2 * hex_size * math.sqrt(3.0) * (radius + 0.5)
    return int(math.ceil(width)), int(math.ceil(height))


def compute_geometry(radius: int, hex_size: int = HEX_SIZE) -> BoardGeometry:
    """Compute useful rectangles for rendering the game window."""

    board_width, board_height = board_extent(radius, hex_size)
    board_x = BOARD_OUTER_PADDING
    board_y = BOARD_OUTER_PADDING

    panel_x = board_x + board_width + GRID_PADDING
    panel_height = max(board_height, 360)

    window_width = panel_x + UI_PANEL_WIDTH + BOARD_OUTER_PADDING
    window_height = board_y + panel_height + BOARD_OUTER_PADDING

    return BoardGeometry(
        board=(board_x, board_y, board_width, board_height),
        panel=(panel_x, board_y, UI_PANEL_WIDTH, panel_height),
        window=(window_width, window_height),
    )
