"""Headless interaction tests for the pygame board widget.

Clicks are aimed at hex centres computed by the widget's own projection, so
the tests do not depend on window metrics.
"""

from __future__ import annotations

from circuit_game.game import (
    CircuitGame,
    ComponentType,
    GameStatus,
    Level,
    MoveStatus,
    PlacedComponent,
    UndoStatus,
)
from circuit_game.hexmap import AxialCoordinate as A
from circuit_game.ui import HexBoardUI
from circuit_game.ui import layout


def make_game() -> CircuitGame:
    level = Level(
        id=1,
        title="UI Test",
        size=2,
        components=[
            PlacedComponent(ComponentType.BATTERY, A(1, 0)),
            PlacedComponent(ComponentType.BULB, A(1, -1)),
        ],
    )
    return CircuitGame(level)


def click(pygame, ui: HexBoardUI, coordinate: A):
    x, y = ui.hexmap.pixel_position(coordinate)
    return pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=(int(x), int(y)))


def key(pygame, code: int):
    return pygame.event.Event(pygame.KEYDOWN, key=code)


def test_click_on_player_arms_then_click_moves(pygame_module):
    pygame = pygame_module
    game = make_game()
    ui = HexBoardUI(game, hex_size=32)

    ui.process_events([click(pygame, ui, A(0, 0))])
    assert game.status is GameStatus.CONNECTING

    ui.process_events([click(pygame, ui, A(1, 0))])

    assert ui.last_turn.move.status is MoveStatus.APPLIED
    assert game.board.player_position == A(1, 0)
    assert game.armed is False


def test_click_without_arming_does_not_move(pygame_module):
    pygame = pygame_module
    game = make_game()
    ui = HexBoardUI(game, hex_size=32)

    ui.process_events([click(pygame, ui, A(1, 0))])

    assert ui.last_turn.move.status is MoveStatus.NOT_ARMED
    assert game.board.player_position == A(0, 0)


def test_keyboard_drives_arm_undo_hint_and_restart(pygame_module):
    pygame = pygame_module
    game = make_game()
    ui = HexBoardUI(game, hex_size=32)

    ui.process_events([key(pygame, pygame.K_h)])
    assert ui.hint_target == A(1, 0)

    ui.process_events([key(pygame, pygame.K_SPACE), click(pygame, ui, A(1, 0))])
    ui.process_events([key(pygame, pygame.K_SPACE), click(pygame, ui, A(1, -1))])
    assert game.status is GameStatus.COMPLETED

    ui.process_events([key(pygame, pygame.K_u)])
    assert ui.last_undo.status is UndoStatus.UNDONE
    assert game.board.player_position == A(1, 0)

    ui.process_events([key(pygame, pygame.K_r)])
    assert game.board.player_position == A(0, 0)
    assert game.board.traversed_path == []


def test_render_draws_board_and_player(pygame_module):
    game = make_game()
    ui = HexBoardUI(game, hex_size=32)

    surface = ui.render()

    assert surface.get_size() == layout.board_extent(2, 32)
    x, y = ui.hexmap.pixel_position(A(0, 0))
    assert tuple(surface.get_at((int(x), int(y))))[:3] == layout.PLAYER_COLOR
    corner = tuple(surface.get_at((0, 0)))[:3]
    assert corner == layout.BOARD_BACKGROUND_COLOR
