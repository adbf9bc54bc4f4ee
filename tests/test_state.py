"""
Tests for the EditorState state machine.
"""

import pytest

from tif_editor.codec import decode, encode, iter_runs
from tif_editor.errors import NoSelection, OutOfBounds
from tif_editor.models import (
    KEY_DOWN,
    KEY_ESCAPE,
    KEY_LEFT,
    KEY_RIGHT,
    KEY_UP,
    ButtonState,
    ClearOverlay,
    DrawCursor,
    DrawOverlay,
    EditorMode,
    HideCursor,
    Key,
    MouseAt,
    Point,
    RedrawCell,
    SetStatusLine,
)
from tif_editor.palette import Color, wire_token


def press(state, *names):
    results = [state.handle_event(Key(k)) for k in names]
    return results[-1] if results else True


class TestInitialState:
    def test_defaults(self, state):
        assert state.mode == EditorMode.SELECTION
        assert state.cursor == Point(0, 0)
        assert state.selected_color is Color.BLACK
        assert state.area is None
        assert state.drain() == []

    def test_draw_all(self, state):
        """Test a full repaint covers every cell, the cursor and the status line."""
        state.draw_all()
        out = state.drain()
        cells = [i for i in out if isinstance(i, RedrawCell)]
        assert len(cells) == 9
        assert out[-2:] == [DrawCursor(0, 0), SetStatusLine(EditorMode.SELECTION, Color.BLACK)]

    def test_drain_empties_queue(self, state):
        state.set_selected_color(Color.RED)
        assert len(state.drain()) == 1
        assert state.drain() == []


class TestCursor:
    """Test cursor movement and bounds."""

    def test_move_left_at_edge(self, state):
        """Test moving left from column 0 is rejected and changes nothing."""
        with pytest.raises(OutOfBounds):
            state.handle_event(Key(KEY_LEFT))
        assert state.cursor == Point(0, 0)
        assert state.drain() == []

    def test_move_past_bottom_right(self, state):
        state.set_cursor(2, 2)
        state.drain()
        with pytest.raises(OutOfBounds):
            state.handle_event(Key(KEY_DOWN))
        with pytest.raises(OutOfBounds):
            state.handle_event(Key(KEY_RIGHT))
        assert state.cursor == Point(2, 2)

    def test_move_redraws_old_and_new(self, state):
        state.raster.set(0, 0, Color.CYAN)
        press(state, KEY_RIGHT)
        assert state.cursor == Point(0, 1)
        assert state.drain() == [RedrawCell(0, 0, Color.CYAN), DrawCursor(0, 1)]

    def test_arrows(self, state):
        press(state, KEY_DOWN, KEY_DOWN, KEY_RIGHT, KEY_UP)
        assert state.cursor == Point(1, 1)

    def test_set_cursor_out_of_bounds(self, state):
        with pytest.raises(OutOfBounds):
            state.set_cursor(3, 0)
        assert state.cursor == Point(0, 0)


class TestModes:
    """Test Selection / Insertion transitions and color picking."""

    def test_insert_and_escape(self, state):
        press(state, "i")
        assert state.mode == EditorMode.INSERTION
        assert state.drain() == [SetStatusLine(EditorMode.INSERTION, Color.BLACK)]
        press(state, KEY_ESCAPE)
        assert state.mode == EditorMode.SELECTION

    def test_pick_color(self, state):
        press(state, "2")
        assert state.selected_color is Color.RED
        assert state.drain() == [SetStatusLine(EditorMode.SELECTION, Color.RED)]

    def test_non_palette_digits_ignored(self, state):
        press(state, "9", "0")
        assert state.selected_color is Color.BLACK
        assert state.drain() == []

    def test_digits_ignored_in_insertion(self, state):
        press(state, "i", "5")
        assert state.selected_color is Color.BLACK

    def test_quit_only_in_selection(self, state):
        """Test quit keys end the editor only from Selection mode."""
        assert press(state, "i", "q") is True
        assert state.mode == EditorMode.INSERTION
        assert press(state, KEY_ESCAPE, "s", "q") is True
        assert state.mode == EditorMode.AREA
        assert press(state, KEY_ESCAPE, "q") is False
        assert press(state, "Q") is False

    def test_unbound_keys_ignored(self, state):
        assert press(state, "z", "\t") is True
        assert state.drain() == []


class TestPainting:
    """Test painting in Insertion mode."""

    def test_paint_key(self, state):
        press(state, "3", "i")
        state.drain()
        press(state, " ")
        assert state.raster.get(0, 0) is Color.GREEN
        assert state.drain() == [RedrawCell(0, 0, Color.GREEN), DrawCursor(0, 0)]

    def test_paint_key_in_selection_does_nothing(self, state):
        press(state, "2", " ")
        assert state.raster.get(0, 0) is Color.BLACK

    def test_move_and_paint(self, state):
        """Test wasd moves the cursor then paints the new cell."""
        press(state, "2", "i")
        state.drain()
        press(state, "d")
        assert state.cursor == Point(0, 1)
        assert state.raster.get(0, 1) is Color.RED
        assert state.raster.get(0, 0) is Color.BLACK
        assert state.drain() == [
            RedrawCell(0, 0, Color.BLACK),
            DrawCursor(0, 1),
            RedrawCell(0, 1, Color.RED),
            DrawCursor(0, 1),
        ]

    def test_rejected_move_skips_paint(self, state):
        """Test a paint-move off the edge neither moves nor paints."""
        press(state, "2", "i")
        state.drain()
        with pytest.raises(OutOfBounds):
            press(state, "w")
        assert state.cursor == Point(0, 0)
        assert all(c is Color.BLACK for c in state.raster.cells())
        assert state.drain() == []

    def test_arrows_do_not_paint(self, state):
        press(state, "2", "i", KEY_RIGHT, KEY_DOWN)
        assert all(c is Color.BLACK for c in state.raster.cells())

    def test_scenario(self, state):
        """Test painting red at (0,0) and green at (2,2) encodes to three runs."""
        press(state, "2", "i", " ", KEY_ESCAPE)
        press(state, KEY_DOWN, KEY_DOWN, KEY_RIGHT, KEY_RIGHT)
        press(state, "3", "i", " ")

        assert list(iter_runs(state.raster)) == [
            (wire_token(Color.RED), 1),
            (wire_token(Color.BLACK), 7),
            (wire_token(Color.GREEN), 1),
        ]
        assert decode(encode(state.raster), height=3) == state.raster


class TestAreaMode:
    """Test area selection, fill and cancel."""

    def test_enter_area(self, area_state):
        press(area_state, "s")
        assert area_state.mode == EditorMode.AREA
        assert area_state.area.anchor == area_state.area.corner == Point(1, 2)
        assert area_state.drain() == [
            HideCursor(),
            DrawOverlay(((1, 1), (2, 2))),
            SetStatusLine(EditorMode.AREA, Color.RED),
        ]

    def test_grow_draws_overlay(self, area_state):
        press(area_state, "s")
        area_state.drain()
        press(area_state, "d")
        assert area_state.drain() == [DrawOverlay(((1, 1), (2, 3)))]
        press(area_state, "s")
        assert area_state.area_bounds() == ((1, 2), (2, 3))
        assert area_state.cursor == Point(1, 2)

    def test_shrink_restores_old_overlay(self, area_state):
        """Test pulling the corner back repaints the cells it uncovered."""
        area_state.raster.set(1, 4, Color.BLUE)
        press(area_state, "s", "d", "d")
        area_state.drain()
        press(area_state, "a")
        assert area_state.drain() == [
            ClearOverlay(((1, 1), (2, 4))),
            RedrawCell(1, 2, Color.BLACK),
            RedrawCell(1, 3, Color.BLACK),
            RedrawCell(1, 4, Color.BLUE),
            DrawOverlay(((1, 1), (2, 3))),
        ]

    def test_arrows_move_corner(self, area_state):
        press(area_state, "s", KEY_LEFT, KEY_UP)
        assert area_state.area.corner == Point(0, 1)
        assert area_state.cursor == Point(1, 2)

    def test_escape_leaves_raster_unchanged(self, area_state):
        """Test dragging then escaping clears the area and paints nothing."""
        before = area_state.raster.copy()
        press(area_state, "s", "d", "s", "s")
        area_state.drain()
        press(area_state, KEY_ESCAPE)

        assert area_state.raster == before
        assert area_state.area is None
        assert area_state.mode == EditorMode.SELECTION
        out = area_state.drain()
        assert out[0] == ClearOverlay(((1, 3), (2, 3)))
        assert out[-2:] == [DrawCursor(1, 2), SetStatusLine(EditorMode.SELECTION, Color.RED)]

    def test_commit_fills_selection(self, area_state):
        press(area_state, "s", "d", "s")
        area_state.drain()
        press(area_state, " ")

        filled = {(1, 2), (1, 3), (2, 2), (2, 3)}
        for row in range(4):
            for col in range(10):
                expected = Color.RED if (row, col) in filled else Color.BLACK
                assert area_state.raster.get(row, col) is expected
        assert area_state.area is None
        assert area_state.mode == EditorMode.SELECTION
        assert area_state.drain() == [
            ClearOverlay(((1, 2), (2, 3))),
            RedrawCell(1, 2, Color.RED),
            RedrawCell(1, 3, Color.RED),
            RedrawCell(2, 2, Color.RED),
            RedrawCell(2, 3, Color.RED),
            DrawCursor(1, 2),
            SetStatusLine(EditorMode.SELECTION, Color.RED),
        ]

    def test_corner_off_raster_is_clipped(self, area_state):
        """Test a corner dragged past the edge fills only the visible part."""
        press(area_state, "s", "w", "w", "w", "w", "w")
        assert area_state.area.corner == Point(-4, 2)
        assert area_state.area_bounds() == ((0, 1), (2, 2))
        press(area_state, " ")
        assert area_state.raster.get(0, 2) is Color.RED
        assert area_state.raster.get(1, 2) is Color.RED
        assert area_state.raster.dims == (4, 10)
        assert sum(c is Color.RED for c in area_state.raster.cells()) == 2

    def test_reenter_starts_at_cursor(self, area_state):
        press(area_state, "s", "d", "d", " ", "s")
        assert area_state.area.anchor == area_state.area.corner == Point(1, 2)

    def test_leaving_area_via_set_mode(self, area_state):
        press(area_state, "s", "d")
        area_state.set_mode(EditorMode.INSERTION)
        assert area_state.area is None
        assert area_state.mode == EditorMode.INSERTION

    def test_area_ops_need_area(self, state):
        for op in (state.commit_area, state.cancel_area, lambda: state.move_corner(1, 0)):
            with pytest.raises(NoSelection):
                op()


class TestMouse:
    """Test normalized mouse events."""

    def test_click_moves_cursor(self, state):
        state.handle_event(MouseAt(2, 1))
        assert state.cursor == Point(2, 1)
        assert all(c is Color.BLACK for c in state.raster.cells())

    def test_click_paints_in_insertion(self, state):
        press(state, "4", "i")
        state.handle_event(MouseAt(1, 2, ButtonState.PRESSED))
        assert state.raster.get(1, 2) is Color.YELLOW

    def test_release_and_hover_ignored(self, state):
        state.handle_event(MouseAt(2, 2, ButtonState.RELEASED))
        state.handle_event(MouseAt(1, 1, ButtonState.MOVED))
        assert state.cursor == Point(0, 0)

    def test_click_outside(self, state):
        with pytest.raises(OutOfBounds):
            state.handle_event(MouseAt(0, 5))
        assert state.cursor == Point(0, 0)

    def test_click_sets_corner(self, area_state):
        press(area_state, "s")
        area_state.handle_event(MouseAt(3, 7))
        assert area_state.area.corner == Point(3, 7)
        assert area_state.area_bounds() == ((1, 3), (2, 7))
