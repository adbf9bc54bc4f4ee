"""
Editing state machine for the TIF Editor.

EditorState owns the raster, the cursor, the current mode and the area
selection. It never draws: every change queues redraw instructions that the
display collaborator consumes through drain().
"""

from typing import List, Optional

from .config import KeyBindings
from .errors import NoSelection, OutOfBounds
from .models import (
    ARROW_KEYS,
    Bounds,
    ButtonState,
    ClearOverlay,
    DrawCursor,
    DrawOverlay,
    EditorMode,
    HideCursor,
    InputEvent,
    MouseAt,
    Point,
    Redraw,
    RedrawCell,
    SelectionRect,
    SetStatusLine,
)
from .palette import Color, color_for_digit
from .raster import Raster
from . import selection


class EditorState:
    def __init__(self, raster: Raster, keys: Optional[KeyBindings] = None):
        self.raster = raster
        self.keys = keys or KeyBindings()

        self.mode = EditorMode.SELECTION
        self.cursor = Point(0, 0)
        self.selected_color = Color.BLACK
        self.area: Optional[SelectionRect] = None

        self._pending: List[Redraw] = []

    # Redraw queue

    def _emit(self, instruction: Redraw):
        self._pending.append(instruction)

    def drain(self) -> List[Redraw]:
        """Returns the queued redraw instructions and empties the queue."""
        pending, self._pending = self._pending, []
        return pending

    def draw_all(self):
        """Queues a full repaint of the image, cursor or overlay, and status."""
        for row, pixels in enumerate(self.raster.rows()):
            for col, color in enumerate(pixels):
                self._emit(RedrawCell(row, col, color))
        bounds = self.area_bounds()
        if self.area is None:
            self._emit(DrawCursor(*self.cursor))
        elif bounds is not None:
            self._emit(DrawOverlay(bounds))
        self._emit(SetStatusLine(self.mode, self.selected_color))

    def _status(self):
        self._emit(SetStatusLine(self.mode, self.selected_color))

    # Event dispatch

    def handle_event(self, event: InputEvent) -> bool:
        """
        Apply a single input event.
        Returns False if the editor should exit, True otherwise.
        Raises OutOfBounds when a cursor move is rejected.
        """
        if isinstance(event, MouseAt):
            self._handle_mouse(event)
            return True

        k = event.key
        if not k:
            return True
        if self.mode == EditorMode.SELECTION:
            return self._handle_selection(k)
        if self.mode == EditorMode.INSERTION:
            self._handle_insertion(k)
        else:
            self._handle_area(k)
        return True

    def _handle_selection(self, k: str) -> bool:
        if k in self.keys.quit:
            return False
        if k == self.keys.insert:
            self.set_mode(EditorMode.INSERTION)
        elif k == self.keys.area:
            self.set_mode(EditorMode.AREA)
        elif k in ARROW_KEYS:
            self.move_cursor(*ARROW_KEYS[k])
        else:
            color = color_for_digit(k)
            if color is not None:
                self.set_selected_color(color)
        return True

    def _handle_insertion(self, k: str):
        if k == self.keys.escape:
            self.set_mode(EditorMode.SELECTION)
        elif k == self.keys.paint:
            self.paint_at_cursor()
        elif k in ARROW_KEYS:
            self.move_cursor(*ARROW_KEYS[k])
        elif k in self.keys.paint_moves:
            # A rejected move raises before the paint
            self.move_cursor(*self.keys.paint_moves[k])
            self.paint_at_cursor()

    def _handle_area(self, k: str):
        if k == self.keys.escape:
            self.cancel_area()
        elif k == self.keys.paint:
            self.commit_area()
        elif k in ARROW_KEYS:
            self.move_corner(*ARROW_KEYS[k])
        elif k in self.keys.paint_moves:
            self.move_corner(*self.keys.paint_moves[k])

    def _handle_mouse(self, event: MouseAt):
        # Hover and release only matter to the terminal
        if event.button != ButtonState.PRESSED:
            return
        if self.mode == EditorMode.AREA:
            self.set_corner(Point(event.row, event.col))
            return
        self.set_cursor(event.row, event.col)
        if self.mode == EditorMode.INSERTION:
            self.paint_at_cursor()

    # Mode and color

    def set_mode(self, mode: EditorMode):
        if mode == self.mode:
            return
        if self.mode == EditorMode.AREA:
            self._clear_area()
        self.mode = mode
        if mode == EditorMode.AREA:
            self._start_area()
        self._status()

    def set_selected_color(self, color: Color):
        self.selected_color = color
        self._status()

    # Cursor and painting

    @property
    def cursor_visible(self) -> bool:
        return self.mode != EditorMode.AREA

    def set_cursor(self, row: int, col: int):
        if not self.raster.in_bounds(row, col):
            raise OutOfBounds(row, col)
        old = self.cursor
        self.cursor = Point(row, col)
        if self.cursor_visible:
            self._emit(RedrawCell(old.row, old.col, self.raster.get(*old)))
            self._emit(DrawCursor(row, col))

    def move_cursor(self, drow: int, dcol: int):
        target = self.cursor.offset(drow, dcol)
        self.set_cursor(target.row, target.col)

    def _write(self, row: int, col: int, color: Color):
        self.raster.set(row, col, color)
        self._emit(RedrawCell(row, col, color))

    def paint_at_cursor(self):
        self._write(self.cursor.row, self.cursor.col, self.selected_color)
        if self.cursor_visible:
            self._emit(DrawCursor(*self.cursor))

    # Area selection

    def area_bounds(self) -> Optional[Bounds]:
        """Current selection clipped to the raster, or None if nothing is covered."""
        if self.area is None:
            return None
        bounds = selection.normalize(self.area.anchor, self.area.corner)
        return selection.clip_to_raster(bounds, self.raster.dims)

    def _start_area(self):
        self.area = SelectionRect(anchor=self.cursor, corner=self.cursor)
        self._emit(HideCursor())
        self._emit(DrawOverlay(self.area_bounds()))

    def _restore(self, bounds: Bounds):
        self._emit(ClearOverlay(bounds))
        selection.for_each_cell(
            bounds, lambda r, c: self._emit(RedrawCell(r, c, self.raster.get(r, c)))
        )

    def _clear_area(self):
        if self.area is not None:
            bounds = self.area_bounds()
            self.area = None
            if bounds is not None:
                self._restore(bounds)
        self._emit(DrawCursor(*self.cursor))

    def set_corner(self, corner: Point):
        """Move the free corner of the selection. The corner is not clamped."""
        if self.area is None:
            raise NoSelection()
        old = self.area_bounds()
        self.area.corner = corner
        new = self.area_bounds()
        if old is not None and (new is None or not selection.contains(new, old)):
            self._restore(old)
        if new is not None:
            self._emit(DrawOverlay(new))

    def move_corner(self, drow: int, dcol: int):
        if self.area is None:
            raise NoSelection()
        self.set_corner(self.area.corner.offset(drow, dcol))

    def commit_area(self):
        """Fill the selection with the selected color and return to Selection mode."""
        if self.area is None:
            raise NoSelection()
        bounds = self.area_bounds()
        if bounds is not None:
            self._emit(ClearOverlay(bounds))
            selection.for_each_cell(
                bounds, lambda r, c: self._write(r, c, self.selected_color)
            )
        self.area = None
        self.set_mode(EditorMode.SELECTION)

    def cancel_area(self):
        if self.area is None:
            raise NoSelection()
        self.set_mode(EditorMode.SELECTION)
