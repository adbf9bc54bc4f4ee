"""
Core models and data structures for the TIF Editor.
"""

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Tuple, Union

from .palette import Color

# Raw key sequences as read from the terminal
KEY_ESCAPE = "\x1b"
KEY_UP = "\x1b[A"
KEY_DOWN = "\x1b[B"
KEY_RIGHT = "\x1b[C"
KEY_LEFT = "\x1b[D"

ARROW_KEYS = {
    KEY_UP: (-1, 0),
    KEY_DOWN: (1, 0),
    KEY_LEFT: (0, -1),
    KEY_RIGHT: (0, 1),
}


class EditorMode(Enum):
    SELECTION = "SELECTION"
    INSERTION = "INSERTION"
    AREA = "AREA"


class ButtonState(Enum):
    PRESSED = "PRESSED"
    RELEASED = "RELEASED"
    MOVED = "MOVED"


class Point(NamedTuple):
    row: int
    col: int

    def offset(self, drow: int, dcol: int) -> "Point":
        return Point(self.row + drow, self.col + dcol)


class Bounds(NamedTuple):
    """Inclusive rectangle: ((row_min, row_max), (col_min, col_max))."""

    rows: Tuple[int, int]
    cols: Tuple[int, int]

    @property
    def row_min(self) -> int:
        return self.rows[0]

    @property
    def row_max(self) -> int:
        return self.rows[1]

    @property
    def col_min(self) -> int:
        return self.cols[0]

    @property
    def col_max(self) -> int:
        return self.cols[1]


@dataclass
class SelectionRect:
    anchor: Point
    corner: Point


# Input events


@dataclass(frozen=True)
class Key:
    key: str


@dataclass(frozen=True)
class MouseAt:
    row: int
    col: int
    button: ButtonState = ButtonState.PRESSED


InputEvent = Union[Key, MouseAt]


# Redraw instructions


@dataclass(frozen=True)
class RedrawCell:
    row: int
    col: int
    color: Color


@dataclass(frozen=True)
class DrawOverlay:
    bounds: Bounds


@dataclass(frozen=True)
class ClearOverlay:
    bounds: Bounds


@dataclass(frozen=True)
class SetStatusLine:
    mode: EditorMode
    color: Color


@dataclass(frozen=True)
class DrawCursor:
    row: int
    col: int


@dataclass(frozen=True)
class HideCursor:
    pass


Redraw = Union[RedrawCell, DrawOverlay, ClearOverlay, SetStatusLine, DrawCursor, HideCursor]
