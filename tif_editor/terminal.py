"""
Terminal implementations of the display and input ports.
Raw keyboard and SGR mouse input via termios/select, drawing via Renderer.
"""

import os
import re
import select
import sys
from collections import deque
from typing import Deque, List, Optional, Tuple

import numpy as np

from .models import (
    ButtonState,
    ClearOverlay,
    DrawCursor,
    DrawOverlay,
    EditorMode,
    HideCursor,
    InputEvent,
    Key,
    MouseAt,
    Redraw,
    RedrawCell,
    SetStatusLine,
)
from .palette import (
    COLOR_RGB,
    DIGIT_KEYS,
    PALETTE,
    Color,
    display_index,
    from_display_index,
)
from .ports import Display, InputSource
from .renderer import Renderer

CELL_WIDTH = 2
HELP_CELLS = 22
STATUS_CELLS = 12

MOUSE_RE = re.compile(r"\x1b\[<(\d+);(\d+);(\d+)([Mm])")
CSI_RE = re.compile(r"\x1b\[[0-9;]*[A-Za-z~]")

BORDER_RGB = COLOR_RGB[Color.RED]
CURSOR_FG, CURSOR_BG = (36, 114, 200), (255, 255, 255)
OVERLAY_FG, OVERLAY_BG = (0, 0, 0), (200, 200, 200)

HELP_TEXT = {
    EditorMode.SELECTION: [
        "[I] -> INSERTION MODE",
        "[S] -> AREA MODE",
        "[ARROWS] -> MOVE",
        "[1..8] -> SELECT COLOR",
        "[Q] -> SAVE AND QUIT",
    ],
    EditorMode.INSERTION: [
        "[ESC] -> SELECTION MODE",
        "[SPACE] -> PAINT",
        "[ARROWS] -> MOVE",
        "[WASD] -> MOVE AND PAINT",
    ],
    EditorMode.AREA: [
        "[ESC] -> SELECTION MODE",
        "[SPACE] -> FILL THE AREA",
        "[WASD] -> MOVE AND SELECT",
    ],
}


def required_terminal_size(height: int, width: int) -> Tuple[int, int]:
    """
    Terminal (rows, columns) needed to show an image, its border and the
    status lines. The help panel is optional and not counted.
    """
    return height + 9, max(width + 1, STATUS_CELLS) * CELL_WIDTH


def full_layout_columns(width: int) -> int:
    """Terminal columns needed to also show the help panel."""
    return (width + 2 + HELP_CELLS) * CELL_WIDTH


def split_keys(data: str) -> List[str]:
    """Split raw terminal input into individual key or mouse sequences."""
    keys = []
    i = 0
    while i < len(data):
        if data[i] == "\x1b":
            m = MOUSE_RE.match(data, i) or CSI_RE.match(data, i)
            if m:
                keys.append(m.group(0))
                i = m.end()
                continue
        keys.append(data[i])
        i += 1
    return keys


def decode_key(seq: str) -> Optional[InputEvent]:
    """
    Turn one key sequence into an input event.
    Mouse positions are converted from 1-based terminal columns to image cells.
    """
    if not seq:
        return None
    m = MOUSE_RE.fullmatch(seq)
    if not m:
        return Key(seq)

    btn, mx, my = int(m.group(1)), int(m.group(2)), int(m.group(3))
    if m.group(4) == "m":
        button = ButtonState.RELEASED
    elif btn in (0, 32):
        # Left press, or motion with the left button held
        button = ButtonState.PRESSED
    else:
        button = ButtonState.MOVED
    return MouseAt(my - 1, (mx - 1) // CELL_WIDTH, button)


class TerminalInput(InputSource):
    def __init__(self, stream=None, timeout: float = 0.02):
        self.stream = stream or sys.stdin
        self.timeout = timeout
        self._queue: Deque[str] = deque()

    def _read(self) -> str:
        fd = self.stream.fileno()
        if not select.select([fd], [], [], self.timeout)[0]:
            return ""
        data = os.read(fd, 1)
        if data == b"\x1b":
            # Pull the rest of an escape sequence if it is already waiting
            while select.select([fd], [], [], 0)[0]:
                chunk = os.read(fd, 64)
                if not chunk:
                    break
                data += chunk
        return data.decode("utf-8", errors="ignore")

    def poll_event(self) -> Optional[InputEvent]:
        if not self._queue:
            self._queue.extend(split_keys(self._read()))
        while self._queue:
            event = decode_key(self._queue.popleft())
            if event is not None:
                return event
        return None


class TerminalDisplay(Display):
    """
    Mirrors the image, overlay and cursor so any cell can be repainted
    from redraw instructions alone.
    """

    def __init__(
        self,
        height: int,
        width: int,
        renderer: Optional[Renderer] = None,
        columns: Optional[int] = None,
    ):
        self.height = height
        self.width = width
        rows, _ = required_terminal_size(height, width)
        if columns is None:
            columns = full_layout_columns(width)
        self.renderer = renderer or Renderer(columns // CELL_WIDTH, rows, CELL_WIDTH)
        # Help is drawn only when the whole panel fits
        self.show_help = self.renderer.cols * CELL_WIDTH >= full_layout_columns(width)

        self.colors = np.zeros((height, width), dtype=np.int8)
        self.overlay = np.zeros((height, width), dtype=bool)
        self.cursor: Tuple[int, int] = (0, 0)
        self.cursor_visible = True
        self.mode = EditorMode.SELECTION

        self._draw_frame()

    def _draw_frame(self):
        # Border right of and below the image
        for y in range(self.height + 1):
            self.renderer.set_cell(self.width, y, "  ", None, BORDER_RGB)
        for x in range(self.width):
            self.renderer.set_cell(x, self.height, "  ", None, BORDER_RGB)

        # Palette strip with its digit keys
        y = self.height + 3
        for i, color in enumerate(PALETTE):
            self.renderer.set_cell(i, y, "  ", None, COLOR_RGB[color])
            self.renderer.draw_text(i, y + 1, f" {DIGIT_KEYS[i]}", (200, 200, 200))

    def _paint(self, row: int, col: int):
        if not (0 <= row < self.height and 0 <= col < self.width):
            return
        if self.cursor_visible and (row, col) == self.cursor:
            self.renderer.set_cell(col, row, "##", CURSOR_FG, CURSOR_BG)
        elif self.overlay[row, col]:
            self.renderer.set_cell(col, row, "##", OVERLAY_FG, OVERLAY_BG)
        else:
            rgb = COLOR_RGB[from_display_index(int(self.colors[row, col]))]
            self.renderer.set_cell(col, row, "  ", None, rgb)

    def _paint_region(self, bounds):
        (r0, r1), (c0, c1) = bounds
        for row in range(r0, r1 + 1):
            for col in range(c0, c1 + 1):
                self._paint(row, col)

    def _draw_status(self, mode: EditorMode, color):
        y = self.height + 7
        self.renderer.draw_text(0, y, f"MODE: {mode.value}".ljust(24))
        self.renderer.draw_text(0, y + 1, f"CURRENT COLOR: {color}".ljust(24))

        if not self.show_help:
            return
        x = self.width + 2
        for i in range(5):
            lines = HELP_TEXT[mode]
            text = lines[i] if i < len(lines) else ""
            self.renderer.draw_text(x, 1 + i, text.ljust(HELP_CELLS * CELL_WIDTH), (220, 220, 220))

    def redraw(self, instruction: Redraw):
        if isinstance(instruction, RedrawCell):
            self.colors[instruction.row, instruction.col] = display_index(instruction.color)
            self._paint(instruction.row, instruction.col)
        elif isinstance(instruction, DrawOverlay):
            (r0, r1), (c0, c1) = instruction.bounds
            self.overlay[r0 : r1 + 1, c0 : c1 + 1] = True
            self._paint_region(instruction.bounds)
        elif isinstance(instruction, ClearOverlay):
            (r0, r1), (c0, c1) = instruction.bounds
            self.overlay[r0 : r1 + 1, c0 : c1 + 1] = False
            self._paint_region(instruction.bounds)
        elif isinstance(instruction, DrawCursor):
            old = self.cursor
            self.cursor = (instruction.row, instruction.col)
            self.cursor_visible = True
            self._paint(*old)
            self._paint(*self.cursor)
        elif isinstance(instruction, HideCursor):
            self.cursor_visible = False
            self._paint(*self.cursor)
        elif isinstance(instruction, SetStatusLine):
            self.mode = instruction.mode
            self._draw_status(instruction.mode, instruction.color)

    def flush(self):
        self.renderer.flush()
