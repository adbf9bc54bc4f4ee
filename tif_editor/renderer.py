"""
Terminal rendering engine for the TIF Editor.
Double-buffered cell grid, diffed against the last frame and written as
truecolor ANSI escape codes. Uses numpy for the frame buffers.
"""

import sys
from typing import Optional, TextIO, Tuple

import numpy as np

RGB = Tuple[int, int, int]
NO_COLOR = (-1, -1, -1)


class Renderer:
    def __init__(self, cols: int, rows: int, cell_width: int = 2):
        # cols/rows count cells; each cell spans cell_width terminal columns
        self.cols = cols
        self.rows = rows
        self.cell_width = cell_width

        shape = (rows, cols)
        self.screen_buffer = np.full(shape, " ", dtype=object)
        self.fg_buffer = np.full((*shape, 3), -1, dtype=np.int16)
        self.bg_buffer = np.full((*shape, 3), -1, dtype=np.int16)

        self._prev_screen = np.full(shape, None, dtype=object)
        self._prev_fg = np.full((*shape, 3), -1, dtype=np.int16)
        self._prev_bg = np.full((*shape, 3), -1, dtype=np.int16)

    def set_cell(
        self,
        x: int,
        y: int,
        char: str,
        fg: Optional[RGB] = NO_COLOR,
        bg: Optional[RGB] = NO_COLOR,
    ):
        if 0 <= y < self.rows and 0 <= x < self.cols:
            self.screen_buffer[y, x] = char
            self.fg_buffer[y, x] = fg if fg is not None else NO_COLOR
            self.bg_buffer[y, x] = bg if bg is not None else NO_COLOR

    def draw_text(self, x: int, y: int, text: str, fg=(255, 255, 255), bg=NO_COLOR):
        if len(text) % self.cell_width:
            text += " " * (self.cell_width - len(text) % self.cell_width)
        for i in range(0, len(text), self.cell_width):
            self.set_cell(x + i // self.cell_width, y, text[i : i + self.cell_width], fg, bg)

    def _changed(self) -> np.ndarray:
        chars = self.screen_buffer != self._prev_screen
        fg = np.any(self.fg_buffer != self._prev_fg, axis=2)
        bg = np.any(self.bg_buffer != self._prev_bg, axis=2)
        return chars | fg | bg

    def flush(self, out: Optional[TextIO] = None) -> str:
        """Write the cells that changed since the last flush. Returns the output."""
        out = out or sys.stdout
        parts = []
        last_fg = last_bg = None
        next_x = next_y = -1

        for y, x in zip(*np.nonzero(self._changed())):
            y, x = int(y), int(x)
            if (y, x) != (next_y, next_x):
                parts.append(f"\033[{y + 1};{x * self.cell_width + 1}H")

            fg = tuple(int(c) for c in self.fg_buffer[y, x])
            bg = tuple(int(c) for c in self.bg_buffer[y, x])
            if fg != last_fg:
                parts.append("\033[39m" if fg[0] < 0 else f"\033[38;2;{fg[0]};{fg[1]};{fg[2]}m")
                last_fg = fg
            if bg != last_bg:
                parts.append("\033[49m" if bg[0] < 0 else f"\033[48;2;{bg[0]};{bg[1]};{bg[2]}m")
                last_bg = bg

            parts.append(str(self.screen_buffer[y, x]).ljust(self.cell_width)[: self.cell_width])
            next_y, next_x = y, x + 1

        # Sync buffers
        self._prev_screen[:] = self.screen_buffer
        self._prev_fg[:] = self.fg_buffer
        self._prev_bg[:] = self.bg_buffer

        if not parts:
            return ""
        parts.append("\033[0m")
        output = "".join(parts)
        out.write(output)
        out.flush()
        return output
