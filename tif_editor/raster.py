"""
Pixel storage for the TIF Editor.
A fixed-size, row-major grid of palette colors.
"""

from typing import Iterator, List, Optional, Tuple

from .errors import InvalidDimensions, OutOfBounds
from .palette import Color

MAX_WIDTH = 255


class Raster:
    def __init__(self, height: int, width: int):
        if height < 1 or width < 1 or width > MAX_WIDTH:
            raise InvalidDimensions(height, width)
        self._height = height
        self._width = width
        self._pixels: List[List[Color]] = [
            [Color.BLACK for _ in range(width)] for _ in range(height)
        ]

    @property
    def height(self) -> int:
        return self._height

    @property
    def width(self) -> int:
        return self._width

    @property
    def dims(self) -> Tuple[int, int]:
        return self._height, self._width

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self._height and 0 <= col < self._width

    def get(self, row: int, col: int) -> Optional[Color]:
        if not self.in_bounds(row, col):
            return None
        return self._pixels[row][col]

    def set(self, row: int, col: int, color: Color):
        if not self.in_bounds(row, col):
            raise OutOfBounds(row, col)
        self._pixels[row][col] = color

    def rows(self) -> Iterator[Tuple[Color, ...]]:
        for row in self._pixels:
            yield tuple(row)

    def cells(self) -> Iterator[Color]:
        """Yields every pixel in row-major order."""
        for row in self._pixels:
            yield from row

    def copy(self) -> "Raster":
        dup = Raster(self._height, self._width)
        dup._pixels = [list(row) for row in self._pixels]
        return dup

    def __eq__(self, other) -> bool:
        if not isinstance(other, Raster):
            return NotImplemented
        return self.dims == other.dims and self._pixels == other._pixels

    def __repr__(self) -> str:
        return f"Raster(height={self._height}, width={self._width})"
