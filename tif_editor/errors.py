"""
Error types for the TIF Editor.
"""

from typing import Optional


class EditorError(Exception):
    """Base class for all editor errors."""


class OutOfBounds(EditorError):
    def __init__(self, row: int, col: int):
        super().__init__(f"({row}, {col}) is outside the image")
        self.row = row
        self.col = col


class InvalidDimensions(EditorError):
    def __init__(self, height: int, width: int):
        super().__init__(
            f"invalid image size {height}x{width} (height >= 1, 1 <= width <= 255)"
        )
        self.height = height
        self.width = width


class TerminalTooSmall(EditorError):
    pass


class CodecError(EditorError):
    """Raised when a TIF buffer cannot be decoded."""

    def __init__(self, message: str, offset: Optional[int] = None):
        if offset is not None:
            message = f"{message} (at byte {offset})"
        super().__init__(message)
        self.offset = offset


class BadMagic(CodecError):
    def __init__(self, found: bytes):
        super().__init__(f"not a TIF image: bad header {found!r}", 0)
        self.found = found


class InvalidToken(CodecError):
    def __init__(self, token: int, offset: int):
        super().__init__(f"unknown color token 0x{token:02X}", offset)
        self.token = token


class ZeroRunLength(CodecError):
    def __init__(self, offset: int):
        super().__init__("run with a count of zero", offset)


class TruncatedInput(CodecError):
    def __init__(self, offset: int):
        super().__init__("color token without a run count", offset)


class RowOverflow(CodecError):
    def __init__(self, cells: int, width: int):
        super().__init__(f"{cells} pixels do not fill whole rows of width {width}")
        self.cells = cells
        self.width = width


class HeightMismatch(CodecError):
    def __init__(self, expected: int, actual: int):
        super().__init__(f"expected {expected} rows, image holds {actual}")
        self.expected = expected
        self.actual = actual


class NoSelection(EditorError):
    def __init__(self):
        super().__init__("no area is selected")
