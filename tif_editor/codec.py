"""
TIF image codec.

File layout, single-byte fields only:

    MAGIC   5 bytes  2E 54 49 46 20  (".TIF ")
    WIDTH   1 byte
    RUNS    repeated (TOKEN, COUNT) byte pairs, COUNT in 1..254

The height is not stored. It is recovered from the run total, or checked
against a height supplied by the caller.
"""

import os
from typing import Iterator, List, Optional, Tuple

from .errors import (
    BadMagic,
    HeightMismatch,
    InvalidDimensions,
    InvalidToken,
    RowOverflow,
    TruncatedInput,
    ZeroRunLength,
)
from .palette import Color, from_wire_token, wire_token
from .raster import Raster

MAGIC = bytes([0x2E, 0x54, 0x49, 0x46, 0x20])
HEADER_SIZE = len(MAGIC) + 1
MAX_RUN = 254


def iter_runs(raster: Raster) -> Iterator[Tuple[int, int]]:
    """Yields the (token, count) pairs for the raster in row-major order."""
    current: Optional[Color] = None
    length = 0
    for color in raster.cells():
        if color == current and length < MAX_RUN:
            length += 1
            continue
        if current is not None:
            yield wire_token(current), length
        current, length = color, 1
    if current is not None and length > 0:
        yield wire_token(current), length


def encode(raster: Raster) -> bytes:
    buffer = bytearray(MAGIC)
    buffer.append(raster.width)
    for token, count in iter_runs(raster):
        buffer.append(token)
        buffer.append(count)
    return bytes(buffer)


def decode(data: bytes, height: Optional[int] = None) -> Raster:
    """
    Decode a TIF buffer into a new Raster.
    If height is given, the image must hold exactly that many rows.
    """
    if len(data) < HEADER_SIZE or data[: len(MAGIC)] != MAGIC:
        raise BadMagic(bytes(data[: len(MAGIC)]))
    width = data[len(MAGIC)]

    pixels: List[Color] = []
    offset = HEADER_SIZE
    while offset < len(data):
        if offset + 1 >= len(data):
            raise TruncatedInput(offset)
        token, count = data[offset], data[offset + 1]
        color = from_wire_token(token)
        if color is None:
            raise InvalidToken(token, offset)
        if count == 0:
            raise ZeroRunLength(offset + 1)
        pixels.extend([color] * count)
        offset += 2

    if width == 0:
        if pixels:
            raise RowOverflow(len(pixels), width)
        raise InvalidDimensions(height or 0, width)
    if len(pixels) % width:
        raise RowOverflow(len(pixels), width)

    rows = len(pixels) // width
    if height is not None and height != rows:
        raise HeightMismatch(height, rows)

    raster = Raster(rows, width)
    for idx, color in enumerate(pixels):
        raster.set(idx // width, idx % width, color)
    return raster


class DocumentStore:
    """Loads, creates and saves TIF documents on disk."""

    def load(self, path: str, height: Optional[int] = None) -> Raster:
        with open(path, "rb") as f:
            data = f.read()
        return decode(data, height)

    def create(self, height: int, width: int) -> Raster:
        return Raster(height, width)

    def save(self, path: str, raster: Raster):
        # Ensure directory exists
        os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
        with open(path, "wb") as f:
            f.write(encode(raster))
