"""
Rectangle selection helpers for the TIF Editor.
"""

from typing import Callable, Optional, Tuple

from .models import Bounds, Point


def normalize(anchor: Point, corner: Point) -> Bounds:
    """Inclusive bounds spanned by two points, in either order."""
    return Bounds(
        (min(anchor[0], corner[0]), max(anchor[0], corner[0])),
        (min(anchor[1], corner[1]), max(anchor[1], corner[1])),
    )


def clip_to_raster(bounds: Bounds, dims: Tuple[int, int]) -> Optional[Bounds]:
    """Intersect bounds with a (height, width) raster. None if nothing is left."""
    height, width = dims
    (r0, r1), (c0, c1) = bounds
    r0, r1 = max(r0, 0), min(r1, height - 1)
    c0, c1 = max(c0, 0), min(c1, width - 1)
    if r0 > r1 or c0 > c1:
        return None
    return Bounds((r0, r1), (c0, c1))


def contains(outer: Bounds, inner: Bounds) -> bool:
    return (
        outer.row_min <= inner.row_min
        and inner.row_max <= outer.row_max
        and outer.col_min <= inner.col_min
        and inner.col_max <= outer.col_max
    )


def for_each_cell(bounds: Bounds, f: Callable[[int, int], None]):
    (r0, r1), (c0, c1) = bounds
    for row in range(r0, r1 + 1):
        for col in range(c0, c1 + 1):
            f(row, col)
