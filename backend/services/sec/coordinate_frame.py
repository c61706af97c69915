"""Pixel-to-inch conversion into the canonical target frame.

The canonical frame is physical inches with +X to the right and +Y up.
Canvas and photo pixels grow Y downward, so pixel inputs must declare their
axis orientation; it is never assumed.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Literal, Tuple

import numpy as np

from services.sec.errors import EmptySample, InvalidScale


YAxis = Literal["down", "up"]
Y_AXES: Tuple[str, ...] = ("down", "up")


@dataclass(frozen=True)
class Point2D:
    x: float
    y: float


SampleSet = Tuple[Point2D, ...]


def _check_frame(px_per_inch: float, y_axis: str) -> None:
    if px_per_inch <= 0:
        raise InvalidScale(f"pxPerInch must be > 0, got {px_per_inch}")
    if y_axis not in Y_AXES:
        raise ValueError(f"y_axis must be one of {Y_AXES}, got {y_axis!r}")


def to_inches(point_px: Point2D, origin_px: Point2D, px_per_inch: float, y_axis: YAxis) -> Point2D:
    """Map one pixel point into inches relative to ``origin_px``."""
    _check_frame(px_per_inch, y_axis)
    x = (point_px.x - origin_px.x) / px_per_inch
    if y_axis == "down":
        # Flip exactly once: pixel rows grow down, inches grow up.
        y = (origin_px.y - point_px.y) / px_per_inch
    else:
        y = (point_px.y - origin_px.y) / px_per_inch
    return Point2D(float(x), float(y))


def to_inches_many(
    points_px: Iterable[Point2D],
    origin_px: Point2D,
    px_per_inch: float,
    y_axis: YAxis,
) -> SampleSet:
    """Vectorised ``to_inches`` over a sample set; order is preserved."""
    _check_frame(px_per_inch, y_axis)
    pts = list(points_px)
    if not pts:
        return ()

    arr = np.array([[p.x, p.y] for p in pts], dtype=float)
    xs = (arr[:, 0] - origin_px.x) / px_per_inch
    if y_axis == "down":
        ys = (origin_px.y - arr[:, 1]) / px_per_inch
    else:
        ys = (arr[:, 1] - origin_px.y) / px_per_inch
    return tuple(Point2D(float(x), float(y)) for x, y in zip(xs, ys))


def centroid(points: Iterable[Point2D]) -> Point2D:
    """Arithmetic mean of the points (the POIB)."""
    pts = list(points)
    if not pts:
        raise EmptySample("centroid requires at least one point")

    # fsum is exactly rounded, so the mean is independent of sample order.
    n = len(pts)
    return Point2D(
        math.fsum(p.x for p in pts) / n,
        math.fsum(p.y for p in pts) / n,
    )
