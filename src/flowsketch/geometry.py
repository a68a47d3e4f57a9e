from __future__ import annotations

import math
from collections.abc import Iterable

from .types import Point, Rect

# ============================================================================
# Geometry primitives -- rectangle and point math shared by layout and paths
# ============================================================================


def center_to_top_left(cx: float, cy: float, width: float, height: float) -> Point:
    """Convert center-based coordinates to top-left origin."""
    return Point(x=cx - width / 2, y=cy - height / 2)


def rects_overlap(a: Rect, b: Rect) -> bool:
    """True when the rectangles intersect. Shared edges count as overlap."""
    return not (
        a.right < b.left
        or a.left > b.right
        or a.bottom < b.top
        or a.top > b.bottom
    )


def distance(a: Point, b: Point) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


def bounding_box(rects: Iterable[Rect], margin: float = 0) -> Rect | None:
    """Union of ``rects`` grown by ``margin`` on every side, or None if empty."""
    items = list(rects)
    if not items:
        return None
    min_x = min(r.left for r in items)
    min_y = min(r.top for r in items)
    max_x = max(r.right for r in items)
    max_y = max(r.bottom for r in items)
    return Rect(
        x=min_x - margin,
        y=min_y - margin,
        width=(max_x - min_x) + 2 * margin,
        height=(max_y - min_y) + 2 * margin,
    )


def snap_to_grid(value: float, grid_size: float) -> float:
    if grid_size <= 0:
        return value
    return round(value / grid_size) * grid_size


def cubic_bezier_point(
    p0: Point, p1: Point, p2: Point, p3: Point, t: float = 0.5
) -> Point:
    """Evaluate a cubic bezier at ``t`` (clamped to [0, 1])."""
    t = min(max(t, 0.0), 1.0)
    mt = 1 - t
    a = mt * mt * mt
    b = 3 * mt * mt * t
    c = 3 * mt * t * t
    d = t * t * t
    return Point(
        x=a * p0.x + b * p1.x + c * p2.x + d * p3.x,
        y=a * p0.y + b * p1.y + c * p2.y + d * p3.y,
    )


def polyline_midpoint(points: list[Point]) -> Point | None:
    """Point halfway along the polyline's total length."""
    if not points:
        return None
    if len(points) == 1:
        return points[0]

    lengths = [distance(points[i], points[i + 1]) for i in range(len(points) - 1)]
    total = sum(lengths)
    if total == 0:
        return points[0]

    remaining = total / 2
    for i, seg in enumerate(lengths):
        if remaining <= seg and seg > 0:
            ratio = remaining / seg
            a, b = points[i], points[i + 1]
            return Point(x=a.x + (b.x - a.x) * ratio, y=a.y + (b.y - a.y) * ratio)
        remaining -= seg
    return points[-1]
