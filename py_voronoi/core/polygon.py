"""Polygon measurements: centroid, area, perimeter and containment."""

import math
from typing import Sequence

from .vector import EPS, Point2


def polygon_centroid(polygon: Sequence) -> Point2:
    """Compute the centroid of a simple polygon.

    Uses the shoelace sums with a ``3 * sum(cross)`` denominator, which is
    six times the signed area and matches the ``(x1 + x2) * cross`` sums.
    Nearly collinear polygons fall back to the mean of their vertices.

    Args:
        polygon: Closed loop of points, either winding

    Returns:
        Centroid, or (0, 0) for fewer than three vertices
    """
    if not polygon or len(polygon) < 3:
        return Point2(0.0, 0.0)

    area = 0.0
    cx = 0.0
    cy = 0.0
    n = len(polygon)
    for i in range(n):
        p1 = polygon[i]
        p2 = polygon[(i + 1) % n]
        cross = p1.x * p2.y - p2.x * p1.y
        area += cross
        cx += (p1.x + p2.x) * cross
        cy += (p1.y + p2.y) * cross

    six_area = 3 * area
    if abs(six_area) < EPS:
        # Degenerate polygon: average the vertices instead of dividing by ~0
        return Point2(
            sum(p.x for p in polygon) / n,
            sum(p.y for p in polygon) / n,
        )

    return Point2(cx / six_area, cy / six_area)


def polygon_area(polygon: Sequence) -> float:
    """Unsigned shoelace area."""
    if not polygon or len(polygon) < 3:
        return 0.0
    n = len(polygon)
    total = 0.0
    for i in range(n):
        p1 = polygon[i]
        p2 = polygon[(i + 1) % n]
        total += p1.x * p2.y - p2.x * p1.y
    return abs(total) * 0.5


def polygon_perimeter(polygon: Sequence) -> float:
    if not polygon or len(polygon) < 2:
        return 0.0
    n = len(polygon)
    return sum(
        math.hypot(polygon[(i + 1) % n].x - polygon[i].x,
                   polygon[(i + 1) % n].y - polygon[i].y)
        for i in range(n)
    )


def point_in_polygon(p, polygon: Sequence, tolerance: float = 1e-9) -> bool:
    """
    Test whether ``p`` lies in a convex polygon's closure.

    Works for either winding: the point is inside when it is on the same
    side of every edge, allowing ``tolerance`` distance across an edge.
    """
    if not polygon or len(polygon) < 3:
        return False

    n = len(polygon)
    has_pos = False
    has_neg = False
    for i in range(n):
        a = polygon[i]
        b = polygon[(i + 1) % n]
        ex, ey = b.x - a.x, b.y - a.y
        length = math.hypot(ex, ey)
        if length == 0.0:
            continue
        # Signed distance of p from the edge line
        d = (ex * (p.y - a.y) - ey * (p.x - a.x)) / length
        if d > tolerance:
            has_pos = True
        elif d < -tolerance:
            has_neg = True
        if has_pos and has_neg:
            return False
    return True
