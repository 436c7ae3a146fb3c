"""
Convex polygon clipping against a single half-plane.

The half-plane is {p : dot(p - m, n) <= 0} for a normal ``n`` and a point
``m`` on the boundary line. Points exactly on the line count as inside.
"""

from typing import List, Optional, Sequence, Tuple

from .vector import EPS, Point2, add, dot, mul, sub


def line_side(p, n, m) -> float:
    """Signed side of ``p`` relative to the line through ``m`` with normal ``n``."""
    return dot(sub(p, m), n)


def seg_line_intersection(a, b, n, m) -> Optional[Tuple[Point2, float]]:
    """
    Intersect segment ``a``-``b`` with the clip line.

    Args:
        a, b: Segment endpoints
        n: Line normal
        m: Point on the line

    Returns:
        (point, t) with ``point = a + t * (b - a)``, or None when the
        segment is parallel to the line
    """
    ab = sub(b, a)
    denom = dot(ab, n)
    if abs(denom) < EPS:
        return None
    t = dot(sub(m, a), n) / denom
    return add(a, mul(ab, t)), t


def clip_polygon_with_half_plane(polygon: Sequence, n, m) -> List[Point2]:
    """
    Clip a convex polygon, keeping the part inside the half-plane.

    Walks each edge (curr, next) once and emits:
    - both inside: next
    - leaving: the intersection point
    - entering: the intersection point, then next
    - both outside: nothing

    A new vertex list is always returned; the input is left untouched.
    """
    if not polygon:
        return []

    result = []
    count = len(polygon)
    for i in range(count):
        curr = polygon[i]
        nxt = polygon[(i + 1) % count]
        curr_in = line_side(curr, n, m) <= 0
        next_in = line_side(nxt, n, m) <= 0

        if curr_in and next_in:
            result.append(nxt)
        elif curr_in:
            hit = seg_line_intersection(curr, nxt, n, m)
            if hit is not None:
                result.append(hit[0])
        elif next_in:
            hit = seg_line_intersection(curr, nxt, n, m)
            if hit is not None:
                result.append(hit[0])
            result.append(nxt)

    return result
