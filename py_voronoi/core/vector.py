"""2D point and vector helpers shared by the geometry modules."""

from typing import NamedTuple

# Tolerance for parallel edges and near-zero polygon areas
EPS = 1e-7


class Point2(NamedTuple):
    """Immutable 2D point / vector."""
    x: float
    y: float


def dot(a, b) -> float:
    return a.x * b.x + a.y * b.y


def sub(a, b) -> Point2:
    return Point2(a.x - b.x, a.y - b.y)


def add(a, b) -> Point2:
    return Point2(a.x + b.x, a.y + b.y)


def mul(a, k: float) -> Point2:
    return Point2(a.x * k, a.y * k)


def dist_sq(a, b) -> float:
    return (a.x - b.x) ** 2 + (a.y - b.y) ** 2


def midpoint(a, b) -> Point2:
    return mul(add(a, b), 0.5)
