"""Bounded Voronoi diagram by repeated half-plane clipping."""

import math
from dataclasses import dataclass, field
from typing import Dict, List, NamedTuple, Optional, Sequence

import structlog

from .clipping import clip_polygon_with_half_plane
from .vector import Point2, midpoint, sub

logger = structlog.get_logger()

# Edge keys round coordinates to 1/KEY_PRECISION units
KEY_PRECISION = 1000


class BoundingBox(NamedTuple):
    """Rectangle every cell is clipped into (screen coordinates, y down)."""
    left: float
    right: float
    top: float
    bottom: float

    @classmethod
    def from_size(cls, width: float, height: float) -> "BoundingBox":
        return cls(left=0.0, right=float(width), top=0.0, bottom=float(height))

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @property
    def is_degenerate(self) -> bool:
        """True when the box has zero or negative area."""
        return not (self.left < self.right and self.top < self.bottom)

    def corners(self) -> List[Point2]:
        """Corners in fixed order: top-left, top-right, bottom-right, bottom-left."""
        return [
            Point2(self.left, self.top),
            Point2(self.right, self.top),
            Point2(self.right, self.bottom),
            Point2(self.left, self.bottom),
        ]


@dataclass
class Site:
    """A generator point owned by the caller's site collection.

    Positions are overwritten in place by relaxation and dragging.
    ``voronoi_id`` is the site's index at the last diagram build.
    """
    x: float
    y: float
    voronoi_id: Optional[int] = None
    is_pointer: bool = False  # Tracks the cursor; never relaxed

    def as_point(self) -> Point2:
        return Point2(self.x, self.y)


@dataclass
class Cell:
    """Clipped region owned by one site."""
    polygon: List[Point2]
    site: Site

    @property
    def is_empty(self) -> bool:
        return len(self.polygon) == 0


class Edge(NamedTuple):
    """Boundary segment, reported once even when shared by two cells."""
    a: Point2
    b: Point2


@dataclass
class Diagram:
    """Result of a full build: cells keyed by site index plus unique edges."""
    cells: Dict[int, Cell] = field(default_factory=dict)
    edges: List[Edge] = field(default_factory=list)


def sync_ids(sites: Sequence[Site]) -> None:
    """Assign each site its current index."""
    for i, site in enumerate(sites):
        site.voronoi_id = i


def _round_half_up(value: float) -> int:
    return math.floor(value * KEY_PRECISION + 0.5)


def point_key(p) -> str:
    return f"{_round_half_up(p.x)}_{_round_half_up(p.y)}"


def edge_key(a, b) -> str:
    """
    Orientation-independent key for a segment.

    Both endpoints are rounded to three decimals so that the copies of a
    shared edge computed by the two neighbouring cells collapse together.
    """
    ka = point_key(a)
    kb = point_key(b)
    return f"{ka}|{kb}" if ka < kb else f"{kb}|{ka}"


def build_cell_polygon(index: int, sites: Sequence[Site], box: BoundingBox) -> List[Point2]:
    """
    Carve the cell of ``sites[index]`` out of the bounding box.

    Every other site contributes the half-plane on this site's side of their
    perpendicular bisector. Once the polygon is empty it stays empty.
    """
    s = sites[index].as_point()
    polygon = box.corners()
    for j, other in enumerate(sites):
        if j == index:
            continue
        t = other.as_point()
        polygon = clip_polygon_with_half_plane(polygon, sub(t, s), midpoint(s, t))
        if not polygon:
            break
    return polygon


def compute_voronoi(sites: Sequence[Site], box: BoundingBox) -> Diagram:
    """
    Build the bounded Voronoi diagram for ``sites``.

    Brute force: O(n^2) clips per build, which is fine for the tens to low
    hundreds of sites this is used with. Each site's ``voronoi_id`` is set
    to its index for this build.

    Args:
        sites: Ordered site collection; indices key the resulting cells
        box: Bounding rectangle

    Returns:
        Diagram with one cell per site and deduplicated edges
    """
    diagram = Diagram()
    sync_ids(sites)

    if len(sites) == 0:
        logger.warning("No sites to build a diagram from")
        return diagram

    if box.is_degenerate:
        logger.warning("Bounding box has no area, all cells are empty",
                       left=box.left, right=box.right, top=box.top, bottom=box.bottom)
        for i, site in enumerate(sites):
            diagram.cells[i] = Cell(polygon=[], site=site)
        return diagram

    edge_map: Dict[str, Edge] = {}
    empty_cells = 0

    for i, site in enumerate(sites):
        polygon = build_cell_polygon(i, sites, box)
        diagram.cells[i] = Cell(polygon=polygon, site=site)
        if not polygon:
            empty_cells += 1
            continue

        count = len(polygon)
        for k in range(count):
            a = polygon[k]
            b = polygon[(k + 1) % count]
            if point_key(a) == point_key(b):
                # Collapsed to a point after rounding
                continue
            key = edge_key(a, b)
            if key not in edge_map:
                edge_map[key] = Edge(a, b)

    diagram.edges = list(edge_map.values())

    logger.debug("Voronoi diagram computed",
                 sites=len(sites), edges=len(diagram.edges), empty_cells=empty_cells)
    return diagram
