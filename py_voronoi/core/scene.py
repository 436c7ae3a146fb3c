"""
Interactive site collection with demand-gated recomputation.

``VoronoiScene`` is what a front end drives: it owns the sites (with the
pointer site at index 0), the bounding box and the last diagram, and only
rebuilds the diagram when something changed since the previous build.
"""

from typing import List, Optional, Union

import structlog

from ..config import settings
from ..utils.random import get_rng, make_rng
from .relaxation import relax_sites
from .vector import Point2, dist_sq
from .voronoi import BoundingBox, Cell, Diagram, Site, compute_voronoi

logger = structlog.get_logger()


class VoronoiScene:
    """Mutable site layout plus its cached diagram. Not thread-safe."""

    def __init__(self, width: float, height: float):
        """
        Create an empty scene.

        Args:
            width: Canvas width
            height: Canvas height
        """
        self.box = BoundingBox.from_size(width, height)
        self.pointer = Site(x=width / 2, y=height / 2, is_pointer=True)
        self.sites: List[Site] = [self.pointer]
        self.diagram: Optional[Diagram] = None
        self.needs_recompute = True
        self.dragged_index = -1

    @property
    def is_dragging(self) -> bool:
        return self.dragged_index != -1

    def mark_dirty(self) -> None:
        self.needs_recompute = True

    def compute(self) -> Diagram:
        """Rebuild the diagram if anything changed since the last build."""
        if self.needs_recompute or self.diagram is None:
            self.diagram = compute_voronoi(self.sites, self.box)
            self.needs_recompute = False
        return self.diagram

    def resize(self, width: float, height: float) -> None:
        self.box = BoundingBox.from_size(width, height)
        self.mark_dirty()
        logger.info("Scene resized", width=width, height=height)

    def add_site(self, x: float, y: float) -> Site:
        site = Site(x=x, y=y)
        self.sites.append(site)
        self.mark_dirty()
        return site

    def remove_site(self, index: int) -> bool:
        """Remove a site by index. The pointer site cannot be removed."""
        if index <= 0 or index >= len(self.sites):
            return False
        del self.sites[index]
        if self.dragged_index == index:
            self.dragged_index = -1
        elif self.dragged_index > index:
            self.dragged_index -= 1
        self.mark_dirty()
        return True

    def clear_sites(self) -> None:
        """Drop every site except the pointer."""
        self.sites = [self.pointer]
        self.dragged_index = -1
        self.mark_dirty()

    def random_sites(self, n: Optional[int] = None, clear: bool = True,
                     seed: Optional[Union[int, str]] = None) -> None:
        """
        Scatter ``n`` sites uniformly inside the box, away from its edges.

        Args:
            n: Number of sites to add (defaults to settings.default_site_count)
            clear: Replace the existing sites instead of appending
            seed: Optional seed; the shared generator is used without one
        """
        if n is None:
            n = settings.default_site_count
        if n < 0:
            raise ValueError(f"Site count must be non-negative, got {n}")

        rng = make_rng(seed) if seed is not None else get_rng()
        if clear:
            self.sites = [self.pointer]
            self.dragged_index = -1

        margin = settings.random_site_margin
        xs = self.box.left + margin + rng.random(n) * (self.box.width - 2 * margin)
        ys = self.box.top + margin + rng.random(n) * (self.box.height - 2 * margin)
        for x, y in zip(xs, ys):
            self.sites.append(Site(x=float(x), y=float(y)))

        self.mark_dirty()
        logger.info("Random sites placed", count=n, total=len(self.sites), seed=seed)

    def find_site_at(self, pos, max_dist: Optional[float] = None) -> int:
        """
        Index of the closest non-pointer site within ``max_dist`` of ``pos``.

        Returns:
            Site index, or -1 if none is close enough
        """
        if max_dist is None:
            max_dist = settings.pick_radius
        closest = -1
        min_d2 = max_dist ** 2
        for i in range(1, len(self.sites)):
            d2 = dist_sq(pos, self.sites[i])
            if d2 < min_d2:
                min_d2 = d2
                closest = i
        return closest

    def move_pointer(self, x: float, y: float) -> None:
        """Track the cursor; drags the grabbed site along with it."""
        self.pointer.x = x
        self.pointer.y = y
        if self.is_dragging:
            site = self.sites[self.dragged_index]
            site.x = x
            site.y = y
        self.mark_dirty()

    def press(self, x: float, y: float) -> int:
        """
        Handle a primary press: grab the site under the cursor or add one.

        Returns:
            Index of the grabbed or newly added site
        """
        index = self.find_site_at(Point2(x, y))
        if index != -1:
            self.dragged_index = index
        else:
            self.add_site(x, y)
            index = len(self.sites) - 1
        self.mark_dirty()
        return index

    def begin_drag(self, index: int) -> bool:
        if index <= 0 or index >= len(self.sites):
            return False
        self.dragged_index = index
        return True

    def drag_to(self, x: float, y: float) -> None:
        self.move_pointer(x, y)

    def end_drag(self) -> None:
        self.dragged_index = -1
        self.mark_dirty()

    def relax(self) -> bool:
        """One Lloyd step over the current layout.

        Returns:
            True if any site moved
        """
        diagram = self.compute()
        moved = relax_sites(self.sites, diagram)
        if moved:
            self.mark_dirty()
        return moved

    def pointer_cell(self) -> Optional[Cell]:
        """Cell currently owned by the pointer site."""
        diagram = self.compute()
        if self.pointer.voronoi_id is None:
            return None
        return diagram.cells.get(self.pointer.voronoi_id)

    def hovered_index(self) -> int:
        """Site to highlight: the dragged one, else the one under the pointer."""
        if self.is_dragging:
            return self.dragged_index
        return self.find_site_at(self.pointer)
