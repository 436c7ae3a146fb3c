"""Lloyd's relaxation for a site collection."""

import math
from typing import MutableSequence, Sequence

import numpy as np
import structlog

from .polygon import polygon_centroid
from .voronoi import BoundingBox, Diagram, Site

logger = structlog.get_logger()


def relax_sites(sites: MutableSequence[Site], diagram: Diagram) -> bool:
    """
    Apply one Lloyd step: move every site to the centroid of its cell.

    Sites are updated in place. The pointer site is never moved, and cells
    with fewer than three vertices are left alone. Repeated calls (each
    followed by a rebuild) converge toward a centroidal tessellation.

    Args:
        sites: Site collection the diagram was built from
        diagram: Diagram built from ``sites``

    Returns:
        True if any site position changed, meaning the diagram is stale
    """
    moved = 0
    for i, site in enumerate(sites):
        if site.is_pointer:
            continue

        cell = diagram.cells.get(i)
        if cell is None or len(cell.polygon) < 3:
            continue
        if cell.site is not site:
            # The collection changed since the build; the index is stale
            logger.debug("Skipping stale cell during relaxation", index=i)
            continue

        centroid = polygon_centroid(cell.polygon)
        if not (math.isfinite(centroid.x) and math.isfinite(centroid.y)):
            continue

        if centroid.x != site.x or centroid.y != site.y:
            site.x = centroid.x
            site.y = centroid.y
            moved += 1

    logger.debug("Relaxation step complete", moved=moved, sites=len(sites))
    return moved > 0


def lloyd_energy(sites: Sequence[Site], box: BoundingBox, samples: int = 64) -> float:
    """Approximate the centroidal energy of a site layout.

    Samples a ``samples`` x ``samples`` grid over the box and averages the
    squared distance from each sample to its nearest site. Lloyd steps never
    increase the exact energy, so this is a convergence measure.
    """
    if len(sites) == 0 or box.is_degenerate:
        return 0.0

    xs = np.linspace(box.left, box.right, samples)
    ys = np.linspace(box.top, box.bottom, samples)
    gx, gy = np.meshgrid(xs, ys)
    grid = np.column_stack([gx.ravel(), gy.ravel()])

    coords = np.array([[s.x, s.y] for s in sites])
    d2 = ((grid[:, None, :] - coords[None, :, :]) ** 2).sum(axis=2)
    return float(d2.min(axis=1).mean())
