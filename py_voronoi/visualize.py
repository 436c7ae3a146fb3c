"""
Render a shaded Voronoi diagram with matplotlib.

Draw order: white background, an optional fBm raster, shaded cell fills,
edges (optionally with a glow), the translucent highlight over the
pointer's cell, then the sites.
"""

import io
from dataclasses import dataclass
from typing import Optional, Sequence

import matplotlib

matplotlib.use("Agg")

from matplotlib.collections import LineCollection, PatchCollection  # noqa: E402
from matplotlib.colors import ListedColormap  # noqa: E402
from matplotlib.figure import Figure  # noqa: E402
from matplotlib.patches import Circle, Polygon as PolygonPatch  # noqa: E402
import structlog  # noqa: E402

from .core.noise import fbm_field  # noqa: E402
from .core.shading import ShaderMode, ShadingOptions, hsl_to_rgb, shade_diagram  # noqa: E402
from .core.vector import Point2  # noqa: E402
from .core.voronoi import BoundingBox, Diagram, Site  # noqa: E402

logger = structlog.get_logger()


@dataclass
class RenderOptions:
    """Display toggles and stroke sizes."""

    show_edges: bool = True
    show_sites: bool = True
    show_highlight: bool = True
    show_glow: bool = False
    show_background: bool = False
    edge_width: float = 1.5  # points
    site_radius: float = 3.0  # canvas units
    dpi: int = 100


def _draw_background(ax, box: BoundingBox, shading: ShadingOptions, t: float) -> None:
    """Paint an fBm raster on the shading hue ramp under the cells."""
    width = max(int(round(box.width)), 1)
    height = max(int(round(box.height)), 1)
    field = fbm_field(width, height, scale=shading.scale, t=t, x0=box.left, y0=box.top)
    ramp = [
        hsl_to_rgb(shading.base_hue + (i / 255) * shading.spread,
                   shading.saturation, shading.lightness)
        for i in range(256)
    ]
    ax.imshow(field, cmap=ListedColormap(ramp), vmin=0.0, vmax=1.0,
              extent=(box.left, box.left + width, box.top + height, box.top),
              interpolation="nearest", zorder=0)


def render_diagram(diagram: Diagram, sites: Sequence[Site], box: BoundingBox,
                   shading: Optional[ShadingOptions] = None,
                   render: Optional[RenderOptions] = None,
                   t: float = 0.0,
                   pointer: Optional[Point2] = None,
                   hovered: int = -1) -> Figure:
    """
    Draw a diagram onto a new figure sized to the bounding box.

    Args:
        diagram: Diagram built from ``sites``
        sites: Site collection, pointer site included
        box: Bounding box the diagram was built in
        shading: Palette and shader mode
        render: Display toggles
        t: Animation time
        pointer: Pointer position for distance shading and highlighting;
            defaults to the first pointer-flagged site
        hovered: Index of a site drawn enlarged, or -1

    Returns:
        matplotlib Figure
    """
    shading = shading or ShadingOptions()
    render = render or RenderOptions()

    pointer_site = next((s for s in sites if s.is_pointer), None)
    if pointer is None:
        pointer = (pointer_site.as_point() if pointer_site is not None
                   else Point2(box.left + box.width / 2, box.top + box.height / 2))

    width = max(box.width, 1.0)
    height = max(box.height, 1.0)
    fig = Figure(figsize=(width / render.dpi, height / render.dpi), dpi=render.dpi)
    ax = fig.add_axes([0, 0, 1, 1])
    ax.set_xlim(box.left, box.left + width)
    # Screen coordinates: y grows downward
    ax.set_ylim(box.top + height, box.top)
    ax.set_aspect("equal")
    ax.axis("off")
    fig.patch.set_facecolor("white")

    if render.show_background:
        _draw_background(ax, box, shading, t)

    if ShaderMode(shading.mode) != ShaderMode.OFF:
        shades = shade_diagram(diagram, shading, t, pointer, box.width, box.height)
        patches = []
        colors = []
        for index, shade in shades.items():
            polygon = diagram.cells[index].polygon
            patches.append(PolygonPatch([(p.x, p.y) for p in polygon], closed=True))
            colors.append(hsl_to_rgb(shade.hue, shading.saturation, shading.lightness))
        if patches:
            ax.add_collection(PatchCollection(patches, facecolors=colors,
                                              edgecolors="none", zorder=1))

    if render.show_edges and diagram.edges:
        segments = [[(e.a.x, e.a.y), (e.b.x, e.b.y)] for e in diagram.edges]
        if render.show_glow:
            glow = hsl_to_rgb(shading.base_hue, 100, 70)
            ax.add_collection(LineCollection(segments, colors=[glow],
                                             linewidths=render.edge_width * 4,
                                             alpha=0.35, zorder=2))
        ax.add_collection(LineCollection(segments, colors="black",
                                         linewidths=render.edge_width, zorder=3))

    if render.show_highlight and pointer_site is not None and pointer_site.voronoi_id is not None:
        cell = diagram.cells.get(pointer_site.voronoi_id)
        if cell is not None and len(cell.polygon) > 2:
            ax.add_patch(PolygonPatch([(p.x, p.y) for p in cell.polygon], closed=True,
                                      facecolor="white", alpha=0.25,
                                      edgecolor="none", zorder=4))

    if render.show_sites and render.site_radius > 0:
        site_color = hsl_to_rgb(shading.base_hue - 180, 80, 50)
        circles = []
        for i, site in enumerate(sites):
            radius = render.site_radius * 1.8 if i == hovered else render.site_radius
            circles.append(Circle((site.x, site.y), radius))
        if circles:
            ax.add_collection(PatchCollection(circles, facecolors=[site_color],
                                              edgecolors="none", zorder=5))

    logger.debug("Diagram rendered", cells=len(diagram.cells), edges=len(diagram.edges),
                 mode=ShaderMode(shading.mode).value)
    return fig


def render_png(diagram: Diagram, sites: Sequence[Site], box: BoundingBox,
               shading: Optional[ShadingOptions] = None,
               render: Optional[RenderOptions] = None,
               t: float = 0.0,
               pointer: Optional[Point2] = None,
               hovered: int = -1) -> bytes:
    """Render a diagram and return PNG bytes."""
    render = render or RenderOptions()
    fig = render_diagram(diagram, sites, box, shading, render, t, pointer, hovered)
    buffer = io.BytesIO()
    fig.savefig(buffer, format="png", dpi=render.dpi, facecolor="white")
    return buffer.getvalue()
