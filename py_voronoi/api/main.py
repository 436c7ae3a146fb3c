"""FastAPI main application.

Every endpoint is stateless: the request carries the sites and the box, and
the diagram is rebuilt for each call. Endpoints that build or render are
plain functions so FastAPI runs them in its threadpool.
"""

from typing import List, Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import BaseModel, Field
import structlog

from .. import __version__
from ..config import settings
from ..core.noise import fbm, value_noise
from ..core.polygon import polygon_area, polygon_centroid
from ..core.relaxation import relax_sites
from ..core.shading import (
    ShaderMode, ShadingOptions, animation_time, palette_ramp, shade_diagram
)
from ..core.vector import Point2
from ..core.voronoi import BoundingBox, Diagram, Site, compute_voronoi
from ..utils.logging_config import configure_logging
from ..visualize import RenderOptions, render_png

configure_logging(settings.log_level, settings.log_format)

logger = structlog.get_logger()

# Initialize FastAPI app
app = FastAPI(
    title="Voronoi Shader API",
    description="Bounded Voronoi diagrams with procedural cell shading",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request/Response models
class PointModel(BaseModel):
    """A 2D point."""

    x: float
    y: float


class SiteModel(BaseModel):
    """A site as sent by the client."""

    x: float
    y: float
    is_pointer: bool = Field(False, description="Pointer-tracking site, never relaxed")


class BoxModel(BaseModel):
    """Bounding box in screen coordinates."""

    left: float = Field(0.0, description="Left edge")
    right: float = Field(float(settings.default_width), description="Right edge")
    top: float = Field(0.0, description="Top edge")
    bottom: float = Field(float(settings.default_height), description="Bottom edge")


class DiagramRequest(BaseModel):
    """Sites plus the box to build a diagram in."""

    sites: List[SiteModel] = Field(default_factory=list, description="Ordered site collection")
    box: BoxModel = Field(default_factory=BoxModel, description="Bounding box")


class RelaxRequest(DiagramRequest):
    """Request for one or more Lloyd steps."""

    steps: int = Field(1, ge=1, le=100, description="Number of relaxation steps")


class ShadingModel(BaseModel):
    """Shading options snapshot."""

    mode: ShaderMode = Field(ShaderMode.NOISE, description="Shading mode")
    base_hue: float = Field(200.0, description="Base hue in degrees")
    spread: float = Field(120.0, description="Hue spread in degrees")
    saturation: float = Field(70.0, ge=0, le=100, description="Saturation percent")
    lightness: float = Field(55.0, ge=0, le=100, description="Lightness percent")
    scale: float = Field(120.0, gt=0, description="Noise and spiral scale")
    speed: float = Field(1.0, ge=0, description="Animation speed")


class ShadeRequest(DiagramRequest):
    """Diagram request plus shading settings and animation time."""

    shading: ShadingModel = Field(default_factory=ShadingModel)
    time: float = Field(0.0, ge=0, description="Elapsed seconds, multiplied by speed")


class RenderRequest(ShadeRequest):
    """Shade request plus display toggles."""

    show_edges: bool = True
    show_sites: bool = True
    show_highlight: bool = True
    show_glow: bool = False
    show_background: bool = False
    edge_width: float = Field(1.5, ge=0)
    site_radius: float = Field(3.0, ge=0)
    hovered: int = Field(-1, description="Index of the site drawn enlarged")


class CellResponse(BaseModel):
    """One Voronoi cell."""

    index: int
    site: PointModel
    polygon: List[PointModel]
    centroid: Optional[PointModel] = None
    area: float


class EdgeResponse(BaseModel):
    """A deduplicated edge."""

    a: PointModel
    b: PointModel


class DiagramResponse(BaseModel):
    """A complete diagram."""

    cells: List[CellResponse]
    edges: List[EdgeResponse]


class RelaxResponse(BaseModel):
    """Sites after relaxation."""

    sites: List[SiteModel]
    moved: bool
    steps_applied: int


class CellShadeResponse(BaseModel):
    """Shading result for one cell."""

    index: int
    value: float
    color: str


class ShadeResponse(BaseModel):
    """Per-cell shading and the palette ramp."""

    mode: ShaderMode
    cells: List[CellShadeResponse]
    palette: List[str]


class NoiseResponse(BaseModel):
    """Noise values at a point."""

    x: float
    y: float
    value_noise: float
    fbm: float


# Helpers
def _to_sites(request: DiagramRequest) -> List[Site]:
    if len(request.sites) > settings.max_sites:
        raise HTTPException(
            status_code=400,
            detail=f"Too many sites: {len(request.sites)} > {settings.max_sites}",
        )
    return [Site(x=s.x, y=s.y, is_pointer=s.is_pointer) for s in request.sites]


def _to_box(model: BoxModel) -> BoundingBox:
    return BoundingBox(left=model.left, right=model.right, top=model.top, bottom=model.bottom)


def _to_shading(model: ShadingModel) -> ShadingOptions:
    return ShadingOptions(
        mode=model.mode,
        base_hue=model.base_hue,
        spread=model.spread,
        saturation=model.saturation,
        lightness=model.lightness,
        scale=model.scale,
        speed=model.speed,
    )


def _pointer_of(sites: List[Site], box: BoundingBox) -> Point2:
    for site in sites:
        if site.is_pointer:
            return site.as_point()
    return Point2(box.left + box.width / 2, box.top + box.height / 2)


def _diagram_response(diagram: Diagram) -> DiagramResponse:
    cells = []
    for index, cell in sorted(diagram.cells.items()):
        centroid = None
        if len(cell.polygon) >= 3:
            c = polygon_centroid(cell.polygon)
            centroid = PointModel(x=c.x, y=c.y)
        cells.append(CellResponse(
            index=index,
            site=PointModel(x=cell.site.x, y=cell.site.y),
            polygon=[PointModel(x=p.x, y=p.y) for p in cell.polygon],
            centroid=centroid,
            area=polygon_area(cell.polygon),
        ))
    edges = [
        EdgeResponse(a=PointModel(x=e.a.x, y=e.a.y), b=PointModel(x=e.b.x, y=e.b.y))
        for e in diagram.edges
    ]
    return DiagramResponse(cells=cells, edges=edges)


# API endpoints
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Voronoi Shader API",
        "version": __version__,
        "status": "running",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.post("/diagram", response_model=DiagramResponse)
def build_diagram(request: DiagramRequest):
    """Build the bounded Voronoi diagram for the given sites."""
    sites = _to_sites(request)
    box = _to_box(request.box)
    diagram = compute_voronoi(sites, box)
    logger.info("Diagram requested", sites=len(sites), edges=len(diagram.edges))
    return _diagram_response(diagram)


@app.post("/relax", response_model=RelaxResponse)
def relax(request: RelaxRequest):
    """Apply ``steps`` Lloyd steps, rebuilding the diagram between steps."""
    sites = _to_sites(request)
    box = _to_box(request.box)

    moved_any = False
    applied = 0
    for _ in range(request.steps):
        diagram = compute_voronoi(sites, box)
        moved = relax_sites(sites, diagram)
        applied += 1
        if not moved:
            break
        moved_any = True

    logger.info("Relaxation requested", sites=len(sites), steps=applied, moved=moved_any)
    return RelaxResponse(
        sites=[SiteModel(x=s.x, y=s.y, is_pointer=s.is_pointer) for s in sites],
        moved=moved_any,
        steps_applied=applied,
    )


@app.post("/shade", response_model=ShadeResponse)
def shade(request: ShadeRequest):
    """Shade every cell of the diagram."""
    sites = _to_sites(request)
    box = _to_box(request.box)
    options = _to_shading(request.shading)
    diagram = compute_voronoi(sites, box)

    t = animation_time(request.time, options.speed)
    shades = shade_diagram(diagram, options, t, _pointer_of(sites, box), box.width, box.height)
    cells = [
        CellShadeResponse(index=index, value=s.value, color=s.color)
        for index, s in sorted(shades.items())
    ]
    return ShadeResponse(mode=options.mode, cells=cells, palette=palette_ramp(options))


@app.post("/render")
def render(request: RenderRequest):
    """Render the shaded diagram as a PNG image."""
    sites = _to_sites(request)
    box = _to_box(request.box)
    if box.is_degenerate:
        raise HTTPException(status_code=400, detail="Bounding box has no area")
    if max(box.width, box.height) > settings.max_canvas_size:
        raise HTTPException(
            status_code=400,
            detail=f"Canvas too large: {box.width:g}x{box.height:g} > {settings.max_canvas_size}",
        )

    options = _to_shading(request.shading)
    diagram = compute_voronoi(sites, box)
    png = render_png(
        diagram,
        sites,
        box,
        shading=options,
        render=RenderOptions(
            show_edges=request.show_edges,
            show_sites=request.show_sites,
            show_highlight=request.show_highlight,
            show_glow=request.show_glow,
            show_background=request.show_background,
            edge_width=request.edge_width,
            site_radius=request.site_radius,
        ),
        t=animation_time(request.time, options.speed),
        hovered=request.hovered,
    )
    return Response(content=png, media_type="image/png")


@app.get("/noise", response_model=NoiseResponse)
async def noise(
    x: float = Query(..., description="X coordinate"),
    y: float = Query(..., description="Y coordinate"),
    octaves: int = Query(4, ge=1, le=12, description="fBm octaves"),
):
    """Evaluate value noise and fBm at a point."""
    return NoiseResponse(x=x, y=y, value_noise=value_noise(x, y), fbm=fbm(x, y, octaves))


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
