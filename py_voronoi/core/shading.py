"""
Per-cell shading.

Every mode maps a cell (through its centroid) to a scalar ``v`` which is
turned into a colour as ``hsl(base_hue + v * spread, saturation, lightness)``.
"""

import colorsys
import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

import structlog

from .noise import fbm, fract, smoothstep
from .polygon import polygon_centroid
from .vector import Point2
from .voronoi import Cell, Diagram

logger = structlog.get_logger()

# Prime modulus spreads neighbouring ids across the palette
CELL_ID_MODULUS = 11


class ShaderMode(str, Enum):
    """Shading modes for cell fills."""

    OFF = "off"
    NOISE = "noise"
    DISTANCE = "distance"
    SPIRAL = "spiral"
    CELL_ID = "cellId"


@dataclass
class ShadingOptions:
    """Snapshot of palette and shader settings read at render time."""

    mode: ShaderMode = ShaderMode.NOISE
    base_hue: float = 200.0  # degrees
    spread: float = 120.0  # degrees of hue covered by v in [0, 1]
    saturation: float = 70.0  # percent
    lightness: float = 55.0  # percent
    scale: float = 120.0  # pixels per noise lattice unit
    speed: float = 1.0  # animation time multiplier


@dataclass
class CellShade:
    """Shading result for one cell."""

    index: int
    value: float
    hue: float
    color: str
    centroid: Point2


def animation_time(elapsed_seconds: float, speed: float) -> float:
    return elapsed_seconds * speed


def _css_number(value: float) -> str:
    # Shortest exact form: integers without ".0", fractions at full precision
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def hsl(h: float, s: float, l: float) -> str:
    """CSS colour string with the hue wrapped into [0, 360)."""
    hue = ((h % 360) + 360) % 360
    return f"hsl({_css_number(hue)} {_css_number(s)}% {_css_number(l)}%)"


def hsl_to_rgb(h: float, s: float, l: float) -> Tuple[float, float, float]:
    """Convert hue in degrees and percent saturation/lightness to RGB in [0, 1]."""
    return colorsys.hls_to_rgb((h % 360) / 360.0, l / 100.0, s / 100.0)


def shade_value(cell: Cell, centroid: Point2, options: ShadingOptions,
                t: float, pointer: Point2,
                width: float, height: float) -> Optional[float]:
    """
    Shading scalar for one cell.

    Args:
        cell: Cell being shaded
        centroid: Centroid of ``cell.polygon``
        options: Shading settings
        t: Animation time (already multiplied by speed)
        pointer: Pointer site position, used by the distance mode
        width, height: Canvas size, used by distance and spiral modes

    Returns:
        Value for the hue ramp, or None when shading is off
    """
    mode = ShaderMode(options.mode)

    if mode == ShaderMode.OFF:
        return None

    if mode == ShaderMode.NOISE:
        return fbm(centroid.x / options.scale + t * 0.3,
                   centroid.y / options.scale + t * 0.27, 4)

    if mode == ShaderMode.DISTANCE:
        d = math.hypot(centroid.x - pointer.x, centroid.y - pointer.y)
        max_d = math.hypot(width, height)
        return 1.0 - smoothstep(0.0, max_d * 0.7, d)

    if mode == ShaderMode.SPIRAL:
        vx = centroid.x - width / 2
        vy = centroid.y - height / 2
        dist = math.hypot(vx, vy) / (options.scale * 2)
        angle = math.atan2(vy, vx) / (math.pi * 2)
        return fract(dist - angle * 5.0 + t * 0.5)

    # Cell id mode
    voronoi_id = cell.site.voronoi_id or 0
    return (voronoi_id % CELL_ID_MODULUS) / CELL_ID_MODULUS


def shade_diagram(diagram: Diagram, options: ShadingOptions, t: float,
                  pointer: Point2, width: float, height: float) -> Dict[int, CellShade]:
    """Shade every drawable cell (three or more vertices) of a diagram."""
    shades: Dict[int, CellShade] = {}
    if ShaderMode(options.mode) == ShaderMode.OFF:
        return shades

    for index, cell in diagram.cells.items():
        if len(cell.polygon) < 3:
            continue
        centroid = polygon_centroid(cell.polygon)
        value = shade_value(cell, centroid, options, t, pointer, width, height)
        hue = options.base_hue + value * options.spread
        shades[index] = CellShade(
            index=index,
            value=value,
            hue=hue,
            color=hsl(hue, options.saturation, options.lightness),
            centroid=centroid,
        )

    logger.debug("Diagram shaded", mode=ShaderMode(options.mode).value, cells=len(shades))
    return shades


def palette_ramp(options: ShadingOptions, steps: int = 8) -> List[str]:
    """Colours along the hue ramp for v = 0 .. 1, for legends."""
    if steps < 2:
        return [hsl(options.base_hue, options.saturation, options.lightness)]
    return [
        hsl(options.base_hue + (i / (steps - 1)) * options.spread,
            options.saturation, options.lightness)
        for i in range(steps)
    ]
