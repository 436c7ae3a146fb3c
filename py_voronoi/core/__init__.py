"""
Core geometry and shading functionality.
"""

from .vector import Point2
from .clipping import clip_polygon_with_half_plane
from .voronoi import BoundingBox, Site, Cell, Edge, Diagram, compute_voronoi, sync_ids
from .polygon import polygon_centroid, polygon_area, point_in_polygon
from .relaxation import relax_sites, lloyd_energy
from .noise import hash2, value_noise, noise2, fbm
from .shading import ShaderMode, ShadingOptions, shade_diagram
from .scene import VoronoiScene

__all__ = ['Point2', 'clip_polygon_with_half_plane',
           'BoundingBox', 'Site', 'Cell', 'Edge', 'Diagram', 'compute_voronoi', 'sync_ids',
           'polygon_centroid', 'polygon_area', 'point_in_polygon',
           'relax_sites', 'lloyd_energy',
           'hash2', 'value_noise', 'noise2', 'fbm',
           'ShaderMode', 'ShadingOptions', 'shade_diagram',
           'VoronoiScene']
