"""Bounded Voronoi diagrams with procedural cell shading."""

__version__ = "0.1.0"
