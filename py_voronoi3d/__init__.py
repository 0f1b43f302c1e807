"""
py_voronoi3d: bounded 3D Voronoi diagrams built by half-space clipping.
"""

__version__ = "0.1.0"

from .core import (
    AleaPRNG,
    BoundingBox,
    ConvexCell,
    InvalidInputError,
    Plane,
    VoronoiDiagram,
    VoronoiError,
    bisector,
    generate_sites,
)

__all__ = ['AleaPRNG', 'BoundingBox', 'ConvexCell', 'InvalidInputError', 'Plane',
           'VoronoiDiagram', 'VoronoiError', 'bisector', 'generate_sites', '__version__']
