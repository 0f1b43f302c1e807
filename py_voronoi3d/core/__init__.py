"""
Core Voronoi construction functionality.
"""

from .geometry import EPS, Plane, as_point, points_equal
from .bounds import BoundingBox
from .bisector import bisector
from .cell import BorderOutcome, CellState, ConvexCell
from .diagram import VoronoiDiagram
from .exceptions import (
    CellFinalizedError,
    CellInvariantError,
    DegenerateBisectorError,
    InvalidInputError,
    VoronoiError,
)
from .alea_prng import AleaPRNG
from .sites import generate_sites, sort_by_distance

__all__ = ['EPS', 'Plane', 'as_point', 'points_equal', 'BoundingBox', 'bisector',
           'BorderOutcome', 'CellState', 'ConvexCell', 'VoronoiDiagram',
           'CellFinalizedError', 'CellInvariantError', 'DegenerateBisectorError',
           'InvalidInputError', 'VoronoiError', 'AleaPRNG', 'generate_sites',
           'sort_by_distance']
