"""Errors raised while building a Voronoi diagram."""


class VoronoiError(Exception):
    """Base class for all diagram construction errors."""


class InvalidInputError(VoronoiError, ValueError):
    """Degenerate box, missing sites or a site outside the box."""


class DegenerateBisectorError(VoronoiError, ValueError):
    """Two sites coincide, so the bisector normal is undefined."""


class CellInvariantError(VoronoiError, RuntimeError):
    """A cell lost its polyhedron although its site stayed in bounds."""


class CellFinalizedError(VoronoiError, RuntimeError):
    """A finalized cell was asked to take another border."""
