"""Axis-aligned bounding box and its inward boundary planes."""

from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from .exceptions import InvalidInputError
from .geometry import EPS, Plane, PointLike, as_point


# Corner indices of each box face, wound counter-clockwise seen from outside.
# Corner i has x from bit 0, y from bit 1 and z from bit 2 (0 = min, 1 = max).
_FACE_CORNERS = (
    (0, 2, 3, 1),  # bottom, z = min
    (4, 5, 7, 6),  # top, z = max
    (2, 6, 7, 3),  # back, y = max
    (0, 1, 5, 4),  # front, y = min
    (1, 3, 7, 5),  # right, x = max
    (0, 4, 6, 2),  # left, x = min
)


@dataclass(frozen=True, eq=False)
class BoundingBox:
    """Axis-aligned box given by its min and max corners."""

    min_corner: np.ndarray
    max_corner: np.ndarray

    def __post_init__(self):
        try:
            lo = as_point(self.min_corner)
            hi = as_point(self.max_corner)
        except ValueError as exc:
            raise InvalidInputError(f"Malformed box corner: {exc}") from exc
        if not (np.all(np.isfinite(lo)) and np.all(np.isfinite(hi))):
            raise InvalidInputError("Box corners must be finite")
        if not np.all(lo < hi):
            raise InvalidInputError(
                f"Box min {lo.tolist()} must be strictly below max {hi.tolist()} on every axis"
            )
        object.__setattr__(self, "min_corner", lo)
        object.__setattr__(self, "max_corner", hi)

    @classmethod
    def from_corners(cls, min_corner: PointLike, max_corner: PointLike) -> "BoundingBox":
        return cls(min_corner=min_corner, max_corner=max_corner)

    @property
    def center(self) -> np.ndarray:
        return (self.min_corner + self.max_corner) / 2

    @property
    def size(self) -> np.ndarray:
        return self.max_corner - self.min_corner

    @property
    def extents(self) -> np.ndarray:
        return self.size / 2

    @property
    def volume(self) -> float:
        return float(np.prod(self.size))

    def contains(self, point: PointLike, eps: float = EPS) -> bool:
        """Inclusive containment test; the surface counts as inside."""
        p = np.asarray(point, dtype=np.float64)
        return bool(np.all(p >= self.min_corner - eps) and np.all(p <= self.max_corner + eps))

    def corners(self) -> np.ndarray:
        """The eight corners as an (8, 3) array."""
        lo, hi = self.min_corner, self.max_corner
        return np.array([
            [hi[0] if i & 1 else lo[0],
             hi[1] if i & 2 else lo[1],
             hi[2] if i & 4 else lo[2]]
            for i in range(8)
        ])

    def faces(self) -> List[np.ndarray]:
        """Six quads, each a (4, 3) vertex loop wound outward."""
        corners = self.corners()
        return [corners[list(idx)] for idx in _FACE_CORNERS]

    def planes(self) -> Tuple[Plane, ...]:
        """
        Six inward-facing boundary planes anchored at the face centers.

        Order: left, right, bottom, top, back, front.
        """
        lo, hi, c = self.min_corner, self.max_corner, self.center
        return (
            Plane.from_normal_and_point([1, 0, 0], [lo[0], c[1], c[2]]),
            Plane.from_normal_and_point([-1, 0, 0], [hi[0], c[1], c[2]]),
            Plane.from_normal_and_point([0, 1, 0], [c[0], lo[1], c[2]]),
            Plane.from_normal_and_point([0, -1, 0], [c[0], hi[1], c[2]]),
            Plane.from_normal_and_point([0, 0, 1], [c[0], c[1], lo[2]]),
            Plane.from_normal_and_point([0, 0, -1], [c[0], c[1], hi[2]]),
        )

    def __repr__(self) -> str:
        return f"BoundingBox(min={self.min_corner.tolist()}, max={self.max_corner.tolist()})"
