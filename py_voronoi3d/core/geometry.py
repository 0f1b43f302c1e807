"""
Vector and half-space primitives for 3D Voronoi construction.

Points and directions are numpy float64 arrays of shape (3,). The module
also owns EPS, the single tolerance used by every classification in the
package unless a diagram is built with an explicit epsilon.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Union

import numpy as np
from scipy.spatial.distance import cdist

EPS = 1e-6

UP = np.array([0.0, 1.0, 0.0])
RIGHT = np.array([1.0, 0.0, 0.0])

PointLike = Union[Sequence[float], np.ndarray]


def as_point(value: PointLike) -> np.ndarray:
    """Convert a 3-sequence into a read-only float64 array."""
    point = np.array(value, dtype=np.float64).reshape(-1)
    if point.shape != (3,):
        raise ValueError(f"Expected 3 coordinates, got shape {point.shape}")
    point.setflags(write=False)
    return point


def magnitude(vector: np.ndarray) -> float:
    return float(np.linalg.norm(vector))


def normalize(vector: np.ndarray, eps: float = EPS) -> np.ndarray:
    """Return the unit vector along `vector`.

    Raises:
        ValueError: if the vector is shorter than eps
    """
    length = magnitude(vector)
    if length < eps:
        raise ValueError("Cannot normalize a zero-length vector")
    return np.asarray(vector, dtype=np.float64) / length


def points_equal(a: np.ndarray, b: np.ndarray, eps: float = EPS) -> bool:
    """Positional equality within eps (euclidean distance)."""
    return magnitude(np.subtract(a, b)) <= eps


def unique_points(points: Iterable[np.ndarray], eps: float = EPS) -> np.ndarray:
    """Deduplicate points within eps, keeping first occurrences in order.

    Returns:
        (N, 3) array of the retained points
    """
    arr = np.array(list(points), dtype=np.float64).reshape(-1, 3)
    if len(arr) < 2:
        return arr
    close = np.tril(cdist(arr, arr) <= eps, k=-1)
    return arr[~np.any(close, axis=1)]


def polygon_normal(loop: np.ndarray) -> np.ndarray:
    """Newell normal of a vertex loop (not normalized, length = 2 * area)."""
    nxt = np.roll(loop, -1, axis=0)
    return np.array([
        np.sum((loop[:, 1] - nxt[:, 1]) * (loop[:, 2] + nxt[:, 2])),
        np.sum((loop[:, 2] - nxt[:, 2]) * (loop[:, 0] + nxt[:, 0])),
        np.sum((loop[:, 0] - nxt[:, 0]) * (loop[:, 1] + nxt[:, 1])),
    ])


def plane_basis(normal: np.ndarray, eps: float = EPS):
    """Two orthonormal axes spanning the plane with the given unit normal.

    u = cross(normal, up) unless the normal is (nearly) vertical, in which
    case cross(normal, right) is used instead. (u, v, normal) is right-handed.
    """
    u = np.cross(normal, UP)
    if magnitude(u) < eps:
        u = np.cross(normal, RIGHT)
    u = normalize(u, eps)
    v = np.cross(normal, u)
    return u, v


@dataclass(frozen=True, eq=False)
class Plane:
    """
    Oriented half-space plane.

    The inside (positive side) is dot(normal, p) + distance > 0. Instances
    never change after creation; compare them with is_coincident().
    """

    normal: np.ndarray
    distance: float

    @classmethod
    def from_normal_and_point(cls, normal: PointLike, point: PointLike,
                              eps: float = EPS) -> "Plane":
        """Plane through `point` facing along `normal` (normalized here)."""
        n = normalize(np.asarray(normal, dtype=np.float64), eps)
        n.setflags(write=False)
        return cls(normal=n, distance=-float(np.dot(n, as_point(point))))

    @classmethod
    def from_points(cls, a: PointLike, b: PointLike, c: PointLike,
                    eps: float = EPS) -> "Plane":
        """Plane through three points; normal follows cross(b - a, c - a)."""
        a, b, c = as_point(a), as_point(b), as_point(c)
        return cls.from_normal_and_point(np.cross(b - a, c - a), a, eps)

    @property
    def anchor(self) -> np.ndarray:
        """Closest point of the plane to the origin."""
        return -self.normal * self.distance

    @property
    def flipped(self) -> "Plane":
        return Plane(normal=-self.normal, distance=-self.distance)

    def distance_to_point(self, point: PointLike) -> float:
        return float(np.dot(self.normal, point) + self.distance)

    def distances(self, points: np.ndarray) -> np.ndarray:
        """Signed distances of an (N, 3) array of points."""
        return np.asarray(points) @ self.normal + self.distance

    def get_side(self, point: PointLike) -> bool:
        """Is the point strictly on the positive side?"""
        return self.distance_to_point(point) > 0.0

    def same_side(self, p0: PointLike, p1: PointLike) -> bool:
        d0 = self.distance_to_point(p0)
        d1 = self.distance_to_point(p1)
        return (d0 > 0.0 and d1 > 0.0) or (d0 <= 0.0 and d1 <= 0.0)

    def closest_point_on_plane(self, point: PointLike) -> np.ndarray:
        p = np.asarray(point, dtype=np.float64)
        return p - self.normal * self.distance_to_point(p)

    def raycast(self, origin: PointLike, direction: PointLike,
                eps: float = EPS) -> Optional[float]:
        """Entry parameter t of origin + t * direction, or None.

        None is returned when the ray runs parallel to the plane or the
        crossing lies behind the origin.
        """
        denom = float(np.dot(direction, self.normal))
        if abs(denom) < eps:
            return None
        enter = (-float(np.dot(origin, self.normal)) - self.distance) / denom
        return enter if enter > 0.0 else None

    def is_coincident(self, other: "Plane", eps: float = EPS) -> bool:
        """Normals and offsets each within eps of one another."""
        return (magnitude(self.normal - other.normal) <= eps
                and abs(self.distance - other.distance) <= eps)

    def __repr__(self) -> str:
        n = ", ".join(f"{c:.2f}" for c in self.normal)
        return f"Plane(normal=({n}), distance={self.distance:.2f})"
