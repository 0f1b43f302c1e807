"""
Convex polyhedral cell of a bounded 3D Voronoi diagram.

A cell starts as the full bounding box around its site and is cut down by
half-space planes. Each cut clips every face loop against the plane
(Sutherland-Hodgman) and closes the hole with a cap face built from the
points where the plane crossed the old surface.
"""

import math
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np
import structlog
from scipy.spatial import ConvexHull

from .bounds import BoundingBox
from .exceptions import CellFinalizedError, CellInvariantError
from .geometry import (
    EPS,
    Plane,
    PointLike,
    as_point,
    plane_basis,
    points_equal,
    polygon_normal,
    unique_points,
)

logger = structlog.get_logger()


class CellState(Enum):
    """Lifecycle of a cell. Transitions only move forward."""
    SEEDED = "seeded"          # full box, no borders yet
    CLIPPING = "clipping"      # taking borders
    FINALIZED = "finalized"    # read-only


class BorderOutcome(Enum):
    """What add_border() did with a plane."""
    ADDED = "added"
    DUPLICATE = "duplicate"                # coincident border already held
    NOT_FACING = "not_facing"              # site is not on the positive side
    NO_INTERSECTION = "no_intersection"    # plane misses the polyhedron


def _collapse_loop(points: List[np.ndarray], eps: float) -> List[np.ndarray]:
    """Drop consecutive duplicates, including the wrap-around pair."""
    out: List[np.ndarray] = []
    for p in points:
        if not out or not points_equal(p, out[-1], eps):
            out.append(p)
    while len(out) > 1 and points_equal(out[0], out[-1], eps):
        out.pop()
    return out


class ConvexCell:
    """
    One site's region: the bounding box intersected with its border planes.

    Attributes exposed read-only:
        site: the cell's site
        borders: border planes in the order they were accepted
        faces: vertex loops wound counter-clockwise seen from outside
        state: current CellState
    """

    def __init__(self, site: PointLike, bounds: BoundingBox, eps: float = EPS):
        self.eps = eps
        self._site = as_point(site)
        self._bounds = bounds
        self._borders: List[Plane] = []
        self._faces: List[np.ndarray] = [self._freeze(f) for f in bounds.faces()]
        self._vertices: Optional[np.ndarray] = None
        self._state = CellState.SEEDED

    # ---------------- Public API ----------------
    @property
    def site(self) -> np.ndarray:
        return self._site

    @property
    def bounds(self) -> BoundingBox:
        return self._bounds

    @property
    def borders(self) -> Tuple[Plane, ...]:
        return tuple(self._borders)

    @property
    def faces(self) -> Tuple[np.ndarray, ...]:
        return tuple(self._faces)

    @property
    def state(self) -> CellState:
        return self._state

    @property
    def vertices(self) -> np.ndarray:
        """Distinct polyhedron vertices as an (N, 3) array."""
        if self._vertices is None:
            pts = unique_points((p for face in self._faces for p in face), self.eps)
            self._vertices = self._freeze(pts)
        return self._vertices

    @property
    def centroid(self) -> np.ndarray:
        """Average of the distinct vertices."""
        return self.vertices.mean(axis=0)

    @property
    def volume(self) -> float:
        if len(self.vertices) < 4:
            return 0.0
        return float(ConvexHull(self.vertices).volume)

    def has_border(self, plane: Plane) -> bool:
        return any(b.is_coincident(plane, self.eps) for b in self._borders)

    def contains(self, point: PointLike) -> bool:
        """Inside the box and strictly on the positive side of every border."""
        if not self._bounds.contains(point, self.eps):
            return False
        return all(border.get_side(point) for border in self._borders)

    get_side = contains

    def add_border(self, plane: Plane) -> BorderOutcome:
        """
        Cut the cell with a half-space plane.

        Returns:
            BorderOutcome describing whether the plane became a border

        Raises:
            CellFinalizedError: if the cell is finalized
            CellInvariantError: if the cut left no faces
        """
        self._ensure_mutable()

        if not plane.get_side(self._site):
            logger.warning("Plane does not face the cell site",
                           site=self._site.tolist(), plane=repr(plane))
            return BorderOutcome.NOT_FACING

        if self.has_border(plane):
            return BorderOutcome.DUPLICATE

        dists = plane.distances(self.vertices)
        if np.all(dists >= -self.eps):
            return BorderOutcome.NO_INTERSECTION
        if np.all(dists <= self.eps):
            # The site faces the plane but no vertex does.
            logger.warning("Plane excludes the whole cell",
                           site=self._site.tolist(), plane=repr(plane))
            return BorderOutcome.NO_INTERSECTION

        faces, cap = self._clip(plane)
        if cap is not None:
            faces.append(cap)
        if not faces:
            raise CellInvariantError(
                f"Cell of site {self._site.tolist()} became empty after {plane!r}"
            )

        self._commit(faces, plane)
        logger.debug("Border added", site=self._site.tolist(),
                     plane=repr(plane), faces=len(faces))
        return BorderOutcome.ADDED

    def add_borders(self, planes: Iterable[Plane]) -> List[BorderOutcome]:
        return [self.add_border(p) for p in planes]

    def apply_bounds(self, planes: Sequence[Plane]) -> List[BorderOutcome]:
        """
        Record the box planes as permanent borders.

        The seed polyhedron already is the box, so these planes never cut;
        they are appended without the intersection test.
        """
        outcomes = []
        for plane in planes:
            self._ensure_mutable()
            if not plane.get_side(self._site):
                logger.warning("Boundary plane does not face the cell site",
                               site=self._site.tolist(), plane=repr(plane))
                outcomes.append(BorderOutcome.NOT_FACING)
                continue
            if self.has_border(plane):
                outcomes.append(BorderOutcome.DUPLICATE)
                continue
            if np.any(plane.distances(self.vertices) < -self.eps):
                raise CellInvariantError(
                    f"Cell of site {self._site.tolist()} extends past boundary {plane!r}"
                )
            self._commit(list(self._faces), plane)
            outcomes.append(BorderOutcome.ADDED)
        return outcomes

    def finalize(self) -> None:
        """Freeze the cell. A closed polyhedron needs at least four faces."""
        if self._state is CellState.FINALIZED:
            return
        if len(self._faces) < 4:
            raise CellInvariantError(
                f"Cell of site {self._site.tolist()} has only {len(self._faces)} faces"
            )
        self._state = CellState.FINALIZED

    def triangulate(self) -> Tuple[np.ndarray, np.ndarray]:
        """
        Fan-triangulate the faces for a rendering layer.

        Returns:
            Tuple of (vertices (N, 3), triangles (M, 3) int indices)
        """
        vertices = self.vertices
        triangles = []
        for face in self._faces:
            idx = [self._vertex_index(p) for p in face]
            for k in range(1, len(idx) - 1):
                triangles.append([idx[0], idx[k], idx[k + 1]])
        return vertices, np.array(triangles, dtype=int).reshape(-1, 3)

    def validate(self) -> dict:
        """
        Consistency diagnostics (empty lists mean the cell is sound):
          - every face has at least 3 vertices and lies in one plane;
          - every face is wound outward;
          - every vertex lies inside all borders;
          - the site is contained.
        """
        center = self.centroid
        small_faces = [i for i, f in enumerate(self._faces) if len(f) < 3]

        non_planar = []
        bad_orient = []
        signed_volume = 0.0
        for i, face in enumerate(self._faces):
            if len(face) < 3:
                continue
            n = polygon_normal(face)
            length = float(np.linalg.norm(n))
            if length <= self.eps * self.eps:
                non_planar.append(i)
                continue
            unit = n / length
            offsets = (face - face[0]) @ unit
            if np.max(np.abs(offsets)) > self.eps * 10:
                non_planar.append(i)
            if np.dot(unit, face.mean(axis=0) - center) <= 0:
                bad_orient.append(i)
            signed_volume += float(np.dot(face[0], n)) / 6.0

        outside = [
            i for i, v in enumerate(self.vertices)
            if any(b.distance_to_point(v) < -self.eps * 10 for b in self._borders)
        ]

        return {
            "faces": len(self._faces),
            "vertices": len(self.vertices),
            "borders": len(self._borders),
            "site_inside": self.contains(self._site),
            "signed_volume": signed_volume,
            "small_faces": small_faces,
            "non_planar_faces": non_planar,
            "bad_orient_faces": bad_orient,
            "outside_vertices": outside,
        }

    # ---------------- Clipping ----------------
    def _clip(self, plane: Plane) -> Tuple[List[np.ndarray], Optional[np.ndarray]]:
        """Clip every face loop and build the cap face from the cut points."""
        eps = self.eps
        cap_points: List[np.ndarray] = []
        faces: List[np.ndarray] = []

        for face in self._faces:
            dists = plane.distances(face)
            out: List[np.ndarray] = []
            n = len(face)
            for i in range(n):
                a, b = face[i], face[(i + 1) % n]
                da, db = dists[i], dists[(i + 1) % n]
                if da >= -eps:
                    out.append(a)
                    if da <= eps:
                        cap_points.append(a)
                if (da > eps and db < -eps) or (da < -eps and db > eps):
                    p = self._edge_intersection(a, b, da, db)
                    out.append(p)
                    cap_points.append(p)
            out = _collapse_loop(out, eps)
            if len(out) >= 3:
                faces.append(self._freeze(np.array(out)))

        return faces, self._build_cap(plane, cap_points)

    def _edge_intersection(self, a: np.ndarray, b: np.ndarray,
                           da: float, db: float) -> np.ndarray:
        """
        Point where edge a-b crosses the plane.

        The edge is walked in a fixed endpoint order so the two faces
        sharing it get bit-identical points.
        """
        if tuple(b) < tuple(a):
            a, b, da, db = b, a, db, da
        denom = da - db
        if abs(denom) < self.eps:
            return (a + b) * 0.5
        t = min(max(da / denom, 0.0), 1.0)
        return a + t * (b - a)

    def _build_cap(self, plane: Plane, points: List[np.ndarray]) -> Optional[np.ndarray]:
        pts = unique_points(points, self.eps)
        if len(pts) < 3:
            logger.warning("Cut produced a degenerate cap",
                           site=self._site.tolist(), plane=repr(plane), points=len(pts))
            return None

        # Snap onto the plane so the cap is exactly coplanar.
        pts = np.array([plane.closest_point_on_plane(p) for p in pts])

        center = pts.mean(axis=0)
        u, v = plane_basis(plane.normal, self.eps)
        rel = pts - center
        angles = [math.atan2(float(np.dot(r, v)), float(np.dot(r, u))) for r in rel]
        order = np.argsort(angles, kind="stable")

        # Ascending angle winds counter-clockwise about the inward normal;
        # reverse it so the cap faces outward like every other face.
        return self._freeze(pts[order[::-1]])

    # ---------------- Internals ----------------
    def _commit(self, faces: List[np.ndarray], plane: Plane) -> None:
        self._faces = faces
        self._borders.append(plane)
        self._vertices = None
        self._state = CellState.CLIPPING

    def _ensure_mutable(self) -> None:
        if self._state is CellState.FINALIZED:
            raise CellFinalizedError(
                f"Cell of site {self._site.tolist()} is finalized"
            )

    def _vertex_index(self, point: np.ndarray) -> int:
        dists = np.linalg.norm(self.vertices - point, axis=1)
        return int(np.argmin(dists))

    @staticmethod
    def _freeze(array: np.ndarray) -> np.ndarray:
        array = np.array(array, dtype=np.float64)
        array.setflags(write=False)
        return array

    def __repr__(self) -> str:
        return (f"ConvexCell(site={self._site.tolist()}, borders={len(self._borders)}, "
                f"faces={len(self._faces)}, state={self._state.value})")
