"""
Bounded 3D Voronoi diagram.

Every site gets a ConvexCell seeded with the bounding box. The cell is cut
by the bisector against each other site and then takes the six box planes
as permanent borders. Cells only read the shared site list, so they are
built independently and optionally on a thread pool.
"""

from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple

import numpy as np
import structlog
from scipy.spatial import cKDTree

from ..config import resolve
from .alea_prng import AleaPRNG
from .bisector import bisector
from .bounds import BoundingBox
from .cell import ConvexCell
from .exceptions import DegenerateBisectorError, InvalidInputError
from .geometry import Plane, PointLike, as_point
from .sites import generate_sites

logger = structlog.get_logger()

OUT_OF_BOUNDS_POLICIES = ("reject", "skip")


class VoronoiDiagram:
    """
    Partition of an axis-aligned box into one convex cell per site.

    Construction either succeeds with every cell finalized or raises; the
    diagram is read-only afterwards.
    """

    def __init__(self, sites: Sequence[PointLike], min_corner: PointLike, max_corner: PointLike,
                 *, epsilon: Optional[float] = None, out_of_bounds: Optional[str] = None,
                 max_workers: Optional[int] = None):
        """
        Build the diagram.

        Args:
            sites: Site positions
            min_corner: Box min corner
            max_corner: Box max corner
            epsilon: Tolerance for all geometric tests (settings.epsilon)
            out_of_bounds: "reject" or "skip" (settings.out_of_bounds_policy)
            max_workers: Threads used to build cells (settings.max_workers)

        Raises:
            InvalidInputError: degenerate box, no sites, or a site outside
                the box under the "reject" policy
            CellInvariantError: a cell collapsed during clipping
        """
        self.eps = float(resolve(epsilon, "epsilon"))
        policy = resolve(out_of_bounds, "out_of_bounds_policy")
        if policy not in OUT_OF_BOUNDS_POLICIES:
            raise InvalidInputError(f"Unknown out-of-bounds policy: {policy!r}")
        workers = int(resolve(max_workers, "max_workers"))

        self._bounds = BoundingBox.from_corners(min_corner, max_corner)
        self._sites: Tuple[np.ndarray, ...] = tuple(self._validate_sites(sites, policy))
        self._bounds_planes: Tuple[Plane, ...] = self._bounds.planes()

        logger.info("Building Voronoi diagram",
                    sites=len(self._sites), bounds=repr(self._bounds),
                    epsilon=self.eps, workers=workers)

        self._regions: Tuple[ConvexCell, ...] = tuple(self._build_regions(workers))
        self._tree = cKDTree(np.array(self._sites))

        logger.info("Voronoi diagram built",
                    regions=len(self._regions),
                    borders=sum(len(r.borders) for r in self._regions))

    @classmethod
    def from_random(cls, count: int, min_corner: PointLike, max_corner: PointLike,
                    prng: Optional[AleaPRNG] = None, include_corners: bool = False,
                    **kwargs) -> "VoronoiDiagram":
        """Build a diagram over randomly generated sites."""
        sites = generate_sites(count, min_corner, max_corner, prng=prng,
                               include_corners=include_corners)
        return cls(sites, min_corner, max_corner, **kwargs)

    # ---------------- Public API ----------------
    @property
    def sites(self) -> Tuple[np.ndarray, ...]:
        return self._sites

    @property
    def regions(self) -> Tuple[ConvexCell, ...]:
        return self._regions

    @property
    def bounds(self) -> BoundingBox:
        return self._bounds

    @property
    def bounds_planes(self) -> Tuple[Plane, ...]:
        return self._bounds_planes

    def __len__(self) -> int:
        return len(self._regions)

    def regions_containing(self, point: PointLike) -> List[int]:
        """Indices of every cell whose contains() accepts the point."""
        return [i for i, region in enumerate(self._regions) if region.contains(point)]

    def closest_site(self, point: PointLike) -> int:
        """Index of the nearest site; the lowest index wins exact ties."""
        p = as_point(point)
        nearest, _ = self._tree.query(p)
        radius = float(np.linalg.norm(self._sites[nearest] - p)) + self.eps
        return min(self._tree.query_ball_point(p, r=radius))

    def find_region(self, point: PointLike) -> Optional[int]:
        """
        Index of the cell owning a point.

        Cell membership is strict, so a point on a shared border belongs to
        no cell; such points (and any other ambiguity) go to the cell of the
        nearest site, lowest index first. Points outside the box give None.
        """
        if not self._bounds.contains(point, self.eps):
            return None
        hits = self.regions_containing(point)
        if len(hits) == 1:
            return hits[0]
        return self.closest_site(point)

    def region_at(self, point: PointLike) -> Optional[ConvexCell]:
        index = self.find_region(point)
        return None if index is None else self._regions[index]

    def total_volume(self) -> float:
        return sum(region.volume for region in self._regions)

    def validate(self) -> dict:
        """
        Diagram diagnostics:
          - per-cell validate() results;
          - cells not containing their own site;
          - relative gap between the summed cell volumes and the box volume.
        """
        cells = [region.validate() for region in self._regions]
        box_volume = self._bounds.volume
        return {
            "regions": len(self._regions),
            "cells": cells,
            "sites_outside_cell": [i for i, c in enumerate(cells) if not c["site_inside"]],
            "volume_error": abs(self.total_volume() - box_volume) / box_volume,
        }

    # ---------------- Construction ----------------
    def _validate_sites(self, sites: Sequence[PointLike], policy: str) -> List[np.ndarray]:
        sites = [] if sites is None else list(sites)
        if not sites:
            raise InvalidInputError("At least one site is required")

        valid: List[np.ndarray] = []
        for index, raw in enumerate(sites):
            try:
                site = as_point(raw)
            except (TypeError, ValueError) as exc:
                raise InvalidInputError(f"Site {index} is malformed: {exc}") from exc
            if not np.all(np.isfinite(site)):
                raise InvalidInputError(f"Site {index} has non-finite coordinates")

            if not self._bounds.contains(site, self.eps):
                if policy == "reject":
                    raise InvalidInputError(
                        f"Site {index} at {site.tolist()} lies outside {self._bounds!r}"
                    )
                logger.warning("Skipping site outside bounds", index=index, site=site.tolist())
                continue
            valid.append(site)

        if not valid:
            raise InvalidInputError("No site lies within the bounds")
        return valid

    def _build_regions(self, workers: int) -> List[ConvexCell]:
        indices = range(len(self._sites))
        if workers > 1 and len(self._sites) > 1:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                return list(pool.map(self._build_cell, indices))
        return [self._build_cell(i) for i in indices]

    def _build_cell(self, index: int) -> ConvexCell:
        """Clip one cell by all bisectors and the box planes."""
        site = self._sites[index]
        cell = ConvexCell(site, self._bounds, self.eps)
        outcomes: Counter = Counter()

        for other_index, other in enumerate(self._sites):
            if other_index == index:
                continue
            try:
                plane = bisector(site, other, self.eps)
            except DegenerateBisectorError:
                logger.warning("Skipping coincident site pair", site=index, other=other_index)
                continue
            outcomes[cell.add_border(plane).value] += 1

        for outcome in cell.apply_bounds(self._bounds_planes):
            outcomes["bounds_" + outcome.value] += 1

        cell.finalize()
        logger.debug("Cell built", site=index, faces=len(cell.faces),
                     borders=len(cell.borders), **dict(outcomes))
        return cell

    def __repr__(self) -> str:
        return f"VoronoiDiagram(regions={len(self._regions)}, bounds={self._bounds!r})"
