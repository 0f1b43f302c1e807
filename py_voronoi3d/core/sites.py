"""
Site generation helpers.

Random sites are drawn from an injectable AleaPRNG so tests and callers can
reproduce a diagram from a seed.
"""

from typing import List, Optional, Sequence

import numpy as np
import structlog

from .alea_prng import AleaPRNG
from .bounds import BoundingBox
from .exceptions import InvalidInputError
from .geometry import PointLike, as_point
from ..utils.random import get_prng

logger = structlog.get_logger()


def generate_sites(count: int, min_corner: PointLike, max_corner: PointLike,
                   prng: Optional[AleaPRNG] = None,
                   include_corners: bool = False) -> List[np.ndarray]:
    """
    Draw uniformly distributed sites inside a box.

    Args:
        count: Number of random sites
        min_corner: Box min corner
        max_corner: Box max corner
        prng: Random source; defaults to the process PRNG
        include_corners: Also append the min and max corners as sites

    Returns:
        List of site positions (exact repeats are redrawn)
    """
    if count < 0:
        raise InvalidInputError(f"Site count must be non-negative, got {count}")

    box = BoundingBox.from_corners(min_corner, max_corner)
    prng = prng or get_prng()
    lo, hi = box.min_corner, box.max_corner

    sites: List[np.ndarray] = []
    seen = set()
    while len(sites) < count:
        point = tuple(prng.uniform(lo[axis], hi[axis]) for axis in range(3))
        if point in seen:
            continue
        seen.add(point)
        sites.append(as_point(point))

    if include_corners:
        sites.append(box.min_corner)
        sites.append(box.max_corner)

    logger.info("Sites generated", count=len(sites), include_corners=include_corners)
    return sites


def sort_by_distance(points: Sequence[PointLike], reference: PointLike) -> List[np.ndarray]:
    """Stable sort of points from closest to furthest from `reference`."""
    ref = as_point(reference)
    pts = [as_point(p) for p in points]
    return sorted(pts, key=lambda p: float(np.linalg.norm(p - ref)))
