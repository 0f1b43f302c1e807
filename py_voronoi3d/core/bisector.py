"""Perpendicular bisector planes between pairs of sites."""

import numpy as np

from .exceptions import DegenerateBisectorError
from .geometry import EPS, Plane, PointLike, as_point, points_equal


def bisector(site_a: PointLike, site_b: PointLike, eps: float = EPS) -> Plane:
    """
    Half-space plane equidistant from two sites, facing the first one.

    The normal is normalize(site_a - site_b) and the plane passes through
    the midpoint of the two sites, so site_a is on the positive side.

    Args:
        site_a: Site the plane faces
        site_b: Other site
        eps: Coincidence tolerance

    Returns:
        Bisector plane

    Raises:
        DegenerateBisectorError: if the sites coincide within eps
    """
    a = as_point(site_a)
    b = as_point(site_b)
    if points_equal(a, b, eps):
        raise DegenerateBisectorError(
            f"Sites {a.tolist()} and {b.tolist()} coincide; bisector is undefined"
        )
    return Plane.from_normal_and_point(a - b, midpoint(a, b), eps)


def midpoint(site_a: PointLike, site_b: PointLike) -> np.ndarray:
    return (as_point(site_a) + as_point(site_b)) * 0.5
