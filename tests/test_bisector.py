"""Tests for bisector plane construction."""

import numpy as np
import pytest

from py_voronoi3d.core.bisector import bisector, midpoint
from py_voronoi3d.core.exceptions import DegenerateBisectorError


SITE_PAIRS = [
    ([0, 0, 0], [10, 0, 0]),
    ([1, 2, 3], [-4, 5, 0.5]),
    ([0.1, 0.2, 0.3], [0.1, 0.2, 0.4]),
    ([-7, 3, 2], [8, -1, 6]),
]


class TestBisector:
    """Test bisector geometry."""

    def test_two_site_scenario(self):
        """Test the bisector between (0,0,0) and (10,0,0)."""
        plane = bisector([0, 0, 0], [10, 0, 0])
        np.testing.assert_allclose(plane.normal, [-1, 0, 0])
        assert plane.distance_to_point([5, 0, 0]) == pytest.approx(0.0)
        np.testing.assert_allclose(plane.anchor, [5, 0, 0])

    @pytest.mark.parametrize("a,b", SITE_PAIRS)
    def test_equidistant(self, a, b):
        """Test that both sites are equally far from the plane, on opposite sides."""
        plane = bisector(a, b)
        da = plane.distance_to_point(a)
        db = plane.distance_to_point(b)
        assert da > 0
        assert da == pytest.approx(-db)
        assert plane.distance_to_point(midpoint(a, b)) == pytest.approx(0.0, abs=1e-12)

    @pytest.mark.parametrize("a,b", SITE_PAIRS)
    def test_opposite_normals(self, a, b):
        """Test that swapping the sites flips the normal."""
        ab = bisector(a, b)
        ba = bisector(b, a)
        np.testing.assert_allclose(ab.normal, -ba.normal, atol=1e-12)
        assert ab.is_coincident(ba.flipped)

    def test_coincident_sites(self):
        """Test that coincident sites report a degeneracy."""
        with pytest.raises(DegenerateBisectorError):
            bisector([1, 1, 1], [1, 1, 1])
        with pytest.raises(DegenerateBisectorError):
            bisector([1, 1, 1], [1, 1, 1 + 1e-9])
