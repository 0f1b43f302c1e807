"""Tests for site generation and the Alea PRNG."""

import numpy as np
import pytest

from py_voronoi3d.core.alea_prng import AleaPRNG
from py_voronoi3d.core.exceptions import InvalidInputError
from py_voronoi3d.core.sites import generate_sites, sort_by_distance
from py_voronoi3d.utils.random import get_prng, set_random_seed


class TestAleaPRNG:
    """Test the seeded generator."""

    def test_same_seed_same_sequence(self):
        """Test reproducibility."""
        a = AleaPRNG("test_seed")
        b = AleaPRNG("test_seed")
        assert [a.random() for _ in range(20)] == [b.random() for _ in range(20)]

    def test_different_seeds(self):
        """Test that different seeds diverge."""
        a = AleaPRNG("seed1")
        b = AleaPRNG("seed2")
        assert [a.random() for _ in range(5)] != [b.random() for _ in range(5)]

    def test_range_and_call_count(self):
        """Test output range and the call counter."""
        prng = AleaPRNG(42)
        values = [prng.random() for _ in range(1000)]
        assert all(0.0 <= v < 1.0 for v in values)
        assert prng.call_count == 1000

    def test_uniform(self):
        """Test scaled draws."""
        prng = AleaPRNG("uniform")
        values = [prng.uniform(-3.0, 7.0) for _ in range(500)]
        assert all(-3.0 <= v < 7.0 for v in values)

    def test_choice(self):
        """Test choice and the empty-sequence error."""
        prng = AleaPRNG("choice")
        assert prng.choice([1, 2, 3]) in (1, 2, 3)
        with pytest.raises(IndexError):
            prng.choice([])


class TestDefaultPRNG:
    """Test the process default generator."""

    def test_set_random_seed(self):
        """Test that reseeding restarts the sequence."""
        set_random_seed("global")
        first = get_prng().random()
        set_random_seed("global")
        assert get_prng().random() == first
        assert get_prng() is get_prng()


class TestGenerateSites:
    """Test random site generation."""

    def test_count_and_bounds(self):
        """Test that sites are inside the box."""
        sites = generate_sites(50, [-1, 0, 2], [1, 5, 3], prng=AleaPRNG("bounds"))
        assert len(sites) == 50
        arr = np.array(sites)
        assert np.all(arr >= [-1, 0, 2])
        assert np.all(arr <= [1, 5, 3])

    def test_reproducible(self):
        """Test that the injected PRNG fixes the sites."""
        s1 = generate_sites(10, [0, 0, 0], [1, 1, 1], prng=AleaPRNG("x"))
        s2 = generate_sites(10, [0, 0, 0], [1, 1, 1], prng=AleaPRNG("x"))
        np.testing.assert_array_equal(np.array(s1), np.array(s2))

    def test_unique(self):
        """Test that no site repeats."""
        sites = generate_sites(100, [0, 0, 0], [1, 1, 1], prng=AleaPRNG("unique"))
        assert len({tuple(s) for s in sites}) == 100

    def test_include_corners(self):
        """Test that the min and max corners are appended."""
        sites = generate_sites(3, [0, 0, 0], [2, 2, 2], prng=AleaPRNG("c"), include_corners=True)
        assert len(sites) == 5
        np.testing.assert_array_equal(sites[-2], [0, 0, 0])
        np.testing.assert_array_equal(sites[-1], [2, 2, 2])

    def test_invalid_arguments(self):
        """Test negative counts and degenerate boxes."""
        with pytest.raises(InvalidInputError):
            generate_sites(-1, [0, 0, 0], [1, 1, 1])
        with pytest.raises(InvalidInputError):
            generate_sites(3, [0, 0, 0], [0, 1, 1])


class TestSortByDistance:
    """Test distance ordering."""

    def test_sort(self):
        """Test closest-first order with stable ties."""
        points = [[5, 0, 0], [1, 0, 0], [0, 3, 0], [-1, 0, 0]]
        result = sort_by_distance(points, [0, 0, 0])
        np.testing.assert_array_equal(np.array(result),
                                      [[1, 0, 0], [-1, 0, 0], [0, 3, 0], [5, 0, 0]])
