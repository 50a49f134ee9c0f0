"""Tests for the scipy triangulation adapter."""

import numpy as np
import pytest

from py_delaunay.core.exceptions import InvalidTriangulation
from py_delaunay.core.halfedges import NONE, next_halfedge
from py_delaunay.core.mesh_index import MeshIndex
from py_delaunay.core.triangulator import as_flat_coords, chain_hull, triangulate


def signed_area(coords, ring):
    xy = coords.reshape(-1, 2)[ring]
    x, y = xy[:, 0], xy[:, 1]
    return 0.5 * np.sum(x * np.roll(y, -1) - np.roll(x, -1) * y)


class TestFlatCoords:
    """Test coordinate flattening."""

    def test_pairs(self):
        """Test that (x, y) pairs are flattened in order."""
        coords = as_flat_coords([(0, 1), (2, 3)])
        np.testing.assert_array_equal(coords, [0.0, 1.0, 2.0, 3.0])

    def test_odd_length(self):
        """Test that an odd number of scalars is rejected."""
        with pytest.raises(InvalidTriangulation):
            as_flat_coords([0.0, 1.0, 2.0])


class TestTriangulate:
    """Test conversion of Qhull output to half-edge arrays."""

    @pytest.fixture
    def random_coords(self):
        rng = np.random.default_rng(7)
        return rng.uniform(0, 100, size=(60, 2)).ravel()

    def test_array_lengths(self, random_coords):
        """Test that triangles and halfedges have equal length divisible by 3."""
        raw = triangulate(random_coords)

        assert len(raw.triangles) == len(raw.halfedges)
        assert len(raw.triangles) % 3 == 0
        assert raw.n_triangles > 0

    def test_twin_symmetry(self, random_coords):
        """Test that paired half-edges point back at each other and run opposite ways."""
        raw = triangulate(random_coords)

        for e, twin in enumerate(raw.halfedges):
            if twin == NONE:
                continue
            assert raw.halfedges[twin] == e
            assert raw.triangles[twin] == raw.triangles[next_halfedge(e)]
            assert raw.triangles[next_halfedge(twin)] == raw.triangles[e]

    def test_triangles_counter_clockwise(self, random_coords):
        """Test that every stored triangle is counter-clockwise."""
        raw = triangulate(random_coords)

        for t in range(raw.n_triangles):
            ring = raw.triangles[3 * t:3 * t + 3]
            assert signed_area(random_coords, ring) > 0

    def test_hull_counter_clockwise(self, random_coords):
        """Test that the hull runs counter-clockwise along boundary half-edges."""
        raw = triangulate(random_coords)

        assert signed_area(random_coords, raw.hull) > 0
        assert len(raw.hull) == np.count_nonzero(raw.halfedges == NONE)

    def test_hull_matches_scipy(self, random_coords):
        """Test that the hull holds the same vertices as scipy's ConvexHull."""
        from scipy.spatial import ConvexHull

        raw = triangulate(random_coords)
        expected = ConvexHull(random_coords.reshape(-1, 2)).vertices

        assert set(raw.hull.tolist()) == set(expected.tolist())

    def test_empty(self):
        """Test that no points give empty arrays."""
        raw = triangulate([])

        assert len(raw.triangles) == 0
        assert len(raw.hull) == 0

    def test_single_point(self):
        """Test that one point is a one-vertex hull without triangles."""
        raw = triangulate([5.0, 5.0])

        assert len(raw.triangles) == 0
        np.testing.assert_array_equal(raw.hull, [0])

    def test_two_points(self):
        """Test that two points are ordered by coordinate."""
        raw = triangulate([3.0, 4.0, 1.0, 2.0])

        assert len(raw.triangles) == 0
        np.testing.assert_array_equal(raw.hull, [1, 0])

    def test_identical_points(self):
        """Test that identical points collapse to their first occurrence."""
        raw = triangulate([2.0, 2.0, 2.0, 2.0, 2.0, 2.0])

        assert len(raw.triangles) == 0
        np.testing.assert_array_equal(raw.hull, [0])

    def test_collinear_without_joggle(self):
        """Test that collinear points give a triangle-free hull when joggling is off."""
        raw = triangulate([0.0, 0.0, 2.0, 0.0, 1.0, 0.0], joggle=False)

        assert len(raw.triangles) == 0
        np.testing.assert_array_equal(raw.hull, [0, 2, 1])

    def test_collinear_with_joggle(self):
        """Test that collinear points are triangulated after joggling."""
        raw = triangulate([0.0, 0.0, 1.0, 0.0, 2.0, 0.0], joggle=True)

        assert raw.n_triangles >= 1
        assert set(raw.triangles.tolist()) == {0, 1, 2}

    @pytest.mark.parametrize("slope,k", [
        (0.1, 4), (0.3, 5), (1 / 3, 7), (0.7, 10), (np.pi, 6), (0.1, 25),
    ])
    def test_collinear_slanted_with_joggle(self, slope, k):
        """Test that points on a slanted line triangulate into a consistent mesh."""
        xs = np.arange(k, dtype=float)
        coords = np.column_stack([xs, slope * xs + 0.2]).ravel()

        raw = triangulate(coords, joggle=True)
        mesh = MeshIndex.build(coords, raw)

        assert raw.n_triangles >= 1
        assert set(raw.hull.tolist()) <= set(range(k))
        for e, twin in enumerate(raw.halfedges):
            if twin != NONE:
                assert raw.halfedges[twin] == e
                assert raw.triangles[twin] == raw.triangles[next_halfedge(e)]
        assert np.all(mesh.inedges != NONE)


class TestChainHull:
    """Test hull recovery from boundary half-edges."""

    def test_square(self):
        """Test the hull of two triangles forming a square."""
        triangles = np.array([0, 1, 3, 0, 3, 2])
        halfedges = np.array([NONE, NONE, 3, 2, NONE, NONE])

        hull = chain_hull(triangles, halfedges)

        assert hull.tolist() == [0, 1, 3, 2]

    def test_no_boundary(self):
        """Test that a boundary-free table is rejected."""
        with pytest.raises(InvalidTriangulation):
            chain_hull(np.array([0, 1, 2]), np.array([0, 1, 2]))
