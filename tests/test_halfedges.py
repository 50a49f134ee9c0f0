"""Tests for half-edge primitives."""

import numpy as np
import pytest

from py_delaunay.core.halfedges import NONE, RawTriangulation, next_halfedge, prev_halfedge


class TestRotation:
    """Test in-triangle half-edge rotation."""

    @pytest.mark.parametrize("e,expected", [(0, 1), (1, 2), (2, 0), (3, 4), (5, 3), (8, 6)])
    def test_next_halfedge(self, e, expected):
        """Test that next_halfedge cycles within a triangle."""
        assert next_halfedge(e) == expected

    @pytest.mark.parametrize("e,expected", [(0, 2), (1, 0), (2, 1), (3, 5), (4, 3), (7, 6)])
    def test_prev_halfedge(self, e, expected):
        """Test that prev_halfedge is the reverse rotation."""
        assert prev_halfedge(e) == expected

    def test_inverse(self):
        """Test that prev undoes next for every edge."""
        for e in range(30):
            assert prev_halfedge(next_halfedge(e)) == e
            assert next_halfedge(prev_halfedge(e)) == e
            assert next_halfedge(e) // 3 == e // 3


class TestRawTriangulation:
    """Test the raw triangulation container."""

    def test_from_sequences(self):
        """Test conversion of plain lists to int32 arrays."""
        raw = RawTriangulation.from_sequences([0, 1, 2], [NONE, NONE, NONE], [0, 1, 2])

        assert raw.triangles.dtype == np.int32
        assert raw.n_triangles == 1
        np.testing.assert_array_equal(raw.hull, [0, 1, 2])

    def test_empty(self):
        """Test the empty triangulation."""
        raw = RawTriangulation.empty()

        assert raw.n_triangles == 0
        assert len(raw.halfedges) == 0
        assert len(raw.hull) == 0
