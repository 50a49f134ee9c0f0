"""Half-edge primitives and the raw triangulation container."""

from dataclasses import dataclass

import numpy as np

# Sentinel for "no such half-edge / vertex"
NONE = -1


def next_halfedge(e: int) -> int:
    """Next half-edge counter-clockwise within the same triangle."""
    return e - 2 if e % 3 == 2 else e + 1


def prev_halfedge(e: int) -> int:
    """Previous half-edge within the same triangle."""
    return e + 2 if e % 3 == 0 else e - 1


@dataclass(frozen=True)
class RawTriangulation:
    """Raw output of a triangulator.

    triangles[e] is the tail vertex of half-edge e, so each consecutive triple
    is one triangle. halfedges[e] is the twin of e, or NONE on the boundary.
    hull lists the convex hull vertices in the triangulator's winding order.
    """
    triangles: np.ndarray
    halfedges: np.ndarray
    hull: np.ndarray

    @classmethod
    def from_sequences(cls, triangles, halfedges, hull) -> "RawTriangulation":
        return cls(
            triangles=np.asarray(triangles, dtype=np.int32).ravel(),
            halfedges=np.asarray(halfedges, dtype=np.int32).ravel(),
            hull=np.asarray(hull, dtype=np.int32).ravel(),
        )

    @classmethod
    def empty(cls) -> "RawTriangulation":
        return cls.from_sequences([], [], [])

    @property
    def n_triangles(self) -> int:
        return len(self.triangles) // 3
