"""Mesh index construction.
Derives the two auxiliary indices the walker and the Voronoi layer need:

- ``inedges[v]``: a half-edge whose head is ``v``. On the hull a boundary
  half-edge is preferred, so a rotation started at ``v`` sweeps every
  triangle around it before running off the boundary.
- ``hull_index[v]``: position of ``v`` in ``hull``, or NONE.

With one or two distinct points there are no triangles. The index then
substitutes a single synthetic triangle ``[hull[0], hull[-1], hull[-1]]``
so that the walker needs no special cases.
"""

from dataclasses import dataclass

import numpy as np
import structlog

from .exceptions import InvalidTriangulation
from .halfedges import NONE, RawTriangulation

logger = structlog.get_logger()


def _readonly(array: np.ndarray) -> np.ndarray:
    array.setflags(write=False)
    return array


def validate(points: np.ndarray, raw: RawTriangulation) -> None:
    """
    Check the structural invariants of a raw triangulation.

    Geometry (the Delaunay property) is not checked, only array shapes,
    index ranges, twin symmetry and that every boundary half-edge starts
    on the hull.

    Raises:
        InvalidTriangulation: On the first violated invariant
    """
    n = len(points) // 2
    triangles, halfedges, hull = raw.triangles, raw.halfedges, raw.hull

    problem = None
    if len(points) % 2:
        problem = f"point array has odd length {len(points)}"
    elif len(triangles) != len(halfedges):
        problem = f"{len(triangles)} triangle slots but {len(halfedges)} half-edges"
    elif len(triangles) % 3:
        problem = f"triangle array length {len(triangles)} is not a multiple of 3"
    elif len(triangles) and (triangles.min() < 0 or triangles.max() >= n):
        problem = "triangle vertex index out of range"
    elif len(hull) and (hull.min() < 0 or hull.max() >= n):
        problem = "hull vertex index out of range"
    elif len(halfedges) and (halfedges.min() < NONE or halfedges.max() >= len(halfedges)):
        problem = "half-edge twin index out of range"
    else:
        edges = np.flatnonzero(halfedges != NONE)
        twins = halfedges[edges]
        boundary = np.flatnonzero(halfedges == NONE)
        if np.any(twins == edges) or np.any(halfedges[twins] != edges):
            problem = "half-edge twins are not symmetric"
        elif len(boundary) and not len(hull):
            problem = "boundary half-edges but an empty hull"
        elif not np.all(np.isin(triangles[boundary], hull)):
            problem = "boundary half-edge starts off the hull"

    if problem is not None:
        logger.warning("Invalid triangulation", reason=problem, points=n,
                       halfedges=len(halfedges), hull=len(hull))
        raise InvalidTriangulation(problem)


def compute_inedges(triangles: np.ndarray, halfedges: np.ndarray, n: int) -> np.ndarray:
    """
    Pick one incoming half-edge per vertex.

    Equivalent to visiting every half-edge e in order and setting
    ``inedges[head(e)] = e`` when e is a boundary half-edge or the slot is
    still unset: boundary vertices end up with their last boundary half-edge,
    interior vertices with their first incoming one.
    """
    inedges = np.full(n, NONE, dtype=np.int32)
    if len(triangles) == 0:
        return inedges

    edges = np.arange(len(triangles), dtype=np.int32)
    heads = triangles[np.where(edges % 3 == 2, edges - 2, edges + 1)]

    # First incoming half-edge per vertex
    vertices, first = np.unique(heads, return_index=True)
    inedges[vertices] = edges[first]

    # Last boundary half-edge wins over any interior one
    boundary = edges[halfedges == NONE][::-1]
    vertices, last = np.unique(heads[boundary], return_index=True)
    inedges[vertices] = boundary[last]
    return inedges


@dataclass
class MeshIndex:
    """Raw triangulation arrays plus the derived vertex indices.

    All arrays are read-only views owned by the index. ``rebuild`` replaces
    them wholesale, so callers must not hold on to them across a rebuild.
    """
    points: np.ndarray
    triangles: np.ndarray
    halfedges: np.ndarray
    hull: np.ndarray
    inedges: np.ndarray
    hull_index: np.ndarray
    degenerate: bool = False

    @property
    def n_points(self) -> int:
        return len(self.points) // 2

    @property
    def n_triangles(self) -> int:
        return len(self.triangles) // 3

    @classmethod
    def build(cls, points, raw: RawTriangulation) -> "MeshIndex":
        """
        Build the index for a point set and its raw triangulation.

        Args:
            points: Flat coordinates, 2*n values
            raw: Triangulation of those points

        Returns:
            New MeshIndex

        Raises:
            InvalidTriangulation: If the raw arrays violate the length,
                range, twin or hull invariants
        """
        points = np.asarray(points, dtype=np.float64).ravel()
        validate(points, raw)
        n = len(points) // 2

        triangles = np.array(raw.triangles, dtype=np.int32)
        halfedges = np.array(raw.halfedges, dtype=np.int32)
        hull = np.array(raw.hull, dtype=np.int32)

        inedges = compute_inedges(triangles, halfedges, n)
        hull_index = np.full(n, NONE, dtype=np.int32)
        hull_index[hull] = np.arange(len(hull), dtype=np.int32)

        # Degenerate case: 1 or 2 distinct points
        degenerate = 1 <= len(hull) <= 2
        if degenerate:
            triangles = np.array([hull[0], hull[-1], hull[-1]], dtype=np.int32)
            halfedges = np.full(3, NONE, dtype=np.int32)
            inedges.fill(NONE)
            inedges[hull[0]] = 1
            if len(hull) == 2:
                inedges[hull[1]] = 0

        logger.debug("Mesh index built", points=n, triangles=len(triangles) // 3,
                     hull=len(hull), degenerate=degenerate)

        return cls(
            points=_readonly(np.array(points)),
            triangles=_readonly(triangles),
            halfedges=_readonly(halfedges),
            hull=_readonly(hull),
            inedges=_readonly(inedges),
            hull_index=_readonly(hull_index),
            degenerate=degenerate,
        )

    def rebuild(self, points, raw: RawTriangulation) -> None:
        """Recompute every array in place; on error the current state is kept."""
        fresh = MeshIndex.build(points, raw)
        self.points = fresh.points
        self.triangles = fresh.triangles
        self.halfedges = fresh.halfedges
        self.hull = fresh.hull
        self.inedges = fresh.inedges
        self.hull_index = fresh.hull_index
        self.degenerate = fresh.degenerate
