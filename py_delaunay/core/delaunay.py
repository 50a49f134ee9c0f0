"""Delaunay mesh: owns the point set, its triangulation and the derived indices."""

from typing import Callable, Iterator, List, Optional

import numpy as np
import structlog

from . import geometry, walker
from .geometry import HullContour, Point, Segment, Triangle
from .halfedges import RawTriangulation, next_halfedge, prev_halfedge
from .mesh_index import MeshIndex
from .triangulator import as_flat_coords, triangulate
from .voronoi import Voronoi

logger = structlog.get_logger()

Triangulator = Callable[[np.ndarray], RawTriangulation]


class Delaunay:
    """Delaunay triangulation with adjacency indices and point location.

    The mesh owns a copy of the coordinates (``points``, flat
    ``[x0, y0, x1, y1, ...]``). To move points, mutate ``points`` in place
    and call ``update()``. Arrays exposed by the mesh are read-only and are
    replaced on every update, so they must not be kept across one.

    Not thread safe: ``update()`` must not run concurrently with queries.
    """

    def __init__(self, coords, triangulator: Triangulator = triangulate):
        """
        Triangulate a flat coordinate array.

        Args:
            coords: Flat coordinates, 2*n values
            triangulator: Callable producing a RawTriangulation from flat
                coordinates, scipy's Qhull by default
        """
        self.points = np.array(as_flat_coords(coords), dtype=np.float64)
        self.triangulator = triangulator
        self.mesh = MeshIndex.build(self.points, triangulator(self.points))
        logger.info("Delaunay mesh built", points=self.n_points,
                    triangles=self.mesh.n_triangles, hull=len(self.mesh.hull))

    @classmethod
    def from_points(cls, points, triangulator: Triangulator = triangulate) -> "Delaunay":
        """Build from a sequence of (x, y) pairs or an (n, 2) array."""
        return cls(as_flat_coords(points), triangulator)

    def update(self, raw: Optional[RawTriangulation] = None) -> "Delaunay":
        """
        Rebuild the indices after the points changed.

        Args:
            raw: Triangulation of the current points. When omitted the
                triangulator is run again over ``points``.

        Returns:
            self

        Raises:
            InvalidTriangulation: If ``raw`` is malformed; the previous mesh
                stays in place
        """
        if raw is None:
            raw = self.triangulator(self.points)
        self.mesh.rebuild(self.points, raw)
        logger.info("Delaunay mesh updated", points=self.n_points,
                    triangles=self.mesh.n_triangles, hull=len(self.mesh.hull))
        return self

    @property
    def n_points(self) -> int:
        return len(self.points) // 2

    # Borrowed read-only views, valid until the next update()

    @property
    def triangles_array(self) -> np.ndarray:
        return self.mesh.triangles

    @property
    def halfedges(self) -> np.ndarray:
        return self.mesh.halfedges

    @property
    def hull(self) -> np.ndarray:
        return self.mesh.hull

    @property
    def inedges(self) -> np.ndarray:
        return self.mesh.inedges

    @property
    def hull_index(self) -> np.ndarray:
        return self.mesh.hull_index

    # Geometry

    def triangles(self) -> Iterator[Triangle]:
        return geometry.iter_triangles(self.mesh)

    def triangle_polygons(self) -> Iterator[List[Point]]:
        return geometry.iter_triangle_polygons(self.mesh)

    def interior_edges(self) -> Iterator[Segment]:
        """Edges shared by two triangles, each emitted once."""
        return geometry.iter_interior_edges(self.mesh)

    def hull_contour(self) -> HullContour:
        return geometry.hull_contour(self.mesh)

    def hull_polygon(self) -> List[Point]:
        return geometry.hull_polygon(self.mesh)

    # Point location

    @staticmethod
    def next_halfedge(e: int) -> int:
        return next_halfedge(e)

    @staticmethod
    def prev_halfedge(e: int) -> int:
        return prev_halfedge(e)

    def step(self, i: int, x: float, y: float) -> int:
        return walker.step(self.mesh, i, x, y)

    def find(self, x: float, y: float, start: int = 0) -> int:
        """Index of the site nearest to (x, y), walking from ``start``."""
        return walker.find(self.mesh, x, y, start)

    def neighbors(self, i: int) -> Iterator[int]:
        return walker.neighbors(self.mesh, i)

    def voronoi(self, bounds) -> Voronoi:
        """Voronoi diagram clipped to ``bounds`` (xmin, ymin, xmax, ymax)."""
        return Voronoi(self, bounds)
