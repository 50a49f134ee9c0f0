"""Geometry value types and read-only extractors over a mesh index."""

from dataclasses import dataclass
from typing import Iterator, List, NamedTuple, Tuple

import numpy as np

from .mesh_index import MeshIndex

Point = Tuple[float, float]


class Triangle(NamedTuple):
    """Triangle with its winding reversed relative to the stored triple."""
    a: Point
    b: Point
    c: Point


class Segment(NamedTuple):
    """Line segment between two points."""
    start: Point
    end: Point


class Bounds(NamedTuple):
    """Axis-aligned clipping rectangle."""
    xmin: float
    ymin: float
    xmax: float
    ymax: float

    @property
    def width(self) -> float:
        return self.xmax - self.xmin

    @property
    def height(self) -> float:
        return self.ymax - self.ymin

    @property
    def area(self) -> float:
        return self.width * self.height

    def corners(self) -> List[Point]:
        """Corners in counter-clockwise order."""
        return [
            (self.xmin, self.ymin),
            (self.xmax, self.ymin),
            (self.xmax, self.ymax),
            (self.xmin, self.ymax),
        ]


@dataclass(frozen=True)
class HullContour:
    """Closed polyline through the hull points in hull order."""
    points: Tuple[Point, ...]
    closed: bool = True

    def segments(self) -> Iterator[Segment]:
        """Consecutive segments, including the closing one back to the first point."""
        n = len(self.points)
        for i in range(n):
            yield Segment(self.points[i], self.points[(i + 1) % n])

    def __len__(self) -> int:
        return len(self.points)


def point(coords: np.ndarray, v: int) -> Point:
    """Coordinates of vertex v as a tuple of floats."""
    return float(coords[2 * v]), float(coords[2 * v + 1])


def iter_triangles(mesh: MeshIndex) -> Iterator[Triangle]:
    """
    Yield every triangle of the mesh.

    The stored triple (a, b, c) is emitted as (c, b, a): the triangulator
    produces counter-clockwise triangles and consumers expect the reverse.
    """
    coords, triangles = mesh.points, mesh.triangles
    for i in range(0, len(triangles), 3):
        a, b, c = triangles[i], triangles[i + 1], triangles[i + 2]
        yield Triangle(point(coords, c), point(coords, b), point(coords, a))


def iter_triangle_polygons(mesh: MeshIndex) -> Iterator[List[Point]]:
    """Yield each triangle as a closed ring in stored order."""
    coords, triangles = mesh.points, mesh.triangles
    for i in range(0, len(triangles), 3):
        ring = [point(coords, triangles[i + k]) for k in range(3)]
        ring.append(ring[0])
        yield ring


def iter_interior_edges(mesh: MeshIndex) -> Iterator[Segment]:
    """
    Yield every interior edge of the triangulation once.

    A pair of twins is emitted from its lower half-edge only. Boundary
    half-edges have twin NONE, which sorts below every index, so hull
    edges are never emitted.
    """
    coords, triangles, halfedges = mesh.points, mesh.triangles, mesh.halfedges
    for e in range(len(halfedges)):
        j = halfedges[e]
        if j < e:
            continue
        yield Segment(point(coords, triangles[e]), point(coords, triangles[j]))


def hull_contour(mesh: MeshIndex) -> HullContour:
    """Closed contour over the hull in stored order."""
    return HullContour(tuple(point(mesh.points, h) for h in mesh.hull))


def hull_polygon(mesh: MeshIndex) -> List[Point]:
    """Hull points as a closed ring, first point repeated at the end."""
    ring = [point(mesh.points, h) for h in mesh.hull]
    if ring:
        ring.append(ring[0])
    return ring
