"""Greedy point location over the half-edge mesh.

``find`` walks from a start vertex to a vertex whose neighbours are all
farther from the query point. On a valid Delaunay triangulation that vertex
is the nearest site. The walk is a local search: on inconsistent half-edge
tables the rotation around a vertex stops early and the best vertex seen so
far is used, so queries never raise on a built mesh.
"""

from typing import Iterator

from .halfedges import NONE, next_halfedge
from .mesh_index import MeshIndex


def _dist2(points, v: int, x: float, y: float) -> float:
    return (x - points[2 * v]) ** 2 + (y - points[2 * v + 1]) ** 2


def _check_vertex(mesh: MeshIndex, i: int) -> None:
    if not 0 <= i < mesh.n_points:
        raise IndexError(f"vertex {i} out of range for {mesh.n_points} points")


def step(mesh: MeshIndex, i: int, x: float, y: float) -> int:
    """
    One descent step from vertex i toward (x, y).

    Rotates around i and returns the closest of i and its neighbours.
    On the hull the rotation runs into a boundary half-edge before it sees
    the last neighbour, which is then taken from the hull itself.

    Args:
        mesh: Built mesh index
        i: Current vertex
        x, y: Query point

    Returns:
        Closest vertex found, ``(i + 1) % n`` when i has no triangle,
        NONE on an empty mesh
    """
    n = mesh.n_points
    if n == 0:
        return NONE
    _check_vertex(mesh, i)
    points, inedges = mesh.points, mesh.inedges
    if inedges[i] == NONE:
        return (i + 1) % n

    triangles, halfedges = mesh.triangles, mesh.halfedges
    hull, hull_index = mesh.hull, mesh.hull_index

    c = i
    dc = _dist2(points, i, x, y)
    e0 = e = int(inedges[i])
    while True:
        t = int(triangles[e])
        dt = _dist2(points, t, x, y)
        if dt < dc:
            dc = dt
            c = t

        e = next_halfedge(e)
        if triangles[e] != i:
            break  # bad triangulation

        e = int(halfedges[e])
        if e == NONE:
            e = int(hull[(hull_index[i] + 1) % len(hull)])
            if e != t and _dist2(points, e, x, y) < dc:
                return e
            break
        if e == e0:
            break

    return c


def find(mesh: MeshIndex, x: float, y: float, start: int = 0) -> int:
    """
    Find the vertex nearest to (x, y) by repeated descent steps.

    The walk stops at a fixed point, when it comes back to ``start``, or
    when it would revisit the vertex from two steps earlier. The last two
    only trigger on degenerate geometry and accept the current answer.

    Args:
        mesh: Built mesh index
        x, y: Query point
        start: Vertex to start walking from

    Returns:
        Vertex index, NONE on an empty mesh
    """
    if mesh.n_points == 0:
        return NONE
    _check_vertex(mesh, start)

    previous = current = start
    c = step(mesh, start, x, y)
    while c >= 0 and c != current and c != start and c != previous:
        previous, current = current, c
        c = step(mesh, current, x, y)
    return c


def neighbors(mesh: MeshIndex, i: int) -> Iterator[int]:
    """
    Yield the Delaunay neighbours of vertex i.

    Same rotation as ``step``. Vertices without a triangle (coincident
    points dropped by the triangulator) have no neighbours.
    """
    _check_vertex(mesh, i)
    e0 = int(mesh.inedges[i])
    if e0 == NONE:
        return

    triangles, halfedges = mesh.triangles, mesh.halfedges
    hull, hull_index = mesh.hull, mesh.hull_index

    e = e0
    while True:
        p0 = int(triangles[e])
        if p0 != i:
            yield p0

        e = next_halfedge(e)
        if triangles[e] != i:
            return

        e = int(halfedges[e])
        if e == NONE:
            p = int(hull[(hull_index[i] + 1) % len(hull)])
            if p != p0 and p != i:
                yield p
            return
        if e == e0:
            return
