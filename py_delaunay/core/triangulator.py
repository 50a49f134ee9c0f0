"""Adapter from scipy's Qhull Delaunay triangulation to raw half-edge arrays.

scipy.spatial.Delaunay reports triangles as ``simplices`` plus a
``neighbors`` table (neighbors[t][k] is the triangle opposite vertex k).
The mesh layer works on flat half-edge arrays instead:

- half-edge ``e = 3t + k`` runs from ``simplices[t][k]`` to
  ``simplices[t][(k + 1) % 3]``
- its twin lives in the triangle opposite vertex ``(k + 2) % 3``
- the hull is the chain of boundary half-edges, counter-clockwise
"""

from typing import Optional

import numpy as np
import structlog
from scipy import spatial
from scipy.spatial import QhullError

from ..config import settings
from .exceptions import InvalidTriangulation
from .halfedges import NONE, RawTriangulation, next_halfedge

logger = structlog.get_logger()

JOGGLE_OPTIONS = "QJ"


def as_flat_coords(points) -> np.ndarray:
    """Flatten ``(x, y)`` pairs or an ``(n, 2)`` array to ``[x0, y0, x1, y1, ...]``."""
    coords = np.asarray(points, dtype=np.float64).ravel()
    if len(coords) % 2:
        logger.warning("Odd coordinate count", length=len(coords))
        raise InvalidTriangulation(f"point array has odd length {len(coords)}")
    return coords


def triangulate(coords, qhull_options: Optional[str] = None,
                joggle: Optional[bool] = None) -> RawTriangulation:
    """
    Triangulate a flat coordinate array.

    Args:
        coords: Flat coordinates, 2*n values
        qhull_options: Qhull options, defaults to settings.qhull_options
        joggle: Retry degenerate input with Qhull's joggle option,
            defaults to settings.joggle_degenerate

    Returns:
        RawTriangulation with counter-clockwise triangles and hull
    """
    coords = as_flat_coords(coords)
    n = len(coords) // 2
    if n == 0:
        return RawTriangulation.empty()

    points = coords.reshape(n, 2)
    if qhull_options is None:
        qhull_options = settings.qhull_options
    if joggle is None:
        joggle = settings.joggle_degenerate

    if n < 3:
        return collinear_hull(points)

    reorient = True
    try:
        tri = spatial.Delaunay(points, qhull_options=qhull_options)
    except QhullError as exc:
        distinct = len(np.unique(points, axis=0))
        logger.info("Qhull rejected input", points=n, distinct=distinct,
                    error=str(exc).strip().split("\n")[0])
        if distinct < 3 or not joggle:
            return collinear_hull(points)
        try:
            tri = spatial.Delaunay(points, qhull_options=JOGGLE_OPTIONS)
        except QhullError:
            logger.info("Joggled input rejected too", points=n)
            return collinear_hull(points)
        # Qhull's orientation holds in the joggled frame, not in the input coordinates
        reorient = False

    return from_simplices(tri.simplices, tri.neighbors, points, reorient=reorient)


def collinear_hull(points: np.ndarray) -> RawTriangulation:
    """
    Build the triangle-free output for fewer than three distinct or collinear points.

    The hull lists one representative (first occurrence) of every distinct
    point, ordered lexicographically by (x, y).
    """
    _, first = np.unique(points, axis=0, return_index=True)
    logger.debug("Triangle-free triangulation", points=len(points), hull=len(first))
    return RawTriangulation.from_sequences([], [], first)


def from_simplices(simplices: np.ndarray, neighbors: np.ndarray, points: np.ndarray,
                   reorient: bool = True) -> RawTriangulation:
    """
    Convert Qhull simplices and neighbour table to half-edge arrays.

    Args:
        simplices: (T, 3) vertex indices
        neighbors: (T, 3) neighbour triangle opposite each vertex, -1 on the boundary
        points: (n, 2) coordinates, used to orient triangles counter-clockwise
        reorient: Flip clockwise triangles. Off for joggled input, where
            Qhull's counter-clockwise simplices must be kept as they are

    Returns:
        RawTriangulation
    """
    simplices = np.array(simplices, dtype=np.int32).reshape(-1, 3)
    neighbors = np.array(neighbors, dtype=np.int32).reshape(-1, 3)
    n_triangles = len(simplices)
    if n_triangles == 0:
        return collinear_hull(points)

    clockwise = np.zeros(n_triangles, dtype=bool)
    if reorient:
        # Swapping two vertices swaps the neighbours opposite them as well
        a, b, c = (points[simplices[:, k]] for k in range(3))
        cross = (b[:, 0] - a[:, 0]) * (c[:, 1] - a[:, 1]) - (b[:, 1] - a[:, 1]) * (c[:, 0] - a[:, 0])
        clockwise = cross < 0
        simplices[clockwise] = simplices[clockwise][:, [0, 2, 1]]
        neighbors[clockwise] = neighbors[clockwise][:, [0, 2, 1]]

    edges = np.arange(3 * n_triangles)
    tri_idx = edges // 3
    local = edges % 3
    heads = simplices[tri_idx, (local + 1) % 3]
    opposite = neighbors[tri_idx, (local + 2) % 3]

    halfedges = np.full(3 * n_triangles, NONE, dtype=np.int32)
    paired = opposite >= 0
    twin_tri = opposite[paired]
    # The twin starts where e ends
    twin_local = np.argmax(simplices[twin_tri] == heads[paired][:, None], axis=1)
    halfedges[paired] = 3 * twin_tri + twin_local

    triangles = simplices.ravel()
    hull = chain_hull(triangles, halfedges)

    logger.debug("Converted Qhull triangulation",
                 triangles=n_triangles, hull=len(hull), flipped=int(clockwise.sum()))
    return RawTriangulation.from_sequences(triangles, halfedges, hull)


def chain_hull(triangles: np.ndarray, halfedges: np.ndarray) -> np.ndarray:
    """
    Order the boundary vertices by following boundary half-edges tail to head.

    Raises:
        InvalidTriangulation: If the boundary is not a single closed loop
    """
    boundary = np.flatnonzero(halfedges == NONE)
    successor = {}
    for e in boundary:
        successor[int(triangles[e])] = int(triangles[next_halfedge(int(e))])

    if len(boundary) == 0 or len(successor) != len(boundary):
        logger.warning("Boundary is not a simple loop", boundary=len(boundary))
        raise InvalidTriangulation("triangulation boundary is not a simple loop")

    start = int(triangles[boundary[0]])
    hull = [start]
    v = successor[start]
    while v != start and len(hull) < len(boundary):
        hull.append(v)
        v = successor.get(v, NONE)

    if v != start or len(hull) != len(boundary):
        logger.warning("Boundary does not close", boundary=len(boundary), walked=len(hull))
        raise InvalidTriangulation("triangulation boundary is not a single closed loop")
    return np.array(hull, dtype=np.int32)
