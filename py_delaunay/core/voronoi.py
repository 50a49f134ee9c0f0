"""Voronoi cells derived from a Delaunay mesh.

Each cell is built by clipping the bounding rectangle with the bisector
half-planes between a site and its Delaunay neighbours. On a Delaunay
triangulation those neighbours are exactly the sites whose bisectors bound
the cell, so hull cells need no special handling: they are closed by the
rectangle like any other.
"""

from typing import Iterator, List, Optional, Tuple

import numpy as np
import structlog

from ..config import settings
from .geometry import Bounds, Point
from .halfedges import NONE
from .walker import neighbors, step

logger = structlog.get_logger()


def compute_circumcenters(points: np.ndarray, triangles: np.ndarray) -> np.ndarray:
    """
    Circumcenter of every triangle.

    Flat triangles have no circumcenter; they get the midpoint of their
    longest edge instead.

    Args:
        points: Flat coordinates
        triangles: Flat vertex triples

    Returns:
        (n_triangles, 2) array
    """
    if len(triangles) == 0:
        return np.empty((0, 2), dtype=np.float64)

    coords = points.reshape(-1, 2)
    a = coords[triangles[0::3]]
    b = coords[triangles[1::3]]
    c = coords[triangles[2::3]]

    d = b - a
    e = c - a
    bl = (d ** 2).sum(axis=1)
    cl = (e ** 2).sum(axis=1)
    ab = 2 * (d[:, 0] * e[:, 1] - d[:, 1] * e[:, 0])

    flat = np.abs(ab) < 1e-12 * np.maximum(bl + cl, 1e-300)
    safe = np.where(flat, 1.0, ab)
    centers = np.empty_like(a)
    centers[:, 0] = a[:, 0] + (e[:, 1] * bl - d[:, 1] * cl) / safe
    centers[:, 1] = a[:, 1] + (d[:, 0] * cl - e[:, 0] * bl) / safe

    if np.any(flat):
        edges = np.stack([b - a, c - b, a - c], axis=1)
        starts = np.stack([a, b, c], axis=1)
        longest = np.argmax((edges ** 2).sum(axis=2), axis=1)
        rows = np.arange(len(a))
        midpoints = starts[rows, longest] + edges[rows, longest] / 2
        centers[flat] = midpoints[flat]

    return centers


def clip_half_plane(polygon: List[Point], nx: float, ny: float, limit: float) -> List[Point]:
    """Keep the part of a convex polygon where nx*x + ny*y <= limit."""
    clipped = []
    count = len(polygon)
    for k in range(count):
        p = polygon[k]
        q = polygon[(k + 1) % count]
        dp = nx * p[0] + ny * p[1] - limit
        dq = nx * q[0] + ny * q[1] - limit
        if dp <= 0:
            clipped.append(p)
        if (dp < 0 < dq) or (dq < 0 < dp):
            s = dp / (dp - dq)
            clipped.append((p[0] + s * (q[0] - p[0]), p[1] + s * (q[1] - p[1])))
    return clipped


def compute_polygon_centroid(vertices: np.ndarray) -> np.ndarray:
    """Compute the centroid of a polygon.

    Args:
        vertices: Array of [x, y] vertex coordinates, not closed

    Returns:
        [x, y] centroid coordinates
    """
    if len(vertices) < 3:
        return np.mean(vertices, axis=0)

    x = vertices[:, 0]
    y = vertices[:, 1]
    xn = np.roll(x, -1)
    yn = np.roll(y, -1)
    cross = x * yn - xn * y
    area = cross.sum()

    if abs(area) < 1e-10:
        return np.mean(vertices, axis=0)

    area *= 0.5
    cx = ((x + xn) * cross).sum() / (6.0 * area)
    cy = ((y + yn) * cross).sum() / (6.0 * area)
    return np.array([cx, cy])


class Voronoi:
    """Voronoi diagram of a Delaunay mesh, clipped to a rectangle.

    Reads the mesh without modifying it. Call ``update`` after the mesh
    was updated.
    """

    def __init__(self, delaunay, bounds):
        bounds = Bounds(*bounds)
        if not (bounds.xmax >= bounds.xmin and bounds.ymax >= bounds.ymin):
            logger.warning("Invalid Voronoi bounds", bounds=tuple(bounds))
            raise ValueError(f"invalid bounds {tuple(bounds)}")
        self.delaunay = delaunay
        self.bounds = bounds
        self.circumcenters = np.empty((0, 2), dtype=np.float64)
        self.update()

    def update(self) -> "Voronoi":
        """Recompute the circumcenters from the current mesh."""
        mesh = self.delaunay.mesh
        self.circumcenters = compute_circumcenters(mesh.points, mesh.triangles)
        return self

    def cell_polygon(self, i: int) -> Optional[List[Point]]:
        """
        Clipped Voronoi cell of site i.

        Args:
            i: Site (vertex) index

        Returns:
            Closed ring of points (last equals first), or None when the cell
            is empty: a coincident site without triangles, or a cell lying
            entirely outside the bounds
        """
        mesh = self.delaunay.mesh
        if mesh.inedges[i] == NONE:
            return None

        points = mesh.points
        xi, yi = points[2 * i], points[2 * i + 1]
        polygon = self.bounds.corners()
        for j in neighbors(mesh, i):
            xj, yj = points[2 * j], points[2 * j + 1]
            if xj == xi and yj == yi:
                continue
            nx, ny = xj - xi, yj - yi
            limit = (xj * xj + yj * yj - xi * xi - yi * yi) / 2
            polygon = clip_half_plane(polygon, nx, ny, limit)
            if not polygon:
                return None

        if len(polygon) < 3:
            return None
        polygon = [(float(x), float(y)) for x, y in polygon]
        polygon.append(polygon[0])
        return polygon

    def cell_polygons(self) -> Iterator[Tuple[int, List[Point]]]:
        """Yield (site, ring) for every non-empty cell."""
        for i in range(self.delaunay.mesh.n_points):
            polygon = self.cell_polygon(i)
            if polygon is not None:
                yield i, polygon

    def contains(self, i: int, x: float, y: float) -> bool:
        """True if (x, y) is in the cell of site i, i.e. i is the nearest site."""
        if x != x or y != y:
            return False
        return step(self.delaunay.mesh, i, x, y) == i

    def relax(self, n_iterations: Optional[int] = None) -> "Voronoi":
        """Apply Lloyd's relaxation to the sites.

        Moves each site to the centroid of its clipped cell, then rebuilds
        the mesh. Sites without a cell stay where they are.

        Args:
            n_iterations: Number of iterations, defaults to settings.relax_iterations

        Returns:
            self, updated for the relaxed mesh
        """
        if n_iterations is None:
            n_iterations = settings.relax_iterations
        logger.info("Starting Lloyd's relaxation", iterations=n_iterations,
                    sites=self.delaunay.n_points)

        for iteration in range(n_iterations):
            coords = self.delaunay.points.reshape(-1, 2)
            centroids = {}
            for i, polygon in self.cell_polygons():
                centroids[i] = compute_polygon_centroid(np.array(polygon[:-1]))

            for i, centroid in centroids.items():
                coords[i, 0] = np.clip(centroid[0], self.bounds.xmin, self.bounds.xmax)
                coords[i, 1] = np.clip(centroid[1], self.bounds.ymin, self.bounds.ymax)

            self.delaunay.update()
            self.update()
            logger.debug(f"Relaxation iteration {iteration + 1} complete")

        return self

