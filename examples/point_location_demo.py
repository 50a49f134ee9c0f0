#!/usr/bin/env python3
"""
Demonstration of the triangulation layer.

This script shows:
1. Building a mesh from random points
2. Extracting triangles, interior edges and the hull
3. Nearest-site queries with find()
4. Clipped Voronoi cells and Lloyd's relaxation
5. Moving points and calling update()
"""

import numpy as np
from py_delaunay.config import configure_logging
from py_delaunay.core import Delaunay


def main():
    configure_logging()
    rng = np.random.default_rng(42)
    points = rng.uniform(0, 100, size=(200, 2))

    print("=== Triangulation Layer Demo ===\n")

    # 1. Build the mesh
    print("1. Building mesh...")
    delaunay = Delaunay.from_points(points)
    print(f"   - Points: {delaunay.n_points}")
    print(f"   - Triangles: {len(delaunay.triangles_array) // 3}")
    print(f"   - Hull vertices: {len(delaunay.hull)}")

    # 2. Geometry
    print("\n2. Extracting geometry...")
    edges = list(delaunay.interior_edges())
    contour = delaunay.hull_contour()
    first = next(delaunay.triangles())
    print(f"   - Interior edges: {len(edges)}")
    print(f"   - Hull contour segments: {len(list(contour.segments()))}")
    print(f"   - First triangle: {first}")

    # 3. Point location
    print("\n3. Nearest-site queries...")
    start = 0
    for x, y in [(10, 10), (50, 50), (90, 20)]:
        start = delaunay.find(x, y, start)
        px, py = delaunay.points[2 * start], delaunay.points[2 * start + 1]
        print(f"   - ({x}, {y}) -> site {start} at ({px:.2f}, {py:.2f})")

    # 4. Voronoi
    print("\n4. Voronoi cells...")
    voronoi = delaunay.voronoi((0, 0, 100, 100))
    areas = [cell_area(ring) for _, ring in voronoi.cell_polygons()]
    print(f"   - Cells: {len(areas)}, total area {sum(areas):.1f}")
    print(f"   - Area spread before relaxation: {np.std(areas):.2f}")
    voronoi.relax(3)
    areas = [cell_area(ring) for _, ring in voronoi.cell_polygons()]
    print(f"   - Area spread after relaxation: {np.std(areas):.2f}")

    # 5. Update
    print("\n5. Moving a point...")
    delaunay.points[0:2] = [150.0, 150.0]
    delaunay.update()
    print(f"   - Hull now contains (150, 150): {(150.0, 150.0) in delaunay.hull_contour().points}")
    print(f"   - find(149, 149) -> {delaunay.find(149, 149)}")


def cell_area(ring):
    xy = np.array(ring[:-1])
    x, y = xy[:, 0], xy[:, 1]
    return 0.5 * abs(np.sum(x * np.roll(y, -1) - np.roll(x, -1) * y))


if __name__ == "__main__":
    main()
