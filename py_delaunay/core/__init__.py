"""
Delaunay triangulation adjacency, extraction and point location.
"""

from .delaunay import Delaunay
from .exceptions import InvalidTriangulation
from .geometry import Bounds, HullContour, Segment, Triangle
from .halfedges import NONE, RawTriangulation, next_halfedge, prev_halfedge
from .mesh_index import MeshIndex
from .triangulator import triangulate
from .voronoi import Voronoi

__all__ = ['Delaunay', 'InvalidTriangulation', 'Bounds', 'HullContour', 'Segment',
           'Triangle', 'NONE', 'RawTriangulation', 'next_halfedge', 'prev_halfedge',
           'MeshIndex', 'triangulate', 'Voronoi']
