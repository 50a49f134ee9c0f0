"""Exceptions raised by the triangulation layer."""


class InvalidTriangulation(ValueError):
    """Raw triangulation arrays violate the structural invariants.

    Raised before any mesh state is replaced, so a mesh that was built
    successfully earlier stays usable.
    """
