"""Ring detection and analysis."""

from kekulipy.rings.detection import (
    SMALL_RING_BONDS,
    cyclic_vertices,
    find_ring_atoms_and_bonds,
    in_small_ring,
)

__all__ = [
    "SMALL_RING_BONDS",
    "cyclic_vertices",
    "find_ring_atoms_and_bonds",
    "in_small_ring",
]
