"""
Canonical vertex ordering.

This module ranks the vertices of a graph so that two numberings of the same
molecule receive corresponding ranks. Ranks are used to renumber a graph
before any order-dependent algorithm (e.g. resonance re-localisation) runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from kekulipy.rings import cyclic_vertices

if TYPE_CHECKING:
    from kekulipy.types import Graph


# =============================================================================
# Data structures for canonicalization
# =============================================================================

@dataclass(slots=True)
class _BondHolder:
    """Internal edge representation for canonicalization."""
    bond_order: int
    nbr_idx: int
    nbr_sym_class: int = 0


@dataclass(slots=True)
class _CanonAtom:
    """Internal atom representation for canonicalization."""
    atom_idx: int
    degree: int
    atomic_num: int
    isotope: int
    formal_charge: int
    total_num_hs: int
    is_aromatic: bool
    is_in_ring: bool
    bonds: list[_BondHolder] = field(default_factory=list)
    index: int = 0  # Current partition/symmetry class

    def invariant(self) -> tuple[int, ...]:
        """Graph-local invariant used for the initial partition."""
        return (
            self.degree,
            int(self.is_in_ring),
            int(not self.is_aromatic),
            self.atomic_num,
            self.isotope,
            self.total_num_hs,
            # unsigned comparison: neutral < positive < negative
            self.formal_charge & 0xFFFFFFFF,
        )


# =============================================================================
# Core canonicalization algorithm
# =============================================================================

def _assign_classes(atoms: list[_CanonAtom], keys: list[tuple]) -> int:
    """Set every atom's class to the number of atoms with a smaller key.

    Returns:
        Number of distinct classes.
    """
    order = sorted(range(len(atoms)), key=keys.__getitem__)
    n_classes = 0
    prev = None
    for pos, idx in enumerate(order):
        if keys[idx] != prev:
            symclass = pos
            prev = keys[idx]
            n_classes += 1
        atoms[idx].index = symclass
    return n_classes


def _neighbor_key(atom: _CanonAtom, atoms: list[_CanonAtom]) -> tuple:
    for bh in atom.bonds:
        bh.nbr_sym_class = atoms[bh.nbr_idx].index
    atom.bonds.sort(key=lambda bh: (bh.bond_order, bh.nbr_sym_class))
    return tuple((bh.bond_order, bh.nbr_sym_class) for bh in atom.bonds)


def _refine_partitions(atoms: list[_CanonAtom], n_classes: int) -> int:
    """Split classes by their neighbours' classes until stable."""
    while True:
        keys = [(atom.index, _neighbor_key(atom, atoms)) for atom in atoms]
        refined = _assign_classes(atoms, keys)
        if refined == n_classes:
            return n_classes
        n_classes = refined


def _break_ties(atoms: list[_CanonAtom], n_classes: int) -> None:
    """Break remaining ties by isolating atoms.

    The lowest-indexed member of the first tied class is split off, then the
    partition is refined again; repeated until every class is a singleton.
    """
    n_atoms = len(atoms)
    while n_classes < n_atoms:
        members: dict[int, list[int]] = {}
        for atom in atoms:
            members.setdefault(atom.index, []).append(atom.atom_idx)
        tied = min(cls for cls, idxs in members.items() if len(idxs) > 1)
        chosen = min(members[tied])

        keys = [(atom.index, 0 if atom.atom_idx == chosen else 1) for atom in atoms]
        n_classes = _assign_classes(atoms, keys)
        n_classes = _refine_partitions(atoms, n_classes)


def _rank_atoms(atoms: list[_CanonAtom], break_ties_flag: bool = True) -> list[int]:
    """Main ranking function."""
    if not atoms:
        return []

    n_classes = _assign_classes(atoms, [atom.invariant() for atom in atoms])
    n_classes = _refine_partitions(atoms, n_classes)

    if break_ties_flag:
        _break_ties(atoms, n_classes)

    return [atom.index for atom in atoms]


# =============================================================================
# Public API
# =============================================================================

class Canonicalizer:
    """Compute a canonical vertex ordering for a graph.

    Vertices are partitioned by local invariants and the partition is refined
    with the classes of their neighbours; remaining ties are broken one
    vertex at a time.

    Example:
        >>> ranks = Canonicalizer(graph).compute_ranks()
        >>> sorted(ranks) == list(range(graph.order))
        True
    """

    def __init__(self, graph: Graph) -> None:
        """Initialize canonicalizer.

        Args:
            graph: Graph to rank.
        """
        self._graph = graph
        self._atoms: list[_CanonAtom] | None = None

    def compute_ranks(self, break_ties: bool = True) -> list[int]:
        """Compute canonical ranks for all vertices.

        Args:
            break_ties: Whether to break remaining ties (default True). Without
                tie breaking symmetric vertices share a rank.

        Returns:
            List of ranks indexed by vertex. With ``break_ties`` the ranks are
            a permutation of ``range(graph.order)``.
        """
        self._build_canon_atoms()
        return _rank_atoms(self._atoms, break_ties_flag=break_ties)

    def _build_canon_atoms(self) -> None:
        """Build internal atom representations."""
        graph = self._graph
        ring_atoms = cyclic_vertices(graph)

        self._atoms = []
        for v, atom in enumerate(graph.atoms):
            canon_atom = _CanonAtom(
                atom_idx=v,
                degree=graph.degree(v),
                atomic_num=atom.element.atomic_number,
                isotope=max(atom.isotope, 0),
                formal_charge=atom.charge,
                total_num_hs=graph.implicit_hydrogens(v),
                is_aromatic=atom.aromatic,
                is_in_ring=v in ring_atoms,
                bonds=[
                    _BondHolder(bond_order=edge.label.order, nbr_idx=edge.other(v))
                    for edge in graph.edges_of(v)
                ],
            )
            self._atoms.append(canon_atom)


def canonical_ranks(graph: Graph) -> list[int]:
    """Compute canonical ranks for a graph.

    This is a convenience function that creates a Canonicalizer
    and computes ranks with default settings.
    """
    return Canonicalizer(graph).compute_ranks()
