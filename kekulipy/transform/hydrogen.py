"""
Hydrogen suppression.

This module converts bracket atoms whose explicit hydrogen count matches the
default valence model into organic-subset atoms, so that the count is implied
instead of stored.
"""

from __future__ import annotations

from typing import Sequence

from kekulipy.types import Atom, Graph, TopologyType


def suppressible(atom: Atom, valence: int) -> bool:
    """Check whether an atom's hydrogens may be left implicit.

    Args:
        atom: The atom.
        valence: Sum of the bond orders on the atom.

    Returns:
        True if ``atom`` carries no isotope, charge or class, belongs to the
        organic subset and its hydrogen count equals the implied count.

    Example:
        >>> suppressible(Atom.aliphatic("C", hydrogens=3), 1)
        True
        >>> suppressible(Atom.aliphatic("C", hydrogens=2), 1)
        False
    """
    if atom.subset or not atom.element.organic:
        return False
    if atom.isotope >= 0 or atom.charge != 0 or atom.atom_class != 0:
        return False
    if atom.aromatic:
        return atom.hydrogens == atom.element.aromatic_implicit_hydrogens(1 + valence)
    return atom.hydrogens == atom.element.implicit_hydrogens(valence)


def suppress_hydrogens(graph: Graph, valences: Sequence[int] | None = None) -> int:
    """Replace suppressible atoms with their organic-subset form in place.

    Atoms with a stereo topology keep their explicit form.

    Args:
        graph: Graph to modify.
        valences: Bond-order sum per vertex. Computed from the edges when
            not given.

    Returns:
        Number of atoms converted.
    """
    if valences is None:
        valences = [graph.bonded_valence(v) for v in range(graph.order)]

    n_suppressed = 0
    for v in range(graph.order):
        if graph.topology_of(v).type is not TopologyType.NONE:
            continue
        atom = graph.atom(v)
        if suppressible(atom, valences[v]):
            graph.set_atom(v, atom.to_subset())
            n_suppressed += 1
    return n_suppressed
