"""Test configuration and fixtures for kekulipy tests."""

from __future__ import annotations

from typing import Sequence

import pytest

from kekulipy import Atom, Bond, Graph
from kekulipy.transform import suppress_hydrogens


def chain(symbols: Sequence[str], labels: Sequence[Bond] | None = None) -> Graph:
    """Build a linear chain of organic-subset atoms.

    Args:
        symbols: One symbol per atom, as a string of one-letter symbols or
            a list (``["C", "Cl"]``); lowercase symbols give aromatic atoms.
        labels: Label of each bond ``i - i+1`` (defaults to implicit).
    """
    g = Graph()
    for symbol in symbols:
        if symbol.islower():
            g.add_atom(Atom.aromatic_subset(symbol))
        else:
            g.add_atom(Atom.aliphatic_subset(symbol))
    if labels is None:
        labels = [Bond.IMPLICIT] * (len(symbols) - 1)
    for i, label in enumerate(labels):
        g.add_edge(label.edge(i, i + 1))
    return g


def ring(symbols: Sequence[str], labels: Sequence[Bond] | None = None) -> Graph:
    """Build a single ring; the last bond closes ``n-1`` back to ``0``."""
    n = len(symbols)
    if labels is None:
        labels = [Bond.IMPLICIT] * n
    g = chain(symbols, labels[:-1])
    g.add_edge(labels[-1].edge(n - 1, 0))
    return g


def double_bonds(graph: Graph) -> set[tuple[int, int]]:
    """Vertex pairs ``(min, max)`` joined by a bond of order 2."""
    return {
        (min(e.u, e.v), max(e.u, e.v))
        for e in graph.edges()
        if e.label.order == 2
    }


def graph_from_rdkit(mol) -> Graph:
    """Convert an RDKit molecule into a graph.

    Atoms are first added with their total hydrogen count and then
    suppressed to organic-subset form where the count is implied.
    """
    from rdkit import Chem

    g = Graph()
    for atom in mol.GetAtoms():
        kwargs = dict(hydrogens=atom.GetTotalNumHs(), charge=atom.GetFormalCharge())
        if atom.GetIsAromatic():
            g.add_atom(Atom.aromatic_atom(atom.GetSymbol(), **kwargs))
        else:
            g.add_atom(Atom.aliphatic(atom.GetSymbol(), **kwargs))

    for bond in mol.GetBonds():
        u, v = bond.GetBeginAtomIdx(), bond.GetEndAtomIdx()
        bond_type = bond.GetBondType()
        if bond.GetIsAromatic():
            label = Bond.IMPLICIT
        elif bond_type == Chem.BondType.DOUBLE:
            label = Bond.DOUBLE
        elif bond_type == Chem.BondType.TRIPLE:
            label = Bond.TRIPLE
        elif g.atom(u).aromatic and g.atom(v).aromatic:
            label = Bond.SINGLE
        else:
            label = Bond.IMPLICIT
        g.add_edge(label.edge(u, v))

    suppress_hydrogens(g)
    return g


@pytest.fixture
def benzene() -> Graph:
    """Aromatic benzene ring, c1ccccc1."""
    return ring("cccccc")


@pytest.fixture
def kekule_benzene() -> Graph:
    """Benzene with explicit alternating bonds, C1=CC=CC=C1."""
    return ring("CCCCCC", [Bond.DOUBLE, Bond.IMPLICIT] * 3)


@pytest.fixture
def naphthalene() -> Graph:
    """Aromatic naphthalene; atoms 3 and 4 are the fusion atoms."""
    g = ring("cccccc")
    for _ in range(4):
        g.add_atom(Atom.aromatic_subset("c"))
    for u, v in ((3, 6), (6, 7), (7, 8), (8, 9), (9, 4)):
        g.add_edge(Bond.IMPLICIT.edge(u, v))
    return g


@pytest.fixture
def aromatic_smiles() -> list[str]:
    """Aromatic SMILES strings for RDKit reference comparisons."""
    return [
        "c1ccccc1",
        "c1ccncc1",
        "c1ccc2ccccc2c1",
        "c1ccoc1",
        "c1cc[nH]c1",
        "c1ccsc1",
    ]
