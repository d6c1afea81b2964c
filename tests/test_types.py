"""Tests for the graph model."""

import pytest

from kekulipy import (
    Atom,
    Bond,
    Configuration,
    DoubleBondConfiguration,
    DoubleBondDeclaration,
    Edge,
    Graph,
    GraphFlag,
    Topology,
)
from .conftest import chain, ring


class TestAtom:

    def test_subset_atoms(self):
        atom = Atom.aromatic_subset("n")
        assert atom.aromatic and atom.subset
        assert atom.symbol == "n"
        assert atom.to_aliphatic().symbol == "N"
        assert atom.to_aliphatic().subset

    def test_aliphatic_is_unchanged(self):
        atom = Atom.aliphatic_subset("C")
        assert atom.to_aliphatic() is atom

    def test_to_subset(self):
        atom = Atom.aliphatic("O", hydrogens=1)
        assert atom.to_subset() == Atom.aliphatic_subset("O")
        assert Atom.aromatic_atom("C", hydrogens=1).to_subset() == Atom.aromatic_subset("C")

    def test_non_subset_element_rejected(self):
        with pytest.raises(ValueError):
            Atom.aliphatic_subset("Fe")
        with pytest.raises(ValueError):
            Atom.aromatic_subset("Cl")


class TestEdge:

    def test_other(self):
        edge = Edge(1, 4, Bond.IMPLICIT)
        assert edge.either() == 1
        assert edge.other(1) == 4
        assert edge.other(4) == 1
        with pytest.raises(ValueError):
            edge.other(2)

    def test_label_from_directional(self):
        edge = Edge(1, 4, Bond.UP)
        assert edge.label_from(1) is Bond.UP
        assert edge.label_from(4) is Bond.DOWN

    def test_label_from_plain(self):
        edge = Edge(1, 4, Bond.DOUBLE)
        assert edge.label_from(1) is edge.label_from(4) is Bond.DOUBLE

    def test_inverse_is_new_edge(self):
        edge = Edge(0, 1, Bond.DOWN)
        inv = edge.inverse()
        assert inv is not edge
        assert (inv.u, inv.v, inv.label) == (0, 1, Bond.UP)
        assert edge.label is Bond.DOWN

    def test_contains(self):
        assert 3 in Edge(3, 5)
        assert 4 not in Edge(3, 5)


class TestGraph:

    def test_counts(self, benzene):
        assert benzene.order == 6
        assert benzene.size == 6
        assert len(list(benzene.edges())) == 6
        assert all(benzene.degree(v) == 2 for v in range(6))

    def test_two_letter_symbols(self):
        g = chain(["Cl", "C", "Br"])
        assert [a.symbol for a in g.atoms] == ["Cl", "C", "Br"]
        assert g.implicit_hydrogens(1) == 2

    def test_edge_lookup(self):
        g = chain("CCO")
        assert g.edge(0, 1) is g.edge(1, 0)
        assert g.edge(0, 2) is None
        assert g.adjacent(1, 2)
        assert not g.adjacent(0, 2)

    def test_incident_order(self):
        g = chain("CCC")
        g.add_atom(Atom.aliphatic_subset("O"))
        g.add_edge(Bond.IMPLICIT.edge(1, 3))
        assert list(g.neighbors(1)) == [0, 2, 3]

    def test_duplicate_edge(self):
        g = chain("CC")
        with pytest.raises(ValueError):
            g.add_edge(Bond.DOUBLE.edge(1, 0))

    def test_missing_vertex(self):
        g = chain("CC")
        with pytest.raises(IndexError):
            g.add_edge(Bond.IMPLICIT.edge(0, 5))

    def test_flags(self, benzene):
        assert benzene.has_flags(GraphFlag.HAS_AROM)
        assert not chain("CC").has_flags(GraphFlag.HAS_AROM)
        g = chain("CCC", [Bond.UP, Bond.IMPLICIT])
        assert g.has_flags(GraphFlag.HAS_BND_STRO)
        g.clear_flags(GraphFlag.HAS_BND_STRO)
        assert g.flags == GraphFlag.NONE

    def test_aromatic_bond_sets_flag(self):
        g = chain("CC", [Bond.AROMATIC])
        assert g.has_flags(GraphFlag.HAS_AROM)

    def test_replace(self):
        g = chain("CCC")
        old = g.edge(1, 2)
        new = Edge(2, 1, Bond.UP)
        g.replace(old, new)
        assert g.edge(1, 2) is new
        assert new in g.edges_of(1) and new in g.edges_of(2)
        assert old not in g.edges_of(1)
        assert g.has_flags(GraphFlag.HAS_BND_STRO)

    def test_replace_mismatch(self):
        g = chain("CCC")
        with pytest.raises(ValueError):
            g.replace(g.edge(0, 1), Edge(1, 2, Bond.UP))

    @pytest.mark.parametrize("symbols,labels,expected", [
        ("CC", [Bond.IMPLICIT], [3, 3]),
        ("CC", [Bond.DOUBLE], [2, 2]),
        ("CN", [Bond.TRIPLE], [1, 0]),
        ("CO", [Bond.IMPLICIT], [3, 1]),
    ])
    def test_implicit_hydrogens(self, symbols, labels, expected):
        g = chain(symbols, labels)
        assert [g.implicit_hydrogens(v) for v in range(g.order)] == expected

    def test_aromatic_implicit_hydrogens(self, benzene, naphthalene):
        assert [benzene.implicit_hydrogens(v) for v in range(6)] == [1] * 6
        assert naphthalene.implicit_hydrogens(3) == 0
        assert naphthalene.implicit_hydrogens(0) == 1

    def test_bracket_hydrogens(self):
        g = Graph()
        g.add_atom(Atom.aromatic_atom("N", hydrogens=1))
        assert g.implicit_hydrogens(0) == 1


class TestPermute:

    def test_permute_relabels(self):
        g = chain("CNO", [Bond.DOUBLE, Bond.IMPLICIT])
        p = g.permute([2, 0, 1])
        assert [a.symbol for a in p.atoms] == ["N", "O", "C"]
        assert p.edge(2, 0).label is Bond.DOUBLE
        assert p.edge(0, 1).label is Bond.IMPLICIT

    def test_permute_sorts_adjacency(self):
        g = ring("CCCC")
        p = g.permute([3, 1, 0, 2])
        for v in range(p.order):
            nbrs = list(p.neighbors(v))
            assert nbrs == sorted(nbrs)

    def test_permute_keeps_directional_sense(self):
        g = chain("FCC", [Bond.UP, Bond.IMPLICIT])
        p = g.permute([2, 1, 0])
        # F was 0 and is now 2: the bond still reads UP leaving F
        assert p.edge(2, 1).label_from(2) is Bond.UP

    def test_permute_rejects_non_permutation(self):
        with pytest.raises(ValueError):
            chain("CCC").permute([0, 0, 1])

    def test_copy_is_independent(self, benzene):
        copy = benzene.copy()
        copy.edge(0, 1).label = Bond.DOUBLE
        assert benzene.edge(0, 1).label is Bond.IMPLICIT
        assert copy.flags == benzene.flags

    def test_topology_remapped(self):
        g = chain("CCCCC")
        g.add_topology(Topology.tetrahedral(1, [0, 2, 3, 4], Configuration.CLOCKWISE))
        p = g.permute([4, 3, 2, 1, 0])
        topology = p.topology_of(3)
        assert topology.atom == 3
        assert topology.vertices == (4, 2, 1, 0)
        assert p.has_flags(GraphFlag.HAS_ATM_STRO)


class TestTopology:

    def test_unknown(self):
        assert Topology.UNKNOWN.configuration is None
        assert chain("C").topology_of(0) is Topology.UNKNOWN

    def test_tetrahedral_needs_four(self):
        with pytest.raises(ValueError):
            Topology.tetrahedral(0, [1, 2, 3], Configuration.TH1)


class TestDeclaration:

    @pytest.mark.parametrize("configuration,text", [
        (DoubleBondConfiguration.TOGETHER, "0/1=2\\3"),
        (DoubleBondConfiguration.OPPOSITE, "0/1=2/3"),
    ])
    def test_str(self, configuration, text):
        assert str(DoubleBondDeclaration(1, 2, 0, 3, configuration)) == text
