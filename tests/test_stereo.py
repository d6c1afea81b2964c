"""Tests for directional label assignment."""

from __future__ import annotations

import pytest

from kekulipy import (
    Atom,
    Bond,
    DoubleBondConfiguration,
    DoubleBondDeclaration,
    Edge,
    Graph,
    IllegalConfigurationError,
)
from kekulipy.transform import DirectionalLabeller, assign_directional_labels
from .conftest import chain

TOGETHER = DoubleBondConfiguration.TOGETHER
OPPOSITE = DoubleBondConfiguration.OPPOSITE


def _configuration(g: Graph, decl: DoubleBondDeclaration) -> DoubleBondConfiguration:
    first = g.edge(decl.u, decl.x).label_from(decl.u)
    second = g.edge(decl.v, decl.y).label_from(decl.v)
    assert first.directional and second.directional
    return TOGETHER if first is second else OPPOSITE


def _conflict_free(g: Graph, w: int) -> bool:
    """No two bonds of ``w`` carry the same label seen from ``w``."""
    labels = [e.label_from(w) for e in g.edges_of(w) if e.label.directional]
    return len(labels) == len(set(labels))


def _substituted_ethene(extra: Bond | None = None) -> Graph:
    """F0-C1(=C2-F3)-Cl4, with the 1-4 bond labelled ``extra``."""
    g = chain("FCCF", [Bond.IMPLICIT, Bond.DOUBLE, Bond.IMPLICIT])
    g.add_atom(Atom.aliphatic_subset("Cl"))
    g.add_edge(Edge(1, 4, extra or Bond.IMPLICIT))
    return g


class TestSingleDoubleBond:

    @pytest.mark.parametrize("configuration,expected", [
        (TOGETHER, (Bond.DOWN, Bond.DOWN)),
        (OPPOSITE, (Bond.DOWN, Bond.UP)),
    ])
    def test_difluoroethene(self, configuration, expected):
        g = chain("FCCF", [Bond.IMPLICIT, Bond.DOUBLE, Bond.IMPLICIT])
        decl = DoubleBondDeclaration(1, 2, 0, 3, configuration)
        assign_directional_labels(g, [decl])
        assert g.edge(1, 0).label_from(1) is expected[0]
        assert g.edge(2, 3).label_from(2) is expected[1]
        assert _configuration(g, decl) is configuration

    def test_returns_graph_and_clears(self):
        g = chain("FCCF", [Bond.IMPLICIT, Bond.DOUBLE, Bond.IMPLICIT])
        declarations = [DoubleBondDeclaration(1, 2, 0, 3, TOGETHER)]
        assert assign_directional_labels(g, declarations) is g
        assert declarations == []

    def test_unspecified_skipped(self):
        g = chain("FCCF", [Bond.IMPLICIT, Bond.DOUBLE, Bond.IMPLICIT])
        decl = DoubleBondDeclaration(1, 2, 0, 3, DoubleBondConfiguration.UNSPECIFIED)
        assign_directional_labels(g, [decl])
        assert not any(e.label.directional for e in g.edges())

    def test_existing_label_reused(self):
        g = chain("FCCF", [Bond.UP, Bond.DOUBLE, Bond.IMPLICIT])
        decl = DoubleBondDeclaration(1, 2, 0, 3, OPPOSITE)
        assign_directional_labels(g, [decl])
        # F/C=: read from 1 the bond points down
        assert g.edge(1, 0).label_from(1) is Bond.DOWN
        assert _configuration(g, decl) is OPPOSITE

    def test_other_substituent_propagated(self):
        g = _substituted_ethene()
        decl = DoubleBondDeclaration(1, 2, 0, 3, TOGETHER)
        assign_directional_labels(g, [decl])
        assert g.edge(1, 4).label_from(1) is g.edge(1, 0).label_from(1).inverse()
        assert _conflict_free(g, 1)
        assert _configuration(g, decl) is TOGETHER

    def test_labelled_substituent_respected(self):
        g = _substituted_ethene(Bond.DOWN)
        decl = DoubleBondDeclaration(1, 2, 0, 3, TOGETHER)
        assign_directional_labels(g, [decl])
        assert g.edge(1, 0).label_from(1) is Bond.UP
        assert g.edge(1, 4).label_from(1) is Bond.DOWN
        assert _configuration(g, decl) is TOGETHER

    def test_clashing_labels_fixed(self):
        # both substituents of 1 read UP before assignment
        g = _substituted_ethene(Bond.UP)
        g.replace(g.edge(0, 1), Edge(1, 0, Bond.UP))
        decl = DoubleBondDeclaration(1, 2, 0, 3, OPPOSITE)
        assign_directional_labels(g, [decl])
        assert _conflict_free(g, 1)
        assert g.edge(1, 0).label_from(1) is Bond.DOWN
        assert _configuration(g, decl) is OPPOSITE


class TestConjugated:
    """Double bonds sharing single bonds."""

    def test_local_inversion(self):
        # F0-C1=C2-C3=C4-F5; the second bond forces the shared 2-3 label
        g = chain("FCCCCF", [Bond.IMPLICIT, Bond.DOUBLE, Bond.IMPLICIT,
                             Bond.DOUBLE, Bond.IMPLICIT])
        first = DoubleBondDeclaration(1, 2, 0, 3, OPPOSITE)
        second = DoubleBondDeclaration(4, 3, 5, 2, OPPOSITE)
        assign_directional_labels(g, [first, second])
        assert g.edge(3, 2).label_from(3) is Bond.DOWN
        assert g.edge(4, 5).label_from(4) is Bond.UP
        assert _configuration(g, first) is OPPOSITE
        assert _configuration(g, second) is OPPOSITE

    def test_global_inversion(self):
        # F0-C1=C2-C3=C4-C5=C6-F7, the middle bond declared last
        g = chain("FCCCCCCF", [Bond.IMPLICIT, Bond.DOUBLE, Bond.IMPLICIT, Bond.DOUBLE,
                               Bond.IMPLICIT, Bond.DOUBLE, Bond.IMPLICIT])
        declarations = [
            DoubleBondDeclaration(1, 2, 0, 3, OPPOSITE),
            DoubleBondDeclaration(5, 6, 4, 7, OPPOSITE),
            DoubleBondDeclaration(3, 4, 2, 5, TOGETHER),
        ]
        committed = list(declarations)
        assign_directional_labels(g, declarations)
        for decl in committed:
            assert _configuration(g, decl) is decl.configuration
        assert g.edge(4, 5).label_from(4) is Bond.DOWN
        assert g.edge(6, 7).label_from(6) is Bond.DOWN
        assert all(_conflict_free(g, v) for v in range(g.order))

    def test_labeller_tracks_configured_atoms(self):
        g = chain("FCCF", [Bond.IMPLICIT, Bond.DOUBLE, Bond.IMPLICIT])
        labeller = DirectionalLabeller(g)
        labeller.assign([DoubleBondDeclaration(1, 2, 0, 3, TOGETHER)])
        assert labeller.adj_to_db == {1, 2}


class TestInvalid:

    def test_not_adjacent(self):
        g = chain("FCCF", [Bond.IMPLICIT, Bond.DOUBLE, Bond.IMPLICIT])
        decl = DoubleBondDeclaration(1, 2, 3, 0, TOGETHER)
        with pytest.raises(IllegalConfigurationError) as excinfo:
            assign_directional_labels(g, [decl])
        assert excinfo.value.declaration is decl

    def test_not_double(self):
        g = chain("FCCF")
        with pytest.raises(IllegalConfigurationError):
            assign_directional_labels(g, [DoubleBondDeclaration(1, 2, 0, 3, TOGETHER)])

    def test_reference_is_double_bond_atom(self):
        g = chain("FCCF", [Bond.IMPLICIT, Bond.DOUBLE, Bond.IMPLICIT])
        with pytest.raises(IllegalConfigurationError):
            assign_directional_labels(g, [DoubleBondDeclaration(1, 2, 2, 3, TOGETHER)])

    def test_cumulated(self):
        # F0-C1=C2=C3: the reference bond 2=3 is itself double
        g = chain("FCCC", [Bond.IMPLICIT, Bond.DOUBLE, Bond.DOUBLE])
        with pytest.raises(IllegalConfigurationError):
            assign_directional_labels(g, [DoubleBondDeclaration(1, 2, 0, 3, OPPOSITE)])

    def test_unresolvable(self):
        # v already carries both an up and a down bond
        g = chain("FCCF", [Bond.IMPLICIT, Bond.DOUBLE, Bond.IMPLICIT])
        g.add_atom(Atom.aliphatic_subset("Cl"))
        g.add_atom(Atom.aliphatic_subset("Br"))
        g.add_edge(Edge(2, 4, Bond.UP))
        g.add_edge(Edge(2, 5, Bond.DOWN))
        with pytest.raises(IllegalConfigurationError, match="cannot assign"):
            assign_directional_labels(g, [DoubleBondDeclaration(1, 2, 0, 3, TOGETHER)])

    def test_is_value_error(self):
        assert issubclass(IllegalConfigurationError, ValueError)
