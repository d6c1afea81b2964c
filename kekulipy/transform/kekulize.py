"""
Kekulization - convert aromatic representation to explicit double bonds.

This module assigns alternating single/double bonds to the aromatic atoms of a
graph. Atoms whose pi contribution is already fixed by charge, degree or an
existing multiple bond are set aside; every other aromatic atom must receive
exactly one double bond, which amounts to finding a perfect matching on the
subgraph they induce:

- a greedy pass pairs most atoms,
- a single augmenting path fixes the common one-pair shortfall,
- Edmonds' algorithm handles everything else.
"""

from __future__ import annotations

import logging
from typing import AbstractSet, Final

from kekulipy.elements import Bond
from kekulipy.exceptions import KekulizationError
from kekulipy.matching import Matching, augment_once, initial, maximise
from kekulipy.types import Atom, Edge, Graph, GraphFlag

logger = logging.getLogger(__name__)


_CARBON_GROUP: Final[frozenset[str]] = frozenset({"Si", "Ge"})
_PNICTOGENS: Final[frozenset[str]] = frozenset({"N", "P", "As", "Sb"})
_CHALCOGENS: Final[frozenset[str]] = frozenset({"O", "S", "Se", "Te"})


# =============================================================================
# Candidate set
# =============================================================================

def predetermined(graph: Graph, v: int) -> bool:
    """Check whether an aromatic atom's pi contribution is already fixed.

    A predetermined atom either carries a double (or higher) bond already or,
    given its charge and number of connections, cannot take part in one.

    Args:
        graph: The graph.
        v: Vertex index.

    Returns:
        True if ``v`` must not receive a double bond from the matching.
    """
    atom = graph.atom(v)
    symbol = atom.element.symbol
    q = atom.charge
    deg = graph.degree(v) + graph.implicit_hydrogens(v)

    if graph.bonded_valence(v) > graph.degree(v):
        for edge in graph.edges_of(v):
            if edge.label is Bond.DOUBLE:
                # N=O and hypervalent S=O leave the ring pi bond open
                if (
                    q == 0
                    and (symbol == "N" or (symbol == "S" and deg > 3))
                    and graph.atom(edge.other(v)).element.symbol == "O"
                ):
                    return False
                return True
            if edge.label.order > 2:
                return True

    if symbol == "C":
        return q in (1, -1) and deg == 3
    if symbol in _CARBON_GROUP:
        return q < 0
    if symbol in _PNICTOGENS:
        if q == 0:
            return deg == 3 or deg > 4
        if q == 1:
            return deg > 3
        return True
    if symbol in _CHALCOGENS:
        if q == 0:
            return deg in (2, 4) or deg > 5
        if q in (1, -1):
            return deg in (3, 5) or deg > 6
        return False
    return False


def build_set(graph: Graph, aromatic: set[int]) -> set[int]:
    """Collect aromatic vertices and the undecided subset.

    Args:
        graph: The graph.
        aromatic: Filled in place with every aromatic vertex.

    Returns:
        The aromatic vertices that still need a double bond.
    """
    undecided: set[int] = set()
    for v, atom in enumerate(graph.atoms):
        if atom.aromatic:
            aromatic.add(v)
            if not predetermined(graph, v):
                undecided.add(v)
    return undecided


def candidate_set(graph: Graph) -> tuple[set[int], set[int]]:
    """Return ``(aromatic, undecided)`` vertex sets for a graph."""
    aromatic: set[int] = set()
    undecided = build_set(graph, aromatic)
    return aromatic, undecided


# =============================================================================
# Matching
# =============================================================================

def match_subset(graph: Graph, subset: AbstractSet[int]) -> tuple[Matching, int]:
    """Pair up the vertices of ``subset`` along edges that may be double.

    Cheaper strategies run first; Edmonds' algorithm only runs when the
    greedy pass and a single augmentation leave vertices unpaired.

    Returns:
        Tuple of (matching, number of matched vertices in ``subset``).
    """
    matching = Matching.empty(graph)
    n = len(subset)
    n_matched = initial(graph, matching, subset)
    if n_matched < n:
        if n - n_matched == 2:
            logger.debug("greedy matching left one pair, augmenting")
            n_matched = augment_once(graph, matching, n_matched, subset)
        if n_matched < n:
            logger.debug("maximising matching (%d of %d matched)", n_matched, n)
            n_matched = maximise(graph, matching, n_matched, subset)
    return matching, n_matched


# =============================================================================
# Bond assignment
# =============================================================================

class _InPlaceSink:
    """Writes the Kekulé form back into the input graph."""

    def __init__(self, graph: Graph) -> None:
        self.graph = graph

    def atom(self, v: int, atom: Atom) -> None:
        self.graph.set_atom(v, atom)

    def edge(self, edge: Edge, label: Bond) -> None:
        edge.label = label

    def result(self) -> Graph:
        self.graph.clear_flags(GraphFlag.HAS_AROM)
        return self.graph


class _CopySink:
    """Writes the Kekulé form into a new graph with the same numbering."""

    def __init__(self, graph: Graph) -> None:
        self.source = graph
        self.graph = Graph()

    def atom(self, v: int, atom: Atom) -> None:
        self.graph.add_atom(atom)
        self.graph.add_topology(self.source.topology_of(v))

    def edge(self, edge: Edge, label: Bond) -> None:
        self.graph.add_edge(Edge(edge.u, edge.v, label))

    def result(self) -> Graph:
        self.graph.flags = self.source.flags & ~GraphFlag.HAS_AROM
        return self.graph


def _localised_label(
    edge: Edge,
    u: int,
    v: int,
    subset: AbstractSet[int],
    aromatic: AbstractSet[int],
    matching: Matching,
) -> Bond:
    """Label of ``edge`` (seen from its higher endpoint ``u``) after assignment."""
    label = edge.label
    if label is Bond.SINGLE:
        return Bond.IMPLICIT
    if label is Bond.AROMATIC or label is Bond.IMPLICIT:
        if u in subset and matching.other(u) == v:
            return Bond.DOUBLE_AROMATIC
        if u in aromatic and v in aromatic:
            return Bond.IMPLICIT_AROMATIC
        if label is Bond.AROMATIC:
            return Bond.IMPLICIT
    return label


def generate_kekule_form(
    graph: Graph,
    subset: AbstractSet[int],
    aromatic: AbstractSet[int],
    sink: _InPlaceSink | _CopySink,
) -> Graph:
    """Match the undecided subset and write the localised bonds to ``sink``.

    Raises:
        KekulizationError: If no perfect matching of ``subset`` exists.
    """
    matching, n_matched = match_subset(graph, subset)
    if n_matched < len(subset):
        raise KekulizationError(
            "Could not kekulize", n_undecided=len(subset), n_matched=n_matched
        )

    for u in range(graph.order):
        sink.atom(u, graph.atom(u).to_aliphatic())
        for edge in graph.edges_of(u):
            v = edge.other(u)
            if v < u:
                sink.edge(edge, _localised_label(edge, u, v, subset, aromatic, matching))
    return sink.result()


def _localise(graph: Graph, in_place: bool) -> Graph:
    if not graph.has_flags(GraphFlag.HAS_AROM):
        return graph

    aromatic, subset = candidate_set(graph)
    if len(subset) % 2 == 1:
        raise KekulizationError(
            "a valid Kekulé structure could not be assigned "
            f"(odd number of undecided atoms: {len(subset)})",
            n_undecided=len(subset),
        )
    logger.debug("kekulizing %d aromatic atoms, %d undecided", len(aromatic), len(subset))

    sink = _InPlaceSink(graph) if in_place else _CopySink(graph)
    return generate_kekule_form(graph, subset, aromatic, sink)


def kekulize(graph: Graph) -> Graph:
    """Convert aromatic bonds to alternating single/double bonds.

    The input graph is left untouched, also when kekulization fails.

    Args:
        graph: Graph with aromatic atoms or bonds.

    Returns:
        New graph in Kekulé form, or ``graph`` itself if it has no aromatic
        atoms or bonds.

    Raises:
        KekulizationError: If no Kekulé structure exists.

    Example:
        >>> localised = kekulize(benzene)
        >>> sum(e.label.order == 2 for e in localised.edges())
        3
    """
    return _localise(graph, in_place=False)


def kekulize_in_place(graph: Graph) -> Graph:
    """Same as :func:`kekulize` but modifies and returns ``graph`` itself.

    When no matching exists the graph is left unchanged.
    """
    return _localise(graph, in_place=True)
