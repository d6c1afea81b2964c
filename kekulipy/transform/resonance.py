"""
Resonance canonicalisation of cyclic conjugated systems.

Two Kekulé structures of the same ring system (e.g. the two forms of benzene)
describe the same molecule. :func:`resonate` removes the difference: the
isolated ring double bonds are demoted and re-assigned by a matching that runs
on a canonically renumbered copy, so the result depends only on the molecule
and not on the input numbering or the input Kekulé form.
"""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from kekulipy.canon import canonical_ranks
from kekulipy.elements import Bond
from kekulipy.exceptions import ResonanceError
from kekulipy.rings import cyclic_vertices, in_small_ring
from kekulipy.transform.kekulize import match_subset
from kekulipy.types import Edge, Graph

logger = logging.getLogger(__name__)


def _has_adj_directional_label(graph: Graph, u: int, cyclic: set[int]) -> bool:
    for f in graph.edges_of(u):
        if f.label.directional and f.other(u) in cyclic:
            return True
    return False


def _has_adj_directional_labels(graph: Graph, edge: Edge, cyclic: set[int]) -> bool:
    """Both endpoints of ``edge`` have an up/down bond to a ring atom."""
    u = edge.either()
    v = edge.other(u)
    return (
        _has_adj_directional_label(graph, u, cyclic)
        and _has_adj_directional_label(graph, v, cyclic)
    )


def resonate(
    graph: Graph,
    ranking: Callable[[Graph], Sequence[int]] | None = None,
) -> Graph:
    """Re-assign ring double bonds into a canonical Kekulé form.

    Only double bonds whose endpoints are on a ring and have no other ring
    double bond take part. A double bond flanked by stereo-labelled ring
    bonds is kept fixed unless it lies in a small ring, where it cannot be
    a stereo centre.

    Args:
        graph: Graph in Kekulé form (modified in place).
        ranking: Function giving canonical ranks for a graph; defaults to
            :func:`kekulipy.canon.canonical_ranks`.

    Returns:
        The input graph.

    Raises:
        ResonanceError: If the demoted bonds cannot be re-assigned.
    """
    if ranking is None:
        ranking = canonical_ranks

    cyclic = cyclic_vertices(graph)
    count = [0] * graph.order
    edges: list[Edge] = []

    for edge in graph.edges():
        if edge.label.order != 2:
            continue
        u = edge.either()
        v = edge.other(u)
        if _has_adj_directional_labels(graph, edge, cyclic) and not in_small_ring(graph, edge):
            continue
        if u in cyclic and v in cyclic:
            count[u] += 1
            count[v] += 1
            edges.append(edge)

    subset: set[int] = set()
    for edge in edges:
        u = edge.either()
        v = edge.other(u)
        if count[u] == 1 and count[v] == 1:
            edge.label = Bond.IMPLICIT
            subset.add(u)
            subset.add(v)

    if not subset:
        return graph
    logger.debug("re-localising %d ring atoms", len(subset))

    ranks = list(ranking(graph))
    ordered = graph.permute(ranks)
    matching, n_matched = match_subset(ordered, {ranks[v] for v in subset})
    if n_matched < len(subset):
        raise ResonanceError(
            f"could not re-assign ring double bonds ({n_matched} of {len(subset)} atoms paired)"
        )

    inverse = [0] * len(ranks)
    for v, rank in enumerate(ranks):
        inverse[rank] = v
    for u, v in matching.pairs():
        graph.edge(inverse[u], inverse[v]).label = Bond.DOUBLE

    return graph
