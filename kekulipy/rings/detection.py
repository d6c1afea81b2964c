"""
Ring detection algorithms.

This module identifies which vertices and edges of a graph lie on a cycle
and answers whether a given edge closes a small ring. Both are used by the
resonance canonicaliser and the canonical ranking.
"""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from kekulipy.types import Edge, Graph


# Largest ring (in bonds) still considered "small"
SMALL_RING_BONDS: Final[int] = 7


def _find_bridges(graph: "Graph") -> set[int]:
    """Find bridges using Tarjan's low-link algorithm.

    Returns:
        Set of ``id()`` values of the edges that are bridges.
    """
    n = graph.order
    discovery = [-1] * n
    low = [0] * n
    bridges: set[int] = set()
    time_counter = 0

    for start in range(n):
        if discovery[start] != -1:
            continue
        discovery[start] = low[start] = time_counter
        time_counter += 1
        # (vertex, edge used to reach it, iterator over incident edges)
        stack = [(start, None, iter(graph.edges_of(start)))]

        while stack:
            node, via, incident = stack[-1]
            for edge in incident:
                if edge is via:
                    continue
                neighbor = edge.other(node)
                if discovery[neighbor] == -1:
                    discovery[neighbor] = low[neighbor] = time_counter
                    time_counter += 1
                    stack.append((neighbor, edge, iter(graph.edges_of(neighbor))))
                    break
                low[node] = min(low[node], discovery[neighbor])
            else:
                stack.pop()
                if stack:
                    parent = stack[-1][0]
                    low[parent] = min(low[parent], low[node])
                    # If low[node] > discovery[parent], via is a bridge
                    if low[node] > discovery[parent]:
                        bridges.add(id(via))

    return bridges


def find_ring_atoms_and_bonds(graph: "Graph") -> tuple[set[int], set[tuple[int, int]]]:
    """Detect ring vertices and edges in O(V+E).

    An edge is a ring edge if it is not a bridge; a vertex is a ring vertex
    if it has a ring edge. This identifies membership of ANY cycle without
    enumerating the cycles.

    Returns:
        Tuple of (ring_atoms, ring_bonds) where ring_bonds are
        (min_idx, max_idx) tuples.
    """
    if graph.order == 0:
        return set(), set()

    bridges = _find_bridges(graph)

    ring_atoms: set[int] = set()
    ring_bonds: set[tuple[int, int]] = set()
    for edge in graph.edges():
        if id(edge) not in bridges:
            ring_bonds.add((min(edge.u, edge.v), max(edge.u, edge.v)))
            ring_atoms.add(edge.u)
            ring_atoms.add(edge.v)

    return ring_atoms, ring_bonds


def cyclic_vertices(graph: "Graph") -> set[int]:
    """Vertices lying on at least one cycle.

    Example:
        >>> cyclic_vertices(benzene_with_methyl)  # methyl carbon excluded
        {0, 1, 2, 3, 4, 5}
    """
    ring_atoms, _ = find_ring_atoms_and_bonds(graph)
    return ring_atoms


def in_small_ring(graph: "Graph", edge: "Edge", max_bonds: int = SMALL_RING_BONDS) -> bool:
    """Check whether ``edge`` belongs to a ring of at most ``max_bonds`` bonds.

    Breadth-first search for the shortest path between the endpoints that
    does not use the edge itself.

    Args:
        graph: The graph.
        edge: Edge to test.
        max_bonds: Largest ring size (in bonds) that counts as small.

    Returns:
        True if the shortest ring through the edge has at most ``max_bonds``
        bonds.
    """
    source = edge.either()
    target = edge.other(source)

    dist = {source: 0}
    queue: deque[int] = deque([source])
    while queue:
        curr = queue.popleft()
        # the ring closes with the edge itself, so a path of length d
        # gives a ring of d + 1 bonds
        if dist[curr] + 1 >= max_bonds:
            break
        for f in graph.edges_of(curr):
            if f is edge:
                continue
            nbr = f.other(curr)
            if nbr == target:
                return True
            if nbr not in dist:
                dist[nbr] = dist[curr] + 1
                queue.append(nbr)

    return False
