"""
Graph matching.

A :class:`Matching` pairs vertices along edges. Three functions build one up
over a vertex subset, each at least as expensive as the last:

- :func:`initial` greedily pairs each vertex with its first free neighbour,
- :func:`augment_once` looks for a single alternating path (no blossoms),
- :func:`maximise` runs Edmonds' blossom algorithm to a maximum matching.

Calls can be chained; each returns the updated number of matched vertices
and never reduces it.

Only edges that could carry a double bond take part: explicit ``SINGLE``
bonds and directional (up/down) bonds are never paired.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import TYPE_CHECKING, AbstractSet, Iterator

if TYPE_CHECKING:
    from kekulipy.types import Edge, Graph

from kekulipy.elements import Bond

logger = logging.getLogger(__name__)

UNMATCHED = -1


class Matching:
    """A symmetric partial pairing of vertices.

    Invariant: ``other(u) == v`` if and only if ``other(v) == u``.

    Example:
        >>> m = Matching.empty(4)
        >>> m.match(0, 1)
        >>> m.other(1)
        0
    """

    __slots__ = ("_match",)

    def __init__(self, n: int) -> None:
        self._match = [UNMATCHED] * n

    @classmethod
    def empty(cls, graph_or_size: "Graph | int") -> "Matching":
        """Create an empty matching sized for a graph (or vertex count)."""
        n = graph_or_size if isinstance(graph_or_size, int) else graph_or_size.order
        return cls(n)

    def other(self, v: int) -> int:
        """The vertex matched with ``v``, or ``UNMATCHED``."""
        return self._match[v]

    def matched(self, v: int) -> bool:
        return self._match[v] != UNMATCHED

    def unmatched(self, v: int) -> bool:
        return self._match[v] == UNMATCHED

    def match(self, u: int, v: int) -> None:
        """Pair ``u`` with ``v``, releasing any previous partners."""
        for w in (u, v):
            partner = self._match[w]
            if partner != UNMATCHED and partner not in (u, v):
                self._match[partner] = UNMATCHED
        self._match[u] = v
        self._match[v] = u

    def unmatch(self, v: int) -> None:
        partner = self._match[v]
        if partner != UNMATCHED:
            self._match[partner] = UNMATCHED
            self._match[v] = UNMATCHED

    def pairs(self) -> Iterator[tuple[int, int]]:
        """Iterate over matched pairs ``(u, v)`` with ``u < v``."""
        for u, v in enumerate(self._match):
            if u < v:
                yield u, v

    def __len__(self) -> int:
        """Number of matched pairs."""
        return sum(1 for _ in self.pairs())

    def __repr__(self) -> str:
        return f"Matching({list(self.pairs())})"


def _pairable(edge: "Edge") -> bool:
    label = edge.label
    return label is not Bond.SINGLE and not label.directional


def _candidates(graph: "Graph", v: int, subset: AbstractSet[int]) -> Iterator[int]:
    """Neighbours of ``v`` in ``subset`` joined by a pairable edge."""
    for edge in graph.edges_of(v):
        w = edge.other(v)
        if w in subset and _pairable(edge):
            yield w


def initial(graph: "Graph", matching: Matching, subset: AbstractSet[int]) -> int:
    """Greedily match vertices of ``subset`` along the first free edge.

    Args:
        graph: The graph.
        matching: Matching to extend (modified in place).
        subset: Vertices that may be matched.

    Returns:
        Number of matched vertices in ``subset``.
    """
    n_matched = sum(1 for v in subset if matching.matched(v))
    for v in sorted(subset):
        if matching.matched(v):
            continue
        for w in _candidates(graph, v, subset):
            if matching.unmatched(w):
                matching.match(v, w)
                n_matched += 2
                break
    return n_matched


def augment_once(
    graph: "Graph",
    matching: Matching,
    n_matched: int,
    subset: AbstractSet[int],
) -> int:
    """Grow the matching by one pair along an alternating path.

    A breadth-first search from each free vertex in turn; odd cycles are not
    contracted, so a path hidden behind a blossom may be missed (that case
    is left to :func:`maximise`).

    Returns:
        Updated number of matched vertices.
    """
    for root in sorted(subset):
        if matching.matched(root):
            continue

        # prev maps an odd vertex to the even vertex that reached it, and an
        # even vertex to the odd vertex it is matched with
        prev: dict[int, int] = {root: root}
        queue: deque[int] = deque([root])

        while queue:
            v = queue.popleft()
            for w in _candidates(graph, v, subset):
                if w in prev:
                    continue
                if matching.unmatched(w):
                    _flip(matching, prev, root, v, w)
                    return n_matched + 2
                mate = matching.other(w)
                if mate in prev:
                    continue
                prev[w] = v
                prev[mate] = w
                queue.append(mate)

    return n_matched


def _flip(matching: Matching, prev: dict[int, int], root: int, v: int, w: int) -> None:
    """Swap matched and unmatched edges along the path root..v-w."""
    while True:
        if v == root:
            matching.match(v, w)
            return
        odd = prev[v]
        matching.match(v, w)
        w = odd
        v = prev[odd]


def maximise(
    graph: "Graph",
    matching: Matching,
    n_matched: int,
    subset: AbstractSet[int],
) -> int:
    """Extend the matching to a maximum matching over ``subset``.

    Edmonds' blossom algorithm, searching from each free vertex once.

    Returns:
        Updated number of matched vertices.
    """
    search = _BlossomSearch(graph, matching, subset)
    n_augmented = search.run()
    if n_augmented:
        logger.debug("blossom search added %d pairs", n_augmented)
    return n_matched + 2 * n_augmented


class _BlossomSearch:
    """Edmonds' algorithm over a dense renumbering of the subset."""

    def __init__(self, graph: "Graph", matching: Matching, subset: AbstractSet[int]) -> None:
        self.matching = matching
        self.vertices = sorted(subset)
        index = {v: i for i, v in enumerate(self.vertices)}
        self.adj = [
            [index[w] for w in _candidates(graph, v, subset)]
            for v in self.vertices
        ]
        self.mate = [
            index[matching.other(v)] if matching.matched(v) else UNMATCHED
            for v in self.vertices
        ]
        n = len(self.vertices)
        self.parent = [UNMATCHED] * n
        self.base = list(range(n))
        self.blossom = [False] * n

    def run(self) -> int:
        n_augmented = 0
        for root in range(len(self.vertices)):
            if self.mate[root] != UNMATCHED:
                continue
            end = self._find_path(root)
            if end != UNMATCHED:
                self._augment(end)
                n_augmented += 1

        for i, j in enumerate(self.mate):
            if j != UNMATCHED and i < j:
                self.matching.match(self.vertices[i], self.vertices[j])
        return n_augmented

    def _find_path(self, root: int) -> int:
        n = len(self.vertices)
        mate, parent, base = self.mate, self.parent, self.base
        used = [False] * n
        parent[:] = [UNMATCHED] * n
        base[:] = range(n)

        used[root] = True
        queue: deque[int] = deque([root])
        while queue:
            v = queue.popleft()
            for to in self.adj[v]:
                if base[v] == base[to] or mate[v] == to:
                    continue
                if to == root or (mate[to] != UNMATCHED and parent[mate[to]] != UNMATCHED):
                    # odd cycle: contract the blossom onto its base
                    cur = self._lca(v, to)
                    self.blossom = [False] * n
                    self._mark_path(v, cur, to)
                    self._mark_path(to, cur, v)
                    for i in range(n):
                        if self.blossom[base[i]]:
                            base[i] = cur
                            if not used[i]:
                                used[i] = True
                                queue.append(i)
                elif parent[to] == UNMATCHED:
                    parent[to] = v
                    if mate[to] == UNMATCHED:
                        return to
                    used[mate[to]] = True
                    queue.append(mate[to])
        return UNMATCHED

    def _lca(self, a: int, b: int) -> int:
        mate, parent, base = self.mate, self.parent, self.base
        seen = [False] * len(self.vertices)
        while True:
            a = base[a]
            seen[a] = True
            if mate[a] == UNMATCHED:
                break
            a = parent[mate[a]]
        while True:
            b = base[b]
            if seen[b]:
                return b
            b = parent[mate[b]]

    def _mark_path(self, v: int, b: int, child: int) -> None:
        mate, parent, base = self.mate, self.parent, self.base
        while base[v] != b:
            self.blossom[base[v]] = True
            self.blossom[base[mate[v]]] = True
            parent[v] = child
            child = mate[v]
            v = parent[mate[v]]

    def _augment(self, v: int) -> None:
        mate, parent = self.mate, self.parent
        while v != UNMATCHED:
            pv = parent[v]
            ppv = mate[pv]
            mate[v] = pv
            mate[pv] = v
            v = ppv
