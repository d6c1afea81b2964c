"""
Directional (up/down) bond labels for double-bond stereo.

A cis/trans double bond ``x-u=v-y`` is encoded by labelling ``u-x`` and
``v-y`` with ``UP``/``DOWN``: equal labels (seen from ``u`` and ``v``) put
``x`` and ``y`` on the same side. Conjugated double bonds share single bonds,
so a label chosen for one configuration constrains the next; when a choice
conflicts with labels already placed, existing labels are inverted to make
room.
"""

from __future__ import annotations

import logging
from typing import Iterator, MutableSequence

from kekulipy.elements import Bond
from kekulipy.exceptions import IllegalConfigurationError
from kekulipy.types import (
    DoubleBondConfiguration,
    DoubleBondDeclaration,
    Edge,
    Graph,
)

logger = logging.getLogger(__name__)


class DirectionalLabeller:
    """Assigns up/down labels for a sequence of double-bond declarations.

    Declarations are committed in order. Each one first clears clashing
    labels around its double bond, then tries three placements in turn:

    1. the preferred labels as derived from their surroundings,
    2. both labels inverted,
    3. the preferred labels after inverting every label reachable from
       ``v`` through other configured double bonds.

    Labels committed for earlier declarations are kept if a later one fails.

    Attributes:
        graph: The graph being labelled (modified in place).
        adj_to_db: Vertices of double bonds whose configuration is already
            committed.
    """

    def __init__(self, graph: Graph) -> None:
        self.graph = graph
        self.adj_to_db: set[int] = set()

    def assign(self, declarations: MutableSequence[DoubleBondDeclaration]) -> Graph:
        """Commit every declaration and empty the list.

        Raises:
            IllegalConfigurationError: If a declaration does not describe an
                ``x-u=v-y`` fragment or its labels cannot be placed.
        """
        for declaration in declarations:
            if declaration.configuration is DoubleBondConfiguration.UNSPECIFIED:
                continue
            self._check(declaration)
            self._commit(declaration)
        declarations.clear()
        return self.graph

    # -- validation -----------------------------------------------------------

    def _check(self, declaration: DoubleBondDeclaration) -> None:
        g = self.graph
        u, v, x, y = declaration.u, declaration.v, declaration.x, declaration.y
        if not (g.adjacent(u, x) and g.adjacent(u, v) and g.adjacent(v, y)):
            raise IllegalConfigurationError(
                "cannot assign directional labels, expected topology of 'x-u=v-y'",
                declaration,
            )
        if x == v or y == u:
            raise IllegalConfigurationError(
                "reference vertex is part of the double bond", declaration
            )
        if g.edge(u, v).label is not Bond.DOUBLE:
            raise IllegalConfigurationError(
                "cannot assign double bond configuration to non-double bond",
                declaration,
            )
        for a, b in ((u, x), (v, y)):
            if g.edge(a, b).label.order > 1:
                raise IllegalConfigurationError(
                    "reference bond of a double bond configuration is a multiple bond",
                    declaration,
                )

    # -- assignment -----------------------------------------------------------

    def _commit(self, declaration: DoubleBondDeclaration) -> None:
        g = self.graph
        u, v, x, y = declaration.u, declaration.v, declaration.x, declaration.y

        self._fix(u, v)
        self._fix(v, u)

        first = self._first_label(u, x)
        if declaration.configuration is DoubleBondConfiguration.TOGETHER:
            second = first
        else:
            second = first.inverse()

        if self._accepts(second, v, y):
            logger.debug("%s: direct assignment", declaration)
        elif self._accepts(first.inverse(), u, x) and self._accepts(second.inverse(), v, y):
            logger.debug("%s: inverted assignment", declaration)
            first = first.inverse()
            second = second.inverse()
        else:
            logger.debug("%s: inverting labels reachable from %d", declaration, v)
            self._invert_labels(v, u, visited={v})
            if not (self._accepts(first, u, x) and self._accepts(second, v, y)):
                raise IllegalConfigurationError(
                    "cannot assign geometric configuration", declaration
                )

        g.replace(g.edge(u, x), Edge(u, x, first))
        g.replace(g.edge(v, y), Edge(v, y, second))

        # other substituents take the opposite side
        for w, label in ((u, first), (v, second)):
            for edge in g.edges_of(w):
                if edge.label is not Bond.DOUBLE and not edge.label.directional:
                    edge.label = label.inverse() if edge.either() == w else label

        self.adj_to_db.add(u)
        self.adj_to_db.add(v)

    def _fix(self, u: int, p: int) -> None:
        """Invert labels around ``u`` when two of its bonds carry the same one."""
        other = None
        for edge in self.graph.edges_of(u):
            label = edge.label_from(u)
            if label.directional:
                if other is label:
                    self._invert_labels(u, p, visited={p, edge.other(u)})
                other = label

    def _first_label(self, u: int, x: int) -> Bond:
        """Preferred label for ``u-x`` given the labels already placed."""
        g = self.graph
        label = g.edge(u, x).label_from(u)

        # x belongs to a configured double bond: reuse its label
        if x in self.adj_to_db and g.degree(x) > 2:
            for f in g.edges_of(x):
                if f.other(x) != u and f.label is not Bond.DOUBLE and f.label.directional:
                    return f.label_from(x)

        # another substituent of u is labelled: take the opposite
        if g.degree(u) > 2:
            for f in g.edges_of(u):
                if f.other(u) != x and f.label is not Bond.DOUBLE and f.label.directional:
                    return f.label_from(u).inverse()

        return label if label.directional else Bond.DOWN

    def _accepts(self, label: Bond, u: int, v: int) -> bool:
        """Check that ``u-v`` can take ``label`` (seen from ``u``).

        Fails if another bond of ``u`` already has the same label, or if
        ``u-v`` itself already has a different one.
        """
        for edge in self.graph.edges_of(u):
            existing = edge.label_from(u)
            if not existing.directional:
                continue
            if edge.other(u) != v:
                if existing is label:
                    return False
            elif existing is not label:
                return False
        return True

    def _invert_labels(self, u: int, p: int, visited: set[int]) -> None:
        """Invert the bonds of ``u`` (except towards ``p``) depth first.

        The walk continues into a neighbour only if that neighbour belongs to
        a configured double bond.
        """
        g = self.graph
        visited.add(u)
        stack: list[tuple[int, int, Iterator[Edge]]] = [(u, p, iter(g.edges_of(u)))]
        while stack:
            w, parent, incident = stack[-1]
            for edge in incident:
                nbr = edge.other(w)
                if nbr in visited or nbr == parent:
                    continue
                g.replace(edge, edge.inverse())
                if nbr in self.adj_to_db:
                    visited.add(nbr)
                    stack.append((nbr, w, iter(g.edges_of(nbr))))
                    break
            else:
                stack.pop()


def assign_directional_labels(
    graph: Graph,
    declarations: MutableSequence[DoubleBondDeclaration],
) -> Graph:
    """Turn cis/trans declarations into up/down bond labels.

    Args:
        graph: Graph with the double bonds in place (modified in place).
        declarations: Declarations to commit; emptied on success.

    Returns:
        The input graph.

    Raises:
        IllegalConfigurationError: If a declaration is invalid or its labels
            conflict irreparably with those already assigned.

    Example:
        >>> decl = DoubleBondDeclaration(1, 2, 0, 3, DoubleBondConfiguration.OPPOSITE)
        >>> assign_directional_labels(g, [decl])  # F/C=C/F
    """
    return DirectionalLabeller(graph).assign(declarations)
