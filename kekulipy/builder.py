"""
Incremental graph construction.

:class:`GraphBuilder` collects atoms, bonds and stereo declarations and turns
them into a :class:`~kekulipy.types.Graph`:

    >>> gb = GraphBuilder()
    >>> for symbol in ("F", "C", "C", "F"):
    ...     _ = gb.add_element(symbol)
    >>> g = (gb.connect(0, 1).double_bond(1, 2).connect(2, 3)
    ...        .geometric(1, 2).opposite(0, 3)
    ...        .build())
    >>> g.edge(0, 1).label_from(1), g.edge(2, 3).label_from(2)
    (<Bond.DOWN: '\\\\'>, <Bond.UP: '/'>)

Bond orders are tallied as bonds are added so that bracket atoms whose
hydrogen count matches the default valence can be turned into
organic-subset atoms on :meth:`GraphBuilder.build`.
"""

from __future__ import annotations

from typing import Sequence

from kekulipy.elements import Bond
from kekulipy.exceptions import IllegalConfigurationError
from kekulipy.transform.hydrogen import suppress_hydrogens
from kekulipy.transform.stereo import assign_directional_labels
from kekulipy.types import (
    Atom,
    Configuration,
    DoubleBondConfiguration,
    DoubleBondDeclaration,
    Edge,
    Graph,
    Topology,
)


class GraphBuilder:
    """Build a graph one atom and bond at a time.

    Every method returns the builder (or a sub-builder that returns to it),
    so calls can be chained.
    """

    def __init__(self) -> None:
        self._graph = Graph()
        self._valence: list[int] = []
        self._declarations: list[DoubleBondDeclaration] = []

    @property
    def graph(self) -> Graph:
        """The graph under construction."""
        return self._graph

    # -- atoms ----------------------------------------------------------------

    def add_atom(self, atom: Atom) -> "GraphBuilder":
        self._graph.add_atom(atom)
        self._valence.append(0)
        return self

    def add_element(self, symbol: str, hydrogens: int = 0) -> "GraphBuilder":
        """Add an aliphatic atom of ``symbol`` with an explicit hydrogen count."""
        return self.add_atom(Atom.aliphatic(symbol, hydrogens=hydrogens))

    # -- bonds ----------------------------------------------------------------

    def add_edge(self, edge: Edge) -> "GraphBuilder":
        """Add an edge, normalising the label to the endpoints' aromaticity.

        A single bond is only kept explicit between two aromatic atoms and an
        aromatic bond between two aromatic atoms is left implicit.
        """
        g = self._graph
        label = edge.label
        both_aromatic = g.atom(edge.u).aromatic and g.atom(edge.v).aromatic
        if label is Bond.SINGLE and not both_aromatic:
            edge.label = Bond.IMPLICIT
        elif label is Bond.AROMATIC and both_aromatic:
            edge.label = Bond.IMPLICIT
        g.add_edge(edge)
        self._valence[edge.u] += label.order
        self._valence[edge.v] += label.order
        return self

    def connect(self, u: int, v: int, label: Bond = Bond.IMPLICIT) -> "GraphBuilder":
        return self.add_edge(label.edge(u, v))

    def single_bond(self, u: int, v: int) -> "GraphBuilder":
        return self.connect(u, v, Bond.SINGLE)

    def aromatic_bond(self, u: int, v: int) -> "GraphBuilder":
        return self.connect(u, v, Bond.AROMATIC)

    def double_bond(self, u: int, v: int) -> "GraphBuilder":
        return self.connect(u, v, Bond.DOUBLE)

    # -- stereo ---------------------------------------------------------------

    def tetrahedral(self, u: int) -> "TetrahedralBuilder":
        """Start describing a tetrahedral centre at ``u``."""
        return TetrahedralBuilder(self, u)

    def geometric(self, u: int, v: int) -> "GeometricBuilder":
        """Start describing the configuration of the double bond ``u=v``."""
        return GeometricBuilder(self, u, v)

    def _declare(self, declaration: DoubleBondDeclaration) -> None:
        self._declarations.append(declaration)

    # -- result ---------------------------------------------------------------

    def build(self) -> Graph:
        """Finish the graph.

        Suppresses implied hydrogens, then assigns directional labels for
        every pending double-bond configuration. The pending list is handed
        over, so the builder starts a fresh one even if assignment fails.

        Raises:
            IllegalConfigurationError: If a double-bond configuration cannot
                be assigned.
        """
        suppress_hydrogens(self._graph, self._valence)
        declarations, self._declarations = self._declarations, []
        return assign_directional_labels(self._graph, declarations)


class TetrahedralBuilder:
    """Describe a tetrahedral centre.

    The centre is viewed from one neighbour (:meth:`looking_from`); the other
    three (:meth:`neighbors`) wind anticlockwise (``@``) or clockwise
    (``@@``) around it.
    """

    def __init__(self, builder: GraphBuilder, u: int) -> None:
        self._builder = builder
        self.u = u
        self.v: int | None = None
        self.vs: tuple[int, int, int] | None = None
        self.configuration: Configuration | None = None

    def looking_from(self, v: int) -> "TetrahedralBuilder":
        self.v = v
        return self

    def neighbors(self, *vs: int | Sequence[int]) -> "TetrahedralBuilder":
        """Set the three remaining neighbours, as arguments or one sequence.

        Raises:
            IllegalConfigurationError: If not exactly three are given.
        """
        if len(vs) == 1 and not isinstance(vs[0], int):
            vs = tuple(vs[0])
        if len(vs) != 3:
            raise IllegalConfigurationError("3 vertices required for tetrahedral centre")
        self.vs = tuple(vs)
        return self

    def parity(self, p: int) -> "TetrahedralBuilder":
        """Set the winding from a parity sign (< 0 anticlockwise, > 0 clockwise)."""
        if p < 0:
            return self.winding(Configuration.TH1)
        if p > 0:
            return self.winding(Configuration.TH2)
        raise IllegalConfigurationError("parity must be < 0 or > 0")

    def winding(self, configuration: Configuration) -> "TetrahedralBuilder":
        self.configuration = configuration
        return self

    def build(self) -> GraphBuilder:
        """Attach the topology and return to the graph builder.

        Raises:
            IllegalConfigurationError: If the viewing vertex, the neighbours or
                the winding is missing.
        """
        if self.configuration is None:
            raise IllegalConfigurationError("no configuration defined")
        if self.vs is None:
            raise IllegalConfigurationError("no neighbors defined")
        if self.v is None:
            raise IllegalConfigurationError("no vertex to look from defined")
        topology = Topology.tetrahedral(self.u, (self.v, *self.vs), self.configuration)
        self._builder.graph.add_topology(topology)
        return self._builder


class GeometricBuilder:
    """Describe the configuration of the double bond ``u=v``."""

    def __init__(self, builder: GraphBuilder, u: int, v: int) -> None:
        self._builder = builder
        self.u = u
        self.v = v
        self.x: int | None = None
        self.y: int | None = None
        self.configuration = DoubleBondConfiguration.UNSPECIFIED

    def together(self, x: int, y: int) -> GraphBuilder:
        """``x`` (on ``u``) and ``y`` (on ``v``) are on the same side."""
        return self.configure(x, y, DoubleBondConfiguration.TOGETHER)

    def opposite(self, x: int, y: int) -> GraphBuilder:
        """``x`` (on ``u``) and ``y`` (on ``v``) are on opposite sides."""
        return self.configure(x, y, DoubleBondConfiguration.OPPOSITE)

    def configure(
        self,
        x: int,
        y: int,
        configuration: DoubleBondConfiguration,
    ) -> GraphBuilder:
        self.x = x
        self.y = y
        self.configuration = configuration
        self._builder._declare(
            DoubleBondDeclaration(self.u, self.v, x, y, configuration)
        )
        return self._builder

    def __str__(self) -> str:
        sep = "\\" if self.configuration is DoubleBondConfiguration.TOGETHER else "/"
        return f"{self.x}/{self.u}={self.v}{sep}{self.y}"
