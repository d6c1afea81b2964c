"""
Core chemical graph types.

This module defines the graph model used throughout the library: immutable
:class:`Atom` values, :class:`Edge` objects with mutable labels, the
:class:`Graph` container and the stereo :class:`Topology` descriptors.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum, IntFlag
from typing import TYPE_CHECKING, Iterator, Sequence

from kekulipy.elements import Bond, Element

if TYPE_CHECKING:
    from typing import Self


# =============================================================================
# Atoms
# =============================================================================

@dataclass(frozen=True, slots=True)
class Atom:
    """An atom (vertex label).

    Attributes:
        element: The element.
        aromatic: Whether this atom is aromatic.
        charge: Formal charge.
        isotope: Mass number, or -1 if unspecified.
        hydrogens: Explicit hydrogen count (bracket atoms only).
        atom_class: Atom class number (0 if unset).
        subset: True for organic-subset shorthand atoms whose hydrogen count
            is implied by the element's valence rules.
    """

    element: Element
    aromatic: bool = False
    charge: int = 0
    isotope: int = -1
    hydrogens: int = 0
    atom_class: int = 0
    subset: bool = False

    @classmethod
    def aliphatic(cls, symbol: str, hydrogens: int = 0, **kwargs) -> "Atom":
        """Create an aliphatic bracket atom."""
        return cls(Element.of(symbol), hydrogens=hydrogens, **kwargs)

    @classmethod
    def aromatic_atom(cls, symbol: str, hydrogens: int = 0, **kwargs) -> "Atom":
        """Create an aromatic bracket atom."""
        return cls(Element.of(symbol), aromatic=True, hydrogens=hydrogens, **kwargs)

    @classmethod
    def aliphatic_subset(cls, symbol: str) -> "Atom":
        """Create an organic-subset atom (e.g. ``C``)."""
        element = Element.of(symbol)
        if not element.organic:
            raise ValueError(f"{symbol} is not in the organic subset")
        return cls(element, subset=True)

    @classmethod
    def aromatic_subset(cls, symbol: str) -> "Atom":
        """Create an aromatic organic-subset atom (e.g. ``c``)."""
        element = Element.of(symbol)
        if not element.aromatic_subset:
            raise ValueError(f"{symbol} has no aromatic subset form")
        return cls(element, aromatic=True, subset=True)

    @property
    def symbol(self) -> str:
        """Element symbol, lowercase if aromatic."""
        symbol = self.element.symbol
        return symbol.lower() if self.aromatic else symbol

    def to_aliphatic(self) -> "Atom":
        """The same atom without the aromatic flag."""
        if not self.aromatic:
            return self
        return replace(self, aromatic=False)

    def to_subset(self) -> "Atom":
        """The organic-subset form of this atom's element."""
        if self.aromatic:
            return Atom.aromatic_subset(self.element.symbol)
        return Atom.aliphatic_subset(self.element.symbol)


# =============================================================================
# Edges
# =============================================================================

@dataclass(slots=True, eq=False)
class Edge:
    """A labelled edge between two vertices.

    The endpoint order matters only for directional labels: ``label`` is the
    label seen travelling from ``u`` to ``v``.

    Attributes:
        u: First endpoint.
        v: Second endpoint.
        label: Bond label (mutable).
    """

    u: int
    v: int
    label: Bond = Bond.IMPLICIT

    def either(self) -> int:
        """One endpoint of the edge (the first)."""
        return self.u

    def other(self, x: int) -> int:
        """Get the endpoint opposite ``x``.

        Raises:
            ValueError: If ``x`` is not an endpoint of this edge.
        """
        if x == self.u:
            return self.v
        if x == self.v:
            return self.u
        raise ValueError(f"{x} is not an endpoint of {self}")

    def label_from(self, x: int) -> Bond:
        """The label as seen when leaving vertex ``x``."""
        if x == self.u:
            return self.label
        if x == self.v:
            return self.label.inverse()
        raise ValueError(f"{x} is not an endpoint of {self}")

    def inverse(self) -> "Edge":
        """A new edge with the same endpoints and the inverted label."""
        return Edge(self.u, self.v, self.label.inverse())

    def __contains__(self, x: int) -> bool:
        return x == self.u or x == self.v

    def __str__(self) -> str:
        return f"{self.u}{self.label.token or '~'}{self.v}"


# =============================================================================
# Stereo configuration
# =============================================================================

class DoubleBondConfiguration(Enum):
    """Relative arrangement of the reference neighbours of a double bond."""

    UNSPECIFIED = 0
    TOGETHER = 1
    OPPOSITE = 2


class Configuration(Enum):
    """Tetrahedral winding of neighbours around a centre."""

    ANTI_CLOCKWISE = "@"
    CLOCKWISE = "@@"
    TH1 = "@TH1"
    TH2 = "@TH2"


class TopologyType(Enum):
    NONE = 0
    TETRAHEDRAL = 1


@dataclass(frozen=True, slots=True)
class Topology:
    """Stereo descriptor attached to a vertex.

    The default instance, :data:`Topology.UNKNOWN`, carries no
    configuration.
    """

    atom: int = -1
    vertices: tuple[int, ...] = ()
    configuration: Configuration | None = None
    type: TopologyType = TopologyType.NONE

    @classmethod
    def tetrahedral(
        cls,
        atom: int,
        vertices: Sequence[int],
        configuration: Configuration,
    ) -> "Topology":
        """Create a tetrahedral topology.

        Args:
            atom: The central vertex.
            vertices: The four neighbours, the first being the one the
                centre is viewed from.
            configuration: Winding of the remaining three neighbours.

        Raises:
            ValueError: If there are not exactly four neighbours.
        """
        if len(vertices) != 4:
            raise ValueError("tetrahedral topology requires 4 vertices")
        return cls(atom, tuple(vertices), configuration, TopologyType.TETRAHEDRAL)

    def transform(self, mapping: Sequence[int]) -> "Topology":
        """Renumber the topology with ``mapping[old] = new``."""
        if self.type is TopologyType.NONE:
            return self
        return replace(
            self,
            atom=mapping[self.atom],
            vertices=tuple(mapping[v] for v in self.vertices),
        )


Topology.UNKNOWN = Topology()


@dataclass(frozen=True, slots=True)
class DoubleBondDeclaration:
    """A pending cis/trans request for the double bond ``u=v``.

    ``x`` is a neighbour of ``u`` and ``y`` a neighbour of ``v``; the
    configuration describes ``x`` relative to ``y``.
    """

    u: int
    v: int
    x: int
    y: int
    configuration: DoubleBondConfiguration

    def __str__(self) -> str:
        sep = "\\" if self.configuration is DoubleBondConfiguration.TOGETHER else "/"
        return f"{self.x}/{self.u}={self.v}{sep}{self.y}"


# =============================================================================
# Graph
# =============================================================================

class GraphFlag(IntFlag):
    """Graph-level flags."""

    NONE = 0
    HAS_AROM = 0x1
    HAS_ATM_STRO = 0x2
    HAS_BND_STRO = 0x4


@dataclass(eq=False)
class Graph:
    """A chemical graph.

    Vertices are atoms held in insertion order; every vertex keeps its
    incident edges in insertion order plus a neighbour map for constant-time
    edge lookup.

    Example:
        >>> g = Graph()
        >>> c1 = g.add_atom(Atom.aliphatic_subset("C"))
        >>> c2 = g.add_atom(Atom.aliphatic_subset("O"))
        >>> g.add_edge(Bond.IMPLICIT.edge(c1, c2))
        >>> g.degree(c1)
        1
    """

    atoms: list[Atom] = field(default_factory=list)
    flags: GraphFlag = GraphFlag.NONE
    _edges: list[list[Edge]] = field(default_factory=list, repr=False)
    _neighbors: list[dict[int, Edge]] = field(default_factory=list, repr=False)
    _topologies: list[Topology] = field(default_factory=list, repr=False)
    _size: int = 0

    def __len__(self) -> int:
        """Return number of atoms."""
        return len(self.atoms)

    def __iter__(self) -> Iterator[Atom]:
        """Iterate over atoms."""
        return iter(self.atoms)

    @property
    def order(self) -> int:
        """Number of vertices."""
        return len(self.atoms)

    @property
    def size(self) -> int:
        """Number of edges."""
        return self._size

    # -- vertices -------------------------------------------------------------

    def add_atom(self, atom: Atom) -> int:
        """Add an atom and return its vertex index."""
        idx = len(self.atoms)
        self.atoms.append(atom)
        self._edges.append([])
        self._neighbors.append({})
        self._topologies.append(Topology.UNKNOWN)
        if atom.aromatic:
            self.flags |= GraphFlag.HAS_AROM
        return idx

    def atom(self, v: int) -> Atom:
        return self.atoms[v]

    def set_atom(self, v: int, atom: Atom) -> None:
        """Replace the atom at vertex ``v``."""
        self.atoms[v] = atom

    # -- edges ----------------------------------------------------------------

    def add_edge(self, edge: Edge) -> None:
        """Add an edge between two existing vertices.

        Raises:
            IndexError: If an endpoint does not exist.
            ValueError: If the vertices are already connected.
        """
        u, v = edge.u, edge.v
        if u >= len(self.atoms) or v >= len(self.atoms) or u < 0 or v < 0:
            raise IndexError(f"Vertex index out of bounds: {u}, {v}")
        if v in self._neighbors[u]:
            raise ValueError(f"Vertices {u} and {v} are already connected")
        self._edges[u].append(edge)
        self._edges[v].append(edge)
        self._neighbors[u][v] = edge
        self._neighbors[v][u] = edge
        self._size += 1
        if edge.label is Bond.AROMATIC:
            self.flags |= GraphFlag.HAS_AROM
        elif edge.label.directional:
            self.flags |= GraphFlag.HAS_BND_STRO

    def edge(self, u: int, v: int) -> Edge | None:
        """Get the edge between ``u`` and ``v``, or None."""
        return self._neighbors[u].get(v)

    def edges_of(self, v: int) -> list[Edge]:
        """Edges incident to ``v`` in insertion order."""
        return self._edges[v]

    def edges(self) -> Iterator[Edge]:
        """Iterate over every edge once."""
        for u, incident in enumerate(self._edges):
            for edge in incident:
                if edge.other(u) < u:
                    yield edge

    def neighbors(self, v: int) -> Iterator[int]:
        """Iterate over vertices adjacent to ``v``."""
        for edge in self._edges[v]:
            yield edge.other(v)

    def degree(self, v: int) -> int:
        return len(self._edges[v])

    def adjacent(self, u: int, v: int) -> bool:
        return v in self._neighbors[u]

    def replace(self, old: Edge, new: Edge) -> None:
        """Swap ``old`` for ``new``; both must join the same vertices."""
        u, v = old.u, old.v
        if {u, v} != {new.u, new.v}:
            raise ValueError(f"Cannot replace {old} with {new}")
        for w in (u, v):
            incident = self._edges[w]
            incident[incident.index(old)] = new
        self._neighbors[u][v] = new
        self._neighbors[v][u] = new
        if new.label.directional:
            self.flags |= GraphFlag.HAS_BND_STRO

    # -- valence --------------------------------------------------------------

    def bonded_valence(self, v: int) -> int:
        """Sum of the bond orders of the edges incident to ``v``."""
        return sum(edge.label.order for edge in self._edges[v])

    def implicit_hydrogens(self, v: int) -> int:
        """Hydrogen count of ``v`` that is not held as explicit vertices."""
        atom = self.atoms[v]
        if not atom.subset:
            return atom.hydrogens
        valence = self.bonded_valence(v)
        if atom.aromatic:
            return max(0, atom.element.aromatic_implicit_hydrogens(valence + 1))
        return atom.element.implicit_hydrogens(valence)

    # -- flags ----------------------------------------------------------------

    def has_flags(self, mask: GraphFlag) -> bool:
        return bool(self.flags & mask)

    def set_flags(self, mask: GraphFlag) -> None:
        self.flags |= mask

    def clear_flags(self, mask: GraphFlag) -> None:
        self.flags &= ~mask

    # -- topology -------------------------------------------------------------

    def topology_of(self, v: int) -> Topology:
        return self._topologies[v]

    def add_topology(self, topology: Topology) -> None:
        """Attach a topology to the vertex it describes."""
        if topology.type is TopologyType.NONE:
            return
        self._topologies[topology.atom] = topology
        self.flags |= GraphFlag.HAS_ATM_STRO

    # -- copies ---------------------------------------------------------------

    def permute(self, ranks: Sequence[int]) -> "Self":
        """Create a renumbered copy where vertex ``v`` becomes ``ranks[v]``.

        Incident edges of every vertex in the copy are ordered by the new
        index of the neighbour, so traversal order depends only on ``ranks``.

        Args:
            ranks: A permutation of ``range(self.order)``.

        Returns:
            New Graph instance with copied edges.
        """
        n = len(self.atoms)
        if sorted(ranks) != list(range(n)):
            raise ValueError("ranks must be a permutation of the vertices")

        inverse = [0] * n
        for v, rank in enumerate(ranks):
            inverse[rank] = v

        g = type(self)(flags=self.flags)
        for old in inverse:
            g.add_atom(self.atoms[old])
        for old in inverse:
            g.add_topology(self._topologies[old].transform(ranks))

        mapped = sorted(
            (min(ranks[e.u], ranks[e.v]), max(ranks[e.u], ranks[e.v]), e)
            for e in self.edges()
        )
        for _, _, e in mapped:
            g.add_edge(Edge(ranks[e.u], ranks[e.v], e.label))
        g.flags = self.flags
        return g

    def copy(self) -> "Self":
        """Create a copy with the same numbering and independent edges."""
        return self.permute(range(len(self.atoms)))
