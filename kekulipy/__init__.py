"""
Kekulipy - Pure Python chemical graph toolkit.

A zero-dependency library for building molecular graphs, assigning Kekulé
structures to aromatic systems and encoding double-bond stereo as
directional bond labels.

    >>> from kekulipy import Atom, Graph, Bond, kekulize
    >>> g = Graph()
    >>> for _ in range(6):
    ...     _ = g.add_atom(Atom.aromatic_subset("C"))
    >>> for i in range(6):
    ...     g.add_edge(Bond.IMPLICIT.edge(i, (i + 1) % 6))
    >>> sum(e.label.order == 2 for e in kekulize(g).edges())
    3

Submodules:
    kekulipy.rings     - Ring membership and small-ring tests
    kekulipy.transform - Kekulization, resonance, stereo labels, hydrogens
"""

import logging

__version__ = "0.1.0"

# Core types
from kekulipy.types import (
    Atom,
    Configuration,
    DoubleBondConfiguration,
    DoubleBondDeclaration,
    Edge,
    Graph,
    GraphFlag,
    Topology,
    TopologyType,
)

# Construction
from kekulipy.builder import GeometricBuilder, GraphBuilder, TetrahedralBuilder

# Algorithms
from kekulipy.canon import canonical_ranks, Canonicalizer
from kekulipy.matching import Matching
from kekulipy.transform import (
    assign_directional_labels,
    kekulize,
    kekulize_in_place,
    resonate,
)

# Exceptions
from kekulipy.exceptions import (
    AromaticityError,
    ChemError,
    IllegalConfigurationError,
    KekulizationError,
    ResonanceError,
)

# Element data
from kekulipy.elements import Bond, Element, ORGANIC_SUBSET, AROMATIC_SUBSET

# Submodules
from kekulipy import rings, transform

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Types
    "Atom", "Configuration", "DoubleBondConfiguration", "DoubleBondDeclaration",
    "Edge", "Graph", "GraphFlag", "Topology", "TopologyType",
    # Construction
    "GraphBuilder", "TetrahedralBuilder", "GeometricBuilder",
    # Algorithms
    "canonical_ranks", "Canonicalizer", "Matching",
    "kekulize", "kekulize_in_place", "resonate", "assign_directional_labels",
    # Exceptions
    "ChemError", "AromaticityError", "KekulizationError", "ResonanceError",
    "IllegalConfigurationError",
    # Elements
    "Element", "Bond", "ORGANIC_SUBSET", "AROMATIC_SUBSET",
    # Submodules
    "rings", "transform",
]
