"""
Chemical elements and bond labels.

This module provides the element registry, the organic-subset valence rules
used for implicit hydrogens, and the :class:`Bond` label enumeration carried
on graph edges.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, ClassVar, Final, FrozenSet

if TYPE_CHECKING:
    from kekulipy.types import Edge


# Periodic table symbols in atomic-number order (index 0 is the "any" atom).
_SYMBOLS: Final[tuple[str, ...]] = tuple("""
    *
    H                                                  He
    Li Be                               B  C  N  O  F  Ne
    Na Mg                               Al Si P  S  Cl Ar
    K  Ca Sc Ti V  Cr Mn Fe Co Ni Cu Zn Ga Ge As Se Br Kr
    Rb Sr Y  Zr Nb Mo Tc Ru Rh Pd Ag Cd In Sn Sb Te I  Xe
    Cs Ba La Ce Pr Nd Pm Sm Eu Gd Tb Dy Ho Er Tm Yb Lu
          Hf Ta W  Re Os Ir Pt Au Hg Tl Pb Bi Po At Rn
    Fr Ra Ac Th Pa U  Np Pu Am Cm Bk Cf Es Fm Md No Lr
          Rf Db Sg Bh Hs Mt Ds Rg Cn Nh Fl Mc Lv Ts Og
""".split())

# Allowed valences of the Daylight "organic subset", lowest first.
ORGANIC_VALENCES: Final[dict[str, tuple[int, ...]]] = {
    "B": (3,),
    "C": (4,),
    "N": (3, 5),
    "O": (2,),
    "P": (3, 5),
    "S": (2, 4, 6),
    "F": (1,),
    "Cl": (1,),
    "Br": (1,),
    "I": (1,),
}

ORGANIC_SUBSET: Final[FrozenSet[str]] = frozenset(ORGANIC_VALENCES)

# Elements that may be written as lowercase (aromatic) subset atoms
AROMATIC_SUBSET: Final[FrozenSet[str]] = frozenset({"B", "C", "N", "O", "P", "S"})

# Aromatic atoms whose pi contribution is a lone pair (O, S) or an empty
# orbital (B); their hydrogens are counted from sigma bonds only.
_NO_PI_BOND: Final[FrozenSet[str]] = frozenset({"B", "O", "S"})


@dataclass(frozen=True, slots=True)
class Element:
    """Immutable element data.

    Attributes:
        atomic_number: Atomic number (proton count).
        symbol: Element symbol (e.g., "C", "Cl").
        valences: Allowed organic-subset valences (empty if not organic).
    """

    atomic_number: int
    symbol: str
    valences: tuple[int, ...] = ()

    # Class-level registry
    _by_symbol: ClassVar[dict[str, "Element"]] = {}
    _by_number: ClassVar[dict[int, "Element"]] = {}

    def __post_init__(self) -> None:
        Element._by_symbol[self.symbol] = self
        Element._by_number[self.atomic_number] = self

    @classmethod
    def from_symbol(cls, symbol: str) -> "Element | None":
        """Look up element by symbol (lowercase aromatic forms accepted)."""
        if symbol in cls._by_symbol:
            return cls._by_symbol[symbol]
        return cls._by_symbol.get(symbol.capitalize())

    @classmethod
    def from_atomic_number(cls, num: int) -> "Element | None":
        """Look up element by atomic number."""
        return cls._by_number.get(num)

    @classmethod
    def of(cls, symbol: str) -> "Element":
        """Look up element by symbol, raising for unknown symbols.

        Raises:
            KeyError: If the symbol is not a known element.
        """
        element = cls.from_symbol(symbol)
        if element is None:
            raise KeyError(f"Unknown element symbol: {symbol!r}")
        return element

    @property
    def organic(self) -> bool:
        """Whether the element belongs to the organic subset."""
        return self.symbol in ORGANIC_SUBSET

    @property
    def aromatic_subset(self) -> bool:
        """Whether the element may appear as a lowercase subset atom."""
        return self.symbol in AROMATIC_SUBSET

    def implicit_hydrogens(self, valence: int) -> int:
        """Number of hydrogens needed to reach the next allowed valence.

        Args:
            valence: Sum of bond orders already on the atom.

        Returns:
            Implicit hydrogen count (0 when above every allowed valence).
        """
        for allowed in self.valences:
            if valence <= allowed:
                return allowed - valence
        return 0

    def aromatic_implicit_hydrogens(self, valence: int) -> int:
        """Implicit hydrogens of the aromatic (lowercase) form.

        Args:
            valence: Sum of bond orders plus one for the pi bond.

        Returns:
            Implicit hydrogen count, or -1 if the element has no aromatic
            subset form.
        """
        if not self.aromatic_subset:
            return -1
        if self.symbol in _NO_PI_BOND:
            return self.implicit_hydrogens(valence - 1)
        return self.implicit_hydrogens(valence)

    def __str__(self) -> str:
        return self.symbol


ELEMENTS: Final[tuple[Element, ...]] = tuple(
    Element(num, sym, ORGANIC_VALENCES.get(sym, ()))
    for num, sym in enumerate(_SYMBOLS)
)


# ============================================================================
# Bond labels
# ============================================================================

class Bond(Enum):
    """Edge label.

    ``DOT`` means the atoms are not bonded and ``IMPLICIT`` is either a single
    or an aromatic bond depending on the endpoints. ``IMPLICIT_AROMATIC`` and
    ``DOUBLE_AROMATIC`` are written by kekulization so that a localised
    aromatic system can be told apart from one drawn with explicit bonds.
    ``UP`` and ``DOWN`` are directional single bonds: their meaning flips
    with the direction of traversal.
    """

    DOT = "."
    IMPLICIT = ""
    IMPLICIT_AROMATIC = "(arom)"
    SINGLE = "-"
    DOUBLE = "="
    DOUBLE_AROMATIC = "(arom)="
    TRIPLE = "#"
    QUADRUPLE = "$"
    AROMATIC = ":"
    UP = "/"
    DOWN = "\\"

    @property
    def token(self) -> str:
        """The SMILES token for this label."""
        return _TOKENS[self]

    @property
    def electrons(self) -> int:
        """Total number of shared electrons (not pairs).

        Raises:
            ValueError: For ``IMPLICIT``, whose electron count is unknown.
        """
        if self is Bond.IMPLICIT:
            raise ValueError("unknown number of electrons in implied bond")
        return _ELECTRONS[self]

    @property
    def order(self) -> int:
        """Bond order used for valence sums."""
        return _ELECTRONS[self] // 2

    @property
    def directional(self) -> bool:
        """Whether this is an up/down label."""
        return self in _INVERSE

    def inverse(self) -> "Bond":
        """The inverse label (UP <-> DOWN), or this label if non-directional."""
        return _INVERSE.get(self, self)

    def edge(self, u: int, v: int) -> "Edge":
        """Create an edge between ``u`` and ``v`` with this label."""
        from kekulipy.types import Edge
        return Edge(u, v, self)

    def __str__(self) -> str:
        return self.token


_ELECTRONS: Final[dict[Bond, int]] = {
    Bond.DOT: 0,
    Bond.IMPLICIT: 2,
    Bond.IMPLICIT_AROMATIC: 2,
    Bond.SINGLE: 2,
    Bond.DOUBLE: 4,
    Bond.DOUBLE_AROMATIC: 4,
    Bond.TRIPLE: 6,
    Bond.QUADRUPLE: 8,
    Bond.AROMATIC: 3,
    Bond.UP: 2,
    Bond.DOWN: 2,
}

# Enum values must be unique, so the aromatic-flavoured labels carry a
# marker in their value but share the token of their plain counterpart.
_TOKENS: Final[dict[Bond, str]] = {
    **{bond: bond.value for bond in Bond},
    Bond.IMPLICIT_AROMATIC: "",
    Bond.DOUBLE_AROMATIC: "=",
}

_INVERSE: Final[dict[Bond, Bond]] = {
    Bond.UP: Bond.DOWN,
    Bond.DOWN: Bond.UP,
}
