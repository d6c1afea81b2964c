"""
Custom exceptions for kekulipy.

Input problems (a molecule that cannot be localised, a double-bond
configuration that cannot be honoured) derive from :class:`ChemError`.
:class:`ResonanceError` is kept outside that hierarchy: it signals a broken
internal invariant rather than bad input.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kekulipy.types import DoubleBondDeclaration


class ChemError(Exception):
    """Base exception for all chemistry-related errors."""
    
    pass


class AromaticityError(ChemError):
    """Error during aromaticity handling or kekulization."""
    
    pass


class KekulizationError(AromaticityError):
    """No alternating single/double assignment exists for the aromatic atoms.
    
    Attributes:
        n_undecided: Size of the undecided aromatic subset.
        n_matched: Number of undecided atoms that could be paired.
    """
    
    def __init__(
        self,
        message: str,
        n_undecided: int | None = None,
        n_matched: int | None = None,
    ) -> None:
        self.message = message
        self.n_undecided = n_undecided
        self.n_matched = n_matched
        
        if n_undecided is not None and n_matched is not None:
            super().__init__(f"{message} ({n_matched} of {n_undecided} atoms paired)")
        else:
            super().__init__(message)


class ResonanceError(RuntimeError):
    """Resonance re-localisation could not rebuild a perfect matching.
    
    The input already carried a valid Kekulé structure, so this indicates
    an internal inconsistency rather than an invalid molecule.
    """
    
    pass


class IllegalConfigurationError(ChemError, ValueError):
    """A stereo configuration is invalid or cannot be assigned.
    
    Attributes:
        declaration: The double-bond declaration being committed, if any.
    """
    
    def __init__(
        self,
        message: str,
        declaration: DoubleBondDeclaration | None = None,
    ) -> None:
        self.message = message
        self.declaration = declaration
        
        if declaration is not None:
            super().__init__(f"{message}: {declaration}")
        else:
            super().__init__(message)
