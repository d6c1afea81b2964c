"""Kekulization, resonance, stereo labels and hydrogen suppression."""

from kekulipy.transform.kekulize import (
    build_set,
    candidate_set,
    kekulize,
    kekulize_in_place,
    predetermined,
)
from kekulipy.transform.resonance import resonate
from kekulipy.transform.stereo import DirectionalLabeller, assign_directional_labels
from kekulipy.transform.hydrogen import suppress_hydrogens, suppressible

__all__ = [
    "build_set",
    "candidate_set",
    "kekulize",
    "kekulize_in_place",
    "predetermined",
    "resonate",
    "DirectionalLabeller",
    "assign_directional_labels",
    "suppress_hydrogens",
    "suppressible",
]
