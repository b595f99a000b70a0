"""
Core primitives - pitch classes, scales, chord qualities and the random source.

These are leaf types with no dependencies on the rest of the package.
"""

from chuk_mcp_composer.core.pitch import PitchClass, symbols_to_offsets
from chuk_mcp_composer.core.rng import (
    RandomSource,
    SeededRandom,
    SequenceRandom,
    chance,
    choose,
    rand_int,
    weighted_choice,
)
from chuk_mcp_composer.core.scale import ChordQuality, Scale, is_minor_family

__all__ = [
    "ChordQuality",
    "PitchClass",
    "RandomSource",
    "Scale",
    "SeededRandom",
    "SequenceRandom",
    "chance",
    "choose",
    "is_minor_family",
    "rand_int",
    "symbols_to_offsets",
    "weighted_choice",
]
