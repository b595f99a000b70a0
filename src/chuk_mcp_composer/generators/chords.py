"""
Chord progression generator - functional harmony and curated progressions.

Two sources of progressions:
- A functional-harmony walk (tonic -> predominant -> dominant -> tonic)
  that picks degrees belonging to each function.
- Hand-authored per-genre progressions from the genre catalog.

Chords are spelled onto scale notes. By default a chord tone is found by
stepping semitones/2 places along the scale, which is how the engine has
always voiced its pads; pass chromatic=True for true pitch-class math.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum

from chuk_mcp_composer.constants import DEFAULT_CHORD_QUALITY, DEFAULT_RULE_GENRE, STEP_COUNT
from chuk_mcp_composer.core.pitch import PitchClass
from chuk_mcp_composer.core.rng import RandomSource, choose, weighted_choice
from chuk_mcp_composer.core.scale import ChordQuality, is_minor_family

logger = logging.getLogger(__name__)


class HarmonicFunction(str, Enum):
    """Functional roles a chord can play."""

    TONIC = "tonic"
    PREDOMINANT = "predominant"
    DOMINANT = "dominant"


FUNCTION_TRANSITIONS: dict[HarmonicFunction, list[tuple[HarmonicFunction, float]]] = {
    HarmonicFunction.TONIC: [
        (HarmonicFunction.PREDOMINANT, 0.6),
        (HarmonicFunction.DOMINANT, 0.3),
        (HarmonicFunction.TONIC, 0.1),
    ],
    HarmonicFunction.PREDOMINANT: [
        (HarmonicFunction.DOMINANT, 0.7),
        (HarmonicFunction.TONIC, 0.2),
        (HarmonicFunction.PREDOMINANT, 0.1),
    ],
    HarmonicFunction.DOMINANT: [
        (HarmonicFunction.TONIC, 0.8),
        (HarmonicFunction.PREDOMINANT, 0.15),
        (HarmonicFunction.DOMINANT, 0.05),
    ],
}

# I, iii, vi / ii, IV, V / V
FUNCTION_DEGREES: dict[HarmonicFunction, list[int]] = {
    HarmonicFunction.TONIC: [0, 2, 5],
    HarmonicFunction.PREDOMINANT: [1, 3, 4],
    HarmonicFunction.DOMINANT: [4],
}

MAJOR_QUALITIES: list[str] = ["maj", "min", "min", "maj", "maj", "min", "dim"]
MINOR_QUALITIES: list[str] = ["min", "dim", "maj", "min", "min", "maj", "maj"]

GENRE_QUALITY_OVERRIDES: dict[str, list[str]] = {
    "HAPPYHARDCORE": ["maj", "min", "min", "maj", "maj", "maj", "dim"],
    "TRAP": ["min", "dim", "min", "min", "min", "dim", "dim"],
    "DUBSTEP": ["min", "dim", "min", "min", "min", "dim", "dim"],
}

FALLBACK_CHORD: list[str] = ["C", "E", "G"]
EMPTY_PROGRESSION_SPACING = 8


@dataclass(frozen=True)
class ChordVoicing:
    """A chord in a sequence: degree, quality and spelled notes."""

    degree: int
    quality: str
    notes: tuple[str, ...]
    inversion: int = 0


class ChordProgressionGenerator:
    """
    Generates and spells chord progressions.

    Holds the curated per-genre progressions and the chord-quality table;
    everything else is stateless.
    """

    def __init__(
        self,
        progressions: dict[str, list[list[int]]],
        qualities: dict[str, ChordQuality],
        fallback_genre: str = DEFAULT_RULE_GENRE,
    ):
        """
        Initialize the generator.

        Args:
            progressions: Genre id -> curated progressions
            qualities: Quality name -> ChordQuality
            fallback_genre: Genre used when a genre has no progressions
        """
        self.progressions = {name.upper(): p for name, p in progressions.items() if p}
        self.qualities = qualities
        self.fallback_genre = fallback_genre.upper()

    def generate_chords(
        self,
        scale_length: int,
        genre: str,
        bars: int = 4,
        *,
        rng: RandomSource,
    ) -> list[int]:
        """
        Walk the functional-harmony chain.

        Starts on the tonic; each chord picks the next function by weight
        and then a degree of that function uniformly.

        Args:
            scale_length: Number of degrees in the scale
            genre: Genre id (the chain itself is genre-neutral)
            bars: Length in bars; one chord per two bars
            rng: Random source

        Returns:
            ceil(bars / 2) degrees; zeros for an empty scale
        """
        count = math.ceil(max(bars, 0) / 2)
        if scale_length <= 0:
            return [0] * count

        function = HarmonicFunction.TONIC
        chords: list[int] = []
        for _ in range(count):
            function = weighted_choice(rng, FUNCTION_TRANSITIONS[function])
            degree = choose(rng, FUNCTION_DEGREES[function])
            chords.append(degree % scale_length)

        logger.debug("Functional progression for %s: %s", genre, chords)
        return chords

    def get_progression(self, genre: str, *, rng: RandomSource) -> list[int]:
        """
        Pick one curated progression for a genre.

        Args:
            genre: Genre id; unknown genres use the fallback genre
            rng: Random source

        Returns:
            A copy of one curated progression
        """
        options = self.progressions.get(genre.upper())
        if options is None:
            logger.warning("No curated progressions for '%s', using '%s'", genre, self.fallback_genre)
            options = self.progressions.get(self.fallback_genre, [[0, 3, 4, 0]])
        return list(choose(rng, options))

    @staticmethod
    def get_chord_quality(degree: int, scale_type: str, genre: str) -> str:
        """
        Quality name for a degree.

        Args:
            degree: Scale degree (any integer; wrapped into 0-6)
            scale_type: Scale name, classified into major or minor family
            genre: Genre id; some genres override the table

        Returns:
            Quality name such as "maj" or "min"
        """
        table = GENRE_QUALITY_OVERRIDES.get(genre.upper())
        if table is None:
            table = MINOR_QUALITIES if is_minor_family(scale_type) else MAJOR_QUALITIES
        return table[degree % 7]

    def resolve_quality(self, quality: str | ChordQuality) -> ChordQuality:
        """Look up a quality by name, falling back to the default."""
        if isinstance(quality, ChordQuality):
            return quality
        found = self.qualities.get(quality)
        if found is not None:
            return found
        logger.warning("Unknown chord quality '%s', using '%s'", quality, DEFAULT_CHORD_QUALITY)
        return self.qualities.get(DEFAULT_CHORD_QUALITY, ChordQuality(DEFAULT_CHORD_QUALITY, (0, 4, 7)))

    def get_chord(
        self,
        degree: int,
        quality: str | ChordQuality,
        scale_notes: list[str],
        chromatic: bool = False,
    ) -> list[str]:
        """
        Spell a chord onto scale notes.

        Args:
            degree: Root degree (negative values wrap)
            quality: Quality name or object
            scale_notes: Pitch symbols of the scale
            chromatic: Use true semitone math instead of the semitones/2 walk

        Returns:
            Note symbols, root first
        """
        if not scale_notes:
            return list(FALLBACK_CHORD)

        intervals = self.resolve_quality(quality).intervals
        length = len(scale_notes)
        root_index = degree % length

        if not chromatic:
            return [scale_notes[(root_index + semitones // 2) % length] for semitones in intervals]

        root = PitchClass.parse(scale_notes[root_index])
        prefer_flats = any(note.endswith("b") for note in scale_notes)
        return [root.transpose(semitones).spell(prefer_flats) for semitones in intervals]

    def get_chord_with_inversion(
        self,
        degree: int,
        quality: str | ChordQuality,
        scale_notes: list[str],
        inversion: int = 0,
        chromatic: bool = False,
    ) -> list[str]:
        """Spell a chord and rotate it so the given chord tone is lowest."""
        chord = self.get_chord(degree, quality, scale_notes, chromatic)
        if not chord:
            return chord
        shift = inversion % len(chord)
        return chord[shift:] + chord[:shift]

    def get_chord_sequence(
        self,
        progression: list[int],
        scale_notes: list[str],
        scale_type: str,
        genre: str,
        chromatic: bool = False,
    ) -> list[ChordVoicing]:
        """
        Spell a whole progression.

        Every third chord is played in first inversion for smoother voice
        leading.
        """
        sequence: list[ChordVoicing] = []
        for i, degree in enumerate(progression):
            quality = self.get_chord_quality(degree, scale_type, genre)
            inversion = 1 if i % 3 == 2 else 0
            notes = self.get_chord_with_inversion(degree, quality, scale_notes, inversion, chromatic)
            sequence.append(ChordVoicing(degree, quality, tuple(notes), inversion))
        return sequence


def chords_to_pattern(progression: list[int], steps: int = STEP_COUNT) -> list[int]:
    """
    Space chord hits evenly across a step grid.

    Args:
        progression: Chord degrees (only the count matters)
        steps: Grid length

    Returns:
        Pattern with one hit per chord; an empty progression hits every 8 steps
    """
    pattern = [0] * steps
    if not progression:
        for i in range(0, steps, EMPTY_PROGRESSION_SPACING):
            pattern[i] = 1
        return pattern

    spacing = max(1, steps // len(progression))
    for i in range(len(progression)):
        if i * spacing < steps:
            pattern[i * spacing] = 1
    return pattern
