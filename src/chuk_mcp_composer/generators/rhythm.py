"""
Rhythm pattern generator - Euclidean rhythms and drum shaping.

Drum templates are literal grids from the genre catalog; this module only
shapes them: intensity adds hats and snare fills, thinning drops hits for
quieter snapshots, humanization adds accents and ghost notes, and fills
mark phrase ends.

Matrices are lists of four channels in bank order: kick, snare, clap, hihat.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from chuk_mcp_composer.constants import (
    STEP_COUNT,
    ErrorMessages,
    PatternVariation,
    TrackRole,
    VelocityClass,
)
from chuk_mcp_composer.core.rng import RandomSource, chance
from chuk_mcp_composer.models.genre import DrumTemplate, GenreProfile

logger = logging.getLogger(__name__)

KICK = TrackRole.KICK.index
SNARE = TrackRole.SNARE.index
CLAP = TrackRole.CLAP.index
HIHAT = TrackRole.HIHAT.index

PHRASE_STEPS = 8
SECTION_STEPS = 16
FILL_LENGTH = 4
SHIFT_STEPS = 4


def generate_euclidean(pulses: int, steps: int, rotate: int = 0) -> list[int]:
    """
    Distribute hits as evenly as possible with a bucket accumulator.

    Each step adds `pulses` to a bucket; whenever it reaches `steps` the
    step is a hit. The bucket starts pre-charged so step 0 is always a hit.
    The result is rotated left by `rotate`, wrapping.

    Args:
        pulses: Hits wanted (values >= steps fill every step)
        steps: Pattern length
        rotate: Rotation offset (any integer)

    Returns:
        Pattern of 0/1 values

    Example:
        generate_euclidean(4, 16) -> hits at 0, 4, 8, 12
    """
    if steps < 0:
        raise ValueError(ErrorMessages.NEGATIVE_STEPS.format(steps=steps))
    if steps == 0:
        return []

    pulses = max(pulses, 0)
    pattern: list[int] = []
    # Pre-charged so the first hit lands on step 0
    bucket = steps - pulses if pulses else 0
    for _ in range(steps):
        bucket += pulses
        if bucket >= steps:
            bucket -= steps
            pattern.append(1)
        else:
            pattern.append(0)

    offset = rotate % steps
    return pattern[offset:] + pattern[:offset]


def generate_drum_pattern(
    template: DrumTemplate,
    intensity: float,
    *,
    rng: RandomSource,
) -> list[list[int]]:
    """
    Copy a genre template and push it with intensity.

    Above 0.7 intensity each empty hat step has a 20% chance of a hit;
    above 0.9 each of the last four snare steps has a 50% chance.

    Args:
        template: Genre drum template
        intensity: 0-1 energy
        rng: Random source

    Returns:
        Four-channel matrix
    """
    matrix = template.as_matrix()
    steps = len(matrix[HIHAT])

    if intensity > 0.7:
        hats = matrix[HIHAT]
        for i in range(steps):
            if hats[i] == 0 and chance(rng, 0.2):
                hats[i] = VelocityClass.NORMAL

    if intensity > 0.9:
        snare = matrix[SNARE]
        for i in range(max(steps - FILL_LENGTH, 0), steps):
            if chance(rng, 0.5):
                snare[i] = VelocityClass.NORMAL

    return matrix


def thin_drum_matrix(
    template: DrumTemplate,
    intensity: float,
    *,
    rng: RandomSource,
) -> list[list[int]]:
    """
    Keep each template hit with probability `intensity`.

    Channels are thinned in template order (kick, snare, clap, hihat) and
    surviving hits become plain hits.
    """
    return [
        [1 if value and chance(rng, intensity) else 0 for value in channel]
        for channel in template.as_matrix()
    ]


def humanize_drums(
    matrix: list[list[int]],
    profile: GenreProfile,
    *,
    rng: RandomSource,
) -> list[list[int]]:
    """
    Add feel to snare and hats in place.

    Plain snare hits become accents with probability `humanize` (half of
    the time); empty hat steps become ghost notes with probability
    `ghost_notes * 0.5`.

    Args:
        matrix: Four-channel matrix (modified)
        profile: Genre feel profile
        rng: Random source

    Returns:
        The same matrix
    """
    snare = matrix[SNARE]
    hats = matrix[HIHAT]
    for step in range(len(snare)):
        if snare[step] == VelocityClass.NORMAL and chance(rng, profile.humanize):
            snare[step] = VelocityClass.ACCENT if rng.next() > 0.5 else VelocityClass.NORMAL
        if hats[step] == VelocityClass.SILENT and chance(rng, profile.ghost_notes * 0.5):
            hats[step] = VelocityClass.ROLL
    return matrix


def add_drum_fills(
    matrix: list[list[int]],
    probability: float = 0.5,
    *,
    rng: RandomSource,
) -> list[list[int]]:
    """
    Mark transitions in place.

    Each 8-step phrase may end with a four-step snare run; each 16-step
    section start has a 70% chance of a clap/crash hit.

    Args:
        matrix: Four-channel matrix (modified)
        probability: Chance of a fill per phrase
        rng: Random source

    Returns:
        The same matrix
    """
    steps = len(matrix[KICK])

    for phrase in range(steps // PHRASE_STEPS):
        phrase_end = (phrase + 1) * PHRASE_STEPS
        if chance(rng, probability):
            for i in range(phrase_end - FILL_LENGTH, phrase_end):
                matrix[SNARE][i] = VelocityClass.NORMAL

    for section_start in range(0, steps, SECTION_STEPS):
        if chance(rng, 0.7):
            matrix[CLAP][section_start] = VelocityClass.NORMAL

    return matrix


def create_variation(
    pattern: list[int],
    variation: PatternVariation | str = "subtle",
    *,
    rng: RandomSource,
) -> list[int]:
    """
    Vary a pattern.

    - subtle: each step toggles with 10% probability
    - dense: empty steps fill with 20% probability
    - sparse: hits drop with 30% probability
    - invert: hits and rests swap
    - shift: rotate left by one beat

    Unknown variations return an unchanged copy.
    """
    if variation == "invert":
        return [1 if v == 0 else 0 for v in pattern]
    if variation == "shift":
        return pattern[SHIFT_STEPS:] + pattern[:SHIFT_STEPS]

    varied = list(pattern)
    for i, value in enumerate(varied):
        if variation == "subtle" and chance(rng, 0.1):
            varied[i] = 1 if value == 0 else 0
        elif variation == "dense" and value == 0 and chance(rng, 0.2):
            varied[i] = 1
        elif variation == "sparse" and value != 0 and chance(rng, 0.3):
            varied[i] = 0
    return varied


@dataclass(frozen=True)
class PatternAnalysis:
    """Summary of a pattern's shape."""

    density: float
    note_count: int
    contour: str  # static, ascending, descending or undulating
    is_empty: bool


def analyze_pattern(pattern: list[int]) -> PatternAnalysis:
    """
    Describe a pattern.

    Contour compares the mean of the first and second halves of the
    sounding values; a difference over 0.5 either way is a direction.
    """
    notes = [v for v in pattern if v != 0]
    density = len(notes) / len(pattern) if pattern else 0.0

    contour = "static"
    if len(notes) > 1:
        half = len(notes) // 2
        first = sum(notes[:half]) / half
        second = sum(notes[half:]) / (len(notes) - half)
        if second > first + 0.5:
            contour = "ascending"
        elif second < first - 0.5:
            contour = "descending"
        else:
            contour = "undulating"

    return PatternAnalysis(
        density=density,
        note_count=len(notes),
        contour=contour,
        is_empty=not notes,
    )


def fit_to_steps(values: list[int], steps: int = STEP_COUNT) -> list[int]:
    """Pad with rests or truncate to exactly `steps` values."""
    return (list(values) + [0] * steps)[:steps]
