"""
Motif generator - short melodic ideas and their development.

A motif is a list of scale degrees. Generation walks from a start degree
using a position-dependent movement policy: rise through the first half,
fall through the second, resolve down at the end. Development applies one
of a fixed set of transforms and always returns a new list.
"""

from __future__ import annotations

import logging
import math

from chuk_mcp_composer.constants import STEP_COUNT, MotifVariation
from chuk_mcp_composer.core.rng import RandomSource, chance, choose

logger = logging.getLogger(__name__)

# Root three times, fifth and third once each
START_DEGREES: list[int] = [0, 0, 0, 4, 2]

# Per-bar development used when building a phrase; bars past the end reuse the last
PHRASE_VARIATIONS: list[MotifVariation] = ["repeat", "transpose-up", "call-response", "extension"]

TRANSPOSE_STEP = 2


def _clamp(degree: int, scale_length: int) -> int:
    return max(0, min(degree, scale_length - 1))


def melodic_movement(position: int, length: int, rng: RandomSource) -> int:
    """
    Movement in degrees for one step of a motif.

    Args:
        position: Step index within the motif
        length: Total motif length
        rng: Random source

    Returns:
        Degree offset (-1, 0, +1 or +2, mirrored in the second half)
    """
    if position >= length - 2:
        return -1 if chance(rng, 0.6) else 0

    r = rng.next()
    if r < 0.5:
        movement = 1
    elif r < 0.7:
        movement = 2
    elif r < 0.85:
        movement = 0
    else:
        movement = -1

    if position < length / 2:
        return movement
    return -movement


def generate_motif(scale_length: int, length: int = 8, *, rng: RandomSource) -> list[int]:
    """
    Generate a motif.

    The start degree is drawn from START_DEGREES, then every step applies
    a movement and records the clamped result, so the start degree itself
    is never emitted unmoved.

    Args:
        scale_length: Number of degrees in the scale
        length: Number of notes
        rng: Random source

    Returns:
        List of degrees in [0, scale_length - 1]; all zeros for an empty scale
    """
    if scale_length <= 0:
        return [0] * max(length, 0)

    degree = choose(rng, START_DEGREES)
    motif: list[int] = []
    for i in range(length):
        degree = _clamp(degree + melodic_movement(i, length, rng), scale_length)
        motif.append(degree)
    return motif


def develop_motif(
    motif: list[int],
    variation: MotifVariation | str,
    scale_length: int,
    *,
    rng: RandomSource,
) -> list[int]:
    """
    Apply one development transform.

    Unknown variation names fall through to a light jitter (each note has a
    20% chance of moving one degree).

    Args:
        motif: Source motif (never modified)
        variation: Transform name
        scale_length: Number of degrees in the scale
        rng: Random source

    Returns:
        A new motif
    """
    if not motif:
        return generate_motif(scale_length, 8, rng=rng)

    top = max(scale_length - 1, 0)

    if variation == "repeat":
        return list(motif)
    if variation == "transpose-up":
        return [min(d + TRANSPOSE_STEP, top) for d in motif]
    if variation == "transpose-down":
        return [max(d - TRANSPOSE_STEP, 0) for d in motif]
    if variation == "retrograde":
        return list(reversed(motif))
    if variation == "inversion":
        highest = max(motif)
        return [highest - d for d in motif]
    if variation == "augmentation":
        return [d for d in motif for _ in range(2)]
    if variation == "fragmentation":
        return motif[: math.ceil(len(motif) / 2)]
    if variation == "extension":
        return list(motif) + generate_motif(scale_length, 2, rng=rng)
    if variation == "call-response":
        half = len(motif) // 2
        return motif[:half] + [max(0, d - 1) for d in motif[half:]]

    developed: list[int] = []
    for d in motif:
        if chance(rng, 0.2):
            d = _clamp(d + (1 if chance(rng, 0.5) else -1), scale_length)
        developed.append(d)
    return developed


def generate_melodic_phrase(
    genre: str,
    scale_length: int,
    bars: int = 4,
    intensity: float = 0.5,
    *,
    rng: RandomSource,
    steps: int = STEP_COUNT,
) -> list[int]:
    """
    Build a full-length phrase from one motif.

    Each bar develops the base motif (repeat, transpose-up, call-response,
    then extension), every degree is boosted by floor(intensity * 2), and
    the result is padded or cut to exactly `steps` values.

    Args:
        genre: Genre id (used for logging only; the policy is genre-neutral)
        scale_length: Number of degrees in the scale
        bars: Number of bars to develop
        intensity: 0-1 energy
        rng: Random source
        steps: Output length

    Returns:
        Degrees, exactly `steps` long
    """
    if scale_length <= 0 or bars <= 0:
        return [0] * steps

    motif_length = max(1, min(8, steps // bars))
    base = generate_motif(scale_length, motif_length, rng=rng)
    logger.debug("Phrase for %s: base motif %s", genre, base)

    boost = math.floor(intensity * 2)
    phrase: list[int] = []
    for bar in range(bars):
        variation = PHRASE_VARIATIONS[min(bar, len(PHRASE_VARIATIONS) - 1)]
        developed = develop_motif(base, variation, scale_length, rng=rng)
        phrase.extend(min(d + boost, scale_length - 1) for d in developed)

    phrase.extend([0] * (steps - len(phrase)))
    return phrase[:steps]
