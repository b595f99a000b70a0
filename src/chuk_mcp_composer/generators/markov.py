"""
Markov melody generator - genre-conditioned interval chains.

Melodies are walked as semitone intervals above the tonic (0-12). A fixed
transition table encodes step-wise voice-leading tendencies; a GenreRule
reweights it towards the genre's favourite intervals, decides where notes
land in the bar, and finally shapes the line with a named energy curve.
"""

from __future__ import annotations

import logging

from chuk_mcp_composer.constants import DEFAULT_RULE_GENRE, STEP_COUNT
from chuk_mcp_composer.core.rng import RandomSource, chance, choose
from chuk_mcp_composer.models.genre import GenreRule

logger = logging.getLogger(__name__)

# interval -> {next interval: weight}
TRANSITIONS: dict[int, dict[int, float]] = {
    0: {2: 30, 4: 25, 5: 20, 7: 15, 0: 10},
    1: {0: 40, 2: 30, 3: 20, 4: 10},
    2: {0: 30, 3: 30, 4: 25, 5: 15},
    3: {2: 25, 4: 30, 5: 25, 7: 20},
    4: {2: 20, 5: 30, 7: 30, 0: 20},
    5: {4: 25, 7: 35, 0: 25, 3: 15},
    6: {5: 35, 7: 35, 0: 20, 4: 10},
    7: {5: 25, 0: 30, 4: 20, 12: 25},
    8: {7: 30, 0: 30, 5: 20, 12: 20},
    9: {7: 25, 0: 35, 12: 30, 5: 10},
    10: {7: 30, 0: 30, 12: 30, 5: 10},
    11: {0: 40, 7: 30, 12: 30},
    12: {7: 30, 5: 25, 4: 25, 0: 20},
}

STRONG_BEATS: frozenset[int] = frozenset({0, 8, 16, 24})
WEAK_BEATS: frozenset[int] = frozenset({2, 6, 10, 14, 18, 22, 26, 30})

# Semitone above the tonic -> nearest scale degree
SEMITONE_TO_DEGREE: list[int] = [0, 0, 1, 1, 2, 3, 3, 4, 4, 5, 5, 6, 0]

PREFERRED_BOOST = 1.5
AVOID_PENALTY = 0.2
SMOOTHNESS_BOOST = 1.3
REPEAT_PENALTY = 0.5
LEAP_PROBABILITY = 0.1

STEPS_PER_BAR = 8


class MarkovMelodyGenerator:
    """
    Generates melodies from genre rules.

    Rules are keyed by genre id. Genres without a rule borrow the fallback
    genre's rule for generation but skip energy shaping.
    """

    def __init__(self, rules: dict[str, GenreRule], fallback: str = DEFAULT_RULE_GENRE):
        """
        Initialize the generator.

        Args:
            rules: Genre id -> rule
            fallback: Genre whose rule is used for unknown genres
        """
        self.rules = {name.upper(): rule for name, rule in rules.items()}
        self.fallback = fallback.upper()

    def get_rule(self, genre: str) -> GenreRule:
        """Rule for a genre, falling back when the genre has none."""
        rule = self.rules.get(genre.upper())
        if rule is not None:
            return rule
        fallback = self.rules.get(self.fallback)
        if fallback is None:
            logger.warning("No melody rule for '%s' or fallback '%s'", genre, self.fallback)
            return GenreRule()
        logger.debug("No melody rule for '%s', using '%s'", genre, self.fallback)
        return fallback

    def decide_note_placement(self, step: int, rule: GenreRule, rng: RandomSource) -> bool:
        """
        Decide whether a note sounds on a step.

        Strong beats almost always sound; weak beats follow the rule's
        density lifted by syncopation; everything else is sparse.
        """
        if step in STRONG_BEATS:
            return chance(rng, 0.95)
        if step in WEAK_BEATS:
            return chance(rng, rule.rhythm_density * (1 + rule.syncopation * 0.5))
        return chance(rng, rule.rhythm_density * 0.3)

    def get_next_interval(self, current: int, rule: GenreRule, rng: RandomSource) -> int:
        """
        Choose the next interval.

        Args:
            current: Current interval (0-12); unknown values use row 0
            rule: Genre rule
            rng: Random source

        Returns:
            Next interval
        """
        row = TRANSITIONS.get(current, TRANSITIONS[0])

        weighted: list[tuple[int, float]] = []
        for candidate, weight in row.items():
            if candidate in rule.preferred_intervals:
                weight *= PREFERRED_BOOST
            if candidate in rule.avoid_intervals:
                weight *= AVOID_PENALTY
            if abs(candidate - current) <= 2:
                weight *= SMOOTHNESS_BOOST
            if candidate == current and chance(rng, 0.3):
                weight *= REPEAT_PENALTY
            weighted.append((candidate, weight))

        if rule.preferred_intervals and chance(rng, LEAP_PROBABILITY):
            return choose(rng, rule.preferred_intervals)

        total = sum(weight for _, weight in weighted)
        remaining = rng.next() * total
        for candidate, weight in weighted:
            remaining -= weight
            if remaining <= 0:
                return candidate
        return 0

    @staticmethod
    def interval_to_scale_degree(interval: int, scale_length: int) -> int:
        """
        Map a semitone interval onto a scale degree.

        Intervals of an octave or more are lifted by seven degrees (capped
        at the top of the scale) before wrapping into the scale.
        """
        if scale_length <= 0:
            return 0
        degree = SEMITONE_TO_DEGREE[interval % 12]
        if interval >= 12:
            degree = min(degree + 7, scale_length - 1)
        return degree % scale_length

    def apply_genre_shaping(self, melody: list[int], genre: str, scale_length: int) -> list[int]:
        """
        Shape a melody with the genre's energy curve.

        Every sounding step is scaled by the curve at its position, then
        clamped into the genre's melodic range (never past the top of
        the scale). Genres without their own rule are returned unchanged.

        Args:
            melody: Degrees (0 = rest)
            genre: Genre id
            scale_length: Number of degrees in the scale; caps the range

        Returns:
            A new, shaped melody
        """
        rule = self.rules.get(genre.upper())
        if rule is None or not melody:
            return list(melody)

        low, high = rule.melodic_range
        if scale_length > 0:
            high = min(high, scale_length - 1)
            low = min(low, high)
        total = len(melody)
        shaped: list[int] = []
        for i, value in enumerate(melody):
            if value == 0:
                shaped.append(0)
                continue
            scaled = value * rule.energy_curve.multiplier(i / total)
            shaped.append(int(max(low, min(high, scaled))))
        return shaped

    def generate_melody(
        self,
        scale_length: int,
        genre: str,
        bars: int = 4,
        *,
        rng: RandomSource,
    ) -> list[int]:
        """
        Generate a melody.

        Args:
            scale_length: Number of degrees in the scale
            genre: Genre id
            bars: Length in bars (8 steps each)
            rng: Random source

        Returns:
            Degrees, bars * 8 long; all zeros for an empty scale
        """
        steps = max(bars, 0) * STEPS_PER_BAR
        if scale_length <= 0:
            return [0] * (steps or STEP_COUNT)

        rule = self.get_rule(genre)
        melody = [0] * steps
        current = 0
        for i in range(steps):
            if self.decide_note_placement(i, rule, rng):
                current = self.get_next_interval(current, rule, rng)
                melody[i] = self.interval_to_scale_degree(current, scale_length)

        return self.apply_genre_shaping(melody, genre, scale_length)
