"""
Tests for the Markov melody generator.
"""

import pytest

from chuk_mcp_composer.catalog import CatalogLoader
from chuk_mcp_composer.core.rng import SeededRandom, SequenceRandom
from chuk_mcp_composer.generators import MarkovMelodyGenerator
from chuk_mcp_composer.generators.markov import TRANSITIONS
from chuk_mcp_composer.models import GenreRule


@pytest.fixture
def generator(catalog: CatalogLoader) -> MarkovMelodyGenerator:
    """Generator with the catalog's rules."""
    return MarkovMelodyGenerator(catalog.melody_rules())


class TestRules:
    """Tests for rule lookup."""

    def test_own_rule(self, generator: MarkovMelodyGenerator):
        """Genres with a rule use it."""
        assert generator.get_rule("techno").melodic_range == (1, 4)

    def test_fallback_rule(self, generator: MarkovMelodyGenerator):
        """Genres without a rule use HOUSE."""
        assert generator.get_rule("AMBIENT") == generator.get_rule("HOUSE")

    def test_no_rules_at_all(self):
        """With no rules a neutral rule is used."""
        assert MarkovMelodyGenerator({}).get_rule("TECHNO") == GenreRule()


class TestSteps:
    """Tests for the individual chain steps."""

    def test_strong_beats_sound(self, generator: MarkovMelodyGenerator):
        """Strong beats sound unless the roll is very high."""
        rule = generator.get_rule("HOUSE")
        assert generator.decide_note_placement(0, rule, SequenceRandom([0.9])) is True
        assert generator.decide_note_placement(16, rule, SequenceRandom([0.96])) is False

    def test_next_interval_from_table(self, generator: MarkovMelodyGenerator):
        """Next intervals come from the row or the preferred leaps."""
        rule = generator.get_rule("TECHNO")
        source = SeededRandom(3)
        for current in TRANSITIONS:
            nxt = generator.get_next_interval(current, rule, source)
            assert nxt in TRANSITIONS[current] or nxt in rule.preferred_intervals

    def test_interval_to_degree(self):
        """Semitones map to the nearest degree; octaves lift by seven."""
        assert MarkovMelodyGenerator.interval_to_scale_degree(0, 7) == 0
        assert MarkovMelodyGenerator.interval_to_scale_degree(7, 7) == 4
        assert MarkovMelodyGenerator.interval_to_scale_degree(12, 7) == 6
        assert MarkovMelodyGenerator.interval_to_scale_degree(7, 0) == 0

    def test_shaping_clamps_to_range(self, generator: MarkovMelodyGenerator):
        """TECHNO's flat curve only clamps into its melodic range."""
        assert generator.apply_genre_shaping([6, 0, 1, 2], "TECHNO", 7) == [4, 0, 1, 2]

    def test_shaping_skipped_without_rule(self, generator: MarkovMelodyGenerator):
        """Genres without a rule are returned unchanged."""
        melody = [6, 0, 5]
        shaped = generator.apply_genre_shaping(melody, "AMBIENT", 7)
        assert shaped == melody
        assert shaped is not melody


class TestGenerateMelody:
    """Tests for generate_melody."""

    @pytest.mark.parametrize("genre", ["TECHNO", "TRANCE", "LOFI", "AMBIENT"])
    def test_length_and_range(self, generator: MarkovMelodyGenerator, genre: str):
        """Melodies are eight steps per bar and stay in the scale."""
        melody = generator.generate_melody(7, genre, 4, rng=SeededRandom(11))
        assert len(melody) == 32
        assert all(0 <= d <= 6 for d in melody)

    def test_bars_set_length(self, generator: MarkovMelodyGenerator):
        """Two bars give sixteen steps."""
        assert len(generator.generate_melody(7, "HOUSE", 2, rng=SeededRandom(1))) == 16

    def test_empty_scale(self, generator: MarkovMelodyGenerator):
        """An empty scale yields silence."""
        assert generator.generate_melody(0, "HOUSE", 4, rng=SeededRandom(1)) == [0] * 32

    def test_reproducible(self, generator: MarkovMelodyGenerator):
        """The same seed gives the same melody."""
        a = generator.generate_melody(7, "TRAP", 4, rng=SeededRandom(21))
        b = generator.generate_melody(7, "TRAP", 4, rng=SeededRandom(21))
        assert a == b
