"""
Tests for the chord progression generator.
"""

import math

import pytest

from chuk_mcp_composer.catalog import CatalogLoader
from chuk_mcp_composer.core.rng import SeededRandom
from chuk_mcp_composer.generators import ChordProgressionGenerator, chords_to_pattern
from chuk_mcp_composer.generators.chords import FUNCTION_DEGREES

MAJOR = ["C", "D", "E", "F", "G", "A", "B"]
MINOR = ["C", "D", "Eb", "F", "G", "Ab", "Bb"]


@pytest.fixture
def chords(catalog: CatalogLoader) -> ChordProgressionGenerator:
    """Generator with the catalog's progressions and qualities."""
    return ChordProgressionGenerator(catalog.curated_progressions(), catalog.qualities)


class TestGenerateChords:
    """Tests for the functional-harmony walk."""

    @pytest.mark.parametrize("bars", range(1, 10))
    def test_chord_count(self, chords: ChordProgressionGenerator, bars: int):
        """One chord per two bars, rounded up."""
        progression = chords.generate_chords(7, "HOUSE", bars, rng=SeededRandom(bars))
        assert len(progression) == math.ceil(bars / 2)

    def test_degrees_are_functional(self, chords: ChordProgressionGenerator):
        """Every degree belongs to a harmonic function."""
        allowed = {d for degrees in FUNCTION_DEGREES.values() for d in degrees}
        progression = chords.generate_chords(7, "HOUSE", 40, rng=SeededRandom(2))
        assert set(progression) <= allowed

    def test_empty_scale(self, chords: ChordProgressionGenerator):
        """An empty scale yields tonic chords."""
        assert chords.generate_chords(0, "HOUSE", 4, rng=SeededRandom(1)) == [0, 0]


class TestProgressions:
    """Tests for curated progressions."""

    def test_techno_verbatim(self, chords: ChordProgressionGenerator, catalog: CatalogLoader):
        """TECHNO progressions come straight from the catalog."""
        curated = catalog.get_genre("TECHNO").curated_progressions
        for seed in range(20):
            assert chords.get_progression("TECHNO", rng=SeededRandom(seed)) in curated

    def test_returns_copy(self, chords: ChordProgressionGenerator):
        """Callers cannot change the catalog."""
        progression = chords.get_progression("TECHNO", rng=SeededRandom(1))
        progression.append(99)
        assert all(len(p) == 4 for p in chords.progressions["TECHNO"])

    def test_unknown_genre_uses_house(
        self, chords: ChordProgressionGenerator, catalog: CatalogLoader
    ):
        """Genres without progressions borrow HOUSE's."""
        curated = catalog.get_genre("HOUSE").curated_progressions
        assert chords.get_progression("SYNTHPOP", rng=SeededRandom(1)) in curated


class TestChordSpelling:
    """Tests for qualities and spelling."""

    def test_quality_tables(self):
        """Qualities follow the scale family and genre overrides."""
        quality = ChordProgressionGenerator.get_chord_quality
        assert quality(0, "ionian", "HOUSE") == "maj"
        assert quality(1, "ionian", "HOUSE") == "min"
        assert quality(0, "minor", "HOUSE") == "min"
        assert quality(2, "minor", "HOUSE") == "maj"
        assert quality(5, "ionian", "HAPPYHARDCORE") == "maj"
        assert quality(2, "ionian", "TRAP") == "min"
        assert quality(7, "ionian", "HOUSE") == "maj"

    def test_scale_walk_spelling(self, chords: ChordProgressionGenerator):
        """By default chord tones step semitones/2 places along the scale."""
        assert chords.get_chord(0, "maj", MAJOR) == ["C", "E", "F"]
        assert chords.get_chord(-1, "maj", MAJOR) == ["B", "D", "E"]

    def test_chromatic_spelling(self, chords: ChordProgressionGenerator):
        """Chromatic spelling uses true semitones."""
        assert chords.get_chord(0, "maj", MAJOR, chromatic=True) == ["C", "E", "G"]
        assert chords.get_chord(0, "min", MINOR, chromatic=True) == ["C", "Eb", "G"]

    def test_empty_scale_fallback(self, chords: ChordProgressionGenerator):
        """No scale notes yields a C major triad."""
        assert chords.get_chord(0, "maj", []) == ["C", "E", "G"]

    def test_inversion(self, chords: ChordProgressionGenerator):
        """Inversions rotate the chord."""
        assert chords.get_chord_with_inversion(0, "maj", MAJOR, 1, chromatic=True) == [
            "E",
            "G",
            "C",
        ]

    def test_sequence(self, chords: ChordProgressionGenerator):
        """Every third chord is inverted."""
        sequence = chords.get_chord_sequence([0, 3, 4, 0], MAJOR, "ionian", "HOUSE")
        assert [c.inversion for c in sequence] == [0, 0, 1, 0]
        assert [c.quality for c in sequence] == ["maj", "maj", "maj", "maj"]
        assert sequence[0].notes == ("C", "E", "F")


class TestChordsToPattern:
    """Tests for chords_to_pattern."""

    def test_even_spacing(self):
        """Chords are spread evenly."""
        pattern = chords_to_pattern([0, 3, 4, 0])
        assert [i for i, v in enumerate(pattern) if v] == [0, 8, 16, 24]

    def test_empty_progression(self):
        """No chords hits every eight steps."""
        assert [i for i, v in enumerate(chords_to_pattern([])) if v] == [0, 8, 16, 24]

    def test_length(self):
        """The pattern has the requested length."""
        assert len(chords_to_pattern([0, 1, 2], 16)) == 16
