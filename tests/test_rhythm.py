"""
Tests for Euclidean rhythms and drum shaping.
"""

import pytest

from chuk_mcp_composer.catalog import CatalogLoader
from chuk_mcp_composer.core.rng import SeededRandom, SequenceRandom
from chuk_mcp_composer.generators import (
    add_drum_fills,
    analyze_pattern,
    create_variation,
    fit_to_steps,
    generate_drum_pattern,
    generate_euclidean,
    humanize_drums,
    thin_drum_matrix,
)
from chuk_mcp_composer.models import DrumTemplate, GenreProfile


def hits(pattern: list[int]) -> list[int]:
    return [i for i, v in enumerate(pattern) if v]


class TestEuclidean:
    """Tests for generate_euclidean."""

    def test_four_on_the_floor(self):
        """Four pulses over sixteen steps land on the beats."""
        assert hits(generate_euclidean(4, 16, 0)) == [0, 4, 8, 12]

    def test_tresillo(self):
        """Three over eight spreads as 3-3-2."""
        assert hits(generate_euclidean(3, 8)) == [0, 3, 6]

    @pytest.mark.parametrize("pulses", range(0, 40))
    def test_hit_count(self, pulses: int):
        """Exactly min(pulses, steps) hits, whatever the rotation."""
        for rotate in (0, 3, 31, -5):
            assert sum(generate_euclidean(pulses, 32, rotate)) == min(pulses, 32)

    def test_rotation_wraps(self):
        """Rotation shifts left and wraps."""
        assert hits(generate_euclidean(4, 16, 1)) == [3, 7, 11, 15]
        assert generate_euclidean(4, 16, 17) == generate_euclidean(4, 16, 1)

    def test_zero_steps(self):
        """No steps, no pattern."""
        assert generate_euclidean(3, 0) == []

    def test_negative_steps(self):
        """Negative step counts are an error."""
        with pytest.raises(ValueError):
            generate_euclidean(3, -1)


class TestDrumShaping:
    """Tests for drum matrices."""

    def test_low_intensity_is_template(self, catalog: CatalogLoader):
        """Below 0.7 the template is copied unchanged."""
        template = catalog.get_genre("TECHNO").drums
        matrix = generate_drum_pattern(template, 0.5, rng=SeededRandom(1))
        assert matrix == template.as_matrix()
        matrix[0][1] = 1
        assert template.kick[1] == 0

    def test_high_intensity_adds_hats(self, catalog: CatalogLoader):
        """Above 0.7 empty hats fill in."""
        template = catalog.get_genre("TECHNO").drums
        matrix = generate_drum_pattern(template, 0.8, rng=SequenceRandom([0.0]))
        assert matrix[3] == [1] * 32

    def test_thinning(self, catalog: CatalogLoader):
        """Full intensity keeps every hit; zero keeps none."""
        template = catalog.get_genre("TECHNO").drums
        full = thin_drum_matrix(template, 1.0, rng=SeededRandom(1))
        assert [hits(c) for c in full] == [hits(c) for c in template.as_matrix()]
        silent = thin_drum_matrix(template, 0.0, rng=SeededRandom(1))
        assert all(not any(channel) for channel in silent)

    def test_humanize_without_feel(self, catalog: CatalogLoader):
        """A profile with no humanize or ghost notes changes nothing."""
        template = catalog.get_genre("HOUSE").drums
        matrix = template.as_matrix()
        profile = GenreProfile(humanize=0.0, ghost_notes=0.0)
        assert humanize_drums(matrix, profile, rng=SeededRandom(1)) == template.as_matrix()

    def test_humanize_ghost_notes(self):
        """Empty hats become ghost notes."""
        matrix = DrumTemplate.silent().as_matrix()
        profile = GenreProfile(humanize=0.0, ghost_notes=1.0)
        humanize_drums(matrix, profile, rng=SequenceRandom([0.1]))
        assert matrix[3] == [3] * 32

    def test_fills(self):
        """Fills close each phrase and crash each section."""
        matrix = add_drum_fills(DrumTemplate.silent().as_matrix(), 1.0, rng=SequenceRandom([0.0]))
        assert hits(matrix[1]) == [4, 5, 6, 7, 12, 13, 14, 15, 20, 21, 22, 23, 28, 29, 30, 31]
        assert hits(matrix[2]) == [0, 16]


class TestVariation:
    """Tests for pattern variation and analysis."""

    def test_invert(self, rng):
        """Invert swaps hits and rests."""
        assert create_variation([1, 0, 2, 0], "invert", rng=rng) == [0, 1, 0, 1]

    def test_shift(self, rng):
        """Shift rotates by one beat."""
        pattern = [1, 0, 0, 0, 2, 0, 0, 0]
        assert create_variation(pattern, "shift", rng=rng) == [2, 0, 0, 0, 1, 0, 0, 0]

    def test_sparse_only_removes(self):
        """Sparse never adds hits."""
        pattern = generate_euclidean(12, 32)
        varied = create_variation(pattern, "sparse", rng=SeededRandom(4))
        assert all(v <= p for v, p in zip(varied, pattern, strict=True))

    def test_unknown_is_copy(self, rng):
        """Unknown variations copy the pattern."""
        pattern = [1, 0, 1]
        varied = create_variation(pattern, "sideways", rng=rng)
        assert varied == pattern
        assert varied is not pattern

    def test_analysis(self):
        """Analysis reports density and contour."""
        empty = analyze_pattern([0] * 32)
        assert empty.is_empty
        assert empty.contour == "static"

        rising = analyze_pattern([1, 0, 1, 0, 3, 0, 3, 0])
        assert rising.note_count == 4
        assert rising.density == 0.5
        assert rising.contour == "ascending"

    def test_fit_to_steps(self):
        """Fitting pads and truncates."""
        assert fit_to_steps([1, 2], 4) == [1, 2, 0, 0]
        assert fit_to_steps([1, 2, 3], 2) == [1, 2]
