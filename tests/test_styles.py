"""
Tests for the style registry and track pattern rendering.
"""

import logging

import pytest

from chuk_mcp_composer.catalog import CatalogLoader
from chuk_mcp_composer.constants import StyleFamily
from chuk_mcp_composer.core.rng import SeededRandom, SequenceRandom
from chuk_mcp_composer.patterns import STYLES, StyleRegistry, generate_track_pattern


class TestStyleRegistry:
    """Tests for StyleRegistry."""

    def test_defaults(self):
        """Every family has a default."""
        assert STYLES.default_name(StyleFamily.BASS) == "root-pulse"
        assert STYLES.default_name(StyleFamily.LEAD) == "basic"
        assert STYLES.default_name(StyleFamily.PAD) == "sustain"

    def test_aliases(self):
        """Aliases resolve to the same style."""
        assert STYLES.get("bass", "offbeat") is STYLES.get("bass", "rolling")
        assert STYLES.get("pad", "lush") is STYLES.get("pad", "sustain-chords")

    def test_unknown_style_falls_back(self, caplog):
        """Unknown names use the family default with a warning."""
        with caplog.at_level(logging.WARNING):
            style = STYLES.get(StyleFamily.LEAD, "kazoo")
        assert style is STYLES.get(StyleFamily.LEAD, "basic")
        assert "kazoo" in caplog.text

    def test_unknown_family(self):
        """Unknown families are an error."""
        with pytest.raises(ValueError, match="Unknown style family"):
            STYLES.names("drums")

    def test_duplicate_registration(self):
        """A name can only be registered once per family."""
        registry = StyleRegistry()

        @registry.register(StyleFamily.BASS, "thump", default=True)
        def thump(steps, density, intensity, rng, *, change_rate=4):
            return [1] * steps

        with pytest.raises(ValueError, match="already registered"):
            registry.register(StyleFamily.BASS, "thump")(thump)

        assert registry.has(StyleFamily.BASS, "thump")
        assert not registry.has(StyleFamily.LEAD, "thump")
        assert len(registry) == 1

    def test_every_style_renders(self):
        """Every registered style yields a full pattern of step values."""
        for family in StyleFamily:
            for name in STYLES.names(family):
                for intensity in (0.1, 0.5, 1.0):
                    pattern = STYLES.render(
                        family, name, 32, 0.6, intensity, SeededRandom(8), change_rate=4
                    )
                    assert len(pattern) == 32, name
                    assert all(v in (0, 1, 2, 3) for v in pattern), name

    def test_render_rejects_bad_steps(self, rng):
        """Non-positive step counts are an error."""
        with pytest.raises(ValueError):
            STYLES.render("bass", "root-pulse", 0, 0.5, 0.5, rng)

    def test_quiet_leads_are_stripped(self):
        """Below 0.3 intensity lead hits can be removed."""
        pattern = STYLES.render("lead", "supersaw", 32, 0.5, 0.1, SequenceRandom([0.9]))
        assert pattern == [0] * 32

    def test_change_rate(self, rng):
        """Chord pads follow the change rate."""
        pattern = STYLES.render("pad", "sustain-chords", 32, 0.0, 0.5, rng, change_rate=8)
        assert [i for i, v in enumerate(pattern) if v] == [0, 8, 16, 24]


class TestGenerateTrackPattern:
    """Tests for generate_track_pattern."""

    def test_techno_bass(self, catalog: CatalogLoader):
        """TECHNO's minimal pulse always hits each bar downbeat."""
        genre = catalog.get_genre("TECHNO")
        pattern = generate_track_pattern(genre, "bass", 0.8, rng=SeededRandom(3))
        assert all(pattern[i] == 1 for i in (0, 8, 16, 24))

    def test_techno_pad(self, catalog: CatalogLoader):
        """TECHNO's minimal pad sounds once at high intensity."""
        genre = catalog.get_genre("TECHNO")
        pattern = generate_track_pattern(genre, StyleFamily.PAD, 0.8, rng=SeededRandom(3))
        assert pattern == [1] + [0] * 31

    def test_synthwave_pad_uses_change_rate(self, catalog: CatalogLoader):
        """SYNTHWAVE pads change every four steps."""
        genre = catalog.get_genre("SYNTHWAVE")
        pattern = generate_track_pattern(genre, StyleFamily.PAD, 0.5, rng=SeededRandom(3))
        assert sum(pattern) == 8

    def test_empty_scale(self, catalog: CatalogLoader):
        """An empty scale yields silence."""
        genre = catalog.get_genre("TECHNO")
        pattern = generate_track_pattern(genre, "lead", 0.8, rng=SeededRandom(3), scale_length=0)
        assert pattern == [0] * 32

    def test_all_genres(self, catalog: CatalogLoader):
        """Every genre's configured styles render."""
        for genre in catalog.list_genres():
            for family in StyleFamily:
                pattern = generate_track_pattern(genre, family, 0.7, rng=SeededRandom(5))
                assert len(pattern) == 32
