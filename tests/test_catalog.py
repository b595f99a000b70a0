"""
Tests for the catalog loader and genre models.
"""

import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from chuk_mcp_composer.catalog import CatalogLoader
from chuk_mcp_composer.models import EnergyCurve, Genre, TempoRange

GENRE_IDS = {
    "AMBIENT",
    "CHIPTUNE",
    "CINEMATIC",
    "CYBERPUNK",
    "DNB",
    "DUBSTEP",
    "DUNGEONSYNTH",
    "ETHEREAL",
    "HAPPYHARDCORE",
    "HOUSE",
    "INDUSTRIAL",
    "LOFI",
    "RETROWAVE",
    "SYNTHPOP",
    "SYNTHWAVE",
    "TECHNO",
    "TRANCE",
    "TRAP",
}

CUSTOM_TECHNO = """
id: techno
description: Project override
tempo: [120, 125]
scale: minor
kit: CUSTOM
progressions:
  - [0, 3, 4, 0]
  - [0, 5, 3, 4]
"""


class TestScalesAndQualities:
    """Tests for scale and chord-quality lookup."""

    def test_scales_loaded(self, catalog: CatalogLoader):
        """The scale library loads."""
        assert "minor" in catalog.list_scales()
        assert "harmonicMinor" in catalog.list_scales()
        assert len(catalog.get_scale("minor")) == 7

    def test_unknown_scale_falls_back(self, catalog: CatalogLoader, caplog):
        """Unknown scales resolve to minor with a warning."""
        with caplog.at_level(logging.WARNING):
            scale = catalog.get_scale("nonexistent")
        assert scale.name == "minor"
        assert "nonexistent" in caplog.text

    def test_chord_quality(self, catalog: CatalogLoader):
        """Qualities are interval stacks."""
        assert catalog.get_chord_quality("maj").intervals == (0, 4, 7)
        assert catalog.get_chord_quality("min7").intervals == (0, 3, 7, 10)

    def test_unknown_quality_falls_back(self, catalog: CatalogLoader):
        """Unknown qualities resolve to maj."""
        assert catalog.get_chord_quality("weird").name == "maj"


class TestGenres:
    """Tests for genre loading and lookup."""

    def test_all_genres_load(self, catalog: CatalogLoader):
        """Every library genre parses."""
        genres = catalog.list_genres()
        assert {g.id for g in genres} == GENRE_IDS
        assert [g.id for g in genres] == sorted(g.id for g in genres)

    def test_every_genre_scale_exists(self, catalog: CatalogLoader):
        """Genres only reference known scales."""
        for genre in catalog.list_genres():
            assert genre.scale in catalog.scales, genre.id

    def test_lookup_is_case_insensitive(self, catalog: CatalogLoader):
        """Genre ids are matched in any case."""
        genre = catalog.get_genre("techno")
        assert genre is not None
        assert genre.id == "TECHNO"

    def test_unknown_genre_returns_none(self, catalog: CatalogLoader):
        """get_genre does not fall back."""
        assert catalog.get_genre("polka") is None

    def test_resolve_unknown_genre(self, catalog: CatalogLoader):
        """resolve_genre falls back to SYNTHWAVE and records a warning."""
        warnings: list[str] = []
        genre = catalog.resolve_genre("polka", warnings)
        assert genre.id == "SYNTHWAVE"
        assert len(warnings) == 1
        assert "polka" in warnings[0]

    def test_techno_definition(self, catalog: CatalogLoader):
        """TECHNO carries its full configuration."""
        genre = catalog.get_genre("TECHNO")
        assert genre.tempo.min_bpm == 130
        assert genre.tempo.max_bpm == 142
        assert genre.scale == "phrygian"
        assert genre.styles.bass_style == "minimal-pulse"
        assert genre.styles.pad_change_rate == 8
        assert genre.drums.kick[::4] == [1] * 8
        assert genre.rule is not None
        assert genre.rule.melodic_range == (1, 4)
        assert genre.rule.energy_curve is EnergyCurve.FLAT_HYPNOTIC

    def test_melody_rules(self, catalog: CatalogLoader):
        """Eight genres carry a Markov rule."""
        assert set(catalog.melody_rules()) == {
            "HAPPYHARDCORE",
            "SYNTHWAVE",
            "TECHNO",
            "HOUSE",
            "TRAP",
            "DNB",
            "TRANCE",
            "LOFI",
        }

    def test_curated_progressions(self, catalog: CatalogLoader):
        """Genres without curated progressions are left out."""
        curated = catalog.curated_progressions()
        assert "TECHNO" in curated
        assert not {"SYNTHPOP", "RETROWAVE", "ETHEREAL"} & set(curated)
        assert catalog.get_genre("SYNTHPOP").harmony_progressions() == (
            catalog.get_genre("SYNTHPOP").progressions
        )


class TestProjectGenres:
    """Tests for project genre overrides."""

    def test_project_overrides_library(self, temp_dir: Path):
        """A project genre replaces the library genre with the same id."""
        (temp_dir / "genres").mkdir()
        (temp_dir / "genres" / "techno.yaml").write_text(CUSTOM_TECHNO)

        catalog = CatalogLoader(project_path=temp_dir)
        genre = catalog.get_genre("TECHNO")
        assert genre.description == "Project override"
        assert genre.tempo.max_bpm == 125
        assert genre.rule is None
        assert len(catalog.list_genres()) == len(GENRE_IDS)

    def test_broken_files_are_skipped(self, temp_dir: Path, caplog):
        """Unparseable or invalid genre files are skipped with a warning."""
        genres = temp_dir / "genres"
        genres.mkdir()
        (genres / "broken.yaml").write_text("id: [")
        (genres / "invalid.yaml").write_text(
            "id: SOLO\ntempo: [100, 110]\nscale: minor\nkit: X\nprogressions:\n  - [0, 1, 2, 3]\n"
        )

        with caplog.at_level(logging.WARNING):
            catalog = CatalogLoader(project_path=temp_dir)
            ids = {g.id for g in catalog.list_genres()}
        assert "SOLO" not in ids
        assert ids == GENRE_IDS
        assert "broken.yaml" in caplog.text

    def test_clear_cache(self, temp_dir: Path):
        """Cleared caches reload from disk."""
        catalog = CatalogLoader(project_path=temp_dir)
        assert catalog.get_genre("TECHNO").description != "Project override"

        (temp_dir / "genres").mkdir()
        (temp_dir / "genres" / "techno.yaml").write_text(CUSTOM_TECHNO)
        catalog.clear_cache()
        assert catalog.get_genre("TECHNO").description == "Project override"


class TestGenreModels:
    """Tests for genre model validation."""

    def test_tempo_range(self):
        """Tempo ranges check their bounds."""
        tempo = TempoRange(min_bpm=120, max_bpm=130)
        assert tempo.contains(125)
        assert not tempo.contains(131)
        assert tempo.at(0.5) == 125

    def test_inverted_tempo_range(self):
        """Inverted ranges are rejected."""
        with pytest.raises(ValidationError):
            TempoRange(min_bpm=130, max_bpm=120)

    def test_genre_id_upper_cased(self):
        """Ids are normalized to upper case."""
        genre = Genre(
            id="newgenre",
            tempo=TempoRange(min_bpm=100, max_bpm=110),
            scale="minor",
            kit="X",
            progressions=[[0, 1, 2, 3], [0, 3, 4, 0]],
        )
        assert genre.id == "NEWGENRE"

    def test_progression_count(self):
        """Genres need two to five progressions of four degrees."""
        with pytest.raises(ValidationError):
            Genre(
                id="X",
                tempo=TempoRange(min_bpm=100, max_bpm=110),
                scale="minor",
                kit="X",
                progressions=[[0, 1, 2, 3]],
            )
        with pytest.raises(ValidationError):
            Genre(
                id="X",
                tempo=TempoRange(min_bpm=100, max_bpm=110),
                scale="minor",
                kit="X",
                progressions=[[0, 1, 2], [0, 1, 2]],
            )

    def test_energy_curves(self):
        """Curves with a closed form shape, the rest are flat."""
        assert EnergyCurve.BUILDUP_RISE.multiplier(0.5) == pytest.approx(1.4)
        assert EnergyCurve.EUPHORIC_SAW.multiplier(0.9) == pytest.approx(1.3)
        assert EnergyCurve.GROOVE_WAVE.multiplier(0.3) == 1.0
