"""
Catalog loader - scales, chord qualities and genres from YAML.

Catalog data can come from:
1. Built-in library (shipped with package)
2. Project genres (<project>/genres/*.yaml)

Project genres override library genres with the same id. Everything is
read once and cached; the catalog is read-only after loading.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from chuk_mcp_composer.constants import (
    DEFAULT_CHORD_QUALITY,
    DEFAULT_GENRE,
    DEFAULT_SCALE,
    WarningMessages,
)
from chuk_mcp_composer.core.scale import ChordQuality, Scale
from chuk_mcp_composer.models.genre import (
    DrumTemplate,
    Genre,
    GenreProfile,
    GenreRule,
    GenreStyleConfig,
    TempoRange,
)

logger = logging.getLogger(__name__)

GENRES_DIR = "genres"
SCALES_FILE = "scales.yaml"
QUALITIES_FILE = "chord_qualities.yaml"


class CatalogLoader:
    """
    Discovers and loads the scale, chord-quality and genre catalogs.

    Lookups never fail for creative input: unknown names resolve to the
    default scale, quality or genre and log a warning.
    """

    def __init__(
        self,
        library_path: Path | None = None,
        project_path: Path | None = None,
    ):
        """
        Initialize the catalog loader.

        Args:
            library_path: Path to built-in catalog library
            project_path: Project root; genres are read from its genres/ directory
        """
        self.library_path = library_path or (Path(__file__).parent / "library")
        self.project_path = project_path
        self._scales: dict[str, Scale] | None = None
        self._qualities: dict[str, ChordQuality] | None = None
        self._cache: dict[str, Genre] | None = None

    # Scales and chord qualities

    @property
    def scales(self) -> dict[str, Scale]:
        if self._scales is None:
            data = self._load_yaml(self.library_path / SCALES_FILE) or {}
            self._scales = {
                name: Scale(name=name, notes=tuple(str(n) for n in notes))
                for name, notes in (data.get("scales") or {}).items()
            }
        return self._scales

    @property
    def qualities(self) -> dict[str, ChordQuality]:
        if self._qualities is None:
            data = self._load_yaml(self.library_path / QUALITIES_FILE) or {}
            self._qualities = {
                name: ChordQuality(name=name, intervals=tuple(intervals))
                for name, intervals in (data.get("qualities") or {}).items()
            }
        return self._qualities

    def list_scales(self) -> list[str]:
        """Scale names in catalog order."""
        return list(self.scales)

    def get_scale(self, name: str) -> Scale:
        """
        Get a scale by name.

        Args:
            name: Scale name

        Returns:
            The scale, or the default scale if the name is unknown
        """
        scale = self.scales.get(name)
        if scale is not None:
            return scale
        logger.warning(WarningMessages.UNKNOWN_SCALE.format(name=name, fallback=DEFAULT_SCALE))
        return self.scales[DEFAULT_SCALE]

    def get_chord_quality(self, name: str) -> ChordQuality:
        """Get a chord quality by name, falling back to the default."""
        quality = self.qualities.get(name)
        if quality is not None:
            return quality
        logger.warning(
            WarningMessages.UNKNOWN_QUALITY.format(name=name, fallback=DEFAULT_CHORD_QUALITY)
        )
        return self.qualities[DEFAULT_CHORD_QUALITY]

    # Genres

    @property
    def genres(self) -> dict[str, Genre]:
        if self._cache is None:
            genres: dict[str, Genre] = {}

            # Load library genres
            genres.update(self._load_genre_dir(self.library_path / GENRES_DIR))

            # Load project genres (override library)
            if self.project_path:
                genres.update(self._load_genre_dir(self.project_path / GENRES_DIR))

            self._cache = genres
            logger.debug("Loaded %d genres", len(genres))
        return self._cache

    def list_genres(self) -> list[Genre]:
        """All genres, sorted by id."""
        return [self.genres[key] for key in sorted(self.genres)]

    def get_genre(self, name: str) -> Genre | None:
        """
        Get a genre by id, case-insensitively.

        Args:
            name: Genre id

        Returns:
            Genre if found, None otherwise
        """
        return self.genres.get(name.upper())

    def resolve_genre(self, name: str, warnings: list[str] | None = None) -> Genre:
        """
        Get a genre, falling back to the default genre.

        Args:
            name: Genre id
            warnings: Optional list that collects the fallback message

        Returns:
            The genre, or the default genre if the id is unknown
        """
        genre = self.get_genre(name)
        if genre is not None:
            return genre

        message = WarningMessages.UNKNOWN_GENRE.format(genre=name, fallback=DEFAULT_GENRE)
        logger.warning(message)
        if warnings is not None:
            warnings.append(message)
        return self.genres[DEFAULT_GENRE]

    def melody_rules(self) -> dict[str, GenreRule]:
        """Genre id -> Markov rule, for genres that have one."""
        return {gid: g.rule for gid, g in self.genres.items() if g.rule is not None}

    def curated_progressions(self) -> dict[str, list[list[int]]]:
        """Genre id -> hand-authored progressions, for genres that have them."""
        return {
            gid: g.curated_progressions for gid, g in self.genres.items() if g.curated_progressions
        }

    def clear_cache(self) -> None:
        """Clear all cached catalogs."""
        self._scales = None
        self._qualities = None
        self._cache = None

    # Parsing

    def _load_yaml(self, path: Path) -> dict[str, Any] | None:
        if not path.exists():
            logger.warning("Catalog file not found: %s", path)
            return None
        with open(path) as f:
            return yaml.safe_load(f)

    def _load_genre_dir(self, directory: Path) -> dict[str, Genre]:
        genres: dict[str, Genre] = {}
        if not directory.exists():
            return genres
        for path in sorted(directory.glob("*.yaml")):
            genre = self._load_genre_file(path)
            if genre:
                genres[genre.id] = genre
        return genres

    def _load_genre_file(self, path: Path) -> Genre | None:
        """Load a genre from a YAML file, skipping files that do not parse."""
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
            return self._parse_genre(data)
        except (OSError, yaml.YAMLError, ValidationError, KeyError, TypeError) as e:
            logger.warning("Failed to load genre file %s: %s", path, e)
            return None

    def _parse_genre(self, data: dict[str, Any]) -> Genre:
        """Parse a genre from YAML data."""
        tempo = data.get("tempo", [100, 120])
        styles = data.get("styles", {})
        bass = styles.get("bass", {})
        lead = styles.get("lead", {})
        pad = styles.get("pad", {})

        style_config = GenreStyleConfig(
            bass_style=bass.get("style", "root-pulse"),
            bass_density=bass.get("density", 0.5),
            lead_style=lead.get("style", "basic"),
            lead_density=lead.get("density", 0.5),
            pad_style=pad.get("style", "sustain"),
            pad_change_rate=pad.get("change_rate", 4),
        )

        drums_data = data.get("drums")
        drums = DrumTemplate(**drums_data) if drums_data else DrumTemplate.silent()

        rule_data = data.get("rule")
        rule = self._parse_rule(rule_data) if rule_data else None

        return Genre(
            id=data["id"],
            description=data.get("description", ""),
            tempo=TempoRange(min_bpm=tempo[0], max_bpm=tempo[1]),
            scale=data.get("scale", DEFAULT_SCALE),
            kit=data.get("kit", "NEON"),
            arp_lead=data.get("arp_lead", False),
            progressions=data["progressions"],
            curated_progressions=data.get("curated_progressions", []),
            drums=drums,
            styles=style_config,
            profile=GenreProfile(**data.get("profile", {})),
            rule=rule,
        )

    def _parse_rule(self, data: dict[str, Any]) -> GenreRule:
        """Parse a melody rule from YAML data."""
        melodic_range = data.get("melodic_range", [0, 7])
        return GenreRule(
            preferred_intervals=data.get("preferred_intervals", []),
            avoid_intervals=data.get("avoid_intervals", []),
            rhythm_density=data.get("rhythm_density", 0.6),
            syncopation=data.get("syncopation", 0.3),
            melodic_range=(melodic_range[0], melodic_range[1]),
            chord_change_rate=data.get("chord_change_rate", 4),
            energy_curve=data.get("energy_curve", "flat-hypnotic"),
        )
