"""
Arrangement scheduler - song structures and the flat playback timeline.

Structures come from two YAML-driven sources:
- Song templates: per-genre lists of pool names; each slot draws one
  section from the named pool and energy follows a rise-and-release
  envelope across the song.
- Epic templates: fully hand-authored per-genre section lists whose
  track rules are derived from the section names.

`schedule` flattens any structure into a Timeline. It never plays audio;
an external transport executes the events against a real clock.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Any

import yaml

from chuk_mcp_composer.constants import (
    DEFAULT_GENRE,
    FILTER_OPEN_HZ,
    SnapshotMode,
    TrackRole,
    WarningMessages,
)
from chuk_mcp_composer.core.rng import RandomSource, choose
from chuk_mcp_composer.models.arrangement import (
    FilterSweep,
    Section,
    SectionArchetype,
    Structure,
    TempoRamp,
    TempoSlam,
    Timeline,
    TimelineEvent,
)

logger = logging.getLogger(__name__)

POOLS_FILE = "section_pools.yaml"
SONG_TEMPLATES_FILE = "song_templates.yaml"
EPIC_TEMPLATES_FILE = "epic_templates.yaml"

DEFAULT_POOL = "verses"
DEFAULT_SECTION_ENERGY = 0.7

# Song energy envelope: rises until this point, then releases
ENVELOPE_PEAK = 0.7

# Epic sections above this energy ramp the tempo
EPIC_RAMP_THRESHOLD = 0.6
EPIC_RAMP_SCALE = 5


def energy_envelope(position: float) -> float:
    """
    Energy multiplier at a normalized song position.

    Rises 0.5 -> ~1.0 over the first 70% and falls 1.0 -> ~0.85 after.
    """
    if position < ENVELOPE_PEAK:
        return 0.5 + position * 0.7
    return 1.0 - (position - ENVELOPE_PEAK) * 0.5


class ArrangementScheduler:
    """
    Builds song structures and schedules them.

    Pools and templates are loaded lazily from the arrangement library
    and cached.
    """

    def __init__(
        self,
        library_path: Path | None = None,
        slot_count: int = SnapshotMode.EPIC.slot_count,
    ):
        """
        Initialize the scheduler.

        Args:
            library_path: Path to the arrangement library
            slot_count: Default snapshot pool size used for clamping
        """
        self.library_path = library_path or (Path(__file__).parent / "library")
        self.slot_count = slot_count
        self._cache: dict[str, Any] = {}

    def _load(self, filename: str) -> dict[str, Any]:
        if filename not in self._cache:
            with open(self.library_path / filename) as f:
                self._cache[filename] = yaml.safe_load(f) or {}
        return self._cache[filename]

    @property
    def pools(self) -> dict[str, list[dict[str, Any]]]:
        return self._load(POOLS_FILE).get("pools", {})

    @property
    def song_templates(self) -> dict[str, list[str]]:
        return self._load(SONG_TEMPLATES_FILE).get("templates", {})

    @property
    def epic_templates(self) -> dict[str, list[dict[str, Any]]]:
        return self._load(EPIC_TEMPLATES_FILE).get("templates", {})

    def song_template(self, genre: str) -> list[str]:
        """Pool names for a genre, falling back to the default template."""
        templates = self.song_templates
        template = templates.get(genre.upper())
        if template is None:
            fallback = self._load(SONG_TEMPLATES_FILE).get("default", DEFAULT_GENRE)
            logger.debug("No song template for '%s', using '%s'", genre, fallback)
            template = templates[fallback]
        return list(template)

    def epic_template(self, genre: str) -> list[dict[str, Any]]:
        """Epic sections for a genre, falling back to the generic template."""
        template = self.epic_templates.get(genre.upper())
        if template is None:
            logger.debug("No epic template for '%s', using the default", genre)
            template = self._load(EPIC_TEMPLATES_FILE).get("default", [])
        return [dict(entry) for entry in template]

    def generate_song_structure(
        self,
        genre: str,
        energy: float = 0.8,
        *,
        rng: RandomSource,
    ) -> Structure:
        """
        Draw a song structure from the genre's template.

        Each slot copies one random section from its pool; the copy's
        energy is 0.7 scaled by the envelope at its position and by
        `energy`.

        Args:
            genre: Genre id
            energy: Song-level energy scalar
            rng: Random source

        Returns:
            A new Structure
        """
        template = self.song_template(genre)
        pools = self.pools
        fallback_pool = self._load(POOLS_FILE).get("fallback_pool", DEFAULT_POOL)

        sections: list[Section] = []
        for index, pool_name in enumerate(template):
            pool = pools.get(pool_name)
            if not pool:
                logger.warning("Unknown section pool '%s', using '%s'", pool_name, fallback_pool)
                pool = pools[fallback_pool]

            data = dict(choose(rng, pool))
            base = data.pop("energy", None)
            base = DEFAULT_SECTION_ENERGY if base is None else base
            data["energy"] = base * energy_envelope(index / len(template)) * energy
            sections.append(Section(**data))

        return Structure(genre=genre.upper(), sections=sections)

    def generate_epic_structure(self, genre: str) -> Structure:
        """
        Build the genre's hand-authored epic structure.

        Track rules are derived from each section name and energy, high
        energy sections ramp the tempo by floor(energy * 5), and snapshot
        indexes are capped to the epic pool.
        """
        last_slot = SnapshotMode.EPIC.slot_count - 1
        sections: list[Section] = []
        for entry in self.epic_template(genre):
            energy = entry.get("energy", DEFAULT_SECTION_ENERGY)
            ramp = math.floor(energy * EPIC_RAMP_SCALE) if energy > EPIC_RAMP_THRESHOLD else 0
            sections.append(
                Section(
                    name=entry["name"],
                    bars=entry["bars"],
                    snapshot=min(entry.get("snapshot", 0), last_slot),
                    energy=energy,
                    enabled=self.get_section_rules(entry["name"], energy),
                    sweep=entry.get("sweep", False),
                    tempo_ramp=ramp,
                )
            )
        return Structure(genre=genre.upper(), sections=sections)

    @staticmethod
    def get_section_rules(name: str, energy: float) -> dict[TrackRole, bool]:
        """Track-enable map for a section name at an energy."""
        return SectionArchetype.classify(name).rules(energy)

    def schedule(
        self,
        structure: Structure,
        bpm: float,
        *,
        slot_count: int | None = None,
        filled_slots: set[int] | None = None,
        warnings: list[str] | None = None,
    ) -> Timeline:
        """
        Flatten a structure into timeline events.

        One event per section at its starting bar: track mutes for every
        track the section mentions, the snapshot to load, tempo automation
        (a ramp to bpm + ramp over the section, or a slam back to bpm) and
        an opening filter sweep across the section. Sections shorter than
        one bar play one bar; snapshot indexes are clamped into the pool.

        Args:
            structure: Structure to schedule (not modified)
            bpm: Base tempo
            slot_count: Snapshot pool size (defaults to the scheduler's)
            filled_slots: Slots that hold a snapshot; others load nothing
            warnings: Optional list that collects clamp messages

        Returns:
            Timeline ending at the total bar count
        """
        slots = slot_count or self.slot_count
        events: list[TimelineEvent] = []
        bar = 0

        for section in structure.sections:
            bars = section.bars
            if bars < 1:
                self._warn(WarningMessages.CLAMPED_BARS.format(name=section.name, bars=bars), warnings)
                bars = 1

            snapshot = min(max(section.snapshot, 0), slots - 1)
            if snapshot != section.snapshot:
                self._warn(
                    WarningMessages.CLAMPED_SNAPSHOT.format(
                        name=section.name, snapshot=section.snapshot, clamped=snapshot
                    ),
                    warnings,
                )
            if filled_slots is not None and snapshot not in filled_slots:
                load: int | None = None
            else:
                load = snapshot

            tempo: TempoRamp | TempoSlam | None = None
            if section.tempo_ramp:
                tempo = TempoRamp(to_bpm=bpm + section.tempo_ramp, duration_bars=bars)
            elif section.tempo_slam:
                tempo = TempoSlam(bpm=bpm)

            sweep = FilterSweep(target_hz=FILTER_OPEN_HZ, duration_bars=bars) if section.sweep else None

            events.append(
                TimelineEvent(
                    at_bar=bar,
                    section=section.name,
                    track_mutes={role: not on for role, on in section.enabled.items()},
                    load_snapshot=load,
                    tempo=tempo,
                    filter_sweep=sweep,
                )
            )
            bar += bars

        logger.debug("Scheduled %d sections over %d bars", len(events), bar)
        return Timeline(bpm=bpm, events=events, total_bars=bar)

    @staticmethod
    def _warn(message: str, warnings: list[str] | None) -> None:
        logger.warning(message)
        if warnings is not None:
            warnings.append(message)

    def clear_cache(self) -> None:
        self._cache.clear()
