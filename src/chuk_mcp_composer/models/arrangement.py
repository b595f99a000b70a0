"""
Arrangement models - sections, structures and the playback timeline.

A Structure is an ordered list of Sections. Each Section points at a
snapshot slot and says which tracks play while it runs, plus optional
tempo and filter automation.

The scheduler flattens a Structure into a Timeline: one event per
section boundary, ready for an external transport to execute.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field, model_validator

from chuk_mcp_composer.constants import TrackRole


class SectionArchetype(str, Enum):
    """
    What kind of section this is.

    Fixed when a Section is built and carries the track-enable table
    for that kind of section.
    """

    DROP = "drop"  # Drops and choruses
    BUILD = "build"
    BREAK = "break"  # Breaks, breakdowns and bridges
    INTRO = "intro"
    OUTRO = "outro"
    VERSE = "verse"  # Everything else

    @classmethod
    def classify(cls, name: str) -> SectionArchetype:
        """
        Classify a section name.

        Keywords are checked in priority order, so "BREAKDOWN" is a break
        and "BUILDUP" is a build.
        """
        upper = name.upper()
        for archetype, keywords in _ARCHETYPE_KEYWORDS:
            if any(keyword in upper for keyword in keywords):
                return archetype
        return cls.VERSE

    def rules(self, energy: float) -> dict[TrackRole, bool]:
        """
        Track-enable map for this archetype at a given energy.

        Clap is never listed; it keeps whatever state it had.
        """
        if self is SectionArchetype.DROP:
            return _enable(kick=True, snare=True, hihat=True, bass=True, lead=True, pad=True)
        if self is SectionArchetype.BUILD:
            return _enable(kick=True, snare=False, hihat=True, bass=True, lead=True, pad=False)
        if self is SectionArchetype.BREAK:
            return _enable(kick=False, snare=False, hihat=True, bass=True, lead=False, pad=True)
        if self in (SectionArchetype.INTRO, SectionArchetype.OUTRO):
            return _enable(
                kick=energy > 0.15, snare=False, hihat=True, bass=False, lead=False, pad=True
            )
        return _enable(
            kick=True,
            snare=energy > 0.4,
            hihat=True,
            bass=True,
            lead=energy > 0.5,
            pad=energy > 0.3,
        )


_ARCHETYPE_KEYWORDS: list[tuple[SectionArchetype, tuple[str, ...]]] = [
    (SectionArchetype.DROP, ("DROP", "CHORUS")),
    (SectionArchetype.BUILD, ("BUILD",)),
    (SectionArchetype.BREAK, ("BREAK", "BRIDGE")),
    (SectionArchetype.INTRO, ("INTRO", "ATMOSPHERE")),
    (SectionArchetype.OUTRO, ("OUTRO",)),
]


def _enable(**flags: bool) -> dict[TrackRole, bool]:
    return {TrackRole(name): value for name, value in flags.items()}


class Section(BaseModel):
    """
    A named, timed slice of a song.

    Bars and snapshot are stored as given; the scheduler clamps them.
    When no enable map is supplied, the archetype's rules are used.
    """

    name: str = Field(..., description="Section name (e.g. 'DROP 1')")
    bars: int = Field(..., description="Length in bars")
    snapshot: int = Field(0, description="Snapshot slot to load")
    energy: float | None = Field(None, description="Section energy (0-1)")
    enabled: dict[TrackRole, bool] = Field(
        default_factory=dict, description="Per-track enable map (absent = unchanged)"
    )
    sweep: bool = Field(False, description="Open the filter across the section")
    tempo_ramp: int = Field(0, description="BPM offset to ramp towards over the section")
    tempo_slam: bool = Field(False, description="Snap tempo back to the base BPM")
    archetype: SectionArchetype = Field(SectionArchetype.VERSE)

    model_config = {"frozen": True}

    @model_validator(mode="before")
    @classmethod
    def derive_archetype(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if data.get("archetype") is None:
            data["archetype"] = SectionArchetype.classify(str(data.get("name", "")))
        if not data.get("enabled"):
            archetype = SectionArchetype(data["archetype"])
            energy = data.get("energy")
            data["enabled"] = archetype.rules(0.7 if energy is None else energy)
        return data

    def is_enabled(self, role: TrackRole) -> bool | None:
        """Whether a track plays, or None when the section leaves it unchanged."""
        return self.enabled.get(role)


class Structure(BaseModel):
    """An ordered list of sections."""

    genre: str = Field(..., description="Genre the structure was built for")
    sections: list[Section] = Field(default_factory=list)

    @property
    def total_bars(self) -> int:
        """Sum of section lengths."""
        return sum(s.bars for s in self.sections)

    def get_section_names(self) -> list[str]:
        """Get ordered list of section names."""
        return [s.name for s in self.sections]

    def section_starts(self) -> list[int]:
        """Bar at which each section begins."""
        starts: list[int] = []
        bar = 0
        for section in self.sections:
            starts.append(bar)
            bar += section.bars
        return starts

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly representation."""
        return {
            "genre": self.genre,
            "total_bars": self.total_bars,
            "sections": [
                {
                    "name": s.name,
                    "bars": s.bars,
                    "snapshot": s.snapshot,
                    "energy": s.energy,
                    "archetype": s.archetype.value,
                    "enabled": {role.value: on for role, on in s.enabled.items()},
                    "sweep": s.sweep,
                    "tempo_ramp": s.tempo_ramp,
                    "tempo_slam": s.tempo_slam,
                }
                for s in self.sections
            ],
        }


class TempoRamp(BaseModel):
    """Glide the tempo to a target over a number of bars."""

    kind: Literal["ramp"] = "ramp"
    to_bpm: float
    duration_bars: int

    model_config = {"frozen": True}


class TempoSlam(BaseModel):
    """Jump straight back to a tempo."""

    kind: Literal["slam"] = "slam"
    bpm: float

    model_config = {"frozen": True}


class FilterSweep(BaseModel):
    """Open a filter towards a cutoff over a number of bars."""

    target_hz: float
    duration_bars: int

    model_config = {"frozen": True}


class TimelineEvent(BaseModel):
    """Everything that happens at one section boundary."""

    at_bar: int = Field(..., ge=0)
    section: str
    track_mutes: dict[TrackRole, bool] = Field(
        default_factory=dict, description="True = muted; absent tracks are unchanged"
    )
    load_snapshot: int | None = None
    tempo: TempoRamp | TempoSlam | None = None
    filter_sweep: FilterSweep | None = None

    model_config = {"frozen": True}


class Timeline(BaseModel):
    """Flat, ordered automation for a whole song."""

    bpm: float
    events: list[TimelineEvent] = Field(default_factory=list)
    total_bars: int = 0

    @property
    def stop_bar(self) -> int:
        """Bar at which playback stops."""
        return self.total_bars

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly representation."""
        return {
            "bpm": self.bpm,
            "total_bars": self.total_bars,
            "stop_bar": self.stop_bar,
            "events": [
                {
                    "at_bar": e.at_bar,
                    "section": e.section,
                    "track_mutes": {role.value: muted for role, muted in e.track_mutes.items()},
                    "load_snapshot": e.load_snapshot,
                    "tempo": e.tempo.model_dump() if e.tempo else None,
                    "filter_sweep": e.filter_sweep.model_dump() if e.filter_sweep else None,
                }
                for e in self.events
            ],
        }
