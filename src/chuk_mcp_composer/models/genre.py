"""
Genre models - the creative configuration a genre carries.

A genre bundles everything the generators need to sound like that genre:
tempo range, scale, chord progressions, a literal drum template, named
bass/lead/pad styles, a humanization profile and (for some genres) the
rule that steers the Markov melody generator.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator

from chuk_mcp_composer.constants import STEP_COUNT


class Complexity(str, Enum):
    """How busy a genre's drums tend to be."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    INSANE = "insane"


class EnergyCurve(str, Enum):
    """Named energy-curve shapes applied across a melody."""

    EUPHORIC_SAW = "euphoric-saw"
    RETRO_ARC = "retro-arc"
    BUILDUP_RISE = "buildup-rise"
    FLAT_HYPNOTIC = "flat-hypnotic"
    DARK_DESCEND = "dark-descend"
    GROOVE_WAVE = "groove-wave"
    AGGRESSIVE_SPIKE = "aggressive-spike"
    CHILL_WAVE = "chill-wave"

    def multiplier(self, position: float) -> float:
        """
        Multiplier at a normalized position in [0, 1).

        Curves without a closed form are flat.
        """
        if self is EnergyCurve.EUPHORIC_SAW:
            return 1 + position * 0.5 if position < 0.7 else 1.3
        if self is EnergyCurve.RETRO_ARC:
            return 1 + position if position < 0.5 else 1.5 - position
        if self is EnergyCurve.BUILDUP_RISE:
            return 1 + position * 0.8
        if self is EnergyCurve.DARK_DESCEND:
            return 1.2 - position * 0.4
        return 1.0


class TempoRange(BaseModel):
    """Tempo range in BPM, inclusive."""

    min_bpm: int = Field(..., ge=20, le=300, description="Minimum tempo")
    max_bpm: int = Field(..., ge=20, le=300, description="Maximum tempo")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_order(self) -> TempoRange:
        if self.min_bpm > self.max_bpm:
            raise ValueError(f"Tempo range is inverted: {self.min_bpm} > {self.max_bpm}")
        return self

    def contains(self, bpm: float) -> bool:
        """Check if a tempo is within range."""
        return self.min_bpm <= bpm <= self.max_bpm

    def at(self, position: float) -> int:
        """Tempo at a normalized position across the range."""
        return round(self.min_bpm + (self.max_bpm - self.min_bpm) * position)


class GenreProfile(BaseModel):
    """Feel parameters used for humanization and song-level energy."""

    temperature: float = Field(0.9, ge=0.0, description="Sampling temperature")
    density: float = Field(0.6, ge=0.0, le=1.0, description="Overall note density")
    complexity: Complexity = Field(Complexity.MEDIUM, description="Drum complexity")
    energy: float = Field(0.7, ge=0.0, le=1.0, description="Song-level energy scalar")
    humanize: float = Field(0.1, ge=0.0, le=1.0, description="Snare accent probability")
    ghost_notes: float = Field(0.1, ge=0.0, le=1.0, description="Hi-hat ghost-note rate")
    swing: float = Field(0.5, ge=0.0, le=1.0, description="Swing ratio (0.5 = straight)")

    model_config = {"frozen": True}


class DrumTemplate(BaseModel):
    """Literal four-channel drum grid for a genre."""

    kick: list[int] = Field(..., description="Kick steps")
    snare: list[int] = Field(..., description="Snare steps")
    clap: list[int] = Field(..., description="Clap steps")
    hihat: list[int] = Field(..., description="Hi-hat steps")

    model_config = {"frozen": True}

    @field_validator("kick", "snare", "clap", "hihat")
    @classmethod
    def validate_steps(cls, v: list[int]) -> list[int]:
        if len(v) != STEP_COUNT:
            raise ValueError(f"Drum channel must have {STEP_COUNT} steps, got {len(v)}")
        if any(step not in (0, 1, 2, 3) for step in v):
            raise ValueError("Drum steps must be 0-3")
        return v

    def as_matrix(self) -> list[list[int]]:
        """Fresh copies of the channels in bank order (kick, snare, clap, hihat)."""
        return [list(self.kick), list(self.snare), list(self.clap), list(self.hihat)]

    @classmethod
    def silent(cls) -> DrumTemplate:
        """A template with no hits."""
        empty = [0] * STEP_COUNT
        return cls(kick=empty, snare=empty, clap=empty, hihat=empty)


class GenreStyleConfig(BaseModel):
    """Named melodic styles for a genre's bass, lead and pad tracks."""

    bass_style: str = Field("root-pulse", description="Bass style name")
    bass_density: float = Field(0.5, ge=0.0, le=1.0, description="Bass density before intensity")
    lead_style: str = Field("basic", description="Lead style name")
    lead_density: float = Field(0.5, ge=0.0, le=1.0, description="Lead density before intensity")
    pad_style: str = Field("sustain", description="Pad style name")
    pad_change_rate: int = Field(4, ge=1, description="Steps between pad chord changes")

    model_config = {"frozen": True}


class GenreRule(BaseModel):
    """Parameters steering the Markov melody generator."""

    preferred_intervals: list[int] = Field(default_factory=list)
    avoid_intervals: list[int] = Field(default_factory=list)
    rhythm_density: float = Field(0.6, ge=0.0, le=1.0)
    syncopation: float = Field(0.3, ge=0.0, le=1.0)
    melodic_range: tuple[int, int] = Field((0, 7), description="Min/max scale degree")
    chord_change_rate: int = Field(4, ge=1)
    energy_curve: EnergyCurve = Field(EnergyCurve.FLAT_HYPNOTIC)

    model_config = {"frozen": True}

    @field_validator("melodic_range")
    @classmethod
    def validate_range(cls, v: tuple[int, int]) -> tuple[int, int]:
        if v[0] > v[1]:
            raise ValueError(f"Melodic range is inverted: {v}")
        return v


class Genre(BaseModel):
    """A complete genre definition."""

    id: str = Field(..., description="Genre id, upper case (e.g. 'TECHNO')")
    description: str = Field("", description="One-line description")
    tempo: TempoRange
    scale: str = Field(..., description="Scale name in the scale catalog")
    kit: str = Field(..., description="Drum-kit id")
    arp_lead: bool = Field(False, description="Whether the lead arpeggiates by default")
    progressions: list[list[int]] = Field(..., description="Four-degree progressions")
    curated_progressions: list[list[int]] = Field(
        default_factory=list, description="Hand-authored progressions for harmony generation"
    )
    drums: DrumTemplate = Field(default_factory=DrumTemplate.silent)
    styles: GenreStyleConfig = Field(default_factory=GenreStyleConfig)
    profile: GenreProfile = Field(default_factory=GenreProfile)
    rule: GenreRule | None = Field(None, description="Markov melody rule, if the genre has one")

    model_config = {"frozen": True}

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        if not v or not v.replace("_", "").isalnum():
            raise ValueError(f"Genre id must be alphanumeric: {v!r}")
        return v.upper()

    @field_validator("progressions")
    @classmethod
    def validate_progressions(cls, v: list[list[int]]) -> list[list[int]]:
        if not 2 <= len(v) <= 5:
            raise ValueError(f"Genre needs 2-5 progressions, got {len(v)}")
        for progression in v:
            if len(progression) != 4:
                raise ValueError(f"Progressions must have four degrees: {progression}")
        return v

    def harmony_progressions(self) -> list[list[int]]:
        """Curated progressions, or the basic ones when none are curated."""
        return self.curated_progressions or self.progressions
