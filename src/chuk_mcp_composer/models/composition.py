"""
Composition models - the harmonic state of a song and a finished composition.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from chuk_mcp_composer.constants import TRACK_ORDER
from chuk_mcp_composer.models.arrangement import Structure, Timeline


class CompositionState(BaseModel):
    """
    Harmonic context shared by the generators for one song.

    The progression is read through a rotation offset so a song can move
    its harmony on without regenerating it.
    """

    genre: str = Field(..., description="Genre id")
    scale: str = Field(..., description="Scale name")
    progression: list[int] = Field(default_factory=list, description="Chord degrees")
    rotation_offset: int = Field(0, ge=0, description="Progression rotation")
    energy: float = Field(0.7, ge=0.0, description="Song-level energy")

    def rotate_progression(self) -> int:
        """Advance the rotation by one chord; returns the new offset."""
        if self.progression:
            self.rotation_offset = (self.rotation_offset + 1) % len(self.progression)
        return self.rotation_offset

    def rotated_progression(self) -> list[int]:
        """The progression as currently rotated."""
        offset = self.rotation_offset % len(self.progression) if self.progression else 0
        return self.progression[offset:] + self.progression[:offset]

    def current_chord(self, bar: int = 0) -> int | None:
        """
        Chord degree sounding at a bar, one chord per bar.

        Returns:
            Degree, or None when there is no progression
        """
        if not self.progression:
            return None
        return self.rotated_progression()[bar % len(self.progression)]


class Composition(BaseModel):
    """A composed song: snapshots, structure and the scheduled timeline."""

    state: CompositionState
    bpm: int = Field(..., description="Base tempo")
    snapshots: list[list[list[int]] | None] = Field(
        default_factory=list, description="Snapshot pool, seven tracks per slot"
    )
    structure: Structure
    timeline: Timeline
    warnings: list[str] = Field(default_factory=list)

    @property
    def filled_slots(self) -> list[int]:
        return [i for i, s in enumerate(self.snapshots) if s is not None]

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly representation; snapshot tracks are keyed by role."""
        return {
            "genre": self.state.genre,
            "scale": self.state.scale,
            "progression": self.state.rotated_progression(),
            "bpm": self.bpm,
            "snapshots": [
                {role.value: grid[role.index] for role in TRACK_ORDER} if grid else None
                for grid in self.snapshots
            ],
            "structure": self.structure.to_dict(),
            "timeline": self.timeline.to_dict(),
            "warnings": list(self.warnings),
        }
