"""
Scale primitives - Scale and ChordQuality.

A Scale is an ordered list of pitch symbols. Generators never see the
symbols; they work in scale degrees (indexes into the scale), so the only
thing most of them need is the scale's length.

A ChordQuality is a stack of semitone offsets from a chord root.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .pitch import symbols_to_offsets

# Substrings that put a scale in the minor family for chord-quality lookup
MINOR_FAMILY_MARKERS: tuple[str, ...] = (
    "minor",
    "aeolian",
    "dorian",
    "phrygian",
    "harmonic",
    "melodic",
)


@dataclass(frozen=True)
class Scale:
    """
    A named scale.

    Immutable and hashable. Loaded once from the catalog.
    """

    name: str
    notes: tuple[str, ...]
    offsets: tuple[int, ...] = field(default=(), compare=False)

    def __post_init__(self) -> None:
        if not self.offsets and self.notes:
            object.__setattr__(self, "offsets", tuple(symbols_to_offsets(list(self.notes))))

    def __len__(self) -> int:
        return len(self.notes)

    @property
    def is_minor_family(self) -> bool:
        """Whether chord qualities should come from the minor table."""
        return is_minor_family(self.name)

    def note_at(self, degree: int) -> str:
        """Pitch symbol for a degree, wrapping in both directions."""
        return self.notes[degree % len(self.notes)]

    def __str__(self) -> str:
        return f"{self.name} ({' '.join(self.notes)})"


@dataclass(frozen=True)
class ChordQuality:
    """A chord quality as semitone offsets from the root."""

    name: str
    intervals: tuple[int, ...]

    def __len__(self) -> int:
        return len(self.intervals)

    def __str__(self) -> str:
        return self.name


def is_minor_family(scale_name: str) -> bool:
    """Classify a scale name by substring, case-insensitively."""
    lowered = scale_name.lower()
    return any(marker in lowered for marker in MINOR_FAMILY_MARKERS)
