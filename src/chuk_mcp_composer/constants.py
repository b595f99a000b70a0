"""
Constants and enums for the composition engine.

No magic strings - use enums and Literal types for constrained values.
"""

from enum import Enum, IntEnum
from typing import Literal

# Every pattern in the system has exactly this many steps (two bars of 16ths)
STEP_COUNT = 32


class TrackRole(str, Enum):
    """
    The seven sequencer tracks, in bank order.

    The first four are drums; the rest are melodic.
    """

    KICK = "kick"
    SNARE = "snare"
    CLAP = "clap"
    HIHAT = "hihat"
    BASS = "bass"
    LEAD = "lead"
    PAD = "pad"

    @property
    def index(self) -> int:
        """Position of this track inside a PatternBank."""
        return TRACK_ORDER.index(self)

    @property
    def is_drum(self) -> bool:
        """Whether this is one of the four drum tracks."""
        return self.index < DRUM_TRACK_COUNT


TRACK_ORDER: list[TrackRole] = [
    TrackRole.KICK,
    TrackRole.SNARE,
    TrackRole.CLAP,
    TrackRole.HIHAT,
    TrackRole.BASS,
    TrackRole.LEAD,
    TrackRole.PAD,
]

DRUM_TRACK_COUNT = 4


class VelocityClass(IntEnum):
    """Step values stored in a pattern."""

    SILENT = 0
    NORMAL = 1
    ACCENT = 2  # Accent / slide / variant hit
    ROLL = 3  # Ghost or roll hit


class StyleFamily(str, Enum):
    """Families of melodic pattern styles."""

    BASS = "bass"
    LEAD = "lead"
    PAD = "pad"

    @property
    def role(self) -> TrackRole:
        """Track this family writes to."""
        return TrackRole(self.value)


class SnapshotMode(str, Enum):
    """Snapshot pool layouts."""

    CLASSIC = "classic"
    EPIC = "epic"
    EXTENDED = "extended"

    @property
    def slot_count(self) -> int:
        """Number of snapshot slots in this mode."""
        return {
            SnapshotMode.CLASSIC: 4,
            SnapshotMode.EPIC: 5,
            SnapshotMode.EXTENDED: 8,
        }[self]


# Catalog fallbacks
DEFAULT_GENRE = "SYNTHWAVE"
DEFAULT_RULE_GENRE = "HOUSE"
DEFAULT_SCALE = "minor"
DEFAULT_CHORD_QUALITY = "maj"

# Filter cutoff that sweeps open
FILTER_OPEN_HZ = 20000.0

# Section energy levels (semantic tokens)
SectionLevel = Literal["low", "high"]

# Motif variation names
MotifVariation = Literal[
    "repeat",
    "transpose-up",
    "transpose-down",
    "retrograde",
    "inversion",
    "augmentation",
    "fragmentation",
    "extension",
    "call-response",
    "jitter",
]

# Pattern variation names
PatternVariation = Literal["subtle", "dense", "sparse", "invert", "shift"]


class ErrorMessages:
    """Standardized error messages."""

    NEGATIVE_STEPS = "Step count must be positive, got {steps}."
    INVALID_TRACK = "Track index must be 0-{last}, got {index}."
    INVALID_SLOT = "Snapshot slot must be 0-{last}, got {slot}."
    EMPTY_SLOT = "Snapshot slot {slot} is empty."
    UNKNOWN_FAMILY = "Unknown style family: '{family}'."
    DUPLICATE_STYLE = "Style '{name}' is already registered for {family}."
    PATTERN_LENGTH = "Pattern must have {steps} steps, got {length}."


class WarningMessages:
    """Standardized warnings for recoverable fallbacks."""

    UNKNOWN_GENRE = "Unknown genre '{genre}', falling back to '{fallback}'."
    UNKNOWN_SCALE = "Unknown scale '{name}', falling back to '{fallback}'."
    UNKNOWN_QUALITY = "Unknown chord quality '{name}', falling back to '{fallback}'."
    UNKNOWN_STYLE = "Unknown {family} style '{name}', using '{fallback}'."
    CLAMPED_BARS = "Section '{name}' has {bars} bars, clamped to 1."
    CLAMPED_SNAPSHOT = "Section '{name}' references snapshot {snapshot}, clamped to {clamped}."
