"""
Models - pydantic types for genres, arrangements and compositions.
"""

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
from chuk_mcp_composer.models.composition import Composition, CompositionState
from chuk_mcp_composer.models.genre import (
    Complexity,
    DrumTemplate,
    EnergyCurve,
    Genre,
    GenreProfile,
    GenreRule,
    GenreStyleConfig,
    TempoRange,
)

__all__ = [
    # Genre
    "Complexity",
    "DrumTemplate",
    "EnergyCurve",
    "Genre",
    "GenreProfile",
    "GenreRule",
    "GenreStyleConfig",
    "TempoRange",
    # Arrangement
    "FilterSweep",
    "Section",
    "SectionArchetype",
    "Structure",
    "TempoRamp",
    "TempoSlam",
    "Timeline",
    "TimelineEvent",
    # Composition
    "Composition",
    "CompositionState",
]
