"""
Generators - motifs, Markov melodies, chord progressions and rhythms.

All generators are pure functions of their arguments plus an injected
RandomSource.
"""

from chuk_mcp_composer.generators.chords import (
    ChordProgressionGenerator,
    ChordVoicing,
    HarmonicFunction,
    chords_to_pattern,
)
from chuk_mcp_composer.generators.markov import MarkovMelodyGenerator
from chuk_mcp_composer.generators.motif import (
    develop_motif,
    generate_melodic_phrase,
    generate_motif,
)
from chuk_mcp_composer.generators.rhythm import (
    PatternAnalysis,
    add_drum_fills,
    analyze_pattern,
    create_variation,
    fit_to_steps,
    generate_drum_pattern,
    generate_euclidean,
    humanize_drums,
    thin_drum_matrix,
)

__all__ = [
    # Motifs
    "develop_motif",
    "generate_melodic_phrase",
    "generate_motif",
    # Melody
    "MarkovMelodyGenerator",
    # Harmony
    "ChordProgressionGenerator",
    "ChordVoicing",
    "HarmonicFunction",
    "chords_to_pattern",
    # Rhythm
    "PatternAnalysis",
    "add_drum_fills",
    "analyze_pattern",
    "create_variation",
    "fit_to_steps",
    "generate_drum_pattern",
    "generate_euclidean",
    "humanize_drums",
    "thin_drum_matrix",
]
