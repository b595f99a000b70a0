"""
Generation tools - MCP tools for motifs, melodies, chords and rhythms.

Every stochastic tool takes an optional seed; the same seed and
arguments always return the same result.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from chuk_mcp_composer.composer import SongComposer
from chuk_mcp_composer.constants import StyleFamily
from chuk_mcp_composer.core.rng import SeededRandom
from chuk_mcp_composer.generators import (
    analyze_pattern,
    develop_motif,
    generate_drum_pattern,
    generate_euclidean,
    generate_melodic_phrase,
    generate_motif,
    humanize_drums,
)
from chuk_mcp_composer.patterns import generate_track_pattern

if TYPE_CHECKING:
    from chuk_mcp_server import ChukMCPServer

logger = logging.getLogger(__name__)

DRUMS = "drums"
DRUM_CHANNELS = ("kick", "snare", "clap", "hihat")


def register_generation_tools(
    mcp: ChukMCPServer,
    composer: SongComposer,
) -> dict[str, Any]:
    """
    Register generation tools with the MCP server.

    Args:
        mcp: The MCP server instance
        composer: Song composer (provides the catalog and generators)

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}
    catalog = composer.catalog

    @mcp.tool  # type: ignore[arg-type]
    async def music_generate_motif(
        genre: str = "SYNTHWAVE",
        length: int = 8,
        seed: int | None = None,
    ) -> str:
        """
        Generate a short melodic motif in a genre's scale.

        Args:
            genre: Genre id (selects the scale)
            length: Number of notes (default: 8)
            seed: Optional random seed

        Returns:
            JSON string with scale degrees and note names

        Example:
            music_generate_motif(genre="trance", length=8, seed=42)
        """
        try:
            warnings: list[str] = []
            scale = catalog.get_scale(catalog.resolve_genre(genre, warnings).scale)
            motif = generate_motif(len(scale), length, rng=SeededRandom(seed))

            return json.dumps(
                {
                    "status": "success",
                    "scale": scale.name,
                    "motif": motif,
                    "notes": [scale.note_at(d) for d in motif],
                    "warnings": warnings,
                }
            )
        except Exception as e:
            logger.exception("Failed to generate motif")
            return json.dumps({"status": "error", "message": str(e)})

    tools["music_generate_motif"] = music_generate_motif

    @mcp.tool  # type: ignore[arg-type]
    async def music_develop_motif(
        motif: list[int],
        variation: str,
        genre: str = "SYNTHWAVE",
        seed: int | None = None,
    ) -> str:
        """
        Develop a motif with one transform.

        Variations: repeat, transpose-up, transpose-down, retrograde,
        inversion, augmentation, fragmentation, extension, call-response.
        Any other name applies a light random jitter.

        Args:
            motif: Scale degrees
            variation: Transform name
            genre: Genre id (selects the scale)
            seed: Optional random seed

        Returns:
            JSON string with the developed motif

        Example:
            music_develop_motif(motif=[0, 2, 4, 2], variation="retrograde")
        """
        try:
            scale = catalog.get_scale(catalog.resolve_genre(genre).scale)
            developed = develop_motif(motif, variation, len(scale), rng=SeededRandom(seed))

            return json.dumps(
                {
                    "status": "success",
                    "variation": variation,
                    "motif": developed,
                    "notes": [scale.note_at(d) for d in developed],
                }
            )
        except Exception as e:
            logger.exception("Failed to develop motif")
            return json.dumps({"status": "error", "message": str(e)})

    tools["music_develop_motif"] = music_develop_motif

    @mcp.tool  # type: ignore[arg-type]
    async def music_generate_melody(
        genre: str = "SYNTHWAVE",
        bars: int = 4,
        method: str = "markov",
        intensity: float = 0.5,
        seed: int | None = None,
    ) -> str:
        """
        Generate a melody for a genre.

        The markov method walks the genre's interval rule (8 steps per bar);
        the phrase method develops one motif bar by bar into 32 steps.

        Args:
            genre: Genre id
            bars: Length in bars (default: 4)
            method: 'markov' or 'phrase'
            intensity: 0-1 energy (phrase method only)
            seed: Optional random seed

        Returns:
            JSON string with degrees and a shape analysis

        Example:
            music_generate_melody(genre="techno", bars=4, seed=7)
        """
        try:
            warnings: list[str] = []
            definition = catalog.resolve_genre(genre, warnings)
            scale = catalog.get_scale(definition.scale)
            rng = SeededRandom(seed)

            if method == "phrase":
                melody = generate_melodic_phrase(
                    definition.id, len(scale), bars, intensity, rng=rng
                )
            elif method == "markov":
                melody = composer.melody.generate_melody(len(scale), definition.id, bars, rng=rng)
            else:
                return json.dumps({"status": "error", "message": f"Unknown method: {method}"})

            analysis = analyze_pattern(melody)
            return json.dumps(
                {
                    "status": "success",
                    "genre": definition.id,
                    "scale": scale.name,
                    "melody": melody,
                    "analysis": {
                        "density": analysis.density,
                        "note_count": analysis.note_count,
                        "contour": analysis.contour,
                    },
                    "warnings": warnings,
                }
            )
        except Exception as e:
            logger.exception("Failed to generate melody")
            return json.dumps({"status": "error", "message": str(e)})

    tools["music_generate_melody"] = music_generate_melody

    @mcp.tool  # type: ignore[arg-type]
    async def music_generate_chords(
        genre: str = "SYNTHWAVE",
        bars: int = 8,
        curated: bool = False,
        chromatic: bool = False,
        seed: int | None = None,
    ) -> str:
        """
        Generate a chord progression and spell it in the genre's scale.

        By default the progression is a functional-harmony walk with one
        chord per two bars; curated=True picks one of the genre's
        hand-authored progressions instead.

        Args:
            genre: Genre id
            bars: Length in bars for the functional walk (default: 8)
            curated: Use a curated progression
            chromatic: Spell chords with true semitone math
            seed: Optional random seed

        Returns:
            JSON string with degrees and spelled chords

        Example:
            music_generate_chords(genre="house", curated=True, seed=3)
        """
        try:
            warnings: list[str] = []
            definition = catalog.resolve_genre(genre, warnings)
            scale = catalog.get_scale(definition.scale)
            rng = SeededRandom(seed)

            if curated:
                progression = composer.chords.get_progression(definition.id, rng=rng)
            else:
                progression = composer.chords.generate_chords(
                    len(scale), definition.id, bars, rng=rng
                )

            sequence = composer.chords.get_chord_sequence(
                progression, list(scale.notes), scale.name, definition.id, chromatic
            )
            return json.dumps(
                {
                    "status": "success",
                    "genre": definition.id,
                    "scale": scale.name,
                    "progression": progression,
                    "chords": [
                        {
                            "degree": c.degree,
                            "quality": c.quality,
                            "notes": list(c.notes),
                            "inversion": c.inversion,
                        }
                        for c in sequence
                    ],
                    "warnings": warnings,
                }
            )
        except Exception as e:
            logger.exception("Failed to generate chords")
            return json.dumps({"status": "error", "message": str(e)})

    tools["music_generate_chords"] = music_generate_chords

    @mcp.tool  # type: ignore[arg-type]
    async def music_generate_euclidean(pulses: int, steps: int = 32, rotate: int = 0) -> str:
        """
        Generate a Euclidean rhythm.

        Hits are spread as evenly as possible; step 0 is always a hit
        before rotation.

        Args:
            pulses: Number of hits
            steps: Pattern length (default: 32)
            rotate: Left rotation in steps

        Returns:
            JSON string with the pattern

        Example:
            music_generate_euclidean(pulses=5, steps=16)
        """
        try:
            pattern = generate_euclidean(pulses, steps, rotate)

            return json.dumps(
                {
                    "status": "success",
                    "pattern": pattern,
                    "hits": [i for i, v in enumerate(pattern) if v],
                }
            )
        except Exception as e:
            logger.exception("Failed to generate euclidean rhythm")
            return json.dumps({"status": "error", "message": str(e)})

    tools["music_generate_euclidean"] = music_generate_euclidean

    @mcp.tool  # type: ignore[arg-type]
    async def music_generate_track(
        genre: str,
        track: str,
        intensity: float = 0.8,
        seed: int | None = None,
    ) -> str:
        """
        Generate one track's pattern from a genre.

        Bass, lead and pad render the genre's configured style; drums push
        the genre's drum template with intensity and humanize it.

        Args:
            genre: Genre id
            track: 'bass', 'lead', 'pad' or 'drums'
            intensity: 0-1 energy (default: 0.8)
            seed: Optional random seed

        Returns:
            JSON string with the pattern (or four drum channels)

        Example:
            music_generate_track(genre="dnb", track="bass", intensity=0.9)
        """
        try:
            warnings: list[str] = []
            definition = catalog.resolve_genre(genre, warnings)
            rng = SeededRandom(seed)

            if track == DRUMS:
                matrix = generate_drum_pattern(definition.drums, intensity, rng=rng)
                humanize_drums(matrix, definition.profile, rng=rng)
                return json.dumps(
                    {
                        "status": "success",
                        "genre": definition.id,
                        "track": track,
                        "channels": dict(zip(DRUM_CHANNELS, matrix, strict=True)),
                        "warnings": warnings,
                    }
                )

            family = StyleFamily(track)
            scale = catalog.get_scale(definition.scale)
            pattern = generate_track_pattern(
                definition, family, intensity, rng=rng, scale_length=len(scale)
            )
            return json.dumps(
                {
                    "status": "success",
                    "genre": definition.id,
                    "track": family.value,
                    "pattern": pattern,
                    "warnings": warnings,
                }
            )
        except Exception as e:
            logger.exception("Failed to generate track")
            return json.dumps({"status": "error", "message": str(e)})

    tools["music_generate_track"] = music_generate_track

    return tools
