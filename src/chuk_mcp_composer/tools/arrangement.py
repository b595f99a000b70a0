"""
Arrangement tools - MCP tools for song structure and whole songs.

Tools for generating and scheduling structures, inspecting section
track rules and composing complete songs.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from chuk_mcp_composer.arrangement import validate_structure
from chuk_mcp_composer.composer import SongComposer
from chuk_mcp_composer.core.rng import SeededRandom
from chuk_mcp_composer.models import SectionArchetype

if TYPE_CHECKING:
    from chuk_mcp_server import ChukMCPServer

logger = logging.getLogger(__name__)


def register_arrangement_tools(
    mcp: ChukMCPServer,
    composer: SongComposer,
) -> dict[str, Any]:
    """
    Register arrangement tools with the MCP server.

    Args:
        mcp: The MCP server instance
        composer: Song composer (provides the catalog and scheduler)

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}
    scheduler = composer.scheduler

    @mcp.tool  # type: ignore[arg-type]
    async def music_generate_structure(
        genre: str = "SYNTHWAVE",
        kind: str = "song",
        energy: float = 0.8,
        bpm: int | None = None,
        seed: int | None = None,
    ) -> str:
        """
        Generate and schedule a song structure.

        'song' draws sections from the genre's template pools with a
        rise-and-release energy envelope; 'epic' uses the genre's
        hand-authored long-form structure.

        Args:
            genre: Genre id
            kind: 'song' or 'epic'
            energy: Song-level energy for 'song' structures (default: 0.8)
            bpm: Base tempo for the timeline (default: genre range midpoint)
            seed: Optional random seed

        Returns:
            JSON string with sections, validation issues and the timeline

        Example:
            music_generate_structure(genre="trance", kind="epic", bpm=138)
        """
        try:
            warnings: list[str] = []
            definition = composer.catalog.resolve_genre(genre, warnings)

            if kind == "epic":
                structure = scheduler.generate_epic_structure(definition.id)
            elif kind == "song":
                structure = scheduler.generate_song_structure(
                    definition.id, energy, rng=SeededRandom(seed)
                )
            else:
                return json.dumps({"status": "error", "message": f"Unknown kind: {kind}"})

            validation = validate_structure(structure, scheduler.slot_count)
            timeline = scheduler.schedule(
                structure, bpm or definition.tempo.at(0.5), warnings=warnings
            )

            return json.dumps(
                {
                    "status": "success",
                    "structure": structure.to_dict(),
                    "validation": {
                        "valid": validation.is_valid,
                        "issues": [str(issue) for issue in validation.issues],
                    },
                    "timeline": timeline.to_dict(),
                    "warnings": warnings,
                }
            )
        except Exception as e:
            logger.exception("Failed to generate structure")
            return json.dumps({"status": "error", "message": str(e)})

    tools["music_generate_structure"] = music_generate_structure

    @mcp.tool  # type: ignore[arg-type]
    async def music_section_rules(name: str, energy: float = 0.7) -> str:
        """
        Show which tracks a section enables.

        The section name is classified (drop/chorus, build, break/bridge,
        intro, outro or verse) and the archetype's rules are evaluated at
        the given energy.

        Args:
            name: Section name (e.g. 'DROP 2', 'BREAKDOWN')
            energy: Section energy 0-1 (default: 0.7)

        Returns:
            JSON string with the archetype and per-track enable flags

        Example:
            music_section_rules(name="BREAKDOWN", energy=0.4)
        """
        try:
            rules = scheduler.get_section_rules(name, energy)

            return json.dumps(
                {
                    "status": "success",
                    "name": name,
                    "archetype": SectionArchetype.classify(name).value,
                    "enabled": {role.value: on for role, on in rules.items()},
                }
            )
        except Exception as e:
            logger.exception("Failed to get section rules")
            return json.dumps({"status": "error", "message": str(e)})

    tools["music_section_rules"] = music_section_rules

    @mcp.tool  # type: ignore[arg-type]
    async def music_compose_song(
        genre: str = "SYNTHWAVE",
        mode: str = "epic",
        seed: int | None = None,
    ) -> str:
        """
        Compose a complete song.

        'full' builds four snapshots around one Euclidean song motif;
        'epic' builds five snapshots of rising intensity with a developing
        lead motif. Both return the snapshot grids, the structure and the
        scheduled timeline.

        Args:
            genre: Genre id
            mode: 'full' or 'epic' (default: 'epic')
            seed: Optional random seed

        Returns:
            JSON string with the composition

        Example:
            music_compose_song(genre="synthwave", mode="full", seed=1)
        """
        try:
            if mode not in ("full", "epic"):
                return json.dumps({"status": "error", "message": f"Unknown mode: {mode}"})

            composition = composer.compose(genre, mode, rng=SeededRandom(seed))  # type: ignore[arg-type]

            return json.dumps(
                {
                    "status": "success",
                    "mode": mode,
                    "composition": composition.to_dict(),
                }
            )
        except Exception as e:
            logger.exception("Failed to compose song")
            return json.dumps({"status": "error", "message": str(e)})

    tools["music_compose_song"] = music_compose_song

    return tools
