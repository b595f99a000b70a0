"""
Genre tools - MCP tools for genre and style discovery.

Tools for listing genres, describing one genre's full configuration and
listing the registered bass, lead and pad styles.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from chuk_mcp_composer.catalog import CatalogLoader
from chuk_mcp_composer.constants import StyleFamily
from chuk_mcp_composer.patterns import STYLES

if TYPE_CHECKING:
    from chuk_mcp_server import ChukMCPServer

logger = logging.getLogger(__name__)


def register_genre_tools(
    mcp: ChukMCPServer,
    catalog: CatalogLoader,
) -> dict[str, Any]:
    """
    Register genre discovery tools with the MCP server.

    Args:
        mcp: The MCP server instance
        catalog: The scale, chord-quality and genre catalog

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}

    @mcp.tool  # type: ignore[arg-type]
    async def music_list_genres() -> str:
        """
        List available genres.

        Returns every genre in the library and project with its tempo
        range and scale.

        Returns:
            JSON string with list of genre summaries

        Example:
            music_list_genres()
        """
        try:
            genres = catalog.list_genres()

            return json.dumps(
                {
                    "status": "success",
                    "genres": [
                        {
                            "id": g.id,
                            "description": g.description,
                            "tempo_range": [g.tempo.min_bpm, g.tempo.max_bpm],
                            "scale": g.scale,
                            "has_melody_rule": g.rule is not None,
                        }
                        for g in genres
                    ],
                    "count": len(genres),
                }
            )
        except Exception as e:
            logger.exception("Failed to list genres")
            return json.dumps({"status": "error", "message": str(e)})

    tools["music_list_genres"] = music_list_genres

    @mcp.tool  # type: ignore[arg-type]
    async def music_describe_genre(genre: str) -> str:
        """
        Get the full configuration of a genre.

        Returns tempo, scale notes, progressions, drum template, track
        styles, feel profile and melody rule.

        Args:
            genre: Genre id (case-insensitive)

        Returns:
            JSON string with genre details

        Example:
            music_describe_genre(genre="techno")
        """
        try:
            definition = catalog.get_genre(genre)
            if definition is None:
                return json.dumps({"status": "error", "message": f"Genre not found: {genre}"})

            scale = catalog.get_scale(definition.scale)
            return json.dumps(
                {
                    "status": "success",
                    "genre": {
                        "id": definition.id,
                        "description": definition.description,
                        "tempo": {
                            "min": definition.tempo.min_bpm,
                            "max": definition.tempo.max_bpm,
                        },
                        "scale": {"name": scale.name, "notes": list(scale.notes)},
                        "kit": definition.kit,
                        "arp_lead": definition.arp_lead,
                        "progressions": definition.progressions,
                        "curated_progressions": definition.curated_progressions,
                        "drums": definition.drums.model_dump(),
                        "styles": definition.styles.model_dump(),
                        "profile": definition.profile.model_dump(mode="json"),
                        "rule": (
                            definition.rule.model_dump(mode="json") if definition.rule else None
                        ),
                    },
                }
            )
        except Exception as e:
            logger.exception("Failed to describe genre")
            return json.dumps({"status": "error", "message": str(e)})

    tools["music_describe_genre"] = music_describe_genre

    @mcp.tool  # type: ignore[arg-type]
    async def music_list_styles(family: str | None = None) -> str:
        """
        List registered track styles.

        Styles are the named strategies that render bass, lead and pad
        patterns. Each family has a default used for unknown names.

        Args:
            family: Optional family filter ('bass', 'lead' or 'pad')

        Returns:
            JSON string with style names per family

        Example:
            music_list_styles(family="lead")
        """
        try:
            families = [StyleFamily(family)] if family else list(StyleFamily)

            return json.dumps(
                {
                    "status": "success",
                    "styles": {
                        f.value: {
                            "default": STYLES.default_name(f),
                            "names": STYLES.names(f),
                        }
                        for f in families
                    },
                }
            )
        except Exception as e:
            logger.exception("Failed to list styles")
            return json.dumps({"status": "error", "message": str(e)})

    tools["music_list_styles"] = music_list_styles

    return tools
