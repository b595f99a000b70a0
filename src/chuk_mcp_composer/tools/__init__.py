"""
MCP tool implementations.

Tools are organized by domain:
- genres - Genre and style discovery
- generation - Motifs, melodies, chords and track patterns
- arrangement - Song structures and whole songs
"""

from chuk_mcp_composer.tools.arrangement import register_arrangement_tools
from chuk_mcp_composer.tools.generation import register_generation_tools
from chuk_mcp_composer.tools.genres import register_genre_tools

__all__ = [
    "register_arrangement_tools",
    "register_generation_tools",
    "register_genre_tools",
]
