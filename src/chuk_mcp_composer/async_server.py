#!/usr/bin/env python3
"""
Async Composer MCP Server using chuk-mcp-server

This server exposes a procedural composition engine as MCP tools. Every
generator is seeded, so a tool called twice with the same seed returns
the same music.

The server provides tools for:
- Genre and track-style discovery
- Motif, melody and chord progression generation
- Euclidean rhythms and per-track patterns
- Song structures, section rules and scheduled timelines
- Composing complete songs
"""

import logging
from pathlib import Path

from chuk_mcp_server import ChukMCPServer

from chuk_mcp_composer.arrangement import ArrangementScheduler
from chuk_mcp_composer.catalog import CatalogLoader
from chuk_mcp_composer.composer import SongComposer
from chuk_mcp_composer.tools import (
    register_arrangement_tools,
    register_generation_tools,
    register_genre_tools,
)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create the MCP server instance
mcp = ChukMCPServer("chuk-mcp-composer")

# Paths - project genres live in ./genres
BASE_PATH = Path.cwd()
CATALOG_LIBRARY_PATH = Path(__file__).parent / "catalog" / "library"
ARRANGEMENT_LIBRARY_PATH = Path(__file__).parent / "arrangement" / "library"

# Create the engine
catalog = CatalogLoader(
    library_path=CATALOG_LIBRARY_PATH,
    project_path=BASE_PATH,
)
scheduler = ArrangementScheduler(library_path=ARRANGEMENT_LIBRARY_PATH)
composer = SongComposer(catalog, scheduler)

# Register all tools
genre_tools = register_genre_tools(mcp, catalog)
generation_tools = register_generation_tools(mcp, composer)
arrangement_tools = register_arrangement_tools(mcp, composer)

# Export tool functions for direct access
music_list_genres = genre_tools["music_list_genres"]
music_describe_genre = genre_tools["music_describe_genre"]
music_list_styles = genre_tools["music_list_styles"]

music_generate_motif = generation_tools["music_generate_motif"]
music_develop_motif = generation_tools["music_develop_motif"]
music_generate_melody = generation_tools["music_generate_melody"]
music_generate_chords = generation_tools["music_generate_chords"]
music_generate_euclidean = generation_tools["music_generate_euclidean"]
music_generate_track = generation_tools["music_generate_track"]

music_generate_structure = arrangement_tools["music_generate_structure"]
music_section_rules = arrangement_tools["music_section_rules"]
music_compose_song = arrangement_tools["music_compose_song"]

logger.info("CHUK Composer MCP Server initialized")
logger.info(f"  Catalog path: {CATALOG_LIBRARY_PATH}")
logger.info(f"  Project genres: {BASE_PATH / 'genres'}")
