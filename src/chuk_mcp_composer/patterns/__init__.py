"""
Pattern layer - step grids and the style strategies that fill them.

Styles are named, swappable strategies; the bank owns the seven-track
grid and its snapshot pool.
"""

from chuk_mcp_composer.patterns.bank import PatternBank, empty_grid
from chuk_mcp_composer.patterns.styles import (
    STYLES,
    PatternStyle,
    StyleRegistry,
    generate_track_pattern,
)

__all__ = [
    "STYLES",
    "PatternBank",
    "PatternStyle",
    "StyleRegistry",
    "empty_grid",
    "generate_track_pattern",
]
