"""
Catalog - the read-only scale, chord-quality and genre library.

Loaded once from YAML at startup; genres can be overridden per project.
"""

from chuk_mcp_composer.catalog.loader import CatalogLoader

__all__ = ["CatalogLoader"]
