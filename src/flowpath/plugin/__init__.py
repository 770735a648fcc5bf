"""Plugin discovery and loading system.

This module provides infrastructure for discovering and loading
node mapper plugins via Python entry points.
"""

from flowpath.plugin.discovery import (
    discover_mappers,
    load_mapper,
    register_plugin_mappers,
    MapperRegistry,
    MAPPERS_GROUP,
)

__all__ = [
    "discover_mappers",
    "load_mapper",
    "register_plugin_mappers",
    "MapperRegistry",
    "MAPPERS_GROUP",
]
