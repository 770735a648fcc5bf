"""Plugins command for flowpath CLI."""

from flowpath.plugin.discovery import MAPPERS_GROUP, discover_mappers


def cmd_plugins_list() -> int:
    """List all available node mapper plugins.

    Returns:
        Exit code (0 for success).
    """
    print("Available Node Mappers:")
    print("-" * 40)

    mappers = discover_mappers()
    if mappers:
        for name, ep in sorted(mappers.items()):
            print(f"  {name:<20} {ep.value}")
    else:
        print("  (none found)")

    print()
    print("To register plugins, add entry points in pyproject.toml:")
    print(f'  [project.entry-points."{MAPPERS_GROUP}"]')
    print('  myProcessor = "mypackage.mappers:MyProcessorNodeMapper"')

    return 0
