"""Plugin discovery system for flowpath.

Third-party packages can contribute node mappers for their own processor
kinds through the `flowpath.mappers` entry point group. The entry point
name is the processor kind, the value a NodeMapper subclass whose
constructor takes the root mapper:

```toml
[project.entry-points."flowpath.mappers"]
kafkaBatch = "myplugin.mappers:KafkaBatchNodeMapper"
```

Example:
    >>> from flowpath.plugin import discover_mappers, load_mapper
    >>>
    >>> for name in discover_mappers():
    ...     print(f"Found mapper for: {name}")
    >>>
    >>> KafkaBatchNodeMapper = load_mapper("kafkaBatch")
"""

import logging
from importlib.metadata import entry_points
from typing import Any, Dict, List, Optional, Type

from flowpath.graph.mapper import NodeMapper, RootNodeMapper

logger = logging.getLogger(__name__)

# Entry point group name
MAPPERS_GROUP = "flowpath.mappers"


def _get_entry_points(group: str) -> Dict[str, Any]:
    """Get entry points for a group.

    Args:
        group: The entry point group name.

    Returns:
        Dict mapping entry point names to entry point objects.
    """
    return {ep.name: ep for ep in entry_points(group=group)}


def discover_mappers() -> Dict[str, Any]:
    """Discover all available node mapper plugins.

    Returns:
        Dict mapping processor kinds to their entry points.
    """
    return _get_entry_points(MAPPERS_GROUP)


def load_mapper(name: str) -> Type[NodeMapper]:
    """Load a node mapper class by processor kind.

    Args:
        name: The registered processor kind.

    Returns:
        The mapper class.

    Raises:
        KeyError: If no mapper with the given name is registered.
        ImportError: If the mapper cannot be loaded.
    """
    mappers = discover_mappers()
    if name not in mappers:
        raise KeyError(
            f"No node mapper registered with name '{name}'. "
            f"Available: {list(mappers.keys())}"
        )
    return mappers[name].load()


class MapperRegistry:
    """Registry of mapper classes by processor kind.

    Classes registered in code take precedence over entry points.

    Example:
        >>> registry = MapperRegistry()
        >>> registry.register_mapper("kafkaBatch", KafkaBatchNodeMapper)
        >>> registry.apply(root_mapper)
    """

    def __init__(self):
        self._mappers: Dict[str, Type[NodeMapper]] = {}

    def register_mapper(self, name: str, mapper_class: Type[NodeMapper]) -> None:
        """Register a mapper class for a processor kind."""
        self._mappers[name] = mapper_class

    def get_mapper_class(self, name: str) -> Type[NodeMapper]:
        """Get a mapper class, falling back to entry point discovery.

        Raises:
            KeyError: If the kind is neither registered nor discovered.
        """
        if name in self._mappers:
            return self._mappers[name]
        return load_mapper(name)

    def list_mappers(self) -> List[str]:
        """Processor kinds with a mapper (registered + discovered)."""
        discovered = set(discover_mappers().keys())
        registered = set(self._mappers.keys())
        return sorted(discovered | registered)

    def apply(self, root_mapper: RootNodeMapper) -> List[str]:
        """Instantiate every known mapper on ``root_mapper``.

        Mappers that fail to load are skipped with a warning.

        Returns:
            Processor kinds that were registered.
        """
        applied = []
        for name in self.list_mappers():
            try:
                mapper_class = self.get_mapper_class(name)
                mapper = mapper_class(root_mapper)
            except Exception as e:
                logger.warning("Failed to load node mapper '%s': %s", name, e)
                continue
            if not isinstance(mapper, NodeMapper):
                logger.warning("Ignoring '%s': %s is not a NodeMapper", name, type(mapper).__name__)
                continue
            root_mapper.register_mapper(name, mapper)
            applied.append(name)
        return applied


def register_plugin_mappers(
    root_mapper: RootNodeMapper,
    registry: Optional[MapperRegistry] = None,
) -> List[str]:
    """Register discovered (and explicitly registered) mappers.

    Args:
        root_mapper: Dispatch table to extend.
        registry: Registry with extra in-code mappers.

    Returns:
        Processor kinds that were registered.
    """
    return (registry or MapperRegistry()).apply(root_mapper)
