"""Validate command for flowpath CLI."""

import sys
from pathlib import Path

from flowpath.config import load_yaml_config, ConfigLoadError
from flowpath.core.context import EditorContext
from flowpath.graph.mappers import create_root_mapper
from flowpath.plugin.discovery import MapperRegistry


def cmd_validate(config_path: str, check_plugins: bool = False) -> int:
    """Validate a configuration file.

    Args:
        config_path: Path to the YAML configuration file.
        check_plugins: Whether to verify that mapper plugins load.

    Returns:
        Exit code (0 for success, 1 for validation errors).
    """
    path = Path(config_path)

    if not path.exists():
        print(f"Error: Configuration file not found: {path}", file=sys.stderr)
        return 1

    print(f"Validating: {path}")

    try:
        config = load_yaml_config(path)
    except ConfigLoadError as e:
        print(f"Validation failed: {e}", file=sys.stderr)
        return 1

    print(f"  Version: {config.version}")
    print(f"  Processors: {len(config.processors)}")
    for name, processor in config.processors.items():
        properties = ", ".join(
            f"{prop.name} ({prop.type})" for prop in processor.steps_properties
        ) or "leaf"
        print(f"    - {name}: {properties}")

    print(f"  Languages: {len(config.languages)}")
    for name, language in config.languages.items():
        print(f"    - {name} -> {language.model_name or name}")

    overrides = [
        name for name, value in config.capabilities.model_dump().items()
        if value is not None
    ]
    if overrides:
        print(f"  Capability overrides: {', '.join(overrides)}")

    print(f"  Logging: {config.logging.level}")
    print(f"  Observability: {config.observability.level}")
    if config.observability.sinks:
        print(f"  Sinks: {len(config.observability.sinks)}")
        for sink in config.observability.sinks:
            sink_info = sink.type
            if sink.path:
                sink_info += f" -> {sink.path}"
            print(f"    - {sink_info}")

    if check_plugins:
        print("\nChecking mapper plugins...")
        registry = MapperRegistry()
        root_mapper = create_root_mapper(EditorContext.from_config(config))

        expected = registry.list_mappers()
        loaded = set(registry.apply(root_mapper))
        errors = [name for name in expected if name not in loaded]

        if errors:
            print("\nPlugin errors:", file=sys.stderr)
            for name in errors:
                print(f"  - Mapper '{name}' failed to load", file=sys.stderr)
            return 1
        print(f"  {len(loaded)} mapper plugin(s) available")

    print("\nConfiguration is valid.")
    return 0
