"""Resolve command for flowpath CLI."""

import sys
from pathlib import Path

import yaml

from flowpath.cli.commands.graph import load_flow_file
from flowpath.core.path import InvalidPathError, ensure_path, resolve
from flowpath.entities import create_entities


def cmd_resolve(document_path: str, path: str) -> int:
    """Print the value addressed by a path in a flow file.

    The path is tried against each entity in turn, e.g.
    ``route.from.steps.0.log``.

    Args:
        document_path: YAML flow file.
        path: Dot-joined node path.

    Returns:
        Exit code (0 when the path resolves, 1 otherwise).
    """
    source = Path(document_path)
    if not source.exists():
        print(f"Error: Flow file not found: {source}", file=sys.stderr)
        return 1

    try:
        flow_path = ensure_path(path)
    except InvalidPathError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        documents = load_flow_file(source)
    except yaml.YAMLError as e:
        print(f"Error: Invalid YAML in {source}: {e}", file=sys.stderr)
        return 1

    missing = object()
    for entity in create_entities(documents):
        value = resolve(entity.document, flow_path, missing)
        if value is not missing:
            print(f"# {entity.id}: {entity.get_node_label(flow_path)}")
            print(yaml.safe_dump(value, sort_keys=False, default_flow_style=False).rstrip())
            return 0

    print(f"Path '{flow_path}' does not resolve", file=sys.stderr)
    return 1
