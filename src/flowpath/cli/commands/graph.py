"""Graph command for flowpath CLI."""

import json
import sys
from pathlib import Path
from typing import Any, List, Optional

import yaml

from flowpath.config import load_yaml_config, ConfigLoadError
from flowpath.core.context import EditorContext, configure_observability
from flowpath.core.path import InvalidPathError, ensure_path
from flowpath.entities import create_entities
from flowpath.graph.builder import GraphBuilder
from flowpath.graph.mappers import create_root_mapper
from flowpath.graph.node import VisualNode


def load_flow_file(path: Path) -> List[Any]:
    """Read a flow file as a list of root documents.

    Raises:
        yaml.YAMLError: If the file is not valid YAML.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return []
    if isinstance(data, list):
        return data
    return [data]


def format_tree(node: VisualNode, indent: int = 0) -> List[str]:
    """Indented text lines for a graph, one node per line."""
    marker = "+" if node.is_group else "-"
    kind = node.processor_name or "?"
    line = f"{'  ' * indent}{marker} {node.label or kind} [{kind}] {node.path}"
    lines = [line]
    for child in node.children:
        lines.extend(format_tree(child, indent + 1))
    return lines


def cmd_graph(
    document_path: str,
    path: Optional[str] = None,
    config_path: Optional[str] = None,
    as_json: bool = False,
    plugins: bool = False,
) -> int:
    """Print the visualization graph of every entity in a flow file.

    Args:
        document_path: YAML flow file (a list of root documents, or one).
        path: Only build the subtree at this path (e.g. ``route.from``).
        config_path: Optional configuration file.
        as_json: Print JSON instead of an indented tree.
        plugins: Also load node mapper plugins.

    Returns:
        Exit code (0 for success, 1 for errors).
    """
    source = Path(document_path)
    if not source.exists():
        print(f"Error: Flow file not found: {source}", file=sys.stderr)
        return 1

    try:
        flow_path = ensure_path(path) if path is not None else None
    except InvalidPathError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    context = EditorContext.default()
    if config_path:
        try:
            config = load_yaml_config(config_path)
        except (ConfigLoadError, FileNotFoundError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        context = EditorContext.from_config(config)
        configure_observability(config.observability, context.hub)

    try:
        documents = load_flow_file(source)
    except yaml.YAMLError as e:
        print(f"Error: Invalid YAML in {source}: {e}", file=sys.stderr)
        return 1

    root_mapper = create_root_mapper(context, include_plugins=plugins)
    graphs = []
    try:
        for entity in create_entities(documents, context):
            if flow_path is None:
                graph = entity.build_graph(root_mapper)
            else:
                graph = GraphBuilder(entity.document, context, root_mapper).build(flow_path)
            if graph is not None:
                graphs.append(graph)
    finally:
        context.hub.flush()

    if flow_path is not None and not graphs:
        print(f"Error: Path '{path}' does not resolve in any entity", file=sys.stderr)
        return 1

    if as_json:
        print(json.dumps([graph.to_dict() for graph in graphs], indent=2))
    else:
        for graph in graphs:
            print("\n".join(format_tree(graph)))

    return 0
