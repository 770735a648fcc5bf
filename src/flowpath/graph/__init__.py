"""Visualization graph: nodes, mapper dispatch and the builder.

Example:
    >>> from flowpath.graph import build_graph
    >>> root = build_graph({"route": {"from": {"uri": "timer:tick", "steps": []}}})
    >>> root.children[0].label
    'timer'
"""

from flowpath.core.lookup import (
    ProcessorLookup,
    component_name_from_uri,
    lookup_from_path,
    processor_name_from_path,
)
from flowpath.graph.node import CatalogKind, VisualNode, node_label
from flowpath.graph.mapper import NodeMapper, RootNodeMapper, BaseNodeMapper
from flowpath.graph.mappers import (
    ChoiceNodeMapper,
    FromNodeMapper,
    EntityRootNodeMapper,
    RouteNodeMapper,
    RestVerbNodeMapper,
    create_root_mapper,
)
from flowpath.graph.builder import (
    GraphBuilder,
    build_graph,
    link_siblings,
    normalize_groups,
)

__all__ = [
    # Lookup
    "ProcessorLookup",
    "component_name_from_uri",
    "lookup_from_path",
    "processor_name_from_path",
    # Nodes
    "CatalogKind",
    "VisualNode",
    "node_label",
    # Mappers
    "NodeMapper",
    "RootNodeMapper",
    "BaseNodeMapper",
    "ChoiceNodeMapper",
    "FromNodeMapper",
    "EntityRootNodeMapper",
    "RouteNodeMapper",
    "RestVerbNodeMapper",
    "create_root_mapper",
    # Builder
    "GraphBuilder",
    "build_graph",
    "link_siblings",
    "normalize_groups",
]
