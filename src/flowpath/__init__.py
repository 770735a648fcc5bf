"""flowpath - Path-addressable model for integration flow documents.

flowpath gives every nested node of a flow document (routes, branching
processors, error handlers, REST descriptors) a stable dot-joined
address, edits the document structurally at an address, and turns it
into a doubly-linked visualization graph.

Quick Start:
    >>> import flowpath as fp
    >>>
    >>> route = fp.create_entity({"route": {"from": {"uri": "timer:tick", "steps": []}}})
    >>> route.insert_child("route.from", {"log": {"message": "${body}"}})
    True
    >>> graph = route.build_graph()
    >>> [node.processor_name for node in graph.children]
    ['from', 'log']

For advanced usage, see:
- flowpath.core: FlowPath, MutationEngine, capabilities, expressions
- flowpath.graph: VisualNode, node mappers, GraphBuilder
- flowpath.entities: FlowEntity and the concrete flow kinds
- flowpath.config: YAML configuration of the catalog
"""

__version__ = "0.1.0"

# =============================================================================
# Core document model
# =============================================================================
from flowpath.core import (
    # Path algebra
    FlowPath,
    InvalidPathError,
    ROOT_PATH,
    segments_of,
    resolve,
    classify_tail,
    set_value,
    get_array,
    # Catalog
    StepPropertyType,
    StepPropertyDescriptor,
    ProcessorDefinition,
    DescriptorRegistry,
    LanguageRegistry,
    # Capabilities
    PathRole,
    CapabilityRecord,
    CapabilityRules,
    CapabilityResolver,
    capabilities_of,
    # Expressions
    ExpressionModel,
    ExpressionService,
    parse_expression,
    serialize_expression,
    # Context and edits
    EditorContext,
    MutationEngine,
    ChildInsertMode,
    AdjacentInsertMode,
)

# =============================================================================
# Visualization graph
# =============================================================================
from flowpath.graph import (
    CatalogKind,
    VisualNode,
    NodeMapper,
    BaseNodeMapper,
    RootNodeMapper,
    GraphBuilder,
    build_graph,
    create_root_mapper,
)

# =============================================================================
# Entities
# =============================================================================
from flowpath.entities import (
    FlowEntity,
    RouteEntity,
    create_entity,
    create_entities,
)

__all__ = [
    "__version__",
    # Path algebra
    "FlowPath",
    "InvalidPathError",
    "ROOT_PATH",
    "segments_of",
    "resolve",
    "classify_tail",
    "set_value",
    "get_array",
    # Catalog
    "StepPropertyType",
    "StepPropertyDescriptor",
    "ProcessorDefinition",
    "DescriptorRegistry",
    "LanguageRegistry",
    # Capabilities
    "PathRole",
    "CapabilityRecord",
    "CapabilityRules",
    "CapabilityResolver",
    "capabilities_of",
    # Expressions
    "ExpressionModel",
    "ExpressionService",
    "parse_expression",
    "serialize_expression",
    # Context and edits
    "EditorContext",
    "MutationEngine",
    "ChildInsertMode",
    "AdjacentInsertMode",
    # Graph
    "CatalogKind",
    "VisualNode",
    "NodeMapper",
    "BaseNodeMapper",
    "RootNodeMapper",
    "GraphBuilder",
    "build_graph",
    "create_root_mapper",
    # Entities
    "FlowEntity",
    "RouteEntity",
    "create_entity",
    "create_entities",
]
