"""Core document model: paths, descriptors, edits, capabilities, expressions."""

from flowpath.core.path import (
    FlowPath,
    NameSegment,
    IndexSegment,
    TailShape,
    InvalidPathError,
    ROOT_PATH,
    segments_of,
    ensure_path,
    resolve,
    exists,
    classify_tail,
    set_value,
    get_array,
)
from flowpath.core.descriptors import (
    StepPropertyType,
    StepPropertyDescriptor,
    ProcessorDefinition,
    DescriptorRegistry,
)
from flowpath.core.capabilities import (
    PathRole,
    CapabilityRecord,
    CapabilityRules,
    CapabilityResolver,
    DISABLED_CAPABILITIES,
    SPECIAL_ENTITY_CAPABILITIES,
    capabilities_of,
)
from flowpath.core.expression import (
    LanguageDefinition,
    LanguageRegistry,
    ExpressionModel,
    ExpressionService,
    EMPTY_EXPRESSION,
    parse_expression,
    serialize_expression,
)
from flowpath.core.lookup import (
    ProcessorLookup,
    lookup_from_path,
    processor_name_from_path,
    component_name_from_uri,
)
from flowpath.core.context import EditorContext, configure_observability
from flowpath.core.mutation import (
    MutationEngine,
    ChildInsertMode,
    AdjacentInsertMode,
)

__all__ = [
    # Path algebra
    "FlowPath",
    "NameSegment",
    "IndexSegment",
    "TailShape",
    "InvalidPathError",
    "ROOT_PATH",
    "segments_of",
    "ensure_path",
    "resolve",
    "exists",
    "classify_tail",
    "set_value",
    "get_array",
    # Descriptors
    "StepPropertyType",
    "StepPropertyDescriptor",
    "ProcessorDefinition",
    "DescriptorRegistry",
    # Capabilities
    "PathRole",
    "CapabilityRecord",
    "CapabilityRules",
    "CapabilityResolver",
    "DISABLED_CAPABILITIES",
    "SPECIAL_ENTITY_CAPABILITIES",
    "capabilities_of",
    # Expressions
    "LanguageDefinition",
    "LanguageRegistry",
    "ExpressionModel",
    "ExpressionService",
    "EMPTY_EXPRESSION",
    "parse_expression",
    "serialize_expression",
    # Lookup
    "ProcessorLookup",
    "lookup_from_path",
    "processor_name_from_path",
    "component_name_from_uri",
    # Context
    "EditorContext",
    "configure_observability",
    # Mutation
    "MutationEngine",
    "ChildInsertMode",
    "AdjacentInsertMode",
]
