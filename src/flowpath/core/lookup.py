"""Processor and component lookup from a node path.

The processor kind of a node is not stored next to its definition but
encoded in its address: the last name segment (``route.from.steps.0.to``
is a ``to``), or the name before a trailing index for clause lists
(``choice.when.1`` is a ``when``). Endpoint-style processors also carry a
component name taken from their URI.
"""

from typing import Any, NamedTuple, Optional

from flowpath.core.path import IndexSegment, NameSegment, PathLike, ensure_path

# Processors whose definition carries an endpoint URI.
ENDPOINT_PROCESSORS = frozenset({"from", "to", "toD", "wireTap", "enrich", "pollEnrich"})

# Processors whose URI may be written as a bare string (``to: log:foo``).
SHORTHAND_URI_PROCESSORS = frozenset({"to", "toD", "wireTap"})

KAMELET_SCHEME = "kamelet"


class ProcessorLookup(NamedTuple):
    """Result of resolving what kind of node lives at a path.

    Attributes:
        processor_name: Processor kind (``to``, ``choice``, ``when``...).
        component_name: Endpoint component for URI-carrying processors.
    """

    processor_name: Optional[str]
    component_name: Optional[str] = None


def component_name_from_uri(uri: Any) -> Optional[str]:
    """Extract the component name from an endpoint URI.

    Examples:
        >>> component_name_from_uri("timer:tick?period=1000")
        'timer'
        >>> component_name_from_uri("kamelet:kafka-sink?topic=foo")
        'kamelet:kafka-sink'
    """
    if not isinstance(uri, str) or not uri:
        return None
    parts = uri.split(":")
    if parts[0] == KAMELET_SCHEME and len(parts) > 1:
        return f"{KAMELET_SCHEME}:{parts[1].split('?')[0]}"
    return parts[0]


def uri_of(processor_name: Optional[str], definition: Any) -> Optional[str]:
    """URI string of an endpoint definition, in either of its two forms."""
    if isinstance(definition, str) and processor_name in SHORTHAND_URI_PROCESSORS:
        return definition
    if isinstance(definition, dict):
        uri = definition.get("uri")
        if isinstance(uri, str):
            return uri
    return None


def processor_name_from_path(path: PathLike, root_kind: Optional[str] = None) -> Optional[str]:
    """Processor kind addressed by a path.

    Args:
        path: Node path.
        root_kind: Kind reported for the empty (root) path.

    Returns:
        The last name segment, the name before a trailing index, or
        ``root_kind`` for the root path. None when the path has no usable
        name (e.g. a bare index).
    """
    path = ensure_path(path)
    if path.is_root:
        return root_kind
    last = path.last
    if isinstance(last, NameSegment):
        return last.name
    penultimate = path.penultimate
    if isinstance(last, IndexSegment) and isinstance(penultimate, NameSegment):
        return penultimate.name
    return None


def lookup_from_path(
    path: PathLike,
    definition: Any = None,
    root_kind: Optional[str] = None,
) -> ProcessorLookup:
    """Resolve the processor (and component) living at a path.

    Args:
        path: Node path.
        definition: The node's definition, used to read endpoint URIs.
        root_kind: Kind reported for the empty (root) path.

    Returns:
        The ProcessorLookup for the node.
    """
    processor_name = processor_name_from_path(path, root_kind)
    if processor_name not in ENDPOINT_PROCESSORS or definition is None:
        return ProcessorLookup(processor_name)
    return ProcessorLookup(
        processor_name,
        component_name_from_uri(uri_of(processor_name, definition)),
    )
