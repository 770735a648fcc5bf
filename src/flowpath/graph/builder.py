"""Visualization graph builder.

Builds a fresh VisualNode tree for a document subtree in three passes:
1. Map: dispatch each definition to its mapper (recursive).
2. Link: chain every group's children into previous/next siblings.
3. Normalize: demote groups left without children, bottom-up.

Example:
    >>> document = {"route": {"from": {"uri": "timer:tick", "steps": [{"log": {}}]}}}
    >>> root = build_graph(document)
    >>> [child.processor_name for child in root.children]
    ['from', 'log']
"""

import logging
import time
from typing import TYPE_CHECKING, Any, Optional

from flowpath.core.context import EditorContext
from flowpath.core.path import FlowPath, PathLike, ensure_path, exists, resolve
from flowpath.core.lookup import lookup_from_path
from flowpath.graph.mapper import RootNodeMapper
from flowpath.graph.mappers import create_root_mapper
from flowpath.graph.node import VisualNode
from flowpath.observability import GraphBuildRecord

if TYPE_CHECKING:
    from flowpath.entities.base import FlowEntity

logger = logging.getLogger(__name__)


class GraphBuilder:
    """Builds visualization graphs over one document.

    Args:
        document: Root of the flow document (only read).
        context: Catalog and tracing collaborators.
        root_mapper: Mapper dispatch table (built-in mappers by default).
        root_kind: Processor kind of the document root itself, if the
            root is a processor rather than a wrapper.
    """

    def __init__(
        self,
        document: Any,
        context: Optional[EditorContext] = None,
        root_mapper: Optional[RootNodeMapper] = None,
        root_kind: Optional[str] = None,
    ):
        self._document = document
        self._context = context or EditorContext.default()
        self._root_mapper = root_mapper or create_root_mapper(self._context)
        self._root_kind = root_kind

    @property
    def root_mapper(self) -> RootNodeMapper:
        return self._root_mapper

    def build(
        self,
        path: Optional[PathLike] = None,
        entity: Optional["FlowEntity"] = None,
    ) -> Optional[VisualNode]:
        """Build the graph for the subtree at ``path``.

        Args:
            path: Subtree to build. Defaults to the document's root
                segment (``route`` for ``{"route": {...}}``).
            entity: Entity to attach to the returned root node.

        Returns:
            The root VisualNode, or None if ``path`` does not resolve.
        """
        start_ns = time.perf_counter_ns()
        path = self._default_path() if path is None else ensure_path(path)
        if path is None or not exists(self._document, path):
            logger.debug("Graph build skipped: %s does not resolve", path)
            return None

        definition = resolve(self._document, path)
        lookup = lookup_from_path(path, definition, self._root_kind)
        root = self._root_mapper.get_viz_node(path, lookup, self._document)

        link_siblings(root)
        normalize_groups(root)

        if entity is not None:
            root.entity = entity
            root.id = entity.id

        node_count = 0
        group_count = 0
        for node in root.walk():
            node_count += 1
            if node.is_group:
                group_count += 1

        duration_ms = (time.perf_counter_ns() - start_ns) / 1_000_000
        logger.debug(
            "Built graph for %s: %d nodes, %d groups in %.2fms",
            path or "<root>", node_count, group_count, duration_ms,
        )
        self._context.emit(GraphBuildRecord(
            root_path=str(path),
            node_count=node_count,
            group_count=group_count,
            duration_ms=duration_ms,
        ))
        return root

    def _default_path(self) -> Optional[FlowPath]:
        if self._root_kind is not None:
            return FlowPath()
        if isinstance(self._document, dict) and len(self._document) == 1:
            return FlowPath.of(next(iter(self._document)))
        return None


def link_siblings(root: VisualNode) -> None:
    """Chain each group's children in order: ``a.next is b`` iff ``b.previous is a``."""
    for node in root.walk():
        children = node.children
        for index, child in enumerate(children):
            child.previous = children[index - 1] if index > 0 else None
            child.next = children[index + 1] if index + 1 < len(children) else None


def normalize_groups(node: VisualNode) -> None:
    """Demote childless groups to plain nodes, bottom-up."""
    for child in node.children:
        normalize_groups(child)
    if node.is_group and not node.children:
        node.is_group = False


def build_graph(
    document: Any,
    path: Optional[PathLike] = None,
    context: Optional[EditorContext] = None,
    root_kind: Optional[str] = None,
) -> Optional[VisualNode]:
    """Build a graph with the built-in mappers.

    See GraphBuilder.build().
    """
    return GraphBuilder(document, context, root_kind=root_kind).build(path)
