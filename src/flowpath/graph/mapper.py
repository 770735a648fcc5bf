"""Node mapper abstractions and the kind-based dispatch table.

A mapper turns the definition at a path into a VisualNode subtree. The
RootNodeMapper dispatches on processor kind; kinds without a dedicated
mapper fall back to the default mapper, which derives children from the
kind's step-properties descriptors.

Example:
    >>> from flowpath.graph.mappers import create_root_mapper
    >>> root_mapper = create_root_mapper(EditorContext.default())
    >>> node = root_mapper.get_viz_node(path, lookup_from_path(path, value), document)
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from flowpath.core.context import EditorContext
from flowpath.core.descriptors import StepPropertyDescriptor, StepPropertyType
from flowpath.core.path import FlowPath, resolve
from flowpath.core.lookup import ProcessorLookup, lookup_from_path
from flowpath.graph.node import CatalogKind, VisualNode, node_label

logger = logging.getLogger(__name__)


class NodeMapper(ABC):
    """Abstract base class for node mappers.

    Mappers are stateless apart from their collaborators, so one instance
    serves every node of its kind.
    """

    @abstractmethod
    def get_viz_node(
        self,
        path: FlowPath,
        lookup: ProcessorLookup,
        document: Any,
    ) -> VisualNode:
        """Build the node (and its subtree) for the definition at ``path``.

        Args:
            path: Address of the definition.
            lookup: Processor and component of the definition.
            document: Root of the flow document.

        Returns:
            The node for ``path``.
        """
        ...

    def expand(self, node: VisualNode) -> List[VisualNode]:
        """Nodes to place in the parent group for ``node``.

        Mappers that flatten their children into the parent override this.
        """
        return [node]


class RootNodeMapper(NodeMapper):
    """Dispatch table from processor kind to mapper.

    Args:
        context: Catalog collaborators shared by the registered mappers.
    """

    def __init__(self, context: Optional[EditorContext] = None):
        self._context = context or EditorContext.default()
        self._mappers: Dict[str, NodeMapper] = {}
        self._default_mapper: Optional[NodeMapper] = None

    @property
    def context(self) -> EditorContext:
        return self._context

    def register_mapper(self, processor_name: str, mapper: NodeMapper) -> None:
        """Use ``mapper`` for nodes of kind ``processor_name``."""
        self._mappers[processor_name] = mapper

    def register_default_mapper(self, mapper: NodeMapper) -> None:
        """Use ``mapper`` for kinds without a dedicated mapper."""
        self._default_mapper = mapper

    def get_mapper(self, processor_name: Optional[str]) -> NodeMapper:
        """Mapper for a kind, falling back to the default mapper.

        Raises:
            RuntimeError: If no default mapper has been registered.
        """
        mapper = self._mappers.get(processor_name) if processor_name else None
        if mapper is not None:
            return mapper
        if self._default_mapper is None:
            raise RuntimeError("No default node mapper registered")
        return self._default_mapper

    def mapped_kinds(self) -> List[str]:
        return sorted(self._mappers)

    def get_viz_node(
        self,
        path: FlowPath,
        lookup: ProcessorLookup,
        document: Any,
    ) -> VisualNode:
        return self.get_mapper(lookup.processor_name).get_viz_node(path, lookup, document)

    def get_flow_nodes(
        self,
        path: FlowPath,
        lookup: ProcessorLookup,
        document: Any,
    ) -> List[VisualNode]:
        """Nodes contributed to the parent group by the definition at ``path``."""
        mapper = self.get_mapper(lookup.processor_name)
        return mapper.expand(mapper.get_viz_node(path, lookup, document))


class BaseNodeMapper(NodeMapper):
    """Default mapper driven by step-properties descriptors.

    For each descriptor of the node's kind:
    - single-clause: one child at ``path.<name>`` when present
    - array: one child per clause at ``path.<name>.<i>``
    - branch: one subtree per step wrapper at ``path.<name>.<i>.<kind>``

    Args:
        root_mapper: Dispatcher used to map child definitions.
    """

    def __init__(self, root_mapper: RootNodeMapper):
        self._root_mapper = root_mapper

    @property
    def context(self) -> EditorContext:
        return self._root_mapper.context

    def get_viz_node(
        self,
        path: FlowPath,
        lookup: ProcessorLookup,
        document: Any,
    ) -> VisualNode:
        node = self.create_node(path, lookup, document)
        for descriptor in self.context.descriptors.steps_properties(lookup.processor_name):
            for child in self.get_children(path, descriptor, document):
                node.add_child(child)
        return node

    def create_node(
        self,
        path: FlowPath,
        lookup: ProcessorLookup,
        document: Any,
    ) -> VisualNode:
        """Bare node for ``path``, without children."""
        descriptors = self.context.descriptors
        definition = resolve(document, path)
        processor_name = lookup.processor_name
        component_name = lookup.component_name

        if component_name is None:
            catalog_kind = CatalogKind.PROCESSOR
        elif component_name.startswith("kamelet:"):
            catalog_kind = CatalogKind.KAMELET
        else:
            catalog_kind = CatalogKind.COMPONENT

        return VisualNode(
            id=str(path),
            path=path,
            processor_name=processor_name,
            component_name=component_name,
            catalog_kind=catalog_kind,
            title=component_name or (descriptors.title_of(processor_name) if processor_name else None),
            icon=descriptors.icon_of(processor_name) if processor_name else None,
            label=node_label(processor_name, component_name, definition),
            is_group=bool(descriptors.steps_properties(processor_name)),
            document=document,
        )

    def get_children(
        self,
        path: FlowPath,
        descriptor: StepPropertyDescriptor,
        document: Any,
    ) -> List[VisualNode]:
        """Child nodes held by one steps property of the node at ``path``."""
        subpath = path.child(descriptor.name)
        if descriptor.type is StepPropertyType.BRANCH:
            return self.get_children_from_branch(subpath, document)
        if descriptor.type is StepPropertyType.SINGLE_CLAUSE:
            return self.get_children_from_single_clause(subpath, document)
        return self.get_children_from_array(subpath, descriptor.name, document)

    def get_children_from_branch(self, path: FlowPath, document: Any) -> List[VisualNode]:
        steps = resolve(document, path)
        if not isinstance(steps, list):
            return []

        nodes: List[VisualNode] = []
        for index, step in enumerate(steps):
            if not isinstance(step, dict) or not step:
                logger.debug("Skipping malformed step at %s.%d", path, index)
                continue
            kind = next(iter(step))
            child_path = path.child(index, kind)
            lookup = lookup_from_path(child_path, step[kind])
            nodes.extend(self._root_mapper.get_flow_nodes(child_path, lookup, document))
        return nodes

    def get_children_from_single_clause(self, path: FlowPath, document: Any) -> List[VisualNode]:
        definition = resolve(document, path)
        if definition is None:
            return []
        lookup = lookup_from_path(path, definition)
        return self._root_mapper.get_flow_nodes(path, lookup, document)

    def get_children_from_array(
        self,
        path: FlowPath,
        clause_kind: str,
        document: Any,
    ) -> List[VisualNode]:
        clauses = resolve(document, path)
        if not isinstance(clauses, list):
            return []

        nodes: List[VisualNode] = []
        lookup = ProcessorLookup(clause_kind)
        for index in range(len(clauses)):
            nodes.extend(self._root_mapper.get_flow_nodes(path.child(index), lookup, document))
        return nodes
