"""Mappers for processor kinds whose visual shape differs from storage.

- ChoiceNodeMapper: ``when`` clauses and ``otherwise`` become sibling
  branches of one group, although one is a list and the other a single
  object.
- FromNodeMapper: the consumer's ``steps`` are shown next to it in the
  parent group instead of nested under it.
- EntityRootNodeMapper / RouteNodeMapper: top-level entity groups.
- RestVerbNodeMapper: each REST verb clause is a group around its
  ``to`` endpoint.
"""

import logging
from typing import Any, List, Optional

from flowpath.core.context import EditorContext
from flowpath.core.descriptors import REST_VERBS, StepPropertyDescriptor, StepPropertyType
from flowpath.core.path import FlowPath, resolve
from flowpath.core.lookup import ProcessorLookup
from flowpath.graph.mapper import BaseNodeMapper, RootNodeMapper
from flowpath.graph.node import CatalogKind, VisualNode

logger = logging.getLogger(__name__)

# Kinds that form their own top-level entity in a flow file.
ENTITY_ROOT_KINDS = (
    "routeConfiguration",
    "intercept",
    "interceptFrom",
    "interceptSendToEndpoint",
    "onException",
    "onCompletion",
    "errorHandler",
    "restConfiguration",
    "rest",
)

_WHEN = StepPropertyDescriptor("when", StepPropertyType.ARRAY)
_OTHERWISE = StepPropertyDescriptor("otherwise", StepPropertyType.SINGLE_CLAUSE)
_TO = StepPropertyDescriptor("to", StepPropertyType.SINGLE_CLAUSE)


class ChoiceNodeMapper(BaseNodeMapper):
    """Every ``when`` clause first, then ``otherwise``."""

    def get_viz_node(
        self,
        path: FlowPath,
        lookup: ProcessorLookup,
        document: Any,
    ) -> VisualNode:
        node = self.create_node(path, lookup, document)
        node.is_group = True
        for descriptor in (_WHEN, _OTHERWISE):
            for child in self.get_children(path, descriptor, document):
                node.add_child(child)
        return node


class FromNodeMapper(BaseNodeMapper):
    """Consumer whose steps are laid out as its own siblings.

    The node is built with its steps as children, then ``expand`` moves
    them up so the parent group holds ``[from, step0, step1, ...]``.
    """

    def expand(self, node: VisualNode) -> List[VisualNode]:
        steps = list(node.children)
        for child in steps:
            node.remove_child(child)
        node.is_group = False
        return [node] + steps


class EntityRootNodeMapper(BaseNodeMapper):
    """Group node for a top-level entity (path of one segment).

    Below the top level the kind is mapped like any other processor, so
    ``onException`` inside a route configuration stays an ordinary group.
    """

    def get_viz_node(
        self,
        path: FlowPath,
        lookup: ProcessorLookup,
        document: Any,
    ) -> VisualNode:
        node = super().get_viz_node(path, lookup, document)
        if len(path) <= 1:
            self.mark_entity_root(node, resolve(document, path))
        return node

    @staticmethod
    def mark_entity_root(node: VisualNode, definition: Any) -> None:
        node.catalog_kind = CatalogKind.ENTITY
        node.is_group = True
        entity_id = _definition_id(definition)
        if entity_id is not None:
            node.id = entity_id


class RouteNodeMapper(EntityRootNodeMapper):
    """Routes are entity groups wherever they appear."""

    def get_viz_node(
        self,
        path: FlowPath,
        lookup: ProcessorLookup,
        document: Any,
    ) -> VisualNode:
        node = BaseNodeMapper.get_viz_node(self, path, lookup, document)
        self.mark_entity_root(node, resolve(document, path))
        return node


class RestVerbNodeMapper(BaseNodeMapper):
    """REST operation (``rest.get.0``) shown as a group holding its ``to``.

    The verb's ``to`` is not a step property of the catalog, so the
    child is mapped here. A verb without ``to`` ends up as a plain node
    once empty groups are demoted.
    """

    def get_viz_node(
        self,
        path: FlowPath,
        lookup: ProcessorLookup,
        document: Any,
    ) -> VisualNode:
        node = self.create_node(path, lookup, document)
        node.catalog_kind = CatalogKind.ENTITY
        node.is_group = True
        for child in self.get_children(path, _TO, document):
            node.add_child(child)
        return node


def _definition_id(definition: Any) -> Optional[str]:
    if isinstance(definition, dict) and definition.get("id") is not None:
        return str(definition["id"])
    return None


def create_root_mapper(
    context: Optional[EditorContext] = None,
    include_plugins: bool = False,
) -> RootNodeMapper:
    """Dispatch table with the built-in mappers registered.

    Args:
        context: Catalog collaborators (defaults to the built-in catalog).
        include_plugins: Also register mappers from the
            ``flowpath.mappers`` entry point group.

    Returns:
        A ready RootNodeMapper.
    """
    root_mapper = RootNodeMapper(context)
    root_mapper.register_default_mapper(BaseNodeMapper(root_mapper))
    root_mapper.register_mapper("choice", ChoiceNodeMapper(root_mapper))
    root_mapper.register_mapper("from", FromNodeMapper(root_mapper))
    root_mapper.register_mapper("route", RouteNodeMapper(root_mapper))

    entity_mapper = EntityRootNodeMapper(root_mapper)
    for kind in ENTITY_ROOT_KINDS:
        root_mapper.register_mapper(kind, entity_mapper)

    verb_mapper = RestVerbNodeMapper(root_mapper)
    for verb in REST_VERBS:
        root_mapper.register_mapper(verb, verb_mapper)

    if include_plugins:
        from flowpath.plugin.discovery import register_plugin_mappers
        register_plugin_mappers(root_mapper)

    return root_mapper
