"""Visualization nodes produced by the graph builder.

A VisualNode references a region of the flow document by path; it never
owns document data. Graphs are rebuilt wholesale after each edit, so
nodes are not patched in place.
"""

from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional

from flowpath.core.capabilities import DISABLED_CAPABILITIES, CapabilityRecord
from flowpath.core.path import FlowPath, PathLike, ensure_path, resolve
from flowpath.core.lookup import uri_of

if TYPE_CHECKING:
    from flowpath.entities.base import FlowEntity


class CatalogKind(str, Enum):
    """Catalog section a node's definition comes from."""

    COMPONENT = "component"
    PROCESSOR = "processor"
    PATTERN = "pattern"
    ENTITY = "entity"
    KAMELET = "kamelet"
    LANGUAGE = "language"


def node_label(
    processor_name: Optional[str],
    component_name: Optional[str],
    definition: Any = None,
) -> str:
    """Text shown on the canvas for a node.

    A non-empty ``description`` wins, then the component name. Routes and
    exception handlers fall back to their id, endpoints to their URI, and
    anything else to the processor name.
    """
    if isinstance(definition, dict):
        description = definition.get("description")
        if isinstance(description, str) and description:
            return description

    if component_name is not None:
        return component_name

    if processor_name in ("route", "onException"):
        if isinstance(definition, dict) and definition.get("id") is not None:
            return str(definition["id"])
        return ""

    if processor_name == "from":
        return uri_of(processor_name, definition) or "from: Unknown"

    if processor_name in ("to", "toD"):
        return uri_of(processor_name, definition) or processor_name

    return processor_name or ""


class VisualNode:
    """Addressable node of the visualization graph.

    Attributes:
        id: Unique id within one graph (the path, or the entity id for
            entity roots).
        path: Address of the node's definition in the document.
        processor_name: Processor kind.
        component_name: Endpoint component, for URI-carrying processors.
        catalog_kind: Catalog section of the definition.
        title: Display title from the catalog.
        icon: Icon identifier.
        label: Canvas label.
        is_group: True when the node owns child nodes.
        children: Child nodes in document order.
        parent: Owning group node.
        previous: Previous sibling.
        next: Next sibling.
        entity: Entity the graph was built for, set on the root node.
        document: Document the node's path resolves against.
    """

    def __init__(
        self,
        id: str,
        path: PathLike,
        processor_name: Optional[str] = None,
        component_name: Optional[str] = None,
        catalog_kind: CatalogKind = CatalogKind.PROCESSOR,
        title: Optional[str] = None,
        icon: Optional[str] = None,
        label: Optional[str] = None,
        is_group: bool = False,
        entity: Optional["FlowEntity"] = None,
        document: Any = None,
    ):
        self.id = id
        self.path: FlowPath = ensure_path(path)
        self.processor_name = processor_name
        self.component_name = component_name
        self.catalog_kind = catalog_kind
        self.title = title
        self.icon = icon
        self.label = label
        self.is_group = is_group
        self.entity = entity
        self.document = document

        self.children: List["VisualNode"] = []
        self.parent: Optional["VisualNode"] = None
        self.previous: Optional["VisualNode"] = None
        self.next: Optional["VisualNode"] = None

    def __repr__(self) -> str:
        return f"VisualNode(id={self.id!r}, processor={self.processor_name!r}, children={len(self.children)})"

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    def add_child(self, child: "VisualNode") -> None:
        """Append a child and mark this node as a group."""
        child.parent = self
        self.children.append(child)
        self.is_group = True

    def remove_child(self, child: "VisualNode") -> None:
        """Detach a child, keeping its former siblings linked."""
        if child not in self.children:
            return
        self.children.remove(child)
        if child.previous is not None:
            child.previous.next = child.next
        if child.next is not None:
            child.next.previous = child.previous
        child.parent = None
        child.previous = None
        child.next = None

    def get_root_node(self) -> "VisualNode":
        """Topmost node, reached through parents and previous siblings."""
        node = self
        while True:
            if node.parent is not None:
                node = node.parent
            elif node.previous is not None:
                node = node.previous
            else:
                return node

    def get_entity(self) -> Optional["FlowEntity"]:
        """Entity this node belongs to, looked up from the root."""
        if self.entity is not None:
            return self.entity
        return self.get_root_node().entity

    def get_capabilities(self) -> CapabilityRecord:
        """Structural edits allowed on this node.

        Nodes outside any entity allow nothing.
        """
        entity = self.get_entity()
        if entity is None:
            return DISABLED_CAPABILITIES
        return entity.capabilities_of(self.path)

    def get_definition(self) -> Any:
        """Current document value at this node's path."""
        entity = self.get_entity()
        if entity is not None:
            return entity.get(self.path)
        return resolve(self.document, self.path)

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def walk(self) -> Iterator["VisualNode"]:
        """Yield this node and all descendants, pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def find(self, path: PathLike) -> Optional["VisualNode"]:
        """First node (pre-order) addressing ``path``."""
        path = ensure_path(path)
        for node in self.walk():
            if node.path == path:
                return node
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Plain-data view of the subtree, for editors and the CLI."""
        return {
            "id": self.id,
            "path": str(self.path),
            "processorName": self.processor_name,
            "componentName": self.component_name,
            "catalogKind": self.catalog_kind.value,
            "title": self.title,
            "icon": self.icon,
            "label": self.label,
            "isGroup": self.is_group,
            "previous": self.previous.id if self.previous is not None else None,
            "next": self.next.id if self.next is not None else None,
            "children": [child.to_dict() for child in self.children],
        }
