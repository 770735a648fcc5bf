"""Abstract base for top-level flow entities.

A flow file holds a list of root documents such as ``{"route": {...}}``
or ``{"errorHandler": {...}}``. Each one is wrapped in a FlowEntity that
exposes path-qualified reads and edits, capability lookups, labels,
expression access and graph building. Paths given to an entity include
its root segment (``route.from.steps.0.log``).
"""

import logging
import uuid
from abc import ABC
from typing import Any, ClassVar, Dict, Optional

from flowpath.core.capabilities import DISABLED_CAPABILITIES, CapabilityRecord, PathRole
from flowpath.core.context import EditorContext
from flowpath.core.expression import ExpressionModel
from flowpath.core.lookup import lookup_from_path, processor_name_from_path
from flowpath.core.mutation import AdjacentInsertMode, ChildInsertMode, MutationEngine
from flowpath.core.path import FlowPath, PathLike, ensure_path, exists
from flowpath.graph.builder import GraphBuilder
from flowpath.graph.mapper import RootNodeMapper
from flowpath.graph.node import VisualNode, node_label

logger = logging.getLogger(__name__)


def random_id(prefix: str) -> str:
    """Generated entity id, e.g. ``route-1a2b``."""
    return f"{prefix}-{uuid.uuid4().hex[:4]}"


class FlowEntity(ABC):
    """One top-level entity of a flow file.

    Subclasses set ROOT_SEGMENT to the key their document is wrapped in.

    Class Attributes:
        ROOT_SEGMENT: Key of the root document (``route``, ``rest``...).
        STORES_ID: Whether the entity keeps its id in its definition.
        EDITABLE: Whether steps can be inserted, removed or moved.

    Args:
        raw: Root document (``{ROOT_SEGMENT: {...}}``), edited in place.
            A new default document is created when omitted.
        context: Catalog and tracing collaborators.
    """

    ROOT_SEGMENT: ClassVar[str] = ""
    STORES_ID: ClassVar[bool] = True
    EDITABLE: ClassVar[bool] = True

    def __init__(self, raw: Optional[Dict[str, Any]] = None, context: Optional[EditorContext] = None):
        if raw is None:
            raw = {self.ROOT_SEGMENT: self.default_definition()}
        self._document = raw
        self._context = context or EditorContext.default()
        self._engine = MutationEngine(self._document, self._context)

        definition = self.definition
        existing_id = definition.get("id") if self.STORES_ID else None
        self._id = str(existing_id) if existing_id is not None else random_id(self.ROOT_SEGMENT)
        if self.STORES_ID:
            definition["id"] = self._id

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self._id!r})"

    @classmethod
    def is_applicable(cls, raw: Any) -> bool:
        """True if ``raw`` is a single-key document wrapping this kind."""
        return (
            isinstance(raw, dict)
            and len(raw) == 1
            and isinstance(raw.get(cls.ROOT_SEGMENT), dict)
        )

    @classmethod
    def default_definition(cls) -> Dict[str, Any]:
        """Definition used for a newly created entity."""
        return {}

    # ------------------------------------------------------------------
    # Identity and raw access
    # ------------------------------------------------------------------

    @property
    def id(self) -> str:
        return self._id

    @id.setter
    def id(self, value: str) -> None:
        self._id = value
        if self.STORES_ID:
            self.definition["id"] = value

    @property
    def root_path(self) -> FlowPath:
        return FlowPath.of(self.ROOT_SEGMENT)

    @property
    def document(self) -> Dict[str, Any]:
        return self._document

    @property
    def definition(self) -> Dict[str, Any]:
        """The entity's own definition."""
        return self._ensure_definition()

    def _ensure_definition(self) -> Dict[str, Any]:
        definition = self._document.get(self.ROOT_SEGMENT)
        if not isinstance(definition, dict):
            definition = {}
            self._document[self.ROOT_SEGMENT] = definition
        return definition

    @property
    def context(self) -> EditorContext:
        return self._context

    def to_dict(self) -> Dict[str, Any]:
        return self._document

    # ------------------------------------------------------------------
    # Reads and edits
    # ------------------------------------------------------------------

    def get(self, path: Optional[PathLike] = None, default: Any = None) -> Any:
        """Value at ``path`` (the whole definition when omitted)."""
        if path is None:
            return self.definition
        return self._engine.get(path, default)

    def update(self, path: PathLike, value: Any) -> bool:
        """Write a property value, as a form editor would."""
        applied = self._engine.update(path, value)
        self._ensure_definition()
        return applied

    def insert_child(
        self,
        path: PathLike,
        value: Any,
        descriptor_name: Optional[str] = None,
        mode: ChildInsertMode = ChildInsertMode.FIRST,
    ) -> bool:
        if not self._check_editable("insert_child", path):
            return False
        return self._engine.insert_child(path, value, descriptor_name, mode)

    def insert_adjacent(
        self,
        path: PathLike,
        value: Any,
        mode: AdjacentInsertMode = AdjacentInsertMode.APPEND,
    ) -> bool:
        if not self._check_editable("insert_adjacent", path):
            return False
        return self._engine.insert_adjacent(path, value, mode)

    def remove(self, path: PathLike) -> bool:
        if not self._check_editable("remove", path):
            return False
        if ensure_path(path) == self.root_path:
            logger.debug("Refusing to remove the root of %r as a step", self)
            return False
        return self._engine.remove(path)

    def move(
        self,
        from_path: PathLike,
        to_path: PathLike,
        mode: AdjacentInsertMode = AdjacentInsertMode.PREPEND,
    ) -> bool:
        if not self._check_editable("move", from_path):
            return False
        return self._engine.move(from_path, to_path, mode)

    def _check_editable(self, operation: str, path: PathLike) -> bool:
        if not self.EDITABLE:
            logger.debug("%s %s ignored: %r has no editable steps", operation, path, self)
        return self.EDITABLE

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    def capabilities_of(self, path: PathLike) -> CapabilityRecord:
        """Structural edits allowed on the node at ``path``.

        The entity root uses the fixed record of its kind when there is
        one; stale paths allow nothing.
        """
        path = ensure_path(path)
        resolver = self._context.capabilities
        if path == self.root_path:
            return resolver.for_entity_root(self.ROOT_SEGMENT)
        if not self.EDITABLE or not exists(self._document, path):
            return DISABLED_CAPABILITIES
        return resolver.resolve(processor_name_from_path(path), PathRole.INTERIOR)

    def get_node_label(self, path: Optional[PathLike] = None) -> str:
        path = self.root_path if path is None else ensure_path(path)
        definition = self.get(path)
        lookup = lookup_from_path(path, definition)
        return node_label(lookup.processor_name, lookup.component_name, definition)

    def parse_expression(self, path: PathLike) -> ExpressionModel:
        """Expression carried by the definition at ``path``."""
        return self._context.expressions.parse(self.get(path))

    def serialize_expression(
        self,
        path: PathLike,
        language_id: Optional[str],
        model: Optional[Dict[str, Any]],
    ) -> bool:
        """Store an expression on the definition at ``path``.

        Returns:
            False if ``path`` does not address an object.
        """
        holder = self.get(path)
        if not isinstance(holder, dict):
            logger.debug("Cannot store expression at %s: not an object", path)
            return False
        self._context.expressions.serialize(holder, language_id, model)
        return True

    def build_graph(self, root_mapper: Optional[RootNodeMapper] = None) -> Optional[VisualNode]:
        """Fresh visualization graph for the whole entity."""
        builder = GraphBuilder(self._document, self._context, root_mapper)
        return builder.build(self.root_path, entity=self)
