"""Structural edits on a flow document, addressed by path.

The engine never raises for a stale address: an operation whose path
does not resolve (or resolves to the wrong shape) is a no-op and reports
False. Arrays stay contiguous after every edit.

Example:
    >>> document = {"route": {"from": {"uri": "timer:tick", "steps": [{"log": {}}]}}}
    >>> engine = MutationEngine(document)
    >>> engine.insert_adjacent("route.from.steps.0.log", {"to": "mock:out"},
    ...                        AdjacentInsertMode.APPEND)
    True
    >>> [next(iter(step)) for step in document["route"]["from"]["steps"]]
    ['log', 'to']
"""

import logging
from enum import Enum
from typing import Any, Optional, Tuple

from flowpath.core.context import EditorContext
from flowpath.core.descriptors import StepPropertyType
from flowpath.core.path import (
    FlowPath,
    IndexSegment,
    NameSegment,
    PathLike,
    TailShape,
    classify_tail,
    ensure_path,
    exists,
    get_array,
    resolve,
    set_value,
)
from flowpath.core.lookup import processor_name_from_path
from flowpath.observability import MutationRecord, TraceLevel

logger = logging.getLogger(__name__)


class ChildInsertMode(Enum):
    """Where a child is placed inside an array or branch property."""

    FIRST = "first"
    APPEND = "append"


class AdjacentInsertMode(Enum):
    """How a value is placed relative to an existing array element."""

    PREPEND = "prepend"
    APPEND = "append"
    REPLACE = "replace"


class MutationEngine:
    """Path-addressed editor for one flow document.

    The engine edits ``document`` in place. Processor kinds are derived
    from paths (``route.from.steps.0.choice`` is a ``choice``), and the
    context's descriptor registry tells which properties hold children.

    Args:
        document: Root of the flow document, edited in place.
        context: Catalog and tracing collaborators (defaults to the
            built-in catalog).
        root_kind: Processor kind of the document root itself, if the
            root is a processor rather than a wrapper.
    """

    def __init__(
        self,
        document: Any,
        context: Optional[EditorContext] = None,
        root_kind: Optional[str] = None,
    ):
        self._document = document
        self._context = context or EditorContext.default()
        self._root_kind = root_kind

    @property
    def document(self) -> Any:
        return self._document

    @property
    def context(self) -> EditorContext:
        return self._context

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, path: PathLike, default: Any = None) -> Any:
        """Value at ``path``, or ``default`` when it does not resolve."""
        return resolve(self._document, path, default)

    def processor_name(self, path: PathLike) -> Optional[str]:
        """Processor kind addressed by ``path``."""
        return processor_name_from_path(path, self._root_kind)

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def update(self, path: PathLike, value: Any) -> bool:
        """Write ``value`` at ``path``, creating missing containers.

        Returns:
            True if the value was written.
        """
        path = ensure_path(path)
        applied = set_value(self._document, path, value)
        return self._record("update", path, applied)

    def insert_child(
        self,
        path: PathLike,
        value: Any,
        descriptor_name: Optional[str] = None,
        mode: ChildInsertMode = ChildInsertMode.FIRST,
    ) -> bool:
        """Insert ``value`` as a child of the processor at ``path``.

        Args:
            path: Path of the parent processor.
            value: Child definition to insert.
            descriptor_name: Steps property receiving the child. When
                omitted, the kind's ``branch`` property is used.
            mode: Front or back of an array/branch property. Ignored for
                single-clause properties, which are replaced.

        Returns:
            True if the document was edited.
        """
        path = ensure_path(path)
        processor_name = self.processor_name(path)
        registry = self._context.descriptors

        if descriptor_name is None:
            descriptor = registry.branch_property(processor_name)
        else:
            descriptor = registry.find_property(processor_name, descriptor_name)

        if descriptor is None or not isinstance(self.get(path), dict):
            return self._record(
                "insert_child", path, False,
                f"no steps property {descriptor_name or 'branch'!r} on {processor_name!r}",
            )

        target = path.child(descriptor.name)
        if descriptor.type is StepPropertyType.SINGLE_CLAUSE:
            applied = set_value(self._document, target, value)
            return self._record("insert_child", target, applied, "set")

        array = get_array(self._document, target)
        if array is None:
            return self._record("insert_child", target, False, "not an array")

        if mode is ChildInsertMode.APPEND:
            array.append(value)
        else:
            array.insert(0, value)
        return self._record("insert_child", target, True, mode.value)

    def insert_adjacent(
        self,
        path: PathLike,
        value: Any,
        mode: AdjacentInsertMode = AdjacentInsertMode.APPEND,
    ) -> bool:
        """Insert ``value`` before, after or in place of an array element.

        ``path`` may address the element itself (``steps.1``) or the
        processor inside a step wrapper (``steps.1.log``).

        Returns:
            True if the document was edited.
        """
        path = ensure_path(path)
        slot = self._array_slot(path)
        if slot is None:
            return self._record("insert_adjacent", path, False, "not an array element")

        array, index = slot
        if mode is AdjacentInsertMode.REPLACE:
            array[index] = value
        elif mode is AdjacentInsertMode.APPEND:
            array.insert(index + 1, value)
        else:
            array.insert(index, value)
        return self._record("insert_adjacent", path, True, mode.value)

    def remove(self, path: PathLike) -> bool:
        """Remove the node at ``path``.

        An array element is spliced out. A processor inside a step
        wrapper (``steps.1.log``) removes the whole wrapper. A property
        of a clause (``when.0.steps``) or of a plain object is deleted
        from its owner.

        Returns:
            True if the document was edited.
        """
        path = ensure_path(path)
        shape = classify_tail(path)

        if shape is TailShape.ARRAY_ELEMENT or shape is TailShape.INDEXED_PROPERTY:
            slot = self._array_slot(path)
            if slot is not None:
                array, index = slot
                element = array[index]
                if shape is TailShape.ARRAY_ELEMENT or self._holds_steps(path.up(2), element):
                    del array[index]
                else:
                    del element[path.last.name]
                return self._record("remove", path, True)

        elif shape is TailShape.OBJECT_PROPERTY:
            owner = self.get(path.parent)
            if isinstance(owner, dict) and path.last.name in owner:
                del owner[path.last.name]
                return self._record("remove", path, True)

        return self._record("remove", path, False, "path does not resolve")

    def move(
        self,
        from_path: PathLike,
        to_path: PathLike,
        mode: AdjacentInsertMode = AdjacentInsertMode.PREPEND,
    ) -> bool:
        """Move the step at ``from_path`` next to the step at ``to_path``.

        Both endpoints must address array elements (or processors inside
        step wrappers). They are validated before anything is touched: a
        move into its own subtree, or onto a stale address, is a no-op.
        If the insert fails after the removal, the step is put back.

        Args:
            from_path: Step to move.
            to_path: Step the moved one is placed relative to.
            mode: Before, after, or in place of the target.

        Returns:
            True if the document was edited.
        """
        from_path = ensure_path(from_path)
        to_path = ensure_path(to_path)
        detail = f"to {to_path} ({mode.value})"

        source = self._array_slot(from_path)
        target = self._array_slot(to_path)
        if source is None or target is None:
            return self._record("move", from_path, False, f"{detail}: path does not resolve")

        source_array, source_index = source
        target_array, target_index = target
        if to_path.startswith(_element_path(from_path)):
            return self._record("move", from_path, False, f"{detail}: target inside moved step")
        if source_array is target_array and source_index == target_index:
            return self._record("move", from_path, False, f"{detail}: same position")

        value = source_array.pop(source_index)
        if source_array is target_array and source_index < target_index:
            target_index -= 1

        try:
            if mode is AdjacentInsertMode.REPLACE:
                target_array[target_index] = value
            elif mode is AdjacentInsertMode.APPEND:
                target_array.insert(target_index + 1, value)
            else:
                target_array.insert(target_index, value)
        except Exception:
            source_array.insert(source_index, value)
            logger.debug("move %s %s failed, step restored", from_path, detail)
            raise

        return self._record("move", from_path, True, detail)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _array_slot(self, path: FlowPath) -> Optional[Tuple[list, int]]:
        """Owning array and index of the element a path addresses.

        Returns None unless the path ends in ``(name, index)`` or
        ``(index, name)`` with an existing element at that index; for the
        latter the element must also hold the trailing property.
        """
        shape = classify_tail(path)
        if shape is TailShape.ARRAY_ELEMENT:
            owner_path, index = path.parent, path.last.index
        elif shape is TailShape.INDEXED_PROPERTY:
            owner_path, index = path.up(2), path.penultimate.index
        else:
            return None

        array = self.get(owner_path)
        if not isinstance(array, list) or index >= len(array):
            return None
        if shape is TailShape.INDEXED_PROPERTY and not exists(array[index], path[-1:]):
            return None
        return array, index

    def _holds_steps(self, array_path: FlowPath, element: Any) -> bool:
        """Whether the list at ``array_path`` holds step wrappers.

        The owner's descriptor decides (``steps`` is a branch, ``when`` is
        not). Lists the catalog does not describe fall back to the
        element's shape.
        """
        if isinstance(array_path.last, NameSegment):
            owner_kind = self.processor_name(array_path.parent)
            descriptor = self._context.descriptors.find_property(owner_kind, array_path.last.name)
            if descriptor is not None:
                return descriptor.type is StepPropertyType.BRANCH
        return _is_step_wrapper(element)

    def _record(self, operation: str, path: FlowPath, applied: bool, detail: str = "") -> bool:
        logger.debug(
            "%s %s %s%s",
            operation, path, "applied" if applied else "skipped",
            f" ({detail})" if detail else "",
        )
        self._context.emit(MutationRecord(
            operation=operation,
            path=str(path),
            applied=applied,
            detail=detail,
            min_level=TraceLevel.MINIMAL if applied else TraceLevel.VERBOSE,
        ))
        return applied


def _is_step_wrapper(element: Any) -> bool:
    return isinstance(element, dict) and len(element) == 1


def _element_path(path: FlowPath) -> FlowPath:
    """Path of the array element a step path lives in."""
    if isinstance(path.last, IndexSegment):
        return path
    return path.parent
