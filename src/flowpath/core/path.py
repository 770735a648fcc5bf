"""Path algebra for addressing nodes inside a flow document.

A flow document is a tree of plain containers (dicts, lists and scalars).
Every node in it is addressed by a FlowPath: an immutable sequence of
segments, each either a name (dict key) or an index (list position).
Paths are parsed from and rendered to their dot-joined text form only at
the boundary, e.g. ``route.from.steps.1.choice.when.0``.

Keys containing a literal ``.`` cannot be addressed; there is no escaping.

Example:
    >>> doc = {"route": {"from": {"steps": [{"log": {"message": "hi"}}]}}}
    >>> path = FlowPath.parse("route.from.steps.0.log")
    >>> resolve(doc, path)
    {'message': 'hi'}
    >>> classify_tail(path)
    <TailShape.INDEXED_PROPERTY: 'indexed-property'>
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, List, Optional, Sequence, Tuple, Union

PATH_SEPARATOR = "."

_MISSING = object()


class InvalidPathError(ValueError):
    """Raised when a path cannot be built from the given tokens."""

    pass


@dataclass(frozen=True)
class NameSegment:
    """Segment addressing a key of an object."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class IndexSegment:
    """Segment addressing a position in an array."""

    index: int

    def __str__(self) -> str:
        return str(self.index)


Segment = Union[NameSegment, IndexSegment]
Token = Union[str, int, NameSegment, IndexSegment]


class TailShape(Enum):
    """Shape of the last two segments of a path.

    The shape decides how structural edits treat the addressed node:

    - ARRAY_ELEMENT: ``...when.0``, an element of a named array.
    - INDEXED_PROPERTY: ``...steps.0.log``, the single property of an
      indexed step wrapper.
    - OBJECT_PROPERTY: ``...choice.otherwise``, a plain object property.
    """

    ARRAY_ELEMENT = "array-element"
    INDEXED_PROPERTY = "indexed-property"
    OBJECT_PROPERTY = "object-property"


def _segment_from_token(token: Token) -> Segment:
    if isinstance(token, (NameSegment, IndexSegment)):
        return token
    if isinstance(token, bool):
        raise InvalidPathError(f"Invalid path token: {token!r}")
    if isinstance(token, int):
        if token < 0:
            raise InvalidPathError(f"Negative index in path: {token}")
        return IndexSegment(token)
    if isinstance(token, str):
        if token == "":
            raise InvalidPathError("Empty segment in path")
        if token.isascii() and token.isdigit():
            return IndexSegment(int(token))
        return NameSegment(token)
    raise InvalidPathError(
        f"Path tokens must be str or int, got {type(token).__name__}"
    )


def segments_of(text: str) -> List[Segment]:
    """Split a textual path into ordered segments.

    A token made only of digits becomes an index segment, any other token
    a name segment. The empty string denotes the document root.

    Args:
        text: Dot-joined path, e.g. ``"route.from.steps.0"``.

    Returns:
        List of segments in document order.

    Raises:
        InvalidPathError: If the text contains an empty token (``"a..b"``).
    """
    if text == "":
        return []
    return [_segment_from_token(token) for token in text.split(PATH_SEPARATOR)]


@dataclass(frozen=True)
class FlowPath:
    """Immutable address of a node in a flow document.

    Attributes:
        segments: Ordered name/index segments from the document root.
    """

    segments: Tuple[Segment, ...] = ()

    @classmethod
    def parse(cls, text: str) -> "FlowPath":
        """Build a path from its dot-joined text form."""
        return cls(tuple(segments_of(text)))

    @classmethod
    def of(cls, *tokens: Token) -> "FlowPath":
        """Build a path from individual tokens.

        Example:
            >>> str(FlowPath.of("route", "from", "steps", 0))
            'route.from.steps.0'
        """
        return cls(tuple(_segment_from_token(token) for token in tokens))

    def __str__(self) -> str:
        return PATH_SEPARATOR.join(str(segment) for segment in self.segments)

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self) -> Iterator[Segment]:
        return iter(self.segments)

    def __getitem__(self, item):
        if isinstance(item, slice):
            return FlowPath(self.segments[item])
        return self.segments[item]

    @property
    def is_root(self) -> bool:
        """True for the empty path, which addresses the document itself."""
        return not self.segments

    @property
    def last(self) -> Optional[Segment]:
        """Last segment, or None for the root path."""
        return self.segments[-1] if self.segments else None

    @property
    def penultimate(self) -> Optional[Segment]:
        """Second to last segment, or None for paths shorter than two."""
        return self.segments[-2] if len(self.segments) > 1 else None

    @property
    def parent(self) -> "FlowPath":
        """Path one level up (the root is its own parent)."""
        return self.up(1)

    def up(self, levels: int) -> "FlowPath":
        """Path ``levels`` segments up, clamped at the root."""
        if levels <= 0:
            return self
        return FlowPath(self.segments[:-levels])

    def child(self, *tokens: Token) -> "FlowPath":
        """Path extended by the given tokens."""
        return FlowPath(
            self.segments + tuple(_segment_from_token(token) for token in tokens)
        )

    def startswith(self, other: "FlowPath") -> bool:
        """True if ``other`` is this path or one of its ancestors."""
        return self.segments[: len(other.segments)] == other.segments

    def to_tokens(self) -> List[Union[str, int]]:
        """Segments as plain str/int tokens."""
        return [
            segment.index if isinstance(segment, IndexSegment) else segment.name
            for segment in self.segments
        ]


ROOT_PATH = FlowPath()

PathLike = Union[str, FlowPath, Sequence[Union[str, int]]]


def ensure_path(value: PathLike) -> FlowPath:
    """Coerce a string, token sequence or FlowPath into a FlowPath."""
    if isinstance(value, FlowPath):
        return value
    if isinstance(value, str):
        return FlowPath.parse(value)
    return FlowPath.of(*value)


def _get_child(container: Any, segment: Segment, default: Any) -> Any:
    if isinstance(segment, IndexSegment):
        if isinstance(container, list) and segment.index < len(container):
            return container[segment.index]
        return default
    if isinstance(container, dict) and segment.name in container:
        return container[segment.name]
    return default


def resolve(document: Any, path: PathLike, default: Any = None) -> Any:
    """Resolve a path against a document.

    Name segments access object keys, index segments access array
    elements. Resolution stops and returns ``default`` as soon as a step
    does not apply; it never raises for a stale path and never mutates.

    Args:
        document: Root of the flow document.
        path: Path to resolve.
        default: Value returned when the path does not resolve.

    Returns:
        The addressed value, or ``default``.
    """
    current = document
    for segment in ensure_path(path):
        current = _get_child(current, segment, _MISSING)
        if current is _MISSING:
            return default
    return current


def exists(document: Any, path: PathLike) -> bool:
    """True if the path resolves (even to a None value)."""
    return resolve(document, path, _MISSING) is not _MISSING


def classify_tail(path: PathLike) -> Optional[TailShape]:
    """Classify the last two segments of a path.

    Returns:
        ARRAY_ELEMENT when the last segment is an index, INDEXED_PROPERTY
        when a name follows an index, OBJECT_PROPERTY otherwise. None for
        the root path.
    """
    path = ensure_path(path)
    if path.is_root:
        return None
    if isinstance(path.last, IndexSegment):
        return TailShape.ARRAY_ELEMENT
    if isinstance(path.penultimate, IndexSegment):
        return TailShape.INDEXED_PROPERTY
    return TailShape.OBJECT_PROPERTY


def _assign(container: Any, segment: Segment, value: Any) -> bool:
    if isinstance(segment, IndexSegment):
        if not isinstance(container, list):
            return False
        if segment.index < len(container):
            container[segment.index] = value
            return True
        if segment.index == len(container):
            container.append(value)
            return True
        # Writing past the end would leave holes in the array
        return False
    if isinstance(container, dict):
        container[segment.name] = value
        return True
    return False


def set_value(document: Any, path: PathLike, value: Any) -> bool:
    """Write a value at a path, creating missing intermediate containers.

    A missing intermediate becomes a list when the following segment is
    an index, a dict otherwise. Writing at ``len(array)`` appends.

    Args:
        document: Root of the flow document.
        path: Destination path (must not be the root).
        value: Value to store.

    Returns:
        True if the value was written, False if an existing intermediate
        value cannot hold the next segment.
    """
    path = ensure_path(path)
    if path.is_root:
        return False

    current = document
    for segment, next_segment in zip(path.segments[:-1], path.segments[1:]):
        child = _get_child(current, segment, None)
        if child is None:
            child = [] if isinstance(next_segment, IndexSegment) else {}
            if not _assign(current, segment, child):
                return False
        elif not isinstance(child, (dict, list)):
            return False
        current = child

    return _assign(current, path.last, value)


def get_array(document: Any, path: PathLike) -> Optional[list]:
    """Return the array stored at a path, creating an empty one if absent.

    Returns:
        The live list object, or None when the slot holds a non-list value
        or cannot be created.
    """
    existing = resolve(document, path)
    if isinstance(existing, list):
        return existing
    if existing is not None:
        return None

    created: list = []
    if set_value(document, path, created):
        return created
    return None
