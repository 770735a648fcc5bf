"""Observability system for flowpath.

Provides tracing infrastructure to follow what the editor core does to
a flow document:
- Structural edits (insert, remove, move, update) and whether they applied
- Visualization graph rebuilds and their size/timing

Trace Levels:
- OFF: No tracing (default)
- MINIMAL: Applied edits only
- NORMAL: Applied edits + graph rebuild summaries
- VERBOSE: Everything, including no-op edits on stale paths

Example:
    >>> from flowpath.observability import ObservabilityHub, TraceLevel, MemorySink
    >>> hub = ObservabilityHub.get_instance()
    >>> hub.configure(level=TraceLevel.NORMAL)
    >>> sink = MemorySink()
    >>> hub.add_sink(sink)
    >>>
    >>> # In engine code:
    >>> if hub.enabled:
    ...     hub.emit(MutationRecord(operation="remove", path="route.from.steps.0"))
"""

import logging
from enum import IntEnum
from typing import Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)


class TraceLevel(IntEnum):
    """Observability trace levels.

    Higher levels include all lower level information.
    """
    OFF = 0       # No tracing
    MINIMAL = 1   # Applied edits only
    NORMAL = 2    # Plus graph summaries
    VERBOSE = 3   # Full details


class Sink:
    """Base class for trace sinks.

    Sinks receive trace records and handle their output
    (file, console, memory buffer, etc.).
    """

    def write(self, record: "TraceRecord") -> None:
        """Write a trace record.

        Args:
            record: The trace record to write.
        """
        raise NotImplementedError

    def flush(self) -> None:
        """Flush any buffered records."""
        pass

    def close(self) -> None:
        """Close the sink and release resources."""
        pass


class ObservabilityHub:
    """Where edit and graph records are routed to sinks.

    ``get_instance()`` returns the process-wide hub that contexts use by
    default; tests and embedders may build private hubs instead. Editing
    is single-threaded, so the hub keeps no locks.

    A failing sink never interrupts an edit: the error is logged and the
    record is still offered to the remaining sinks.
    """

    _instance: Optional["ObservabilityHub"] = None

    def __init__(self):
        self._level = TraceLevel.OFF
        self._sinks: List[Sink] = []

    @classmethod
    def get_instance(cls) -> "ObservabilityHub":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Shut down and forget the shared hub. For testing only."""
        if cls._instance is not None:
            cls._instance.shutdown()
        cls._instance = None

    def configure(
        self,
        level: TraceLevel = TraceLevel.OFF,
        sinks: Optional[Iterable[Sink]] = None,
        replace: bool = False,
    ) -> None:
        """Set the trace level and attach sinks.

        Args:
            level: Most detailed level that is still recorded.
            sinks: Sinks to attach.
            replace: Close the sinks already attached before adding
                ``sinks``.
        """
        if replace:
            self._close_sinks()
        self._level = level
        for sink in sinks or ():
            self.add_sink(sink)

    def add_sink(self, sink: Sink) -> None:
        self._sinks.append(sink)

    def remove_sink(self, sink: Sink) -> None:
        if sink in self._sinks:
            self._sinks.remove(sink)

    @property
    def sinks(self) -> Tuple[Sink, ...]:
        return tuple(self._sinks)

    def accepts(self, record: "TraceRecord") -> bool:
        """Whether ``record`` is detailed enough to be kept at this level."""
        return self.enabled and record.min_level <= self._level

    def emit(self, record: "TraceRecord") -> bool:
        """Hand ``record`` to every sink.

        Returns:
            True if the record passed the level filter.
        """
        if not self.accepts(record):
            return False
        for sink in list(self._sinks):
            try:
                sink.write(record)
            except Exception:
                logger.warning(
                    "%s failed to write %s record", type(sink).__name__,
                    record.record_type, exc_info=True,
                )
        return True

    def flush(self) -> None:
        for sink in self._sinks:
            try:
                sink.flush()
            except Exception:
                logger.warning("%s failed to flush", type(sink).__name__, exc_info=True)

    def shutdown(self) -> None:
        """Close every sink and turn tracing off."""
        self._close_sinks()
        self._level = TraceLevel.OFF

    def _close_sinks(self) -> None:
        sinks, self._sinks = self._sinks, []
        for sink in sinks:
            try:
                sink.flush()
                sink.close()
            except Exception:
                logger.warning("%s failed to close", type(sink).__name__, exc_info=True)

    @property
    def enabled(self) -> bool:
        return self._level > TraceLevel.OFF

    @property
    def level(self) -> TraceLevel:
        return self._level

    def is_level_enabled(self, level: TraceLevel) -> bool:
        return self._level >= level


# Import TraceRecord and sinks after defining TraceLevel
from flowpath.observability.records import TraceRecord, MutationRecord, GraphBuildRecord
from flowpath.observability.sinks import FileSink, ConsoleSink, MemorySink, NullSink

__all__ = [
    # Core
    "TraceLevel",
    "Sink",
    "ObservabilityHub",
    # Records
    "TraceRecord",
    "MutationRecord",
    "GraphBuildRecord",
    # Sinks
    "FileSink",
    "ConsoleSink",
    "MemorySink",
    "NullSink",
]
