"""Trace output sinks for observability.

Sinks receive trace records and handle their output to various destinations:
- FileSink: JSONL file output
- ConsoleSink: Formatted console output
- MemorySink: In-memory buffer for testing/analysis
"""

import sys
import threading
from collections import deque
from pathlib import Path
from typing import Deque, List, Optional, TextIO, Callable

from flowpath.observability import Sink
from flowpath.observability.records import (
    TraceRecord,
    MutationRecord,
    GraphBuildRecord,
)


class FileSink(Sink):
    """Sink that writes trace records to a JSONL file.

    Args:
        path: Path to the output file.
        buffer_size: Number of records to buffer before flushing (default: 100).
        append: Whether to append to existing file (default: False).

    Example:
        >>> sink = FileSink("/tmp/trace.jsonl")
        >>> hub.add_sink(sink)
        >>> # ... editing ...
        >>> sink.close()  # Ensure final flush
    """

    def __init__(
        self,
        path: str,
        buffer_size: int = 100,
        append: bool = False,
    ):
        self._path = Path(path)
        self._buffer_size = buffer_size
        self._append = append

        self._buffer: List[str] = []
        self._file: Optional[TextIO] = None
        self._lock = threading.Lock()

        self._open_file()

    def _open_file(self) -> None:
        """Open the output file."""
        mode = "a" if self._append else "w"
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self._path, mode, encoding="utf-8")

    def write(self, record: TraceRecord) -> None:
        """Write a trace record to the file."""
        line = record.to_json()

        with self._lock:
            self._buffer.append(line)
            if len(self._buffer) >= self._buffer_size:
                self._flush_buffer()

    def _flush_buffer(self) -> None:
        """Flush the buffer to disk. Must be called with lock held."""
        if not self._buffer or self._file is None:
            return

        for line in self._buffer:
            self._file.write(line + "\n")
        self._file.flush()
        self._buffer.clear()

    def flush(self) -> None:
        """Flush any buffered records to disk."""
        with self._lock:
            self._flush_buffer()

    def close(self) -> None:
        """Close the file."""
        with self._lock:
            self._flush_buffer()
            if self._file is not None:
                self._file.close()
                self._file = None


class ConsoleSink(Sink):
    """Sink that writes formatted trace records to console.

    Args:
        stream: Output stream (default: sys.stderr).
        color: Enable ANSI color codes (default: True).
        format_fn: Optional custom format function for records.

    Example:
        >>> sink = ConsoleSink()
        >>> hub.add_sink(sink)
    """

    # ANSI color codes
    COLORS = {
        "reset": "\033[0m",
        "red": "\033[91m",
        "green": "\033[92m",
        "yellow": "\033[93m",
        "cyan": "\033[96m",
        "gray": "\033[90m",
    }

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        color: bool = True,
        format_fn: Optional[Callable[[TraceRecord], Optional[str]]] = None,
    ):
        self._stream = stream or sys.stderr
        self._color = color and self._stream.isatty()
        self._format_fn = format_fn
        self._lock = threading.Lock()

    def _colorize(self, text: str, color: str) -> str:
        """Apply color to text if enabled."""
        if not self._color:
            return text
        return f"{self.COLORS.get(color, '')}{text}{self.COLORS['reset']}"

    def write(self, record: TraceRecord) -> None:
        """Write a formatted trace record to console."""
        if self._format_fn:
            line = self._format_fn(record)
        else:
            line = self._format_record(record)

        if line:
            with self._lock:
                self._stream.write(line + "\n")
                self._stream.flush()

    def _format_record(self, record: TraceRecord) -> Optional[str]:
        """Format a record for console output, or None to skip it."""
        if isinstance(record, MutationRecord):
            return self._format_mutation(record)
        elif isinstance(record, GraphBuildRecord):
            return self._format_graph_build(record)
        else:
            return None

    def _format_mutation(self, record: MutationRecord) -> str:
        tag = self._colorize("[EDIT]", "green" if record.applied else "gray")
        path = self._colorize(record.path, "cyan")
        status = "" if record.applied else self._colorize(" (no-op)", "yellow")
        detail = f" {record.detail}" if record.detail else ""
        return f"{tag} {record.operation} {path}{detail}{status}"

    def _format_graph_build(self, record: GraphBuildRecord) -> str:
        tag = self._colorize("[GRAPH]", "yellow")
        path = self._colorize(record.root_path or "<root>", "cyan")
        return (
            f"{tag} {path}: {record.node_count} nodes, "
            f"{record.group_count} groups in {record.duration_ms:.1f}ms"
        )

    def flush(self) -> None:
        """Flush the output stream."""
        with self._lock:
            self._stream.flush()


class MemorySink(Sink):
    """Sink that stores trace records in memory.

    Useful for testing and for in-session analysis.

    Args:
        max_records: Maximum number of records to keep (default: 10000).
    """

    def __init__(self, max_records: int = 10000):
        self._max_records = max_records
        self._records: Deque[TraceRecord] = deque(maxlen=max_records)
        self._lock = threading.Lock()

    def write(self, record: TraceRecord) -> None:
        """Store a trace record in memory."""
        with self._lock:
            self._records.append(record)

    def get_records(self, record_type: Optional[str] = None) -> List[TraceRecord]:
        """Get stored records, optionally filtered by record type."""
        with self._lock:
            records = list(self._records)

        if record_type:
            records = [r for r in records if r.record_type == record_type]

        return records

    def get_by_path(self, path: str) -> List[MutationRecord]:
        """Get all mutation records touching a given path."""
        return [
            r for r in self.get_records("mutation")
            if isinstance(r, MutationRecord) and r.path == path
        ]

    def clear(self) -> None:
        """Clear all stored records."""
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        """Number of stored records."""
        return len(self._records)


class NullSink(Sink):
    """Sink that discards all records."""

    def write(self, record: TraceRecord) -> None:
        """Discard the record."""
        pass


__all__ = [
    "FileSink",
    "ConsoleSink",
    "MemorySink",
    "NullSink",
]
