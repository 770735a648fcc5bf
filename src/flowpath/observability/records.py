"""Trace record data classes for observability.

Record Categories:
- Base: TraceRecord base class
- Mutation: structural edits applied (or skipped) on a flow document
- Graph: visualization graph rebuilds
"""

from dataclasses import dataclass, field, asdict
from typing import Dict, Any
import time
import json


# Forward reference for TraceLevel
from flowpath.observability import TraceLevel


@dataclass
class TraceRecord:
    """Base class for all trace records.

    All trace records have:
    - record_type: String identifying the record type
    - timestamp_ns: When the record was created (monotonic)
    - min_level: Minimum trace level required to emit this record

    Subclasses should set record_type as a class variable.
    """
    record_type: str = field(default="base", init=False)
    timestamp_ns: int = field(default_factory=lambda: time.perf_counter_ns())
    min_level: TraceLevel = field(default=TraceLevel.NORMAL, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        """Convert record to dictionary.

        Returns:
            Dictionary representation suitable for JSON serialization.
        """
        d = asdict(self)
        # Remove min_level from output (internal use only)
        d.pop("min_level", None)
        return d

    def to_json(self) -> str:
        """Convert record to JSON string."""
        return json.dumps(self.to_dict(), default=str)


@dataclass
class MutationRecord(TraceRecord):
    """A structural edit attempted on a flow document.

    Applied edits are emitted from MINIMAL upwards, no-ops (stale or
    unresolvable paths) only at VERBOSE.
    """
    record_type: str = field(default="mutation", init=False)
    min_level: TraceLevel = field(default=TraceLevel.MINIMAL, repr=False)

    operation: str = ""  # e.g., "insert_child", "remove", "move"
    path: str = ""
    applied: bool = True
    detail: str = ""


@dataclass
class GraphBuildRecord(TraceRecord):
    """Summary of one visualization graph rebuild."""
    record_type: str = field(default="graph_build", init=False)
    min_level: TraceLevel = field(default=TraceLevel.NORMAL, repr=False)

    root_path: str = ""
    node_count: int = 0
    group_count: int = 0
    duration_ms: float = 0.0
