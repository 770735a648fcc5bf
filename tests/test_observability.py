"""Tests for flowpath observability system."""

import io
import json
import logging
import tempfile
from pathlib import Path

import pytest

from flowpath.observability import (
    TraceLevel,
    ObservabilityHub,
    TraceRecord,
    FileSink,
    ConsoleSink,
    MemorySink,
    NullSink,
)
from flowpath.observability.records import GraphBuildRecord, MutationRecord


# =============================================================================
# TraceLevel Tests
# =============================================================================


class TestTraceLevel:
    """Tests for TraceLevel enum."""

    def test_level_ordering(self):
        """Test trace levels are ordered correctly."""
        assert TraceLevel.OFF < TraceLevel.MINIMAL
        assert TraceLevel.MINIMAL < TraceLevel.NORMAL
        assert TraceLevel.NORMAL < TraceLevel.VERBOSE


# =============================================================================
# Record Tests
# =============================================================================


class TestTraceRecords:
    """Tests for trace record classes."""

    def test_base_record_creation(self):
        record = TraceRecord()
        assert record.record_type == "base"
        assert record.timestamp_ns > 0

    def test_to_dict_hides_min_level(self):
        """Test min_level is internal and not serialized."""
        data = MutationRecord(operation="remove", path="route.from.steps.0").to_dict()
        assert data["record_type"] == "mutation"
        assert data["operation"] == "remove"
        assert "min_level" not in data

    def test_mutation_record_defaults(self):
        record = MutationRecord(operation="move", path="a.0")
        assert record.applied
        assert record.min_level == TraceLevel.MINIMAL

    def test_graph_build_record(self):
        record = GraphBuildRecord(root_path="route", node_count=3, group_count=1, duration_ms=0.5)
        data = json.loads(record.to_json())
        assert data["record_type"] == "graph_build"
        assert data["node_count"] == 3
        assert record.min_level == TraceLevel.NORMAL


# =============================================================================
# ObservabilityHub Tests
# =============================================================================


class TestObservabilityHub:
    """Tests for ObservabilityHub singleton."""

    def setup_method(self):
        """Reset hub before each test."""
        ObservabilityHub.reset_instance()

    def teardown_method(self):
        """Reset hub after each test."""
        ObservabilityHub.reset_instance()

    def test_singleton(self):
        assert ObservabilityHub.get_instance() is ObservabilityHub.get_instance()

    def test_default_disabled(self):
        hub = ObservabilityHub.get_instance()
        assert not hub.enabled
        assert hub.level == TraceLevel.OFF

    def test_configure(self):
        hub = ObservabilityHub.get_instance()
        hub.configure(level=TraceLevel.NORMAL)
        assert hub.enabled
        assert hub.is_level_enabled(TraceLevel.MINIMAL)
        assert not hub.is_level_enabled(TraceLevel.VERBOSE)

    def test_add_remove_sink(self):
        hub = ObservabilityHub.get_instance()
        sink = MemorySink()

        hub.add_sink(sink)
        assert sink in hub.sinks

        hub.remove_sink(sink)
        assert sink not in hub.sinks

    def test_emit_when_disabled(self):
        hub = ObservabilityHub.get_instance()
        sink = MemorySink()
        hub.add_sink(sink)

        hub.emit(MutationRecord())

        assert len(sink) == 0

    def test_emit_respects_min_level(self):
        """Test no-op edits are filtered out below VERBOSE."""
        hub = ObservabilityHub.get_instance()
        hub.configure(level=TraceLevel.NORMAL)
        sink = MemorySink()
        hub.add_sink(sink)

        hub.emit(MutationRecord(applied=False, min_level=TraceLevel.VERBOSE))
        hub.emit(MutationRecord(applied=True))
        hub.emit(GraphBuildRecord())

        assert len(sink) == 2

    def test_failing_sink_does_not_propagate(self, caplog):
        """Test a broken sink is logged and the other sinks still receive records."""
        class BrokenSink(MemorySink):
            def write(self, record):
                raise IOError("disk full")

        hub = ObservabilityHub.get_instance()
        healthy = MemorySink()
        hub.configure(level=TraceLevel.VERBOSE, sinks=[BrokenSink(), healthy])

        with caplog.at_level(logging.WARNING, logger="flowpath.observability"):
            assert hub.emit(MutationRecord())

        assert len(healthy) == 1
        assert "BrokenSink failed to write mutation record" in caplog.text

    def test_emit_reports_filtering(self):
        hub = ObservabilityHub()
        hub.configure(level=TraceLevel.MINIMAL)

        assert hub.accepts(MutationRecord())
        assert not hub.accepts(GraphBuildRecord())
        assert not hub.emit(GraphBuildRecord())

    def test_configure_replace_closes_old_sinks(self, tmp_path):
        """Test reconfiguring with replace flushes and drops earlier sinks."""
        hub = ObservabilityHub()
        trace = tmp_path / "trace.jsonl"
        old = FileSink(str(trace), buffer_size=10)
        hub.configure(level=TraceLevel.MINIMAL, sinks=[old])
        hub.emit(MutationRecord(operation="update", path="a"))

        new = MemorySink()
        hub.configure(level=TraceLevel.NORMAL, sinks=[new], replace=True)

        assert hub.sinks == (new,)
        assert trace.read_text().count("\n") == 1

    def test_shutdown(self):
        hub = ObservabilityHub()
        hub.configure(level=TraceLevel.VERBOSE, sinks=[MemorySink()])
        hub.shutdown()

        assert hub.sinks == ()
        assert not hub.enabled

    def test_separate_instances_are_isolated(self):
        """Test a private hub does not affect the shared one."""
        private = ObservabilityHub()
        private.configure(level=TraceLevel.VERBOSE)
        assert not ObservabilityHub.get_instance().enabled


# =============================================================================
# Sink Tests
# =============================================================================


class TestFileSink:
    """Tests for FileSink."""

    def test_buffered_writes(self):
        """Test records are buffered before writing."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "trace.jsonl"
            sink = FileSink(str(path), buffer_size=5)

            for i in range(3):
                sink.write(MutationRecord(operation="update", path=f"a.{i}"))

            assert path.read_text() == ""

            sink.flush()
            assert path.read_text().count("\n") == 3

            sink.close()

    def test_jsonl_format(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "trace.jsonl"
            sink = FileSink(str(path), buffer_size=1)

            sink.write(MutationRecord(operation="remove", path="route.from.steps.0"))
            sink.write(GraphBuildRecord(root_path="route"))
            sink.close()

            lines = path.read_text().strip().split("\n")
            assert [json.loads(line)["record_type"] for line in lines] == ["mutation", "graph_build"]


class TestMemorySink:
    """Tests for MemorySink."""

    def test_max_records_limit(self):
        sink = MemorySink(max_records=3)
        for i in range(5):
            sink.write(TraceRecord())
        assert len(sink) == 3

    def test_get_records_by_type(self):
        sink = MemorySink()
        sink.write(MutationRecord())
        sink.write(GraphBuildRecord())
        assert len(sink.get_records("graph_build")) == 1
        assert len(sink.get_records()) == 2

    def test_get_by_path(self):
        sink = MemorySink()
        sink.write(MutationRecord(path="a.0"))
        sink.write(MutationRecord(path="a.1"))
        sink.write(MutationRecord(path="a.0", applied=False))
        assert len(sink.get_by_path("a.0")) == 2

    def test_clear(self):
        sink = MemorySink()
        sink.write(TraceRecord())
        sink.clear()
        assert len(sink) == 0


class TestNullSink:
    """Tests for NullSink."""

    def test_discards_records(self):
        sink = NullSink()
        sink.write(MutationRecord())
        sink.flush()
        sink.close()


class TestConsoleSink:
    """Tests for ConsoleSink."""

    def test_formats_mutation(self):
        stream = io.StringIO()
        sink = ConsoleSink(stream=stream, color=False)

        sink.write(MutationRecord(operation="remove", path="route.from.steps.0"))
        sink.write(MutationRecord(operation="remove", path="route.from.steps.9", applied=False))

        lines = stream.getvalue().splitlines()
        assert lines[0] == "[EDIT] remove route.from.steps.0"
        assert lines[1].endswith("(no-op)")

    def test_formats_graph_build(self):
        stream = io.StringIO()
        sink = ConsoleSink(stream=stream, color=False)

        sink.write(GraphBuildRecord(root_path="route", node_count=4, group_count=1, duration_ms=1.5))

        assert stream.getvalue() == "[GRAPH] route: 4 nodes, 1 groups in 1.5ms\n"

    def test_skips_unknown_records(self):
        stream = io.StringIO()
        sink = ConsoleSink(stream=stream, color=False)
        sink.write(TraceRecord())
        assert stream.getvalue() == ""

    def test_custom_format(self):
        stream = io.StringIO()
        sink = ConsoleSink(stream=stream, format_fn=lambda record: record.record_type)
        sink.write(TraceRecord())
        assert stream.getvalue() == "base\n"
