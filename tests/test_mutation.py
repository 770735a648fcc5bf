"""Tests for the mutation engine."""

import pytest

from flowpath.core.context import EditorContext
from flowpath.core.mutation import AdjacentInsertMode, ChildInsertMode, MutationEngine
from flowpath.core.path import resolve
from flowpath.observability import MemorySink, MutationRecord, ObservabilityHub, TraceLevel


def make_route(*steps):
    """Route document whose consumer holds the given steps."""
    return {"route": {"id": "route-1", "from": {"uri": "timer:tick", "steps": list(steps)}}}


def step_kinds(document, path="route.from.steps"):
    """Processor kind of each step wrapper in an array."""
    return [next(iter(step)) for step in resolve(document, path)]


def make_choice_route():
    return make_route(
        {"log": {"message": "A"}},
        {
            "choice": {
                "when": [
                    {"simple": "${header.a}", "steps": []},
                    {"simple": "${header.b}", "steps": [{"to": {"uri": "mock:b"}}]},
                ],
                "otherwise": {"steps": [{"log": {"message": "other"}}]},
            }
        },
        {"to": {"uri": "mock:end"}},
    )


@pytest.fixture
def context():
    """Context with an isolated, disabled hub."""
    return EditorContext(hub=ObservabilityHub())


# =============================================================================
# Adjacent inserts
# =============================================================================


class TestInsertAdjacent:
    """Tests for inserting next to an existing element."""

    def test_append_after_step(self, context):
        """Test APPEND places the value right after the addressed step."""
        a, b, x = {"log": {"message": "A"}}, {"log": {"message": "B"}}, {"to": "mock:x"}
        document = make_route(a, b)
        engine = MutationEngine(document, context)

        assert engine.insert_adjacent("route.from.steps.0.log", x, AdjacentInsertMode.APPEND)
        assert document["route"]["from"]["steps"] == [a, x, b]

    def test_replace_step(self, context):
        """Test REPLACE swaps the element and keeps the length."""
        a, b, y = {"log": {"message": "A"}}, {"log": {"message": "B"}}, {"to": "mock:y"}
        document = make_route(a, b)
        engine = MutationEngine(document, context)

        assert engine.insert_adjacent("route.from.steps.1.log", y, AdjacentInsertMode.REPLACE)
        assert document["route"]["from"]["steps"] == [a, y]

    def test_prepend_before_step(self, context):
        document = make_route({"log": {}}, {"to": "mock:b"})
        engine = MutationEngine(document, context)

        assert engine.insert_adjacent("route.from.steps.1.to", {"setBody": {}}, AdjacentInsertMode.PREPEND)
        assert step_kinds(document) == ["log", "setBody", "to"]

    def test_element_path(self, context):
        """Test the path may address the array element itself."""
        document = make_choice_route()
        engine = MutationEngine(document, context)
        clause = {"simple": "${header.c}", "steps": []}

        assert engine.insert_adjacent("route.from.steps.1.choice.when.0", clause, AdjacentInsertMode.PREPEND)
        when = resolve(document, "route.from.steps.1.choice.when")
        assert when[0] is clause
        assert len(when) == 3

    def test_stale_index_is_noop(self, context):
        document = make_route({"log": {}})
        engine = MutationEngine(document, context)

        assert not engine.insert_adjacent("route.from.steps.3.log", {"to": "mock:x"})
        assert step_kinds(document) == ["log"]

    def test_wrong_kind_at_index_is_noop(self, context):
        """Test an indexed property path must match the element's kind."""
        document = make_route({"log": {}})
        engine = MutationEngine(document, context)

        assert not engine.insert_adjacent("route.from.steps.0.to", {"to": "mock:x"})
        assert step_kinds(document) == ["log"]

    def test_object_property_is_noop(self, context):
        document = make_choice_route()
        engine = MutationEngine(document, context)

        assert not engine.insert_adjacent("route.from.steps.1.choice.otherwise", {"log": {}})


# =============================================================================
# Child inserts
# =============================================================================


class TestInsertChild:
    """Tests for inserting children through step-properties descriptors."""

    def test_branch_first(self, context):
        """Test the default mode inserts at the front of the branch."""
        document = make_route({"log": {}})
        engine = MutationEngine(document, context)

        assert engine.insert_child("route.from", {"to": "mock:first"})
        assert step_kinds(document) == ["to", "log"]

    def test_branch_append(self, context):
        document = make_route({"log": {}})
        engine = MutationEngine(document, context)

        assert engine.insert_child("route.from", {"to": "mock:last"}, mode=ChildInsertMode.APPEND)
        assert step_kinds(document) == ["log", "to"]

    def test_creates_missing_branch(self, context):
        """Test a missing steps array is created on first insert."""
        document = {"route": {"from": {"uri": "timer:tick"}}}
        engine = MutationEngine(document, context)

        assert engine.insert_child("route.from", {"log": {}})
        assert document["route"]["from"]["steps"] == [{"log": {}}]

    def test_array_property(self, context):
        document = make_choice_route()
        engine = MutationEngine(document, context)
        clause = {"simple": "${header.c}", "steps": []}

        assert engine.insert_child("route.from.steps.1.choice", clause, "when", ChildInsertMode.APPEND)
        assert resolve(document, "route.from.steps.1.choice.when.2") is clause

    def test_single_clause_property(self, context):
        """Test a single-clause property is set, not appended to."""
        document = make_route({"choice": {"when": []}})
        engine = MutationEngine(document, context)

        assert engine.insert_child("route.from.steps.0.choice", {"steps": []}, "otherwise")
        assert resolve(document, "route.from.steps.0.choice.otherwise") == {"steps": []}

    def test_nested_clause_branch(self, context):
        """Test inserting into a when clause resolves its kind from the index."""
        document = make_choice_route()
        engine = MutationEngine(document, context)

        assert engine.insert_child("route.from.steps.1.choice.when.0", {"log": {}})
        assert step_kinds(document, "route.from.steps.1.choice.when.0.steps") == ["log"]

    def test_undeclared_property_is_noop(self, context):
        document = make_choice_route()
        engine = MutationEngine(document, context)

        assert not engine.insert_child("route.from.steps.1.choice", {"log": {}}, "steps")
        assert not engine.insert_child("route.from.steps.1.choice", {"log": {}})
        assert not engine.insert_child("route.from.steps.0.log", {"log": {}})

    def test_unresolved_parent_is_noop(self, context):
        document = make_route()
        engine = MutationEngine(document, context)

        assert not engine.insert_child("route.from.steps.0.filter", {"log": {}})
        assert document == make_route()

    def test_root_kind(self, context):
        """Test a document whose root is itself a processor."""
        document = {"when": [], "otherwise": {"steps": []}}
        engine = MutationEngine(document, context, root_kind="choice")

        assert engine.processor_name("") == "choice"
        assert engine.insert_child("", {"simple": "x", "steps": []}, "when")
        assert document["when"] == [{"simple": "x", "steps": []}]


# =============================================================================
# Removal
# =============================================================================


class TestRemove:
    """Tests for removing nodes."""

    def test_remove_otherwise(self, context):
        """Test removing a single-clause property deletes the key only."""
        document = make_choice_route()
        engine = MutationEngine(document, context)
        when = resolve(document, "route.from.steps.1.choice.when")

        assert engine.remove("route.from.steps.1.choice.otherwise")
        choice = resolve(document, "route.from.steps.1.choice")
        assert "otherwise" not in choice
        assert choice["when"] is when
        assert len(when) == 2

    def test_remove_step_wrapper(self, context):
        """Test removing ``steps.i.kind`` splices the whole wrapper."""
        document = make_choice_route()
        engine = MutationEngine(document, context)

        assert engine.remove("route.from.steps.0.log")
        assert step_kinds(document) == ["choice", "to"]

    def test_remove_array_element(self, context):
        document = make_choice_route()
        engine = MutationEngine(document, context)

        assert engine.remove("route.from.steps.1.choice.when.0")
        when = resolve(document, "route.from.steps.1.choice.when")
        assert [clause["simple"] for clause in when] == ["${header.b}"]

    def test_remove_property_of_clause(self, context):
        """Test a property of a multi-key clause is deleted, not the clause."""
        document = make_choice_route()
        engine = MutationEngine(document, context)

        assert engine.remove("route.from.steps.1.choice.when.0.simple")
        assert resolve(document, "route.from.steps.1.choice.when.0") == {"steps": []}

    def test_remove_only_property_of_clause(self, context):
        """Test a clause holding one key keeps the clause and loses the key."""
        document = make_route({"choice": {"when": [{"steps": [{"log": {}}]}, {"simple": "x"}]}})
        engine = MutationEngine(document, context)

        assert engine.remove("route.from.steps.0.choice.when.0.steps")
        assert resolve(document, "route.from.steps.0.choice.when") == [{}, {"simple": "x"}]

    def test_remove_multi_key_step_wrapper(self, context):
        """Test a wrapper in a branch is spliced out whatever its shape."""
        document = make_route({"log": {}, "description": "odd"}, {"to": "mock:a"})
        engine = MutationEngine(document, context)

        assert engine.remove("route.from.steps.0.log")
        assert step_kinds(document) == ["to"]

    def test_remove_in_undescribed_list(self, context):
        """Test lists outside the catalog fall back to the element shape."""
        document = {"beans": {"items": [{"bean": {"name": "a"}}, {"name": "b", "type": "x"}]}}
        engine = MutationEngine(document, context)

        assert engine.remove("beans.items.1.type")
        assert engine.remove("beans.items.0.bean")
        assert resolve(document, "beans.items") == [{"name": "b"}]

    def test_remove_keeps_arrays_contiguous(self, context):
        document = make_route({"log": {}}, {"to": "mock:a"}, {"to": "mock:b"})
        engine = MutationEngine(document, context)

        assert engine.remove("route.from.steps.1")
        steps = resolve(document, "route.from.steps")
        assert len(steps) == 2
        assert all(resolve(document, f"route.from.steps.{i}") is not None for i in range(len(steps)))

    def test_stale_paths_are_noops(self, context):
        document = make_choice_route()
        engine = MutationEngine(document, context)
        before = repr(document)

        assert not engine.remove("route.from.steps.7.log")
        assert not engine.remove("route.from.steps.1.choice.when.5")
        assert not engine.remove("route.from.steps.1.choice.nothing")
        assert not engine.remove("")
        assert repr(document) == before


# =============================================================================
# Moves
# =============================================================================


class TestMove:
    """Tests for moving steps."""

    def test_move_forward(self, context):
        """Test moving the first step after the last."""
        document = make_route({"log": {}}, {"setBody": {}}, {"to": "mock:c"})
        engine = MutationEngine(document, context)

        assert engine.move("route.from.steps.0.log", "route.from.steps.2.to", AdjacentInsertMode.APPEND)
        assert step_kinds(document) == ["setBody", "to", "log"]

    def test_move_backward(self, context):
        document = make_route({"log": {}}, {"setBody": {}}, {"to": "mock:c"})
        engine = MutationEngine(document, context)

        assert engine.move("route.from.steps.2.to", "route.from.steps.0.log", AdjacentInsertMode.PREPEND)
        assert step_kinds(document) == ["to", "log", "setBody"]

    def test_move_between_arrays(self, context):
        """Test moving a step into a nested branch."""
        document = make_choice_route()
        engine = MutationEngine(document, context)
        moved = resolve(document, "route.from.steps.2")

        assert engine.move(
            "route.from.steps.2.to",
            "route.from.steps.1.choice.when.1.steps.0.to",
            AdjacentInsertMode.APPEND,
        )
        assert step_kinds(document) == ["log", "choice"]
        assert resolve(document, "route.from.steps.1.choice.when.1.steps.1") is moved

    def test_move_conserves_steps(self, context):
        document = make_route({"log": {}}, {"setBody": {}}, {"to": "mock:c"}, {"setHeader": {}})
        engine = MutationEngine(document, context)

        assert engine.move("route.from.steps.1", "route.from.steps.3", AdjacentInsertMode.PREPEND)
        assert sorted(step_kinds(document)) == ["log", "setBody", "setHeader", "to"]
        assert step_kinds(document) == ["log", "to", "setBody", "setHeader"]

    def test_move_into_own_subtree_is_noop(self, context):
        document = make_choice_route()
        engine = MutationEngine(document, context)
        before = repr(document)

        assert not engine.move(
            "route.from.steps.1.choice",
            "route.from.steps.1.choice.when.1.steps.0.to",
        )
        assert repr(document) == before

    def test_move_to_same_position_is_noop(self, context):
        document = make_route({"log": {}}, {"to": "mock:b"})
        engine = MutationEngine(document, context)

        assert not engine.move("route.from.steps.0.log", "route.from.steps.0")
        assert step_kinds(document) == ["log", "to"]

    def test_stale_endpoints_leave_document_untouched(self, context):
        """Test nothing is removed when the target does not resolve."""
        document = make_route({"log": {}}, {"to": "mock:b"})
        engine = MutationEngine(document, context)

        assert not engine.move("route.from.steps.0.log", "route.from.steps.9.to")
        assert not engine.move("route.from.steps.9.to", "route.from.steps.0.log")
        assert step_kinds(document) == ["log", "to"]


# =============================================================================
# Updates and tracing
# =============================================================================


class TestUpdate:
    """Tests for property updates."""

    def test_update_and_get(self, context):
        document = make_route()
        engine = MutationEngine(document, context)

        assert engine.update("route.from.uri", "timer:tock")
        assert engine.get("route.from.uri") == "timer:tock"
        assert engine.get("route.description", "none") == "none"

    def test_update_creates_parents(self, context):
        document = make_route()
        engine = MutationEngine(document, context)

        assert engine.update("route.from.parameters.period", 500)
        assert document["route"]["from"]["parameters"] == {"period": 500}

    def test_processor_name(self, context):
        engine = MutationEngine(make_choice_route(), context)
        assert engine.processor_name("route.from.steps.1.choice.when.0") == "when"
        assert engine.processor_name("route.from.steps.1.choice") == "choice"
        assert engine.processor_name("") is None


class TestMutationTracing:
    """Tests for mutation trace records."""

    def test_applied_edits_at_minimal(self):
        """Test MINIMAL only sees edits that changed the document."""
        hub = ObservabilityHub()
        sink = MemorySink()
        hub.configure(level=TraceLevel.MINIMAL, sinks=[sink])
        engine = MutationEngine(make_route({"log": {}}), EditorContext(hub=hub))

        engine.remove("route.from.steps.0.log")
        engine.remove("route.from.steps.0.log")

        records = sink.get_records("mutation")
        assert len(records) == 1
        assert isinstance(records[0], MutationRecord)
        assert records[0].operation == "remove"
        assert records[0].path == "route.from.steps.0.log"
        assert records[0].applied

    def test_noops_at_verbose(self):
        hub = ObservabilityHub()
        sink = MemorySink()
        hub.configure(level=TraceLevel.VERBOSE, sinks=[sink])
        engine = MutationEngine(make_route(), EditorContext(hub=hub))

        engine.remove("route.from.steps.0.log")

        records = sink.get_by_path("route.from.steps.0.log")
        assert len(records) == 1
        assert not records[0].applied

    def test_disabled_hub_records_nothing(self, context):
        sink = MemorySink()
        context.hub.add_sink(sink)
        MutationEngine(make_route(), context).update("route.from.uri", "x")
        assert len(sink) == 0
