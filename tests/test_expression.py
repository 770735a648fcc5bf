"""Tests for the expression normalizer."""

import pytest

from flowpath.core.expression import (
    EMPTY_EXPRESSION,
    ExpressionModel,
    ExpressionService,
    LanguageDefinition,
    LanguageRegistry,
    parse_expression,
    serialize_expression,
)


@pytest.fixture
def languages():
    """Built-in language registry."""
    return LanguageRegistry.default()


# =============================================================================
# Parsing
# =============================================================================


class TestParseExpression:
    """Tests for reading each dialect."""

    def test_wrapped_explicit(self, languages):
        holder = {"expression": {"simple": {"expression": "${body}", "trim": True}}}
        assert parse_expression(holder, languages) == ExpressionModel(
            "simple", {"expression": "${body}", "trim": True}
        )

    def test_wrapped_shorthand(self, languages):
        holder = {"expression": {"simple": "${body}"}}
        assert parse_expression(holder, languages) == ExpressionModel(
            "simple", {"expression": "${body}"}
        )

    def test_inline_explicit(self, languages):
        holder = {"simple": {"expression": "${body}"}, "id": "when-1"}
        assert parse_expression(holder, languages) == ExpressionModel(
            "simple", {"expression": "${body}"}
        )

    def test_inline_shorthand(self, languages):
        """Test the bare shorthand is widened to its explicit form."""
        holder = {"simple": "${body}"}
        assert parse_expression(holder, languages) == ExpressionModel(
            "simple", {"expression": "${body}"}
        )

    def test_model_name_maps_to_language_id(self, languages):
        """Test the bean language is stored under ``method``."""
        assert parse_expression({"method": "doIt"}, languages).language_id == "bean"
        wrapped = {"expression": {"method": {"expression": "doIt"}}}
        assert parse_expression(wrapped, languages).language_id == "bean"

    def test_ambiguous_inline_uses_registry_order(self, languages):
        """Test simple wins over languages declared after it."""
        holder = {"header": "foo", "simple": "${body}"}
        assert parse_expression(holder, languages).language_id == "simple"

    def test_ambiguous_wrapper_uses_registry_order(self, languages):
        holder = {"expression": {"header": "foo", "simple": "${body}"}}
        assert parse_expression(holder, languages).language_id == "simple"

    def test_wrapper_wins_over_inline(self, languages):
        holder = {"expression": {"constant": "1"}, "simple": "${body}"}
        assert parse_expression(holder, languages).language_id == "constant"

    def test_unknown_wrapper_key_is_kept(self, languages):
        """Test a single unknown wrapper key is reported as-is."""
        holder = {"expression": {"kotlin": "it.body"}}
        assert parse_expression(holder, languages) == ExpressionModel(
            "kotlin", {"expression": "it.body"}
        )

    def test_no_expression(self, languages):
        """Test holders without an expression yield the empty model."""
        assert parse_expression({"steps": []}, languages) == EMPTY_EXPRESSION
        assert parse_expression({"simple": None}, languages) == EMPTY_EXPRESSION
        assert parse_expression({"expression": {}}, languages) == EMPTY_EXPRESSION
        assert parse_expression(None, languages) == EMPTY_EXPRESSION
        assert parse_expression("${body}", languages) == EMPTY_EXPRESSION


# =============================================================================
# Serializing
# =============================================================================


class TestSerializeExpression:
    """Tests for writing the canonical dialect."""

    def test_writes_wrapped_explicit(self, languages):
        holder = {"simple": "${body}"}
        model = parse_expression(holder, languages)
        serialize_expression(holder, model.language_id, model.model, languages)
        assert holder == {"expression": {"simple": {"expression": "${body}"}}}

    def test_keeps_other_properties(self, languages):
        holder = {"id": "when-1", "simple": "${body}", "steps": []}
        serialize_expression(holder, "simple", {"expression": "${body}"}, languages)
        assert holder["id"] == "when-1"
        assert holder["steps"] == []
        assert "simple" not in holder

    def test_removes_other_languages(self, languages):
        """Test at most one language remains after serializing."""
        holder = {"header": "foo", "constant": "1", "expression": {"xpath": "/a"}}
        serialize_expression(holder, "jq", {"expression": ".a"}, languages)
        assert holder == {"expression": {"jq": {"expression": ".a"}}}

    def test_uses_model_name(self, languages):
        holder = {}
        serialize_expression(holder, "bean", {"expression": "doIt"}, languages)
        assert holder == {"expression": {"method": {"expression": "doIt"}}}

    def test_unknown_language_clears(self, languages):
        """Test an unknown or empty language id removes the expression."""
        holder = {"expression": {"simple": "${body}"}, "steps": []}
        serialize_expression(holder, "kotlin", {"expression": "it"}, languages)
        assert holder == {"steps": []}

        holder = {"simple": "${body}"}
        serialize_expression(holder, None, None, languages)
        assert holder == {}

    def test_missing_model_becomes_empty_payload(self, languages):
        holder = {}
        serialize_expression(holder, "simple", None, languages)
        assert holder == {"expression": {"simple": {}}}

    @pytest.mark.parametrize("holder", [
        {"expression": {"simple": {"expression": "${body}", "trim": False}}},
        {"expression": {"simple": "${body}"}},
        {"simple": {"expression": "${body}"}},
        {"simple": "${body}"},
        {"method": "doIt"},
    ])
    def test_parse_after_serialize_is_stable(self, languages, holder):
        """Test normalizing twice gives the same model as once."""
        first = parse_expression(holder, languages)
        serialize_expression(holder, first.language_id, first.model, languages)
        second = parse_expression(holder, languages)
        assert second == first

        serialize_expression(holder, second.language_id, second.model, languages)
        assert parse_expression(holder, languages) == first


# =============================================================================
# Registry and service
# =============================================================================


class TestLanguageRegistry:
    """Tests for language lookups."""

    def test_lookup_by_name_or_model(self, languages):
        assert languages.lookup("bean").model_name == "method"
        assert languages.lookup("method").name == "bean"
        assert languages.lookup("nope") is None
        assert languages.lookup(None) is None

    def test_simple_first(self, languages):
        assert next(iter(languages)).name == "simple"

    def test_merged_adds_language(self, languages):
        merged = languages.merged([LanguageDefinition(name="kotlin", model_name="kotlin")])
        assert merged.is_known("kotlin")
        assert not languages.is_known("kotlin")
        assert len(merged) == len(languages) + 1


class TestExpressionService:
    """Tests for the registry-bound service."""

    def test_parse_and_language_of(self, languages):
        service = ExpressionService(languages)
        holder = {"method": "doIt"}
        assert service.parse(holder).language_id == "bean"
        assert service.language_of(holder).title == "Bean Method"
        assert service.language_of({}) is None

    def test_serialize(self, languages):
        service = ExpressionService(languages)
        holder = service.serialize({"simple": "x"}, "constant", {"expression": "1"})
        assert holder == {"expression": {"constant": {"expression": "1"}}}
