"""Tests for capability resolution."""

from flowpath.core.capabilities import (
    DISABLED_CAPABILITIES,
    CapabilityRecord,
    CapabilityResolver,
    CapabilityRules,
    PathRole,
    capabilities_of,
)
from flowpath.core.descriptors import DescriptorRegistry


class TestCapabilitiesOf:
    """Tests for the generic resolver."""

    def test_leaf_step(self):
        """Test a plain leaf can be replaced, removed and disabled."""
        record = capabilities_of("log", PathRole.INTERIOR, DescriptorRegistry.default())
        assert record == CapabilityRecord(
            can_have_previous_step=True,
            can_have_next_step=True,
            can_have_children=False,
            can_have_special_children=False,
            can_replace_step=True,
            can_remove_step=True,
            can_remove_flow=False,
            can_be_disabled=True,
        )

    def test_choice(self):
        """Test choice has special children but no branch."""
        record = capabilities_of("choice", PathRole.INTERIOR, DescriptorRegistry.default())
        assert record.can_have_special_children
        assert not record.can_have_children
        assert record.can_have_previous_step
        assert record.can_replace_step

    def test_do_try(self):
        record = capabilities_of("doTry", PathRole.INTERIOR, DescriptorRegistry.default())
        assert record.can_have_children
        assert record.can_have_special_children

    def test_when_clause(self):
        """Test when clauses hold steps but have no siblings."""
        record = capabilities_of("when", PathRole.INTERIOR, DescriptorRegistry.default())
        assert record.can_have_children
        assert not record.can_have_special_children
        assert not record.can_have_previous_step
        assert not record.can_have_next_step
        assert not record.can_replace_step
        assert record.can_remove_step
        assert not record.can_be_disabled

    def test_from_cannot_be_removed(self):
        record = capabilities_of("from", PathRole.INTERIOR, DescriptorRegistry.default())
        assert not record.can_remove_step
        assert not record.can_replace_step
        assert record.can_have_children

    def test_root_role_allows_flow_removal(self):
        registry = DescriptorRegistry.default()
        assert capabilities_of("route", PathRole.ROOT, registry).can_remove_flow
        assert not capabilities_of("log", PathRole.INTERIOR, registry).can_remove_flow

    def test_unknown_kind_is_permissive_leaf(self):
        record = capabilities_of("kafkaBatch", PathRole.INTERIOR, DescriptorRegistry.default())
        assert record.can_replace_step
        assert record.can_remove_step
        assert not record.can_have_children

    def test_custom_rules(self):
        """Test allow/deny lists drive the flags."""
        rules = CapabilityRules.from_lists(non_removable_steps=["log"])
        record = capabilities_of("log", PathRole.INTERIOR, DescriptorRegistry.default(), rules)
        assert not record.can_remove_step
        # Other lists keep their defaults
        assert rules.disabled_sibling_steps == CapabilityRules().disabled_sibling_steps
        assert capabilities_of("from", PathRole.INTERIOR, DescriptorRegistry.default(), rules).can_remove_step


class TestCapabilityResolver:
    """Tests for entity-root resolution."""

    def test_singleton_entities(self):
        """Test error handler and rest configuration only allow flow removal."""
        resolver = CapabilityResolver(DescriptorRegistry.default())
        for kind in ("errorHandler", "restConfiguration"):
            assert resolver.for_entity_root(kind) == CapabilityRecord(can_remove_flow=True)

    def test_configuration_entities(self):
        resolver = CapabilityResolver(DescriptorRegistry.default())
        record = resolver.for_entity_root("routeConfiguration")
        assert record.can_have_special_children
        assert not record.can_have_children
        assert record.can_remove_flow

    def test_intercept_entities(self):
        resolver = CapabilityResolver(DescriptorRegistry.default())
        record = resolver.for_entity_root("onException")
        assert record.can_have_children
        assert not record.can_remove_step

    def test_route_root_uses_generic_resolver(self):
        resolver = CapabilityResolver(DescriptorRegistry.default())
        record = resolver.for_entity_root("route")
        assert record.can_remove_flow
        assert not record.can_remove_step
        assert not record.can_have_previous_step


class TestCapabilityRecord:
    """Tests for the record itself."""

    def test_disabled_record(self):
        assert not any(DISABLED_CAPABILITIES.to_dict().values())

    def test_to_dict_keys(self):
        """Test camelCase keys as editors expect them."""
        record = CapabilityRecord(can_have_previous_step=True, can_be_disabled=True)
        data = record.to_dict()
        assert data["canHavePreviousStep"] is True
        assert data["canBeDisabled"] is True
        assert data["canRemoveFlow"] is False
        assert len(data) == 8
