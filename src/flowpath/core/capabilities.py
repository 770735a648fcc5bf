"""Capability resolution for flow nodes.

A CapabilityRecord tells the editor which structural edits a node
supports. Ordinary steps derive it from their step-properties
descriptors plus a few allow/deny lists; flow-scoped singletons such as
the error handler or the rest configuration use fixed records instead.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Optional

from flowpath.core.descriptors import DescriptorRegistry, StepPropertyType


class PathRole(Enum):
    """Structural role of the path a node lives at."""

    ROOT = "root"
    INTERIOR = "interior"


@dataclass(frozen=True)
class CapabilityRecord:
    """Structural edits allowed on a node."""

    can_have_previous_step: bool = False
    can_have_next_step: bool = False
    can_have_children: bool = False
    can_have_special_children: bool = False
    can_replace_step: bool = False
    can_remove_step: bool = False
    can_remove_flow: bool = False
    can_be_disabled: bool = False

    def to_dict(self) -> Dict[str, bool]:
        """Record keyed by camelCase names, as editors consume it."""
        result = {}
        for key, value in asdict(self).items():
            head, *rest = key.split("_")
            result[head + "".join(part.capitalize() for part in rest)] = value
        return result


DISABLED_CAPABILITIES = CapabilityRecord()


DEFAULT_DISABLED_SIBLING_STEPS = frozenset({
    "route",
    "from",
    "onWhen",
    "when",
    "otherwise",
    "doCatch",
    "doFinally",
    "onException",
    "onCompletion",
    "intercept",
    "interceptFrom",
    "interceptSendToEndpoint",
})

DEFAULT_NON_REPLACEABLE_STEPS = frozenset({
    "from",
    "when",
    "otherwise",
    "doCatch",
    "doFinally",
    "onFallback",
    "route",
})

DEFAULT_NON_REMOVABLE_STEPS = frozenset({"from", "route"})

DEFAULT_NON_DISABLEABLE_STEPS = frozenset({
    "from",
    "route",
    "when",
    "otherwise",
    "doCatch",
    "doFinally",
    "onFallback",
    "onException",
    "onCompletion",
    "intercept",
    "interceptFrom",
    "interceptSendToEndpoint",
})


@dataclass(frozen=True)
class CapabilityRules:
    """Allow/deny lists feeding the generic resolver.

    Attributes:
        disabled_sibling_steps: Kinds that cannot have a previous/next step.
        non_replaceable_steps: Kinds that cannot be replaced.
        non_removable_steps: Kinds that cannot be removed as a step.
        non_disableable_steps: Kinds that cannot be disabled.
    """

    disabled_sibling_steps: FrozenSet[str] = field(default=DEFAULT_DISABLED_SIBLING_STEPS)
    non_replaceable_steps: FrozenSet[str] = field(default=DEFAULT_NON_REPLACEABLE_STEPS)
    non_removable_steps: FrozenSet[str] = field(default=DEFAULT_NON_REMOVABLE_STEPS)
    non_disableable_steps: FrozenSet[str] = field(default=DEFAULT_NON_DISABLEABLE_STEPS)

    @classmethod
    def from_lists(
        cls,
        disabled_sibling_steps: Optional[Iterable[str]] = None,
        non_replaceable_steps: Optional[Iterable[str]] = None,
        non_removable_steps: Optional[Iterable[str]] = None,
        non_disableable_steps: Optional[Iterable[str]] = None,
    ) -> "CapabilityRules":
        """Build rules, keeping the defaults for lists left as None."""
        defaults = cls()
        return cls(
            disabled_sibling_steps=_frozen(disabled_sibling_steps, defaults.disabled_sibling_steps),
            non_replaceable_steps=_frozen(non_replaceable_steps, defaults.non_replaceable_steps),
            non_removable_steps=_frozen(non_removable_steps, defaults.non_removable_steps),
            non_disableable_steps=_frozen(non_disableable_steps, defaults.non_disableable_steps),
        )


def _frozen(values: Optional[Iterable[str]], default: FrozenSet[str]) -> FrozenSet[str]:
    return default if values is None else frozenset(values)


_SINGLETON_ENTITY = CapabilityRecord(can_remove_flow=True)

_CONFIGURATION_ENTITY = CapabilityRecord(
    can_have_special_children=True,
    can_remove_flow=True,
)

_INTERCEPT_ENTITY = CapabilityRecord(
    can_have_children=True,
    can_remove_flow=True,
)

# Fixed records for flow-scoped constructs, used when the node is the
# root of its entity instead of an ordinary step.
SPECIAL_ENTITY_CAPABILITIES: Dict[str, CapabilityRecord] = {
    "errorHandler": _SINGLETON_ENTITY,
    "restConfiguration": _SINGLETON_ENTITY,
    "routeConfiguration": _CONFIGURATION_ENTITY,
    "rest": _CONFIGURATION_ENTITY,
    "intercept": _INTERCEPT_ENTITY,
    "interceptFrom": _INTERCEPT_ENTITY,
    "interceptSendToEndpoint": _INTERCEPT_ENTITY,
    "onException": _INTERCEPT_ENTITY,
    "onCompletion": _INTERCEPT_ENTITY,
}


def capabilities_of(
    processor_name: Optional[str],
    role: PathRole,
    registry: DescriptorRegistry,
    rules: Optional[CapabilityRules] = None,
) -> CapabilityRecord:
    """Resolve the capability record of a processor kind.

    Unknown kinds resolve permissively: a replaceable, removable,
    disableable leaf with siblings.

    Args:
        processor_name: Processor kind of the node.
        role: Whether the node is the flow's structural root.
        registry: Step-properties descriptors by kind.
        rules: Allow/deny lists (defaults when omitted).

    Returns:
        The node's CapabilityRecord.
    """
    rules = rules or CapabilityRules()
    descriptors = registry.steps_properties(processor_name)
    can_have_siblings = processor_name not in rules.disabled_sibling_steps

    return CapabilityRecord(
        can_have_previous_step=can_have_siblings,
        can_have_next_step=can_have_siblings,
        can_have_children=any(
            descriptor.type is StepPropertyType.BRANCH for descriptor in descriptors
        ),
        can_have_special_children=len(descriptors) > 1,
        can_replace_step=processor_name not in rules.non_replaceable_steps,
        can_remove_step=processor_name not in rules.non_removable_steps,
        can_remove_flow=role is PathRole.ROOT,
        can_be_disabled=processor_name not in rules.non_disableable_steps,
    )


class CapabilityResolver:
    """Capability lookups bound to one registry and rule set."""

    def __init__(self, registry: DescriptorRegistry, rules: Optional[CapabilityRules] = None):
        self._registry = registry
        self._rules = rules or CapabilityRules()

    def resolve(self, processor_name: Optional[str], role: PathRole = PathRole.INTERIOR) -> CapabilityRecord:
        return capabilities_of(processor_name, role, self._registry, self._rules)

    def for_entity_root(self, processor_name: str) -> CapabilityRecord:
        """Record for the root node of an entity.

        Flow-scoped singletons get their fixed record; other kinds go
        through the generic resolver with the ROOT role.
        """
        special = SPECIAL_ENTITY_CAPABILITIES.get(processor_name)
        if special is not None:
            return special
        return self.resolve(processor_name, PathRole.ROOT)
