"""Step-properties descriptors for processor kinds.

A processor kind may declare properties that hold child steps. Each
declaration is a StepPropertyDescriptor naming the property and its
storage shape:

- branch: a list of single-key step wrappers, e.g.
  ``steps: [{log: {...}}, {to: {...}}]``
- array: a list of clause objects of the property's own kind, e.g.
  ``when: [{expression: ..., steps: [...]}]``
- single-clause: one clause object, e.g. ``otherwise: {steps: [...]}``

A kind with no descriptors is a leaf step. DescriptorRegistry maps kind
names to their catalog entry (descriptors plus display metadata). It is
built explicitly and passed around; there is no global instance.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple


class StepPropertyType(str, Enum):
    """Storage shape of a property that holds child steps."""

    SINGLE_CLAUSE = "single-clause"
    ARRAY = "array"
    BRANCH = "branch"


@dataclass(frozen=True)
class StepPropertyDescriptor:
    """One child-holding property of a processor kind.

    Attributes:
        name: Property key in the processor definition.
        type: Storage shape of the property.
    """

    name: str
    type: StepPropertyType


@dataclass(frozen=True)
class ProcessorDefinition:
    """Catalog entry for a processor kind.

    Attributes:
        name: Processor kind name (the key used in flow documents).
        title: Human readable title.
        icon: Icon identifier for the canvas.
        description: Short description used for tooltips.
        steps_properties: Child-holding properties, in display order.
    """

    name: str
    title: Optional[str] = None
    icon: Optional[str] = None
    description: Optional[str] = None
    steps_properties: Tuple[StepPropertyDescriptor, ...] = field(default_factory=tuple)


def _steps_branch() -> Tuple[StepPropertyDescriptor, ...]:
    return (StepPropertyDescriptor("steps", StepPropertyType.BRANCH),)


# Kinds whose only child-holding property is the ``steps`` branch.
STEPS_BRANCH_PROCESSORS = (
    "when",
    "otherwise",
    "doCatch",
    "doFinally",
    "aggregate",
    "filter",
    "loadBalance",
    "loop",
    "multicast",
    "onFallback",
    "pipeline",
    "resequence",
    "saga",
    "split",
    "step",
    "whenSkipSendToEndpoint",
    "from",
    "onException",
    "onCompletion",
    "intercept",
    "interceptFrom",
    "interceptSendToEndpoint",
)

ROUTE_CONFIGURATION_PROPERTIES = (
    "intercept",
    "interceptFrom",
    "interceptSendToEndpoint",
    "onException",
    "onCompletion",
)

REST_VERBS = ("get", "post", "put", "delete", "patch", "head")


def _default_definitions() -> List[ProcessorDefinition]:
    definitions = [
        ProcessorDefinition(name=name, title=name, steps_properties=_steps_branch())
        for name in STEPS_BRANCH_PROCESSORS
    ]
    definitions.extend([
        ProcessorDefinition(
            name="choice",
            title="Choice",
            steps_properties=(
                StepPropertyDescriptor("when", StepPropertyType.ARRAY),
                StepPropertyDescriptor("otherwise", StepPropertyType.SINGLE_CLAUSE),
            ),
        ),
        ProcessorDefinition(
            name="doTry",
            title="Do Try",
            steps_properties=(
                StepPropertyDescriptor("steps", StepPropertyType.BRANCH),
                StepPropertyDescriptor("doCatch", StepPropertyType.ARRAY),
                StepPropertyDescriptor("doFinally", StepPropertyType.SINGLE_CLAUSE),
            ),
        ),
        ProcessorDefinition(
            name="circuitBreaker",
            title="Circuit Breaker",
            steps_properties=(
                StepPropertyDescriptor("steps", StepPropertyType.BRANCH),
                StepPropertyDescriptor("onFallback", StepPropertyType.SINGLE_CLAUSE),
            ),
        ),
        ProcessorDefinition(
            name="route",
            title="Route",
            steps_properties=(
                StepPropertyDescriptor("from", StepPropertyType.SINGLE_CLAUSE),
            ),
        ),
        ProcessorDefinition(
            name="routeConfiguration",
            title="Route Configuration",
            steps_properties=tuple(
                StepPropertyDescriptor(name, StepPropertyType.BRANCH)
                for name in ROUTE_CONFIGURATION_PROPERTIES
            ),
        ),
        ProcessorDefinition(
            name="rest",
            title="Rest",
            steps_properties=tuple(
                StepPropertyDescriptor(verb, StepPropertyType.ARRAY)
                for verb in REST_VERBS
            ),
        ),
        ProcessorDefinition(name="restConfiguration", title="Rest Configuration"),
        ProcessorDefinition(name="errorHandler", title="Error Handler"),
        ProcessorDefinition(name="to", title="To"),
        ProcessorDefinition(name="toD", title="To D"),
        ProcessorDefinition(name="log", title="Log"),
        ProcessorDefinition(name="setBody", title="Set Body"),
        ProcessorDefinition(name="setHeader", title="Set Header"),
    ])
    return definitions


class DescriptorRegistry:
    """Lookup of processor kinds to their catalog entries.

    Unknown kinds are treated as leaves: ``steps_properties`` returns an
    empty tuple rather than raising.

    Example:
        >>> registry = DescriptorRegistry.default()
        >>> [d.name for d in registry.steps_properties("choice")]
        ['when', 'otherwise']
        >>> registry.steps_properties("log")
        ()
    """

    def __init__(self, definitions: Optional[Iterable[ProcessorDefinition]] = None):
        self._definitions: Dict[str, ProcessorDefinition] = {}
        for definition in definitions or ():
            self.register(definition)

    @classmethod
    def default(cls) -> "DescriptorRegistry":
        """Registry holding the built-in processor table."""
        return cls(_default_definitions())

    def register(self, definition: ProcessorDefinition) -> None:
        """Add or replace the entry for ``definition.name``."""
        self._definitions[definition.name] = definition

    def merged(self, overrides: Iterable[ProcessorDefinition]) -> "DescriptorRegistry":
        """New registry with ``overrides`` replacing same-named entries."""
        registry = DescriptorRegistry(self._definitions.values())
        for definition in overrides:
            registry.register(definition)
        return registry

    def get(self, name: Optional[str]) -> Optional[ProcessorDefinition]:
        if name is None:
            return None
        return self._definitions.get(name)

    def steps_properties(self, name: Optional[str]) -> Tuple[StepPropertyDescriptor, ...]:
        """Child-holding properties of a kind (empty for leaves and unknowns)."""
        definition = self.get(name)
        if definition is None:
            return ()
        return definition.steps_properties

    def find_property(
        self,
        name: Optional[str],
        property_name: str,
    ) -> Optional[StepPropertyDescriptor]:
        """Descriptor named ``property_name`` on kind ``name``, if declared."""
        for descriptor in self.steps_properties(name):
            if descriptor.name == property_name:
                return descriptor
        return None

    def branch_property(self, name: Optional[str]) -> Optional[StepPropertyDescriptor]:
        """First ``branch`` descriptor of a kind, if any."""
        for descriptor in self.steps_properties(name):
            if descriptor.type is StepPropertyType.BRANCH:
                return descriptor
        return None

    def title_of(self, name: str) -> str:
        definition = self.get(name)
        if definition is None or not definition.title:
            return name
        return definition.title

    def icon_of(self, name: str) -> Optional[str]:
        definition = self.get(name)
        return definition.icon if definition is not None else None

    def names(self) -> List[str]:
        return list(self._definitions)

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)
