"""Explicit editor context shared by engines, builders and entities.

Catalog data (step-properties descriptors, expression languages and
capability lists) is handed around in an EditorContext instead of living
in module-level singletons, so that tests and parallel editor sessions
can each use their own catalog.

Example:
    >>> context = EditorContext.default()
    >>> context.descriptors.steps_properties("choice")[0].name
    'when'
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional

from flowpath.core.capabilities import CapabilityResolver, CapabilityRules
from flowpath.core.descriptors import (
    DescriptorRegistry,
    ProcessorDefinition,
    StepPropertyDescriptor,
    StepPropertyType,
)
from flowpath.core.expression import (
    ExpressionService,
    LanguageDefinition,
    LanguageRegistry,
)
from flowpath.observability import ObservabilityHub, Sink, TraceLevel

if TYPE_CHECKING:
    from flowpath.config.schema import ConfigSchema, ObservabilitySchema
    from flowpath.observability.records import TraceRecord


_LEVEL_MAP = {
    "off": TraceLevel.OFF,
    "minimal": TraceLevel.MINIMAL,
    "normal": TraceLevel.NORMAL,
    "verbose": TraceLevel.VERBOSE,
}


@dataclass
class EditorContext:
    """Catalog and tracing collaborators of one editor session.

    Attributes:
        descriptors: Step-properties descriptors by processor kind.
        languages: Known expression languages, in precedence order.
        rules: Capability allow/deny lists.
        hub: Observability hub receiving trace records.
    """

    descriptors: DescriptorRegistry = field(default_factory=DescriptorRegistry.default)
    languages: LanguageRegistry = field(default_factory=LanguageRegistry.default)
    rules: CapabilityRules = field(default_factory=CapabilityRules)
    hub: ObservabilityHub = field(default_factory=ObservabilityHub.get_instance)

    @classmethod
    def default(cls) -> "EditorContext":
        """Context with the built-in catalog and the shared hub."""
        return cls()

    @classmethod
    def from_config(
        cls,
        config: "ConfigSchema",
        hub: Optional[ObservabilityHub] = None,
    ) -> "EditorContext":
        """Build a context from a validated configuration.

        Processors and languages from the configuration replace built-in
        entries of the same name and add new ones; capability lists left
        unset keep their defaults. The hub is not reconfigured here, see
        configure_observability().

        Args:
            config: Validated configuration.
            hub: Hub to attach (defaults to the shared instance).

        Returns:
            A new EditorContext.
        """
        descriptors = DescriptorRegistry.default().merged(
            ProcessorDefinition(
                name=name,
                title=processor.title or name,
                icon=processor.icon,
                description=processor.description,
                steps_properties=tuple(
                    StepPropertyDescriptor(prop.name, StepPropertyType(prop.type))
                    for prop in processor.steps_properties
                ),
            )
            for name, processor in config.processors.items()
        )
        languages = LanguageRegistry.default().merged(
            LanguageDefinition(
                name=name,
                model_name=language.model_name or name,
                title=language.title or name,
                description=language.description,
            )
            for name, language in config.languages.items()
        )
        capabilities = config.capabilities
        rules = CapabilityRules.from_lists(
            disabled_sibling_steps=capabilities.disabled_sibling_steps,
            non_replaceable_steps=capabilities.non_replaceable_steps,
            non_removable_steps=capabilities.non_removable_steps,
            non_disableable_steps=capabilities.non_disableable_steps,
        )
        return cls(
            descriptors=descriptors,
            languages=languages,
            rules=rules,
            hub=hub or ObservabilityHub.get_instance(),
        )

    @property
    def expressions(self) -> ExpressionService:
        return ExpressionService(self.languages)

    @property
    def capabilities(self) -> CapabilityResolver:
        return CapabilityResolver(self.descriptors, self.rules)

    def emit(self, record: "TraceRecord") -> None:
        """Forward a trace record to the hub if tracing is on."""
        if self.hub.enabled:
            self.hub.emit(record)


def configure_observability(
    schema: "ObservabilitySchema",
    hub: Optional[ObservabilityHub] = None,
) -> ObservabilityHub:
    """Apply an observability configuration block to a hub.

    Sinks attached to the hub earlier are closed and replaced.

    Args:
        schema: The ``observability`` section of a configuration.
        hub: Hub to configure (defaults to the shared instance).

    Returns:
        The configured hub.
    """
    from flowpath.observability import ConsoleSink, FileSink, MemorySink, NullSink

    hub = hub or ObservabilityHub.get_instance()

    sinks: List[Sink] = []
    for sink_config in schema.sinks:
        if sink_config.type == "file" and sink_config.path:
            sinks.append(FileSink(sink_config.path, **sink_config.options))
        elif sink_config.type == "console":
            sinks.append(ConsoleSink(**sink_config.options))
        elif sink_config.type == "memory":
            sinks.append(MemorySink(**sink_config.options))
        elif sink_config.type == "null":
            sinks.append(NullSink())

    hub.configure(level=_LEVEL_MAP.get(schema.level, TraceLevel.OFF), sinks=sinks, replace=True)
    return hub
