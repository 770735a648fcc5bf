"""Pydantic validation models for flowpath configuration.

The configuration extends or overrides the built-in catalog: processor
kinds and their step-properties descriptors, expression languages and
the capability allow/deny lists. It also carries logging and
observability settings.
"""

from typing import Dict, List, Any, Optional, Literal
from pydantic import BaseModel, Field, field_validator, model_validator


class SinkSchema(BaseModel):
    """Configuration for an observability sink.

    Attributes:
        type: Sink type (file, console, memory, null).
        path: File path for file sinks.
        options: Additional sink-specific options.
    """

    type: Literal["file", "console", "memory", "null"] = "file"
    path: Optional[str] = None
    options: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def validate_file_sink_has_path(self) -> "SinkSchema":
        """Validate that file sinks have a path."""
        if self.type == "file" and not self.path:
            raise ValueError("File sink requires 'path' to be set")
        return self


class ObservabilitySchema(BaseModel):
    """Configuration for observability/tracing.

    Attributes:
        level: Trace level (off, minimal, normal, verbose).
        sinks: List of sink configurations.
    """

    level: Literal["off", "minimal", "normal", "verbose"] = "off"
    sinks: List[SinkSchema] = Field(default_factory=list)


class LoggingSchema(BaseModel):
    """Logging configuration applied by the CLI.

    Attributes:
        level: Standard library logging level name.
        format: Log record format string.
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: str = "%(asctime)s %(name)s %(levelname)s %(message)s"

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        """Accept lowercase level names."""
        if isinstance(v, str):
            return v.upper()
        return v


class StepPropertySchema(BaseModel):
    """A child-holding property of a processor kind.

    Attributes:
        name: Property key in the processor definition.
        type: Storage shape (single-clause, array, branch).
    """

    name: str = Field(min_length=1)
    type: Literal["single-clause", "array", "branch"]


class ProcessorSchema(BaseModel):
    """Catalog entry for a processor kind.

    Attributes:
        title: Display title.
        icon: Icon identifier.
        description: Tooltip description.
        steps_properties: Child-holding properties, in display order.
    """

    title: Optional[str] = None
    icon: Optional[str] = None
    description: Optional[str] = None
    steps_properties: List[StepPropertySchema] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_unique_properties(self) -> "ProcessorSchema":
        """Validate that descriptor names are unique per processor."""
        names = [prop.name for prop in self.steps_properties]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate steps properties: {duplicates}")
        return self


class LanguageSchema(BaseModel):
    """Catalog entry for an expression language.

    Attributes:
        model_name: Key used for the language in flow documents
            (defaults to the language id).
        title: Display title.
        description: Short description.
    """

    model_name: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None

    @field_validator("model_name")
    @classmethod
    def validate_model_name(cls, v: Optional[str]) -> Optional[str]:
        """Reject empty model names."""
        if v is not None and not v.strip():
            raise ValueError("model_name must not be empty")
        return v


class CapabilitiesSchema(BaseModel):
    """Overrides for the capability allow/deny lists.

    Lists left unset keep their built-in defaults.
    """

    disabled_sibling_steps: Optional[List[str]] = None
    non_replaceable_steps: Optional[List[str]] = None
    non_removable_steps: Optional[List[str]] = None
    non_disableable_steps: Optional[List[str]] = None


class ConfigSchema(BaseModel):
    """Root configuration schema.

    Attributes:
        version: Configuration file version (currently "1.0").
        processors: Processor kinds added to or replacing built-in ones.
        languages: Expression languages added to or replacing built-in ones.
        capabilities: Capability list overrides.
        logging: Logging settings.
        observability: Tracing settings.
    """

    version: str = "1.0"
    processors: Dict[str, ProcessorSchema] = Field(default_factory=dict)
    languages: Dict[str, LanguageSchema] = Field(default_factory=dict)
    capabilities: CapabilitiesSchema = Field(default_factory=CapabilitiesSchema)
    logging: LoggingSchema = Field(default_factory=LoggingSchema)
    observability: ObservabilitySchema = Field(default_factory=ObservabilitySchema)

    @field_validator("version")
    @classmethod
    def validate_version(cls, v: str) -> str:
        """Validate configuration version."""
        supported = {"1.0"}
        if v not in supported:
            raise ValueError(
                f"Unsupported config version: {v}. Supported: {supported}"
            )
        return v
