"""Configuration system for flowpath.

Provides YAML-based declarative editor configuration with:
- Pydantic schema validation
- Environment variable substitution (${VAR} and ${VAR:-default})
- Conversion into an EditorContext (see flowpath.core.context)

Example YAML config:
    version: "1.0"
    processors:
      myProcessor:
        title: My processor
        steps_properties:
          - name: steps
            type: branch
    languages:
      mylang:
        model_name: mylang
    capabilities:
      non_removable_steps: [from, route, myProcessor]
    logging:
      level: INFO
    observability:
      level: normal
      sinks:
        - type: file
          path: "${LOG_DIR:-./logs}/trace.jsonl"

Example usage:
    >>> from flowpath.config import load_yaml_config
    >>> from flowpath.core.context import EditorContext
    >>> context = EditorContext.from_config(load_yaml_config("flowpath.yaml"))
"""

from flowpath.config.schema import (
    ConfigSchema,
    ProcessorSchema,
    StepPropertySchema,
    LanguageSchema,
    CapabilitiesSchema,
    LoggingSchema,
    ObservabilitySchema,
    SinkSchema,
)
from flowpath.config.loader import (
    load_yaml_config,
    load_yaml_string,
    substitute_env_vars,
    config_to_dict,
    ConfigLoadError,
)

__all__ = [
    # Schema models
    "ConfigSchema",
    "ProcessorSchema",
    "StepPropertySchema",
    "LanguageSchema",
    "CapabilitiesSchema",
    "LoggingSchema",
    "ObservabilitySchema",
    "SinkSchema",
    # Loader
    "load_yaml_config",
    "load_yaml_string",
    "substitute_env_vars",
    "config_to_dict",
    "ConfigLoadError",
]
