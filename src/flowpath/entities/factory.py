"""Entity detection for loaded flow documents.

Example:
    >>> entities = create_entities([
    ...     {"route": {"from": {"uri": "timer:tick", "steps": []}}},
    ...     {"errorHandler": {"deadLetterChannel": {"deadLetterUri": "mock:dead"}}},
    ... ])
    >>> [type(entity).__name__ for entity in entities]
    ['RouteEntity', 'ErrorHandlerEntity']
"""

import logging
from typing import Any, Iterable, List, Optional, Tuple, Type

from flowpath.core.context import EditorContext
from flowpath.entities.base import FlowEntity
from flowpath.entities.flows import (
    ErrorHandlerEntity,
    InterceptEntity,
    InterceptFromEntity,
    InterceptSendToEndpointEntity,
    OnCompletionEntity,
    OnExceptionEntity,
    RestConfigurationEntity,
    RestEntity,
    RouteConfigurationEntity,
    RouteEntity,
)

logger = logging.getLogger(__name__)

# Detection order: the first applicable type wins.
ENTITY_TYPES: Tuple[Type[FlowEntity], ...] = (
    RouteEntity,
    RouteConfigurationEntity,
    InterceptEntity,
    InterceptFromEntity,
    InterceptSendToEndpointEntity,
    OnExceptionEntity,
    OnCompletionEntity,
    ErrorHandlerEntity,
    RestConfigurationEntity,
    RestEntity,
)


def entity_type_for(raw: Any) -> Optional[Type[FlowEntity]]:
    """Entity class able to wrap ``raw``, if any."""
    for entity_type in ENTITY_TYPES:
        if entity_type.is_applicable(raw):
            return entity_type
    return None


def create_entity(raw: Any, context: Optional[EditorContext] = None) -> Optional[FlowEntity]:
    """Wrap one root document in its entity.

    Returns:
        The entity, or None (with a warning) for unrecognized shapes.
    """
    entity_type = entity_type_for(raw)
    if entity_type is None:
        keys = list(raw) if isinstance(raw, dict) else type(raw).__name__
        logger.warning("Skipping unrecognized flow document: %s", keys)
        return None
    return entity_type(raw, context)


def create_entities(
    raws: Iterable[Any],
    context: Optional[EditorContext] = None,
) -> List[FlowEntity]:
    """Wrap every recognized root document, skipping the rest."""
    context = context or EditorContext.default()
    entities = []
    for raw in raws:
        entity = create_entity(raw, context)
        if entity is not None:
            entities.append(entity)
    return entities
