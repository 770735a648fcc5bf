"""Top-level flow entities and their detection."""

from flowpath.entities.base import FlowEntity, random_id
from flowpath.entities.flows import (
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
from flowpath.entities.factory import (
    ENTITY_TYPES,
    entity_type_for,
    create_entity,
    create_entities,
)

__all__ = [
    "FlowEntity",
    "random_id",
    "RouteEntity",
    "RouteConfigurationEntity",
    "InterceptEntity",
    "InterceptFromEntity",
    "InterceptSendToEndpointEntity",
    "OnExceptionEntity",
    "OnCompletionEntity",
    "ErrorHandlerEntity",
    "RestConfigurationEntity",
    "RestEntity",
    "ENTITY_TYPES",
    "entity_type_for",
    "create_entity",
    "create_entities",
]
