"""Concrete flow entities, one per top-level kind of a flow file."""

from typing import Any, Dict, Optional

from flowpath.core.lookup import component_name_from_uri
from flowpath.entities.base import FlowEntity


class RouteEntity(FlowEntity):
    """A route: one ``from`` consumer followed by its steps.

    Example:
        >>> route = RouteEntity({"route": {"from": {"uri": "timer:tick", "steps": []}}})
        >>> route.root_uri
        'timer:tick'
    """

    ROOT_SEGMENT = "route"

    @classmethod
    def default_definition(cls) -> Dict[str, Any]:
        return {"from": {"uri": "", "steps": []}}

    @property
    def root_uri(self) -> Optional[str]:
        """URI of the route's consumer, if set."""
        uri = self.get("route.from.uri")
        return uri if isinstance(uri, str) and uri else None

    @root_uri.setter
    def root_uri(self, uri: str) -> None:
        self.update("route.from.uri", uri)

    @property
    def component_name(self) -> Optional[str]:
        return component_name_from_uri(self.root_uri)


class RouteConfigurationEntity(FlowEntity):
    """Shared error handling and interceptors for a set of routes."""

    ROOT_SEGMENT = "routeConfiguration"


class InterceptEntity(FlowEntity):
    ROOT_SEGMENT = "intercept"

    @classmethod
    def default_definition(cls) -> Dict[str, Any]:
        return {"steps": []}


class InterceptFromEntity(FlowEntity):
    ROOT_SEGMENT = "interceptFrom"

    @classmethod
    def default_definition(cls) -> Dict[str, Any]:
        return {"steps": []}


class InterceptSendToEndpointEntity(FlowEntity):
    ROOT_SEGMENT = "interceptSendToEndpoint"

    @classmethod
    def default_definition(cls) -> Dict[str, Any]:
        return {"uri": "", "steps": []}


class OnExceptionEntity(FlowEntity):
    ROOT_SEGMENT = "onException"

    @classmethod
    def default_definition(cls) -> Dict[str, Any]:
        return {"exception": [], "steps": []}


class OnCompletionEntity(FlowEntity):
    ROOT_SEGMENT = "onCompletion"

    @classmethod
    def default_definition(cls) -> Dict[str, Any]:
        return {"steps": []}


class ErrorHandlerEntity(FlowEntity):
    """Flow-wide error handler.

    A singleton configuration object: its properties can be updated but
    it holds no steps to insert, remove or move.
    """

    ROOT_SEGMENT = "errorHandler"
    STORES_ID = False
    EDITABLE = False


class RestConfigurationEntity(FlowEntity):
    """Flow-wide REST configuration (singleton, no steps)."""

    ROOT_SEGMENT = "restConfiguration"
    STORES_ID = False
    EDITABLE = False


class RestEntity(FlowEntity):
    """REST service whose verbs (``get``, ``post``...) are clause lists."""

    ROOT_SEGMENT = "rest"
