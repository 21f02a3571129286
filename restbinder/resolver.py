"""
Request resolution.

Matches a request against the route table and extracts the handler's
arguments from the request, in the order the endpoint declares them.
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from .endpoints import ArrayFormat, ControllerInformation, Endpoint, Input, InputSource
from .models import Request
from .registry import TypeRegistry
from .router import Route, RouteTable
from .types import coerce_value

logger = logging.getLogger(__name__)

_MISSING = object()


def parse_array(value: Any, array_format: Optional[ArrayFormat]) -> Any:
    """Parse a delimited string into a list based on the given array format.

    None and values that are already lists are returned untouched. Without a
    format, the value is wrapped in a single-element list. Empty elements left
    by repeated delimiters are dropped.
    """
    if value is None or isinstance(value, list):
        return value
    if isinstance(value, tuple):
        return list(value)

    if array_format is None:
        return [value]

    items = (item.strip() for item in str(value).split(array_format.delimiter))
    return [item for item in items if item]


class HandlerLocator:
    """Turns a route into a bound handler method.

    A fresh controller instance is built per request with ``factory``.
    """

    def __init__(self, factory: Optional[Callable[[type], Any]] = None):
        self.factory = factory

    def locate(self, route: Route) -> Callable:
        cls = route.handler_class
        instance = self.factory(cls) if self.factory is not None else cls()
        return getattr(instance, route.endpoint.method)


@dataclass
class ResolvedRequest:
    """The controller, endpoint and handler a request was for, plus its arguments."""

    route: Route
    controller: ControllerInformation
    endpoint: Endpoint
    callable_controller: Callable
    callable_inputs: "OrderedDict[str, Any]" = field(default_factory=OrderedDict)
    path_params: Dict[str, str] = field(default_factory=dict)

    def invoke(self) -> Any:
        """Call the handler with the resolved inputs."""
        return self.callable_controller(**self.callable_inputs)


class RequestResolver:
    """Resolves requests against a route table."""

    def __init__(
        self,
        route_table: RouteTable,
        registry: Optional[TypeRegistry] = None,
        locator: Optional[HandlerLocator] = None,
    ):
        self.route_table = route_table
        self.registry = registry or TypeRegistry()
        self.locator = locator or HandlerLocator()

    def resolve(self, request: Request) -> ResolvedRequest:
        """Resolve the controller, endpoint and handler for a request and extract its inputs.

        Raises:
            NotFoundError: if no route matches
            MethodNotAllowedError: if the path matches but the verb does not
        """
        route, path_params = self.route_table.match(
            request.method, request.path, request.scheme, request.host
        )
        logger.debug(f"Matched {request.method.value} {request.path} to route {route.name}")

        return ResolvedRequest(
            route=route,
            controller=route.controller,
            endpoint=route.endpoint,
            callable_controller=self.locator.locate(route),
            callable_inputs=self.get_inputs(route.endpoint, path_params, request),
            path_params=path_params,
        )

    def get_inputs(self, endpoint: Endpoint, path_params: Dict[str, str], request: Request) -> "OrderedDict[str, Any]":
        """Get the inputs for an endpoint from the request, keyed by variable name.

        The inputs are in the order the handler declares them. Arrays are
        parsed based on the declared array format.
        """
        inputs: "OrderedDict[str, Any]" = OrderedDict()
        json_body = _MISSING

        for input_ in endpoint.inputs:
            if input_.source is InputSource.BODY and json_body is _MISSING:
                json_body = request.get_json_body()
                if json_body is not None and not isinstance(json_body, dict):
                    logger.debug(f"Ignoring non-object JSON body for {endpoint.method}")

            raw = self.get_raw_input(input_, request, path_params, json_body)
            if raw is _MISSING:
                if not input_.type_hint.has_default:
                    inputs[input_.variable_name] = None
                    continue
                raw = input_.type_hint.default_value

            if input_.type_hint.is_array_valued:
                raw = parse_array(raw, input_.array_format)

            inputs[input_.variable_name] = coerce_value(raw, input_.type_hint, self.registry)

        return inputs

    def get_raw_input(
        self,
        input_: Input,
        request: Request,
        path_params: Dict[str, str],
        json_body: Any = _MISSING,
    ) -> Any:
        """Get the undecoded value of one input, or the missing marker."""
        source = input_.source
        if source is InputSource.PATH:
            return path_params.get(input_.name, _MISSING)
        if source is InputSource.QUERY:
            return request.query_params.get(input_.name, _MISSING)
        if source is InputSource.FORM:
            return request.form_params.get(input_.name, _MISSING)
        if source is InputSource.BODY:
            if json_body is _MISSING:
                json_body = request.get_json_body()
            if isinstance(json_body, dict):
                return json_body.get(input_.name, _MISSING)
            return _MISSING
        if source is InputSource.HEADER:
            value = request.get_header(input_.name)
            return _MISSING if value is None else value
        return _MISSING
