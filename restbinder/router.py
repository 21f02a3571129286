"""Route table construction and matching."""

import importlib
import logging
import re
from typing import Dict, Iterable, Iterator, List, Optional, Pattern, Sequence, Tuple
from urllib.parse import unquote, urlsplit

from .endpoints import PLACEHOLDER_PATTERN, ControllerInformation, Endpoint
from .exceptions import (
    DuplicateRouteNameError,
    HandlerNotFoundError,
    MethodNotAllowedError,
    NotFoundError,
)
from .models import HTTPMethod

logger = logging.getLogger(__name__)


def normalize_path(path: str) -> str:
    """Ensure a path starts with a single slash.

    Examples:
        normalize_path("") -> "/"
        normalize_path("users") -> "/users"
        normalize_path("//users") -> "/users"
    """
    if not path:
        return "/"
    return "/" + path.lstrip("/")


def import_class(reference: str) -> type:
    """Import a class from ``"package.module:Class"`` or ``"package.module.Class"``.

    Raises:
        HandlerNotFoundError: if the module or class cannot be found
    """
    if ":" in reference:
        module_name, _, attr_path = reference.partition(":")
    else:
        module_name, _, attr_path = reference.rpartition(".")
    if not module_name or not attr_path:
        raise HandlerNotFoundError(f"Invalid handler class reference: {reference!r}")

    try:
        target = importlib.import_module(module_name)
    except ImportError as e:
        raise HandlerNotFoundError(f"Cannot import module {module_name!r} for {reference!r}: {e}") from e

    for attr in attr_path.split("."):
        try:
            target = getattr(target, attr)
        except AttributeError:
            raise HandlerNotFoundError(f"{reference!r} not found") from None

    if not isinstance(target, type):
        raise HandlerNotFoundError(f"{reference!r} is not a class")
    return target


def endpoint_name(controller: ControllerInformation, endpoint: Endpoint) -> str:
    """Get a friendly, human-readable name for an endpoint's route."""
    friendly_name = endpoint.http_method.friendly_name
    if friendly_name:
        return friendly_name.replace(" ", "_").lower()
    return f"{endpoint.http_method.tag}:{controller.class_name}@{endpoint.method}"


class Route:
    """A compiled route for one endpoint.

    Carries back-references to the controller and endpoint it was built from.
    """

    def __init__(self, name: str, controller: ControllerInformation, endpoint: Endpoint, handler_class: type):
        self.name = name
        self.controller = controller
        self.endpoint = endpoint
        self.handler_class = handler_class
        self.method: HTTPMethod = endpoint.verb

        parts = urlsplit(endpoint.path)
        self.scheme: Optional[str] = parts.scheme.lower() or None
        self.host: Optional[str] = parts.netloc.lower() or None
        self.path = normalize_path(parts.path)
        self.path_pattern = self._compile_path_pattern(self.path)

    @property
    def handler_ref(self) -> str:
        return f"{self.controller.class_name}::{self.endpoint.method}"

    def _compile_path_pattern(self, path: str) -> Pattern:
        """Convert path with {param} syntax to a pattern for matching."""
        pieces = []
        position = 0
        for match in PLACEHOLDER_PATTERN.finditer(path):
            pieces.append(re.escape(path[position:match.start()]))
            pieces.append(f"(?P<{match.group(1)}>[^/]+)")
            position = match.end()
        pieces.append(re.escape(path[position:]))
        return re.compile(f"^{''.join(pieces)}$")

    def match_location(self, path: str, scheme: Optional[str] = None, host: Optional[str] = None) -> Optional[Dict[str, str]]:
        """Match everything except the verb.

        Returns:
            Decoded path parameters, or None if the route does not apply
        """
        if self.scheme is not None and (scheme or "").lower() != self.scheme:
            return None
        if self.host is not None and (host or "").lower() != self.host:
            return None
        match = self.path_pattern.match(path)
        if match is None:
            return None
        return {key: unquote(value) for key, value in match.groupdict().items()}

    def __repr__(self):
        return f"Route({self.name!r}, {self.method.value} {self.path})"


class RouteTable:
    """Immutable index from (verb, path pattern) to endpoints.

    Routes are matched in registration order; the first match wins.
    """

    def __init__(self, routes: Sequence[Route] = ()):
        self._routes: Tuple[Route, ...] = tuple(routes)
        self._by_name: Dict[str, Route] = {}
        for route in self._routes:
            if route.name in self._by_name:
                raise DuplicateRouteNameError(route.name)
            self._by_name[route.name] = route

    @classmethod
    def from_controllers(cls, controllers: Iterable[ControllerInformation]) -> "RouteTable":
        return build_route_table(controllers)

    def get(self, name: str) -> Optional[Route]:
        return self._by_name.get(name)

    def names(self) -> List[str]:
        return [route.name for route in self._routes]

    def routes_for(self, endpoint: Endpoint) -> List[Route]:
        return [route for route in self._routes if route.endpoint is endpoint]

    def match(
        self,
        method: HTTPMethod,
        path: str,
        scheme: Optional[str] = None,
        host: Optional[str] = None,
    ) -> Tuple[Route, Dict[str, str]]:
        """Find the route for a request.

        Raises:
            NotFoundError: if no route matches the path
            MethodNotAllowedError: if routes match the path but not the verb
        """
        allowed: List[str] = []
        for route in self._routes:
            params = route.match_location(path, scheme, host)
            if params is None:
                continue
            if route.method == method:
                return route, params
            if route.method.value not in allowed:
                allowed.append(route.method.value)

        if allowed:
            raise MethodNotAllowedError(method.value, path, allowed)
        raise NotFoundError(method.value, path)

    def __iter__(self) -> Iterator[Route]:
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)


def _handler_class_for(controller: ControllerInformation) -> type:
    if isinstance(controller.handler_class, str):
        return import_class(controller.handler_class)
    return controller.handler_class


def build_route_table(controllers: Iterable[ControllerInformation]) -> RouteTable:
    """Build the route table for a list of controllers.

    Raises:
        DuplicateRouteNameError: if two endpoints resolve to the same name
        HandlerNotFoundError: if a controller class or handler method is missing
    """
    routes: List[Route] = []
    seen: Dict[str, Route] = {}

    for controller in controllers:
        handler_class = _handler_class_for(controller)
        for endpoint in controller.endpoints:
            if not callable(getattr(handler_class, endpoint.method, None)):
                raise HandlerNotFoundError(
                    f"{controller.class_name} has no handler method {endpoint.method!r}"
                )

            name = endpoint_name(controller, endpoint)
            if name in seen:
                raise DuplicateRouteNameError(name)

            route = Route(name, controller, endpoint, handler_class)
            seen[name] = route
            routes.append(route)
            logger.debug(f"Registered route {name}: {route.method.value} {route.path}")

    logger.info(f"Built route table with {len(routes)} routes")
    return RouteTable(routes)
