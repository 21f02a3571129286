"""
Request resolution and mock synthesis for declaratively described REST endpoints.

Endpoint metadata (controllers, endpoints, typed inputs and outputs) is
compiled into a route table. Incoming requests are matched against it and the
handler's arguments are extracted from path, query, form, body and headers.
Responses can be synthesized from the declared output types alone.
"""

from http import HTTPStatus

from .application import RestBinder
from .config import BinderConfig
from .declarations import load_controllers, load_declarations, load_unique_objects
from .endpoints import (
    ArrayFormat,
    ControllerInformation,
    Endpoint,
    HttpMethodSpec,
    Input,
    InputSource,
    Output,
    UniqueObject,
    UniqueProperty,
)
from .error_models import ErrorResponse
from .exceptions import (
    ConfigurationError,
    DeclarationError,
    DuplicateRouteNameError,
    HandlerNotFoundError,
    MethodNotAllowedError,
    NotFoundError,
    RestBinderError,
    UnknownTypeError,
)
from .faker import ValueFaker
from .mocking import MockSynthesizer
from .models import HTTPMethod, Request, Response
from .registry import TypeRegistry
from .resolver import RequestResolver, ResolvedRequest, parse_array
from .responses import status_for
from .router import Route, RouteTable, build_route_table
from .types import NO_DEFAULT, ScalarKind, Type, TypeHint

__version__ = "0.1.0"
__author__ = "restbinder Contributors"
__license__ = "MIT"

__all__ = [
    "RestBinder",
    "BinderConfig",
    "RouteTable",
    "Route",
    "build_route_table",
    "RequestResolver",
    "ResolvedRequest",
    "parse_array",
    "status_for",
    "MockSynthesizer",
    "ValueFaker",
    "TypeRegistry",
    "Type",
    "TypeHint",
    "ScalarKind",
    "NO_DEFAULT",
    "ArrayFormat",
    "InputSource",
    "Input",
    "Output",
    "HttpMethodSpec",
    "Endpoint",
    "ControllerInformation",
    "UniqueObject",
    "UniqueProperty",
    "load_controllers",
    "load_unique_objects",
    "load_declarations",
    "Request",
    "Response",
    "HTTPMethod",
    "HTTPStatus",
    "ErrorResponse",
    "RestBinderError",
    "ConfigurationError",
    "DuplicateRouteNameError",
    "UnknownTypeError",
    "HandlerNotFoundError",
    "DeclarationError",
    "NotFoundError",
    "MethodNotAllowedError",
]
