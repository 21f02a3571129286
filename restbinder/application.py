"""
Main engine class for restbinder.
"""

import logging
import random
from http import HTTPStatus
from typing import Any, Callable, Iterable, Optional, Tuple

from .config import BinderConfig
from .content_renderers import JSONRenderer
from .endpoints import ControllerInformation, Endpoint, UniqueObject
from .error_models import ErrorResponse
from .exceptions import MethodNotAllowedError, NotFoundError, ResolutionError, UnknownTypeError
from .faker import ValueFaker
from .mocking import MockSynthesizer
from .models import Request, Response
from .registry import TypeRegistry
from .resolver import HandlerLocator, RequestResolver, ResolvedRequest
from .responses import status_for
from .router import RouteTable, build_route_table

# Set up logger for this module
logger = logging.getLogger(__name__)


class RestBinder:
    """Resolves requests to handlers and mocks responses from endpoint metadata.

    Construct it once at startup and share it; it holds no per-request state.
    Configuration errors in the metadata are raised from the constructor.
    """

    def __init__(
        self,
        controllers: Iterable[ControllerInformation] = (),
        registry: Optional[TypeRegistry] = None,
        unique_objects: Iterable[UniqueObject] = (),
        config: Optional[BinderConfig] = None,
        rng: Optional[random.Random] = None,
        faker: Optional[ValueFaker] = None,
        controller_factory: Optional[Callable[[type], Any]] = None,
    ):
        self.config = config or BinderConfig()
        self.registry = registry or TypeRegistry()
        self.rng = rng or random.Random(self.config.mock_seed)
        self.unique_objects: Tuple[UniqueObject, ...] = tuple(unique_objects)

        self.route_table: RouteTable = build_route_table(controllers)
        self._validate_types()

        self.faker = faker or ValueFaker(
            self.registry,
            self.rng,
            max_items=self.config.max_mock_items,
            max_depth=self.config.max_mock_depth,
        )
        self.resolver = RequestResolver(self.route_table, self.registry, HandlerLocator(controller_factory))
        self.mocker = MockSynthesizer(
            self.registry,
            self.faker,
            self.unique_objects,
            self.rng,
            max_items=self.config.max_mock_items,
        )
        self.renderer = JSONRenderer()

    def _validate_types(self):
        for route in self.route_table:
            self.registry.validate_endpoint(route.endpoint)
        for unique_object in self.unique_objects:
            for prop in unique_object.properties:
                for type_name in prop.type_hint.type_names():
                    if not self.registry.is_known(type_name):
                        raise UnknownTypeError(type_name, f"property {prop.name} of {unique_object.unique_name}")

    def resolve_request(self, request: Request) -> ResolvedRequest:
        """Resolve the controller, endpoint and handler the request was for, with its inputs."""
        return self.resolver.resolve(request)

    def perform_request(
        self,
        request: Request,
        allow_mock_response: Optional[bool] = None,
        force_mock_response: Optional[bool] = None,
    ) -> Response:
        """Resolve the request, call its handler and encode the result as JSON.

        Args:
            request: The request to perform
            allow_mock_response: Mock the response if the handler returns None
            force_mock_response: Mock the response without calling the handler

        Raises:
            NotFoundError: if no route matches
            MethodNotAllowedError: if the path matches but the verb does not
        """
        if allow_mock_response is None:
            allow_mock_response = self.config.allow_mock_response
        if force_mock_response is None:
            force_mock_response = self.config.force_mock_response

        resolved = self.resolve_request(request)
        endpoint = resolved.endpoint

        response_data = None
        if not force_mock_response:
            response_data = resolved.invoke()

        if isinstance(response_data, Response):
            return response_data

        if force_mock_response or (allow_mock_response and response_data is None):
            logger.debug(f"Mocking response for {request.method.value} {request.path}")
            payload, status_code = self.mock_response(endpoint)
            return self._render(payload, status_code)

        return self._render(response_data, self.status_for(endpoint, response_data))

    def execute(self, request: Request) -> Response:
        """Perform a request, turning resolution failures and handler errors into error responses."""
        try:
            return self.perform_request(request)
        except MethodNotAllowedError as e:
            logger.warning(str(e))
            response = self._error_response(HTTPStatus.METHOD_NOT_ALLOWED, e)
            response.headers["Allow"] = ", ".join(e.allowed_methods)
            return response
        except NotFoundError as e:
            logger.warning(str(e))
            return self._error_response(HTTPStatus.NOT_FOUND, e)
        except Exception as e:
            logger.error(f"Unhandled exception processing {request.method.value} {request.path}: {e}")
            return Response(
                HTTPStatus.INTERNAL_SERVER_ERROR.value,
                ErrorResponse(error="Internal server error").model_dump_json(),
                content_type="application/json",
            )

    def status_for(self, endpoint: Endpoint, response_data: Any) -> int:
        return status_for(endpoint, response_data, self.registry)

    def mock_response(self, endpoint: Endpoint, preferred_status: int = HTTPStatus.OK) -> Tuple[Any, int]:
        return self.mocker.mock_response(endpoint, preferred_status)

    def mock_inputs(self, endpoint: Endpoint):
        return self.mocker.mock_inputs(endpoint)

    def mock_request(self, endpoint: Endpoint) -> Request:
        return self.mocker.mock_request(endpoint)

    def _render(self, payload: Any, status_code: int) -> Response:
        if status_code == HTTPStatus.NO_CONTENT:
            return Response(HTTPStatus.NO_CONTENT.value)
        if payload is None:
            return Response(status_code)
        return Response(status_code, self.renderer.render(payload), content_type=self.renderer.media_type)

    def _error_response(self, status: HTTPStatus, error: ResolutionError) -> Response:
        body = ErrorResponse(error=str(error), method=error.method, path=error.path)
        return Response(status.value, body.model_dump_json(), content_type="application/json")
