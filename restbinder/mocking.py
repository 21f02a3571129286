"""
Mock synthesis.

Generates responses and requests for an endpoint from its declared types
alone, without calling the handler. Random choices go through an injectable
``random.Random`` so tests can make them deterministic.
"""

import dataclasses
import json
import logging
import random
from collections import OrderedDict
from http import HTTPStatus
from typing import Any, Iterable, Optional, Tuple
from urllib.parse import quote, urlsplit

from .content_renderers import to_jsonable
from .endpoints import ArrayFormat, Endpoint, Input, InputSource, Output, UniqueObject
from .faker import ValueFaker
from .models import Request
from .registry import TypeRegistry, is_pydantic_model
from .router import normalize_path
from .types import Type, TypeHint

logger = logging.getLogger(__name__)


def _has_property(instance: Any, name: str) -> bool:
    if isinstance(instance, dict):
        return name in instance
    return hasattr(instance, name)


def _set_property(instance: Any, name: str, value: Any) -> Any:
    """Set a property and return the updated instance, a copy for frozen types."""
    if isinstance(instance, dict):
        instance[name] = value
        return instance
    if is_pydantic_model(type(instance)):
        return instance.model_copy(update={name: value})
    try:
        setattr(instance, name, value)
    except dataclasses.FrozenInstanceError:
        return dataclasses.replace(instance, **{name: value})
    return instance


class MockSynthesizer:
    """Builds synthetic payloads and requests from endpoint metadata."""

    def __init__(
        self,
        registry: Optional[TypeRegistry] = None,
        faker: Optional[ValueFaker] = None,
        unique_objects: Iterable[UniqueObject] = (),
        rng: Optional[random.Random] = None,
        max_items: int = 10,
    ):
        self.registry = registry or TypeRegistry()
        self.rng = rng or random.Random()
        self.max_items = max_items
        self.faker = faker or ValueFaker(self.registry, self.rng, max_items=max_items)
        self.unique_objects: Tuple[UniqueObject, ...] = tuple(unique_objects)

    def mock_response(self, endpoint: Endpoint, preferred_status: int = HTTPStatus.OK) -> Tuple[Any, int]:
        """Get a mock payload and status code for an endpoint.

        Prefers the output declared for ``preferred_status``; otherwise one of
        the outputs is picked at random. Endpoints without outputs mock as an
        empty 204.
        """
        if not endpoint.outputs:
            return None, HTTPStatus.NO_CONTENT.value

        for output in endpoint.outputs:
            if output.status_code == preferred_status:
                return self.mock_output(output)

        output = self.rng.choice(endpoint.outputs)
        logger.debug(f"No output for {preferred_status} on {endpoint.method}, picked {output.status_code}")
        return self.mock_output(output)

    def mock_output(self, output: Output) -> Tuple[Any, int]:
        return self.mock_type_hint(output.type_hint), output.status_code

    def mock_type_hint(self, type_hint: TypeHint) -> Any:
        """Mock the first non-null alternative of a type hint."""
        type_ = type_hint.first_concrete()
        if type_ is None:
            return None
        return self.mock_alternative(type_)

    def mock_alternative(self, type_: Type, min_items: int = 0, max_items: Optional[int] = None) -> Any:
        if type_.is_null:
            return None
        if type_.is_array:
            upper = self.max_items if max_items is None else max_items
            count = self.rng.randint(min_items, max(upper, min_items))
            return [self.mock_type(type_.generic_type) for _ in range(count)]
        return self.mock_type(type_.type)

    def mock_type(self, type_name: Optional[str]) -> Any:
        """Mock a single instance of a type, then apply its unique-object override."""
        mock = self.faker.fake(type_name)

        for unique_object in self.unique_objects:
            if unique_object.unique_name != type_name:
                continue
            for prop in unique_object.properties:
                if _has_property(mock, prop.name):
                    mock = _set_property(mock, prop.name, self._mock_property(prop.type_hint))
                    break
            break

        return mock

    def _mock_property(self, type_hint: TypeHint) -> Any:
        if not type_hint.types:
            return type_hint.default_value
        return self.mock_type_hint(TypeHint(type_hint.types[:1]))

    def mock_inputs(self, endpoint: Endpoint) -> "OrderedDict[str, Any]":
        """Get mocked values for an endpoint's inputs, keyed by variable name in declared order."""
        mocked: "OrderedDict[str, Any]" = OrderedDict()
        for input_ in endpoint.inputs:
            mocked[input_.variable_name] = self.mock_input(input_)
        return mocked

    def mock_input(self, input_: Input) -> Any:
        type_hint = input_.type_hint
        if type_hint.has_default:
            return type_hint.default_value
        if input_.enum:
            return self.rng.choice(input_.enum)

        # Without a delimiter, a single wire string carries one element
        min_items, max_items = 0, None
        if input_.source in (InputSource.PATH, InputSource.HEADER) and input_.array_format is None:
            min_items, max_items = 1, 1

        if input_.source is InputSource.PATH:
            # A path segment cannot be empty
            candidates = [t for t in type_hint.types if not t.is_null]
            if not candidates:
                return None
            return self.mock_alternative(self.rng.choice(candidates), min_items=1, max_items=max_items)

        type_ = type_hint.pick_random(self.rng)
        if type_ is None:
            return None
        return self.mock_alternative(type_, min_items=min_items, max_items=max_items)

    def mock_request(self, endpoint: Endpoint) -> Request:
        """Create a mock request for an endpoint."""
        mocked = self.mock_inputs(endpoint)

        parts = urlsplit(endpoint.path)
        path = normalize_path(parts.path)
        request = Request(
            method=endpoint.verb,
            path=path,
            scheme=parts.scheme or "http",
            host=parts.netloc or None,
        )

        body = {}
        for input_ in endpoint.inputs:
            value = mocked[input_.variable_name]
            source = input_.source

            if source is InputSource.BODY:
                body[input_.name] = to_jsonable(value)
                continue
            if value is None:
                continue

            if source is InputSource.PATH:
                path = path.replace("{" + input_.name + "}", quote(_wire_string(value, input_), safe=""))
            elif source is InputSource.QUERY:
                request.query_params[input_.name] = _wire_value(value)
            elif source is InputSource.FORM:
                request.form_params[input_.name] = _wire_value(value)
            elif source is InputSource.HEADER:
                request.headers[input_.name] = _wire_string(value, input_)

        request.path = path
        if body:
            request.body = json.dumps(body)
            request.headers["Content-Type"] = "application/json"
        elif request.form_params:
            request.headers["Content-Type"] = "application/x-www-form-urlencoded"

        logger.debug(f"Mocked request {request.method.value} {request.path} for {endpoint.method}")
        return request


def _wire_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(to_jsonable(value))


def _wire_value(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return [_wire_scalar(item) for item in value]
    return _wire_scalar(value)


def _wire_string(value: Any, input_: Input) -> str:
    if isinstance(value, (list, tuple)):
        array_format = input_.array_format or ArrayFormat.CSV
        return array_format.delimiter.join(_wire_scalar(item) for item in value)
    return _wire_scalar(value)
