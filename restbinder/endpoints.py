"""
Endpoint metadata.

These are the structures a metadata provider hands to restbinder: controllers
own endpoints, endpoints own ordered inputs and outputs. All of them are
immutable once built and validate their own structure on construction.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Tuple, Union

from .exceptions import ConfigurationError, DuplicateInputError, PathPlaceholderError
from .models import HTTPMethod
from .types import TypeHint

PLACEHOLDER_PATTERN = re.compile(r"\{(\w+)\}")


class InputSource(Enum):
    """Where in the request an input is read from."""

    PATH = "PATH"
    QUERY = "QUERY"
    FORM = "FORM"
    BODY = "BODY"
    HEADER = "HEADER"


class ArrayFormat(Enum):
    """How an array travels as a single delimited string."""

    CSV = ","
    SSV = " "
    TSV = "\t"
    PIPES = "|"

    @property
    def delimiter(self) -> str:
        return self.value


def _enum_member(enum_cls, value, what: str):
    if value is None or isinstance(value, enum_cls):
        return value
    try:
        return enum_cls[str(value).upper()]
    except KeyError:
        raise ConfigurationError(f"Unknown {what}: {value!r}") from None


@dataclass(frozen=True)
class Input:
    """A declared endpoint argument."""

    name: str
    type_hint: TypeHint
    source: InputSource = InputSource.QUERY
    variable_name: Optional[str] = None
    array_format: Optional[ArrayFormat] = None
    enum: Optional[Tuple[Any, ...]] = None

    def __post_init__(self):
        object.__setattr__(self, "source", _enum_member(InputSource, self.source, "input source"))
        object.__setattr__(self, "array_format", _enum_member(ArrayFormat, self.array_format, "array format"))
        if self.variable_name is None:
            object.__setattr__(self, "variable_name", self.name)
        if self.enum is not None:
            object.__setattr__(self, "enum", tuple(self.enum))


@dataclass(frozen=True)
class Output:
    """A declared result shape and the status code it is sent with."""

    type_hint: TypeHint
    status_code: int = 200

    def __post_init__(self):
        if not 100 <= int(self.status_code) <= 599:
            raise ConfigurationError(f"Invalid HTTP status code: {self.status_code}")


@dataclass(frozen=True)
class HttpMethodSpec:
    """HTTP verb, path template and optional friendly name of an endpoint."""

    verb: HTTPMethod
    path: str
    friendly_name: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.verb, HTTPMethod):
            try:
                object.__setattr__(self, "verb", HTTPMethod(str(self.verb).upper()))
            except ValueError:
                raise ConfigurationError(f"Unsupported HTTP method: {self.verb!r}") from None

    @property
    def tag(self) -> str:
        return self.verb.value

    def placeholders(self) -> Tuple[str, ...]:
        return tuple(PLACEHOLDER_PATTERN.findall(self.path))


@dataclass(frozen=True)
class Endpoint:
    """One HTTP operation and the handler method that implements it."""

    http_method: HttpMethodSpec
    method: str
    inputs: Tuple[Input, ...] = ()
    outputs: Tuple[Output, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "inputs", tuple(self.inputs))
        object.__setattr__(self, "outputs", tuple(self.outputs))
        self._check_inputs()
        self._check_placeholders()

    def _check_inputs(self):
        seen = set()
        for input_ in self.inputs:
            if input_.variable_name in seen:
                raise DuplicateInputError(
                    f"Input {input_.variable_name!r} declared twice on {self.method}"
                )
            seen.add(input_.variable_name)

    def _check_placeholders(self):
        placeholders = self.http_method.placeholders()
        if len(set(placeholders)) != len(placeholders):
            raise PathPlaceholderError(f"Repeated placeholder in path {self.http_method.path}")

        path_inputs = [i.name for i in self.inputs if i.source is InputSource.PATH]
        if len(set(path_inputs)) != len(path_inputs):
            raise PathPlaceholderError(f"PATH input declared twice on {self.method}")

        missing = set(path_inputs) - set(placeholders)
        if missing:
            raise PathPlaceholderError(
                f"PATH inputs {sorted(missing)} of {self.method} have no placeholder in {self.http_method.path}"
            )
        unbound = set(placeholders) - set(path_inputs)
        if unbound:
            raise PathPlaceholderError(
                f"Placeholders {sorted(unbound)} in {self.http_method.path} have no PATH input on {self.method}"
            )

    @property
    def path(self) -> str:
        return self.http_method.path

    @property
    def verb(self) -> HTTPMethod:
        return self.http_method.verb


def _qualified_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


@dataclass(frozen=True)
class ControllerInformation:
    """A group of endpoints implemented by methods of one class.

    ``handler_class`` is either the class itself or an import string
    (``"package.module:Class"`` or ``"package.module.Class"``).
    """

    handler_class: Union[type, str]
    endpoints: Tuple[Endpoint, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "endpoints", tuple(self.endpoints))

    @property
    def class_name(self) -> str:
        """Fully qualified dotted name of the controller class."""
        if isinstance(self.handler_class, str):
            return self.handler_class.replace(":", ".")
        return _qualified_name(self.handler_class)


@dataclass(frozen=True)
class UniqueProperty:
    """A property of a unique object and the type it holds."""

    name: str
    type_hint: TypeHint


@dataclass(frozen=True)
class UniqueObject:
    """A named type whose listed properties are re-mocked after generic faking."""

    unique_name: str
    properties: Tuple[UniqueProperty, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "properties", tuple(self.properties))
