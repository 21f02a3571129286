"""
Declarative endpoint metadata.

Loads controllers and unique objects from plain data (for example a JSON
document) and validates it with Pydantic before building the immutable
metadata classes.

Example document::

    {
        "controllers": [{
            "class": "myapp.items:ItemController",
            "endpoints": [{
                "http_method": "GET",
                "path": "/items/{id}",
                "handler": "get_item",
                "inputs": [{"name": "id", "in": "PATH", "type": "int"}],
                "outputs": [{"type": "Item", "status_code": 200}]
            }]
        }],
        "unique_objects": []
    }
"""

import json
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .endpoints import (
    ControllerInformation,
    Endpoint,
    HttpMethodSpec,
    Input,
    Output,
    UniqueObject,
    UniqueProperty,
)
from .exceptions import DeclarationError
from .types import NO_DEFAULT, Type, TypeHint


class TypeHintDeclaration(BaseModel):
    """A type hint: ``"int"``, ``["int", "null"]`` or ``{"types": [...], "default": ...}``."""

    model_config = ConfigDict(extra="forbid")

    types: List[Optional[str]] = Field(default_factory=list)
    default: Any = None

    @model_validator(mode="before")
    @classmethod
    def expand_shorthand(cls, data: Any) -> Any:
        if data is None or isinstance(data, str):
            return {"types": [data]}
        if isinstance(data, list):
            return {"types": data}
        return data

    def to_type_hint(self) -> TypeHint:
        default = self.default if "default" in self.model_fields_set else NO_DEFAULT
        return TypeHint(tuple(Type.parse(t) for t in self.types), default)


class InputDeclaration(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str
    variable_name: Optional[str] = None
    source: str = Field("QUERY", alias="in")
    array_format: Optional[str] = None
    type_hint: TypeHintDeclaration = Field(alias="type")
    enum: Optional[List[Any]] = None

    @field_validator("source", "array_format")
    @classmethod
    def upper_case(cls, value: Optional[str]) -> Optional[str]:
        return value.upper() if value is not None else None

    def to_input(self) -> Input:
        return Input(
            name=self.name,
            variable_name=self.variable_name,
            source=self.source,
            array_format=self.array_format,
            type_hint=self.type_hint.to_type_hint(),
            enum=tuple(self.enum) if self.enum is not None else None,
        )


class OutputDeclaration(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    type_hint: TypeHintDeclaration = Field(alias="type")
    status_code: int = 200

    def to_output(self) -> Output:
        return Output(type_hint=self.type_hint.to_type_hint(), status_code=self.status_code)


class EndpointDeclaration(BaseModel):
    model_config = ConfigDict(extra="forbid")

    http_method: str
    path: str
    handler: str
    friendly_name: Optional[str] = None
    inputs: List[InputDeclaration] = Field(default_factory=list)
    outputs: List[OutputDeclaration] = Field(default_factory=list)

    def to_endpoint(self) -> Endpoint:
        return Endpoint(
            http_method=HttpMethodSpec(self.http_method, self.path, self.friendly_name),
            method=self.handler,
            inputs=tuple(i.to_input() for i in self.inputs),
            outputs=tuple(o.to_output() for o in self.outputs),
        )


class ControllerDeclaration(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    handler_class: str = Field(alias="class")
    endpoints: List[EndpointDeclaration] = Field(default_factory=list)

    def to_controller(self) -> ControllerInformation:
        return ControllerInformation(
            handler_class=self.handler_class,
            endpoints=tuple(e.to_endpoint() for e in self.endpoints),
        )


class UniquePropertyDeclaration(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str
    type_hint: TypeHintDeclaration = Field(alias="type")


class UniqueObjectDeclaration(BaseModel):
    model_config = ConfigDict(extra="forbid")

    unique_name: str
    properties: List[UniquePropertyDeclaration] = Field(default_factory=list)

    def to_unique_object(self) -> UniqueObject:
        return UniqueObject(
            unique_name=self.unique_name,
            properties=tuple(UniqueProperty(p.name, p.type_hint.to_type_hint()) for p in self.properties),
        )


def load_controllers(data: Iterable[Mapping[str, Any]]) -> List[ControllerInformation]:
    """Build controllers from declarations.

    Raises:
        DeclarationError: if the data does not match the declaration schema
        ConfigurationError: if the declared metadata is structurally invalid
    """
    try:
        declarations = [ControllerDeclaration.model_validate(item) for item in data]
    except ValidationError as e:
        raise DeclarationError(f"Invalid controller declaration: {e}", e) from e
    return [declaration.to_controller() for declaration in declarations]


def load_unique_objects(data: Iterable[Mapping[str, Any]]) -> List[UniqueObject]:
    """Build unique objects from declarations."""
    try:
        declarations = [UniqueObjectDeclaration.model_validate(item) for item in data]
    except ValidationError as e:
        raise DeclarationError(f"Invalid unique object declaration: {e}", e) from e
    return [declaration.to_unique_object() for declaration in declarations]


def load_declarations(source: Union[str, Path, Mapping[str, Any]]) -> Tuple[List[ControllerInformation], List[UniqueObject]]:
    """Load controllers and unique objects from a JSON file or an already parsed document."""
    if isinstance(source, (str, Path)):
        try:
            document = json.loads(Path(source).read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise DeclarationError(f"Invalid JSON in {source}: {e}", e) from e
    else:
        document = source

    if not isinstance(document, Mapping):
        raise DeclarationError("Declaration document must be a JSON object")

    controllers = load_controllers(document.get("controllers", []))
    unique_objects = load_unique_objects(document.get("unique_objects", []))
    return controllers, unique_objects
