"""
A small sample API used across the test suite.
"""

from dataclasses import dataclass
from typing import List, Optional

from pydantic import BaseModel

from restbinder.endpoints import (
    ControllerInformation,
    Endpoint,
    HttpMethodSpec,
    Input,
    Output,
    UniqueObject,
    UniqueProperty,
)
from restbinder.registry import TypeRegistry
from restbinder.types import TypeHint


class Item(BaseModel):
    id: int
    name: str
    tags: List[str] = []
    price: Optional[float] = None


class ErrorBody(BaseModel):
    error: str
    code: int


class Dog(BaseModel):
    name: str
    kind: str = "animal"
    good: bool = True


@dataclass
class Cat:
    name: str
    lives: int


class ItemController:
    def get_item(self, id):
        if id <= 0:
            return ErrorBody(error="not found", code=404)
        return Item(id=id, name=f"item-{id}")

    def list_items(self, tags, limit, sort):
        return [Item(id=i + 1, name=tag) for i, tag in enumerate(tags or [])][:limit]

    def create_item(self, name, price, tags, token):
        return Item(id=1, name=name, price=price, tags=tags or [])

    def delete_item(self, id):
        return None

    def related_items(self, id, ids, verbose):
        return None


class PetController:
    def get_pet(self, name):
        return None

    def adopt(self, name, notes):
        return None


def build_registry() -> TypeRegistry:
    registry = TypeRegistry()
    registry.register(Item)
    registry.register(ErrorBody)
    registry.register(Dog)
    registry.register(Cat)
    return registry


def build_item_controller(handler_class=ItemController) -> ControllerInformation:
    return ControllerInformation(
        handler_class=handler_class,
        endpoints=(
            Endpoint(
                http_method=HttpMethodSpec("GET", "/items/{id}"),
                method="get_item",
                inputs=(Input("id", TypeHint.of("int"), source="PATH"),),
                outputs=(
                    Output(TypeHint.of("Item"), 200),
                    Output(TypeHint.of("ErrorBody"), 404),
                ),
            ),
            Endpoint(
                http_method=HttpMethodSpec("GET", "/items"),
                method="list_items",
                inputs=(
                    Input("tags", TypeHint.of("string[]"), source="QUERY", array_format="CSV"),
                    Input("limit", TypeHint.of("int", default=10), source="QUERY"),
                    Input("sort", TypeHint.of("string", "null"), source="QUERY", enum=("asc", "desc")),
                ),
                outputs=(Output(TypeHint.of("Item[]"), 200),),
            ),
            Endpoint(
                http_method=HttpMethodSpec("POST", "/items", friendly_name="Create Item"),
                method="create_item",
                inputs=(
                    Input("name", TypeHint.of("string"), source="BODY"),
                    Input("price", TypeHint.of("float"), source="BODY"),
                    Input("tags", TypeHint.of("string[]"), source="BODY"),
                    Input("X-Token", TypeHint.of("string"), source="HEADER", variable_name="token"),
                ),
                outputs=(
                    Output(TypeHint.of("Item"), 201),
                    Output(TypeHint.of("ErrorBody"), 400),
                ),
            ),
            Endpoint(
                http_method=HttpMethodSpec("DELETE", "/items/{id}"),
                method="delete_item",
                inputs=(Input("id", TypeHint.of("int"), source="PATH"),),
            ),
            Endpoint(
                http_method=HttpMethodSpec("GET", "/items/{id}/related"),
                method="related_items",
                inputs=(
                    Input("id", TypeHint.of("int"), source="PATH"),
                    Input("X-Ids", TypeHint.of("int[]"), source="HEADER", array_format="PIPES", variable_name="ids"),
                    Input("verbose", TypeHint.of("bool"), source="QUERY"),
                ),
                outputs=(Output(TypeHint.of("Item[]"), 200),),
            ),
        ),
    )


def build_pet_controller() -> ControllerInformation:
    return ControllerInformation(
        handler_class=PetController,
        endpoints=(
            Endpoint(
                http_method=HttpMethodSpec("GET", "https://pets.example.com/pets/{name}"),
                method="get_pet",
                inputs=(Input("name", TypeHint.of("string"), source="PATH"),),
                outputs=(
                    Output(TypeHint.of("Dog"), 200),
                    Output(TypeHint.of("Cat"), 203),
                ),
            ),
            Endpoint(
                http_method=HttpMethodSpec("POST", "/pets/{name}/adopt"),
                method="adopt",
                inputs=(
                    Input("name", TypeHint.of("string"), source="PATH"),
                    Input("notes", TypeHint.of("string[]"), source="FORM", array_format="SSV"),
                ),
            ),
        ),
    )


def pet_unique_objects():
    return [
        UniqueObject(
            "Dog",
            (
                UniqueProperty("breed", TypeHint.of("string")),
                UniqueProperty("kind", TypeHint.of("int")),
                UniqueProperty("name", TypeHint.of("int")),
            ),
        ),
    ]


def endpoint_for(controller: ControllerInformation, method_name: str) -> Endpoint:
    """Get the endpoint implemented by a handler method."""
    for endpoint in controller.endpoints:
        if endpoint.method == method_name:
            return endpoint
    raise LookupError(method_name)
