"""
Test support for restbinder: a request DSL and a sample API.
"""

from .dsl import HttpRequest, get, post, put, delete
from .sample_api import (
    Cat,
    Dog,
    ErrorBody,
    Item,
    ItemController,
    PetController,
    build_item_controller,
    build_pet_controller,
    build_registry,
    endpoint_for,
    pet_unique_objects,
)

__all__ = [
    "HttpRequest",
    "get",
    "post",
    "put",
    "delete",
    "Item",
    "ErrorBody",
    "Cat",
    "Dog",
    "ItemController",
    "PetController",
    "build_item_controller",
    "build_pet_controller",
    "build_registry",
    "endpoint_for",
    "pet_unique_objects",
]
