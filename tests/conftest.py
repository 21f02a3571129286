"""
Shared pytest fixtures.
"""

import random

import pytest

from restbinder import BinderConfig, RestBinder
from restbinder.router import build_route_table
from tests.framework import (
    build_item_controller,
    build_pet_controller,
    build_registry,
    pet_unique_objects,
)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def registry():
    return build_registry()


@pytest.fixture
def item_controller():
    return build_item_controller()


@pytest.fixture
def pet_controller():
    return build_pet_controller()


@pytest.fixture
def route_table(item_controller, pet_controller):
    return build_route_table([item_controller, pet_controller])


@pytest.fixture
def binder(item_controller, pet_controller, registry, rng):
    return RestBinder(
        [item_controller, pet_controller],
        registry=registry,
        unique_objects=pet_unique_objects(),
        config=BinderConfig(max_mock_items=5),
        rng=rng,
    )

