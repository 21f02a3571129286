"""Tests for loading endpoint metadata from declarations."""

import json

import pytest

from restbinder import RestBinder
from restbinder.declarations import load_controllers, load_declarations, load_unique_objects
from restbinder.endpoints import ArrayFormat, InputSource
from restbinder.exceptions import ConfigurationError, DeclarationError, PathPlaceholderError
from restbinder.types import Type
from tests.framework import get

ITEMS_DOCUMENT = {
    "controllers": [
        {
            "class": "tests.framework.sample_api:ItemController",
            "endpoints": [
                {
                    "http_method": "GET",
                    "path": "/items/{id}",
                    "handler": "get_item",
                    "inputs": [{"name": "id", "in": "path", "type": "int"}],
                    "outputs": [
                        {"type": "Item"},
                        {"type": "ErrorBody", "status_code": 404},
                    ],
                },
                {
                    "http_method": "get",
                    "path": "/items",
                    "handler": "list_items",
                    "friendly_name": "List Items",
                    "inputs": [
                        {"name": "tags", "type": "string[]", "array_format": "csv"},
                        {"name": "limit", "type": {"types": ["int"], "default": 10}},
                        {"name": "sort", "type": ["string", None], "enum": ["asc", "desc"]},
                    ],
                    "outputs": [{"type": "Item[]"}],
                },
            ],
        }
    ],
    "unique_objects": [
        {"unique_name": "Dog", "properties": [{"name": "kind", "type": "int"}]},
    ],
}


class TestLoadControllers:
    """Test building controllers from declarations."""

    def test_endpoints(self):
        (controller,) = load_controllers(ITEMS_DOCUMENT["controllers"])
        assert controller.handler_class == "tests.framework.sample_api:ItemController"
        get_item, list_items = controller.endpoints

        assert get_item.method == "get_item"
        assert get_item.inputs[0].source is InputSource.PATH
        assert [(o.type_hint.types, o.status_code) for o in get_item.outputs] == [
            ((Type("Item"),), 200),
            ((Type("ErrorBody"),), 404),
        ]
        assert list_items.http_method.friendly_name == "List Items"
        assert list_items.outputs[0].type_hint.types == (Type("array", "Item"),)

    def test_inputs(self):
        (controller,) = load_controllers(ITEMS_DOCUMENT["controllers"])
        tags, limit, sort = controller.endpoints[1].inputs

        assert tags.source is InputSource.QUERY
        assert tags.array_format is ArrayFormat.CSV
        assert tags.type_hint.is_array_valued
        assert limit.type_hint.default_value == 10
        assert not sort.type_hint.has_default
        assert sort.type_hint.is_nullable
        assert sort.enum == ("asc", "desc")

    def test_explicit_null_default(self):
        (controller,) = load_controllers([{
            "class": "tests.framework.sample_api:ItemController",
            "endpoints": [{
                "http_method": "GET",
                "path": "/items",
                "handler": "list_items",
                "inputs": [{"name": "sort", "type": {"types": ["string"], "default": None}}],
            }],
        }])
        hint = controller.endpoints[0].inputs[0].type_hint
        assert hint.has_default
        assert hint.default_value is None

    def test_unknown_keys_are_rejected(self):
        with pytest.raises(DeclarationError):
            load_controllers([{"class": "x:Y", "endpoints": [], "routes": []}])

    def test_missing_keys_are_rejected(self):
        with pytest.raises(DeclarationError) as exc_info:
            load_controllers([{"endpoints": []}])
        assert exc_info.value.original_exception is not None

    def test_structural_errors_come_from_metadata(self):
        with pytest.raises(PathPlaceholderError):
            load_controllers([{
                "class": "x:Y",
                "endpoints": [{"http_method": "GET", "path": "/items/{id}", "handler": "get_item"}],
            }])

    def test_invalid_type_declaration(self):
        with pytest.raises(ConfigurationError):
            load_controllers([{
                "class": "x:Y",
                "endpoints": [{
                    "http_method": "GET",
                    "path": "/items",
                    "handler": "list_items",
                    "outputs": [{"type": "Item[][]"}],
                }],
            }])


class TestLoadUniqueObjects:
    """Test building unique objects from declarations."""

    def test_properties(self):
        (dog,) = load_unique_objects(ITEMS_DOCUMENT["unique_objects"])
        assert dog.unique_name == "Dog"
        assert dog.properties[0].name == "kind"
        assert dog.properties[0].type_hint.types == (Type("int"),)

    def test_invalid(self):
        with pytest.raises(DeclarationError):
            load_unique_objects([{"properties": []}])


class TestLoadDeclarations:
    """Test loading whole documents."""

    def test_from_file(self, tmp_path, registry):
        path = tmp_path / "api.json"
        path.write_text(json.dumps(ITEMS_DOCUMENT), encoding="utf-8")

        controllers, unique_objects = load_declarations(path)
        binder = RestBinder(controllers, registry=registry, unique_objects=unique_objects)

        resolved = binder.resolve_request(get("/items/42").build())
        assert dict(resolved.callable_inputs) == {"id": 42}
        assert binder.route_table.get("list_items") is not None

    def test_from_string_path(self, tmp_path):
        path = tmp_path / "api.json"
        path.write_text(json.dumps({"controllers": []}), encoding="utf-8")
        assert load_declarations(str(path)) == ([], [])

    def test_from_mapping(self):
        controllers, unique_objects = load_declarations(ITEMS_DOCUMENT)
        assert len(controllers) == 1
        assert len(unique_objects) == 1

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "api.json"
        path.write_text("{nope", encoding="utf-8")
        with pytest.raises(DeclarationError):
            load_declarations(path)

    def test_document_must_be_an_object(self, tmp_path):
        path = tmp_path / "api.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(DeclarationError):
            load_declarations(path)
