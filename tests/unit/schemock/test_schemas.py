# -*- coding: utf-8 -*-
"""Location: ./tests/unit/schemock/test_schemas.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Unit tests for schema parsing and documents.
"""

# Third-Party
import pytest

# First-Party
from schemock.exceptions import SchemaParseError, SchemaRefError
from schemock.schemas import (
    AnyNode,
    ArrayNode,
    CompositionNode,
    CustomRouteSpec,
    MockResponse,
    MultiTypeNode,
    NullNode,
    NumberNode,
    ObjectNode,
    parse_schema,
    RefNode,
    RouteRequest,
    SchemaDocument,
    StringNode,
)


@pytest.mark.parametrize(
    "raw,node_type",
    [
        ({"type": "string"}, StringNode),
        ({"type": "integer"}, NumberNode),
        ({"type": "number"}, NumberNode),
        ({"type": "null"}, NullNode),
        ({"type": "array", "items": {"type": "string"}}, ArrayNode),
        ({"type": "object"}, ObjectNode),
        ({"properties": {"a": {"type": "string"}}}, ObjectNode),
        ({"items": {"type": "string"}}, ArrayNode),
        ({"$ref": "#/definitions/X"}, RefNode),
        ({"anyOf": [{"type": "string"}]}, CompositionNode),
        ({"type": ["string", "integer"]}, MultiTypeNode),
        ({"type": ["boolean"]}, type(parse_schema({"type": "boolean"}))),
        ({}, AnyNode),
        (True, AnyNode),
    ],
)
def test_parse_schema_variants(raw, node_type):
    assert isinstance(parse_schema(raw), node_type)


def test_properties_keep_declaration_order():
    node = parse_schema({"type": "object", "properties": {"z": {"type": "string"}, "a": {"type": "string"}, "m": {"type": "string"}}})
    assert list(node.properties) == ["z", "a", "m"]


def test_nested_nodes_keep_raw():
    raw = {"type": "object", "properties": {"tags": {"type": "array", "items": {"type": "string", "maxLength": 4}}}}
    node = parse_schema(raw)
    assert node.raw is raw
    assert node.properties["tags"].items.raw == {"type": "string", "maxLength": 4}


def test_tuple_items():
    node = parse_schema({"type": "array", "items": [{"type": "string"}, {"type": "integer"}]})
    assert node.is_tuple
    assert [type(item) for item in node.items] == [StringNode, NumberNode]


def test_multi_type_variants():
    node = parse_schema({"type": ["string", "null"], "maxLength": 3})
    assert node.types == ["string", "null"]
    assert node.variants[0].max_length == 3
    assert isinstance(node.variants[1], NullNode)


def test_composition_mode_priority():
    node = parse_schema({"allOf": [{"type": "object"}], "oneOf": [{"type": "string"}]})
    assert node.mode == "oneOf"
    assert isinstance(node.alternatives[0], StringNode)


def test_ref_and_composition_keep_sibling_keywords():
    ref = parse_schema({"$ref": "#/definitions/Base", "type": "object", "properties": {"tag": {"type": "string"}}, "required": ["tag"]})
    assert isinstance(ref, RefNode)
    assert isinstance(ref.siblings, ObjectNode)
    assert list(ref.siblings.properties) == ["tag"]
    assert ref.siblings.required == ["tag"]

    composition = parse_schema({"oneOf": [{"type": "object"}], "properties": {"kind": {"type": "string"}}})
    assert isinstance(composition.siblings, ObjectNode)
    assert "$ref" not in composition.siblings.raw and "oneOf" not in composition.siblings.raw


def test_sibling_keywords_are_validated():
    with pytest.raises(SchemaParseError):
        parse_schema({"allOf": [{"type": "object"}], "type": "thing"})


def test_exclusive_bounds_accept_both_forms():
    draft4 = parse_schema({"type": "integer", "minimum": 1, "exclusiveMinimum": True})
    modern = parse_schema({"type": "number", "exclusiveMaximum": 9.5})
    assert draft4.exclusive_minimum is True
    assert modern.exclusive_maximum == 9.5


@pytest.mark.parametrize(
    "raw",
    [
        {"type": "colour"},
        {"type": []},
        {"type": ["string", "bogus"]},
        {"type": "string", "minLength": -1},
        {"type": "number", "multipleOf": 0},
        {"type": "array", "minItems": -2},
        {"type": "object", "required": "id"},
        {"type": "object", "properties": ["a"]},
        {"type": "string", "enum": []},
        {"oneOf": []},
        {"type": "object", "properties": {"bad": {"type": "nope"}}},
        "not a schema",
    ],
)
def test_parse_errors(raw):
    with pytest.raises(SchemaParseError):
        parse_schema(raw)


def test_nested_error_names_location():
    with pytest.raises(SchemaParseError) as exc_info:
        parse_schema({"type": "object", "properties": {"inner": {"type": "nope"}}})
    assert "#/properties/inner" in exc_info.value.message


def test_external_ref_rejected():
    with pytest.raises(SchemaRefError):
        parse_schema({"$ref": "https://example.com/schema.json"})


def test_document_requires_object_root():
    with pytest.raises(SchemaParseError):
        SchemaDocument([{"type": "string"}])
    with pytest.raises(SchemaParseError) as exc_info:
        SchemaDocument({"properties": {}})
    assert "type or composition keyword" in exc_info.value.message


def test_document_from_json_text():
    doc = SchemaDocument('{"title": "Item", "type": "object"}')
    assert doc.title == "Item"
    with pytest.raises(SchemaParseError):
        SchemaDocument("{not json")


def test_document_resolve():
    doc = SchemaDocument(
        {
            "type": "object",
            "definitions": {"a/b": {"type": "string"}, "list": {"type": "array", "items": [{"type": "integer"}]}},
        }
    )
    assert isinstance(doc.resolve("#/definitions/a~1b"), StringNode)
    assert isinstance(doc.resolve("#/definitions/list/items/0"), NumberNode)
    assert doc.resolve("#") is doc.root
    assert doc.resolve("#/definitions/a~1b") is doc.resolve("#/definitions/a~1b")


@pytest.mark.parametrize("ref", ["#/definitions/missing", "#/definitions/list/items/5", "#/title"])
def test_document_resolve_errors(ref):
    doc = SchemaDocument({"type": "object", "title": "X", "definitions": {"list": {"type": "array", "items": [{"type": "integer"}]}}})
    with pytest.raises(SchemaRefError) as exc_info:
        doc.resolve(ref)
    assert exc_info.value.ref == ref


def test_document_digest_is_content_based():
    a = SchemaDocument({"type": "object", "title": "A"})
    b = SchemaDocument({"title": "A", "type": "object"})
    assert a.digest == b.digest


def test_custom_routes_parsed():
    doc = SchemaDocument(
        {
            "type": "object",
            "x-schemock-routes": [
                {"path": "/health", "method": "GET", "response": {"status": "ok"}},
                {"path": "/items", "method": "post", "statusCode": 202, "delay": 10, "headers": {"X-Mock": "1"}},
            ],
        }
    )
    assert [route.method for route in doc.routes] == ["get", "post"]
    assert doc.routes[1].status_code == 202
    assert doc.routes[1].headers == {"X-Mock": "1"}


@pytest.mark.parametrize(
    "entry",
    [
        {"path": "health", "method": "get"},
        {"path": "/x", "method": "options"},
        {"path": "/x", "statusCode": 99},
        {"path": "/x", "delay": -1},
    ],
)
def test_custom_route_errors(entry):
    with pytest.raises(SchemaParseError):
        SchemaDocument({"type": "object", "x-schemock-routes": [entry]})


def test_custom_routes_must_be_list():
    with pytest.raises(SchemaParseError):
        SchemaDocument({"type": "object", "x-schemock-routes": {"path": "/x"}})


def test_custom_route_spec_defaults():
    entry = CustomRouteSpec(path="/ping")
    assert entry.method == "get"
    assert entry.status_code is None
    assert entry.delay == 0


def test_route_request_and_response_models():
    request = RouteRequest(method="post", path="/api/users", body={"name": "Ann"})
    assert request.method == "POST"
    assert request.params == {}
    response = MockResponse(status_code=201, body={"id": "1"})
    assert not response.synthetic
    assert response.headers == {}
