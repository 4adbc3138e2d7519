# -*- coding: utf-8 -*-
"""Location: ./tests/unit/schemock/test_main.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Tests for the FastAPI binding.
"""

# Standard
import logging

# Third-Party
from fastapi.testclient import TestClient
import pytest

# First-Party
from schemock.config import Settings
from schemock.main import create_app
from schemock.services.mock_server_service import MockServer


@pytest.fixture
def client(user_schema, settings):
    return TestClient(create_app(user_schema, settings))


def test_create_app_requires_schema_or_server():
    with pytest.raises(ValueError):
        create_app()


def test_app_exposes_server(user_schema, settings):
    server = MockServer(user_schema, settings, seed=1)
    app = create_app(server=server)
    assert app.state.mock_server is server
    assert app.version


def test_crud_over_http(client):
    listed = client.get("/api/users")
    assert listed.status_code == 200
    assert listed.json()["meta"]["total"] == 3

    created = client.post("/api/users", json={"name": "Ann"})
    assert created.status_code == 201
    record = created.json()["data"]
    assert record["name"] == "Ann"

    fetched = client.get(f"/api/users/{record['id']}")
    assert fetched.json()["data"] == record

    updated = client.put(f"/api/users/{record['id']}", json={"name": "Anne"})
    assert updated.status_code == 200
    assert updated.json()["data"]["name"] == "Anne"

    deleted = client.delete(f"/api/users/{record['id']}")
    assert deleted.status_code == 200
    assert deleted.json() == {"success": True, "message": "Deleted successfully"}


def test_unwrapped_delete_has_empty_body(user_schema):
    client = TestClient(create_app(user_schema, Settings(_env_file=None, wrap_responses=False)))
    record = client.post("/api/users", json={"name": "Ann"}).json()
    response = client.delete(f"/api/users/{record['id']}")
    assert response.status_code == 204
    assert response.content == b""


def test_unknown_route(client):
    response = client.patch("/api/users/1", json={})
    assert response.status_code == 404
    assert response.json() == {"error": "Not Found", "message": "No route found for PATCH /api/users/1"}


def test_invalid_json_body(client):
    response = client.post("/api/users", content=b"{not json", headers={"Content-Type": "application/json"})
    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "ValidationError"
    assert body["message"] == "Request body is not valid JSON"
    assert body["details"]["field"] == "body"


def test_empty_body_accepted(client):
    response = client.post("/api/users")
    assert response.status_code == 201


def test_strict_mode_rejects_invalid_body(user_schema):
    client = TestClient(create_app(user_schema, Settings(_env_file=None, strict=True)))
    response = client.post("/api/users", json={"name": "Ann"})
    assert response.status_code == 400
    assert response.json()["message"] == "Missing required field: email"


def test_strict_mode_accepts_body_without_server_fields(user_schema):
    client = TestClient(create_app(user_schema, Settings(_env_file=None, strict=True)))
    response = client.post("/api/users", json={"name": "Ann", "email": "ann@example.com"})
    assert response.status_code == 201
    assert response.json()["data"]["id"]


def test_strict_mode_reports_constraint_field(user_schema):
    schema = {**user_schema, "properties": {**user_schema["properties"], "code": {"type": "string", "pattern": "^[A-Z]{3}$"}}}
    client = TestClient(create_app(schema, Settings(_env_file=None, strict=True)))
    response = client.post("/api/users", json={"name": "Ann", "email": "ann@example.com", "code": "not-valid"})
    assert response.status_code == 400
    assert response.json()["details"]["field"] == "code"


def test_scenario_fault_body(user_schema):
    client = TestClient(create_app(user_schema, Settings(_env_file=None, scenario="error-heavy", fault_probability=1.0, seed=5)))
    response = client.get("/api/users")
    assert response.status_code >= 400
    body = response.json()
    assert body["error"] == "ScenarioError"
    assert body["synthetic"] is True
    assert body["scenario"] == "error-heavy"
    assert body["statusCode"] == response.status_code


def test_custom_route_headers(user_schema, settings):
    schema = {**user_schema, "x-schemock-routes": [{"path": "/health", "headers": {"X-Mock": "1"}, "response": {"status": "ok"}}]}
    response = TestClient(create_app(schema, settings)).get("/health")
    assert response.json() == {"status": "ok"}
    assert response.headers["x-mock"] == "1"


def test_core_errors_map_to_500(tree_schema):
    schema = {**tree_schema, "x-schemock-routes": [{"path": "/tree"}]}
    client = TestClient(create_app(schema, Settings(_env_file=None, circular_ref_policy="error")))
    response = client.get("/tree")
    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "CircularReferenceError"
    assert body["code"] == "E102"


def test_unresolved_ref_maps_to_500(user_schema, settings, caplog):
    schema = {**user_schema, "x-schemock-routes": [{"path": "/broken", "response": {"$ref": "#/definitions/Missing"}}]}
    with caplog.at_level(logging.ERROR, logger="schemock"):
        response = TestClient(create_app(schema, settings)).get("/broken")
    assert response.status_code == 500
    assert response.json()["error"] == "SchemaRefError"
    assert "[E101] Cannot resolve $ref: #/definitions/Missing" in caplog.text
    assert "GET /broken" in caplog.text


def test_cors_headers(client):
    response = client.get("/api/users", headers={"Origin": "http://localhost:5173"})
    assert response.headers["access-control-allow-origin"] == "*"


def test_cors_disabled(user_schema):
    client = TestClient(create_app(user_schema, Settings(_env_file=None, cors_enabled=False)))
    response = client.get("/api/users", headers={"Origin": "http://localhost:5173"})
    assert "access-control-allow-origin" not in response.headers
