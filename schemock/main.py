# -*- coding: utf-8 -*-
"""Location: ./schemock/main.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Schemock HTTP binding.
This module exposes a ``MockServer`` as a FastAPI application. It only does
plumbing: one catch-all route hands method, path, query, headers and the
decoded JSON body to ``MockServer.dispatch`` and serializes what comes back.

Error mapping:
- ``ValidationError`` (including an undecodable request body): 400
- any other ``SchemockError`` (parse, reference, cycle): 500

Both use the structured ``{error, code, message, details, hint}`` body.

Examples:
    >>> from fastapi.testclient import TestClient
    >>> app = create_app({"title": "Task", "type": "object", "properties": {"done": {"type": "boolean"}}})
    >>> client = TestClient(app)
    >>> client.post("/api/tasks", json={"done": True}).status_code
    201
    >>> client.get("/missing").json()["error"]
    'Not Found'
"""

# Standard
from typing import Any, Optional

# Third-Party
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
import orjson

# First-Party
from schemock import __version__
from schemock.config import get_settings, Settings
from schemock.exceptions import format_error, SchemockError, ValidationError
from schemock.schemas import RouteRequest
from schemock.services.logging_service import LoggingService
from schemock.services.mock_server_service import MockServer
from schemock.utils.orjson_response import ORJSONResponse

# Initialize logging service first
logging_service = LoggingService()
logger = logging_service.get_logger(__name__)

HTTP_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


def _decode_body(raw: bytes) -> Any:
    """Decode a JSON request body.

    Args:
        raw: Raw body bytes.

    Returns:
        Any: Decoded value, None for an empty body.

    Raises:
        ValidationError: If the body is not valid JSON.

    Examples:
        >>> _decode_body(b""), _decode_body(b'{"a": 1}')
        (None, {'a': 1})
    """
    if not raw.strip():
        return None
    try:
        return orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise ValidationError("Request body is not valid JSON", "body", hint="Send a JSON document with Content-Type: application/json.") from exc


def create_app(schema: Any = None, settings: Optional[Settings] = None, server: Optional[MockServer] = None) -> FastAPI:
    """Create the FastAPI application serving one mock server.

    Args:
        schema: Schema document, raw mapping or JSON text; ignored when ``server`` is given.
        settings: Settings, the process-wide settings when omitted.
        server: Pre-built mock server.

    Returns:
        FastAPI: The application; the server is available as ``app.state.mock_server``.

    Raises:
        ValueError: If neither ``schema`` nor ``server`` is given.
    """
    if server is None and schema is None:
        raise ValueError("create_app needs a schema or a MockServer")

    settings = settings or (server.settings if server is not None else get_settings())
    logging_service.initialize(level=settings.log_level, log_format=settings.log_format)
    server = server or MockServer(schema, settings)

    app = FastAPI(
        title="Schemock",
        version=__version__,
        default_response_class=ORJSONResponse,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.mock_server = server

    if settings.cors_enabled:
        app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

    @app.exception_handler(SchemockError)
    async def schemock_error_handler(request: Request, exc: SchemockError) -> ORJSONResponse:
        """Render core errors as structured JSON.

        Args:
            request: The failing request.
            exc: The error.

        Returns:
            ORJSONResponse: 400 for validation errors, 500 otherwise.
        """
        if isinstance(exc, ValidationError):
            logger.warning(f"Validation error: {exc.message}")
            return ORJSONResponse(exc.to_dict(), status_code=400)
        logger.error(f"{exc.kind} while serving {request.method} {request.url.path}\n{format_error(exc)}")
        return ORJSONResponse(exc.to_dict(), status_code=500)

    @app.api_route("/{full_path:path}", methods=HTTP_METHODS, include_in_schema=False)
    async def serve(request: Request, full_path: str) -> Response:
        """Hand every request to the mock server.

        Args:
            request: Incoming request.
            full_path: Matched path (unused, the raw URL path is dispatched).

        Returns:
            Response: JSON response, or an empty one when the route has no body.
        """
        body = _decode_body(await request.body())
        route_request = RouteRequest(
            query=dict(request.query_params),
            body=body,
            method=request.method,
            path=request.url.path,
            headers=dict(request.headers),
        )
        result = await request.app.state.mock_server.dispatch(request.method, request.url.path, route_request)
        logger.info(f"{request.method} {request.url.path} -> {result.status_code}")

        if result.body is None:
            return Response(status_code=result.status_code, headers=result.headers)
        return ORJSONResponse(result.body, status_code=result.status_code, headers=result.headers)

    return app
