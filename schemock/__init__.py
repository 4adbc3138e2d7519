# -*- coding: utf-8 -*-
"""Location: ./schemock/__init__.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Schemock - schema-driven mock data and CRUD mock servers.

Entry points:
- ``generate(schema, ...)``: one value conforming to a JSON Schema
- ``build_route_table(schema, ...)``: CRUD and custom routes for a schema
- ``MockServer``: an isolated mock backend (store, cache, scenario, routes)
- ``create_app(schema, ...)``: a FastAPI application serving a ``MockServer``

Note: Imports are lazy so that importing a submodule does not pull in FastAPI.
"""

from typing import TYPE_CHECKING

__copyright__ = "Copyright 2025"
__license__ = "Apache 2.0"
__version__ = "0.1.0"
__description__ = "Generate realistic mock data and CRUD mock APIs from JSON Schema"
__packages__ = ["schemock"]

__all__ = ["build_route_table", "create_app", "generate", "MockServer"]

if TYPE_CHECKING:
    from schemock.main import create_app
    from schemock.services.generator_service import generate
    from schemock.services.mock_server_service import MockServer
    from schemock.services.route_builder import build_route_table


def __getattr__(name: str):
    """Lazy import handler for the public entry points.

    Args:
        name: The attribute name being accessed.

    Returns:
        The requested function or class.

    Raises:
        AttributeError: If the requested attribute is not found.
    """
    # pylint: disable=import-outside-toplevel
    if name == "generate":
        from schemock.services.generator_service import generate

        return generate
    if name == "build_route_table":
        from schemock.services.route_builder import build_route_table

        return build_route_table
    if name == "MockServer":
        from schemock.services.mock_server_service import MockServer

        return MockServer
    if name == "create_app":
        from schemock.main import create_app

        return create_app
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
