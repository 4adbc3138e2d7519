# -*- coding: utf-8 -*-
"""Location: ./schemock/services/mock_server_service.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Mock Server Service.
One ``MockServer`` is one isolated mock backend: it owns its resource store,
result cache, random source, generator, scenario policy and route table.
Nothing is shared between instances, so tests can run several side by side.

``dispatch`` is the single entry point of the HTTP binding: it matches the
request against the route table, applies the scenario policy and the route
delay, renders the response and turns validation failures into 400 bodies.

Examples:
    >>> import asyncio
    >>> server = MockServer({"title": "Note", "type": "object", "properties": {"text": {"type": "string"}}}, seed=1)
    >>> response = asyncio.run(server.dispatch("POST", "/api/notes", RouteRequest(body={"text": "hi"})))
    >>> response.status_code, response.body["data"]["text"]
    (201, 'hi')
    >>> asyncio.run(server.dispatch("GET", "/nowhere")).status_code
    404
"""

# Standard
import asyncio
import re
import threading
from typing import Any, Dict, List, Optional, Pattern, Tuple

# First-Party
from schemock.cache.generation_cache import GenerationCache
from schemock.config import Settings
from schemock.exceptions import ValidationError
from schemock.schemas import MockResponse, RouteRequest, SchemaDocument
from schemock.services.generator_service import SchemaGenerator
from schemock.services.logging_service import LoggingService
from schemock.services.resource_store import ResourceStore
from schemock.services.route_builder import render_response, RouteDefinition, RouteTableBuilder
from schemock.services.scenario_service import ScenarioPolicy
from schemock.utils.seeded_random import SeededRandom

# Initialize logging service first
logging_service = LoggingService()
logger = logging_service.get_logger(__name__)

_PARAM = re.compile(r":([A-Za-z_][A-Za-z0-9_]*)")


def compile_path(template: str) -> Pattern[str]:
    """Compile a path template with ``:name`` parameters into a regex.

    Args:
        template: Path template such as ``/api/users/:id``.

    Returns:
        Pattern[str]: Regex with one named group per parameter; a trailing slash is optional.

    Examples:
        >>> compile_path("/api/users/:id").match("/api/users/42").groupdict()
        {'id': '42'}
        >>> compile_path("/api/users").match("/api/users/") is not None
        True
        >>> compile_path("/api/users").match("/api/users/42") is None
        True
    """
    parts = []
    position = 0
    for match in _PARAM.finditer(template):
        parts.append(re.escape(template[position : match.start()]))
        parts.append(f"(?P<{match.group(1)}>[^/]+)")
        position = match.end()
    parts.append(re.escape(template[position:].rstrip("/")))
    return re.compile("^" + "".join(parts) + "/?$")


class MockServer:
    """An isolated mock backend built from one schema.

    Attributes:
        settings: Settings the server was configured from.
        random: Random source shared by the generator and the scenario policy.
        cache: Result cache of the generator, None when disabled.
        generator: Value generator.
        store: Resource store.
        scenario: Scenario policy.
        builder: Route table builder.
        document: Current schema document.
    """

    def __init__(
        self,
        schema: Any,
        settings: Optional[Settings] = None,
        *,
        seed: Optional[int] = None,
        scenario: Optional[str] = None,
        strict: Optional[bool] = None,
        resource_name: Optional[str] = None,
        base_path: Optional[str] = None,
        random: Optional[SeededRandom] = None,
        store: Optional[ResourceStore] = None,
        sleep: Any = None,
    ):
        """Build the server and its route table.

        Keyword arguments override the matching settings fields.

        Args:
            schema: Schema document, raw mapping or JSON text.
            settings: Settings providing defaults, a fresh ``Settings()`` when omitted.
            seed: Seed override.
            scenario: Scenario override.
            strict: Strict mode override.
            resource_name: Resource name override.
            base_path: Base path override.
            random: Random source to use instead of one built from the seed.
            store: Resource store to use instead of a fresh one.
            sleep: Awaitable sleep used for delays, ``asyncio.sleep`` when omitted.
        """
        self.settings = settings or Settings()
        cfg = self.settings
        self.strict = cfg.strict if strict is None else strict
        self.resource_name = resource_name if resource_name is not None else cfg.resource_name
        self.base_path = base_path if base_path is not None else cfg.base_path
        self._sleep = sleep or asyncio.sleep

        self.random = random or SeededRandom(seed if seed is not None else cfg.seed)
        self.cache = GenerationCache(max_size=cfg.cache_max_size, ttl=cfg.cache_ttl) if cfg.cache_enabled else None
        self.generator = SchemaGenerator(
            random=self.random,
            cache=self.cache,
            optional_property_probability=cfg.optional_property_probability,
            circular_ref_policy=cfg.circular_ref_policy,
        )
        self.store = store or ResourceStore()
        self.scenario = ScenarioPolicy(
            scenario or cfg.scenario,
            self.random,
            fault_probability=cfg.fault_probability,
            delay_base_ms=cfg.slow_delay_base_ms,
            delay_jitter_ms=cfg.slow_delay_jitter_ms,
            fault_status_codes=cfg.fault_status_codes,
            sleep=self._sleep,
        )
        self.builder = RouteTableBuilder(self.generator, wrap=cfg.wrap_responses, seed_record_count=cfg.seed_record_count, api_prefix=cfg.api_prefix)

        self._lock = threading.Lock()
        self.document: SchemaDocument
        self._routes: Dict[str, RouteDefinition] = {}
        self._matchers: List[Tuple[RouteDefinition, Pattern[str]]] = []
        self.reload(schema, clear_cache=False)

    @property
    def routes(self) -> Dict[str, RouteDefinition]:
        """The current route table.

        Returns:
            Dict[str, RouteDefinition]: Routes keyed by ``method:path``.
        """
        return self._routes

    def reload(self, schema: Any, clear_cache: bool = True) -> Dict[str, RouteDefinition]:
        """Rebuild the route table from a new schema and swap it in.

        The new table is fully built before it replaces the old one, so a
        schema error leaves the server serving the previous table. The
        resource store is kept.

        Args:
            schema: New schema.
            clear_cache: Drop cached generation results.

        Returns:
            Dict[str, RouteDefinition]: The new route table.

        Raises:
            SchemaParseError: If the schema is malformed.
            ValidationError: On invalid options or, in strict mode, an under-specified schema.
        """
        document = SchemaDocument.ensure(schema)
        routes = self.builder.build(document, resource_name=self.resource_name, base_path=self.base_path, strict=self.strict)
        matchers = [(route, compile_path(route.path)) for route in routes.values()]
        with self._lock:
            self.document = document
            self._routes = routes
            self._matchers = matchers
        if clear_cache:
            self.generator.clear_cache()
            logger.info(f"Reloaded schema, {len(routes)} routes active")
        return routes

    def match(self, method: str, path: str) -> Optional[Tuple[RouteDefinition, Dict[str, str]]]:
        """Find the route serving a request.

        Args:
            method: HTTP method, any case.
            path: Request path.

        Returns:
            Optional[Tuple[RouteDefinition, Dict[str, str]]]: Route and path parameters, or None.
        """
        wanted = method.lower()
        with self._lock:
            matchers = self._matchers
        for route, pattern in matchers:
            if route.method != wanted:
                continue
            found = pattern.match(path)
            if found:
                return route, found.groupdict()
        return None

    async def dispatch(self, method: str, path: str, request: Optional[RouteRequest] = None) -> MockResponse:
        """Serve one request.

        Args:
            method: HTTP method.
            path: Request path.
            request: Query, body and headers of the request.

        Returns:
            MockResponse: Response to send; 404 when no route matches.
        """
        matched = self.match(method, path)
        if matched is None:
            return MockResponse(status_code=404, body={"error": "Not Found", "message": f"No route found for {method.upper()} {path}"})

        route, params = matched
        request = (request or RouteRequest()).model_copy(update={"method": method.upper(), "path": path, "params": params})
        return await self.invoke(route, request)

    async def invoke(self, route: RouteDefinition, request: RouteRequest) -> MockResponse:
        """Run one route: scenario, then route delay, then the response source.

        Args:
            route: Matched route.
            request: Request with path parameters filled in.

        Returns:
            MockResponse: Rendered response, a synthetic fault, or a 400 for invalid bodies.
        """
        fault = await self.scenario.apply(request.method, request.path)
        if fault is not None:
            return fault

        if route.delay > 0:
            await self._sleep(route.delay / 1000)

        try:
            body = render_response(route, request, self.store, self.generator)
        except ValidationError as exc:
            logger.warning(f"Rejected {request.method} {request.path}: {exc.message}")
            return MockResponse(status_code=400, body=exc.to_dict())

        return MockResponse(status_code=route.status_code, body=body, headers=dict(route.headers))
