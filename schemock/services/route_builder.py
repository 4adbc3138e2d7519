# -*- coding: utf-8 -*-
"""Location: ./schemock/services/route_builder.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Route Table Builder.
This module derives the route table of a mock server from a schema:

- CRUD routes (list, get by id, create, update, delete) under a base path
  named after the resource, bound to handler closures over the generator and
  the resource store.
- Custom routes declared in the ``x-schemock-routes`` extension, which bypass
  CRUD inference and answer with a generated schema or a static value.

A route table maps ``"method:path"`` keys to immutable ``RouteDefinition``
objects. Rebuilding produces a new table; nothing in an existing table is
ever mutated.

Examples:
    >>> table = build_route_table({"title": "User", "type": "object", "properties": {"name": {"type": "string"}}})
    >>> sorted(table)
    ['delete:/api/users/:id', 'get:/api/users', 'get:/api/users/:id', 'post:/api/users', 'put:/api/users/:id']
    >>> table["post:/api/users"].status_code
    201
"""

# Standard
import copy
from dataclasses import dataclass, field
from datetime import datetime, timezone
import re
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

# First-Party
from schemock.exceptions import ConfigurationError
from schemock.schemas import ArrayNode, CustomRouteSpec, is_schema_like, parse_schema, RefNode, RouteRequest, SchemaDocument, SchemaNode, SchemaNodeBase
from schemock.services.generator_service import SchemaGenerator
from schemock.services.logging_service import LoggingService
from schemock.services.resource_store import find_index, Record, ResourceStore
from schemock.services.validation_service import lint_document, validate_data
from schemock.utils.heuristics import iso_timestamp

# Initialize logging service first
logging_service = LoggingService()
logger = logging_service.get_logger(__name__)

Handler = Callable[[RouteRequest, ResourceStore], Any]

DEFAULT_RESOURCE = "data"
# Assigned by the create and update handlers, never required from clients.
SERVER_FIELDS = ("id", "createdAt", "updatedAt")
_RESOURCE_NAME = re.compile(r"^[A-Za-z0-9._~-]+$")
_SLUG_SEPARATORS = re.compile(r"[^a-z0-9]+")


@dataclass(frozen=True)
class RouteDefinition:
    """One entry of a route table.

    Attributes:
        path: Path template, ``:name`` segments are parameters.
        method: Lower-case HTTP method.
        response: A handler ``(request, store) -> value``, a schema node, or a literal JSON value.
        status_code: Status of successful responses.
        delay: Artificial delay in milliseconds.
        headers: Extra response headers.
        schema: Root document schema node responses resolve against.
        strict: Strict flag applied when generating a schema node response.
    """

    path: str
    method: str
    response: Union[Handler, SchemaNode, Any]
    status_code: int = 200
    delay: int = 0
    headers: Dict[str, str] = field(default_factory=dict)
    schema: Optional[SchemaDocument] = None
    strict: bool = False

    @property
    def key(self) -> str:
        """Route table key.

        Returns:
            str: ``method:path``.
        """
        return f"{self.method}:{self.path}"


def utc_now() -> str:
    """Current time as an ISO-8601 UTC timestamp with milliseconds.

    Returns:
        str: Timestamp ending in ``Z``.
    """
    return iso_timestamp(datetime.now(timezone.utc))


def pluralize(word: str) -> str:
    """Turn a singular English noun into its plural.

    Args:
        word: Lower-case noun.

    Returns:
        str: Plural form; words already ending in ``s`` are kept.

    Examples:
        >>> [pluralize(w) for w in ("user", "users", "category", "key", "box", "match")]
        ['users', 'users', 'categories', 'keys', 'boxes', 'matches']
    """
    if word.endswith("s"):
        return word
    if word.endswith("y") and len(word) > 1 and word[-2] not in "aeiou":
        return word[:-1] + "ies"
    if word.endswith(("x", "z", "ch", "sh")):
        return word + "es"
    return word + "s"


def determine_resource_name(document: SchemaDocument, resource_name: Optional[str] = None) -> str:
    """Pick the resource name: explicit override, else pluralized title, else ``data``.

    Args:
        document: Schema document.
        resource_name: Explicit override.

    Returns:
        str: Resource name.

    Raises:
        ConfigurationError: If the override is empty or not a single URL path segment.

    Examples:
        >>> determine_resource_name(SchemaDocument({"title": "Blog Post", "type": "object"}))
        'blog-posts'
        >>> determine_resource_name(SchemaDocument({"type": "object"}))
        'data'
        >>> determine_resource_name(SchemaDocument({"type": "object"}), "people")
        'people'
    """
    if resource_name is not None:
        if not _RESOURCE_NAME.match(resource_name):
            raise ConfigurationError("Resource name must be a non-empty URL path segment", {"field": "resource_name", "value": resource_name})
        return resource_name
    if document.title:
        slug = _SLUG_SEPARATORS.sub("-", document.title.lower()).strip("-")
        if slug:
            return pluralize(slug)
    return DEFAULT_RESOURCE


def determine_base_path(resource_name: str, base_path: Optional[str] = None, api_prefix: str = "api") -> str:
    """Pick the base path: explicit override, else ``/{prefix}/{resource}``.

    Args:
        resource_name: Resource name.
        base_path: Explicit override.
        api_prefix: Prefix segment(s) of the default path.

    Returns:
        str: Base path without trailing slash.

    Raises:
        ConfigurationError: If the override does not start with ``/``.

    Examples:
        >>> determine_base_path("users")
        '/api/users'
        >>> determine_base_path("users", "/v2/people/")
        '/v2/people'
        >>> determine_base_path("users", api_prefix="")
        '/users'
    """
    if base_path is not None:
        if not base_path.startswith("/") or base_path.strip("/") == "":
            raise ConfigurationError("Base path must start with / and name at least one segment", {"field": "base_path", "value": base_path})
        return base_path.rstrip("/")
    prefix = api_prefix.strip("/")
    return f"/{prefix}/{resource_name}" if prefix else f"/{resource_name}"


def follow_refs(node: SchemaNode, document: SchemaDocument, pointer: str = "#") -> Tuple[str, SchemaNode]:
    """Follow a chain of ``$ref`` nodes to the first non-reference node.

    Args:
        node: Starting node.
        document: Root document.
        pointer: Pointer of ``node`` inside the document.

    Returns:
        Tuple[str, SchemaNode]: Pointer and node of the target, or of the last reference of a cyclic chain.

    Examples:
        >>> doc = SchemaDocument({"$ref": "#/definitions/Tags", "definitions": {"Tags": {"type": "array"}}})
        >>> pointer, node = follow_refs(doc.root, doc)
        >>> pointer, type(node).__name__
        ('#/definitions/Tags', 'ArrayNode')
    """
    seen = set()
    while isinstance(node, RefNode) and node.ref not in seen:
        seen.add(node.ref)
        pointer = node.ref
        node = document.resolve(node.ref)
    return pointer, node


def render_response(route: RouteDefinition, request: RouteRequest, store: ResourceStore, generator: SchemaGenerator) -> Any:
    """Produce the body of a route from its response source.

    Args:
        route: Route definition.
        request: Inbound request.
        store: Resource store of the server.
        generator: Value generator of the server.

    Returns:
        Any: JSON body, None for an empty body.
    """
    if isinstance(route.response, SchemaNodeBase):
        return generator.generate(route.response, document=route.schema, strict=route.strict)
    if callable(route.response):
        return route.response(request, store)
    return copy.deepcopy(route.response)


class RouteTableBuilder:
    """Builds route tables bound to one generator.

    Attributes:
        generator: Value generator used by every handler.
        wrap: Wrap CRUD bodies in a ``{success, message, timestamp, data}`` envelope.
        seed_record_count: Records generated when an empty resource is listed.
        api_prefix: Prefix of default base paths.
    """

    def __init__(self, generator: SchemaGenerator, wrap: bool = True, seed_record_count: int = 3, api_prefix: str = "api"):
        """Initialize the builder.

        Args:
            generator: Value generator.
            wrap: Response envelope flag.
            seed_record_count: Records seeded on first list.
            api_prefix: Default base path prefix.

        Raises:
            ConfigurationError: If ``seed_record_count`` is negative.
        """
        if seed_record_count < 0:
            raise ConfigurationError("Seed record count cannot be negative", {"field": "seed_record_count", "value": seed_record_count})
        self.generator = generator
        self.wrap = wrap
        self.seed_record_count = seed_record_count
        self.api_prefix = api_prefix

    def build(self, schema: Any, resource_name: Optional[str] = None, base_path: Optional[str] = None, strict: bool = False) -> Dict[str, RouteDefinition]:
        """Build the route table of a schema.

        Args:
            schema: Schema document, raw mapping or JSON text.
            resource_name: Resource name override.
            base_path: Base path override.
            strict: Strict mode (lint the schema, required-only generation, body validation).

        Returns:
            Dict[str, RouteDefinition]: Routes keyed by ``method:path``; custom routes first.

        Raises:
            SchemaParseError: If the schema is malformed.
            ConfigurationError: On invalid naming options.
            ValidationError: In strict mode, on an under-specified schema.
        """
        document = SchemaDocument.ensure(schema)
        if strict:
            lint_document(document)

        resource = determine_resource_name(document, resource_name)
        routes: Dict[str, RouteDefinition] = {}

        for entry in document.routes:
            route = self._custom_route(entry, document, strict)
            routes[route.key] = route

        base = determine_base_path(resource, base_path, self.api_prefix)
        for route in self._crud_routes(document, resource, base, strict):
            routes.setdefault(route.key, route)

        logger.info(f"Built route table for resource '{resource}' with {len(routes)} routes")
        return routes

    # ------------------------------------------------------------------
    # Custom routes
    # ------------------------------------------------------------------

    def _custom_route(self, entry: CustomRouteSpec, document: SchemaDocument, strict: bool) -> RouteDefinition:
        """Turn one ``x-schemock-routes`` entry into a route.

        Args:
            entry: Parsed route entry.
            document: Root document.
            strict: Strict flag.

        Returns:
            RouteDefinition: Route answering with a generated schema, a static value, or the root schema.
        """
        if entry.response is None:
            response: Any = document.root
        elif is_schema_like(entry.response):
            response = parse_schema(entry.response, f"#/x-schemock-routes/{entry.method}:{entry.path}")
        else:
            response = entry.response
        return RouteDefinition(
            path=entry.path,
            method=entry.method,
            response=response,
            status_code=entry.status_code or (201 if entry.method == "post" else 200),
            delay=entry.delay,
            headers=dict(entry.headers),
            schema=document,
            strict=strict,
        )

    # ------------------------------------------------------------------
    # CRUD routes
    # ------------------------------------------------------------------

    def _envelope(self, data: Any, message: str, total: Optional[int] = None) -> Any:
        """Wrap a CRUD body when wrap mode is on.

        Args:
            data: Payload.
            message: Envelope message.
            total: Collection size, added as ``meta.total`` for lists.

        Returns:
            Any: Envelope or the bare payload.
        """
        if not self.wrap:
            return data
        body = {"success": True, "message": message, "timestamp": utc_now(), "data": data}
        if total is not None:
            body["meta"] = {"total": total}
        return body

    def _crud_routes(self, document: SchemaDocument, resource: str, base: str, strict: bool) -> List[RouteDefinition]:
        """Create the five CRUD routes of a resource.

        Args:
            document: Root document.
            resource: Resource name.
            base: Base path.
            strict: Strict flag.

        Returns:
            List[RouteDefinition]: List, get, create, update and delete routes.
        """
        root_pointer, root = follow_refs(document.root, document)
        collection_schema = root if isinstance(root, ArrayNode) and not root.is_tuple and root.items is not None else None
        record_schema: SchemaNode = collection_schema.items if collection_schema is not None else document.root
        record_pointer = f"{root_pointer}/items" if collection_schema is not None else "#"
        generator = self.generator

        def new_record() -> Any:
            return generator.generate(record_schema, document=document, strict=strict, property_name=resource, use_cache=False)

        def request_body(request: RouteRequest) -> Record:
            body = request.body
            if strict:
                validate_data(body, document, record_pointer, optional=SERVER_FIELDS)
            return dict(body) if isinstance(body, dict) else {}

        def list_records(request: RouteRequest, store: ResourceStore) -> Any:
            with store.locked(resource) as records:
                if not records:
                    self._seed(records, collection_schema, document, strict, resource, new_record)
                data = copy.deepcopy(records)
            return self._envelope(data, "Mock data retrieved", total=len(data))

        def get_record(request: RouteRequest, store: ResourceStore) -> Any:
            record_id = request.params.get("id")
            with store.locked(resource) as records:
                existing = store.find(resource, record_id)
                if existing is not None:
                    return self._envelope(existing, "Mock data retrieved")
                data = new_record()
                if isinstance(data, dict) and record_id is not None:
                    data["id"] = record_id
                    records.append(copy.deepcopy(data))
            return self._envelope(data, "Mock data generated")

        def create_record(request: RouteRequest, store: ResourceStore) -> Any:
            body = request_body(request)
            record: Record = {"id": body.get("id") if body.get("id") not in (None, "") else generator.new_identifier()}
            record.update({key: value for key, value in body.items() if key != "id"})
            now = utc_now()
            record["createdAt"] = now
            record["updatedAt"] = now
            with store.locked(resource) as records:
                records.append(copy.deepcopy(record))
            logger.debug(f"Created {resource} record {record['id']}")
            return self._envelope(record, "Created successfully")

        def update_record(request: RouteRequest, store: ResourceStore) -> Any:
            body = request_body(request)
            record_id = request.params.get("id")
            with store.locked(resource) as records:
                index = find_index(records, record_id)
                if index is None:
                    updated = {**body, "id": record_id, "updatedAt": utc_now()}
                    records.append(updated)
                else:
                    updated = {**records[index], **body, "id": records[index]["id"], "updatedAt": utc_now()}
                    records[index] = updated
                data = copy.deepcopy(updated)
            return self._envelope(data, "Updated successfully")

        def delete_record(request: RouteRequest, store: ResourceStore) -> Any:
            removed = store.remove(resource, request.params.get("id"))
            logger.debug(f"Deleted {removed} {resource} record(s) with id {request.params.get('id')}")
            if not self.wrap:
                return None
            return {"success": True, "message": "Deleted successfully"}

        item_path = f"{base}/:id"
        return [
            RouteDefinition(path=base, method="get", response=list_records, schema=document, strict=strict),
            RouteDefinition(path=item_path, method="get", response=get_record, schema=document, strict=strict),
            RouteDefinition(path=base, method="post", response=create_record, status_code=201, schema=document, strict=strict),
            RouteDefinition(path=item_path, method="put", response=update_record, schema=document, strict=strict),
            RouteDefinition(path=item_path, method="delete", response=delete_record, status_code=200 if self.wrap else 204, schema=document, strict=strict),
        ]

    def _seed(
        self,
        records: List[Any],
        collection_schema: Optional[ArrayNode],
        document: SchemaDocument,
        strict: bool,
        resource: str,
        new_record: Callable[[], Any],
    ) -> None:
        """Populate an empty resource on first list.

        An array root schema is generated once and its items become the
        records; otherwise ``seed_record_count`` records are generated. Object
        records without an identifier get one.

        Args:
            records: Live (empty) record list.
            collection_schema: Array root schema, if any.
            document: Root document.
            strict: Strict flag.
            resource: Resource name.
            new_record: Record factory.
        """
        if collection_schema is not None:
            seeded = self.generator.generate(collection_schema, document=document, strict=strict, property_name=resource, use_cache=False)
        else:
            seeded = [new_record() for _ in range(self.seed_record_count)]
        for item in seeded:
            if isinstance(item, dict) and item.get("id") in (None, ""):
                item["id"] = self.generator.new_identifier()
            records.append(item)
        logger.info(f"Seeded resource '{resource}' with {len(seeded)} records")


def build_route_table(
    schema: Any,
    generator: Optional[SchemaGenerator] = None,
    *,
    resource_name: Optional[str] = None,
    base_path: Optional[str] = None,
    strict: bool = False,
    wrap: bool = True,
    seed_record_count: int = 3,
    api_prefix: str = "api",
) -> Dict[str, RouteDefinition]:
    """Build a route table with a one-off builder.

    Args:
        schema: Schema document, raw mapping or JSON text.
        generator: Value generator, a fresh uncached one when omitted.
        resource_name: Resource name override.
        base_path: Base path override.
        strict: Strict mode.
        wrap: Response envelope flag.
        seed_record_count: Records seeded on first list.
        api_prefix: Default base path prefix.

    Returns:
        Dict[str, RouteDefinition]: Routes keyed by ``method:path``.
    """
    builder = RouteTableBuilder(generator or SchemaGenerator(), wrap=wrap, seed_record_count=seed_record_count, api_prefix=api_prefix)
    return builder.build(schema, resource_name=resource_name, base_path=base_path, strict=strict)
