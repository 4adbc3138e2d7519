# -*- coding: utf-8 -*-
"""Location: ./schemock/schemas.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Schemock Pydantic Schemas.
This module provides the typed representation of JSON Schema documents used by
the generation engine, plus the request/response models exchanged between the
route layer and the HTTP binding.

A raw JSON Schema mapping is turned into exactly one node variant per keyword
category by ``parse_schema``:

- ``RefNode``: ``$ref`` pointer (internal ``#/...`` only)
- ``CompositionNode``: ``oneOf`` / ``anyOf`` / ``allOf``
- ``StringNode``, ``NumberNode``, ``BooleanNode``, ``NullNode``
- ``ArrayNode`` (list or tuple ``items``), ``ObjectNode``
- ``MultiTypeNode``: ``type`` given as a list, one variant per type
- ``AnyNode``: untyped schema

Typed keywords written next to ``$ref`` or a composition keyword (``type``,
``properties``, ``required`` ...) are kept as the node's ``siblings``.

Malformed constraints are rejected once, at parse time, so the generator can
dispatch on the node class without re-checking the raw JSON.

Examples:
    >>> node = parse_schema({"type": "string", "minLength": 3})
    >>> type(node).__name__, node.min_length
    ('StringNode', 3)
    >>> parse_schema({"type": ["string", "null"]}).types
    ['string', 'null']
    >>> parse_schema({"properties": {"a": {"type": "integer"}}}).properties["a"].integer
    True
    >>> doc = SchemaDocument({"type": "object", "definitions": {"Id": {"type": "string"}}})
    >>> type(doc.resolve("#/definitions/Id")).__name__
    'StringNode'
"""

# Standard
from typing import Any, Dict, List, Literal, Optional, Union

# Third-Party
import orjson
from pydantic import BaseModel, ConfigDict, Field, field_validator, PrivateAttr, ValidationInfo
from pydantic import ValidationError as PydanticValidationError

# First-Party
from schemock.exceptions import SchemaParseError, SchemaRefError
from schemock.utils.fingerprint import fingerprint

JSONValue = Any

SCHEMA_TYPES = ("string", "number", "integer", "boolean", "object", "array", "null")
COMPOSITION_KEYWORDS = ("oneOf", "anyOf", "allOf")
# Keywords that still shape the value when they sit next to $ref or a composition.
SIBLING_KEYWORDS = ("type", "properties", "required", "additionalProperties", "items")
ROUTES_EXTENSION = "x-schemock-routes"
HTTP_METHODS = ("get", "post", "put", "delete", "patch")

# ---------------------------------------------------------------------------
# Schema nodes
# ---------------------------------------------------------------------------


class SchemaNodeBase(BaseModel):
    """Keywords shared by every schema node."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: Optional[str] = None
    description: Optional[str] = None
    enum: Optional[List[Any]] = None
    const: Optional[Any] = None

    _raw: Dict[str, Any] = PrivateAttr(default_factory=dict)
    _siblings: Any = PrivateAttr(default=None)

    @property
    def raw(self) -> Dict[str, Any]:
        """The JSON mapping this node was parsed from.

        Returns:
            Dict[str, Any]: Raw schema.
        """
        return self._raw

    @property
    def siblings(self) -> Optional["SchemaNode"]:
        """Typed keywords declared next to a ``$ref`` or a composition keyword.

        Returns:
            Optional[SchemaNode]: The sibling keywords as a node, None when there are none.

        Examples:
            >>> node = parse_schema({"type": "object", "required": ["id"], "allOf": [{"type": "object"}]})
            >>> type(node).__name__, node.siblings.required
            ('CompositionNode', ['id'])
            >>> parse_schema({"$ref": "#/definitions/A", "description": "only docs"}).siblings is None
            True
        """
        return self._siblings

    @property
    def has_const(self) -> bool:
        """Whether ``const`` was given explicitly (``null`` included).

        Returns:
            bool: True if the schema declared ``const``.

        Examples:
            >>> parse_schema({"const": None}).has_const
            True
            >>> parse_schema({}).has_const
            False
        """
        return "const" in self.model_fields_set

    @field_validator("enum")
    @classmethod
    def _validate_enum(cls, value: Optional[List[Any]]) -> Optional[List[Any]]:
        """Reject an empty ``enum``.

        Args:
            value: Declared enum.

        Returns:
            The enum.

        Raises:
            ValueError: If the enum is empty.
        """
        if value is not None and len(value) == 0:
            raise ValueError("enum must contain at least one value")
        return value


def _child(value: Any, info: ValidationInfo, keyword: str) -> "SchemaNode":
    """Parse a nested schema, tracking its location for error messages.

    Args:
        value: Raw nested schema.
        info: Pydantic validation info carrying the parent path.
        keyword: Location of the child below its parent.

    Returns:
        SchemaNode: Parsed child.
    """
    if isinstance(value, SchemaNodeBase):
        return value
    parent = (info.context or {}).get("path", "#")
    return parse_schema(value, f"{parent}/{keyword}")


class RefNode(SchemaNodeBase):
    """A ``$ref`` pointer into the root document."""

    ref: str = Field(alias="$ref")

    @field_validator("ref")
    @classmethod
    def _internal_only(cls, value: str) -> str:
        """Only document-internal pointers are supported.

        Args:
            value: The pointer.

        Returns:
            The pointer.

        Raises:
            SchemaRefError: If the pointer targets another document.
        """
        if value != "#" and not value.startswith("#/"):
            raise SchemaRefError(f"External references are not supported: {value}", value, "Inline the referenced schema under definitions and point to it with #/definitions/...")
        return value


class CompositionNode(SchemaNodeBase):
    """``oneOf`` / ``anyOf`` / ``allOf`` composition."""

    one_of: Optional[List["SchemaNode"]] = Field(default=None, alias="oneOf")
    any_of: Optional[List["SchemaNode"]] = Field(default=None, alias="anyOf")
    all_of: Optional[List["SchemaNode"]] = Field(default=None, alias="allOf")

    @field_validator("one_of", "any_of", "all_of", mode="before")
    @classmethod
    def _parse_alternatives(cls, value: Any, info: ValidationInfo) -> Any:
        """Parse every alternative.

        Args:
            value: Raw alternatives.
            info: Validation info.

        Returns:
            List of parsed alternatives.

        Raises:
            SchemaParseError: If the alternatives are not a non-empty list.
        """
        if value is None:
            return value
        keyword = {"one_of": "oneOf", "any_of": "anyOf", "all_of": "allOf"}[info.field_name]
        if not isinstance(value, list) or not value:
            raise SchemaParseError(f"{keyword} must be a non-empty list of schemas", {"keyword": keyword})
        return [_child(item, info, f"{keyword}/{index}") for index, item in enumerate(value)]

    @property
    def mode(self) -> str:
        """The composition keyword in effect (``oneOf`` wins over ``anyOf`` over ``allOf``).

        Returns:
            str: ``oneOf``, ``anyOf`` or ``allOf``.
        """
        if self.one_of:
            return "oneOf"
        if self.any_of:
            return "anyOf"
        return "allOf"

    @property
    def alternatives(self) -> List["SchemaNode"]:
        """Alternatives of the active keyword.

        Returns:
            List[SchemaNode]: Parsed alternatives.
        """
        return self.one_of or self.any_of or self.all_of or []


class StringNode(SchemaNodeBase):
    """``type: string`` with its constraints."""

    type: Literal["string"] = "string"
    min_length: Optional[int] = Field(default=None, alias="minLength", ge=0)
    max_length: Optional[int] = Field(default=None, alias="maxLength", ge=0)
    pattern: Optional[str] = None
    format: Optional[str] = None


class NumberNode(SchemaNodeBase):
    """``type: number`` or ``type: integer`` with its constraints."""

    type: Literal["number", "integer"] = "number"
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    exclusive_minimum: Optional[Union[bool, float]] = Field(default=None, alias="exclusiveMinimum")
    exclusive_maximum: Optional[Union[bool, float]] = Field(default=None, alias="exclusiveMaximum")
    multiple_of: Optional[float] = Field(default=None, alias="multipleOf", gt=0)

    @property
    def integer(self) -> bool:
        """Whether whole numbers are required.

        Returns:
            bool: True for ``type: integer``.
        """
        return self.type == "integer"


class BooleanNode(SchemaNodeBase):
    """``type: boolean``."""

    type: Literal["boolean"] = "boolean"


class NullNode(SchemaNodeBase):
    """``type: null``."""

    type: Literal["null"] = "null"


class ArrayNode(SchemaNodeBase):
    """``type: array`` with a single ``items`` schema or a tuple of schemas."""

    type: Literal["array"] = "array"
    items: Optional[Union["SchemaNode", List["SchemaNode"]]] = None
    min_items: Optional[int] = Field(default=None, alias="minItems", ge=0)
    max_items: Optional[int] = Field(default=None, alias="maxItems", ge=0)

    @field_validator("items", mode="before")
    @classmethod
    def _parse_items(cls, value: Any, info: ValidationInfo) -> Any:
        """Parse the item schema(s).

        Args:
            value: Raw ``items``.
            info: Validation info.

        Returns:
            Parsed node or list of nodes.
        """
        if value is None:
            return value
        if isinstance(value, list):
            return [_child(item, info, f"items/{index}") for index, item in enumerate(value)]
        return _child(value, info, "items")

    @property
    def is_tuple(self) -> bool:
        """Whether ``items`` is a positional tuple.

        Returns:
            bool: True for tuple arrays.
        """
        return isinstance(self.items, list)


class ObjectNode(SchemaNodeBase):
    """``type: object`` with ordered properties."""

    type: Literal["object"] = "object"
    properties: Dict[str, "SchemaNode"] = Field(default_factory=dict)
    required: List[str] = Field(default_factory=list)
    additional_properties: Optional[Union[bool, "SchemaNode"]] = Field(default=None, alias="additionalProperties")

    @field_validator("properties", mode="before")
    @classmethod
    def _parse_properties(cls, value: Any, info: ValidationInfo) -> Any:
        """Parse every property schema, keeping declaration order.

        Args:
            value: Raw ``properties``.
            info: Validation info.

        Returns:
            Ordered mapping of parsed property schemas.

        Raises:
            SchemaParseError: If ``properties`` is not a mapping.
        """
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise SchemaParseError("properties must be an object mapping names to schemas", {"path": (info.context or {}).get("path", "#")})
        return {name: _child(prop, info, f"properties/{name}") for name, prop in value.items()}

    @field_validator("additional_properties", mode="before")
    @classmethod
    def _parse_additional(cls, value: Any, info: ValidationInfo) -> Any:
        """Parse ``additionalProperties`` when it is a schema.

        Args:
            value: Raw ``additionalProperties``.
            info: Validation info.

        Returns:
            A boolean, a parsed node or None.
        """
        if value is None or isinstance(value, bool):
            return value
        return _child(value, info, "additionalProperties")


class MultiTypeNode(SchemaNodeBase):
    """``type`` given as a list; one parsed variant per listed type."""

    types: List[str]
    variants: List["SchemaNode"]


class AnyNode(SchemaNodeBase):
    """Schema without a usable ``type`` keyword."""


SchemaNode = Union[RefNode, CompositionNode, StringNode, NumberNode, BooleanNode, NullNode, ArrayNode, ObjectNode, MultiTypeNode, AnyNode]

for _model in (CompositionNode, ArrayNode, ObjectNode, MultiTypeNode):
    _model.model_rebuild()

_TYPE_MODELS = {
    "string": StringNode,
    "number": NumberNode,
    "integer": NumberNode,
    "boolean": BooleanNode,
    "null": NullNode,
    "array": ArrayNode,
    "object": ObjectNode,
}


def _format_errors(exc: PydanticValidationError) -> List[str]:
    """Flatten pydantic errors into readable strings.

    Args:
        exc: Pydantic validation error.

    Returns:
        List[str]: One ``location: message`` entry per error.
    """
    return [f"{'.'.join(str(part) for part in error['loc']) or '<root>'}: {error['msg']}" for error in exc.errors()]


def parse_schema(raw: Any, path: str = "#") -> SchemaNode:
    """Turn a raw JSON Schema mapping into its node variant.

    Args:
        raw: Raw schema (a mapping, or a boolean schema).
        path: Pointer of ``raw`` inside its document, used in error messages.

    Returns:
        SchemaNode: The parsed node.

    Raises:
        SchemaParseError: If the schema or one of its constraints is malformed.
        SchemaRefError: If a ``$ref`` points outside the document.

    Examples:
        >>> type(parse_schema({"$ref": "#/definitions/User"})).__name__
        'RefNode'
        >>> parse_schema({"oneOf": [{"type": "string"}, {"type": "integer"}]}).mode
        'oneOf'
        >>> parse_schema({"type": "colour"})
        Traceback (most recent call last):
        ...
        schemock.exceptions.SchemaParseError: Invalid schema type at #: colour. Must be one of: string, number, integer, boolean, object, array, null
    """
    if isinstance(raw, bool):
        node: SchemaNode = AnyNode()
        node._raw = {}
        return node
    if not isinstance(raw, dict):
        raise SchemaParseError(f"Schema at {path} must be an object", {"path": path, "type": type(raw).__name__})

    context = {"path": path}
    try:
        if "$ref" in raw:
            node = RefNode.model_validate(raw, context=context)
        elif any(keyword in raw for keyword in COMPOSITION_KEYWORDS):
            node = CompositionNode.model_validate(raw, context=context)
        else:
            node = _parse_typed(raw, path, context)
        if isinstance(node, (RefNode, CompositionNode)):
            node._siblings = _parse_siblings(raw, path, context)
    except PydanticValidationError as exc:
        raise SchemaParseError(f"Invalid schema at {path}", {"path": path, "errors": _format_errors(exc)}) from exc

    node._raw = raw
    return node


def _parse_typed(raw: Dict[str, Any], path: str, context: Dict[str, Any]) -> SchemaNode:
    """Parse a schema without ``$ref`` or composition keywords.

    Args:
        raw: Raw schema.
        path: Pointer of the schema.
        context: Pydantic validation context.

    Returns:
        SchemaNode: Parsed node.

    Raises:
        SchemaParseError: If ``type`` is unknown.
    """
    declared = raw.get("type")
    if isinstance(declared, list):
        if not declared:
            raise SchemaParseError(f"Schema type list at {path} cannot be empty", {"path": path})
        for name in declared:
            _check_type_name(name, path)
        if len(declared) == 1:
            return parse_schema({**raw, "type": declared[0]}, path)
        variants = [parse_schema({**raw, "type": name}, path) for name in declared]
        return MultiTypeNode.model_validate({**raw, "types": list(declared), "variants": variants}, context=context)

    if declared is None:
        if "properties" in raw or "additionalProperties" in raw or "required" in raw:
            return ObjectNode.model_validate({**raw, "type": "object"}, context=context)
        if "items" in raw:
            return ArrayNode.model_validate({**raw, "type": "array"}, context=context)
        return AnyNode.model_validate(raw, context=context)

    _check_type_name(declared, path)
    return _TYPE_MODELS[declared].model_validate(raw, context=context)


def _parse_siblings(raw: Dict[str, Any], path: str, context: Dict[str, Any]) -> Optional[SchemaNode]:
    """Parse the typed keywords next to ``$ref`` or a composition keyword.

    Args:
        raw: Raw schema carrying ``$ref`` or a composition keyword.
        path: Pointer of the schema.
        context: Pydantic validation context.

    Returns:
        Optional[SchemaNode]: Parsed siblings, None when no typed keyword is present.
    """
    rest = {key: value for key, value in raw.items() if key not in ("$ref",) + COMPOSITION_KEYWORDS}
    if not any(key in rest for key in SIBLING_KEYWORDS):
        return None
    node = _parse_typed(rest, path, context)
    if not node._raw:
        node._raw = rest
    return node


def _check_type_name(name: Any, path: str) -> None:
    """Reject unknown JSON types.

    Args:
        name: Declared type name.
        path: Pointer of the schema.

    Raises:
        SchemaParseError: If ``name`` is not a JSON Schema type.
    """
    if name not in SCHEMA_TYPES:
        raise SchemaParseError(f"Invalid schema type at {path}: {name}. Must be one of: {', '.join(SCHEMA_TYPES)}", {"path": path, "type": name})


def is_schema_like(value: Any) -> bool:
    """Whether a route response value should be treated as a schema.

    Args:
        value: Response value from a route definition.

    Returns:
        bool: True for mappings carrying ``type``, ``$ref`` or a composition keyword.

    Examples:
        >>> is_schema_like({"type": "string"})
        True
        >>> is_schema_like({"message": "ok"})
        False
    """
    return isinstance(value, dict) and any(key in value for key in ("type", "$ref") + COMPOSITION_KEYWORDS)


# ---------------------------------------------------------------------------
# Custom routes and documents
# ---------------------------------------------------------------------------


class CustomRouteSpec(BaseModel):
    """One entry of the ``x-schemock-routes`` extension list."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    path: str = Field(..., min_length=1)
    method: Literal["get", "post", "put", "delete", "patch"] = "get"
    response: Optional[Any] = None
    status_code: Optional[int] = Field(default=None, alias="statusCode", ge=100, le=599)
    delay: int = Field(default=0, ge=0, description="Artificial delay in milliseconds")
    headers: Dict[str, str] = Field(default_factory=dict)

    @field_validator("method", mode="before")
    @classmethod
    def _lower_method(cls, value: Any) -> Any:
        """Accept methods in any case.

        Args:
            value: Raw method.

        Returns:
            Lower-cased method.
        """
        return value.lower() if isinstance(value, str) else value

    @field_validator("path")
    @classmethod
    def _absolute_path(cls, value: str) -> str:
        """Require an absolute path template.

        Args:
            value: Raw path.

        Returns:
            The path.

        Raises:
            ValueError: If the path does not start with ``/``.
        """
        if not value.startswith("/"):
            raise ValueError("route path must start with /")
        return value


class SchemaDocument:
    """A root schema plus everything derived from it once.

    The document is the fixed root every ``$ref`` resolves against. The raw
    schema, the parsed root and the custom routes are set once in the
    constructor. The only state filled in later is the per-pointer memo of
    ``resolve()``; a racing fill stores an equivalent node for the same
    pointer, so a document can be shared by concurrent generations.

    Attributes:
        raw: Root schema mapping.
        root: Parsed root node.
        digest: Structural fingerprint of the raw document.
        routes: Parsed ``x-schemock-routes`` entries.

    Examples:
        >>> doc = SchemaDocument({"title": "User", "type": "object"})
        >>> doc.title
        'User'
        >>> SchemaDocument([1, 2])
        Traceback (most recent call last):
        ...
        schemock.exceptions.SchemaParseError: Schema must be a JSON object
    """

    def __init__(self, raw: Any):
        """Validate and parse a root schema.

        Args:
            raw: Root schema mapping, or a JSON string/bytes holding one.

        Raises:
            SchemaParseError: If the root is not an object or lacks a type/composition keyword.
        """
        if isinstance(raw, (str, bytes)):
            try:
                raw = orjson.loads(raw)
            except orjson.JSONDecodeError as exc:
                raise SchemaParseError(f"Schema is not valid JSON: {exc}") from exc
        if not isinstance(raw, dict):
            raise SchemaParseError("Schema must be a JSON object", {"type": type(raw).__name__}, "Check that your schema file contains a single root object { ... }.")
        if not any(key in raw for key in ("type", "$ref") + COMPOSITION_KEYWORDS):
            raise SchemaParseError(
                "Schema must have a type or composition keyword (oneOf, anyOf, allOf, $ref)",
                {"keys": sorted(raw)},
                'Add "type": "object" or similar to your root schema.',
            )
        self.raw: Dict[str, Any] = raw
        self.root: SchemaNode = parse_schema(raw)
        self.digest = fingerprint(raw)
        self.routes: List[CustomRouteSpec] = self._parse_routes(raw.get(ROUTES_EXTENSION))
        self._resolved: Dict[str, SchemaNode] = {}

    @classmethod
    def ensure(cls, schema: Any) -> "SchemaDocument":
        """Return ``schema`` as a document, parsing it when needed.

        Args:
            schema: A document, a raw mapping, or JSON text.

        Returns:
            SchemaDocument: The document.
        """
        if isinstance(schema, SchemaDocument):
            return schema
        return cls(schema)

    @property
    def title(self) -> Optional[str]:
        """The root ``title``.

        Returns:
            Optional[str]: Title if declared.
        """
        title = self.raw.get("title")
        return title if isinstance(title, str) else None

    @staticmethod
    def _parse_routes(entries: Any) -> List[CustomRouteSpec]:
        """Parse the custom route extension list.

        Args:
            entries: Raw ``x-schemock-routes`` value.

        Returns:
            List[CustomRouteSpec]: Parsed route specs.

        Raises:
            SchemaParseError: If the extension is not a list of valid route objects.
        """
        if entries is None:
            return []
        if not isinstance(entries, list):
            raise SchemaParseError(f"{ROUTES_EXTENSION} must be a list of route definitions")
        routes = []
        for index, entry in enumerate(entries):
            try:
                routes.append(CustomRouteSpec.model_validate(entry))
            except PydanticValidationError as exc:
                raise SchemaParseError(f"Invalid route definition at {ROUTES_EXTENSION}[{index}]", {"errors": _format_errors(exc)}) from exc
        return routes

    def resolve(self, ref: str) -> SchemaNode:
        """Resolve an internal pointer against the root schema.

        Args:
            ref: Pointer such as ``#/definitions/User`` (``~0``/``~1`` escapes allowed).

        Returns:
            SchemaNode: The parsed target schema.

        Raises:
            SchemaRefError: If a path segment is missing or the target is not a schema.

        Examples:
            >>> doc = SchemaDocument({"type": "object", "definitions": {}})
            >>> doc.resolve("#/definitions/Missing")
            Traceback (most recent call last):
            ...
            schemock.exceptions.SchemaRefError: Cannot resolve $ref: #/definitions/Missing. Path not found: Missing
        """
        cached = self._resolved.get(ref)
        if cached is not None:
            return cached

        if ref != "#" and not ref.startswith("#/"):
            raise SchemaRefError(f"External references are not supported: {ref}", ref)

        target: Any = self.raw
        segments = ref[2:].split("/") if ref != "#" else []
        for segment in segments:
            part = segment.replace("~1", "/").replace("~0", "~")
            if isinstance(target, dict) and part in target:
                target = target[part]
            elif isinstance(target, list) and part.isdigit() and int(part) < len(target):
                target = target[int(part)]
            else:
                raise SchemaRefError(f"Cannot resolve $ref: {ref}. Path not found: {part}", ref)

        if not isinstance(target, dict):
            raise SchemaRefError(f"Cannot resolve $ref: {ref}. Resolved value is not a valid Schema", ref)

        node = self.root if target is self.raw else parse_schema(target, ref)
        self._resolved[ref] = node
        return node


# ---------------------------------------------------------------------------
# Route request / response
# ---------------------------------------------------------------------------


class RouteRequest(BaseModel):
    """What a route handler sees of an inbound request.

    Examples:
        >>> RouteRequest(method="get", path="/api/users/1", params={"id": "1"}).method
        'GET'
    """

    params: Dict[str, str] = Field(default_factory=dict)
    query: Dict[str, Any] = Field(default_factory=dict)
    body: Optional[Any] = None
    method: str = "GET"
    path: str = "/"
    headers: Dict[str, str] = Field(default_factory=dict)

    @field_validator("method")
    @classmethod
    def _upper_method(cls, value: str) -> str:
        """Normalize the method name.

        Args:
            value: Raw method.

        Returns:
            Upper-cased method.
        """
        return value.upper()


class MockResponse(BaseModel):
    """Status, body and headers produced for one request.

    Attributes:
        status_code: HTTP status
        body: JSON body, None for an empty body
        headers: Extra response headers
        synthetic: True when a scenario fault produced this response
    """

    status_code: int = 200
    body: Optional[Any] = None
    headers: Dict[str, str] = Field(default_factory=dict)
    synthetic: bool = False
