# -*- coding: utf-8 -*-
"""Location: ./schemock/services/validation_service.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Validation Service.
This module implements the two checks strict mode adds on top of generation:

- ``lint_strict``: rejects under-specified schemas (objects without
  ``properties``/``additionalProperties``, arrays without ``items``) when the
  route table is built.
- ``validate_data``: checks a request body against the record schema before
  it reaches the resource store.

Bodies are validated with ``jsonschema``. The record schema is addressed by
its pointer inside the root document, which is registered once per document
so every ``$ref`` resolves against the root. Both checks raise
``ValidationError`` naming the offending field with a dotted path.

Examples:
    >>> from schemock.schemas import SchemaDocument
    >>> doc = SchemaDocument({
    ...     "type": "object",
    ...     "required": ["name"],
    ...     "properties": {"name": {"type": "string", "minLength": 2}, "age": {"type": "integer", "minimum": 0}},
    ... })
    >>> validate_data({"name": "Ann", "age": 3}, doc)
    >>> validate_data({"age": 3}, doc)
    Traceback (most recent call last):
    ...
    schemock.exceptions.ValidationError: Missing required field: name
    >>> validate_data({"age": 3}, doc, optional=("name",))
"""

# Standard
from functools import lru_cache
from typing import Any, Iterable, Optional, Tuple, Type

# Third-Party
from jsonschema import Draft4Validator, Draft6Validator, Draft7Validator, validators
from jsonschema.exceptions import SchemaError
from jsonschema.exceptions import ValidationError as SchemaViolation
import orjson
from referencing import Registry, Resource
from referencing.jsonschema import DRAFT7

# First-Party
from schemock.exceptions import SchemaParseError, ValidationError
from schemock.schemas import ArrayNode, CompositionNode, MultiTypeNode, ObjectNode, RefNode, SchemaDocument, SchemaNode
from schemock.services.logging_service import LoggingService

# Initialize logging service first
logging_service = LoggingService()
logger = logging_service.get_logger(__name__)

DOCUMENT_URI = "urn:schemock:document"


def _join(prefix: str, name: Any) -> str:
    """Append a segment to a dotted field path.

    Args:
        prefix: Current path, possibly empty.
        name: Next segment.

    Returns:
        str: Joined path.
    """
    return f"{prefix}.{name}" if prefix else str(name)


def lint_strict(node: SchemaNode, path: str = "") -> None:
    """Reject schemas too loose to serve in strict mode.

    Walks properties, items, ``additionalProperties`` schemas, composition
    alternatives and the properties declared next to a ``$ref`` or a
    composition. ``$ref`` targets are checked where they are defined, not
    where they are used.

    Args:
        node: Root node to check.
        path: Dotted path of ``node``, empty for the root.

    Raises:
        ValidationError: On an object without ``properties``/``additionalProperties``
            or an array without ``items``.

    Examples:
        >>> from schemock.schemas import parse_schema
        >>> lint_strict(parse_schema({"type": "object", "properties": {"tags": {"type": "array"}}}))
        Traceback (most recent call last):
        ...
        schemock.exceptions.ValidationError: Strict mode: array schema must define items
    """
    if isinstance(node, (RefNode, CompositionNode)) and isinstance(node.siblings, ObjectNode):
        for name, prop in node.siblings.properties.items():
            lint_strict(prop, _join(path, f"properties.{name}"))

    if isinstance(node, ObjectNode):
        if not node.properties and not node.additional_properties:
            raise ValidationError(
                "Strict mode: object schema must define properties or additionalProperties",
                _join(path, "properties"),
                hint="In strict mode, objects must explicitly list their allowed properties.",
            )
        for name, prop in node.properties.items():
            lint_strict(prop, _join(path, f"properties.{name}"))
        if isinstance(node.additional_properties, (ObjectNode, ArrayNode, CompositionNode, MultiTypeNode)):
            lint_strict(node.additional_properties, _join(path, "additionalProperties"))
    elif isinstance(node, ArrayNode):
        if node.items is None:
            raise ValidationError(
                "Strict mode: array schema must define items",
                _join(path, "items"),
                hint="In strict mode, arrays must define what kind of items they contain.",
            )
        items = node.items if isinstance(node.items, list) else [node.items]
        for index, item in enumerate(items):
            lint_strict(item, _join(path, "items" if not node.is_tuple else f"items.{index}"))
    elif isinstance(node, CompositionNode):
        for index, alternative in enumerate(node.alternatives):
            lint_strict(alternative, _join(path, f"{node.mode}.{index}"))
    elif isinstance(node, MultiTypeNode):
        for variant in node.variants:
            lint_strict(variant, path)


def lint_document(document: SchemaDocument) -> None:
    """Strict-lint the root schema and every schema under ``definitions``/``$defs``.

    Also selects the body validator of the document, so a schema that no
    supported JSON Schema draft accepts fails when the routes are built
    instead of on the first request.

    Args:
        document: Schema document.

    Raises:
        ValidationError: On the first under-specified schema.
        SchemaParseError: If no supported draft accepts the document.
    """
    lint_strict(document.root)
    for section in ("definitions", "$defs"):
        entries = document.raw.get(section)
        if not isinstance(entries, dict):
            continue
        for name in entries:
            pointer = "#/{}/{}".format(section, name.replace("~", "~0").replace("/", "~1"))
            lint_strict(document.resolve(pointer), f"{section}.{name}")
    _get_validator_class_and_check(_serialize_schema(document.raw))


def _serialize_schema(schema: dict) -> str:
    """Serialize a schema as the cache key of its validator.

    Keys stay in declaration order, so violations are found in the order
    properties are declared.

    Args:
        schema: Raw schema.

    Returns:
        str: Compact JSON text.

    Examples:
        >>> _serialize_schema({"b": 1, "a": {"d": 2, "c": 3}})
        '{"b":1,"a":{"d":2,"c":3}}'
    """
    return orjson.dumps(schema).decode()


@lru_cache(maxsize=128)
def _get_validator_class_and_check(schema_json: str) -> Tuple[Type[Any], dict]:
    """Pick the draft validating a document and check the document against it.

    The draft named by ``$schema`` is tried first (Draft 7 when absent), then
    the older drafts, so documents using the Draft 4 boolean form of
    ``exclusiveMinimum``/``exclusiveMaximum`` still validate.

    Args:
        schema_json: JSON text of the root schema.

    Returns:
        Tuple[Type[Any], dict]: Validator class and the decoded schema.

    Raises:
        SchemaParseError: If no supported draft accepts the schema.

    Examples:
        >>> cls, schema = _get_validator_class_and_check('{"type":"object"}')
        >>> cls.__name__, schema
        ('Draft7Validator', {'type': 'object'})
        >>> _get_validator_class_and_check('{"minimum":0,"exclusiveMinimum":true}')[0].__name__
        'Draft4Validator'
    """
    schema = orjson.loads(schema_json)
    candidates = [validators.validator_for(schema, default=Draft7Validator), Draft7Validator, Draft6Validator, Draft4Validator]
    first_error: Optional[SchemaError] = None
    for validator_cls in candidates:
        try:
            validator_cls.check_schema(schema)
        except SchemaError as exc:
            first_error = first_error or exc
            continue
        return validator_cls, schema
    raise SchemaParseError(f"Schema is not valid JSON Schema: {first_error.message}", {"path": "/".join(str(part) for part in first_error.path)}) from first_error


@lru_cache(maxsize=256)
def _get_validator(schema_json: str, pointer: str) -> Any:
    """Build the validator of the sub-schema at ``pointer``.

    The root document is registered under ``DOCUMENT_URI``; the validator's own
    schema is a single reference into it, so relative references inside the
    sub-schema resolve against the root.

    Args:
        schema_json: JSON text of the root schema.
        pointer: Pointer of the sub-schema, ``#`` for the root.

    Returns:
        Any: A ``jsonschema`` validator instance.
    """
    validator_cls, schema = _get_validator_class_and_check(schema_json)
    registry = Registry().with_resource(DOCUMENT_URI, Resource.from_contents(schema, default_specification=DRAFT7))
    return validator_cls({"$ref": f"{DOCUMENT_URI}{pointer}"}, registry=registry, format_checker=validator_cls.FORMAT_CHECKER)


def _missing_property(error: SchemaViolation) -> Optional[str]:
    """Name the property a ``required`` violation reports.

    Args:
        error: A ``required`` violation.

    Returns:
        Optional[str]: The missing property.
    """
    for name in error.validator_value:
        if error.message.startswith(f"{name!r} "):
            return name
    return None


def _violations(data: Any, validator: Any, optional: Iterable[str]) -> list:
    """Collect violations, skipping top-level ``required`` names listed in ``optional``.

    Args:
        data: Value to check.
        validator: ``jsonschema`` validator.
        optional: Top-level properties the caller fills in itself.

    Returns:
        list: Remaining violations in discovery order.
    """
    skipped = set(optional)
    kept = []
    for error in validator.iter_errors(data):
        if error.validator == "required" and not error.absolute_path and _missing_property(error) in skipped:
            continue
        kept.append(error)
    return kept


def validate_data(data: Any, document: SchemaDocument, pointer: str = "#", optional: Iterable[str] = ()) -> None:
    """Validate a decoded JSON value against a schema of the document.

    Args:
        data: Value to check.
        document: Root document.
        pointer: Pointer of the schema to check against, ``#`` for the root.
        optional: Top-level required properties the caller assigns itself.

    Raises:
        ValidationError: On the shallowest violation, first found wins among equals.
        SchemaParseError: If no supported draft accepts the document.

    Examples:
        >>> doc = SchemaDocument({"type": "array", "items": {"type": "object", "properties": {"qty": {"type": "integer", "multipleOf": 5}}}})
        >>> validate_data({"qty": 10}, doc, "#/items")
        >>> validate_data({"qty": 7}, doc, "#/items")
        Traceback (most recent call last):
        ...
        schemock.exceptions.ValidationError: 7 is not a multiple of 5
    """
    validator = _get_validator(_serialize_schema(document.raw), pointer)
    errors = _violations(data, validator, optional)
    if not errors:
        return

    error = min(errors, key=lambda candidate: len(candidate.absolute_path))
    path = ".".join(str(part) for part in error.absolute_path)
    logger.debug(f"Body rejected by {error.validator} at {'/'.join(str(part) for part in error.absolute_schema_path)}")
    if error.validator == "required":
        name = _missing_property(error)
        raise ValidationError(f"Missing required field: {name}", _join(path, name))
    raise ValidationError(error.message, path or str(error.validator), error.instance)
