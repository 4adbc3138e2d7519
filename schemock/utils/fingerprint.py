# -*- coding: utf-8 -*-
"""Location: ./schemock/utils/fingerprint.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Structural fingerprints used as generation cache keys.

Two schemas with equal content produce the same digest regardless of object
identity or key order, so the cache is keyed by content.

Examples:
    >>> a = fingerprint({"type": "object", "properties": {"a": {"type": "string"}}})
    >>> b = fingerprint({"properties": {"a": {"type": "string"}}, "type": "object"})
    >>> a == b
    True
    >>> len(a)
    64
    >>> cache_key({"type": "string"}, strict=True) == cache_key({"type": "string"}, strict=False)
    False
"""

# Standard
import hashlib
from typing import Any, Optional

# Third-Party
import orjson


def fingerprint(value: Any) -> str:
    """Return the SHA-256 digest of a JSON-compatible value with sorted keys.

    Args:
        value: JSON-compatible value.

    Returns:
        str: Hex digest.
    """
    return hashlib.sha256(orjson.dumps(value, option=orjson.OPT_SORT_KEYS, default=str)).hexdigest()


def cache_key(schema: Any, *, strict: bool = False, property_name: Optional[str] = None, root_digest: Optional[str] = None) -> str:
    """Derive the cache key of a generation call.

    Args:
        schema: The schema being generated (raw JSON form).
        strict: Strictness flag of the call.
        property_name: Property-name hint of the call.
        root_digest: Digest of the root document ``$ref`` pointers resolve against.

    Returns:
        str: Hex digest combining the schema content and the options.
    """
    return fingerprint({"schema": schema, "strict": strict, "propertyName": property_name, "root": root_digest})
