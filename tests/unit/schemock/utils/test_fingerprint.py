# -*- coding: utf-8 -*-
"""Location: ./tests/unit/schemock/utils/test_fingerprint.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Unit tests for schema fingerprints and cache keys.
"""

# First-Party
from schemock.utils.fingerprint import cache_key, fingerprint


def test_fingerprint_ignores_key_order():
    assert fingerprint({"a": 1, "b": {"c": 2, "d": 3}}) == fingerprint({"b": {"d": 3, "c": 2}, "a": 1})


def test_fingerprint_distinguishes_content():
    assert fingerprint({"type": "string"}) != fingerprint({"type": "integer"})
    assert fingerprint([1, 2]) != fingerprint([2, 1])


def test_cache_key_components():
    schema = {"type": "string"}
    base = cache_key(schema)
    assert cache_key(dict(schema)) == base
    assert cache_key(schema, strict=True) != base
    assert cache_key(schema, property_name="email") != base
    assert cache_key(schema, root_digest=fingerprint({"type": "object"})) != base
