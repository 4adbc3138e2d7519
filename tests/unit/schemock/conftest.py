# -*- coding: utf-8 -*-
"""Location: ./tests/unit/schemock/conftest.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Shared fixtures for schemock unit tests.
"""

# Standard
import os

# Third-Party
import pytest

# First-Party
from schemock.config import get_settings, Settings
from schemock.utils.seeded_random import SeededRandom


class FixedRandom(SeededRandom):
    """Random source replaying a fixed sequence of draws (last value repeats)."""

    def __init__(self, *values: float):
        super().__init__(None)
        self.values = list(values) or [0.5]
        self.calls = 0

    def next(self) -> float:
        value = self.values[min(self.calls, len(self.values) - 1)]
        self.calls += 1
        return value


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Keep tests independent from SCHEMOCK_* variables of the host environment."""
    for key in list(os.environ):
        if key.startswith("SCHEMOCK_"):
            monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings():
    """Settings with defaults only (no .env file)."""
    return Settings(_env_file=None)


@pytest.fixture
def user_schema():
    """A typical resource schema."""
    return {
        "title": "User",
        "type": "object",
        "required": ["id", "name", "email"],
        "properties": {
            "id": {"type": "string", "format": "uuid"},
            "name": {"type": "string"},
            "email": {"type": "string", "format": "email"},
            "age": {"type": "integer", "minimum": 18, "maximum": 99},
            "role": {"type": "string", "enum": ["admin", "member"]},
        },
    }


@pytest.fixture
def tree_schema():
    """A schema whose node refers back to itself."""
    return {
        "type": "object",
        "required": ["root"],
        "properties": {"root": {"$ref": "#/definitions/Node"}},
        "definitions": {
            "Node": {
                "type": "object",
                "required": ["value", "child"],
                "properties": {
                    "value": {"type": "integer"},
                    "child": {"$ref": "#/definitions/Node"},
                },
            }
        },
    }


@pytest.fixture
def fixed_random():
    """Factory for random sources with a scripted sequence."""
    return FixedRandom
