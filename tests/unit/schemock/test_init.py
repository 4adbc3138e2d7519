# -*- coding: utf-8 -*-
"""Location: ./tests/unit/schemock/test_init.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Tests for the package entry points.
"""

# Third-Party
import pytest

# First-Party
import schemock
from schemock.main import create_app
from schemock.services.generator_service import generate
from schemock.services.mock_server_service import MockServer
from schemock.services.route_builder import build_route_table


def test_metadata():
    assert schemock.__version__ == "0.1.0"
    assert schemock.__license__ == "Apache 2.0"


def test_lazy_entry_points():
    assert schemock.generate is generate
    assert schemock.build_route_table is build_route_table
    assert schemock.MockServer is MockServer
    assert schemock.create_app is create_app


def test_unknown_attribute():
    with pytest.raises(AttributeError):
        schemock.does_not_exist  # pylint: disable=pointless-statement


def test_top_level_generate(user_schema):
    assert set(schemock.generate(user_schema, strict=True, seed=1)) == {"id", "name", "email"}
