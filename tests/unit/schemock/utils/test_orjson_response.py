# -*- coding: utf-8 -*-
"""Location: ./tests/unit/schemock/utils/test_orjson_response.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Unit tests for ORJSONResponse.
"""

# Third-Party
import orjson

# First-Party
from schemock.utils.orjson_response import ORJSONResponse


def test_render_compact_json():
    response = ORJSONResponse(content={"data": [1, 2.5, None, True]}, status_code=201)
    assert response.status_code == 201
    assert response.body == b'{"data":[1,2.5,null,true]}'
    assert response.headers["content-type"] == "application/json"


def test_render_non_string_keys():
    response = ORJSONResponse(content={1: "one"})
    assert orjson.loads(response.body) == {"1": "one"}


def test_extra_headers():
    response = ORJSONResponse(content={}, headers={"X-Mock": "1"})
    assert response.headers["x-mock"] == "1"
