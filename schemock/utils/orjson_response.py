# -*- coding: utf-8 -*-
"""Location: ./schemock/utils/orjson_response.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

ORJSON response class for the HTTP binding.
"""

# Standard
from typing import Any

# Third-Party
from fastapi.responses import JSONResponse
import orjson


class ORJSONResponse(JSONResponse):
    """JSON response serialized with orjson.

    Example:
        >>> response = ORJSONResponse(content={"id": "1", "tags": ["a"]})
        >>> response.media_type
        'application/json'
        >>> response.body
        b'{"id":"1","tags":["a"]}'
    """

    media_type = "application/json"

    def render(self, content: Any) -> bytes:
        """Render content to JSON bytes using orjson.

        Args:
            content: The content to serialize to JSON.

        Returns:
            JSON bytes ready for HTTP response.
        """
        return orjson.dumps(content, option=orjson.OPT_NON_STR_KEYS)
