# -*- coding: utf-8 -*-
"""Location: ./tests/conftest.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Session-wide pytest configuration.
"""

# Standard
import logging

# Third-Party
import pytest


@pytest.fixture(autouse=True)
def reset_schemock_logger():
    """Undo handlers and levels tests install on the ``schemock`` logger."""
    root = logging.getLogger("schemock")
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
