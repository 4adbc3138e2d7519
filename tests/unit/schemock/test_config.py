# -*- coding: utf-8 -*-
"""Location: ./tests/unit/schemock/test_config.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Unit tests for Settings.
"""

# Third-Party
from pydantic import ValidationError as PydanticValidationError
import pytest

# First-Party
from schemock.config import get_settings, Settings


def test_defaults(settings):
    assert settings.cors_enabled is True
    assert settings.api_prefix == "api"
    assert settings.scenario == "happy-path"
    assert settings.strict is False
    assert settings.wrap_responses is True
    assert settings.cache_max_size == 500
    assert settings.seed is None
    assert settings.seed_record_count == 3
    assert settings.optional_property_probability == 0.9
    assert settings.fault_probability == 0.3
    assert settings.fault_status_codes == [400, 401, 403, 404, 500, 503]
    assert settings.circular_ref_policy == "placeholder"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("SCHEMOCK_SCENARIO", "sad-path")
    monkeypatch.setenv("SCHEMOCK_SEED", "42")
    monkeypatch.setenv("SCHEMOCK_STRICT", "true")
    monkeypatch.setenv("SCHEMOCK_LOG_LEVEL", "debug")
    monkeypatch.setenv("SCHEMOCK_FAULT_STATUS_CODES", "[500, 503]")
    configured = Settings(_env_file=None)
    assert configured.scenario == "sad-path"
    assert configured.seed == 42
    assert configured.strict is True
    assert configured.log_level == "DEBUG"
    assert configured.fault_status_codes == [500, 503]


def test_get_settings_is_cached():
    assert get_settings() is get_settings()


def test_base_path_normalized():
    assert Settings(_env_file=None, base_path="/v1/users/").base_path == "/v1/users"


@pytest.mark.parametrize(
    "overrides",
    [
        {"base_path": "v1/users"},
        {"base_path": "/"},
        {"scenario": "chaos"},
        {"seed_record_count": -1},
        {"cache_max_size": 0},
        {"cache_ttl": -1},
        {"fault_probability": 1.5},
        {"fault_status_codes": []},
        {"fault_status_codes": [200]},
        {"log_level": "LOUD"},
        {"circular_ref_policy": "ignore"},
    ],
)
def test_invalid_values(overrides):
    with pytest.raises(PydanticValidationError):
        Settings(_env_file=None, **overrides)
