# -*- coding: utf-8 -*-
"""Location: ./schemock/config.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Schemock configuration.

All settings can be overridden through environment variables with the
``SCHEMOCK_`` prefix, or through a ``.env`` file in the working directory.
For example: ``SCHEMOCK_SCENARIO=slow``, ``SCHEMOCK_SEED=42``,
``SCHEMOCK_CACHE_MAX_SIZE=1000``.

Services never read these settings implicitly: ``MockServer`` and
``create_app`` pass the values into the generator, cache, store and scenario
policy at construction time, so tests can inject isolated settings.

Examples:
    >>> s = Settings(scenario="error-heavy", seed=7)
    >>> s.scenario, s.seed
    ('error-heavy', 7)
    >>> s.fault_probability
    0.3
"""

# Standard
from functools import lru_cache
from typing import List, Literal, Optional

# Third-Party
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# First-Party
from schemock.services.logging_service import LoggingService

logging_service = LoggingService()
logger = logging_service.get_logger(__name__)

Scenario = Literal["happy-path", "slow", "error-heavy", "sad-path"]
CircularRefPolicy = Literal["placeholder", "error"]


class Settings(BaseSettings):
    """Schemock settings.

    The generation constants that used to be hard-coded (optional property
    inclusion, fault probability, latency window) are plain fields here so
    they can be tuned per deployment or per test.
    """

    model_config = SettingsConfigDict(env_prefix="SCHEMOCK_", env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Server
    cors_enabled: bool = Field(default=True, description="Add permissive CORS headers to every response")

    # Routes
    api_prefix: str = Field(default="api", description="Path prefix used to derive the default base path (/{prefix}/{resource})")
    resource_name: Optional[str] = Field(default=None, description="Explicit resource name, overrides the schema title")
    base_path: Optional[str] = Field(default=None, description="Explicit base path, overrides /{prefix}/{resource}")
    wrap_responses: bool = Field(default=True, description="Wrap CRUD responses in a {success, message, timestamp, data} envelope")
    seed_record_count: int = Field(default=3, ge=0, le=1000, description="Number of records generated when an empty resource is first listed")

    # Generation
    strict: bool = Field(default=False, description="Strict mode: required-only generation and request body validation")
    seed: Optional[int] = Field(default=None, description="Seed for reproducible generation; unset means non-deterministic")
    optional_property_probability: float = Field(default=0.9, ge=0.0, le=1.0, description="Probability of including a non-required property")
    circular_ref_policy: CircularRefPolicy = Field(default="placeholder", description="What to do when a $ref re-enters its own resolution path")

    # Cache
    cache_enabled: bool = Field(default=True, description="Cache top-level generation results")
    cache_max_size: int = Field(default=500, ge=1, description="Maximum number of cached generation results")
    cache_ttl: float = Field(default=3600.0, ge=0.0, description="Seconds before a cached result expires (0 disables expiry)")

    # Scenario
    scenario: Scenario = Field(default="happy-path", description="Active behavioural profile")
    fault_probability: float = Field(default=0.3, ge=0.0, le=1.0, description="Probability of an injected fault in error-heavy/sad-path scenarios")
    slow_delay_base_ms: int = Field(default=1000, ge=0, description="Minimum injected latency in slow/sad-path scenarios")
    slow_delay_jitter_ms: int = Field(default=2000, ge=0, description="Random latency added on top of the base delay")
    fault_status_codes: List[int] = Field(default_factory=lambda: [400, 401, 403, 404, 500, 503], description="Status codes injected faults are drawn from")

    # Logging
    log_level: str = Field(default="INFO", description="Root log level")
    log_format: Literal["text", "json"] = Field(default="text", description="Log line format")

    @field_validator("base_path")
    @classmethod
    def _validate_base_path(cls, value: Optional[str]) -> Optional[str]:
        """Require an absolute base path.

        Args:
            value: Configured base path.

        Returns:
            The base path without a trailing slash.

        Raises:
            ValueError: If the base path does not start with ``/``.
        """
        if value is None:
            return value
        if not value.startswith("/") or not value.strip("/"):
            raise ValueError("base_path must start with / and name at least one segment")
        return value.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        """Normalize and check the log level.

        Args:
            value: Configured level name.

        Returns:
            The upper-cased level name.

        Raises:
            ValueError: If the level is unknown.
        """
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"log_level must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL (got {value!r})")
        return level

    @field_validator("fault_status_codes")
    @classmethod
    def _validate_fault_status_codes(cls, value: List[int]) -> List[int]:
        """Only error statuses can be injected.

        Args:
            value: Configured status codes.

        Returns:
            The status codes.

        Raises:
            ValueError: If the list is empty or holds a non-error status.
        """
        if not value:
            raise ValueError("fault_status_codes cannot be empty")
        for code in value:
            if code < 400 or code > 599:
                raise ValueError(f"fault status {code} is not an HTTP error status")
        return value


@lru_cache()
def get_settings() -> Settings:
    """Return the process-wide settings instance.

    Returns:
        Settings: Cached settings loaded from the environment.
    """
    configured = Settings()
    logger.debug(f"Loaded settings: scenario={configured.scenario}, strict={configured.strict}, seed={configured.seed}")
    return configured


settings = get_settings()
