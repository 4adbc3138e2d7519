# -*- coding: utf-8 -*-
"""Location: ./schemock/services/scenario_service.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Scenario Policy Service.
This module wraps route invocations with the behaviour of the active scenario:

- ``happy-path``: no change
- ``slow``: artificial latency before every request
- ``error-heavy``: synthetic faults with ``fault_probability``
- ``sad-path``: both

Latency is a non-blocking ``asyncio.sleep`` so other requests keep being
served, and it is cancelled together with the request task. A fault
short-circuits the handler before it runs, so the resource store is never
touched; fault bodies carry ``"synthetic": true`` so clients can tell them
apart from genuine errors.

Examples:
    >>> import asyncio
    >>> from schemock.utils.seeded_random import SeededRandom
    >>> policy = ScenarioPolicy("happy-path", SeededRandom(1))
    >>> policy.injects_latency, policy.injects_faults
    (False, False)
    >>> asyncio.run(policy.apply()) is None
    True
"""

# Standard
import asyncio
from typing import Awaitable, Callable, List, Optional, Sequence

# First-Party
from schemock.config import Scenario
from schemock.exceptions import ConfigurationError
from schemock.schemas import MockResponse
from schemock.services.logging_service import LoggingService
from schemock.utils.seeded_random import SeededRandom

# Initialize logging service first
logging_service = LoggingService()
logger = logging_service.get_logger(__name__)

SCENARIOS = ("happy-path", "slow", "error-heavy", "sad-path")
LATENCY_SCENARIOS = ("slow", "sad-path")
FAULT_SCENARIOS = ("error-heavy", "sad-path")
DEFAULT_FAULT_STATUS_CODES = [400, 401, 403, 404, 500, 503]

FAULT_MESSAGES = {
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    500: "Internal Server Error",
    503: "Service Unavailable",
}


class ScenarioPolicy:
    """Latency and fault injection for one scenario.

    Attributes:
        scenario: Active scenario name.
        random: Random source for delays and faults.
        fault_probability: Chance of a synthetic fault per request.
        delay_base_ms: Minimum injected latency.
        delay_jitter_ms: Random latency added on top of the base.
        fault_status_codes: Status codes faults are drawn from.
    """

    def __init__(
        self,
        scenario: Scenario = "happy-path",
        random: Optional[SeededRandom] = None,
        fault_probability: float = 0.3,
        delay_base_ms: int = 1000,
        delay_jitter_ms: int = 2000,
        fault_status_codes: Optional[Sequence[int]] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """Initialize the policy.

        Args:
            scenario: Scenario name.
            random: Random source, a fresh non-deterministic one when omitted.
            fault_probability: Chance of a synthetic fault.
            delay_base_ms: Minimum injected latency in milliseconds.
            delay_jitter_ms: Maximum random extra latency in milliseconds.
            fault_status_codes: Candidate fault statuses.
            sleep: Awaitable sleep taking seconds.

        Raises:
            ConfigurationError: On an unknown scenario or an empty status list.
        """
        if scenario not in SCENARIOS:
            raise ConfigurationError(f"Unknown scenario: {scenario}. Must be one of: {', '.join(SCENARIOS)}", {"field": "scenario", "value": scenario})
        codes: List[int] = list(fault_status_codes) if fault_status_codes is not None else list(DEFAULT_FAULT_STATUS_CODES)
        if not codes:
            raise ConfigurationError("Fault status codes cannot be empty", {"field": "fault_status_codes", "value": codes})
        self.scenario = scenario
        self.random = random or SeededRandom()
        self.fault_probability = fault_probability
        self.delay_base_ms = delay_base_ms
        self.delay_jitter_ms = delay_jitter_ms
        self.fault_status_codes = codes
        self._sleep = sleep

    @property
    def injects_latency(self) -> bool:
        """Whether the scenario delays requests.

        Returns:
            bool: True for ``slow`` and ``sad-path``.
        """
        return self.scenario in LATENCY_SCENARIOS

    @property
    def injects_faults(self) -> bool:
        """Whether the scenario injects faults.

        Returns:
            bool: True for ``error-heavy`` and ``sad-path``.
        """
        return self.scenario in FAULT_SCENARIOS

    def draw_delay_ms(self) -> float:
        """Draw the latency of one request.

        Returns:
            float: ``delay_base_ms + random() * delay_jitter_ms``.
        """
        return self.delay_base_ms + self.random.next() * self.delay_jitter_ms

    def draw_fault(self, method: str = "GET", path: str = "/") -> Optional[MockResponse]:
        """Decide whether this request fails, without waiting.

        Args:
            method: Request method, for the log line.
            path: Request path, for the log line.

        Returns:
            Optional[MockResponse]: Synthetic error response, or None.

        Examples:
            >>> class Fixed(SeededRandom):
            ...     def next(self):
            ...         return 0.2
            >>> response = ScenarioPolicy("error-heavy", Fixed()).draw_fault()
            >>> response.status_code, response.body["error"], response.synthetic
            (401, 'ScenarioError', True)
        """
        if not self.injects_faults or self.random.next() >= self.fault_probability:
            return None
        status = self.random.choice(self.fault_status_codes)
        logger.info(f"Scenario '{self.scenario}' injected {status} for {method} {path}")
        return MockResponse(
            status_code=status,
            body={
                "error": "ScenarioError",
                "message": f"Simulated {FAULT_MESSAGES.get(status, 'error')} ({self.scenario} scenario)",
                "statusCode": status,
                "scenario": self.scenario,
                "synthetic": True,
            },
            synthetic=True,
        )

    async def apply(self, method: str = "GET", path: str = "/") -> Optional[MockResponse]:
        """Run the scenario for one request: latency first, then the fault check.

        Args:
            method: Request method.
            path: Request path.

        Returns:
            Optional[MockResponse]: Synthetic error that replaces the handler, or None to continue.
        """
        if self.injects_latency:
            delay = self.draw_delay_ms()
            logger.info(f"Scenario '{self.scenario}' delaying {method} {path} by {delay:.0f}ms")
            await self._sleep(delay / 1000)
        return self.draw_fault(method, path)
