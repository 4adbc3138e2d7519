# -*- coding: utf-8 -*-
"""Location: ./tests/unit/schemock/services/test_scenario_service.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Unit tests for ScenarioPolicy.
"""

# Third-Party
import pytest

# First-Party
from schemock.exceptions import ConfigurationError
from schemock.services.scenario_service import ScenarioPolicy
from schemock.utils.seeded_random import SeededRandom


class RecordingSleep:
    """Awaitable sleep stand-in that records requested durations."""

    def __init__(self):
        self.calls = []

    async def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.mark.parametrize(
    "scenario,latency,faults",
    [("happy-path", False, False), ("slow", True, False), ("error-heavy", False, True), ("sad-path", True, True)],
)
def test_scenario_flags(scenario, latency, faults):
    policy = ScenarioPolicy(scenario, SeededRandom(1))
    assert policy.injects_latency is latency
    assert policy.injects_faults is faults


def test_unknown_scenario():
    with pytest.raises(ConfigurationError) as exc_info:
        ScenarioPolicy("chaos")
    assert "Unknown scenario: chaos" in exc_info.value.message


def test_empty_status_codes():
    with pytest.raises(ConfigurationError):
        ScenarioPolicy("error-heavy", fault_status_codes=[])


def test_fault_below_probability(fixed_random):
    response = ScenarioPolicy("error-heavy", fixed_random(0.2)).draw_fault("GET", "/api/users")
    assert response.status_code == 401
    assert response.synthetic is True
    assert response.body == {
        "error": "ScenarioError",
        "message": "Simulated Unauthorized (error-heavy scenario)",
        "statusCode": 401,
        "scenario": "error-heavy",
        "synthetic": True,
    }


def test_no_fault_at_or_above_probability(fixed_random):
    assert ScenarioPolicy("error-heavy", fixed_random(0.3)).draw_fault() is None
    assert ScenarioPolicy("error-heavy", fixed_random(0.9)).draw_fault() is None


def test_happy_path_never_faults(fixed_random):
    random = fixed_random(0.0)
    assert ScenarioPolicy("happy-path", random).draw_fault() is None
    assert random.calls == 0


def test_custom_status_codes(fixed_random):
    response = ScenarioPolicy("error-heavy", fixed_random(0.1, 0.99), fault_status_codes=[418]).draw_fault()
    assert response.status_code == 418
    assert response.body["message"] == "Simulated error (error-heavy scenario)"


def test_fault_rate_matches_probability():
    policy = ScenarioPolicy("error-heavy", SeededRandom(2024), fault_probability=0.3)
    faults = sum(policy.draw_fault() is not None for _ in range(2000))
    assert 450 < faults < 750


def test_draw_delay_range(fixed_random):
    assert ScenarioPolicy("slow", fixed_random(0.0)).draw_delay_ms() == 1000
    assert ScenarioPolicy("slow", fixed_random(0.5), delay_base_ms=100, delay_jitter_ms=200).draw_delay_ms() == 200


@pytest.mark.asyncio
async def test_slow_scenario_sleeps(fixed_random):
    sleep = RecordingSleep()
    policy = ScenarioPolicy("slow", fixed_random(0.25), sleep=sleep)
    assert await policy.apply("GET", "/api/users") is None
    assert sleep.calls == [1.5]


@pytest.mark.asyncio
async def test_sad_path_sleeps_then_faults(fixed_random):
    sleep = RecordingSleep()
    policy = ScenarioPolicy("sad-path", fixed_random(0.0), sleep=sleep)
    response = await policy.apply("POST", "/api/users")
    assert sleep.calls == [1.0]
    assert response.status_code == 400
    assert response.body["scenario"] == "sad-path"


@pytest.mark.asyncio
async def test_happy_path_does_nothing():
    sleep = RecordingSleep()
    policy = ScenarioPolicy("happy-path", SeededRandom(1), sleep=sleep)
    assert await policy.apply() is None
    assert sleep.calls == []
