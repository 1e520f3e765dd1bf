"""Shared fixtures for SNAS tests."""

from datetime import date, timedelta

import pytest

from snas.utils.achievement_store import InMemoryAchievementStore
from snas.utils.config import load_settings

FIXED_TODAY = date(2025, 6, 15)


class FakeClock:
    """Manually advanced time source (seconds) for TTL tests."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class StepTimer:
    """perf_counter stand-in that advances a fixed step on every reading."""

    def __init__(self, step_seconds: float):
        self.step_seconds = step_seconds
        self.current = 0.0

    def __call__(self) -> float:
        value = self.current
        self.current += self.step_seconds
        return value


def days_ago(days: int) -> str:
    return (FIXED_TODAY - timedelta(days=days)).isoformat()


@pytest.fixture
def settings():
    """Defaults only: no .env, no SNAS_* environment variables."""
    return load_settings(use_env=False)


@pytest.fixture
def today():
    return FIXED_TODAY


@pytest.fixture
def store():
    return InMemoryAchievementStore()


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def make_record():
    """Factory for valid raw import records."""

    def _make(**overrides):
        record = {
            "name": "ITIL 4 Foundation",
            "type": "certification",
            "issuer": "ITIL",
            "description": "IT service management certification.",
            "category": "Service Management",
            "date_earned": days_ago(400),
        }
        record.update(overrides)
        return record

    return _make


@pytest.fixture
def ago():
    """ago(n) -> ISO date n days before the fixed test date."""
    return days_ago


@pytest.fixture
def step_timer():
    """step_timer(seconds) -> timer advancing that much per reading."""
    return StepTimer
