"""Shared test fixtures for tomtimer tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from tests.fakes.provider import FakeProvider
from tests.fakes.store import InMemoryTaskStore

BASE_TIME = datetime(2025, 3, 21, 10, 15, 30, 123000, tzinfo=UTC)


@pytest.fixture
def base_time() -> datetime:
    return BASE_TIME


@pytest.fixture
def later() -> datetime:
    return BASE_TIME + timedelta(minutes=5)


@pytest.fixture
def earlier() -> datetime:
    return BASE_TIME - timedelta(minutes=5)


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def store() -> InMemoryTaskStore:
    return InMemoryTaskStore()
