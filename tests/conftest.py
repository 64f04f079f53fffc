"""Fixtures compartidas."""

from datetime import timedelta

import pytest

from tests.helpers import T0, FakeClock, FakeQueryClient


@pytest.fixture
def query_client() -> FakeQueryClient:
    return FakeQueryClient()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(T0 + timedelta(hours=1))
