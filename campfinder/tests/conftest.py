from __future__ import annotations

import pytest

from campfinder.analytics.store import clear_events
from campfinder.recommendations.data_store import set_store
from campfinder.recommendations.models import Camp
from campfinder.store.memory import InMemoryCampStore
from campfinder.tests.factories import build_sample_camps


@pytest.fixture
def sample_camps() -> list[Camp]:
    return build_sample_camps()


@pytest.fixture
def memory_store(sample_camps):
    store = InMemoryCampStore(sample_camps)
    set_store(store)
    yield store
    set_store(None)


@pytest.fixture(autouse=True)
def _reset_events():
    clear_events()
    yield
    clear_events()
