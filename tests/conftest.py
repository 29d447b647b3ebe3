import pytest

from khonreep.config import Settings
from tests.fakes import FakeClock, FakeIPLookup, FakeStore


@pytest.fixture
def settings():
    return Settings(store_backend="memory", pin_feedback_ms=2000)


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def ip_lookup():
    return FakeIPLookup()


@pytest.fixture
def clock():
    return FakeClock()
