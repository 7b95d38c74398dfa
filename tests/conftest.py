"""Shared fixtures for the tool variable tests."""

import pytest

from toolvars.store import VariableStore
from toolvars.variables import VariableResolver


@pytest.fixture
def store():
    """Empty session store."""
    return VariableStore()


@pytest.fixture
def resolver(store):
    """Resolver bound to the store fixture."""
    return VariableResolver(store)


@pytest.fixture
def weather_store(store):
    """Store holding a weather report and a stock quote."""
    store.set("weather_nyc", {"temperature": 72, "conditions": "sunny", "current": {"temperature": 72}}, "get-weather")
    store.set("stock_aapl", {"symbol": "AAPL", "price": 187.5}, "get-stock")
    return store
