"""
Pytest Configuration and Shared Fixtures

Provides common test fixtures and configuration for the entire test suite.
"""

import tempfile
from pathlib import Path
from typing import Any

import pytest

import splitcheck.core.config as config_module
from splitcheck.core.models import Session


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as temp_path:
        yield Path(temp_path)


@pytest.fixture
def alice_bob_data() -> dict[str, Any]:
    """Alice bought everything, Bob paid the advance."""
    return {
        "id": "session-alice-bob",
        "location": "Pho 24",
        "dateRange": {"startDate": "2024-03-10", "endDate": "2024-03-10"},
        "metadata": {
            "createdAt": "2024-03-10T12:00:00.000Z",
            "updatedAt": "2024-03-10T13:00:00.000Z",
            "name": "Lunch",
        },
        "members": [
            {
                "id": "m1",
                "name": "Alice",
                "items": [{"name": "Pho", "price": "2*25000"}],
                "advance": "0",
                "bankInfo": None,
            },
            {
                "id": "m2",
                "name": "Bob",
                "items": [],
                "advance": "60000",
                "bankInfo": {"accountHolder": "BOB", "bankName": "VCB", "accountNumber": "0123"},
            },
        ],
        "settings": {"currency": "VND", "showBankInfo": True},
    }


@pytest.fixture
def alice_bob_session(alice_bob_data) -> Session:
    return Session.from_dict(alice_bob_data)


@pytest.fixture
def three_way_session() -> Session:
    """Three members with uneven spending and advances."""
    return Session.from_dict(
        {
            "id": "session-three",
            "location": "BBQ House",
            "metadata": {"createdAt": "2024-04-02T19:00:00Z", "name": "Dinner"},
            "members": [
                {
                    "id": "a",
                    "name": "An",
                    "items": [{"name": "Beef", "price": "120000"}, {"name": "Beer", "price": "3*20000"}],
                    "advance": "100000",
                },
                {"id": "b", "name": "Binh", "items": [{"name": "Pork", "price": "90000"}], "advance": ""},
                {
                    "id": "c",
                    "name": "Chi",
                    "items": [{"name": "Salad", "price": "30000"}, {"name": "Beer", "price": "20000"}],
                    "advance": "200000",
                },
            ],
        }
    )


@pytest.fixture
def history_sessions() -> list[Session]:
    """Sessions spread over several months, some with stored totals."""
    raw = [
        {
            "id": "h1",
            "location": "Pho 24",
            "metadata": {"createdAt": "2024-01-05T12:00:00Z"},
            "members": [
                {"id": "a", "name": "Alice", "items": [{"name": "Pho", "price": "50000"}], "advance": ""},
                {"id": "b", "name": "Bob", "items": [{"name": "Pho", "price": "50000"}], "advance": "100000"},
            ],
            "totals": {"totalCost": 100000, "totalAdvance": 100000, "memberCount": 2},
        },
        {
            "id": "h2",
            "location": "Pho 24",
            "metadata": {"createdAt": "2024-02-14T19:00:00Z"},
            "members": [
                {"id": "a", "name": "alice", "items": [{"name": "Pho", "price": "60000"}], "advance": ""},
                {"id": "c", "name": "Chi", "items": [{"name": "Tea", "price": "10000"}], "advance": ""},
            ],
        },
        {
            "id": "h3",
            "location": "BBQ House",
            "metadata": {"createdAt": "2024-02-20T19:00:00Z"},
            "members": [
                {"id": "b", "name": "Bob", "items": [{"name": "Beef", "price": "300000"}], "advance": ""},
            ],
        },
        {
            "id": "h4",
            "location": "",
            "members": [
                {"id": "c", "name": "Chi", "items": [{"name": "Tea", "price": "oops"}], "advance": ""},
            ],
        },
    ]
    return [Session.from_dict(s) for s in raw]


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch, tmp_path):
    """Set up test environment variables and drop any cached configuration."""
    monkeypatch.setenv("SPLITCHECK_ENV", "test")
    monkeypatch.setenv("SPLITCHECK_DATA_DIR", str(tmp_path / "splitcheck_data"))
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    monkeypatch.setenv("DEBUG", "false")
    for name in ("SPLITCHECK_CURRENCY", "SPLITCHECK_PRECISION", "SPLITCHECK_ROUNDING"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config_module, "_config", None)


# Test markers for categorizing tests
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests for complete workflows")
    config.addinivalue_line("markers", "currency: Tests for rounding and currency formatting")
    config.addinivalue_line("markers", "settlement: Tests for settlement and split calculations")
    config.addinivalue_line("markers", "analytics: Tests for session analytics")
    config.addinivalue_line("markers", "cli: Tests for the command-line interface")
