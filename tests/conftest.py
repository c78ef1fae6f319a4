"""
Pytest configuration and shared fixtures for testing.

Provides reusable test fixtures:
- calendar: Fresh HolidayCalendar per test
- make_rule: Factory for WageSupplementRule with sensible defaults
- standard_rules: Evening, night, weekend and holiday rules
- test_client: FastAPI TestClient with configured rules overridden
"""

import sys
from decimal import Decimal
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# ruff: noqa: E402
from app.core.holidays import HolidayCalendar
from app.core.models import WageSupplementRule
from app.main import app
from app.routes.payroll_api import ConfiguredRules, get_wage_supplements


@pytest.fixture
def calendar():
    """Fresh holiday calendar (empty cache) for each test."""
    return HolidayCalendar()


@pytest.fixture
def make_rule():
    """
    Factory for wage supplement rules.

    Defaults to an active 25 % night rule 23:00-06:00 with priority 1.
    Any field can be overridden by keyword.
    """

    def _make(**overrides) -> WageSupplementRule:
        fields = {
            "id": overrides.get("name", "Natt").lower(),
            "name": "Natt",
            "supplement_type": "percentage",
            "amount": Decimal("25"),
            "applies_to": "night",
            "time_start": "23:00",
            "time_end": "06:00",
            "is_active": True,
            "priority": 1,
        }
        fields.update(overrides)
        return WageSupplementRule(**fields)

    return _make


@pytest.fixture
def standard_rules(make_rule):
    """
    Typical configuration:
    - Kveld 15 % 17:00-21:00
    - Natt 25 % 21:00-06:00
    - Helg 50 % all of Saturday/Sunday
    - Helligdag 100 % all of a holiday
    """
    return [
        make_rule(name="Kveld", applies_to="evening", amount=Decimal("15"), time_start="17:00", time_end="21:00",
                  priority=10),
        make_rule(name="Natt", applies_to="night", amount=Decimal("25"), time_start="21:00", time_end="06:00",
                  priority=20),
        make_rule(name="Helg", applies_to="weekend", amount=Decimal("50"), time_start=None, time_end=None,
                  priority=30),
        make_rule(name="Helligdag", applies_to="holiday", amount=Decimal("100"), time_start=None, time_end=None,
                  priority=40),
    ]


@pytest.fixture(scope="function")
def test_client(standard_rules):
    """
    Create FastAPI TestClient with the configured rules replaced by standard_rules.

    Yields:
        TestClient: FastAPI test client for API testing
    """
    app.dependency_overrides[get_wage_supplements] = lambda: ConfiguredRules(lambda: standard_rules)

    with TestClient(app) as client:
        yield client

    # Clean up
    app.dependency_overrides.clear()
