"""Pytest fixtures for testing"""

import pytest
from datetime import date
from fastapi.testclient import TestClient
from reverse_calc.api.main import create_app
from reverse_calc.domain.models import DealSettings, Position, PositionWithDays
from reverse_calc.domain.positions import with_days


# Monday, so business-day arithmetic in tests is easy to follow
AS_OF = date(2024, 1, 1)


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client"""
    return TestClient(create_app())


@pytest.fixture
def as_of() -> date:
    return AS_OF


@pytest.fixture
def scenario_position() -> Position:
    """$50k balance at $500/day: falls off on day 100"""
    return Position(id=1, entity="Funder A", balance=50_000, daily_payment=500)


@pytest.fixture
def scenario_settings() -> DealSettings:
    """10% fee, 1.5 factor, 30% payment reduction, no new money"""
    return DealSettings(
        daily_payment_decrease=0.30,
        fee_percent=0.10,
        rate=1.5,
        new_money=0.0,
    )


@pytest.fixture
def scenario_included(scenario_position: Position) -> list[PositionWithDays]:
    return with_days([scenario_position], AS_OF)


@pytest.fixture
def scenario_payload() -> dict:
    """JSON request body for the same scenario"""
    return {
        "positions": [
            {"id": 1, "entity": "Funder A", "balance": 50000, "daily_payment": 500},
        ],
        "settings": {
            "daily_payment_decrease": 0.30,
            "fee_percent": 0.10,
            "rate": 1.5,
            "new_money": 0,
        },
        "monthly_revenue": 100000,
        "as_of": AS_OF.isoformat(),
    }
