"""Pytest fixtures for testing"""

import pytest
from datetime import datetime, timedelta
from fastapi.testclient import TestClient
from payoff_engine.api.main import create_app
from payoff_engine.domain.models import DebtAccount, FinancialSnapshot


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client"""
    return TestClient(create_app())


@pytest.fixture
def two_cards() -> list[DebtAccount]:
    """Mid-rate large balance and high-rate smaller balance"""
    return [
        DebtAccount(id="card_1", balance=5000.0, annual_rate=0.1999, minimum_payment=100.0),
        DebtAccount(id="card_2", balance=2000.0, annual_rate=0.2499, minimum_payment=50.0),
    ]


@pytest.fixture
def three_cards() -> list[DebtAccount]:
    """Cards where avalanche and snowball pick different targets"""
    return [
        DebtAccount(id="store", balance=800.0, annual_rate=0.12, minimum_payment=25.0),
        DebtAccount(id="travel", balance=6000.0, annual_rate=0.2699, minimum_payment=150.0),
        DebtAccount(id="cashback", balance=3000.0, annual_rate=0.1799, minimum_payment=75.0),
    ]


def make_history(
    debts: list[float],
    utilizations: list[float] | None = None,
    start: datetime = datetime(2025, 1, 1, 12, 0),
    interval: timedelta = timedelta(days=30),
) -> list[FinancialSnapshot]:
    """Build a chronological snapshot history from a list of total debts"""
    if utilizations is None:
        utilizations = [0.5] * len(debts)
    return [
        FinancialSnapshot(
            timestamp=start + i * interval,
            total_debt=debt,
            credit_utilization=utilization,
            weighted_average_rate=0.2,
        )
        for i, (debt, utilization) in enumerate(zip(debts, utilizations))
    ]


@pytest.fixture
def history():
    """Factory fixture for snapshot histories"""
    return make_history
