"""Pytest configuration and fixtures."""

from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

from fintrack.models import EXPENSE, INCOME, Transaction


def make_tx(
    kind: str,
    amount: str | int,
    category: str,
    tx_date: date,
    description: str = "",
    tx_id: str | None = None,
) -> Transaction:
    """Build a transaction with less boilerplate."""
    return Transaction(
        date=tx_date,
        description=description,
        amount=Decimal(amount) if isinstance(amount, str) else amount,
        kind=kind,
        category=category,
        id=tx_id,
        owner_id="user-1",
    )


@pytest.fixture
def scenario() -> list[Transaction]:
    """Two January entries and one February expense."""
    return [
        make_tx(EXPENSE, "100", "Food", date(2024, 1, 5), "Lunch", "t1"),
        make_tx(INCOME, "500", "Salary", date(2024, 1, 10), "January salary", "t2"),
        make_tx(EXPENSE, "300", "Food", date(2024, 2, 1), "Supermarket", "t3"),
    ]


@pytest.fixture
def mixed_transactions() -> list[Transaction]:
    """A few months of varied transactions, newest first like the data service."""
    return [
        make_tx(EXPENSE, "45.50", "Transport", date(2024, 3, 2), "Bus pass", "m7"),
        make_tx(INCOME, "1234.56", "Freelance", date(2024, 2, 20), "Website project", "m6"),
        make_tx(EXPENSE, "12.00", "Food", date(2024, 2, 14), "Coffee beans", "m5"),
        make_tx(EXPENSE, "80.25", "Health", date(2024, 2, 3), "Pharmacy", "m4"),
        make_tx(INCOME, "3000.00", "Salary", date(2024, 1, 31), "Salary January", "m3"),
        make_tx(EXPENSE, "950.00", "Housing", date(2024, 1, 10), "Rent", "m2"),
        make_tx(EXPENSE, "23.10", "Food", date(2023, 12, 30), "Street market", "m1"),
    ]


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def csv_export(fixtures_dir: Path) -> Path:
    """Return path to the CSV export fixture."""
    return fixtures_dir / "transactions.csv"


@pytest.fixture
def json_export(fixtures_dir: Path) -> Path:
    """Return path to the JSON export fixture."""
    return fixtures_dir / "transactions.json"


@pytest.fixture
def invalid_dir(fixtures_dir: Path) -> Path:
    """Return path to fixtures with malformed records."""
    return fixtures_dir / "invalid"
