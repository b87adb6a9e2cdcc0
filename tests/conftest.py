"""Shared fixtures: transaction factories and isolated settings."""

from datetime import date
from decimal import Decimal
from itertools import count

import pytest

from finance_engine.config import EngineSettings, get_settings
from finance_engine.models import (
    Account,
    Transaction,
    TransactionKind,
    TransactionStatus,
)


TODAY = date(2026, 1, 15)
JANUARY = date(2026, 1, 1)


@pytest.fixture
def settings():
    """Default settings, ignoring any .env file."""
    return EngineSettings(_env_file=None)


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_tx():
    """Factory for transactions with sensible defaults."""
    ids = count(1)

    def _make(
        kind=TransactionKind.EXPENSE,
        amount="100",
        tx_date=TODAY,
        status=TransactionStatus.CONFIRMED,
        account_id="acc-main",
        **overrides,
    ):
        return Transaction(
            id=overrides.pop("id", f"tx-{next(ids)}"),
            kind=kind,
            amount=Decimal(amount),
            date=tx_date,
            status=status,
            account_id=account_id,
            **overrides,
        )

    return _make


@pytest.fixture
def accounts():
    return [
        Account(id="acc-main", name="Checking"),
        Account(id="acc-savings", name="Savings"),
        Account(id="acc-reserve", name="Emergency", is_reserve=True),
    ]
