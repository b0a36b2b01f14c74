"""
conftest.py - Shared pytest fixtures for payment_ledger tests

Provides:
- Quiet structured logging for every test
- A default ReplayEngine
- Fresh accounts and CSV file writers
"""

import pytest
from decimal import Decimal

from payment_ledger import Account, ReplayEngine, TransactionType
from payment_ledger.logging_config import setup_logging

from tests.records import make_tx, csv_text


@pytest.fixture(autouse=True)
def quiet_logging():
    """Keep debug events out of captured stdout."""
    setup_logging("WARNING")
    yield


@pytest.fixture
def engine():
    return ReplayEngine()


@pytest.fixture
def account():
    """Empty account for client 1."""
    return Account(1)


@pytest.fixture
def funded_account():
    """Client 1 with 100 deposited by tx 1."""
    acct = Account(1)
    acct.deposit(make_tx(TransactionType.DEPOSIT, 1, 1, Decimal("100")))
    return acct


@pytest.fixture
def write_csv(tmp_path):
    """Write lines to a CSV file and return its path."""
    def _write(lines, name="transactions.csv"):
        path = tmp_path / name
        path.write_text(csv_text(lines))
        return path
    return _write
