"""
test_replay_scenarios.py - End-to-end replay scenarios

Each test feeds a complete input through ReplayEngine.run (or a CSV file
through read_records) and checks the final account table.

Scenarios:
- Plain deposits and withdrawals, including a withdrawal to exactly zero
- Overdraft aborts the whole run
- Dispute, resolve, chargeback and the freeze that follows
- Events referencing unknown or foreign transactions
- Duplicate transaction ids
"""

import pytest
from decimal import Decimal

from payment_ledger import (
    RawAccount, ReplayEngine, read_records,
    InsufficientFunds, FrozenAccount, UniqueTransactionId,
)
from tests.records import (
    deposit, withdrawal, dispute, resolve, chargeback, by_client,
)


D = Decimal


def row(client, available, held, total, locked=False):
    return RawAccount(client, D(available), D(held), D(total), locked)


class TestDepositsAndWithdrawals:
    """Base operations only."""

    def test_basic_ledger(self, engine):
        result = engine.run([
            deposit(1, 1, "1.0"),
            deposit(2, 2, "2.0"),
            deposit(1, 3, "2.0"),
            withdrawal(1, 4, "1.5"),
            withdrawal(2, 5, "2.0"),
        ])
        assert by_client(result) == {
            1: row(1, "1.5", "0", "1.5"),
            2: row(2, "0", "0", "0"),
        }

    def test_overdraft_aborts(self, engine):
        with pytest.raises(InsufficientFunds) as excinfo:
            engine.run([deposit(1, 1, "1.0"), withdrawal(1, 4, "1.5")])
        assert excinfo.value.client_id == 1
        assert excinfo.value.transaction_id == 4

    def test_same_file_through_csv(self, engine, write_csv):
        path = write_csv([
            "type, client, tx, amount",
            "deposit, 1, 1, 1.0",
            "deposit, 2, 2, 2.0",
            "deposit, 1, 3, 2.0",
            "withdrawal, 1, 4, 1.5",
            "withdrawal, 2, 5, 2.0",
        ])
        result = engine.run(read_records(path))
        assert by_client(result)[1] == row(1, "1.5", "0", "1.5")

    def test_many_clients_isolated(self, engine):
        records = [deposit(client, client, "10") for client in range(1, 6)]
        records.append(withdrawal(3, 100, "10"))
        result = by_client(engine.run(records))
        assert result[3].total == D("0")
        assert all(result[c].total == D("10") for c in (1, 2, 4, 5))

    def test_rounding_applied_on_input(self, engine):
        result = engine.run([deposit(1, 1, "0.00005"), deposit(1, 2, "0.00004")])
        assert result == [row(1, "0.0001", "0", "0.0001")]


class TestDisputeWorkflow:
    """Dispute, resolve and chargeback across a whole run."""

    def test_dispute_holds_funds(self, engine):
        result = engine.run([deposit(1, 1, "25.0"), dispute(1, 1)])
        assert result == [row(1, "0", "25", "25")]

    def test_resolve_releases_funds(self, engine):
        result = engine.run([deposit(1, 1, "25.0"), dispute(1, 1), resolve(1, 1)])
        assert result == [row(1, "25", "0", "25")]

    def test_chargeback_locks_account(self, engine):
        result = engine.run([
            deposit(1, 1, "25.0"),
            deposit(1, 2, "10.0"),
            dispute(1, 2),
            chargeback(1, 2),
        ])
        assert result == [row(1, "25", "0", "25", locked=True)]

    def test_frozen_account_rejects_deposit(self, engine):
        with pytest.raises(FrozenAccount) as excinfo:
            engine.run([
                deposit(1, 1, "25.0"),
                dispute(1, 1),
                chargeback(1, 1),
                deposit(1, 3, "5.0"),
            ])
        assert excinfo.value.client_id == 1
        assert excinfo.value.transaction_id == 3

    def test_frozen_account_rejects_withdrawal(self, engine):
        with pytest.raises(FrozenAccount):
            engine.run([
                deposit(1, 1, "25.0"),
                deposit(1, 2, "5.0"),
                dispute(1, 2),
                chargeback(1, 2),
                withdrawal(1, 3, "1.0"),
            ])

    def test_freeze_is_per_client(self, engine):
        result = engine.run([
            deposit(1, 1, "5"), dispute(1, 1), chargeback(1, 1),
            deposit(2, 2, "5"),
        ])
        assert by_client(result)[2] == row(2, "5", "0", "5")

    def test_disputed_withdrawal(self, engine):
        result = engine.run([
            deposit(1, 1, "25"), withdrawal(1, 2, "15"), dispute(1, 2),
        ])
        assert result == [row(1, "25", "-15", "10")]

    def test_charged_back_withdrawal_refunds(self, engine):
        result = engine.run([
            deposit(1, 1, "25"), withdrawal(1, 2, "15"), dispute(1, 2), chargeback(1, 2),
        ])
        assert result == [row(1, "25", "0", "25", locked=True)]

    def test_event_before_its_transaction_ignored(self, engine):
        result = engine.run([dispute(1, 1), deposit(1, 1, "5")])
        assert result == [row(1, "5", "0", "5")]

    def test_resolve_without_dispute_ignored(self, engine):
        result = engine.run([deposit(1, 1, "5"), resolve(1, 1), chargeback(1, 1)])
        assert result == [row(1, "5", "0", "5")]

    def test_repeated_dispute_counts_once(self, engine):
        result = engine.run([deposit(1, 1, "5"), dispute(1, 1), dispute(1, 1)])
        assert result == [row(1, "0", "5", "5")]

    def test_redispute_after_resolve_ignored(self, engine):
        result = engine.run([
            deposit(1, 1, "5"), dispute(1, 1), resolve(1, 1), dispute(1, 1),
        ])
        assert result == [row(1, "5", "0", "5")]

    def test_dispute_of_spent_deposit(self, engine):
        """available may go negative when the disputed funds are gone."""
        result = engine.run([
            deposit(1, 1, "10"), withdrawal(1, 2, "10"), dispute(1, 1), chargeback(1, 1),
        ])
        assert result == [row(1, "-10", "0", "-10", locked=True)]


class TestIgnoredEvents:
    """Events that never reach an account."""

    def test_unknown_transaction(self, engine):
        result = engine.run([deposit(1, 1, "3"), dispute(1, 99)])
        assert result == [row(1, "3", "0", "3")]

    def test_foreign_client(self, engine):
        result = engine.run([
            deposit(1, 1, "3"), deposit(2, 2, "4"), dispute(2, 1), chargeback(2, 1),
        ])
        assert by_client(result) == {
            1: row(1, "3", "0", "3"),
            2: row(2, "4", "0", "4"),
        }


class TestDuplicateIds:
    """Transaction ids are unique across clients."""

    def test_duplicate_deposit(self, engine):
        with pytest.raises(UniqueTransactionId):
            engine.run([deposit(1, 1, "1"), deposit(1, 1, "2")])

    def test_duplicate_across_clients(self, engine):
        with pytest.raises(UniqueTransactionId):
            engine.run([deposit(1, 1, "1"), withdrawal(2, 1, "0")])

    def test_events_reuse_ids(self):
        """Events reference ids; they never claim them."""
        result = ReplayEngine().run([
            deposit(1, 1, "1"), dispute(1, 1), resolve(1, 1), dispute(1, 1),
        ])
        assert len(result) == 1
