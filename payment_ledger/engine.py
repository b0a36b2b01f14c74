"""
engine.py - Replay Engine

Replays the chronological transaction history against per-client accounts.

Execution order for each transaction id in history:
1. Look up the transaction
2. Get or create the client's account
3. Apply the base operation (deposit or withdraw) and mark it PROCESSED
4. Apply its events in arrival order through the handler table

The first error aborts the whole replay: there is no partial output.
"""

from __future__ import annotations
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

import structlog

from .account import Account
from .core import (
    BALANCE_TOLERANCE, DECIMAL_PLACES,
    RawAccount, RawTransaction, Transaction, TransactionStatus, TransactionType,
    UniqueTransactionId,
)
from .event_handlers import DEFAULT_HANDLERS, EventHandler
from .postprocessing import postprocess
from .preprocessing import History, TransactionTable, preprocess
from .validation import check_records

logger = structlog.get_logger(__name__)


# Client id -> Account.
AccountMap = Dict[int, Account]


class ReplayEngine:
    """
    Drives accounts through a preprocessed transaction history.

    Features:
    - Strict arrival-order replay
    - Pluggable event handlers (EventType -> function)
    - Whole-run abort on the first account error
    - Full pipeline via run(): validate, preprocess, replay, flatten
    """

    def __init__(
        self,
        handlers: Optional[Dict[Any, EventHandler]] = None,
        decimal_places: int = DECIMAL_PLACES,
        verbose: bool = False,
    ):
        """
        Initialize the replay engine.

        Args:
            handlers: Event handlers (defaults to DEFAULT_HANDLERS)
            decimal_places: Precision for validation and output rounding
            verbose: Log every replayed transaction and applied event
        """
        self.handlers: Dict[Any, EventHandler] = dict(handlers or DEFAULT_HANDLERS)
        self.decimal_places = decimal_places
        self.verbose = verbose

    def register(self, event_type: Any, handler: EventHandler) -> None:
        """Replace the handler for an event type."""
        self.handlers[event_type] = handler

    # ========================================================================
    # REPLAY
    # ========================================================================

    def process(self, history: History, transactions: TransactionTable) -> AccountMap:
        """
        Replay every transaction in history order.

        Transaction statuses in the table are updated in place.

        Args:
            history: Transaction ids in arrival order
            transactions: Transaction id -> Transaction

        Returns:
            Client id -> final Account

        Raises:
            UniqueTransactionId: If a history id is missing from the table
            AccountError: The first error raised by an account operation
        """
        accounts: AccountMap = {}

        for transaction_id in history:
            tx = transactions.get(transaction_id)
            if tx is None:
                raise UniqueTransactionId(transaction_id)

            account = accounts.get(tx.client_id)
            if account is None:
                account = accounts[tx.client_id] = Account(tx.client_id)

            self._apply_base(tx, account)
            tx.status = TransactionStatus.PROCESSED
            if self.verbose:
                logger.info(
                    "transaction_replayed",
                    tx=tx.transaction_id,
                    type=tx.transaction_type.value,
                    client=tx.client_id,
                    amount=str(tx.amount),
                )

            self._apply_events(tx, account)

        return accounts

    def _apply_base(self, tx: Transaction, account: Account) -> None:
        if tx.transaction_type is TransactionType.DEPOSIT:
            account.deposit(tx)
        elif tx.transaction_type is TransactionType.WITHDRAWAL:
            account.withdraw(tx)
        else:
            raise ValueError(f"Unhandled transaction type {tx.transaction_type!r}")

    def _apply_events(self, tx: Transaction, account: Account) -> None:
        for event_type in tx.events:
            handler = self.handlers.get(event_type)
            if handler is None:
                raise ValueError(f"No handler registered for {event_type!r}")
            applied = handler(tx, account)
            if applied:
                if self.verbose:
                    logger.info(
                        "event_applied",
                        event_type=event_type.value,
                        tx=tx.transaction_id,
                        client=tx.client_id,
                        status=tx.status.value,
                    )
            else:
                logger.debug(
                    "event_ignored",
                    reason="status",
                    event_type=event_type.value,
                    tx=tx.transaction_id,
                    status=tx.status.value,
                )

    # ========================================================================
    # FULL PIPELINE
    # ========================================================================

    def run(self, records: Iterable[RawTransaction]) -> List[RawAccount]:
        """
        Validate, preprocess, replay and flatten a complete input.

        Every record is validated before any account is created, so a single
        malformed record aborts the run without producing anything.

        Args:
            records: Raw input rows in file order

        Returns:
            One RawAccount per client seen in an accepted transaction

        Raises:
            LedgerError: Any format or account error
        """
        checked = check_records(records, self.decimal_places)
        history, transactions = preprocess(checked)
        accounts = self.process(history, transactions)
        raw_accounts = postprocess(accounts, self.decimal_places)
        logger.debug(
            "run_completed",
            records=len(checked),
            transactions=len(history),
            accounts=len(raw_accounts),
        )
        return raw_accounts


# ============================================================================
# CONVENIENCE FUNCTIONS
# ============================================================================

def process_transactions(history: History, transactions: TransactionTable) -> AccountMap:
    """Replay a history with the default handlers."""
    return ReplayEngine().process(history, transactions)


def verify_accounts(
    accounts: AccountMap,
    tolerance: Decimal = BALANCE_TOLERANCE,
) -> Dict[str, Any]:
    """
    Check total == available + held for every account.

    Returns:
        Dict with keys:
        - 'valid': bool - True if every account balances
        - 'discrepancies': List[Dict] - client, available, held, total, difference

    Example:
        result = verify_accounts(accounts)
        assert result['valid'], result['discrepancies']
    """
    discrepancies = []
    for client_id in sorted(accounts):
        account = accounts[client_id]
        if not account.verify_balance(tolerance):
            discrepancies.append({
                'client': client_id,
                'available': account.available,
                'held': account.held,
                'total': account.total,
                'difference': account.total - (account.available + account.held),
            })
    return {
        'valid': len(discrepancies) == 0,
        'discrepancies': discrepancies,
    }
