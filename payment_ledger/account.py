"""
account.py - Per-client account state

The Account class is the only object that mutates balances. Every operation
validates first and mutates second, so a raised error leaves the account
exactly as it was.

Key responsibilities:
    - Deposit and withdraw, enforcing sufficient funds and the freeze
    - Move disputed amounts between available and held
    - Resolve or charge back a dispute, locking the account on chargeback
    - Keep total == available + held after every operation
"""

from __future__ import annotations
from decimal import Decimal

from .core import (
    BALANCE_TOLERANCE, ZERO,
    Transaction, TransactionType, EventType,
    InvalidClientId, InsufficientFunds, FrozenAccount,
    WrongTransactionType, InvalidEventType,
)


class Account:
    """
    Balances of a single client.

    Amounts arrive pre-rounded, so balances are exact sums of rounded values.
    held may go negative while a withdrawal is under dispute: it then
    represents a pending adjustment in the client's favour.

    Example:
        account = Account(1)
        account.deposit(Transaction(TransactionType.DEPOSIT, 1, 1, Decimal("25")))
        account.dispute(tx)
        account.available  # Decimal("0")
        account.held       # Decimal("25")
    """

    __slots__ = ("client_id", "available", "held", "total", "locked")

    def __init__(self, client_id: int):
        self.client_id = client_id
        self.available: Decimal = ZERO
        self.held: Decimal = ZERO
        self.total: Decimal = ZERO
        self.locked = False

    def __repr__(self) -> str:
        return (
            f"Account(client={self.client_id}, available={self.available}, "
            f"held={self.held}, total={self.total}, locked={self.locked})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Account):
            return NotImplemented
        return (
            self.client_id == other.client_id
            and self.available == other.available
            and self.held == other.held
            and self.total == other.total
            and self.locked == other.locked
        )

    # ========================================================================
    # CHECKS (read-only)
    # ========================================================================

    def verify_balance(self, tolerance: Decimal = BALANCE_TOLERANCE) -> bool:
        """Return True if total equals available + held within tolerance."""
        return abs(self.total - (self.available + self.held)) <= tolerance

    def _check_owner(self, tx: Transaction) -> None:
        if tx.client_id != self.client_id:
            raise InvalidClientId(self.client_id, tx.transaction_id)

    def _check_event(self, tx: Transaction, event_type: EventType, expected: EventType) -> None:
        self._check_owner(tx)
        if event_type is not expected:
            raise InvalidEventType(tx.transaction_id)

    # ========================================================================
    # BASE OPERATIONS (Mutating)
    # ========================================================================

    def freeze(self) -> None:
        """Lock the account for the rest of the run. There is no unfreeze."""
        self.locked = True

    def deposit(self, tx: Transaction) -> None:
        """
        Credit a deposit.

        Raises:
            InvalidClientId: tx belongs to another client
            WrongTransactionType: tx is not a deposit
            FrozenAccount: the account is locked
        """
        self._check_owner(tx)
        if tx.transaction_type is not TransactionType.DEPOSIT:
            raise WrongTransactionType(tx.transaction_id)
        if self.locked:
            raise FrozenAccount(self.client_id, tx.transaction_id)
        self.available += tx.amount
        self.total += tx.amount

    def withdraw(self, tx: Transaction) -> None:
        """
        Debit a withdrawal.

        Raises:
            InvalidClientId: tx belongs to another client
            WrongTransactionType: tx is not a withdrawal
            FrozenAccount: the account is locked
            InsufficientFunds: available would go below zero
        """
        self._check_owner(tx)
        if tx.transaction_type is not TransactionType.WITHDRAWAL:
            raise WrongTransactionType(tx.transaction_id)
        if self.locked:
            raise FrozenAccount(self.client_id, tx.transaction_id)
        if self.available - tx.amount < ZERO:
            raise InsufficientFunds(self.client_id, tx.transaction_id)
        self.available -= tx.amount
        self.total -= tx.amount

    # ========================================================================
    # DISPUTE WORKFLOW (Mutating)
    # ========================================================================
    #
    # These operations do not look at tx.status; deciding whether an event
    # applies at all is the replay engine's job. They do apply to a locked
    # account.

    def dispute(self, tx: Transaction, event_type: EventType = EventType.DISPUTE) -> None:
        """
        Put a transaction's amount on hold.

        Deposit: available -> held. Withdrawal: held -> available, so held
        goes negative by the disputed amount. total is unchanged.

        Raises:
            InvalidClientId: tx belongs to another client
            InvalidEventType: event_type is not DISPUTE
        """
        self._check_event(tx, event_type, EventType.DISPUTE)
        if tx.transaction_type is TransactionType.DEPOSIT:
            self.available -= tx.amount
            self.held += tx.amount
        elif tx.transaction_type is TransactionType.WITHDRAWAL:
            self.available += tx.amount
            self.held -= tx.amount
        else:
            raise WrongTransactionType(tx.transaction_id)

    def resolve(self, tx: Transaction, event_type: EventType = EventType.RESOLVE) -> None:
        """
        Undo a dispute's hold, restoring the pre-dispute allocation.

        Raises:
            InvalidClientId: tx belongs to another client
            InvalidEventType: event_type is not RESOLVE
        """
        self._check_event(tx, event_type, EventType.RESOLVE)
        if tx.transaction_type is TransactionType.DEPOSIT:
            self.available += tx.amount
            self.held -= tx.amount
        elif tx.transaction_type is TransactionType.WITHDRAWAL:
            self.available -= tx.amount
            self.held += tx.amount
        else:
            raise WrongTransactionType(tx.transaction_id)

    def chargeback(self, tx: Transaction, event_type: EventType = EventType.CHARGEBACK) -> None:
        """
        Settle a dispute in the client's disfavour (deposit) or favour (withdrawal),
        then lock the account.

        Deposit: the held funds leave the account (held and total decrease).
        Withdrawal: the withdrawn funds come back (held and total increase).

        Raises:
            InvalidClientId: tx belongs to another client
            InvalidEventType: event_type is not CHARGEBACK
        """
        self._check_event(tx, event_type, EventType.CHARGEBACK)
        if tx.transaction_type is TransactionType.DEPOSIT:
            self.held -= tx.amount
            self.total -= tx.amount
        elif tx.transaction_type is TransactionType.WITHDRAWAL:
            self.held += tx.amount
            self.total += tx.amount
        else:
            raise WrongTransactionType(tx.transaction_id)
        self.freeze()
