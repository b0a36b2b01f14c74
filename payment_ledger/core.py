"""
Core types and pure functions for the payment ledger.

This module provides the foundational data structures for replaying a
transaction log:
1. Enums: TransactionType, EventType, TransactionStatus
2. Data structures: RawTransaction, Transaction, TransactionEvent, RawAccount
3. Exceptions: LedgerError, FormatError and AccountError families
4. Rounding: round_amount, the single place where precision is applied

Nothing in this module mutates account state.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP, getcontext
from enum import Enum
from typing import List, Optional, Union


# ============================================================================
# DECIMAL CONTEXT CONFIGURATION
# ============================================================================
#
# Balances are accumulated with Decimal arithmetic. The global context is
# configured once at import time so every module sees the same precision.
#
# PRECONDITION: No other code should modify the global Decimal context.
#
_LEDGER_DECIMAL_CONTEXT = getcontext()
_LEDGER_DECIMAL_CONTEXT.prec = 50


# ============================================================================
# CONSTANTS
# ============================================================================

# Fixed precision of every stored and reported amount.
DECIMAL_PLACES = 4

# Largest precision accepted on the command line (range 0..MAX_DECIMAL_PLACES).
MAX_DECIMAL_PLACES = 28

# Half away from zero: multiply by 10**places, round, divide.
AMOUNT_ROUNDING = ROUND_HALF_UP

# Identifier ranges accepted from the input file (u16 clients, u32 transactions).
MAX_CLIENT_ID = 65535
MAX_TRANSACTION_ID = 4294967295

# Maximum allowed |total - (available + held)| when checking an account.
BALANCE_TOLERANCE = Decimal("1e-9")

ZERO = Decimal("0")


# ============================================================================
# ENUMS
# ============================================================================

class TransactionType(Enum):
    """Base monetary instructions. Values are the input type tags."""
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"


class EventType(Enum):
    """Instructions that reference an existing transaction by id."""
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


class TransactionStatus(Enum):
    """
    Lifecycle of a Transaction during replay.

    INITIATED --(base op ok)--> PROCESSED
    PROCESSED --(dispute)-----> DISPUTED
    DISPUTED  --(resolve)-----> RESOLVED
    DISPUTED  --(chargeback)--> REVERSED

    RESOLVED and REVERSED are terminal.
    """
    INITIATED = "initiated"
    PROCESSED = "processed"
    DISPUTED = "disputed"
    RESOLVED = "resolved"
    REVERSED = "reversed"


# ============================================================================
# EXCEPTIONS
# ============================================================================

class LedgerError(Exception):
    """Base exception for all ledger-related errors. Every one aborts the run."""
    pass


class FormatError(LedgerError):
    """Raised while reading or validating input, before any account is touched."""
    pass


class InvalidTransactionType(FormatError):
    """Raised when a record carries a type tag that is not recognised."""

    def __init__(self, transaction_type: str, transaction_id: int):
        self.transaction_type = transaction_type
        self.transaction_id = transaction_id
        super().__init__(
            f"Invalid transaction type '{transaction_type}' for transaction {transaction_id}"
        )


class MissingAmount(FormatError):
    """Raised when a deposit or withdrawal record has no amount."""

    def __init__(self, transaction_id: int, transaction_type: str):
        self.transaction_id = transaction_id
        self.transaction_type = transaction_type
        super().__init__(
            f"Missing amount for {transaction_type} transaction {transaction_id}"
        )


class UnexpectedAmount(FormatError):
    """Raised when a dispute, resolve or chargeback record carries an amount."""

    def __init__(self, transaction_id: int, transaction_type: str):
        self.transaction_id = transaction_id
        self.transaction_type = transaction_type
        super().__init__(
            f"Unexpected amount for {transaction_type} transaction {transaction_id}"
        )


class InvalidAmount(FormatError):
    """Raised when an amount is negative, NaN or infinite."""

    def __init__(self, transaction_id: int, transaction_type: str):
        self.transaction_id = transaction_id
        self.transaction_type = transaction_type
        super().__init__(
            f"Invalid amount for {transaction_type} transaction {transaction_id}"
        )


class UniqueTransactionId(FormatError):
    """Raised when a transaction id is reused, or missing from the lookup table."""

    def __init__(self, transaction_id: int):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction id {transaction_id} is not unique")


class MalformedRecord(FormatError):
    """Raised when a row of the input file cannot be parsed at all."""

    def __init__(self, line: int, reason: str):
        self.line = line
        self.reason = reason
        super().__init__(f"Malformed record on line {line}: {reason}")


class AccountError(LedgerError):
    """Raised by an Account operation during replay."""
    pass


class InvalidClientId(AccountError):
    """Raised when a transaction is applied to another client's account."""

    def __init__(self, client_id: int, transaction_id: int):
        self.client_id = client_id
        self.transaction_id = transaction_id
        super().__init__(
            f"Transaction {transaction_id} does not belong to client {client_id}"
        )


class InsufficientFunds(AccountError):
    """Raised when a withdrawal would take the available amount below zero."""

    def __init__(self, client_id: int, transaction_id: int):
        self.client_id = client_id
        self.transaction_id = transaction_id
        super().__init__(
            f"Insufficient funds for client {client_id} (transaction {transaction_id})"
        )


class FrozenAccount(AccountError):
    """Raised when a deposit or withdrawal targets a locked account."""

    def __init__(self, client_id: int, transaction_id: int):
        self.client_id = client_id
        self.transaction_id = transaction_id
        super().__init__(
            f"Account of client {client_id} is frozen (transaction {transaction_id})"
        )


class WrongTransactionType(AccountError):
    """Raised when deposit() receives a withdrawal or vice versa."""

    def __init__(self, transaction_id: int):
        self.transaction_id = transaction_id
        super().__init__(f"Wrong transaction type for transaction {transaction_id}")


class InvalidEventType(AccountError):
    """Raised when an event operation is invoked with another kind of event."""

    def __init__(self, transaction_id: int):
        self.transaction_id = transaction_id
        super().__init__(f"Invalid event type for transaction {transaction_id}")


# ============================================================================
# ROUNDING
# ============================================================================

def round_amount(value: Decimal, decimal_places: int = DECIMAL_PLACES) -> Decimal:
    """
    Round a value to a fixed number of decimal places.

    Equivalent to multiplying by 10**decimal_places, rounding half away from
    zero and dividing back. Rounding an already-rounded value is a no-op.

    Args:
        value: Amount to round (int and str are converted to Decimal)
        decimal_places: Number of decimal places to keep

    Returns:
        The rounded Decimal
    """
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    quantizer = Decimal(10) ** -decimal_places
    return value.quantize(quantizer, rounding=AMOUNT_ROUNDING)


# ============================================================================
# CORE DATA STRUCTURES
# ============================================================================

@dataclass(frozen=True, slots=True)
class RawTransaction:
    """
    One input row, parsed but not yet validated.

    Attributes:
        type: Type tag exactly as supplied (after whitespace trimming)
        client: Client id
        tx: Transaction id (for events: the referenced transaction)
        amount: Amount, or None when the field was empty or absent
    """
    type: str
    client: int
    tx: int
    amount: Optional[Decimal] = None


@dataclass(slots=True)
class Transaction:
    """
    A deposit or withdrawal, with the events later recorded against it.

    This is the only mutable record: preprocessing appends to events and the
    replay advances status.

    Attributes:
        transaction_type: DEPOSIT or WITHDRAWAL
        client_id: Owner of the transaction
        transaction_id: Unique id across all transactions
        amount: Non-negative amount, already rounded
        events: Event types in arrival order
        status: Current lifecycle status
    """
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Decimal
    events: List[EventType] = field(default_factory=list)
    status: TransactionStatus = TransactionStatus.INITIATED

    def __repr__(self) -> str:
        return (
            f"Transaction({self.transaction_type.value}, client={self.client_id}, "
            f"tx={self.transaction_id}, amount={self.amount}, status={self.status.value})"
        )


@dataclass(frozen=True, slots=True)
class TransactionEvent:
    """
    A dispute, resolve or chargeback referencing a transaction.

    Never stored on its own: preprocessing folds it into the referenced
    Transaction's events or drops it.
    """
    event_type: EventType
    client_id: int
    transaction_id: int


@dataclass(frozen=True, slots=True)
class RawAccount:
    """One output row: an account's final, rounded balances."""
    client: int
    available: Decimal
    held: Decimal
    total: Decimal
    locked: bool


# A validated input item.
CheckedTransaction = Union[Transaction, TransactionEvent]
