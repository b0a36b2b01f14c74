"""
validation.py - Record Validator

Turns RawTransaction rows into strongly-typed Transaction or TransactionEvent
values. Pure functions: nothing here touches account state, so a whole file
can be checked before the replay starts.
"""

from __future__ import annotations
from decimal import Decimal, InvalidOperation
from typing import Iterable, List

from .core import (
    DECIMAL_PLACES,
    CheckedTransaction,
    EventType,
    InvalidAmount,
    InvalidTransactionType,
    MissingAmount,
    RawTransaction,
    Transaction,
    TransactionEvent,
    TransactionType,
    UnexpectedAmount,
    round_amount,
)


# Type tags are matched case-sensitively against the enum values.
_TRANSACTION_TYPES = {t.value: t for t in TransactionType}
_EVENT_TYPES = {e.value: e for e in EventType}


def check_amount(raw: RawTransaction, decimal_places: int = DECIMAL_PLACES) -> Decimal:
    """
    Validate and round the amount of a deposit or withdrawal row.

    Raises:
        MissingAmount: If the row has no amount
        InvalidAmount: If the amount is negative, NaN, infinite or too large to round
    """
    if raw.amount is None:
        raise MissingAmount(raw.tx, raw.type)
    amount = raw.amount
    if not isinstance(amount, Decimal):
        amount = Decimal(str(amount))
    if not amount.is_finite() or amount < 0:
        raise InvalidAmount(raw.tx, raw.type)
    try:
        return round_amount(amount, decimal_places)
    except InvalidOperation:
        raise InvalidAmount(raw.tx, raw.type) from None


def check_record(raw: RawTransaction, decimal_places: int = DECIMAL_PLACES) -> CheckedTransaction:
    """
    Convert one raw row into a Transaction or a TransactionEvent.

    Args:
        raw: Parsed input row
        decimal_places: Precision the amount is rounded to

    Returns:
        A new Transaction (status INITIATED, no events) for deposit/withdrawal
        rows, a TransactionEvent for dispute/resolve/chargeback rows

    Raises:
        InvalidTransactionType: Unknown type tag
        MissingAmount: Deposit/withdrawal without amount
        InvalidAmount: Deposit/withdrawal with a negative or non-finite amount
        UnexpectedAmount: Dispute/resolve/chargeback with an amount
    """
    if raw.type in _TRANSACTION_TYPES:
        return Transaction(
            transaction_type=_TRANSACTION_TYPES[raw.type],
            client_id=raw.client,
            transaction_id=raw.tx,
            amount=check_amount(raw, decimal_places),
        )
    if raw.type in _EVENT_TYPES:
        if raw.amount is not None:
            raise UnexpectedAmount(raw.tx, raw.type)
        return TransactionEvent(
            event_type=_EVENT_TYPES[raw.type],
            client_id=raw.client,
            transaction_id=raw.tx,
        )
    raise InvalidTransactionType(raw.type, raw.tx)


def check_records(
    raws: Iterable[RawTransaction],
    decimal_places: int = DECIMAL_PLACES,
) -> List[CheckedTransaction]:
    """
    Validate every row eagerly.

    The first invalid row raises, so no partially-validated input ever reaches
    the replay.
    """
    return [check_record(raw, decimal_places) for raw in raws]
