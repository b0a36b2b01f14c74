"""
preprocessing.py - Event aggregation

Single forward pass over validated input that builds:
1. The chronological history: transaction ids in arrival order
2. The transaction table: transaction id -> Transaction, with every dispute,
   resolve and chargeback folded into its target's event list

Events that reference an unknown transaction, or a transaction owned by a
different client, are dropped. They are not errors.
"""

from __future__ import annotations
from typing import Dict, Iterable, List, Tuple

import structlog

from .core import Transaction, TransactionEvent, UniqueTransactionId, CheckedTransaction

logger = structlog.get_logger(__name__)


# Arrival-ordered transaction ids.
History = List[int]

# Transaction id -> Transaction.
TransactionTable = Dict[int, Transaction]


def preprocess(items: Iterable[CheckedTransaction]) -> Tuple[History, TransactionTable]:
    """
    Aggregate events onto transactions.

    Args:
        items: Validated transactions and events, in input order

    Returns:
        (history, transactions)

    Raises:
        UniqueTransactionId: If two transactions share an id (regardless of client)
    """
    history: History = []
    transactions: TransactionTable = {}

    for item in items:
        if isinstance(item, Transaction):
            if item.transaction_id in transactions:
                raise UniqueTransactionId(item.transaction_id)
            history.append(item.transaction_id)
            transactions[item.transaction_id] = item
        elif isinstance(item, TransactionEvent):
            target = transactions.get(item.transaction_id)
            if target is None:
                logger.debug(
                    "event_ignored",
                    reason="unknown_transaction",
                    event_type=item.event_type.value,
                    tx=item.transaction_id,
                    client=item.client_id,
                )
                continue
            if target.client_id != item.client_id:
                logger.debug(
                    "event_ignored",
                    reason="client_mismatch",
                    event_type=item.event_type.value,
                    tx=item.transaction_id,
                    client=item.client_id,
                    owner=target.client_id,
                )
                continue
            target.events.append(item.event_type)
        else:
            raise TypeError(f"Cannot preprocess {type(item).__name__}")

    return history, transactions
