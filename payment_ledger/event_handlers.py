"""
event_handlers.py - Event Handler Functions

One plain function per EventType, applying an event to its transaction and
the owning account:
- No handler classes, just functions
- Dict of functions keyed by EventType instead of a class hierarchy
- Each handler decides from the transaction status whether the event applies;
  events that do not apply are no-ops, not errors

Handler signature: (transaction, account) -> bool, True if the event changed
anything.
"""

from __future__ import annotations
from typing import Callable, Dict

from .account import Account
from .core import EventType, Transaction, TransactionStatus


EventHandler = Callable[[Transaction, Account], bool]


# ============================================================================
# HANDLER FUNCTIONS
# ============================================================================

def handle_dispute(tx: Transaction, account: Account) -> bool:
    """
    Dispute a processed transaction.

    Only a PROCESSED transaction can be disputed: a second dispute, or a
    dispute after the transaction was resolved or reversed, is ignored.
    """
    if tx.status is not TransactionStatus.PROCESSED:
        return False
    account.dispute(tx, EventType.DISPUTE)
    tx.status = TransactionStatus.DISPUTED
    return True


def handle_resolve(tx: Transaction, account: Account) -> bool:
    """Resolve an active dispute. Ignored unless the transaction is DISPUTED."""
    if tx.status is not TransactionStatus.DISPUTED:
        return False
    account.resolve(tx, EventType.RESOLVE)
    tx.status = TransactionStatus.RESOLVED
    return True


def handle_chargeback(tx: Transaction, account: Account) -> bool:
    """Charge back an active dispute. Ignored unless the transaction is DISPUTED."""
    if tx.status is not TransactionStatus.DISPUTED:
        return False
    account.chargeback(tx, EventType.CHARGEBACK)
    tx.status = TransactionStatus.REVERSED
    return True


# ============================================================================
# DEFAULT HANDLERS
# ============================================================================

DEFAULT_HANDLERS: Dict[EventType, EventHandler] = {
    EventType.DISPUTE: handle_dispute,
    EventType.RESOLVE: handle_resolve,
    EventType.CHARGEBACK: handle_chargeback,
}

_missing = set(EventType) - set(DEFAULT_HANDLERS)
if _missing:
    raise RuntimeError(f"No default handler for {sorted(e.value for e in _missing)}")
