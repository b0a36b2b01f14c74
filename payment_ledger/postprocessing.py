"""
postprocessing.py - Account flattening

Maps final Account state to RawAccount output rows, rounding every balance
at the boundary.
"""

from __future__ import annotations
from typing import Dict, List

from .account import Account
from .core import DECIMAL_PLACES, RawAccount, round_amount


def to_raw_account(account: Account, decimal_places: int = DECIMAL_PLACES) -> RawAccount:
    """Flatten one account, rounding available, held and total."""
    return RawAccount(
        client=account.client_id,
        available=round_amount(account.available, decimal_places),
        held=round_amount(account.held, decimal_places),
        total=round_amount(account.total, decimal_places),
        locked=account.locked,
    )


def postprocess(
    accounts: Dict[int, Account],
    decimal_places: int = DECIMAL_PLACES,
) -> List[RawAccount]:
    """
    Flatten every account.

    Rows come out in account creation order; no ordering is guaranteed to
    callers.
    """
    return [to_raw_account(account, decimal_places) for account in accounts.values()]
