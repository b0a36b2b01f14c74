"""
payment_ledger - Transaction Log Replay

Replays an ordered log of deposits, withdrawals and dispute events into
per-client account balances.

Usage:
    from payment_ledger import ReplayEngine, RawTransaction
    from decimal import Decimal

    engine = ReplayEngine()
    accounts = engine.run([
        RawTransaction("deposit", 1, 1, Decimal("25.0")),
        RawTransaction("dispute", 1, 1),
        RawTransaction("resolve", 1, 1),
    ])
    # [RawAccount(client=1, available=Decimal('25.0000'), held=Decimal('0.0000'), ...)]

    # Or stage by stage
    checked = check_records(records)
    history, transactions = preprocess(checked)
    accounts = process_transactions(history, transactions)
    rows = postprocess(accounts)
"""

# Core types
from .core import (
    TransactionType,
    EventType,
    TransactionStatus,
    RawTransaction,
    Transaction,
    TransactionEvent,
    RawAccount,
    CheckedTransaction,
    round_amount,
    DECIMAL_PLACES,
    # Exceptions
    LedgerError,
    FormatError,
    InvalidTransactionType,
    MissingAmount,
    UnexpectedAmount,
    InvalidAmount,
    UniqueTransactionId,
    MalformedRecord,
    AccountError,
    InvalidClientId,
    InsufficientFunds,
    FrozenAccount,
    WrongTransactionType,
    InvalidEventType,
)

# Account state
from .account import Account

# Pipeline stages
from .validation import check_record, check_records
from .preprocessing import preprocess
from .event_handlers import (
    handle_dispute,
    handle_resolve,
    handle_chargeback,
    DEFAULT_HANDLERS,
)
from .engine import ReplayEngine, process_transactions, verify_accounts
from .postprocessing import postprocess, to_raw_account

# CSV
from .csv_io import read_records, write_accounts, format_decimal

# Logging (quiet unless the application configures structlog)
from .logging_config import setup_logging, configure_default_logging

configure_default_logging()

__all__ = [
    # Core
    'TransactionType', 'EventType', 'TransactionStatus',
    'RawTransaction', 'Transaction', 'TransactionEvent', 'RawAccount',
    'CheckedTransaction', 'round_amount', 'DECIMAL_PLACES',
    # Exceptions
    'LedgerError', 'FormatError', 'InvalidTransactionType', 'MissingAmount',
    'UnexpectedAmount', 'InvalidAmount', 'UniqueTransactionId', 'MalformedRecord',
    'AccountError', 'InvalidClientId', 'InsufficientFunds', 'FrozenAccount',
    'WrongTransactionType', 'InvalidEventType',
    # Account
    'Account',
    # Pipeline
    'check_record', 'check_records', 'preprocess',
    'handle_dispute', 'handle_resolve', 'handle_chargeback', 'DEFAULT_HANDLERS',
    'ReplayEngine', 'process_transactions', 'verify_accounts',
    'postprocess', 'to_raw_account',
    # CSV
    'read_records', 'write_accounts', 'format_decimal',
    # Logging
    'setup_logging', 'configure_default_logging',
]

__version__ = '1.0.0'
