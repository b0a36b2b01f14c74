"""
csv_io.py - Tabular input and output

Reads the transaction file into RawTransaction rows and writes RawAccount
rows. Fields are trimmed of surrounding whitespace; anything that cannot be
parsed raises MalformedRecord, which aborts the run like any other format
error.

Input header:  type,client,tx,amount
Output header: client,available,held,total,locked
"""

from __future__ import annotations
import csv
import os
from decimal import Decimal, InvalidOperation
from typing import IO, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from .core import (
    MAX_CLIENT_ID, MAX_TRANSACTION_ID,
    MalformedRecord, RawAccount, RawTransaction,
)


INPUT_FIELDS = ("type", "client", "tx", "amount")
OUTPUT_FIELDS = ("client", "available", "held", "total", "locked")

# amount may be omitted entirely on event rows
REQUIRED_FIELDS = ("type", "client", "tx")


# ============================================================================
# PARSING
# ============================================================================

def _parse_id(text: str, name: str, maximum: int, line: int) -> int:
    try:
        value = int(text)
    except ValueError:
        raise MalformedRecord(line, f"{name} '{text}' is not an integer") from None
    if value < 0 or value > maximum:
        raise MalformedRecord(line, f"{name} {value} out of range 0..{maximum}")
    return value


def _parse_amount(text: Optional[str], line: int) -> Optional[Decimal]:
    if text is None or text == "":
        return None
    try:
        return Decimal(text)
    except InvalidOperation:
        raise MalformedRecord(line, f"amount '{text}' is not a number") from None


def _column_index(header: List[str], line: int) -> Dict[str, int]:
    index = {name: position for position, name in enumerate(header)}
    for name in REQUIRED_FIELDS:
        if name not in index:
            raise MalformedRecord(line, f"missing column '{name}'")
    return index


def _field(fields: List[str], index: Dict[str, int], name: str) -> Optional[str]:
    position = index.get(name)
    if position is None or position >= len(fields):
        return None
    return fields[position]


def _numbered_rows(rows: Iterable[List[str]]) -> Iterator[Tuple[int, List[str]]]:
    """Yield (line, row) pairs, turning decoding and CSV syntax errors into MalformedRecord."""
    iterator = iter(rows)
    line = 0
    while True:
        line += 1
        try:
            row = next(iterator)
        except StopIteration:
            return
        except UnicodeDecodeError as e:
            raise MalformedRecord(line, f"input is not valid UTF-8 ({e.reason})") from None
        except csv.Error as e:
            raise MalformedRecord(line, str(e)) from None
        yield line, row


def parse_rows(rows: Iterable[List[str]]) -> Iterator[RawTransaction]:
    """
    Convert CSV rows (header first) into RawTransaction values.

    Blank rows are skipped. Line numbers in errors are 1-based and count the
    header.
    """
    index: Optional[Dict[str, int]] = None
    for line, row in _numbered_rows(rows):
        fields = [value.strip() for value in row]
        if not any(fields):
            continue
        if index is None:
            index = _column_index(fields, line)
            continue

        record_type = _field(fields, index, "type")
        client = _field(fields, index, "client")
        tx = _field(fields, index, "tx")
        if record_type is None or client is None or tx is None:
            raise MalformedRecord(line, f"expected at least {len(REQUIRED_FIELDS)} fields, got {len(fields)}")

        yield RawTransaction(
            type=record_type,
            client=_parse_id(client, "client", MAX_CLIENT_ID, line),
            tx=_parse_id(tx, "tx", MAX_TRANSACTION_ID, line),
            amount=_parse_amount(_field(fields, index, "amount"), line),
        )


def read_records(source: Union[str, os.PathLike, IO[str]]) -> List[RawTransaction]:
    """
    Read every record of a transaction file.

    Args:
        source: Path to a UTF-8 file, or an open text stream

    Returns:
        RawTransaction rows in file order

    Raises:
        MalformedRecord: On the first row that cannot be decoded or parsed
        OSError: If the file cannot be opened
    """
    if hasattr(source, "read"):
        return list(parse_rows(csv.reader(source)))
    with open(source, newline="", encoding="utf-8") as f:
        return list(parse_rows(csv.reader(f)))


# ============================================================================
# SERIALIZATION
# ============================================================================

def format_decimal(value: Decimal) -> str:
    """
    Render a Decimal in fixed-point notation without trailing zeros.

    Decimal("1.5000") -> "1.5", Decimal("2.0000") -> "2", Decimal("-0") -> "0"
    """
    if value == 0:
        return "0"
    normalized = value.normalize()
    return format(normalized, "f")


def account_row(account: RawAccount) -> List[str]:
    return [
        str(account.client),
        format_decimal(account.available),
        format_decimal(account.held),
        format_decimal(account.total),
        "true" if account.locked else "false",
    ]


def write_accounts(accounts: Iterable[RawAccount], stream: IO[str]) -> None:
    """Write the header and one row per account to a text stream."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(OUTPUT_FIELDS)
    for account in accounts:
        writer.writerow(account_row(account))
