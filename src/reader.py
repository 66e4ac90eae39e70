import csv
import logging
import re
from contextlib import contextmanager
from decimal import Decimal
from typing import Callable, Dict, Iterator, Optional, TextIO

from errors import InvalidAmount, InvalidIdentifier, LedgerError, MalformedRecord
from models import Transaction, TransactionType

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("type", "client", "tx")

# Plain ASCII decimals; the sign is kept so negative amounts reach InvalidAmount
AMOUNT_PATTERN = re.compile(r"-?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)")


def _field(normalized: Dict[str, str], name: str, line_number: int) -> str:
    value = normalized.get(name, "")
    if not value:
        raise MalformedRecord(f"missing '{name}'", line_number)
    return value


def _unsigned(normalized: Dict[str, str], name: str, line_number: int) -> int:
    value = _field(normalized, name, line_number)
    if not (value.isascii() and value.isdigit()):
        raise MalformedRecord(f"invalid {name} '{value}'", line_number)
    return int(value)


def parse_row(row: Dict[Optional[str], object], line_number: int) -> Transaction:
    """
    Parse one CSV row into a Transaction.

    Keys and values are whitespace-trimmed and the type is case-insensitive.
    A short row (no trailing amount column) is accepted for dispute, resolve
    and chargeback.
    """
    normalized = {
        k.strip().lower(): v.strip()
        for k, v in row.items()
        if k is not None and isinstance(v, str)
    }

    transaction_type_str = _field(normalized, "type", line_number).lower()
    try:
        transaction_type = TransactionType(transaction_type_str)
    except ValueError:
        raise MalformedRecord(f"unknown transaction type '{transaction_type_str}'", line_number) from None

    client_id = _unsigned(normalized, "client", line_number)
    transaction_id = _unsigned(normalized, "tx", line_number)

    amount = None
    amount_str = normalized.get("amount", "")
    if transaction_type.is_monetary:
        if not amount_str:
            raise MalformedRecord(f"{transaction_type.value} without amount", line_number)
        if not AMOUNT_PATTERN.fullmatch(amount_str):
            raise MalformedRecord(f"invalid amount '{amount_str}'", line_number)
        amount = Decimal(amount_str)

    try:
        return Transaction(
            transaction_type=transaction_type,
            client_id=client_id,
            transaction_id=transaction_id,
            amount=amount,
        )
    except InvalidIdentifier as e:
        raise MalformedRecord(str(e), line_number) from e
    except InvalidAmount as e:
        raise InvalidAmount(f"line {line_number}: {e}") from e


def read_transactions(
    stream: TextIO,
    on_error: Optional[Callable[[LedgerError], None]] = None,
) -> Iterator[Transaction]:
    """
    Lazily yield transactions from a CSV stream with a `type, client, tx, amount` header.

    A bad row raises, unless on_error is given: then the error is passed to it
    and reading continues with the next row. A bad header always raises.
    """
    reader = csv.DictReader(stream)
    if reader.fieldnames is None:
        return

    columns = {name.strip().lower() for name in reader.fieldnames if name}
    missing = [name for name in REQUIRED_COLUMNS if name not in columns]
    if missing:
        raise MalformedRecord(f"header is missing column(s): {', '.join(missing)}", 1)

    while True:
        try:
            row = next(reader)
        except StopIteration:
            break
        except csv.Error as e:
            raise MalformedRecord(str(e), reader.line_num) from e

        try:
            transaction = parse_row(row, reader.line_num)
        except LedgerError as e:
            if on_error is None:
                raise
            on_error(e)
            continue
        yield transaction


@contextmanager
def open_transactions(
    filepath: str,
    on_error: Optional[Callable[[LedgerError], None]] = None,
) -> Iterator[Iterator[Transaction]]:
    """Open a CSV file and yield its transaction iterator."""
    logger.debug(f"Opening {filepath}")
    with open(filepath, "r", newline="", encoding="utf-8") as f:
        yield read_transactions(f, on_error)
