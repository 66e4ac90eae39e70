from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional, Union

from errors import InvalidAmount, InvalidIdentifier

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1

ZERO = Decimal("0")


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def is_monetary(self) -> bool:
        return self in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


class ProcessingResult(Enum):
    APPLIED = "applied"
    IGNORED = "ignored"


def _check_identifier(name: str, value: int, upper: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidIdentifier(f"{name} must be an integer, got {value!r}")
    if not 0 <= value <= upper:
        raise InvalidIdentifier(f"{name} {value} outside range 0..{upper}")
    return value


def _to_amount(value: Union[Decimal, int, str]) -> Decimal:
    """Convert an amount exactly; binary floats are refused."""
    if isinstance(value, (bool, float)):
        raise InvalidAmount(f"amount must be an exact decimal, got {value!r}")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidAmount(f"amount {value!r} is not a decimal number") from None
    if not amount.is_finite():
        raise InvalidAmount(f"amount {value!r} is not finite")
    if amount < 0:
        raise InvalidAmount(f"amount {amount} is negative")
    return amount


@dataclass(frozen=True)
class Transaction:
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None

    def __post_init__(self):
        _check_identifier("client", self.client_id, MAX_CLIENT_ID)
        _check_identifier("tx", self.transaction_id, MAX_TRANSACTION_ID)
        if self.transaction_type.is_monetary:
            if self.amount is None:
                raise InvalidAmount(
                    f"{self.transaction_type.value} tx {self.transaction_id} requires an amount"
                )
            object.__setattr__(self, "amount", _to_amount(self.amount))
        elif self.amount is not None:
            # Dispute, resolve and chargeback rows refer to an amount, never carry one.
            object.__setattr__(self, "amount", None)

    @classmethod
    def create_deposit(cls, client_id: int, transaction_id: int, amount) -> "Transaction":
        return cls(TransactionType.DEPOSIT, client_id, transaction_id, amount)

    @classmethod
    def create_withdraw(cls, client_id: int, transaction_id: int, amount) -> "Transaction":
        return cls(TransactionType.WITHDRAWAL, client_id, transaction_id, amount)

    @classmethod
    def create_dispute(cls, client_id: int, transaction_id: int) -> "Transaction":
        return cls(TransactionType.DISPUTE, client_id, transaction_id)

    @classmethod
    def create_resolve(cls, client_id: int, transaction_id: int) -> "Transaction":
        return cls(TransactionType.RESOLVE, client_id, transaction_id)

    @classmethod
    def create_chargeback(cls, client_id: int, transaction_id: int) -> "Transaction":
        return cls(TransactionType.CHARGEBACK, client_id, transaction_id)

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass(frozen=True)
class Snapshot:
    """Point-in-time read of one client's balance."""

    client_id: int
    total: Decimal = ZERO
    held: Decimal = ZERO
    locked: bool = False

    @property
    def available(self) -> Decimal:
        return self.total - self.held


@dataclass
class Balance:
    total: Decimal = ZERO
    held: Decimal = ZERO
    locked: bool = False

    @property
    def available(self) -> Decimal:
        return self.total - self.held

    def credit(self, amount: Decimal) -> None:
        self.total += amount

    def debit(self, amount: Decimal) -> None:
        self.total -= amount

    def hold(self, amount: Decimal) -> None:
        self.held += amount

    def release_hold(self, amount: Decimal) -> None:
        self.held -= amount

    def charge_back(self, amount: Decimal) -> None:
        self.held -= amount
        self.total -= amount


class ProcessingStats:
    """Counters for a processing run."""

    def __init__(self):
        self.applied = 0
        self.ignored = 0
        self.skipped = 0

    def record(self, result: ProcessingResult) -> None:
        if result == ProcessingResult.APPLIED:
            self.applied += 1
        else:
            self.ignored += 1

    def record_skipped(self) -> None:
        self.skipped += 1

    def __repr__(self) -> str:
        return f"ProcessingStats(applied={self.applied}, ignored={self.ignored}, skipped={self.skipped})"
