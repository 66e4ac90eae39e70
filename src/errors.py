from typing import Optional


class LedgerError(Exception):
    """Base exception for all ledger-related errors."""
    pass


class InvalidAmount(LedgerError):
    """Raised when a deposit or withdrawal amount is negative, missing or not an exact decimal."""
    pass


class InvalidIdentifier(LedgerError):
    """Raised when a client or transaction id is outside its unsigned range."""
    pass


class ClientMismatch(LedgerError):
    """Raised when a transaction is applied to an account owned by another client."""
    pass


class MalformedRecord(LedgerError):
    """Raised when an input row cannot be turned into a transaction."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
