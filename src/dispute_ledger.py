from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from models import Transaction


class DisputeState(Enum):
    NONE = "none"
    OPEN = "open"
    CHARGED_BACK = "charged_back"


@dataclass
class LedgerEntry:
    transaction: Transaction
    state: DisputeState = DisputeState.NONE


class DisputeLedger:
    """
    Per-account index of monetary transactions by id, with the dispute
    state of each one. Lookups are O(1) so disputes never rescan history.
    """

    def __init__(self):
        self._entries: Dict[int, LedgerEntry] = {}

    def store_transaction(self, transaction: Transaction) -> bool:
        """
        Store a deposit or withdrawal for future dispute lookups.
        Returns False if the id is already taken; the first entry is kept.
        """
        if transaction.transaction_id in self._entries:
            return False
        self._entries[transaction.transaction_id] = LedgerEntry(transaction)
        return True

    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        entry = self._entries.get(transaction_id)
        return entry.transaction if entry else None

    def get_state(self, transaction_id: int) -> Optional[DisputeState]:
        """Dispute state of a stored transaction, None if the id is unknown."""
        entry = self._entries.get(transaction_id)
        return entry.state if entry else None

    def is_transaction_disputed(self, transaction_id: int) -> bool:
        return self.get_state(transaction_id) == DisputeState.OPEN

    def open_dispute(self, transaction_id: int) -> Optional[Transaction]:
        """
        Move NONE -> OPEN. Returns the disputed transaction, or None when the
        id is unknown, already disputed, or charged back.
        """
        entry = self._entries.get(transaction_id)
        if entry is None or entry.state != DisputeState.NONE:
            return None
        entry.state = DisputeState.OPEN
        return entry.transaction

    def resolve_dispute(self, transaction_id: int) -> Optional[Transaction]:
        """Move OPEN -> NONE. Returns the transaction, or None if no dispute is open."""
        entry = self._entries.get(transaction_id)
        if entry is None or entry.state != DisputeState.OPEN:
            return None
        entry.state = DisputeState.NONE
        return entry.transaction

    def charge_back(self, transaction_id: int) -> Optional[Transaction]:
        """Move OPEN -> CHARGED_BACK (terminal). Returns the transaction, or None if no dispute is open."""
        entry = self._entries.get(transaction_id)
        if entry is None or entry.state != DisputeState.OPEN:
            return None
        entry.state = DisputeState.CHARGED_BACK
        return entry.transaction

    def __len__(self) -> int:
        return len(self._entries)
