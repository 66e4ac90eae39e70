import threading
from typing import Dict, Iterator, Optional

from account import Account
from models import ProcessingResult, Snapshot, Transaction


class Portfolio:
    """
    Owns every client account and routes transactions to them.
    Accounts are created on first sight and kept in first-seen order.
    """

    def __init__(self):
        self._accounts: Dict[int, Account] = {}

        # Guards creation of new entries in _accounts so two threads seeing a
        # client for the first time cannot create two accounts for it.
        self._global_lock = threading.Lock()

    def get_or_create_account(self, client_id: int) -> Account:
        """Get existing account or create new one."""
        with self._global_lock:
            if client_id not in self._accounts:
                self._accounts[client_id] = Account(client_id)
            return self._accounts[client_id]

    def get(self, client_id: int) -> Optional[Account]:
        return self._accounts.get(client_id)

    def add_transaction(self, transaction: Transaction) -> ProcessingResult:
        account = self.get_or_create_account(transaction.client_id)
        return account.apply(transaction)

    def snapshots(self) -> Iterator[Snapshot]:
        """One snapshot per known client, in first-seen order. Safe to call repeatedly."""
        return (account.take_snapshot() for account in list(self._accounts.values()))

    def __contains__(self, client_id: int) -> bool:
        return client_id in self._accounts

    def __len__(self) -> int:
        return len(self._accounts)
