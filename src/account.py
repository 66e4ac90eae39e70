import logging
from typing import List, Tuple

from dispute_ledger import DisputeLedger, DisputeState
from errors import ClientMismatch
from models import Balance, ProcessingResult, Snapshot, Transaction, TransactionType

logger = logging.getLogger(__name__)


class Account:
    """
    One client's balance plus the dispute/chargeback state machine.

    Every transaction that reaches apply() is appended to the history in
    arrival order. Semantic no-ops (unknown reference, duplicate dispute,
    resolve or chargeback without an open dispute, chargeback on a locked
    account) return ProcessingResult.IGNORED and never raise.
    """

    def __init__(self, client_id: int):
        self.client_id = client_id
        self._balance = Balance()
        self._history: List[Transaction] = []
        self._ledger = DisputeLedger()

    @property
    def history(self) -> Tuple[Transaction, ...]:
        return tuple(self._history)

    @property
    def locked(self) -> bool:
        return self._balance.locked

    def is_disputed(self, transaction_id: int) -> bool:
        return self._ledger.is_transaction_disputed(transaction_id)

    def apply(self, transaction: Transaction) -> ProcessingResult:
        """
        Apply a single transaction.

        Returns:
            APPLIED: the balance or dispute state changed
            IGNORED: valid transaction with no effect

        Raises:
            ClientMismatch: transaction belongs to another client
        """
        if transaction.client_id != self.client_id:
            logger.error(f"Transaction tx {transaction.transaction_id}: client mismatch (expected {self.client_id}, got {transaction.client_id}). This should never happen.")
            raise ClientMismatch(
                f"transaction for client {transaction.client_id} applied to account {self.client_id}"
            )

        self._history.append(transaction)

        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                return self._handle_deposit(transaction)
            case TransactionType.WITHDRAWAL:
                return self._handle_withdrawal(transaction)
            case TransactionType.DISPUTE:
                return self._handle_dispute(transaction)
            case TransactionType.RESOLVE:
                return self._handle_resolve(transaction)
            case TransactionType.CHARGEBACK:
                return self._handle_chargeback(transaction)
            case _:
                raise AssertionError(f"unhandled transaction type {transaction.transaction_type}")

    def take_snapshot(self) -> Snapshot:
        return Snapshot(
            client_id=self.client_id,
            total=self._balance.total,
            held=self._balance.held,
            locked=self._balance.locked,
        )

    def _store(self, transaction: Transaction) -> None:
        if not self._ledger.store_transaction(transaction):
            logger.warning(f"{transaction.transaction_type.value.capitalize()} tx {transaction.transaction_id}: id already used, disputes keep referring to the first one")

    def _handle_deposit(self, transaction: Transaction) -> ProcessingResult:
        self._balance.credit(transaction.amount)
        self._store(transaction)
        return ProcessingResult.APPLIED

    def _handle_withdrawal(self, transaction: Transaction) -> ProcessingResult:
        # No solvency check: total may go negative.
        self._balance.debit(transaction.amount)
        self._store(transaction)
        return ProcessingResult.APPLIED

    def _handle_dispute(self, transaction: Transaction) -> ProcessingResult:
        state = self._ledger.get_state(transaction.transaction_id)

        if state is None:
            logger.info(f"Dispute for tx {transaction.transaction_id}: no such deposit or withdrawal on client {self.client_id}")
            return ProcessingResult.IGNORED

        if state != DisputeState.NONE:
            logger.info(f"Dispute for tx {transaction.transaction_id}: transaction already {state.value}")
            return ProcessingResult.IGNORED

        original = self._ledger.open_dispute(transaction.transaction_id)

        match original.transaction_type:
            case TransactionType.DEPOSIT:
                self._balance.hold(original.amount)
            case TransactionType.WITHDRAWAL:
                # Withdrawn funds come back provisionally and stay held.
                self._balance.credit(original.amount)
                self._balance.hold(original.amount)
        return ProcessingResult.APPLIED

    def _handle_resolve(self, transaction: Transaction) -> ProcessingResult:
        original = self._ledger.resolve_dispute(transaction.transaction_id)

        if original is None:
            logger.info(f"Resolve for tx {transaction.transaction_id}: no open dispute")
            return ProcessingResult.IGNORED

        self._balance.release_hold(original.amount)
        return ProcessingResult.APPLIED

    def _handle_chargeback(self, transaction: Transaction) -> ProcessingResult:
        if self._balance.locked:
            logger.info(f"Chargeback for tx {transaction.transaction_id}: account {self.client_id} already locked")
            return ProcessingResult.IGNORED

        original = self._ledger.charge_back(transaction.transaction_id)

        if original is None:
            logger.info(f"Chargeback for tx {transaction.transaction_id}: no open dispute")
            return ProcessingResult.IGNORED

        self._balance.charge_back(original.amount)
        self._balance.locked = True
        return ProcessingResult.APPLIED

    def __repr__(self) -> str:
        return f"Account(client={self.client_id}, total={self._balance.total}, held={self._balance.held}, locked={self._balance.locked})"
