import logging
from typing import Iterable, List, Optional

from config import EngineConfig
from errors import LedgerError
from models import ProcessingStats, Snapshot, Transaction
from portfolio import Portfolio
from reader import open_transactions

logger = logging.getLogger(__name__)


class LedgerEngine:
    """
    Feeds a transaction stream into a Portfolio, strictly in arrival order,
    and returns the final per-client snapshots.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()
        self.portfolio = Portfolio()
        self.stats = ProcessingStats()

    def process(self, transactions: Iterable[Transaction]) -> List[Snapshot]:
        """Apply every transaction and return snapshots in first-seen-client order."""
        logger.info("Starting processing")

        for transaction in transactions:
            result = self.portfolio.add_transaction(transaction)
            self.stats.record(result)

        logger.info(
            f"Processing complete. Applied: {self.stats.applied}, "
            f"Ignored: {self.stats.ignored}, "
            f"Skipped: {self.stats.skipped}, "
            f"Clients: {len(self.portfolio)}"
        )
        return list(self.portfolio.snapshots())

    def process_file(self, filepath: str) -> List[Snapshot]:
        """Process CSV file and return final account snapshots."""
        on_error = self._skip_row if self.config.skip_invalid_rows else None
        with open_transactions(filepath, on_error) as transactions:
            return self.process(transactions)

    def _skip_row(self, error: LedgerError) -> None:
        self.stats.record_skipped()
        logger.warning(f"Skipping invalid row: {error}")
