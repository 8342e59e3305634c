"""Ledger service owning the transaction collection and the monthly target."""

import json
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional, Tuple

from models.outcome import DESTRUCTIVE, Outcome
from models.transaction import Transaction
from services.hydration import HydrationGate
from tools.formatting import format_currency
from logger import get_logger

logger = get_logger()

TRANSACTIONS_KEY = "transactions"
MONTHLY_TARGET_KEY = "monthly_target"


class LedgerNotReadyError(RuntimeError):
    """Raised when the ledger is mutated before its persisted state is loaded."""


@dataclass(frozen=True)
class MergeResult:
    """Result of merging extracted transactions into the ledger.

    Attributes:
        transactions: The ledger's collection after the merge.
        added: Number of candidates prepended to the ledger.
        skipped: Number of candidates already present in the ledger.
    """

    transactions: Tuple[Transaction, ...]
    added: int
    skipped: int


def parse_decimal(raw) -> Optional[Decimal]:
    """Parse user or stored input as a finite Decimal, or return None."""
    if raw is None:
        return None
    try:
        value = Decimal(str(raw).strip())
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


def _sanitize_record(record, today: date) -> Transaction:
    """Build a Transaction from a stored record, storing amounts as magnitudes.

    Raises:
        ValueError: If the record is not an object or has no usable amount.
    """
    if isinstance(record, dict):
        amount = parse_decimal(record.get("amount"))
        if amount is not None and amount < 0:
            record = {**record, "amount": str(-amount)}
    return Transaction.from_dict(record, today)


class LedgerService:
    """Service for managing the ledger.

    Transactions are kept most-recent-operation-first: added and merged
    records are prepended. The collection is replaced on every mutation,
    never modified in place, and each mutation rewrites its persisted blob.

    Args:
        storage: Key-value store holding the persisted blobs.
        gate: Hydration gate shared with the aggregation tools.
    """

    def __init__(self, storage, gate: Optional[HydrationGate] = None):
        self.storage = storage
        self.gate = gate or HydrationGate()
        self.transactions: Tuple[Transaction, ...] = ()
        self.target: Optional[Decimal] = None

    def load(self, today: Optional[date] = None) -> Tuple[Transaction, ...]:
        """Load persisted transactions and target into memory.

        Corrupted blobs are logged and discarded, and stored records without a
        usable amount are skipped; neither failure reaches the caller. Runs
        once; later calls return the loaded collection. If reading storage
        raises, the gate is reset so load can be retried.

        Args:
            today: Date used for records stored without one. Defaults to today.

        Returns:
            The loaded transactions.
        """
        if self.gate.is_ready:
            return self.transactions

        self.gate.begin()
        try:
            self.transactions = self._load_transactions(today or date.today())
            self.target = self._load_target()
        except Exception:
            self.gate.reset()
            raise
        self.gate.complete()

        logger.debug(
            f"Loaded {len(self.transactions)} transaction(s), target={self.target}"
        )
        return self.transactions

    def add(self, transaction: Transaction) -> Tuple[Transaction, ...]:
        """Prepend a single transaction to the ledger.

        Args:
            transaction: Transaction entered manually.

        Returns:
            The updated collection.
        """
        self._require_ready()
        self.transactions = (transaction,) + self.transactions
        self._save_transactions()
        return self.transactions

    def merge(self, candidates: Iterable[Transaction]) -> MergeResult:
        """Merge extracted transactions, skipping ones already in the ledger.

        Only the pre-merge collection is checked, so two identical candidates
        in the same batch are both kept when neither is already present.

        Args:
            candidates: Transactions produced by statement extraction.

        Returns:
            MergeResult with the updated collection and counts.
        """
        self._require_ready()
        candidates = list(candidates)

        existing_signatures = {t.signature for t in self.transactions}
        new_transactions = [
            c for c in candidates if c.signature not in existing_signatures
        ]

        if new_transactions:
            self.transactions = tuple(new_transactions) + self.transactions
            self._save_transactions()

        return MergeResult(
            transactions=self.transactions,
            added=len(new_transactions),
            skipped=len(candidates) - len(new_transactions),
        )

    def set_target(self, raw, currency: str = "INR") -> Outcome:
        """Set or clear the monthly spending target.

        Positive values set the target, zero or negative values clear it,
        and anything non-numeric is rejected without changing state.

        Args:
            raw: User input for the new target.
            currency: Display currency used in the outcome message.

        Returns:
            Outcome describing what happened.
        """
        self._require_ready()
        value = parse_decimal(raw)

        if value is None:
            return Outcome(
                title="Invalid Target",
                description="Please enter a valid positive number for the target, or 0 to clear.",
                variant=DESTRUCTIVE,
            )

        if value > 0:
            self.target = value
            self._save_target()
            return Outcome(
                title="Monthly Target Set",
                description=f"Your new monthly spending target is {format_currency(value, currency)}.",
            )

        self.target = None
        self._save_target()
        return Outcome(
            title="Monthly Target Cleared",
            description="Monthly spending target has been removed.",
        )

    def save(self) -> None:
        """Rewrite both persisted blobs from the in-memory state."""
        self._require_ready()
        self._save_transactions()
        self._save_target()

    def _require_ready(self) -> None:
        if not self.gate.is_ready:
            raise LedgerNotReadyError(
                "Ledger must be loaded before it can be modified"
            )

    def _load_transactions(self, today: date) -> Tuple[Transaction, ...]:
        blob = self.storage.get(TRANSACTIONS_KEY)
        if blob is None:
            return ()

        try:
            records = json.loads(blob)
            if not isinstance(records, list):
                raise ValueError(
                    f"expected a list of transactions, got {type(records).__name__}"
                )
        except ValueError as e:
            logger.error(f"Failed to parse stored transactions, discarding them: {e}")
            self.storage.remove(TRANSACTIONS_KEY)
            return ()

        transactions = []
        for index, record in enumerate(records):
            try:
                transactions.append(_sanitize_record(record, today))
            except ValueError as e:
                logger.warning(f"Skipping stored transaction {index}: {e}")
        return tuple(transactions)

    def _load_target(self) -> Optional[Decimal]:
        raw = self.storage.get(MONTHLY_TARGET_KEY)
        if raw is None:
            return None

        target = parse_decimal(raw)
        if target is None or target <= 0:
            logger.error(f"Failed to parse stored monthly target {raw!r}, discarding it")
            self.storage.remove(MONTHLY_TARGET_KEY)
            return None
        return target

    def _save_transactions(self) -> None:
        self.storage.set(
            TRANSACTIONS_KEY, json.dumps([t.to_dict() for t in self.transactions])
        )

    def _save_target(self) -> None:
        if self.target is None:
            self.storage.remove(MONTHLY_TARGET_KEY)
        else:
            self.storage.set(MONTHLY_TARGET_KEY, str(self.target))
