"""Transaction store: CRUD over a single serialized collection.

The whole collection lives as one JSON array under a fixed key in a
key-value backend. Every operation reads the collection in full, changes
it, and writes it back in full. Storage failures are logged and degrade to
an empty collection or a skipped write; they never propagate to callers.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from finflow.domain.models import Amount, TransactionId, TransactionType
from finflow.domain.transactions import Transaction, TransactionFields, attribute_name
from finflow.store.backends import StorageBackend, StorageError, StorageUnavailableError

logger = logging.getLogger(__name__)

STORAGE_KEY = "finance-tracker-transactions"

# Fields a caller may change through update()
EDITABLE_FIELDS = frozenset({"amount", "date", "description", "type"})
# Fields update() silently leaves alone
PROTECTED_FIELDS = frozenset({"id", "created_at", "updated_at"})


def utc_now() -> datetime:
    """Current time in UTC."""
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """Format a datetime as ISO 8601 UTC with milliseconds (e.g. 2025-01-31T09:30:00.000Z)."""
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc).replace(tzinfo=None)
    return moment.isoformat(timespec="milliseconds") + "Z"


def new_transaction_id() -> TransactionId:
    """Generate a random unique transaction id."""
    return TransactionId(uuid4().hex)


def _coerce(name: str, value: Any) -> Any:
    if name == "type":
        return TransactionType(value)
    if name == "amount":
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise ValueError(f"Invalid amount: {value!r}")
        return Amount(value)
    return str(value)


class TransactionStore:
    """Durable list of transactions, newest created first.

    Args:
        backend: Persistence backend holding the serialized collection.
        key: Key the collection is stored under.
        clock: Returns the current time; used for created/updated stamps.
        id_factory: Returns a fresh unique id for each created transaction.
    """

    def __init__(
        self,
        backend: StorageBackend,
        key: str = STORAGE_KEY,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = new_transaction_id,
    ) -> None:
        self.backend = backend
        self.key = key
        self.clock = clock
        self.id_factory = id_factory

    def _load(self) -> tuple[list[Transaction], list[Any], bool]:
        """Read the stored collection.

        Returns:
            Tuple of (transactions, skipped, writable) where:
            - transactions: Records that parsed, in stored order
            - skipped: Raw items that are not valid records, kept so a
              later write does not drop them
            - writable: False if the read failed in a way that makes
              rewriting the collection unsafe
        """
        try:
            raw = self.backend.get(self.key)
        except StorageUnavailableError as e:
            logger.warning("Storage unavailable, treating as empty: %s", e)
            return [], [], True
        except StorageError:
            logger.exception("Error loading transactions")
            return [], [], False

        if not raw:
            return [], [], True

        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.warning("Stored transactions are not valid JSON, treating as empty: %s", e)
            return [], [], True
        if not isinstance(data, list):
            logger.warning("Stored transactions are not a list, treating as empty")
            return [], [], True

        transactions: list[Transaction] = []
        skipped: list[Any] = []
        for position, item in enumerate(data):
            try:
                transactions.append(Transaction.from_dict(item))
            except (ValueError, KeyError, TypeError) as e:
                logger.warning("Skipping malformed transaction at position %d: %s", position, e)
                skipped.append(item)
        return transactions, skipped, True

    def list(self) -> list[Transaction]:
        """Return all transactions in stored order.

        Returns an empty list if storage is unavailable or the stored value
        cannot be parsed. Individual records that are malformed are left
        out.
        """
        transactions, _, _ = self._load()
        return transactions

    def _save(self, transactions: list[Transaction], skipped: list[Any], writable: bool = True) -> bool:
        """Write the full collection. Returns False if the write failed.

        Skipped raw items are written back after the valid records.
        """
        if not writable:
            logger.warning("Stored transactions could not be read, changes not saved")
            return False
        payload = json.dumps([t.to_dict() for t in transactions] + skipped)
        try:
            self.backend.set(self.key, payload)
        except StorageUnavailableError as e:
            logger.warning("Storage unavailable, changes not saved: %s", e)
            return False
        except StorageError:
            logger.exception("Error saving transactions")
            return False
        return True

    def create(self, new_fields: TransactionFields | Mapping[str, Any]) -> Transaction:
        """Create a transaction and store it first in the collection.

        Args:
            new_fields: amount, date, description and type. The sign of
                amount is stored as given.

        Returns:
            The new transaction with generated id and timestamps.
        """
        now = format_timestamp(self.clock())
        transaction = Transaction(
            id=TransactionId(self.id_factory()),
            amount=_coerce("amount", new_fields["amount"]),
            date=str(new_fields["date"]),
            description=str(new_fields["description"]),
            type=TransactionType(new_fields["type"]),
            created_at=now,
            updated_at=now,
        )

        transactions, skipped, writable = self._load()
        transactions.insert(0, transaction)
        self._save(transactions, skipped, writable)

        logger.debug("Created transaction %s", transaction.id)
        return transaction

    def update(self, transaction_id: str, partial: Mapping[str, Any]) -> Transaction | None:
        """Merge partial fields into an existing transaction.

        Keys may be attribute names or persisted keys. ``id`` and the
        timestamps are ignored; ``updated_at`` is always refreshed.

        Args:
            transaction_id: Id of the transaction to change.
            partial: Fields to overwrite.

        Returns:
            The updated transaction, or None if no transaction has that id.

        Raises:
            ValueError: If partial names an unknown field or holds an
                invalid amount or type.
        """
        changes: dict[str, Any] = {}
        for key, value in partial.items():
            name = attribute_name(key)
            if name in PROTECTED_FIELDS:
                continue
            if name not in EDITABLE_FIELDS:
                raise ValueError(f"Unknown transaction field: {key}")
            changes[name] = _coerce(name, value)

        transactions, skipped, writable = self._load()
        index = next((i for i, t in enumerate(transactions) if t.id == transaction_id), None)
        if index is None:
            return None

        updated = replace(transactions[index], **changes, updated_at=format_timestamp(self.clock()))
        transactions[index] = updated
        self._save(transactions, skipped, writable)

        logger.debug("Updated transaction %s (%s)", transaction_id, ", ".join(sorted(changes)) or "no fields")
        return updated

    def delete(self, transaction_id: str) -> bool:
        """Remove a transaction.

        Returns:
            True if a transaction was removed, False if none had that id.
        """
        transactions, skipped, writable = self._load()
        remaining = [t for t in transactions if t.id != transaction_id]

        if len(remaining) == len(transactions):
            return False

        self._save(remaining, skipped, writable)
        logger.debug("Deleted transaction %s", transaction_id)
        return True

    def get(self, transaction_id: str) -> Transaction | None:
        """Find a transaction by id."""
        return next((t for t in self.list() if t.id == transaction_id), None)
