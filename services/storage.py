"""Key-value storage adapters for persisted string blobs."""

from abc import ABC, abstractmethod
from typing import Dict, Optional


class KeyValueStore(ABC):
    """Synchronous get/set/remove of string blobs keyed by name.

    Services receive a store instance instead of touching storage directly,
    so tests can swap in the in-memory implementation.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the blob stored under key, or None if absent."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous blob."""
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete the blob stored under key. Missing keys are ignored."""
        pass


class SqliteKeyValueStore(KeyValueStore):
    """Key-value store backed by the key_value_store table."""

    def __init__(self, db_manager):
        """Initialize the store.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def get(self, key: str) -> Optional[str]:
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "SELECT value FROM key_value_store WHERE key = ?",
                (key,),
            )
            row = cursor.fetchone()

            if row:
                return row[0]
            return None

    def set(self, key: str, value: str) -> None:
        with self.db_manager.connect() as conn:
            conn.execute(
                """
                INSERT INTO key_value_store (key, value, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, value),
            )
            conn.commit()

    def remove(self, key: str) -> None:
        with self.db_manager.connect() as conn:
            conn.execute("DELETE FROM key_value_store WHERE key = ?", (key,))
            conn.commit()


class MemoryKeyValueStore(KeyValueStore):
    """Dictionary-backed store, used in tests and for throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)
