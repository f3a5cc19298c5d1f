"""Key-Value Store Port - Domain interface for the persistent shop store.

Adapters must implement this interface to provide SQL, in-memory or other
key-value backends. Values are JSON-compatible documents (dicts, lists,
strings, numbers).

Architecture: Hexagonal - Port interface in domain layer
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class KeyValueStorePort(ABC):
    """Port interface for a namespaced key-value store.

    Key Design Principles:
    - Keys are plain strings; callers own the namespace (``v1:product:<id>``)
    - ``set`` overwrites, ``delete`` of a missing key is a no-op
    - No transactions across keys: concurrent read-modify-write cycles on the
      same key are last-write-wins

    Example Usage:
        store = SqlKeyValueStore(SessionLocal)
        store.set("v1:products:all", ["snack_1", "snack_2"])
        ids = store.get("v1:products:all")  # ["snack_1", "snack_2"]
    """

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the value stored under key, or None if absent."""
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store value under key, replacing any previous value."""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key if present."""
        pass

    @abstractmethod
    def keys(self, prefix: str = "") -> list[str]:
        """List stored keys, optionally restricted to a prefix."""
        pass


class KeyValueStoreError(Exception):
    """Backend failure while reading or writing the store"""
    pass
