"""In-memory Key-Value Store - dict-backed KeyValueStorePort.

Used for KV_BACKEND=memory and in tests. Values are deep-copied on the way
in and out so callers cannot mutate stored documents by accident, matching
the copy semantics of a real backend.
"""

import copy
from typing import Any, Optional

from ...domain.storage.ports import KeyValueStorePort


class InMemoryKeyValueStore(KeyValueStorePort):
    """Process-local key-value store."""

    def __init__(self):
        self._data: dict[str, Any] = {}

    def get(self, key: str) -> Optional[Any]:
        if key not in self._data:
            return None
        return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self, prefix: str = "") -> list[str]:
        return sorted(k for k in self._data if k.startswith(prefix))
