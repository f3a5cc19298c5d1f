"""Key-value storage adapters"""

from .sql_key_value_store import SqlKeyValueStore
from .memory_key_value_store import InMemoryKeyValueStore

__all__ = ["SqlKeyValueStore", "InMemoryKeyValueStore"]
