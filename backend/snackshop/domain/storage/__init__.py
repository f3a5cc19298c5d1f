"""Storage domain module - key-value persistence contract"""

from .ports import KeyValueStorePort, KeyValueStoreError

__all__ = ["KeyValueStorePort", "KeyValueStoreError"]
