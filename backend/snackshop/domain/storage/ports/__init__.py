"""Storage Port Interfaces"""

from .key_value_store_port import KeyValueStorePort, KeyValueStoreError

__all__ = ["KeyValueStorePort", "KeyValueStoreError"]
