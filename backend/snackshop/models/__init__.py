"""SQLAlchemy Models for SnackShop"""

from .base import Base, PortableJSONB
from .kv_entry import KeyValueEntry

__all__ = [
    "Base",
    "PortableJSONB",
    "KeyValueEntry",
]
