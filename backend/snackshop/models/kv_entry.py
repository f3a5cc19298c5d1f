"""KeyValueEntry SQLAlchemy model"""

from sqlalchemy import Column, Text, DateTime, func

from .base import Base, PortableJSONB


class KeyValueEntry(Base):
    """One record of the namespaced key-value store.

    Keys carry their own version namespace (e.g. ``v1:product:<id>``), so a
    namespace bump simply stops reading the old rows.

    Attributes:
        key: Namespaced storage key (primary key)
        value: JSON document stored under the key
        updated_at: Last write timestamp
    """
    __tablename__ = "kv_entry"

    key = Column(Text, primary_key=True)
    value = Column(PortableJSONB, nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<KeyValueEntry key={self.key!r}>"
