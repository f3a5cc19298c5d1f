"""SQL Key-Value Store - Implementation of KeyValueStorePort using SQLAlchemy.

Stores every key as one row of the ``kv_entry`` table with a JSON value.
Works on PostgreSQL (JSONB) and SQLite (JSON).

Architecture: Hexagonal - Adapter implementation in infrastructure layer
"""

import logging
from contextlib import contextmanager
from typing import Any, Generator, Optional

from sqlalchemy import select, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ...domain.storage.ports import KeyValueStorePort, KeyValueStoreError
from ...models.kv_entry import KeyValueEntry

logger = logging.getLogger(__name__)


class SqlKeyValueStore(KeyValueStorePort):
    """SQLAlchemy-backed key-value store.

    Each operation runs in its own short session so the store can be shared
    by the whole application without holding a connection.

    Example:
        store = SqlKeyValueStore(SessionLocal)
        store.set("v1:product:snack_1", {"id": "snack_1", ...})
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    @contextmanager
    def _session(self) -> Generator[Session, None, None]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Key-value store error: {e}", exc_info=True)
            raise KeyValueStoreError(str(e)) from e
        finally:
            session.close()

    def get(self, key: str) -> Optional[Any]:
        with self._session() as session:
            entry = session.get(KeyValueEntry, key)
            return entry.value if entry is not None else None

    def set(self, key: str, value: Any) -> None:
        with self._session() as session:
            entry = session.get(KeyValueEntry, key)
            if entry is None:
                session.add(KeyValueEntry(key=key, value=value))
            else:
                entry.value = value

    def delete(self, key: str) -> None:
        with self._session() as session:
            session.execute(delete(KeyValueEntry).where(KeyValueEntry.key == key))

    def keys(self, prefix: str = "") -> list[str]:
        with self._session() as session:
            stmt = select(KeyValueEntry.key).order_by(KeyValueEntry.key)
            if prefix:
                stmt = stmt.where(KeyValueEntry.key.startswith(prefix, autoescape=True))
            return list(session.execute(stmt).scalars())
