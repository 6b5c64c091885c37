"""Persistence of the whole ledger as a single blob in a key-value store."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Dict, Optional, Protocol

from pydantic import TypeAdapter, ValidationError
from sqlalchemy import DateTime, String, Text, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, sessionmaker

from .models import Ledger

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "portfolio-app-data-v2"

_LEDGER_ADAPTER: TypeAdapter[Ledger] = TypeAdapter(Ledger)


class BlobStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def put(self, key: str, payload: str) -> None:
        ...


class MemoryBlobStore:
    """Dictionary backed store, mainly for tests."""

    def __init__(self, blobs: Dict[str, str] | None = None) -> None:
        self.blobs: Dict[str, str] = dict(blobs or {})

    def get(self, key: str) -> Optional[str]:
        return self.blobs.get(key)

    def put(self, key: str, payload: str) -> None:
        self.blobs[key] = payload


class Base(DeclarativeBase):
    """Declarative base for the blob table."""

    pass


class LedgerBlob(Base):
    __tablename__ = "ledger_blob"

    key: Mapped[str] = mapped_column(String(128), primary_key=True)
    payload: Mapped[str] = mapped_column(Text)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )


class SqlAlchemyBlobStore:
    """Store blobs in a single SQL table (SQLite by default)."""

    def __init__(self, url: str | None = None, *, engine: Engine | None = None) -> None:
        if engine is None:
            if url is None:
                raise ValueError("SqlAlchemyBlobStore needs a database url or an engine")
            engine = create_engine(url, future=True, echo=False)
        self._engine = engine
        self._session_factory = sessionmaker(bind=engine, expire_on_commit=False)
        try:
            Base.metadata.create_all(engine)
        except SQLAlchemyError:
            logger.exception("Failed to initialise ledger blob table")
            raise

    @property
    def engine(self) -> Engine:
        return self._engine

    def get(self, key: str) -> Optional[str]:
        with self._session_factory() as session:
            row = session.get(LedgerBlob, key)
            return row.payload if row is not None else None

    def put(self, key: str, payload: str) -> None:
        with self._session_factory.begin() as session:
            row = session.get(LedgerBlob, key)
            if row is None:
                session.add(LedgerBlob(key=key, payload=payload))
            else:
                row.payload = payload


def dump_ledger(ledger: Ledger) -> str:
    return _LEDGER_ADAPTER.dump_json(ledger).decode("utf-8")


def parse_ledger(payload: str) -> Ledger:
    return _LEDGER_ADAPTER.validate_json(payload)


def load_ledger(store: BlobStore, key: str = DEFAULT_STORAGE_KEY) -> Ledger:
    """Load the ledger, substituting an empty one for a missing or corrupt blob."""

    payload = store.get(key)
    if not payload:
        return Ledger()
    try:
        return parse_ledger(payload)
    except (ValidationError, ValueError) as exc:
        logger.warning("Stored ledger %r is unreadable, starting empty: %s", key, exc)
        return Ledger()


def save_ledger(store: BlobStore, ledger: Ledger, key: str = DEFAULT_STORAGE_KEY) -> None:
    """Overwrite the stored blob with the full ledger."""

    store.put(key, dump_ledger(ledger))


__all__ = [
    "DEFAULT_STORAGE_KEY",
    "BlobStore",
    "MemoryBlobStore",
    "SqlAlchemyBlobStore",
    "LedgerBlob",
    "dump_ledger",
    "parse_ledger",
    "load_ledger",
    "save_ledger",
]
