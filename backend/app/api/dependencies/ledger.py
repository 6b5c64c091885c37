"""Ledger service dependency for API routes."""

from __future__ import annotations

from functools import lru_cache

from app.config import get_settings
from portfolio_ledger.service import LedgerService
from portfolio_ledger.storage import SqlAlchemyBlobStore


@lru_cache(maxsize=1)
def _service() -> LedgerService:
    settings = get_settings()
    store = SqlAlchemyBlobStore(settings.database_url)
    return LedgerService(
        store,
        storage_key=settings.storage_key,
        export_prefix=settings.export_filename_prefix,
    )


def get_ledger_service() -> LedgerService:
    """Return the process-wide ledger service; tests override this dependency."""

    return _service()


__all__ = ["get_ledger_service"]
