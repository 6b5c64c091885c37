"""Error types raised by the portfolio ledger."""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for ledger errors."""


class InvalidInput(LedgerError, ValueError):
    """Raised when user supplied data cannot enter the ledger."""

    def __init__(self, message: str, *, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or [message]


class PriceLookupError(LedgerError, RuntimeError):
    """Raised when a price provider cannot return a current price."""


__all__ = ["LedgerError", "InvalidInput", "PriceLookupError"]
