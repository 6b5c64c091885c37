"""Instrument identifier helpers."""

from __future__ import annotations


def normalize_symbol(symbol: str | None) -> str:
    """Return the canonical (trimmed, upper-cased) form of ``symbol``."""

    return str(symbol or "").strip().upper()


__all__ = ["normalize_symbol"]
