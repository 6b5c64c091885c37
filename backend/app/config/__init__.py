"""Configuration package for the portfolio ledger service."""

from .settings import AppSettings, get_settings

__all__ = ["AppSettings", "get_settings"]
