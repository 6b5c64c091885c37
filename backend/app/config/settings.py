"""Application configuration and environment helpers."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import make_url

from portfolio_ledger.csv_codec import EXPORT_FILENAME_PREFIX
from portfolio_ledger.storage import DEFAULT_STORAGE_KEY


class AppSettings(BaseSettings):
    """Configuration options for the portfolio ledger service."""

    model_config = SettingsConfigDict(env_prefix="LEDGER_", env_file=".env", env_file_encoding="utf-8")

    app_name: str = Field(default="Portfolio Ledger")
    database_url: str = Field(
        default="sqlite:///./portfolio_ledger.db",
        description="SQLAlchemy URL of the database holding the ledger blob.",
    )
    storage_key: str = Field(default=DEFAULT_STORAGE_KEY, description="Key of the persisted ledger blob.")
    export_filename_prefix: str = Field(default=EXPORT_FILENAME_PREFIX)
    log_level: str = Field(default="INFO")
    cors_origins: list[str] = Field(
        default_factory=lambda: [
            "http://localhost:4200",
            "http://127.0.0.1:4200",
        ]
    )

    def dict_for_logging(self) -> dict[str, Any]:
        """Return a sanitized dict for logging purposes."""

        data = self.model_dump()
        data["database_url"] = make_url(self.database_url).render_as_string(hide_password=True)
        return data


@lru_cache(maxsize=1)
def get_settings(**overrides: Any) -> AppSettings:
    """Return cached application settings with optional overrides."""

    if overrides:
        return AppSettings(**overrides)
    return AppSettings()


__all__ = ["AppSettings", "get_settings"]
