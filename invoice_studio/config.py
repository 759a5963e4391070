"""Settings and logging setup."""
from __future__ import annotations

import logging

from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class Settings(BaseSettings):
    default_currency: str = "USD"
    default_locale: str = "en-US"
    date_format: str = "numeric"
    default_payment_terms: str = "NET_14"
    default_due_days: int = 14
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="INVOICE_STUDIO_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @classmethod
    def load(cls) -> "Settings":
        return cls()


def configure_logging(log_level: str) -> None:
    """Configure application-wide logging."""
    level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(level=level, format=LOG_FORMAT)
