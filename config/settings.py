"""Pydantic BaseSettings — secrets and tunables, loaded once and injected."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.errors import ConfigurationError


class Settings(BaseSettings):
    """Central configuration loaded from env / .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        frozen=True,
    )

    # ── Application ─────────────────────────────────────────────
    APP_ENV: Literal["dev", "prod"] = "dev"
    APP_NAME: str = "limit-order-lab"
    LOG_LEVEL: str = "INFO"

    # ── Credentials (never commit real values) ──────────────────
    AUTH_KEY: str = ""  # Bearer token for the order-book service
    PRIVATE_KEY: str = ""  # Maker key, hex, 0x prefix optional

    # ── Network / API ───────────────────────────────────────────
    ORDERBOOK_BASE_URL: str = "https://api.1inch.dev/orderbook/v4.0"
    HTTP_TIMEOUT_SECONDS: float = Field(default=15.0, gt=0)
    RPC_TIMEOUT_SECONDS: float = Field(default=30.0, gt=0)
    TX_CONFIRMATION_TIMEOUT_SECONDS: float = Field(default=300.0, gt=0)

    # ── Generated artifacts ─────────────────────────────────────
    REMEDIATION_DIR: Path = Path(".")

    def require(self, *names: str) -> Settings:
        """Return ``self`` if every named field is non-empty.

        Raises
        ------
        ConfigurationError
            Listing every missing name, so the operator fixes them in one go.
        """
        missing = [name for name in names if not str(getattr(self, name, "") or "").strip()]
        if missing:
            raise ConfigurationError(
                f"Missing required setting(s): {', '.join(missing)}",
                missing=missing,
            )
        return self


def load_settings(*required: str) -> Settings:
    """Build settings from the environment and validate required secrets."""
    return Settings().require(*required)
