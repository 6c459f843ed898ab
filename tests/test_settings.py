"""Tests for config/settings.py and core/logger.py."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from config.settings import Settings, load_settings
from core.errors import ConfigurationError
from core.logger import redact_url


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Run from an empty directory with no credentials in the environment."""
    monkeypatch.chdir(tmp_path)
    for name in ("AUTH_KEY", "PRIVATE_KEY", "APP_ENV", "LOG_LEVEL", "HTTP_TIMEOUT_SECONDS"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


class TestSettings:

    def test_defaults(self, clean_env: Path) -> None:
        s = Settings()
        assert s.APP_ENV == "dev"
        assert s.AUTH_KEY == ""
        assert s.ORDERBOOK_BASE_URL == "https://api.1inch.dev/orderbook/v4.0"
        assert s.HTTP_TIMEOUT_SECONDS == 15.0
        assert s.TX_CONFIRMATION_TIMEOUT_SECONDS == 300.0

    def test_reads_environment(self, clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AUTH_KEY", "api-key")
        monkeypatch.setenv("HTTP_TIMEOUT_SECONDS", "5")
        s = Settings()
        assert s.AUTH_KEY == "api-key"
        assert s.HTTP_TIMEOUT_SECONDS == 5.0

    def test_reads_dotenv(self, clean_env: Path) -> None:
        (clean_env / ".env").write_text("AUTH_KEY=from-file\nPRIVATE_KEY=0xabc\n")
        s = Settings()
        assert s.AUTH_KEY == "from-file"
        assert s.PRIVATE_KEY == "0xabc"

    def test_invalid_env_rejected(self, clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_ENV", "staging")
        with pytest.raises(ValidationError):
            Settings()

    def test_non_positive_timeout_rejected(self, clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HTTP_TIMEOUT_SECONDS", "0")
        with pytest.raises(ValidationError):
            Settings()

    def test_frozen(self, clean_env: Path) -> None:
        s = Settings()
        with pytest.raises(ValidationError):
            s.AUTH_KEY = "changed"  # type: ignore[misc]


class TestRequire:

    def test_lists_every_missing_name(self, clean_env: Path) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            load_settings("AUTH_KEY", "PRIVATE_KEY")
        assert exc_info.value.missing == ["AUTH_KEY", "PRIVATE_KEY"]
        assert "AUTH_KEY" in str(exc_info.value)

    def test_blank_counts_as_missing(self, clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AUTH_KEY", "   ")
        monkeypatch.setenv("PRIVATE_KEY", "0xabc")
        with pytest.raises(ConfigurationError) as exc_info:
            load_settings("AUTH_KEY", "PRIVATE_KEY")
        assert exc_info.value.missing == ["AUTH_KEY"]

    def test_present(self, clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AUTH_KEY", "api-key")
        s = load_settings("AUTH_KEY")
        assert s.AUTH_KEY == "api-key"

    def test_nothing_required(self, clean_env: Path) -> None:
        assert isinstance(load_settings(), Settings)


class TestRedactUrl:

    def test_strips_path_and_key(self) -> None:
        url = "https://polygon-mainnet.g.alchemy.com/v2/SECRET"
        assert redact_url(url) == "https://polygon-mainnet.g.alchemy.com"

    def test_no_host_truncates(self) -> None:
        assert redact_url("a" * 40) == "a" * 30 + "..."
