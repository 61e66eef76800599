"""Tests for centralized Settings, credential validation, and get_settings cache."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from mailroom.config import Settings, get_settings, validate_credentials

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _clear_settings_cache() -> None:
    """Clear get_settings lru_cache before each test."""
    get_settings.cache_clear()


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

class TestSettings:
    """Verify Settings defaults and environment overrides."""

    def test_settings_defaults(self) -> None:
        s = Settings(_env_file=None)  # type: ignore[call-arg]

        assert s.production is False
        assert s.db_path == Path("data/mailroom.db")
        assert s.list_page_size == 100
        assert s.gmail_token_path == Path("token.json")
        assert s.from_email == ""

    def test_settings_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PRODUCTION", "true")
        monkeypatch.setenv("DB_PATH", "/tmp/mail.db")
        monkeypatch.setenv("LIST_PAGE_SIZE", "25")
        monkeypatch.setenv("FROM_EMAIL", "me@example.com")

        s = Settings(_env_file=None)  # type: ignore[call-arg]

        assert s.production is True
        assert s.db_path == Path("/tmp/mail.db")
        assert s.list_page_size == 25
        assert s.from_email == "me@example.com"

    def test_rejects_non_positive_page_size(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, list_page_size=0)  # type: ignore[call-arg]


# ---------------------------------------------------------------------------
# Credential validation
# ---------------------------------------------------------------------------

class TestValidateCredentials:
    """Verify validate_credentials behaviour in production and dev modes."""

    def test_production_missing_exits(self, tmp_path: Path) -> None:
        settings = Settings(
            _env_file=None,  # type: ignore[call-arg]
            production=True,
            gmail_token_path=tmp_path / "nonexistent_token.json",
            from_email="",
        )

        with pytest.raises(SystemExit) as exc_info:
            validate_credentials(settings)

        assert exc_info.value.code == 1

    def test_production_valid(self, tmp_path: Path) -> None:
        token_file = tmp_path / "token.json"
        token_file.write_text("{}")

        settings = Settings(
            _env_file=None,  # type: ignore[call-arg]
            production=True,
            gmail_token_path=token_file,
            from_email="me@example.com",
        )

        validate_credentials(settings)

    def test_dev_mode_does_not_exit(self, tmp_path: Path) -> None:
        settings = Settings(
            _env_file=None,  # type: ignore[call-arg]
            production=False,
            gmail_token_path=tmp_path / "missing_token.json",
        )

        validate_credentials(settings)


class TestGetSettingsCached:
    """Verify lru_cache on get_settings."""

    def test_get_settings_cached(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("PRODUCTION", raising=False)

        assert get_settings() is get_settings()
