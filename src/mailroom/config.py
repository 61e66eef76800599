"""Centralized, typed configuration using pydantic-settings.

Provides a single ``Settings`` class backed by ``.env`` file and environment
variables, a cached ``get_settings()`` accessor, and a
``validate_credentials()`` startup gate that enforces the Gmail token's
presence in production mode before anything is sent.

IMPORTANT: This module has ZERO imports from the ``mailroom`` package to
prevent circular imports.  Only stdlib, pydantic, pydantic_settings, and
structlog are used.
"""

from __future__ import annotations

import sys
from functools import lru_cache
from pathlib import Path

import structlog
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = structlog.get_logger()


class Settings(BaseSettings):
    """Application settings loaded from environment variables and ``.env`` file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # -- General ---------------------------------------------------------------
    production: bool = False

    # -- Store -----------------------------------------------------------------
    db_path: Path = Path("data/mailroom.db")
    list_page_size: int = Field(default=100, gt=0)

    # -- Gmail -----------------------------------------------------------------
    gmail_token_path: Path = Path("token.json")
    from_email: str = ""


@lru_cache
def get_settings() -> Settings:
    """Return a cached ``Settings`` instance.

    Call ``get_settings.cache_clear()`` in tests to reset.

    Returns:
        The application ``Settings``.
    """
    try:
        return Settings()
    except ValidationError as exc:
        logger.error("settings_validation_failed", errors=exc.errors())
        sys.exit(1)


def validate_credentials(settings: Settings) -> None:
    """Enforce that sending is possible before the first send.

    In **production** mode a missing Gmail token or sender address aborts
    the process.  In **development** mode each problem is logged as a
    warning and execution continues.

    Args:
        settings: The loaded application settings.
    """
    errors: list[str] = []

    if not settings.gmail_token_path.exists():
        errors.append(f"Gmail token file not found: {settings.gmail_token_path}")

    if not settings.from_email:
        errors.append("FROM_EMAIL is empty or not set")

    if not errors:
        logger.info("credential_validation_passed")
        return

    if settings.production:
        for err in errors:
            logger.error("credential_missing", detail=err)
        print("\n=== STARTUP FAILED ===", file=sys.stderr)
        print("Missing required credentials for production mode:", file=sys.stderr)
        for err in errors:
            print(f"  - {err}", file=sys.stderr)
        print("======================\n", file=sys.stderr)
        sys.exit(1)
    else:
        for err in errors:
            logger.warning("credential_missing_dev", detail=err)
