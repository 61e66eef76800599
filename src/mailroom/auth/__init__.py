"""Gmail OAuth2 credential management."""

from mailroom.auth.credentials import build_gmail_service

__all__ = [
    "build_gmail_service",
]
