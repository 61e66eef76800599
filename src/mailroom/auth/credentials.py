"""Gmail API service built from a previously authorized OAuth2 token.

The mailroom never runs an interactive consent flow.  The token file must
already exist; an expired token is refreshed and written back.
"""

from __future__ import annotations

from pathlib import Path

import google.auth.transport.requests
import structlog
from google.auth.exceptions import GoogleAuthError
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import Resource, build

from mailroom.domain.errors import CredentialsError

logger = structlog.get_logger()

GMAIL_SEND_SCOPE = "https://www.googleapis.com/auth/gmail.send"


def build_gmail_service(token_path: Path) -> Resource:
    """Return a Gmail API v1 client authorized by the token at ``token_path``.

    Raises:
        CredentialsError: If the token file is missing or unreadable, or it
            cannot be refreshed.
    """
    try:
        creds = Credentials.from_authorized_user_file(str(token_path), [GMAIL_SEND_SCOPE])  # type: ignore[no-untyped-call]
    except (OSError, ValueError) as exc:
        raise CredentialsError(f"Cannot load Gmail token {token_path}: {exc}") from exc

    if not creds.valid:
        if not (creds.expired and creds.refresh_token):
            raise CredentialsError(f"Gmail token {token_path} is invalid and cannot be refreshed")
        try:
            creds.refresh(google.auth.transport.requests.Request())
        except GoogleAuthError as exc:
            raise CredentialsError(f"Failed to refresh Gmail token: {exc}") from exc
        token_path.write_text(creds.to_json())
        logger.info("gmail_token_refreshed", token_path=str(token_path))

    return build("gmail", "v1", credentials=creds, cache_discovery=False)
