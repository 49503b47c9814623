"""Google OAuth helpers."""

import logging
import os
import time
from typing import Optional

from google.auth.exceptions import RefreshError, TransportError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from calmirror.config import Settings, get_settings

logger = logging.getLogger(__name__)

# Required scopes
CALENDAR_SCOPES = [
    "https://www.googleapis.com/auth/calendar",
]


class CredentialsError(RuntimeError):
    """No usable OAuth credentials are available."""


def load_credentials(token_file: str) -> Optional[Credentials]:
    """Load stored credentials, or None if the token file is missing or unreadable."""
    if not token_file or not os.path.exists(token_file):
        return None
    try:
        return Credentials.from_authorized_user_file(token_file, CALENDAR_SCOPES)
    except (ValueError, OSError) as e:
        logger.warning(f"Could not read token file {token_file}: {e}")
        return None


def save_credentials(credentials: Credentials, token_file: str) -> None:
    with open(token_file, "w", encoding="utf-8") as f:
        f.write(credentials.to_json())


def refresh_credentials(credentials: Credentials, max_retries: int = 3) -> Credentials:
    """Refresh an access token, retrying transient network errors."""
    for attempt in range(max_retries):
        try:
            credentials.refresh(Request())
            return credentials
        except RefreshError as e:
            # Permanent errors (invalid_grant, revoked consent) - don't retry
            logger.error(f"Token refresh failed with permanent error: {e}")
            raise CredentialsError(
                f"Token refresh failed: {e}. Run 'calendar-mirror authorize' again."
            ) from e
        except TransportError as e:
            if attempt < max_retries - 1:
                wait_time = 2 ** attempt  # Exponential backoff: 1s, 2s, 4s
                logger.warning(f"Token refresh attempt {attempt + 1} failed, retrying in {wait_time}s: {e}")
                time.sleep(wait_time)
            else:
                logger.error(f"Failed to refresh token after {max_retries} attempts: {e}")
                raise
    return credentials


def get_valid_credentials(settings: Optional[Settings] = None) -> Credentials:
    """Get valid credentials from the token file, refreshing if needed."""
    settings = settings or get_settings()
    credentials = load_credentials(settings.google_token_file)

    if not credentials:
        raise CredentialsError(
            f"No OAuth token found at {settings.google_token_file}. "
            "Run 'calendar-mirror authorize' first."
        )

    if credentials.valid:
        return credentials

    if not credentials.refresh_token:
        raise CredentialsError("Stored OAuth token has expired and has no refresh token")

    logger.info("Refreshing expired access token")
    credentials = refresh_credentials(credentials)
    save_credentials(credentials, settings.google_token_file)
    return credentials


def authorize(settings: Optional[Settings] = None, port: int = 0) -> Credentials:
    """Run the installed-app consent flow and store the resulting token."""
    settings = settings or get_settings()
    secrets_file = settings.google_client_secrets_file

    if not os.path.exists(secrets_file):
        raise CredentialsError(
            f"OAuth client secrets file not found at {secrets_file}. "
            "Download it from the Google Cloud Console."
        )

    flow = InstalledAppFlow.from_client_secrets_file(secrets_file, CALENDAR_SCOPES)
    credentials = flow.run_local_server(port=port)
    save_credentials(credentials, settings.google_token_file)
    logger.info(f"Stored OAuth token at {settings.google_token_file}")
    return credentials
