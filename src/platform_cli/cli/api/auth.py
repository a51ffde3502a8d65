"""Stored API credentials.

The token lives in ``credentials.json`` under ``PLATFORM_CLI_HOME`` and is
only readable by its owner.
"""

import logging
import os
from datetime import datetime, timezone

from pydantic import ValidationError

from .config import CREDENTIALS_FILE
from .types import Credentials

logger = logging.getLogger(__name__)


def save_credentials(creds: Credentials) -> None:
    """Write credentials, creating the file with owner-only permissions."""
    CREDENTIALS_FILE.parent.mkdir(parents=True, exist_ok=True)
    fd = os.open(CREDENTIALS_FILE, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w") as f:
        f.write(creds.model_dump_json())
    # O_CREAT leaves the mode of an existing file untouched
    CREDENTIALS_FILE.chmod(0o600)


def get_credentials() -> Credentials | None:
    """Load the stored credentials.

    A missing or unreadable file means "not logged in".
    """
    try:
        content = CREDENTIALS_FILE.read_text()
    except FileNotFoundError:
        return None
    try:
        return Credentials.model_validate_json(content)
    except ValidationError as e:
        logger.debug("Ignoring corrupt credentials file %s: %s", CREDENTIALS_FILE, e)
        return None


def clear_credentials() -> None:
    CREDENTIALS_FILE.unlink(missing_ok=True)


def is_expired(creds: Credentials) -> bool:
    """Whether the credentials carry an expiry time that has passed.

    Tokens without an expiry, or with one that cannot be parsed, are
    treated as valid and left for the API to reject.
    """
    if not creds.expires_at:
        return False
    try:
        expires = datetime.fromisoformat(creds.expires_at.replace("Z", "+00:00"))
    except ValueError:
        logger.debug("Unparseable token expiry: %s", creds.expires_at)
        return False
    if expires.tzinfo is None:
        expires = expires.replace(tzinfo=timezone.utc)
    return expires <= datetime.now(timezone.utc)


def is_authenticated() -> bool:
    """Check for stored credentials that have not expired.

    Returns:
        True if a usable token is stored.
    """
    creds = get_credentials()
    return creds is not None and not is_expired(creds)
