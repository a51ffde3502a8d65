"""Hosting platform API client, credentials and response cache."""

from .auth import (
    clear_credentials,
    get_credentials,
    is_authenticated,
    is_expired,
    save_credentials,
)
from .cache import ResponseCache, request_signature
from .client import PlatformAPIError, PlatformClient
from .config import CACHE_DIR, CREDENTIALS_FILE, PLATFORM_API_URL
from .types import Account, CacheEntry, Credentials, Environment, Integration, Project

__all__ = [
    # Auth
    "save_credentials",
    "get_credentials",
    "clear_credentials",
    "is_authenticated",
    "is_expired",
    # Cache
    "ResponseCache",
    "request_signature",
    # Client
    "PlatformClient",
    "PlatformAPIError",
    # Config
    "PLATFORM_API_URL",
    "CREDENTIALS_FILE",
    "CACHE_DIR",
    # Types
    "Account",
    "CacheEntry",
    "Credentials",
    "Environment",
    "Integration",
    "Project",
]
