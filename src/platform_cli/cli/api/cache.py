"""File-backed cache for Platform API responses.

Each successful GET response is stored as one JSON file, named after a hash
of the request signature. The CLI is single-user, so concurrent writers
simply overwrite each other.
"""

from __future__ import annotations

import hashlib
import json
import logging
import time
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .config import CACHE_DIR, CACHE_TTL
from .types import CacheEntry

logger = logging.getLogger(__name__)


def request_signature(
    method: str,
    url: str,
    params: dict[str, Any] | None = None,
    token: str | None = None,
) -> str:
    """Build the cache key for a request.

    The credential token takes part in the key so that responses cached for
    one account are never served to another.
    """
    payload = json.dumps(
        {
            "method": method.upper(),
            "url": url,
            "params": sorted((params or {}).items()),
            "token": token or "",
        },
        sort_keys=True,
        default=str,
    )
    return hashlib.sha256(payload.encode()).hexdigest()


class ResponseCache:
    """Stores decoded JSON response bodies on disk."""

    def __init__(self, directory: Path | None = None, ttl: int | None = None) -> None:
        self.directory = Path(directory) if directory is not None else CACHE_DIR
        self.ttl = CACHE_TTL if ttl is None else ttl

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Any | None:
        """Return the cached body for ``key``, or None on a miss or expiry."""
        path = self._path(key)
        if not path.exists():
            return None
        try:
            entry = CacheEntry.model_validate_json(path.read_text())
        except (ValidationError, ValueError, OSError):
            logger.debug("Discarding unreadable cache entry %s", path.name)
            path.unlink(missing_ok=True)
            return None
        if self.ttl >= 0 and time.time() - entry.stored_at > self.ttl:
            logger.debug("Cache entry expired for %s", entry.url)
            path.unlink(missing_ok=True)
            return None
        logger.debug("Cache hit for %s", entry.url)
        return entry.data

    def set(self, key: str, url: str, data: Any) -> None:
        """Store a response body."""
        self.directory.mkdir(parents=True, exist_ok=True)
        entry = CacheEntry(url=url, stored_at=time.time(), data=data)
        self._path(key).write_text(entry.model_dump_json())

    def invalidate(self, url_prefix: str) -> int:
        """Drop every entry whose URL starts with ``url_prefix``.

        Returns:
            Number of entries removed.
        """
        removed = 0
        for path in self._entries():
            try:
                entry = CacheEntry.model_validate_json(path.read_text())
            except (ValidationError, ValueError, OSError):
                path.unlink(missing_ok=True)
                removed += 1
                continue
            if entry.url.startswith(url_prefix):
                path.unlink(missing_ok=True)
                removed += 1
        return removed

    def clear(self) -> int:
        """Remove all cached entries.

        Returns:
            Number of entries removed.
        """
        removed = 0
        for path in self._entries():
            path.unlink(missing_ok=True)
            removed += 1
        logger.debug("Cleared %d cache entries from %s", removed, self.directory)
        return removed

    def _entries(self) -> list[Path]:
        if not self.directory.exists():
            return []
        return sorted(self.directory.glob("*.json"))
