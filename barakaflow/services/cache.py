"""
Keyed cache for assistant results and chat histories.

Keys are derived from the fields a cached value depends on, so a change in any
of them is a different key (a miss) rather than a stale hit. Values are kept
JSON-encoded; an entry that no longer decodes is logged and treated as absent.
"""
import hashlib
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable

logger = logging.getLogger(__name__)


def derive_key(namespace: str, *fields: Any) -> str:
    """``namespace:<sha256 of the canonical JSON of fields>``."""
    payload = json.dumps(fields, sort_keys=True, default=str, separators=(",", ":"))
    digest = hashlib.sha256(payload.encode("utf-8")).hexdigest()
    return f"{namespace}:{digest}"


@dataclass
class _Entry:
    raw: str
    expires_at: float | None


class CacheStore:
    def __init__(self, default_ttl: float | None = None, clock: Callable[[], float] = time.monotonic):
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: dict[str, _Entry] = {}

    def get(self, key: str, default: Any = None) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return default
        if entry.expires_at is not None and entry.expires_at <= self._clock():
            del self._entries[key]
            return default
        try:
            return json.loads(entry.raw)
        except (TypeError, ValueError):
            logger.warning("Dropping corrupt cache entry %s", key)
            del self._entries[key]
            return default

    def purge_expired(self) -> int:
        now = self._clock()
        expired = [k for k, e in self._entries.items() if e.expires_at is not None and e.expires_at <= now]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        # Entries under superseded keys are never read again; sweep them here
        self.purge_expired()
        try:
            raw = json.dumps(value)
        except (TypeError, ValueError):
            logger.warning("Value for %s is not cacheable; skipping", key, exc_info=True)
            return
        ttl = self.default_ttl if ttl is None else ttl
        expires_at = self._clock() + ttl if ttl is not None else None
        self._entries[key] = _Entry(raw=raw, expires_at=expires_at)

    def invalidate(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def invalidate_namespace(self, namespace: str) -> int:
        prefix = f"{namespace}:"
        stale = [k for k in self._entries if k.startswith(prefix)]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: str) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    def __len__(self) -> int:
        return len(self._entries)


_MISSING = object()
