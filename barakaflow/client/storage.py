import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

TOKEN_KEY = "auth_token"
USER_KEY = "current_user"
INVITED_MEMBERS_KEY = "invited_members"


class LocalStore:
    """
    Small key/value store persisted as one JSON file.

    A missing, unreadable or corrupt file reads as empty; a failed write is
    logged and the in-memory value is kept for the rest of the session. A value
    that cannot be encoded as JSON is logged and not stored.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._data: dict[str, Any] = self._load()

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Could not read %s (%s); starting empty", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring %s: expected a JSON object", self.path)
            return {}
        return data

    def _flush(self, data: dict[str, Any]) -> bool:
        try:
            raw = json.dumps(data, indent=2)
        except (TypeError, ValueError) as exc:
            logger.warning("Not storing to %s: %s", self.path, exc)
            return False
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(raw, encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not write %s: %s", self.path, exc)
        return True

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        # Values that cannot be encoded are dropped, leaving the store as it was
        data = {**self._data, key: value}
        if self._flush(data):
            self._data = data

    def remove(self, key: str) -> None:
        if key in self._data:
            data = {k: v for k, v in self._data.items() if k != key}
            self._flush(data)
            self._data = data
