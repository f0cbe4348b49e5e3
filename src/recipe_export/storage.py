"""Key-value storage backends for saved recipes."""

import logging
import re
from pathlib import Path

from .utils import atomic_write_text

logger = logging.getLogger(__name__)

_SAFE_KEY_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]{0,127}$")


def _validate_key(key: str) -> str:
    if not key or not _SAFE_KEY_RE.fullmatch(key):
        raise ValueError(f"Invalid storage key {key!r}, expected {_SAFE_KEY_RE.pattern}")
    return key


class MemoryStorage:
    """Dict-backed storage, mostly for tests and one-shot sessions."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._items)


class FileStorage:
    """Stores each key as a UTF-8 file in a directory."""

    def __init__(self, directory: str | Path):
        """Initialize file storage.

        Args:
            directory: Directory holding one file per key. Created if missing.
        """
        self.directory = Path(directory).expanduser()
        self.directory.mkdir(parents=True, exist_ok=True)
        logger.debug(f"Storage directory: {self.directory}")

    def _key_path(self, key: str) -> Path:
        return self.directory / _validate_key(key)

    def get_item(self, key: str) -> str | None:
        path = self._key_path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        atomic_write_text(self._key_path(key), value)
        logger.debug(f"Wrote storage key {key} ({len(value)} chars)")

    def remove_item(self, key: str) -> None:
        self._key_path(key).unlink(missing_ok=True)

    def keys(self) -> list[str]:
        return sorted(p.name for p in self.directory.iterdir() if p.is_file() and _SAFE_KEY_RE.fullmatch(p.name))
