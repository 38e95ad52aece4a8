"""Local persistent key-value store abstractions."""

import json
import logging
import os
import tempfile
from contextlib import suppress
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

_logger = logging.getLogger(__name__)


class LocalStore(Protocol):
    """Store interface for JSON-serializable map values."""

    def get(self, key: str) -> dict[str, object]:
        """Return the stored value, or an empty dict if missing or unreadable."""

    def set(self, key: str, value: dict[str, object]) -> None:
        """Replace the stored value; failures are logged, not raised."""


@dataclass
class InMemoryStore(LocalStore):
    """In-memory store holding serialized values."""

    _entries: dict[str, str]

    def __init__(self) -> None:
        self._entries = {}

    def get(self, key: str) -> dict[str, object]:
        """Return a fresh copy of the stored value."""
        raw = self._entries.get(key)
        if raw is None:
            return {}
        return _decode(key, raw)

    def set(self, key: str, value: dict[str, object]) -> None:
        """Store a serialized copy of the value."""
        try:
            self._entries[key] = json.dumps(value)
        except (TypeError, ValueError):
            _logger.exception("Failed to serialize value for key=%s", key)


@dataclass
class JsonFileStore(LocalStore):
    """Store keeping one JSON file per key under a directory."""

    base_path: Path

    def get(self, key: str) -> dict[str, object]:
        """Read a key's file, falling back to an empty dict."""
        path = self._path(key)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except UnicodeDecodeError:
            _logger.warning("Discarding undecodable store value for key=%s", key)
            return {}
        except OSError:
            _logger.exception("Failed to read store key=%s", key)
            return {}
        return _decode(key, raw)

    def set(self, key: str, value: dict[str, object]) -> None:
        """Atomically replace a key's file."""
        try:
            payload = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError):
            _logger.exception("Failed to serialize value for key=%s", key)
            return
        tmp_path: str | None = None
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=str(self.base_path), prefix=f".{key}_", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, self._path(key))
            tmp_path = None
        except OSError:
            _logger.exception("Failed to persist store key=%s", key)
        finally:
            if tmp_path is not None:
                with suppress(OSError):
                    os.unlink(tmp_path)

    def _path(self, key: str) -> Path:
        return self.base_path / f"{key}.json"


def _decode(key: str, raw: str) -> dict[str, object]:
    if not raw.strip():
        return {}
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        _logger.warning("Discarding unparsable store value for key=%s", key)
        return {}
    if not isinstance(value, dict):
        _logger.warning("Discarding non-object store value for key=%s", key)
        return {}
    return value
