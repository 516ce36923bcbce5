"""
Versioned JSON storage over a key-value backend.

Values are written as ``{"version": n, "value": ...}`` envelopes. Reads
accept legacy, non-versioned JSON and return it as the value. The
``*_safe`` functions report failures as a StorageResult so callers can
tell a missing key from corrupted data or an unavailable backend; the
convenience wrappers raise StorageError for anything but a missing key.
"""

import errno
import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any
from urllib.parse import quote, unquote

from brewing_calc.config import StorageConfig, get_storage_config
from brewing_calc.exceptions import QuotaExceededError, StorageError
from brewing_calc.protocols import KeyValueStore

logger = logging.getLogger(__name__)


class StorageErrorType(str, Enum):
    """Why a storage operation failed."""

    NOT_FOUND = "not_found"
    PARSE_ERROR = "parse_error"
    STORAGE_UNAVAILABLE = "storage_unavailable"
    QUOTA_EXCEEDED = "quota_exceeded"


@dataclass(frozen=True)
class StorageResult:
    """Outcome of a storage operation."""

    ok: bool
    value: Any = None
    error: StorageErrorType | None = None
    raw_data: str | None = None
    message: str | None = None


# === Backends ===


class InMemoryStore:
    """
    Dictionary-backed KeyValueStore.

    Args:
        quota_bytes: Optional cap on the total size of stored values
    """

    def __init__(self, quota_bytes: int | None = None):
        self.quota_bytes = quota_bytes
        self._data: dict[str, str] = {}

    def get_item(self, key: str) -> str | None:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.quota_bytes is not None:
            used = sum(len(v) for k, v in self._data.items() if k != key)
            if used + len(value) > self.quota_bytes:
                raise QuotaExceededError(
                    f"Writing {len(value)} bytes to {key!r} exceeds quota of {self.quota_bytes}"
                )
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class FileStore:
    """KeyValueStore keeping one JSON file per key in a directory."""

    def __init__(self, directory: Path | str):
        self.directory = Path(directory).expanduser()

    @classmethod
    def from_config(cls, config: StorageConfig | None = None) -> "FileStore":
        """Create a store in the configured data directory."""
        config = config or get_storage_config()
        return cls(config.data_dir)

    def _path(self, key: str) -> Path:
        return self.directory / f"{quote(key, safe='')}.json"

    def get_item(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp = path.with_suffix(".tmp")
        try:
            tmp.write_text(value, encoding="utf-8")
            tmp.replace(path)
        except OSError as e:
            if e.errno in (errno.ENOSPC, errno.EDQUOT):
                raise QuotaExceededError(f"No space left writing {key!r}") from e
            raise

    def remove_item(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

    def keys(self) -> list[str]:
        if not self.directory.exists():
            return []
        return sorted(unquote(p.stem) for p in self.directory.glob("*.json"))


def is_storage_available(store: KeyValueStore) -> bool:
    """Check that the backend accepts a write and a delete."""
    test_key = "__storage_test__"
    try:
        store.set_item(test_key, test_key)
        store.remove_item(test_key)
    except (OSError, QuotaExceededError):
        return False
    return True


# === Envelope functions ===


def _is_envelope(parsed: Any) -> bool:
    return isinstance(parsed, dict) and "value" in parsed and "version" in parsed


def load_json_safe(store: KeyValueStore, key: str) -> StorageResult:
    """
    Load a value, reporting failures explicitly.

    Returns:
        StorageResult with ``ok`` and the unwrapped value, or the error type
    """
    try:
        raw = store.get_item(key)
    except UnicodeDecodeError as e:
        return StorageResult(ok=False, error=StorageErrorType.PARSE_ERROR, message=str(e))
    except OSError as e:
        return StorageResult(ok=False, error=StorageErrorType.STORAGE_UNAVAILABLE, message=str(e))

    if raw is None:
        return StorageResult(ok=False, error=StorageErrorType.NOT_FOUND)

    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as e:
        return StorageResult(
            ok=False, error=StorageErrorType.PARSE_ERROR, raw_data=raw, message=str(e)
        )

    if _is_envelope(parsed):
        return StorageResult(ok=True, value=parsed["value"])
    return StorageResult(ok=True, value=parsed)


def load_json(store: KeyValueStore, key: str, default: Any = None) -> Any:
    """
    Load a value, returning ``default`` only when the key is missing.

    Raises:
        StorageError: If the stored data is corrupted or the backend fails
    """
    result = load_json_safe(store, key)
    if result.ok:
        return result.value
    if result.error == StorageErrorType.NOT_FOUND:
        return default

    if result.error == StorageErrorType.PARSE_ERROR:
        message = f"Corrupted data for key {key!r} ({len(result.raw_data or '')} bytes)"
    else:
        message = f"Storage unavailable reading key {key!r}: {result.message}"
    logger.error(message)
    raise StorageError(message, error_type=result.error.value if result.error else None)


def save_json_safe(store: KeyValueStore, key: str, value: Any, version: int = 1) -> StorageResult:
    """Save a value in a versioned envelope, reporting failures explicitly."""
    try:
        payload = json.dumps({"version": version, "value": value}, allow_nan=False)
    except (TypeError, ValueError) as e:
        return StorageResult(ok=False, error=StorageErrorType.PARSE_ERROR, message=str(e))

    try:
        store.set_item(key, payload)
    except QuotaExceededError as e:
        return StorageResult(ok=False, error=StorageErrorType.QUOTA_EXCEEDED, message=str(e))
    except OSError as e:
        return StorageResult(ok=False, error=StorageErrorType.STORAGE_UNAVAILABLE, message=str(e))
    return StorageResult(ok=True)


def save_json(store: KeyValueStore, key: str, value: Any, version: int = 1) -> None:
    """
    Save a value in a versioned envelope.

    Raises:
        StorageError: If the value cannot be serialised or written
    """
    result = save_json_safe(store, key, value, version)
    if result.ok:
        return
    if result.error == StorageErrorType.QUOTA_EXCEEDED:
        message = f"Storage quota exceeded when saving key {key!r}"
    elif result.error == StorageErrorType.PARSE_ERROR:
        message = f"Value for key {key!r} is not JSON serialisable: {result.message}"
    else:
        message = f"Storage unavailable when saving key {key!r}: {result.message}"
    logger.error(message)
    raise StorageError(message, error_type=result.error.value if result.error else None)


def delete_json(store: KeyValueStore, key: str) -> bool:
    """
    Delete a key.

    Returns:
        True on success, False if the backend failed
    """
    try:
        store.remove_item(key)
    except OSError as e:
        logger.error("Failed to delete key %r: %s", key, e)
        return False
    return True
