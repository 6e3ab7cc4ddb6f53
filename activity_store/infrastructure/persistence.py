"""
Key-value persistence adapters for the Activity Store.

Every adapter stores JSON text under a logical key and follows the same
best-effort contract:

- `read(key, fallback)` never raises. Missing keys, unreadable files and
  malformed JSON all yield `fallback`.
- `write(key, value)` serializes to JSON and stores it. Failures (values that
  are not JSON-serializable, quota exhaustion, OS errors) are logged and
  swallowed, so in-memory state held by a caller may diverge from what is
  persisted until the next successful write.

`FileKeyValueStore` survives process restarts and retries transient OS errors
with tenacity before giving up.
"""

from __future__ import annotations

import contextlib
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Protocol, runtime_checkable

from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from activity_store.config import Settings, get_settings
from activity_store.utils.logging import get_logger

log = get_logger(__name__)


@runtime_checkable
class KeyValueStore(Protocol):
    """
    Contract consumed by the record stores.
    """

    def read(self, key: str, fallback: Any = None) -> Any:
        """Return the decoded value stored under `key`, or `fallback`."""
        ...

    def write(self, key: str, value: Any) -> None:
        """Persist `value` under `key` (best effort)."""
        ...

    def clear(self) -> None:
        """Drop every key."""
        ...


def _encode(key: str, value: Any) -> Optional[str]:
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        log.warning("Value is not JSON-serializable; write skipped", extra={"key": key, "error": str(exc)})
        return None


def _decode(key: str, raw: str, fallback: Any) -> Any:
    try:
        return json.loads(raw)
    except ValueError:
        log.warning("Malformed stored value treated as absent", extra={"key": key})
        return fallback


class QuotaExceededError(OSError):
    """Raised internally when a write would exceed the configured quota."""


class InMemoryKeyValueStore:
    """
    Process-local store holding serialized JSON text per key.

    Values are kept as text rather than objects so that reads return fresh
    copies and malformed content behaves exactly as it does on disk.

    Parameters
    ----------
    initial : Mapping[str, str] | None
        Raw stored text per key (may be malformed on purpose).
    quota_bytes : int | None
        Total size budget across all keys; writes beyond it are dropped.
    """

    def __init__(
        self,
        initial: Optional[Mapping[str, str]] = None,
        quota_bytes: Optional[int] = None,
    ) -> None:
        self._data: Dict[str, str] = dict(initial or {})
        self._quota_bytes = quota_bytes

    def read(self, key: str, fallback: Any = None) -> Any:
        raw = self._data.get(key)
        if not raw:
            return fallback
        return _decode(key, raw, fallback)

    def write(self, key: str, value: Any) -> None:
        text = _encode(key, value)
        if text is None:
            return
        try:
            self._check_quota(key, text)
        except QuotaExceededError as exc:
            log.warning("Storage quota exceeded; write dropped", extra={"key": key, "error": str(exc)})
            return
        self._data[key] = text

    def clear(self) -> None:
        self._data.clear()

    def raw(self, key: str) -> Optional[str]:
        """Stored text for `key`, undecoded."""
        return self._data.get(key)

    def _check_quota(self, key: str, text: str) -> None:
        if self._quota_bytes is None:
            return
        used = sum(len(v.encode("utf-8")) for k, v in self._data.items() if k != key)
        needed = used + len(text.encode("utf-8"))
        if needed > self._quota_bytes:
            raise QuotaExceededError(f"{needed} bytes exceeds quota of {self._quota_bytes}")


class FileKeyValueStore:
    """
    Directory-backed store: one `<key>.json` file per key.

    Writes land in a temporary file first and are moved into place with
    `os.replace`, so a crash mid-write never leaves a truncated value behind.
    Transient `OSError`s are retried with exponential backoff.
    """

    suffix = ".json"

    def __init__(
        self,
        directory: Path | str,
        attempts: int = 3,
        backoff_seconds: float = 0.05,
    ) -> None:
        self.directory = Path(directory)
        self._attempts = max(1, attempts)
        self._backoff_seconds = backoff_seconds

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "FileKeyValueStore":
        settings = settings or get_settings()
        return cls(
            settings.storage_dir,
            attempts=settings.write_attempts,
            backoff_seconds=settings.write_backoff_seconds,
        )

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}{self.suffix}"

    def read(self, key: str, fallback: Any = None) -> Any:
        path = self.path_for(key)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return fallback
        except (OSError, UnicodeDecodeError) as exc:
            log.warning("Stored value unreadable; treated as absent", extra={"key": key, "error": str(exc)})
            return fallback
        if not raw.strip():
            return fallback
        return _decode(key, raw, fallback)

    def write(self, key: str, value: Any) -> None:
        text = _encode(key, value)
        if text is None:
            return
        path = self.path_for(key)
        try:
            for attempt in self._retrying():
                with attempt:
                    self._replace_file(path, text)
        except OSError as exc:
            log.warning(
                "Persisting value failed; write dropped",
                extra={"key": key, "path": str(path), "attempts": self._attempts, "error": str(exc)},
            )
            return
        log.debug("Value persisted", extra={"key": key, "path": str(path), "bytes": len(text)})

    def clear(self) -> None:
        if not self.directory.is_dir():
            return
        for path in self.directory.glob(f"*{self.suffix}"):
            try:
                path.unlink()
            except FileNotFoundError:
                continue
            except OSError as exc:
                log.warning("Could not remove stored value", extra={"path": str(path), "error": str(exc)})

    def _retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self._attempts),
            wait=wait_exponential(multiplier=self._backoff_seconds, max=1),
            retry=retry_if_exception_type(OSError),
            reraise=True,
        )

    def _replace_file(self, path: Path, text: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp_name, path)
        except BaseException:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(tmp_name)
            raise


__all__ = [
    "FileKeyValueStore",
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "QuotaExceededError",
]
