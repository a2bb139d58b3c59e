"""Key-value persistence for timer checkpoints, progress and completion caches.

Stores hold string values (JSON documents produced by the schema models).
Durable backends raise :class:`StoreUnavailableError`; the session always talks
to them through :class:`SafeStore`, which turns failures into logged no-ops so
play continues without resumability.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
import tempfile
from typing import Protocol

logger = logging.getLogger(__name__)


class StoreUnavailableError(Exception):
    """Raised when the backing storage cannot be read or written."""


class PersistedStore(Protocol):
    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


class InMemoryStore:
    """Dictionary-backed store; lives as long as the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def remove(self, key: str) -> None:
        self._values.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._values)


class JsonFileStore:
    """Store persisted as a single JSON object on disk.

    Every write rewrites the file through a temporary sibling and
    ``os.replace`` so a crash never leaves a half-written document.
    """

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._values: dict[str, str] | None = None

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        values = dict(self._load())
        values[key] = value
        self._write(values)

    def remove(self, key: str) -> None:
        values = self._load()
        if key not in values:
            return
        values = dict(values)
        del values[key]
        self._write(values)

    def _load(self) -> dict[str, str]:
        if self._values is not None:
            return self._values
        try:
            raw = self._file_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            self._values = {}
            return self._values
        except OSError as exc:
            raise StoreUnavailableError(f"Cannot read {self._file_path}: {exc}") from exc

        try:
            parsed = json.loads(raw) if raw.strip() else {}
        except ValueError as exc:
            raise StoreUnavailableError(f"Corrupt store file {self._file_path}") from exc
        if not isinstance(parsed, dict):
            raise StoreUnavailableError(f"Store file {self._file_path} is not a JSON object")
        self._values = {str(k): str(v) for k, v in parsed.items()}
        return self._values

    def _write(self, values: dict[str, str]) -> None:
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_name = tempfile.mkstemp(
                dir=self._file_path.parent, prefix=f".{self._file_path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(values, handle, indent=2, sort_keys=True)
            os.replace(temp_name, self._file_path)
        except OSError as exc:
            raise StoreUnavailableError(f"Cannot write {self._file_path}: {exc}") from exc
        self._values = values


class SafeStore:
    """Wraps a store so that storage failures degrade to no-ops."""

    def __init__(self, inner: PersistedStore) -> None:
        self._inner = inner
        self._degraded = False

    @property
    def degraded(self) -> bool:
        return self._degraded

    def get(self, key: str) -> str | None:
        try:
            return self._inner.get(key)
        except StoreUnavailableError as exc:
            self._note_failure("read", key, exc)
            return None

    def set(self, key: str, value: str) -> None:
        try:
            self._inner.set(key, value)
        except StoreUnavailableError as exc:
            self._note_failure("write", key, exc)

    def remove(self, key: str) -> None:
        try:
            self._inner.remove(key)
        except StoreUnavailableError as exc:
            self._note_failure("remove", key, exc)

    def _note_failure(self, action: str, key: str, exc: StoreUnavailableError) -> None:
        if not self._degraded:
            logger.warning("Persisted store unavailable, continuing without it (%s %s): %s", action, key, exc)
            self._degraded = True
        else:
            logger.debug("Persisted store %s of %s skipped: %s", action, key, exc)
