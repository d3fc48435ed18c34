"""
Durable key-value persistence for the in-progress intake draft.

Values are stored as JSON text in a StorageBackend. Reads never raise: a
missing or unreadable key yields the caller's fallback. Writes never raise
either: a rejected write is reported as a StorageErrorEvent (returned and
passed to the injected on_error callback) and the in-memory value stays
authoritative.

Several DraftStore instances sharing one backend behave like browser tabs
sharing localStorage: a write by one is announced to the others through the
backend's change notifications, never by polling. Right after its own write a
store ignores incoming changes for a short protection window so a slower
sibling cannot clobber fresh local state.
"""
from __future__ import annotations

import errno
import json
import logging
import os
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Generic, Optional, Protocol, TypeVar, Union
from urllib.parse import quote

from config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

QUOTA_EXCEEDED = "quota_exceeded"
SAVE_ERROR = "save_error"


class QuotaExceededError(Exception):
    """Raised by a backend that has no room left for a write."""


@dataclass(frozen=True)
class StorageErrorEvent:
    type: str
    message: str
    key: str


@dataclass(frozen=True)
class StorageSizeWarning:
    key: str
    size_bytes: int


@dataclass(frozen=True)
class StorageChange:
    key: str
    new_value: Optional[str]
    origin: Any = None


ChangeListener = Callable[[StorageChange], None]


class StorageBackend(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str, origin: Any = None) -> None: ...

    def remove_item(self, key: str, origin: Any = None) -> None: ...

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]: ...


class _ChangeNotifier:
    def __init__(self) -> None:
        self._listeners: list[ChangeListener] = []

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, change: StorageChange) -> None:
        for listener in list(self._listeners):
            listener(change)


class MemoryStorage(_ChangeNotifier):
    """In-process backend with an optional byte quota over keys and values."""

    def __init__(self, quota_bytes: Optional[int] = None) -> None:
        super().__init__()
        self.quota_bytes = quota_bytes
        self._items: dict[str, str] = {}

    def _size_with(self, key: str, value: str) -> int:
        items = {**self._items, key: value}
        return sum(len(k.encode("utf-8")) + len(v.encode("utf-8")) for k, v in items.items())

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str, origin: Any = None) -> None:
        if self.quota_bytes is not None and self._size_with(key, value) > self.quota_bytes:
            raise QuotaExceededError(f"Storage quota of {self.quota_bytes} bytes exceeded")
        self._items[key] = value
        self._notify(StorageChange(key, value, origin))

    def remove_item(self, key: str, origin: Any = None) -> None:
        if self._items.pop(key, None) is not None:
            self._notify(StorageChange(key, None, origin))


class FileStorage(_ChangeNotifier):
    """One file per key under `directory`; writes are atomic renames."""

    def __init__(self, directory: Union[str, Path]) -> None:
        super().__init__()
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.directory / f"{quote(key, safe='')}.json"

    def get_item(self, key: str) -> Optional[str]:
        try:
            return self._path(key).read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def set_item(self, key: str, value: str, origin: Any = None) -> None:
        fd, tmp_path = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(value)
            os.replace(tmp_path, self._path(key))
        except OSError as e:
            Path(tmp_path).unlink(missing_ok=True)
            if e.errno in (errno.ENOSPC, getattr(errno, "EDQUOT", errno.ENOSPC)):
                raise QuotaExceededError(str(e)) from e
            raise
        self._notify(StorageChange(key, value, origin))

    def remove_item(self, key: str, origin: Any = None) -> None:
        try:
            self._path(key).unlink()
        except FileNotFoundError:
            return
        self._notify(StorageChange(key, None, origin))


def read_json(backend: StorageBackend, key: str, fallback: T) -> T:
    """Stored value for `key`, or `fallback` when missing or unreadable."""
    try:
        raw = backend.get_item(key)
        return json.loads(raw) if raw else fallback
    except Exception:
        logger.warning("Could not load %r from storage; using fallback", key)
        return fallback


def write_json(
    backend: StorageBackend,
    key: str,
    value: Any,
    origin: Any = None,
    warning_bytes: Optional[int] = None,
    on_size_warning: Optional[Callable[[StorageSizeWarning], None]] = None,
) -> Optional[StorageErrorEvent]:
    """Persist `value`; returns an error event instead of raising on failure."""
    try:
        serialized = json.dumps(value)
        size = len(serialized.encode("utf-8"))
        limit = settings.storage_warning_bytes if warning_bytes is None else warning_bytes
        if size > limit:
            logger.warning("Data for %r is %.2fMB", key, size / (1024 * 1024))
            if on_size_warning is not None:
                on_size_warning(StorageSizeWarning(key, size))
        backend.set_item(key, serialized, origin=origin)
    except QuotaExceededError:
        return StorageErrorEvent(QUOTA_EXCEEDED, "Storage quota exceeded", key)
    except Exception as e:
        return StorageErrorEvent(SAVE_ERROR, str(e), key)
    return None


def subscribe(
    backend: StorageBackend,
    key: str,
    on_external_change: Callable[[Any], None],
    origin: Any = None,
) -> Callable[[], None]:
    """Call `on_external_change` with the parsed new value whenever another
    writer stores `key`. Removals and unparseable values are skipped."""

    def listener(change: StorageChange) -> None:
        if change.key != key or change.new_value is None:
            return
        if origin is not None and change.origin is origin:
            return
        try:
            parsed = json.loads(change.new_value)
        except ValueError:
            logger.warning("Ignoring unparseable external update for %r", key)
            return
        on_external_change(parsed)

    return backend.subscribe(listener)


class DraftStore(Generic[T]):
    """In-memory value for one key, mirrored to a backend on every write."""

    def __init__(
        self,
        key: str,
        initial: T,
        backend: StorageBackend,
        on_error: Optional[Callable[[StorageErrorEvent], None]] = None,
        on_size_warning: Optional[Callable[[StorageSizeWarning], None]] = None,
        protection_seconds: Optional[float] = None,
        warning_bytes: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.key = key
        self.backend = backend
        self._initial = initial
        self._on_error = on_error
        self._on_size_warning = on_size_warning
        self._protection_seconds = (
            settings.cross_tab_protection_seconds if protection_seconds is None else protection_seconds
        )
        self._warning_bytes = warning_bytes
        self._clock = clock
        self._last_write: Optional[float] = None
        self._listeners: list[Callable[[T], None]] = []
        self._value: T = read_json(backend, key, initial)
        self._unsubscribe = subscribe(backend, key, self._apply_external, origin=self)

    @property
    def value(self) -> T:
        return self._value

    def set(self, value: Union[T, Callable[[T], T]]) -> Optional[StorageErrorEvent]:
        """Replace the value (or derive it from the previous one) and persist it."""
        self._value = value(self._value) if callable(value) else value
        self._last_write = self._clock()
        error = write_json(
            self.backend,
            self.key,
            self._value,
            origin=self,
            warning_bytes=self._warning_bytes,
            on_size_warning=self._on_size_warning,
        )
        if error is not None:
            logger.error("Failed to persist %r: %s (%s)", self.key, error.message, error.type)
            if self._on_error is not None:
                self._on_error(error)
        return error

    def reset(self) -> None:
        """Drop the stored value and go back to the initial one."""
        self._value = self._initial
        self._last_write = self._clock()
        try:
            self.backend.remove_item(self.key, origin=self)
        except OSError as e:
            logger.error("Failed to remove %r: %s", self.key, e)
            if self._on_error is not None:
                self._on_error(StorageErrorEvent(SAVE_ERROR, str(e), self.key))

    def subscribe(self, on_change: Callable[[T], None]) -> Callable[[], None]:
        """Be told when an external change replaces the value."""
        self._listeners.append(on_change)

        def unsubscribe() -> None:
            if on_change in self._listeners:
                self._listeners.remove(on_change)

        return unsubscribe

    def close(self) -> None:
        self._unsubscribe()
        self._listeners.clear()

    def _in_protection_window(self) -> bool:
        if self._protection_seconds <= 0 or self._last_write is None:
            return False
        return self._clock() - self._last_write < self._protection_seconds

    def _apply_external(self, value: T) -> None:
        if self._in_protection_window():
            logger.debug("Ignoring external update for %r inside protection window", self.key)
            return
        self._value = value
        for listener in list(self._listeners):
            listener(value)
