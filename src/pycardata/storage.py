"""Persistent key-value storage.

The store only deals in bytes.  Entities are copied in and out as
JSON text through :class:`JsonRepository`; nothing keeps a live
reference into storage.

Mutations are whole-value read-modify-write cycles.  Callers that
mutate a key serialize on :class:`KeyLocks` so two interleaved cycles
on the same key cannot lose an update within one process.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, Generic, Protocol, TypeVar

from pydantic import TypeAdapter, ValidationError

from pycardata.exceptions import StoreCorruptedError, StoreError

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class KeyValueStore(Protocol):
    """Structural interface of the persistent store.

    Having a protocol here makes it easy to pass test doubles while
    keeping the bundled implementations concrete.
    """

    async def get(self, key: str) -> bytes | None: ...

    async def set(self, key: str, value: bytes) -> None: ...

    async def remove(self, key: str) -> None: ...

    async def remove_many(self, keys: Iterable[str]) -> None: ...


class MemoryKeyValueStore:
    """In-process store; contents last as long as the instance."""

    def __init__(self, initial: Mapping[str, bytes] | None = None) -> None:
        self._data: dict[str, bytes] = dict(initial or {})

    async def get(self, key: str) -> bytes | None:
        return self._data.get(key)

    async def set(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)

    async def remove_many(self, keys: Iterable[str]) -> None:
        for key in keys:
            self._data.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._data)


class JsonFileKeyValueStore:
    """Durable store keeping every key in one JSON object on disk.

    Values must be UTF-8 text (they are JSON documents themselves).
    Writes go to a temporary file that is atomically renamed over the
    target, so a crash mid-write leaves the previous contents intact.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)
        self._lock = asyncio.Lock()
        self._data: dict[str, str] | None = None

    @property
    def path(self) -> Path:
        return self._path

    def _read_file(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            text = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StoreError(f"Cannot read store file {self._path}: {exc}") from exc
        if not text.strip():
            return {}
        try:
            loaded: Any = json.loads(text)
        except json.JSONDecodeError as exc:
            raise StoreCorruptedError(f"Store file {self._path} is not valid JSON") from exc
        if not isinstance(loaded, dict) or not all(isinstance(v, str) for v in loaded.values()):
            raise StoreCorruptedError(f"Store file {self._path} does not hold a string mapping")
        return loaded

    def _write_file(self, data: dict[str, str]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self._path.name}.", dir=self._path.parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(data, handle, separators=(",", ":"), sort_keys=True)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StoreError(f"Cannot write store file {self._path}: {exc}") from exc

    async def _loaded(self) -> dict[str, str]:
        if self._data is None:
            self._data = await asyncio.to_thread(self._read_file)
            _logger.debug("Loaded %d keys from %s", len(self._data), self._path)
        return self._data

    async def _commit(self, updated: dict[str, str]) -> None:
        await asyncio.to_thread(self._write_file, updated)
        self._data = updated

    async def get(self, key: str) -> bytes | None:
        async with self._lock:
            data = await self._loaded()
            value = data.get(key)
        return None if value is None else value.encode("utf-8")

    async def set(self, key: str, value: bytes) -> None:
        try:
            text = bytes(value).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise StoreError(f"Value for {key!r} is not UTF-8 text", key=key) from exc
        async with self._lock:
            updated = dict(await self._loaded())
            updated[key] = text
            await self._commit(updated)

    async def remove(self, key: str) -> None:
        await self.remove_many((key,))

    async def remove_many(self, keys: Iterable[str]) -> None:
        async with self._lock:
            current = await self._loaded()
            doomed = [key for key in keys if key in current]
            if not doomed:
                return
            updated = {k: v for k, v in current.items() if k not in doomed}
            await self._commit(updated)


class KeyLocks:
    """One :class:`asyncio.Lock` per store key."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}

    def __call__(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock


class JsonRepository(Generic[T]):
    """Whole-value ``load``/``save`` of one typed entity under one key."""

    def __init__(self, store: KeyValueStore, key: str, adapter: TypeAdapter[T]) -> None:
        self._store = store
        self._key = key
        self._adapter = adapter

    @property
    def key(self) -> str:
        return self._key

    async def load(self) -> T | None:
        """Return the stored value, or ``None`` when the key is absent."""
        try:
            raw = await self._store.get(self._key)
        except StoreError:
            raise
        except OSError as exc:
            raise StoreError(f"Cannot read {self._key!r}: {exc}", key=self._key) from exc
        if raw is None:
            return None
        try:
            return self._adapter.validate_json(raw)
        except ValidationError as exc:
            raise StoreCorruptedError(
                f"Stored value for {self._key!r} does not match its schema: {exc.error_count()} error(s)",
                key=self._key,
            ) from exc

    async def save(self, value: T) -> None:
        payload = self._adapter.dump_json(value, by_alias=True, exclude_none=True)
        try:
            await self._store.set(self._key, payload)
        except StoreError:
            raise
        except OSError as exc:
            raise StoreError(f"Cannot write {self._key!r}: {exc}", key=self._key) from exc

    async def clear(self) -> None:
        try:
            await self._store.remove(self._key)
        except StoreError:
            raise
        except OSError as exc:
            raise StoreError(f"Cannot remove {self._key!r}: {exc}", key=self._key) from exc
