"""Recorded OBD dataset ingestion.

Loads a recorded telemetry dataset (km/h, °C, snake_case keys),
validates every record at the boundary, converts to
:class:`~pycardata.models.telemetry.TelemetrySample` and caches the
converted series twice: in memory for the importer's lifetime and in
the persistent store so later processes skip re-parsing the asset.

A missing, unreadable or malformed dataset is reported as "no data"
(an empty series) and logged; it never raises to the caller.
"""

from __future__ import annotations

import asyncio
import importlib.resources
import json
import logging
import os
from pathlib import Path
from typing import Any

import aiohttp
from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from pycardata._constants import KEY_OBD_DATA, MAX_OBD_SAMPLES
from pycardata.exceptions import AssetError, DatasetValidationError, StoreError
from pycardata.models.obd import ObdRecord
from pycardata.models.telemetry import TelemetrySample
from pycardata.storage import JsonRepository, KeyValueStore

_logger = logging.getLogger(__name__)

BUNDLED_DATASET = "data/sample_obd_data.json"


class CachedDataset(BaseModel):
    """Converted series as persisted under ``obd_data``.

    ``source`` and ``max_samples`` identify what was parsed; a cache
    written for a different source or cap is ignored.
    """

    model_config = ConfigDict(frozen=True)

    source: str
    max_samples: int
    samples: list[TelemetrySample]


_CACHE_ADAPTER: TypeAdapter[CachedDataset] = TypeAdapter(CachedDataset)


def parse_dataset(payload: Any, *, max_samples: int = MAX_OBD_SAMPLES, source: str = "") -> list[TelemetrySample]:
    """Convert a decoded dataset into native-unit samples.

    Only the first *max_samples* records are considered.  Records that
    fail validation are skipped.

    Raises
    ------
    AssetError
        If *payload* is not a JSON array.
    DatasetValidationError
        If the array is non-empty but no record in the window is usable.
    """
    if not isinstance(payload, list):
        raise AssetError(f"Dataset is not an array (got {type(payload).__name__})", source=source)

    window = payload[:max_samples]
    samples: list[TelemetrySample] = []
    skipped = 0
    for item in window:
        try:
            samples.append(ObdRecord.model_validate(item).to_sample())
        except ValidationError:
            skipped += 1

    if skipped:
        _logger.warning("Skipped %d of %d malformed OBD records from %s", skipped, len(window), source or "dataset")
    if window and not samples:
        raise DatasetValidationError("Dataset contains no valid OBD records", source=source)
    return samples


class ObdImporter:
    """Load, convert and cache a recorded OBD dataset.

    Parameters
    ----------
    store : KeyValueStore
        Store used for the converted-series cache.
    path : str or PathLike or None
        Local JSON dataset.  Takes precedence over *url*.
    url : str or None
        HTTP(S) URL of the dataset, fetched with aiohttp.
    http_session : aiohttp.ClientSession or None
        Session used for *url*.  A short-lived one is created when omitted.
    max_samples : int
        Number of leading records considered.
    timeout : float
        Total fetch timeout in seconds for *url*.

    When neither *path* nor *url* is given the sample dataset bundled with
    the package is used.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        path: str | os.PathLike[str] | None = None,
        url: str | None = None,
        http_session: aiohttp.ClientSession | None = None,
        max_samples: int = MAX_OBD_SAMPLES,
        timeout: float = 10.0,
    ) -> None:
        if max_samples <= 0:
            raise ValueError(f"max_samples must be positive, got {max_samples}")
        self._path = Path(path) if path is not None else None
        self._url = url
        self._http = http_session
        self._max_samples = max_samples
        self._timeout = timeout
        self._cache = JsonRepository(store, KEY_OBD_DATA, _CACHE_ADAPTER)
        self._samples: list[TelemetrySample] | None = None
        self._lock = asyncio.Lock()

    @property
    def source(self) -> str:
        if self._path is not None:
            return f"path:{self._path}"
        if self._url is not None:
            return f"url:{self._url}"
        return f"bundled:{BUNDLED_DATASET}"

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def load_all(self) -> list[TelemetrySample]:
        """Return the full converted series, or ``[]`` when unavailable."""
        if self._samples is not None:
            return list(self._samples)

        async with self._lock:
            if self._samples is None:
                samples = await self._load_persisted()
                if samples is None:
                    samples = await self._parse_source()
                    if samples is None:
                        return []
                    await self._persist(samples)
                self._samples = samples
            return list(self._samples)

    async def segment(self, minutes: int) -> list[TelemetrySample]:
        """Return the last ``min(minutes, len)`` samples, oldest first."""
        if minutes <= 0:
            return []
        samples = await self.load_all()
        return samples[max(0, len(samples) - minutes) :]

    async def latest(self) -> TelemetrySample | None:
        samples = await self.load_all()
        return samples[-1] if samples else None

    async def invalidate(self) -> None:
        """Forget the converted series in memory and in the store."""
        async with self._lock:
            self._samples = None
            try:
                await self._cache.clear()
            except StoreError:
                _logger.warning("Failed to clear persisted OBD cache", exc_info=True)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _load_persisted(self) -> list[TelemetrySample] | None:
        try:
            cached = await self._cache.load()
        except StoreError:
            _logger.warning("Ignoring unreadable OBD cache", exc_info=True)
            return None
        if cached is None:
            return None
        if cached.source != self.source or cached.max_samples != self._max_samples:
            _logger.debug("OBD cache was built from %s, re-parsing %s", cached.source, self.source)
            return None
        _logger.debug("Loaded %d OBD samples from store cache", len(cached.samples))
        return list(cached.samples)

    async def _persist(self, samples: list[TelemetrySample]) -> None:
        try:
            await self._cache.save(CachedDataset(source=self.source, max_samples=self._max_samples, samples=samples))
        except StoreError:
            _logger.warning("Failed to persist OBD cache", exc_info=True)

    async def _parse_source(self) -> list[TelemetrySample] | None:
        source = self.source
        try:
            text = await self._read_source()
            try:
                payload = json.loads(text)
            except json.JSONDecodeError as exc:
                raise AssetError(f"Dataset is not valid JSON: {exc}", source=source) from exc
            samples = parse_dataset(payload, max_samples=self._max_samples, source=source)
        except AssetError as exc:
            _logger.warning("OBD dataset unavailable (%s): %s", source, exc)
            return None
        _logger.debug("Parsed %d OBD samples from %s", len(samples), source)
        return samples

    async def _read_source(self) -> str:
        if self._path is not None:
            return await asyncio.to_thread(self._read_path, self._path)
        if self._url is not None:
            return await self._fetch_url(self._url)
        return await asyncio.to_thread(self._read_bundled)

    def _read_path(self, path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise AssetError(f"Dataset file not found: {path}", source=self.source) from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise AssetError(f"Cannot read dataset file {path}: {exc}", source=self.source) from exc

    def _read_bundled(self) -> str:
        try:
            ref = importlib.resources.files("pycardata").joinpath(BUNDLED_DATASET)
            return ref.read_text(encoding="utf-8")
        except (FileNotFoundError, ModuleNotFoundError) as exc:
            raise AssetError(f"{BUNDLED_DATASET} not found in package data", source=self.source) from exc

    async def _fetch_url(self, url: str) -> str:
        _logger.debug("GET %s", url)
        timeout = aiohttp.ClientTimeout(total=self._timeout)
        try:
            if self._http is not None:
                return await self._get_text(self._http, url, timeout)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                return await self._get_text(session, url, timeout)
        except AssetError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError, UnicodeDecodeError) as exc:
            raise AssetError(f"Request to {url} failed: {exc}", source=self.source) from exc

    async def _get_text(self, session: aiohttp.ClientSession, url: str, timeout: aiohttp.ClientTimeout) -> str:
        async with session.get(url, timeout=timeout) as resp:
            text = await resp.text()
            if resp.status != 200:
                raise AssetError(f"HTTP {resp.status} from {url}: {text[:200]}", source=self.source)
            return text
