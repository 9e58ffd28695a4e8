"""High-level async facade over the vehicle-data engine."""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from datetime import datetime
from typing import Any

import aiohttp
from pydantic import TypeAdapter

from pycardata import aggregation
from pycardata._constants import (
    FLAG_FALSE,
    FLAG_TRUE,
    KEY_CAR_DATA,
    KEY_USE_REAL_DATA,
    RESET_KEYS,
)
from pycardata.config import CarDataConfig
from pycardata.exceptions import StoreCorruptedError, StoreError
from pycardata.fixtures import SEED_LISTINGS, SEED_WALLET
from pycardata.ingestion.obd import ObdImporter
from pycardata.marketplace import MarketplaceLedger, sort_listings
from pycardata.models.marketplace import ListingRecord, SortCriterion
from pycardata.models.telemetry import (
    SeriesStats,
    TelemetryMetric,
    TelemetrySample,
    TelemetrySummary,
    TimeRange,
)
from pycardata.models.wallet import WalletState
from pycardata.storage import JsonFileKeyValueStore, JsonRepository, KeyLocks, KeyValueStore, MemoryKeyValueStore
from pycardata.synthesizer import TelemetrySynthesizer, _utcnow
from pycardata.wallet import WalletSimulator

_logger = logging.getLogger(__name__)

_SERIES_ADAPTER: TypeAdapter[list[TelemetrySample]] = TypeAdapter(list[TelemetrySample])


class CarDataService:
    """Single entry point for telemetry, marketplace and wallet operations.

    No public method raises: store or dataset failures degrade to
    synthetic data, fixtures, ``False`` or ``0`` and are logged.

    Usage::

        async with CarDataService(CarDataConfig.from_env()) as service:
            sample = await service.get_current_vehicle_data()
            summary = await service.get_data_summary()
    """

    def __init__(
        self,
        config: CarDataConfig | None = None,
        *,
        store: KeyValueStore | None = None,
        importer: ObdImporter | None = None,
        http_session: aiohttp.ClientSession | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._config = config if config is not None else CarDataConfig()
        if store is None:
            if self._config.store_path:
                store = JsonFileKeyValueStore(self._config.store_path)
            else:
                store = MemoryKeyValueStore()
        self._store = store
        if rng is None:
            rng = random.Random(self._config.random_seed)
        self._locks = KeyLocks()
        self._importer = importer or ObdImporter(
            store,
            path=self._config.obd_data_path,
            url=self._config.obd_data_url,
            http_session=http_session,
            max_samples=self._config.max_obd_samples,
            timeout=self._config.http_timeout,
        )
        self._synthesizer = TelemetrySynthesizer(rng, clock=clock)
        self._ledger = MarketplaceLedger(store, self._locks)
        self._wallet = WalletSimulator(
            store,
            self._ledger,
            self._locks,
            rng=rng,
            min_factor=self._config.earnings_min_factor,
            max_factor=self._config.earnings_max_factor,
        )
        self._series_cache = JsonRepository(store, KEY_CAR_DATA, _SERIES_ADAPTER)

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> CarDataService:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        return None

    @property
    def config(self) -> CarDataConfig:
        return self._config

    @property
    def store(self) -> KeyValueStore:
        return self._store

    @property
    def ledger(self) -> MarketplaceLedger:
        return self._ledger

    @property
    def wallet(self) -> WalletSimulator:
        return self._wallet

    # ------------------------------------------------------------------
    # Data source
    # ------------------------------------------------------------------

    async def _read_source_flag(self) -> bool:
        raw = await self._store.get(KEY_USE_REAL_DATA)
        if raw is None:
            return self._config.use_real_data
        return raw.decode("utf-8", errors="replace").strip() == FLAG_TRUE

    async def is_using_real_data(self) -> bool:
        try:
            return await self._read_source_flag()
        except Exception:
            _logger.warning("Error checking data source", exc_info=True)
            return False

    async def toggle_data_source(self) -> bool:
        """Flip the data source and drop the cached series.

        Returns the new "real data" flag, ``False`` on failure.
        """
        try:
            async with self._locks(KEY_CAR_DATA):
                use_real = not await self._read_source_flag()
                await self._store.set(KEY_USE_REAL_DATA, (FLAG_TRUE if use_real else FLAG_FALSE).encode())
                # Cached samples carry no origin tag; they must not survive a switch.
                await self._series_cache.clear()
        except Exception:
            _logger.warning("Error toggling data source", exc_info=True)
            return False
        _logger.debug("Data source switched to %s", "real" if use_real else "synthetic")
        return use_real

    # ------------------------------------------------------------------
    # Telemetry
    # ------------------------------------------------------------------

    async def get_current_vehicle_data(self) -> TelemetrySample:
        try:
            if await self._read_source_flag():
                latest = await self._importer.latest()
                if latest is not None:
                    return latest
                _logger.debug("No recorded sample available; using synthetic data")
        except Exception:
            _logger.warning("Error getting current vehicle data", exc_info=True)
        return self._synthesizer.current()

    async def get_historical_data(self, minutes: int | None = None) -> list[TelemetrySample]:
        """Return up to *minutes* samples, oldest first.

        In real-data mode the recorded dataset is tried first and its
        segment replaces the cached series.  Otherwise, or when it yields
        nothing, the cached series is served, and failing that a fresh
        synthetic series is generated and cached.
        """
        if minutes is None:
            minutes = self._config.history_minutes
        if minutes <= 0:
            return []
        try:
            async with self._locks(KEY_CAR_DATA):
                return await self._historical(minutes)
        except Exception:
            _logger.warning("Error retrieving car data; using synthetic series", exc_info=True)
            return self._synthesizer.generate(minutes)

    async def _historical(self, minutes: int) -> list[TelemetrySample]:
        if await self._read_source_flag():
            segment = await self._importer.segment(minutes)
            if segment:
                await self._series_cache.save(segment)
                return segment
            _logger.debug("No recorded data available; falling back to cached or synthetic series")

        try:
            cached = await self._series_cache.load()
        except StoreCorruptedError:
            _logger.warning("Discarding corrupted cached series", exc_info=True)
            try:
                await self._series_cache.clear()
            except StoreError:
                _logger.debug("Could not remove corrupted cached series", exc_info=True)
            cached = None
        if cached is not None and len(cached) >= minutes:
            _logger.debug("Serving %d of %d cached samples", minutes, len(cached))
            return cached[-minutes:]

        series = self._synthesizer.generate(minutes)
        await self._series_cache.save(series)
        return series

    async def get_data_summary(self) -> TelemetrySummary:
        return aggregation.summarize(await self.get_historical_data())

    async def get_chart_stats(
        self,
        metric: TelemetryMetric | str,
        time_range: TimeRange | str = TimeRange.HOUR,
    ) -> SeriesStats:
        """Min/max/average of *metric* over the trailing *time_range*.

        Raises :class:`ValueError` for an unknown metric or range name.
        """
        metric = TelemetryMetric(metric)
        time_range = TimeRange(time_range)
        window = aggregation.select_range(await self.get_historical_data(), time_range)
        return aggregation.series_stats(window, metric)

    # ------------------------------------------------------------------
    # Marketplace and wallet
    # ------------------------------------------------------------------

    async def get_marketplace_listings(self) -> list[ListingRecord]:
        try:
            return await self._ledger.list_all()
        except Exception:
            _logger.exception("Unexpected error retrieving marketplace listings")
            return list(SEED_LISTINGS)

    async def get_sorted_listings(self, criterion: SortCriterion | str = SortCriterion.RECENT) -> list[ListingRecord]:
        listings = await self.get_marketplace_listings()
        try:
            return sort_listings(listings, criterion)
        except ValueError:
            _logger.warning("Unknown sort criterion %r; keeping catalogue order", criterion)
            return listings

    async def toggle_data_sharing(self, listing_id: str) -> bool:
        """Flip sharing for one listing; return whether the operation succeeded."""
        try:
            await self._wallet.apply_sharing_toggle(listing_id)
        except StoreError:
            _logger.warning("Error toggling data sharing for %r", listing_id, exc_info=True)
            return False
        except Exception:
            _logger.exception("Unexpected error toggling data sharing for %r", listing_id)
            return False
        return True

    async def get_user_wallet(self) -> WalletState:
        try:
            return await self._wallet.get_wallet()
        except Exception:
            _logger.exception("Unexpected error retrieving wallet")
            return SEED_WALLET

    async def update_user_wallet(self, wallet: WalletState) -> bool:
        try:
            return await self._wallet.update_wallet(wallet)
        except Exception:
            _logger.exception("Unexpected error updating wallet")
            return False

    async def simulate_earnings(self) -> float:
        try:
            return await self._wallet.simulate_earnings()
        except Exception:
            _logger.exception("Unexpected error simulating earnings")
            return 0.0

    async def reset_all_data(self) -> None:
        """Remove every persisted entity (the dataset parse cache is kept)."""
        try:
            await self._store.remove_many(RESET_KEYS)
        except Exception:
            _logger.warning("Error resetting data", exc_info=True)

