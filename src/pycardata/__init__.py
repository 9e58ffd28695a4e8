"""pycardata - Async engine for a simulated DePIN vehicle-data marketplace."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pycardata")
except PackageNotFoundError:
    __version__ = "0+local"
from pycardata.aggregation import series_stats, summarize
from pycardata.config import CarDataConfig
from pycardata.exceptions import (
    AssetError,
    CarDataConfigError,
    CarDataError,
    DatasetValidationError,
    StoreCorruptedError,
    StoreError,
)
from pycardata.ingestion.obd import ObdImporter
from pycardata.marketplace import MarketplaceLedger, filter_by_data_type, sort_listings
from pycardata.models import (
    DataType,
    ListingDuration,
    ListingRecord,
    ObdRecord,
    SeriesStats,
    SortCriterion,
    TelemetryMetric,
    TelemetrySample,
    TelemetrySummary,
    TimeRange,
    WalletState,
)
from pycardata.service import CarDataService
from pycardata.storage import JsonFileKeyValueStore, KeyValueStore, MemoryKeyValueStore
from pycardata.synthesizer import TelemetrySynthesizer
from pycardata.wallet import WalletSimulator

__all__ = [
    "__version__",
    "AssetError",
    "CarDataConfig",
    "CarDataConfigError",
    "CarDataError",
    "CarDataService",
    "DataType",
    "DatasetValidationError",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "ListingDuration",
    "ListingRecord",
    "MarketplaceLedger",
    "MemoryKeyValueStore",
    "ObdImporter",
    "ObdRecord",
    "SeriesStats",
    "SortCriterion",
    "StoreCorruptedError",
    "StoreError",
    "TelemetryMetric",
    "TelemetrySample",
    "TelemetrySummary",
    "TelemetrySynthesizer",
    "TimeRange",
    "WalletSimulator",
    "WalletState",
    "filter_by_data_type",
    "series_stats",
    "sort_listings",
    "summarize",
]
