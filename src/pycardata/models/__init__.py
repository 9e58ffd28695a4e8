"""Data models for vehicle telemetry, marketplace listings and wallets."""

from pycardata.models._base import CarDataBaseModel
from pycardata.models.marketplace import DataType, ListingDuration, ListingRecord, SortCriterion
from pycardata.models.obd import ObdRecord
from pycardata.models.telemetry import (
    SeriesStats,
    TelemetryMetric,
    TelemetrySample,
    TelemetrySummary,
    TimeRange,
)
from pycardata.models.wallet import WalletState

__all__ = [
    "CarDataBaseModel",
    "DataType",
    "ListingDuration",
    "ListingRecord",
    "ObdRecord",
    "SeriesStats",
    "SortCriterion",
    "TelemetryMetric",
    "TelemetrySample",
    "TelemetrySummary",
    "TimeRange",
    "WalletState",
]
