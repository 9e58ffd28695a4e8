"""Vehicle telemetry models."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import Field, field_validator

from pycardata.models._base import CarDataBaseModel


class TelemetryMetric(StrEnum):
    """Per-sample metrics that can be charted or summarized."""

    SPEED = "speed"
    RPM = "rpm"
    FUEL_LEVEL = "fuelLevel"
    ENGINE_TEMP = "engineTemp"


class TimeRange(StrEnum):
    """Chart windows, expressed as a number of trailing samples."""

    HOUR = "hour"
    DAY = "day"
    WEEK = "week"

    @property
    def sample_count(self) -> int | None:
        """Trailing samples shown for this range, ``None`` meaning all."""
        return _RANGE_SAMPLES[self]


_RANGE_SAMPLES: dict[TimeRange, int | None] = {
    TimeRange.HOUR: 60,
    TimeRange.DAY: 144,
    TimeRange.WEEK: None,
}


class TelemetrySample(CarDataBaseModel):
    """One instant of vehicle state.

    Parameters
    ----------
    timestamp : str
        ISO-8601 timestamp of the sample.
    speed : float
        Vehicle speed in mph.
    rpm : float
        Engine revolutions per minute.
    fuel_level : float
        Fuel level in percent.  Not clamped to 0-100.
    engine_temp : float
        Engine temperature in °F.
    latitude : float
        Latitude in degrees.
    longitude : float
        Longitude in degrees.
    diagnostic_code : str or None
        OBD trouble code reported with the sample, if any.
    """

    timestamp: str
    speed: float = Field(ge=0)
    rpm: float = Field(ge=0)
    fuel_level: float
    engine_temp: float
    latitude: float
    longitude: float
    diagnostic_code: str | None = None

    @field_validator("timestamp")
    @classmethod
    def _check_timestamp(cls, value: str) -> str:
        _parse_iso(value)
        return value

    @field_validator("diagnostic_code", mode="before")
    @classmethod
    def _blank_code_is_absent(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def timestamp_datetime(self) -> datetime:
        """Timestamp as an aware datetime (naive values are taken as UTC)."""
        return _parse_iso(self.timestamp)

    def metric(self, metric: TelemetryMetric | str) -> float:
        """Return the value of *metric* for this sample."""
        key = TelemetryMetric(metric)
        if key is TelemetryMetric.SPEED:
            return self.speed
        if key is TelemetryMetric.RPM:
            return self.rpm
        if key is TelemetryMetric.FUEL_LEVEL:
            return self.fuel_level
        return self.engine_temp


def _parse_iso(value: str) -> datetime:
    # fromisoformat accepts the "Z" suffix from Python 3.11 on.
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed


class TelemetrySummary(CarDataBaseModel):
    """Aggregate over a window of samples.

    ``time_active`` is in minutes under the one-sample-per-minute
    assumption and ``distance_traveled`` is in miles.
    """

    avg_speed: float = 0.0
    max_speed: float = 0.0
    avg_rpm: float = 0.0
    max_rpm: float = 0.0
    fuel_used: float = Field(default=0.0, ge=0)
    distance_traveled: float = 0.0
    time_active: int = 0

    @classmethod
    def empty(cls) -> TelemetrySummary:
        return cls()


class SeriesStats(CarDataBaseModel):
    """Min/max/average of one metric over a window."""

    metric: TelemetryMetric
    minimum: float = 0.0
    maximum: float = 0.0
    average: float = 0.0
    count: int = 0
