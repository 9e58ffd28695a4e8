"""Raw OBD dataset record model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pycardata._constants import celsius_to_fahrenheit, kmph_to_mph
from pycardata.ingestion.normalize import safe_float, safe_str
from pycardata.models.telemetry import TelemetrySample


class ObdRecord(BaseModel):
    """One record of a recorded OBD dataset, in source units.

    Records use snake_case keys, km/h and °C.  Placeholder values
    (``""``, ``"--"``, NaN) in required fields fail validation so the
    record is skipped rather than converted into a bogus sample.

    Parameters
    ----------
    timestamp : str
        ISO-8601 timestamp.
    speed_kmph : float
        Speed in km/h.
    engine_rpm : float
        Engine RPM.
    fuel_level_pct : float
        Fuel level in percent.
    engine_temp_c : float
        Engine temperature in °C.
    lat : float
        Latitude in degrees.
    lon : float
        Longitude in degrees.
    dtc_code : str or None
        Diagnostic trouble code; empty values mean no code.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    timestamp: str = Field(min_length=1)
    speed_kmph: float = Field(ge=0)
    engine_rpm: float = Field(ge=0)
    fuel_level_pct: float
    engine_temp_c: float
    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)
    dtc_code: str | None = None

    @field_validator(
        "speed_kmph",
        "engine_rpm",
        "fuel_level_pct",
        "engine_temp_c",
        "lat",
        "lon",
        mode="before",
    )
    @classmethod
    def _coerce_floats(cls, value: Any) -> float | None:
        return safe_float(value)

    @field_validator("dtc_code", mode="before")
    @classmethod
    def _coerce_code(cls, value: Any) -> str | None:
        return safe_str(value)

    def to_sample(self) -> TelemetrySample:
        """Convert to a :class:`TelemetrySample` in mph and °F."""
        return TelemetrySample(
            timestamp=self.timestamp,
            speed=kmph_to_mph(self.speed_kmph),
            rpm=self.engine_rpm,
            fuel_level=self.fuel_level_pct,
            engine_temp=celsius_to_fahrenheit(self.engine_temp_c),
            latitude=self.lat,
            longitude=self.lon,
            diagnostic_code=self.dtc_code,
        )
