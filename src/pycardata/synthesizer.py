"""Synthetic telemetry generation.

Produces a short randomized "drive": one sample per minute ending at
the current time, speed and RPM oscillating around a cruise, fuel
draining linearly from 75% to 60% and a GPS path drifting north-east
from a jittered base coordinate.
"""

from __future__ import annotations

import math
import random
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from pycardata._constants import (
    BASE_LATITUDE,
    BASE_LONGITUDE,
    DIAGNOSTIC_CODES,
    DIAGNOSTIC_PROBABILITY,
)
from pycardata.models.telemetry import TelemetrySample

_FUEL_START = 75.0
_FUEL_DRAIN = 15.0
_PATH_SPAN_DEGREES = 0.01
_BASE_JITTER_DEGREES = 0.01


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _isoformat(value: datetime) -> str:
    # Millisecond precision with a "Z" suffix, like JavaScript's toISOString().
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class TelemetrySynthesizer:
    """Generate randomized telemetry series.

    Output is not reproducible unless a seeded ``rng`` and a fixed
    ``clock`` are injected.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._rng = rng if rng is not None else random.Random()
        self._clock = clock

    def generate(self, n: int) -> list[TelemetrySample]:
        """Return *n* samples one minute apart, most recent last."""
        if n < 0:
            raise ValueError(f"sample count must be non-negative, got {n}")
        if n == 0:
            return []

        rng = self._rng
        now = self._clock()
        base_lat = BASE_LATITUDE + (rng.random() - 0.5) * _BASE_JITTER_DEGREES
        base_lon = BASE_LONGITUDE + (rng.random() - 0.5) * _BASE_JITTER_DEGREES

        samples: list[TelemetrySample] = []
        for i in range(n):
            speed = 35 + rng.uniform(0, 30) + 15 * math.sin(i / 10)
            rpm = 1000 + rng.uniform(0, 1500) + 500 * math.sin(i / 8)
            progress = i / n
            code: str | None = None
            if rng.random() < DIAGNOSTIC_PROBABILITY:
                code = rng.choice(DIAGNOSTIC_CODES)
            samples.append(
                TelemetrySample(
                    timestamp=_isoformat(now - timedelta(minutes=n - i)),
                    # sin() swings +-15 around a 35-65 base, so the rounded speed stays >= 20.
                    speed=round(speed),
                    rpm=round(rpm),
                    fuel_level=_FUEL_START - i * (_FUEL_DRAIN / n),
                    engine_temp=195 + 8 * math.sin(i / 20),
                    latitude=base_lat + progress * _PATH_SPAN_DEGREES,
                    longitude=base_lon + progress * _PATH_SPAN_DEGREES,
                    diagnostic_code=code,
                )
            )
        return samples

    def current(self) -> TelemetrySample:
        """Return a single synthetic sample for "now"."""
        return self.generate(1)[0]
