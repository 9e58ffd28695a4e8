"""Summary statistics over telemetry windows."""

from __future__ import annotations

from collections.abc import Sequence

from pycardata.models.telemetry import (
    SeriesStats,
    TelemetryMetric,
    TelemetrySample,
    TelemetrySummary,
    TimeRange,
)

_MINUTES_PER_HOUR = 60


def summarize(window: Sequence[TelemetrySample]) -> TelemetrySummary:
    """Aggregate a window sampled once per minute.

    An empty window yields the all-zero summary.  ``fuel_used`` compares
    the first and last samples only and is floored at zero, so refuelling
    inside the window never produces negative consumption.
    """
    if not window:
        return TelemetrySummary.empty()

    speeds = [sample.speed for sample in window]
    rpms = [sample.rpm for sample in window]
    time_active = len(window)
    avg_speed = sum(speeds) / time_active

    return TelemetrySummary(
        avg_speed=avg_speed,
        max_speed=max(speeds),
        avg_rpm=sum(rpms) / time_active,
        max_rpm=max(rpms),
        fuel_used=max(0.0, window[0].fuel_level - window[-1].fuel_level),
        distance_traveled=avg_speed * time_active / _MINUTES_PER_HOUR,
        time_active=time_active,
    )


def metric_values(window: Sequence[TelemetrySample], metric: TelemetryMetric | str) -> list[float]:
    key = TelemetryMetric(metric)
    return [sample.metric(key) for sample in window]


def select_range(window: Sequence[TelemetrySample], time_range: TimeRange | str) -> list[TelemetrySample]:
    """Return the trailing samples covered by *time_range*."""
    count = TimeRange(time_range).sample_count
    if count is None:
        return list(window)
    return list(window[-count:]) if count else []


def series_stats(window: Sequence[TelemetrySample], metric: TelemetryMetric | str) -> SeriesStats:
    key = TelemetryMetric(metric)
    values = metric_values(window, key)
    if not values:
        return SeriesStats(metric=key)
    return SeriesStats(
        metric=key,
        minimum=min(values),
        maximum=max(values),
        average=sum(values) / len(values),
        count=len(values),
    )


def diagnostic_codes(window: Sequence[TelemetrySample]) -> dict[str, int]:
    """Count diagnostic codes, keyed in first-seen order."""
    counts: dict[str, int] = {}
    for sample in window:
        if sample.diagnostic_code:
            counts[sample.diagnostic_code] = counts.get(sample.diagnostic_code, 0) + 1
    return counts
