#!/usr/bin/env python3
"""Generate a synthetic 24h OBD dataset in the recorder's raw format.

Records use km/h, °C and snake_case keys, one per minute, so the file
can be fed to ``CARDATA_OBD_DATA_PATH`` like a real recording.

Usage
-----
::

    python scripts/generate_obd_dataset.py --output synthetic_obd_data_24h.json
    python scripts/generate_obd_dataset.py --minutes 120 --seed 7 --start 2024-03-14T08:00:00Z
"""

from __future__ import annotations

import argparse
import json
import math
import random
import sys
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pycardata._constants import DIAGNOSTIC_CODES, MAX_OBD_SAMPLES  # noqa: E402

# Bangalore city centre.
START_LAT = 12.971599
START_LON = 77.594566

AMBIENT_TEMP_C = 28.0
OPERATING_TEMP_C = 90.0


def _drive_phase(minute: int) -> str:
    """Commute pattern by time of day (minute 0 = start of recording)."""
    hour = (minute // 60) % 24
    if hour in (8, 9, 18, 19):
        return "commute"
    if 10 <= hour < 18 and minute % 90 < 20:
        return "errand"
    return "parked"


def _speed_for(phase: str, minute: int, rng: random.Random) -> float:
    if phase == "parked":
        return 0.0
    cruise = 38.0 if phase == "commute" else 24.0
    stop_and_go = 14.0 * math.sin(minute / 3)
    return round(max(0.0, cruise + stop_and_go + rng.gauss(0, 4)), 1)


def generate(minutes: int, start: datetime, seed: int | None) -> list[dict[str, Any]]:
    rng = random.Random(seed)
    lat, lon = START_LAT, START_LON
    fuel = 72.0
    engine_temp = AMBIENT_TEMP_C
    records: list[dict[str, Any]] = []

    for minute in range(minutes):
        phase = _drive_phase(minute)
        speed = _speed_for(phase, minute, rng)
        moving = speed > 0

        if moving:
            rpm = round(800 + speed * 42 + rng.gauss(0, 120))
            engine_temp += (OPERATING_TEMP_C - engine_temp) * 0.25
            fuel -= speed * 0.0045
            heading = rng.uniform(0, 2 * math.pi)
            # km travelled in one minute, ~111 km per degree.
            step = speed / 60 / 111.0
            lat += step * math.cos(heading)
            lon += step * math.sin(heading)
        else:
            rpm = 0
            engine_temp += (AMBIENT_TEMP_C - engine_temp) * 0.05

        if fuel < 12:
            fuel = 68.0 + rng.uniform(0, 10)

        dtc = rng.choice(DIAGNOSTIC_CODES) if moving and rng.random() < 0.02 else ""
        records.append(
            {
                "timestamp": (start + timedelta(minutes=minute)).isoformat().replace("+00:00", "Z"),
                "speed_kmph": speed,
                "engine_rpm": max(0, rpm),
                "fuel_level_pct": round(fuel, 2),
                "engine_temp_c": round(engine_temp + rng.gauss(0, 0.4), 1),
                "lat": round(lat, 6),
                "lon": round(lon, 6),
                "dtc_code": dtc,
            }
        )
    return records


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate a synthetic OBD dataset")
    parser.add_argument("--output", "-o", default="synthetic_obd_data_24h.json", help="Output JSON file")
    parser.add_argument("--minutes", type=int, default=MAX_OBD_SAMPLES, help="Number of one-minute records")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument(
        "--start",
        default=None,
        help="ISO-8601 start time (default: 24h before now, UTC)",
    )
    args = parser.parse_args()

    if args.minutes <= 0:
        parser.error("--minutes must be positive")
    if args.start:
        start = datetime.fromisoformat(args.start)
        if start.tzinfo is None:
            start = start.replace(tzinfo=UTC)
    else:
        start = datetime.now(UTC).replace(second=0, microsecond=0) - timedelta(minutes=args.minutes)

    records = generate(args.minutes, start, args.seed)
    Path(args.output).write_text(json.dumps(records, indent=1), encoding="utf-8")
    print(f"Wrote {len(records)} records to {args.output}")


if __name__ == "__main__":
    main()
