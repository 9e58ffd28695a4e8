#!/usr/bin/env python3
"""Dump everything the pycardata service exposes.

Prints the current sample, the summary of the default history window,
per-metric chart statistics, the marketplace catalogue and the wallet.

Usage
-----
Optionally set environment variables and run::

    export CARDATA_STORE_PATH="~/.cardata/store.json"
    export CARDATA_USE_REAL_DATA=1
    python scripts/dump_all.py

Options::

    --json                 Output as machine-readable JSON
    --output FILE          Write JSON output to FILE instead of stdout
    --sort CRITERION       Listing order: recent, popular or price
    --range RANGE          Chart window: hour, day or week
    --toggle-source        Flip the data source before dumping
    --toggle-listing ID    Flip sharing for listing ID before dumping
    --earn                 Simulate one earnings payout before dumping
    --reset                Clear all persisted state first
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pycardata import CarDataConfig, CarDataService, SortCriterion, TelemetryMetric, TimeRange  # noqa: E402
from pycardata.aggregation import diagnostic_codes  # noqa: E402

# ── helpers ──────────────────────────────────────────────────


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _format_field(key: str, value: Any, indent: int = 2) -> str:
    prefix = " " * indent
    if isinstance(value, float):
        return f"{prefix}{key}: {value:.2f}"
    if isinstance(value, dict):
        return f"{prefix}{key}: <dict with {len(value)} keys>"
    return f"{prefix}{key}: {value}"


def _print_model(name: str, data: dict[str, Any], out: list[str]) -> None:
    out.append(_section(name))
    for key, value in data.items():
        out.append(_format_field(key, value))


# ── main ─────────────────────────────────────────────────────


async def dump(service: CarDataService, *, sort: str, time_range: str) -> tuple[dict[str, Any], list[str]]:
    out: list[str] = []
    result: dict[str, Any] = {"timestamp": datetime.now(UTC).isoformat()}

    real = await service.is_using_real_data()
    result["using_real_data"] = real
    out.append(_section("pycardata dump_all"))
    out.append(f"  time      : {result['timestamp']}")
    out.append(f"  source    : {'recorded OBD data' if real else 'synthetic data'}")

    current = await service.get_current_vehicle_data()
    result["current"] = current.to_json_dict()
    _print_model("CURRENT SAMPLE", result["current"], out)

    summary = await service.get_data_summary()
    result["summary"] = summary.to_json_dict()
    _print_model("SUMMARY", result["summary"], out)

    history = await service.get_historical_data()
    codes = diagnostic_codes(history)
    result["diagnostic_codes"] = codes
    out.append(_section("DIAGNOSTIC CODES"))
    out.extend(f"  {code}: {count}" for code, count in codes.items())
    if not codes:
        out.append("  (none)")

    result["chart"] = {}
    out.append(_section(f"CHART STATS ({time_range})"))
    for metric in TelemetryMetric:
        stats = await service.get_chart_stats(metric, time_range)
        result["chart"][metric.value] = stats.to_json_dict()
        out.append(f"  {metric.value:<11} min {stats.minimum:9.2f}  max {stats.maximum:9.2f}  avg {stats.average:9.2f}")

    listings = await service.get_sorted_listings(sort)
    result["listings"] = [listing.to_json_dict() for listing in listings]
    out.append(_section(f"LISTINGS (by {sort})"))
    for listing in listings:
        marker = "*" if listing.shared else " "
        out.append(
            f"  {marker} [{listing.id:>3}] {listing.title:<32} "
            f"${listing.price:.2f}{listing.duration_suffix:<12} {listing.data_type_label:<14} sold {listing.total_sold}"
        )

    wallet = await service.get_user_wallet()
    result["wallet"] = wallet.to_json_dict()
    _print_model("WALLET", result["wallet"], out)
    low, high = await service.wallet.projected_daily_earnings()
    result["projected_daily_earnings"] = [low, high]
    out.append(f"  next payout: ${low:.2f} - ${high:.2f}")

    return result, out


async def main() -> None:
    parser = argparse.ArgumentParser(description="Dump all pycardata service data")
    parser.add_argument("--json", dest="json_mode", action="store_true", help="Output as JSON")
    parser.add_argument("--output", "-o", help="Write JSON output to file")
    parser.add_argument("--sort", choices=[c.value for c in SortCriterion], default=SortCriterion.RECENT.value)
    parser.add_argument("--range", dest="time_range", choices=[r.value for r in TimeRange], default=TimeRange.HOUR.value)
    parser.add_argument("--toggle-source", action="store_true", help="Flip the data source first")
    parser.add_argument("--toggle-listing", metavar="ID", help="Flip sharing for a listing first")
    parser.add_argument("--earn", action="store_true", help="Simulate one earnings payout first")
    parser.add_argument("--reset", action="store_true", help="Clear all persisted state first")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    config = CarDataConfig.from_env()
    async with CarDataService(config) as service:
        if args.reset:
            await service.reset_all_data()
        if args.toggle_source:
            await service.toggle_data_source()
        if args.toggle_listing:
            if not await service.toggle_data_sharing(args.toggle_listing):
                print(f"Failed to toggle sharing for listing {args.toggle_listing}", file=sys.stderr)
        if args.earn:
            earned = await service.simulate_earnings()
            if earned > 0:
                print(f"You earned ${earned:.2f} from your shared data!", file=sys.stderr)
            else:
                print("No new earnings. Start sharing your data to earn rewards.", file=sys.stderr)

        result, out = await dump(service, sort=args.sort, time_range=args.time_range)

    if args.json_mode or args.output:
        payload = json.dumps(result, indent=2, default=str, ensure_ascii=False)
        if args.output:
            Path(args.output).write_text(payload, encoding="utf-8")
            print(f"JSON written to {args.output}", file=sys.stderr)
        else:
            print(payload)
    else:
        print("\n".join(out))


if __name__ == "__main__":
    asyncio.run(main())
