"""Tests for the pydantic entity models."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from pycardata.fixtures import SEED_LISTINGS, SEED_WALLET
from pycardata.models import (
    DataType,
    ListingDuration,
    ListingRecord,
    ObdRecord,
    TelemetryMetric,
    TelemetrySample,
    TimeRange,
    WalletState,
)

# ------------------------------------------------------------------
# TelemetrySample
# ------------------------------------------------------------------


class TestTelemetrySample:
    PAYLOAD: dict = {
        "timestamp": "2024-03-14T08:07:00.000Z",
        "speed": 23.9,
        "rpm": 2290,
        "fuelLevel": 67.6,
        "engineTemp": 190.76,
        "latitude": 12.977651,
        "longitude": 77.601875,
        "diagnosticCode": "P0171",
    }

    def test_parses_camel_case_keys(self) -> None:
        sample = TelemetrySample.model_validate(self.PAYLOAD)
        assert sample.fuel_level == 67.6
        assert sample.engine_temp == 190.76
        assert sample.diagnostic_code == "P0171"

    def test_json_dict_uses_camel_case_and_drops_absent_code(self) -> None:
        payload = {k: v for k, v in self.PAYLOAD.items() if k != "diagnosticCode"}
        dumped = TelemetrySample.model_validate(payload).to_json_dict()
        assert dumped["fuelLevel"] == 67.6
        assert "diagnosticCode" not in dumped
        assert "fuel_level" not in dumped

    def test_blank_diagnostic_code_is_absent(self) -> None:
        sample = TelemetrySample.model_validate({**self.PAYLOAD, "diagnosticCode": "  "})
        assert sample.diagnostic_code is None

    def test_negative_speed_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TelemetrySample.model_validate({**self.PAYLOAD, "speed": -1})

    def test_invalid_timestamp_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TelemetrySample.model_validate({**self.PAYLOAD, "timestamp": "yesterday"})

    def test_fuel_level_not_clamped(self) -> None:
        sample = TelemetrySample.model_validate({**self.PAYLOAD, "fuelLevel": 104.2})
        assert sample.fuel_level == 104.2

    def test_timestamp_datetime_is_utc(self) -> None:
        sample = TelemetrySample.model_validate(self.PAYLOAD)
        assert sample.timestamp_datetime == datetime(2024, 3, 14, 8, 7, tzinfo=UTC)

    def test_metric_lookup(self) -> None:
        sample = TelemetrySample.model_validate(self.PAYLOAD)
        assert sample.metric(TelemetryMetric.RPM) == 2290
        assert sample.metric("fuelLevel") == 67.6
        with pytest.raises(ValueError):
            sample.metric("torque")

    def test_frozen(self) -> None:
        sample = TelemetrySample.model_validate(self.PAYLOAD)
        with pytest.raises(ValidationError):
            sample.speed = 10  # type: ignore[misc]


def test_time_range_sample_counts() -> None:
    assert TimeRange.HOUR.sample_count == 60
    assert TimeRange.DAY.sample_count == 144
    assert TimeRange.WEEK.sample_count is None


# ------------------------------------------------------------------
# ListingRecord
# ------------------------------------------------------------------


class TestListingRecord:
    def test_seed_catalogue_ids_unique(self) -> None:
        ids = [listing.id for listing in SEED_LISTINGS]
        assert len(ids) == len(set(ids)) == 10

    def test_seed_catalogue_not_shared(self) -> None:
        assert not any(listing.shared for listing in SEED_LISTINGS)

    def test_fuel_data_type_accepted(self) -> None:
        fuel = next(listing for listing in SEED_LISTINGS if listing.id == "5")
        assert fuel.data_type is DataType.FUEL
        assert fuel.data_type_label == "Fuel Data"

    def test_round_trip_through_camel_case_json(self) -> None:
        listing = SEED_LISTINGS[0]
        dumped = listing.to_json_dict()
        assert dumped["dataType"] == "speed"
        assert dumped["providerRating"] == 4.7
        assert dumped["totalSold"] == 136
        assert ListingRecord.model_validate(dumped) == listing

    def test_unknown_data_type_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ListingRecord.model_validate({**SEED_LISTINGS[0].to_json_dict(), "dataType": "weather"})

    def test_rating_bounds(self) -> None:
        with pytest.raises(ValidationError):
            ListingRecord.model_validate({**SEED_LISTINGS[0].to_json_dict(), "providerRating": 5.5})

    def test_recency_key(self) -> None:
        listing = SEED_LISTINGS[9]
        assert listing.recency_key == 10
        assert listing.model_copy(update={"id": "abc"}).recency_key == -1

    def test_daily_rate_and_suffix(self) -> None:
        listing = SEED_LISTINGS[2]
        assert listing.daily_rate == pytest.approx(0.4)
        assert listing.duration is ListingDuration.MONTHLY
        assert listing.duration_suffix == "/month"
        assert ListingDuration.ONCE.suffix == " (one-time)"


# ------------------------------------------------------------------
# WalletState
# ------------------------------------------------------------------


class TestWalletState:
    def test_seed_wallet(self) -> None:
        assert SEED_WALLET.balance == 25.75
        assert SEED_WALLET.earnings == 12.25
        assert SEED_WALLET.sharing_active is False
        assert SEED_WALLET.to_json_dict()["sharingActive"] is False

    def test_credit_adds_to_balance_and_earnings(self) -> None:
        wallet = SEED_WALLET.credit(1.5)
        assert wallet.balance == pytest.approx(27.25)
        assert wallet.earnings == pytest.approx(13.75)
        assert SEED_WALLET.balance == 25.75

    def test_negative_credit_rejected(self) -> None:
        with pytest.raises(ValueError):
            SEED_WALLET.credit(-1)

    def test_parses_camel_case(self) -> None:
        wallet = WalletState.model_validate({"address": "0xabc", "balance": 1, "earnings": 2, "sharingActive": True})
        assert wallet.sharing_active is True


# ------------------------------------------------------------------
# ObdRecord
# ------------------------------------------------------------------


class TestObdRecord:
    RAW: dict = {
        "timestamp": "2024-03-14T08:00:00Z",
        "speed_kmph": 100.0,
        "engine_rpm": 2500,
        "fuel_level_pct": 55.5,
        "engine_temp_c": 90.0,
        "lat": 12.97,
        "lon": 77.59,
        "dtc_code": "",
    }

    def test_converts_units(self) -> None:
        sample = ObdRecord.model_validate(self.RAW).to_sample()
        assert sample.speed == pytest.approx(62.1371)
        assert sample.engine_temp == pytest.approx(194.0)
        assert sample.rpm == 2500
        assert sample.fuel_level == 55.5
        assert sample.latitude == 12.97
        assert sample.longitude == 77.59

    def test_empty_dtc_code_is_absent(self) -> None:
        assert ObdRecord.model_validate(self.RAW).to_sample().diagnostic_code is None

    def test_dtc_code_kept(self) -> None:
        record = ObdRecord.model_validate({**self.RAW, "dtc_code": "P0420"})
        assert record.to_sample().diagnostic_code == "P0420"

    def test_numeric_strings_coerced(self) -> None:
        record = ObdRecord.model_validate({**self.RAW, "speed_kmph": "50", "engine_temp_c": "0"})
        assert record.to_sample().engine_temp == pytest.approx(32.0)

    @pytest.mark.parametrize("field", ["speed_kmph", "engine_rpm", "lat", "engine_temp_c"])
    def test_placeholder_in_required_field_rejected(self, field: str) -> None:
        with pytest.raises(ValidationError):
            ObdRecord.model_validate({**self.RAW, field: "--"})

    def test_missing_field_rejected(self) -> None:
        raw = dict(self.RAW)
        del raw["fuel_level_pct"]
        with pytest.raises(ValidationError):
            ObdRecord.model_validate(raw)

    def test_out_of_range_latitude_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ObdRecord.model_validate({**self.RAW, "lat": 123.0})
