"""Seed catalogue and wallet written on first access."""

from __future__ import annotations

from pycardata.models.marketplace import DataType, ListingDuration, ListingRecord
from pycardata.models.wallet import WalletState

SEED_WALLET = WalletState(
    address="0x7a4E8d373C70c106A0E056b7087142B03dAd79D3",
    balance=25.75,
    earnings=12.25,
    sharing_active=False,
)

SEED_LISTINGS: tuple[ListingRecord, ...] = (
    ListingRecord(
        id="1",
        title="City Driving Patterns",
        description="Speed and acceleration data from urban driving",
        price=5,
        data_type=DataType.SPEED,
        duration=ListingDuration.WEEKLY,
        provider="UrbanDriver",
        provider_rating=4.7,
        total_sold=136,
    ),
    ListingRecord(
        id="2",
        title="Highway Commute Routes",
        description="GPS tracking data for highway routes",
        price=3.5,
        data_type=DataType.LOCATION,
        duration=ListingDuration.DAILY,
        provider="CommutePro",
        provider_rating=4.2,
        total_sold=89,
    ),
    ListingRecord(
        id="3",
        title="Engine Performance Analytics",
        description="Comprehensive engine data for performance tuning",
        price=12,
        data_type=DataType.FULL,
        duration=ListingDuration.MONTHLY,
        provider="EngineGeek",
        provider_rating=4.9,
        total_sold=215,
    ),
    ListingRecord(
        id="4",
        title="Electric Vehicle Range Data",
        description="Battery performance across different conditions",
        price=7.5,
        data_type=DataType.DIAGNOSTICS,
        duration=ListingDuration.MONTHLY,
        provider="EVInsights",
        provider_rating=4.5,
        total_sold=172,
    ),
    ListingRecord(
        id="5",
        title="Fuel Consumption Patterns",
        description="Detailed fuel usage data for economic analysis",
        price=4.5,
        data_type=DataType.FUEL,
        duration=ListingDuration.WEEKLY,
        provider="EcoDriver",
        provider_rating=4.3,
        total_sold=107,
    ),
    ListingRecord(
        id="6",
        title="Traffic Pattern Analysis",
        description="Time-based traffic flow data from daily commutes",
        price=6.0,
        data_type=DataType.LOCATION,
        duration=ListingDuration.WEEKLY,
        provider="TrafficInsight",
        provider_rating=4.6,
        total_sold=156,
    ),
    ListingRecord(
        id="7",
        title="Diagnostic Alert Data",
        description="Vehicle diagnostic code patterns and frequencies",
        price=8.5,
        data_type=DataType.DIAGNOSTICS,
        duration=ListingDuration.MONTHLY,
        provider="DiagnosticPro",
        provider_rating=4.8,
        total_sold=192,
    ),
    ListingRecord(
        id="8",
        title="Weather Impact Analysis",
        description="Vehicle performance data during various weather conditions",
        price=5.5,
        data_type=DataType.FULL,
        duration=ListingDuration.WEEKLY,
        provider="WeatherDrive",
        provider_rating=4.4,
        total_sold=84,
    ),
    ListingRecord(
        id="9",
        title="Weekend Driving Patterns",
        description="Recreational vs. weekday driving behavior analysis",
        price=3.0,
        data_type=DataType.SPEED,
        duration=ListingDuration.WEEKLY,
        provider="LeisureDrive",
        provider_rating=4.1,
        total_sold=67,
    ),
    ListingRecord(
        id="10",
        title="Car Component Wear Metrics",
        description="Long-term data on component performance and degradation",
        price=9.75,
        data_type=DataType.DIAGNOSTICS,
        duration=ListingDuration.MONTHLY,
        provider="PartPredict",
        provider_rating=4.7,
        total_sold=118,
    ),
)
