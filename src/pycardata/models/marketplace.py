"""Marketplace listing models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field

from pycardata._constants import DAYS_PER_PRICE_PERIOD
from pycardata.models._base import CarDataBaseModel


class DataType(StrEnum):
    """Category of vehicle data a listing offers.

    ``FUEL`` is used by the seeded catalogue ("Fuel Consumption
    Patterns") and is therefore part of the accepted vocabulary.
    """

    SPEED = "speed"
    LOCATION = "location"
    DIAGNOSTICS = "diagnostics"
    FULL = "full"
    FUEL = "fuel"

    @property
    def label(self) -> str:
        return _DATA_TYPE_LABELS[self]


_DATA_TYPE_LABELS: dict[DataType, str] = {
    DataType.SPEED: "Speed Data",
    DataType.LOCATION: "Location Data",
    DataType.DIAGNOSTICS: "Diagnostics",
    DataType.FULL: "Full Access",
    DataType.FUEL: "Fuel Data",
}


class ListingDuration(StrEnum):
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    ONCE = "once"

    @property
    def suffix(self) -> str:
        """Price suffix shown next to a listing price."""
        return _DURATION_SUFFIXES[self]


_DURATION_SUFFIXES: dict[ListingDuration, str] = {
    ListingDuration.HOURLY: "/hour",
    ListingDuration.DAILY: "/day",
    ListingDuration.WEEKLY: "/week",
    ListingDuration.MONTHLY: "/month",
    ListingDuration.ONCE: " (one-time)",
}


class SortCriterion(StrEnum):
    RECENT = "recent"
    POPULAR = "popular"
    PRICE = "price"


class ListingRecord(CarDataBaseModel):
    """A marketplace offer for a category of the user's data.

    Only ``shared`` is mutated by the user; identity and pricing fields
    are provider-controlled.

    Parameters
    ----------
    id : str
        Unique listing id.  Its numeric value doubles as a recency proxy.
    title : str
        Listing title.
    description : str
        Listing description.
    price : float
        Price in currency units.
    data_type : DataType
        Category of data offered.
    duration : ListingDuration
        Billing period of ``price``.
    provider : str
        Provider display name.
    provider_rating : float
        Provider rating between 0 and 5.
    total_sold : int
        Units sold so far.
    shared : bool
        Whether the user currently shares data into this listing.
    """

    id: str = Field(min_length=1)
    title: str
    description: str = ""
    price: float = Field(ge=0)
    data_type: DataType
    duration: ListingDuration
    provider: str
    provider_rating: float = Field(default=0.0, ge=0, le=5)
    total_sold: int = Field(default=0, ge=0)
    shared: bool = False

    @property
    def recency_key(self) -> int:
        """Numeric value of ``id``; non-numeric ids sort as the oldest."""
        try:
            return int(self.id)
        except ValueError:
            return -1

    @property
    def daily_rate(self) -> float:
        return self.price / DAYS_PER_PRICE_PERIOD

    @property
    def data_type_label(self) -> str:
        return self.data_type.label

    @property
    def duration_suffix(self) -> str:
        return self.duration.suffix
