"""Internal constants shared across the library."""

# ------------------------------------------------------------------
# Persistent store keys
# ------------------------------------------------------------------

KEY_CAR_DATA = "car_data"
KEY_LISTINGS = "marketplace_listings"
KEY_USER_WALLET = "user_wallet"
KEY_SHARED_DATA_TYPES = "shared_data_types"
KEY_USE_REAL_DATA = "use_real_data"
KEY_OBD_DATA = "obd_data"

#: Keys removed by a full reset.  ``obd_data`` is a parse cache of the
#: dataset asset and survives resets.
RESET_KEYS: tuple[str, ...] = (
    KEY_CAR_DATA,
    KEY_LISTINGS,
    KEY_USER_WALLET,
    KEY_SHARED_DATA_TYPES,
    KEY_USE_REAL_DATA,
)

FLAG_TRUE = "true"
FLAG_FALSE = "false"

# ------------------------------------------------------------------
# Telemetry
# ------------------------------------------------------------------

DIAGNOSTIC_CODES: tuple[str, ...] = ("P0420", "P0171", "P0301", "P0456", "P0442")
DIAGNOSTIC_PROBABILITY = 0.1

#: Synthetic drives start around downtown San Francisco.
BASE_LATITUDE = 37.7749
BASE_LONGITUDE = -122.4194

#: 24h at one sample per minute.
MAX_OBD_SAMPLES = 1440
DEFAULT_HISTORY_MINUTES = 60

KMPH_TO_MPH = 0.621371


def celsius_to_fahrenheit(temp_c: float) -> float:
    """Convert a °C temperature to °F."""
    return temp_c * 9 / 5 + 32


def kmph_to_mph(speed_kmph: float) -> float:
    """Convert a km/h speed to mph."""
    return speed_kmph * KMPH_TO_MPH


# ------------------------------------------------------------------
# Marketplace
# ------------------------------------------------------------------

#: Listing prices are treated as monthly; earnings accrue per day.
DAYS_PER_PRICE_PERIOD = 30
EARNINGS_MIN_FACTOR = 0.5
EARNINGS_MAX_FACTOR = 1.0
