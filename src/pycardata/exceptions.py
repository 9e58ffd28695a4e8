"""Custom exception hierarchy for pycardata."""

from __future__ import annotations


class CarDataError(Exception):
    """Base exception for all pycardata errors."""


class CarDataConfigError(CarDataError):
    """Invalid or missing configuration."""


class StoreError(CarDataError):
    """Key-value store read or write failure."""

    def __init__(self, message: str, *, key: str = "") -> None:
        self.key = key
        super().__init__(message)


class StoreCorruptedError(StoreError):
    """Stored bytes for a key could not be decoded into the expected shape."""


class AssetError(CarDataError):
    """Telemetry dataset missing, unreadable or not a JSON array."""

    def __init__(self, message: str, *, source: str = "") -> None:
        self.source = source
        super().__init__(message)


class DatasetValidationError(AssetError):
    """Telemetry dataset parsed but contained no usable records."""
