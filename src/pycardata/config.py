"""Service configuration for pycardata."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from typing import Any

from pycardata._constants import (
    DEFAULT_HISTORY_MINUTES,
    EARNINGS_MAX_FACTOR,
    EARNINGS_MIN_FACTOR,
    MAX_OBD_SAMPLES,
)
from pycardata.exceptions import CarDataConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_number(env: Mapping[str, str], key: str, cast: type) -> Any:
    raw = env.get(key)
    if raw is None:
        return None
    try:
        return cast(raw)
    except ValueError as exc:
        raise CarDataConfigError(f"{key} must be a valid {cast.__name__}, got {raw!r}") from exc


@dataclasses.dataclass(frozen=True)
class CarDataConfig:
    """Service configuration.

    Parameters
    ----------
    store_path : str or None
        Path of the JSON file backing the persistent store.  ``None``
        keeps all state in memory for the lifetime of the service.
    use_real_data : bool
        Data source assumed when the store has no ``use_real_data`` flag
        yet.  Once the flag is toggled the persisted value wins.
    obd_data_path : str or None
        Local JSON file holding a recorded OBD dataset.
    obd_data_url : str or None
        HTTP(S) URL of a recorded OBD dataset.  Only used when
        ``obd_data_path`` is not set.  When neither is set the bundled
        sample dataset is used.
    history_minutes : int
        Default window for historical data and summaries.
    max_obd_samples : int
        Number of leading dataset records considered (24h at 1/minute).
    earnings_min_factor : float
        Lower bound of the per-listing random payout factor.
    earnings_max_factor : float
        Upper bound of the per-listing random payout factor.
    random_seed : int or None
        Seed for the synthetic data and earnings random source.
        ``None`` draws from system entropy.
    http_timeout : float
        Total timeout in seconds when fetching ``obd_data_url``.
    """

    store_path: str | None = None
    use_real_data: bool = False
    obd_data_path: str | None = None
    obd_data_url: str | None = None
    history_minutes: int = DEFAULT_HISTORY_MINUTES
    max_obd_samples: int = MAX_OBD_SAMPLES
    earnings_min_factor: float = EARNINGS_MIN_FACTOR
    earnings_max_factor: float = EARNINGS_MAX_FACTOR
    random_seed: int | None = None
    http_timeout: float = 10.0

    def __post_init__(self) -> None:
        if self.history_minutes <= 0:
            raise CarDataConfigError(f"history_minutes must be positive, got {self.history_minutes}")
        if self.max_obd_samples <= 0:
            raise CarDataConfigError(f"max_obd_samples must be positive, got {self.max_obd_samples}")
        if not 0 <= self.earnings_min_factor <= self.earnings_max_factor:
            raise CarDataConfigError(
                "earnings factors must satisfy 0 <= min <= max, got "
                f"{self.earnings_min_factor} / {self.earnings_max_factor}"
            )
        if self.http_timeout <= 0:
            raise CarDataConfigError(f"http_timeout must be positive, got {self.http_timeout}")

    @classmethod
    def from_env(cls, **overrides: Any) -> CarDataConfig:
        """Create configuration from environment variables.

        Reads optional ``CARDATA_*`` variables.  Explicit keyword
        arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        CarDataConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_STR_MAP = {
            "CARDATA_STORE_PATH": "store_path",
            "CARDATA_OBD_DATA_PATH": "obd_data_path",
            "CARDATA_OBD_DATA_URL": "obd_data_url",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val:
                config_kwargs[field_name] = val

        if "use_real_data" not in overrides:
            config_kwargs["use_real_data"] = _env_bool(env.get("CARDATA_USE_REAL_DATA"), False)

        _ENV_NUMBER_MAP: dict[str, tuple[str, type]] = {
            "CARDATA_HISTORY_MINUTES": ("history_minutes", int),
            "CARDATA_MAX_OBD_SAMPLES": ("max_obd_samples", int),
            "CARDATA_EARNINGS_MIN_FACTOR": ("earnings_min_factor", float),
            "CARDATA_EARNINGS_MAX_FACTOR": ("earnings_max_factor", float),
            "CARDATA_RANDOM_SEED": ("random_seed", int),
            "CARDATA_HTTP_TIMEOUT": ("http_timeout", float),
        }
        for env_key, (field_name, cast) in _ENV_NUMBER_MAP.items():
            if field_name in overrides:
                continue
            value = _env_number(env, env_key, cast)
            if value is not None:
                config_kwargs[field_name] = value

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
