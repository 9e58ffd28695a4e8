"""Normalization helpers.

Centralizes defensive parsing and placeholder handling for raw dataset
records.
"""

from __future__ import annotations

import math
from typing import Any

# Placeholder strings recorders emit for "no reading".
_PLACEHOLDERS = frozenset({"", "--", "NaN", "nan", "null", "None"})


def is_placeholder(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and value.strip() in _PLACEHOLDERS:
        return True
    return isinstance(value, float) and math.isnan(value)


def safe_float(value: Any) -> float | None:
    if is_placeholder(value) or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def safe_str(value: Any) -> str | None:
    if is_placeholder(value):
        return None
    text = str(value).strip()
    return text if text else None
