"""Normalization helpers.

Centralizes defensive parsing of API and stream values.
"""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Any


def safe_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return float(value)
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def safe_int(value: Any) -> int | None:
    parsed = safe_float(value)
    if parsed is None:
        return None
    return int(parsed)


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text else None


def format_decimal(value: float) -> str:
    """Format *value* in its shortest plain decimal form (``72.0`` -> ``"72"``).

    Never uses exponent notation: ``1e-05`` -> ``"0.00001"``.
    """
    return format(Decimal(repr(float(value))).normalize(), "f")
