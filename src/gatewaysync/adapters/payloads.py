"""Field normalizers shared by the inbound payload schemas."""

from __future__ import annotations

import math


def blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def truncate_to_int(value: object) -> object:
    """Drop the fractional part of numeric values reported as floats."""

    if isinstance(value, float) and math.isfinite(value):
        return int(value)
    return value
