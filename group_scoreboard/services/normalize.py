"""Lenient coercion rules applied to client-supplied participant data.

Clients push whatever their game loop has at hand, so these helpers never
raise: unusable input collapses to a documented fallback instead.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any

NAME_MAX_LENGTH = 28

Number = int | float


def clean_name(value: Any) -> str:
    if not value:
        return ""
    return str(value).strip()[:NAME_MAX_LENGTH]


def clean_id(value: Any) -> str:
    if not value:
        return ""
    return str(value).strip()


def _integral(number: float) -> Number:
    return int(number) if number.is_integer() else number


def safe_number(value: Any, fallback: Number = 0) -> Number:
    """Coerce ``value`` to a finite number, or return ``fallback``.

    ``None`` and blank strings count as zero; booleans count as 0/1.
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        try:
            number = float(text)
        except ValueError:
            return fallback
    elif isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return fallback
    else:
        return fallback

    if not math.isfinite(number):
        return fallback
    return _integral(number)


def non_negative(value: Any, fallback: Number = 0) -> Number:
    return max(0, safe_number(value, fallback))


def coerce_label(value: Any) -> str:
    if value is None or value is False or value == 0 or value == "":
        return ""
    if value is True:
        return "true"
    if isinstance(value, float):
        if not math.isfinite(value):
            return ""
        if value.is_integer():
            return str(int(value))
    return str(value)


def now_iso(moment: datetime | None = None) -> str:
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
