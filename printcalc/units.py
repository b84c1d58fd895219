import math
from typing import Any


def to_number(value: Any) -> float:
    """Coerce a raw form value to a float; anything unparsable or non-finite is 0."""
    if value is None:
        return 0.0
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def round_money(value: float) -> float:
    return round(value, 2)


def format_money(value: float, symbol: str = "₱") -> str:
    return f"{symbol}{value:,.2f}"


def format_hours(hours: float) -> str:
    hours = max(0.0, to_number(hours))
    whole = int(hours)
    minutes = int(round((hours - whole) * 60))
    if minutes == 60:
        whole, minutes = whole + 1, 0
    return f"{whole}h {minutes:02d}m"
