"""Helper utility functions."""

import re

CURRENCY_SYMBOLS = {"INR": "₹", "USD": "$", "EUR": "€", "GBP": "£"}

_UNITS = {
    "k": 1_000,
    "thousand": 1_000,
    "lakh": 100_000,
    "lakhs": 100_000,
    "lac": 100_000,
    "m": 1_000_000,
    "mn": 1_000_000,
    "million": 1_000_000,
    "cr": 10_000_000,
    "crore": 10_000_000,
    "crores": 10_000_000,
}
_STRIP_PATTERN = re.compile(r"[₹$€£,\s]|\b(?:inr|usd|eur|gbp|rs)\b\.?", re.IGNORECASE)
_AMOUNT_PATTERN = re.compile(r"(\d+(?:\.\d+)?)([a-z]*)(?:/-)?")


def parse_price(value: str | float | int | None) -> float | None:
    """Extract a numeric amount from a currency string.

    Understands currency symbols, thousands separators (including the
    Indian 5,00,000 grouping) and the ``k``, ``m``, ``lakh`` and ``crore``
    units. Any other trailing text makes the amount unreadable.

    Returns:
        The amount, or None if nothing numeric could be read.
    """
    if value is None:
        return None
    if isinstance(value, int | float):
        return float(value)

    cleaned = _STRIP_PATTERN.sub("", value.lower())
    match = _AMOUNT_PATTERN.fullmatch(cleaned)
    if not match:
        return None
    number, unit = match.groups()
    if unit and unit not in _UNITS:
        return None
    return float(number) * _UNITS.get(unit, 1)


def group_indian(whole: int) -> str:
    """Group digits the Indian way: 12,00,000."""
    digits = str(whole)
    head, groups = digits[:-3], [digits[-3:]]
    while head:
        groups.insert(0, head[-2:])
        head = head[:-2]
    return ",".join(groups)


def format_price(amount: float, currency: str = "INR") -> str:
    """Format an amount with its currency symbol.

    INR amounts use lakh/crore digit grouping.
    """
    currency = currency.upper()
    symbol = CURRENCY_SYMBOLS.get(currency, f"{currency} ")
    whole, cents = f"{abs(amount):.2f}".split(".")
    grouped = group_indian(int(whole)) if currency == "INR" else f"{int(whole):,}"
    sign = "-" if amount < 0 else ""
    fraction = "" if cents == "00" else f".{cents}"
    return f"{sign}{symbol}{grouped}{fraction}"


def format_duration_days(days: int) -> str:
    """Render a delivery window: days up to a week, rounded weeks beyond."""
    if days <= 7:
        return f"{days} days"
    return f"{round(days / 7)} weeks"


def format_risk_level(score: float) -> tuple[str, str]:
    """Convert risk score to level and color.

    Returns:
        Tuple of (level_name, color_code)
    """
    if score < 0.2:
        return "Low", "green"
    elif score < 0.4:
        return "Moderate", "yellow"
    elif score < 0.6:
        return "Elevated", "orange"
    elif score < 0.8:
        return "High", "red"
    else:
        return "Critical", "darkred"


def clamp(value: float, lower: float = 0.0, upper: float = 1.0) -> float:
    """Bound a value to [lower, upper]."""
    return max(lower, min(upper, value))


def mean(values: list[float]) -> float:
    """Arithmetic mean; callers guarantee a non-empty list."""
    return sum(values) / len(values)
