"""
Money helpers.

All amounts are integers in the currency's minor unit (paise for INR).
Nothing here touches floating point.
"""

from numbers import Integral

from app.config.settings import settings


def _require_int(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise TypeError(f"{name} must be an integer amount in minor units, got {type(value).__name__}")
    return int(value)


def percent_of(amount: int, percent: int) -> int:
    """
    Return ``percent`` % of ``amount`` rounded half away from zero.

    For non-negative inputs this is ``floor(amount * percent / 100 + 0.5)``,
    computed in integer arithmetic.
    """
    amount = _require_int("amount", amount)
    percent = _require_int("percent", percent)

    product = amount * percent
    if product >= 0:
        return (product + 50) // 100
    return -((-product + 50) // 100)


def clamp(value: int, lower: int, upper: int) -> int:
    """Clamp ``value`` into ``[lower, upper]``."""
    return max(lower, min(value, upper))


def net_amount(gross_amount: int, scholarship_amount: int = 0, custom_discount_amount: int = 0) -> int:
    """Payable amount after discounts, floored at zero."""
    return max(0, gross_amount - scholarship_amount - custom_discount_amount)


def format_minor_units(amount: int, currency: str = None, minor_units: int = None) -> str:
    """
    Render a minor-unit amount for display, e.g. ``50000`` -> ``"INR 500.00"``.

    Currencies without a minor unit (``minor_units == 1``) render whole
    amounts only: ``50000`` -> ``"JPY 50,000"``.
    """
    currency = currency or settings.CURRENCY
    units = minor_units or settings.CURRENCY_MINOR_UNITS
    sign = "-" if amount < 0 else ""
    major, minor = divmod(abs(amount), units)
    if units == 1:
        return f"{currency} {sign}{major:,}"
    width = len(str(units - 1))
    return f"{currency} {sign}{major:,}.{minor:0{width}d}"
