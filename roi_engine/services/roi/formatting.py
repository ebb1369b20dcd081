"""
Display formatting for formula traces and tooltips.

Nothing here feeds back into a total; engine figures stay unrounded and
are only rounded when rendered into text.
"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from roi_engine.models.enums import BillingPeriod

CURRENCY_SYMBOLS: dict[str, str] = {
    "GBP": "£",
    "USD": "$",
    "EUR": "€",
    "CAD": "C$",
    "AUD": "A$",
    "JPY": "¥",
    "CHF": "CHF",
    "CNY": "¥",
    "INR": "₹",
}

_PERIOD_LABELS: dict[str, str] = {
    BillingPeriod.MONTHLY.value: "monthly",
    BillingPeriod.QUARTERLY.value: "quarterly",
    BillingPeriod.YEARLY.value: "12 months",
    BillingPeriod.TWENTY_FOUR_MONTHS.value: "24 months",
}


def currency_symbol(currency_code: str | None) -> str:
    """Symbol for a currency code; unknown codes are echoed back."""
    if not currency_code:
        return ""
    return CURRENCY_SYMBOLS.get(currency_code.upper(), currency_code)


def _quantize(value: Decimal, decimals: int) -> Decimal:
    exponent = Decimal(1).scaleb(-decimals)
    return Decimal(value).quantize(exponent, rounding=ROUND_HALF_UP)


def format_currency(value: Decimal | int | float, currency_code: str = "GBP", decimals: int = 0) -> str:
    """
    Format a money amount with symbol and thousands separators.

    Examples:
        format_currency(Decimal("1234.5")) -> "£1,235"
        format_currency(Decimal("-80"), "USD") -> "-$80"
        format_currency(Decimal("25"), "GBP", decimals=2) -> "£25.00"
    """
    symbol = currency_symbol(currency_code)
    rounded = _quantize(Decimal(str(value)), decimals)
    formatted = f"{abs(rounded):,.{decimals}f}"
    if rounded < 0:
        return f"-{symbol}{formatted}"
    return f"{symbol}{formatted}"


def format_quantity(value: Decimal | int, decimals: int = 2) -> str:
    """Integral values without decimals, anything else fixed-point."""
    value = Decimal(value)
    if value == value.to_integral_value():
        return str(int(value))
    return f"{_quantize(value, decimals):.{decimals}f}"


def format_fixed(value: Decimal | int, decimals: int = 2) -> str:
    """Always fixed-point, e.g. '2.00 weeks'."""
    return f"{_quantize(Decimal(value), decimals):.{decimals}f}"


def format_hours(minutes: Decimal | int | None) -> str:
    """
    Render a minute count as hours and minutes.

    Examples:
        0 -> "0h", 45 -> "45m", 120 -> "2h", 125 -> "2h 5m"
    """
    if not minutes:
        return "0h"
    total = int(Decimal(minutes))
    hours, mins = divmod(total, 60)
    if hours == 0:
        return f"{mins}m"
    if mins == 0:
        return f"{hours}h"
    return f"{hours}h {mins}m"


def format_period_display(period: BillingPeriod | str | None) -> str:
    if period is None:
        return ""
    key = period.value if isinstance(period, BillingPeriod) else str(period)
    return _PERIOD_LABELS.get(key, key)


def format_date(value: date | None) -> str:
    """'8 Dec 2025' style; empty string for no date."""
    if value is None:
        return ""
    return f"{value.day} {value.strftime('%b')} {value.year}"


def pluralize(count: Decimal | int, word: str, plural: str | None = None) -> str:
    """Pick singular or plural form; only exactly one is singular."""
    if Decimal(count) == 1:
        return word
    return plural or f"{word}s"
