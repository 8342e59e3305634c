"""Formatting helpers for amounts shown to the user."""

from decimal import Decimal
from typing import Union

_CURRENCY_SYMBOLS = {
    "INR": "₹",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
}


def format_currency(amount: Union[Decimal, int, float], currency: str) -> str:
    """Format an amount with thousands separators and two decimals.

    Known currencies use their symbol; anything else is prefixed with its code.

    Example:
        >>> format_currency(Decimal("1234.5"), "USD")
        '$1,234.50'
        >>> format_currency(Decimal("10"), "CHF")
        'CHF 10.00'
    """
    formatted = f"{Decimal(str(amount)):,.2f}"
    symbol = _CURRENCY_SYMBOLS.get(currency.upper())
    if symbol:
        return f"{symbol}{formatted}"
    return f"{currency.upper()} {formatted}"


def format_percentage(value: Decimal) -> str:
    """Format a percentage with no decimals (e.g., '63%')."""
    return f"{value:.0f}%"
