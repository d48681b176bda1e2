"""Amount and percentage formatting/parsing utilities."""

import re

from splitboard.domain.entities import SymbolPosition


def format_plain_amount(value: float) -> str:
    """Format an amount without grouping or symbol.

    Whole numbers print without decimals; anything else prints with two
    decimals, dropping a trailing ".00" left by rounding.
    """
    if float(value).is_integer():
        return str(int(value))
    formatted = f"{value:.2f}"
    if formatted.endswith(".00"):
        formatted = formatted[:-3]
    return formatted


def format_amount_with_symbol(
    value: float, symbol: str, symbol_position: SymbolPosition = SymbolPosition.PREFIX
) -> str:
    """Format an amount with a currency symbol before or after it."""
    amount = format_plain_amount(value)
    if SymbolPosition(symbol_position) == SymbolPosition.SUFFIX:
        return f"{amount}{symbol}"
    return f"{symbol}{amount}"


def format_percent(value: float) -> str:
    """Format a percentage with one decimal at most (e.g. "33.3%")."""
    formatted = f"{value:.1f}"
    if formatted.endswith(".0"):
        formatted = formatted[:-2]
    return f"{formatted}%"


def parse_percentage(value_str: str) -> float:
    """Parse a percentage string such as "60", "60%" or "12.5 %".

    Raises:
        ValueError: If the string is empty or not a number
    """
    if not value_str or not value_str.strip():
        raise ValueError("Empty percentage string")

    cleaned = re.sub(r"%\s*$", "", value_str.strip()).strip()
    try:
        return float(cleaned)
    except ValueError:
        raise ValueError(f"Could not parse percentage '{value_str}'")
