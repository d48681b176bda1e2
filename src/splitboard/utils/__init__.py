"""Utility functions for splitboard."""

from splitboard.utils.amount_format import (
    format_amount_with_symbol,
    format_plain_amount,
    parse_percentage,
)
from splitboard.utils.config import Config, load_config
from splitboard.utils.logger import setup_logging

__all__ = [
    "format_amount_with_symbol",
    "format_plain_amount",
    "parse_percentage",
    "Config",
    "load_config",
    "setup_logging",
]
