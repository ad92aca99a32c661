"""Utility functions for statement-analytics."""

from statement_analytics.utils.parsing import (
    AmountToken,
    clean_description,
    find_amount_tokens,
    find_date_token,
    normalize_text,
    parse_amount,
    parse_date,
    read_file,
    select_amount,
)

__all__ = [
    "AmountToken",
    "find_date_token",
    "parse_date",
    "find_amount_tokens",
    "select_amount",
    "parse_amount",
    "clean_description",
    "normalize_text",
    "read_file",
]
