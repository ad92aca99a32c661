"""statement-analytics - Extract transactions and analytics from statement text."""

import logging

from statement_analytics.analytics import compute_analytics
from statement_analytics.models import (
    AnalyticsReport,
    ParseResult,
    ParsingSummary,
    Transaction,
    TransactionType,
)
from statement_analytics.parsers import StatementParser, parse_statement
from statement_analytics.processor import StatementProcessor
from statement_analytics.rules import DEFAULT_RULES, ParserRules

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
__all__ = [
    "AnalyticsReport",
    "DEFAULT_RULES",
    "ParseResult",
    "ParserRules",
    "ParsingSummary",
    "StatementParser",
    "StatementProcessor",
    "Transaction",
    "TransactionType",
    "compute_analytics",
    "parse_statement",
]
