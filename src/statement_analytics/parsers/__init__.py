"""Statement parsers package."""

from statement_analytics.parsers.line import (
    LineParser,
    LineResult,
    ParsedLine,
    SkippedLine,
    SkipReason,
)
from statement_analytics.parsers.statement import StatementParser, parse_statement

__all__ = [
    "LineParser",
    "LineResult",
    "ParsedLine",
    "SkippedLine",
    "SkipReason",
    "StatementParser",
    "parse_statement",
]
