"""Single-line transaction parser."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from statement_analytics.models import Transaction
from statement_analytics.rules import DEFAULT_RULES, OTHER, ParserRules, confidence_score
from statement_analytics.utils import (
    clean_description,
    find_amount_tokens,
    find_date_token,
    parse_amount,
    parse_date,
    select_amount,
)

logger = logging.getLogger(__name__)


class SkipReason(str, Enum):
    """Why a line did not yield a transaction."""

    NO_DATE = "no-date"
    INVALID_DATE = "invalid-date"
    NO_AMOUNT = "no-amount"
    INVALID_AMOUNT = "invalid-amount"
    ERROR = "error"


@dataclass(frozen=True)
class ParsedLine:
    """A line that produced a transaction."""

    line: str
    transaction: Transaction


@dataclass(frozen=True)
class SkippedLine:
    """A line that was skipped."""

    line: str
    reason: SkipReason


LineResult = ParsedLine | SkippedLine


class LineParser:
    """
    Turn one normalized statement line into a transaction.

    A line needs a recognizable date and at least one amount-like token.
    The description is the text between the two; type, category and
    confidence come from the rule set.

    Usage:
        parser = LineParser()
        result = parser.parse("12/01/2024 SALARY CREDIT 50,000.00", "stmt-1")
        if isinstance(result, ParsedLine):
            print(result.transaction.amount)
    """

    def __init__(self, rules: ParserRules | None = None) -> None:
        self.rules = rules or DEFAULT_RULES

    def parse(self, line: str, statement_id: str) -> LineResult:
        """Parse a trimmed, non-empty line. Never raises."""
        try:
            return self._parse(line, statement_id)
        except Exception:
            logger.warning("Unexpected error parsing line %r", line, exc_info=True)
            return SkippedLine(line, SkipReason.ERROR)

    def _parse(self, line: str, statement_id: str) -> LineResult:
        date_match = find_date_token(line)
        if date_match is None:
            return SkippedLine(line, SkipReason.NO_DATE)

        date_iso = parse_date(date_match.group(0))
        if date_iso is None:
            return SkippedLine(line, SkipReason.INVALID_DATE)

        # Pieces of the date token are never amounts
        candidates = [
            token
            for token in find_amount_tokens(line)
            if not token.overlaps(date_match.start(), date_match.end())
        ]
        token = select_amount(candidates)
        if token is None:
            return SkippedLine(line, SkipReason.NO_AMOUNT)

        amount = parse_amount(token.text)
        if amount is None:
            return SkippedLine(line, SkipReason.INVALID_AMOUNT)

        if token.start >= date_match.end():
            description = line[date_match.end():token.start]
        else:
            # Amount printed before the date: drop both tokens
            first, second = sorted(
                [(date_match.start(), date_match.end()), (token.start, token.end)]
            )
            description = (
                line[: first[0]] + " " + line[first[1]: second[0]] + " " + line[second[1]:]
            )
        description = clean_description(description)

        txn_type = self.rules.classify_type(line, token)
        category = self.rules.categorize(description or line)
        confidence = confidence_score(
            has_date=True,
            has_amount=True,
            has_type=txn_type is not None,
            has_category=category != OTHER,
            description_length=len(description),
        )

        transaction = Transaction(
            statement_id=statement_id,
            date=date_iso,
            description=description,
            amount=abs(amount),
            type=txn_type,
            category=category,
            confidence=confidence,
            raw_line=line,
            created_at=datetime.now(timezone.utc),
        )
        return ParsedLine(line, transaction)
