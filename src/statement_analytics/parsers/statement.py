"""Whole-statement parser that folds line results into a summary."""

import logging

from statement_analytics.models import ParseResult, ParsingSummary, Transaction
from statement_analytics.parsers.line import LineParser, ParsedLine
from statement_analytics.rules import ParserRules

logger = logging.getLogger(__name__)

MAX_SKIPPED_EXAMPLES = 5


class StatementParser:
    """
    Extract transactions from the normalized text of one statement.

    Every non-empty line is parsed independently. Lines that cannot be
    turned into a transaction are counted and the first few are kept
    verbatim in the summary, so a statement never fails as a whole.

    Usage:
        parser = StatementParser()
        result = parser.parse(text, statement_id="2024-01-hdfc")
        print(result.summary.transactions_extracted)
    """

    def __init__(
        self,
        rules: ParserRules | None = None,
        max_skipped_examples: int = MAX_SKIPPED_EXAMPLES,
    ) -> None:
        """
        Initialize parser.

        Args:
            rules: Rule set for categorization and type inference
            max_skipped_examples: How many skipped lines to keep as samples
        """
        self.line_parser = LineParser(rules)
        self.max_skipped_examples = max_skipped_examples

    def parse(self, raw_text: str | None, statement_id: str) -> ParseResult:
        """
        Parse statement text into transactions.

        Args:
            raw_text: Normalized statement text, one record per line
            statement_id: Identifier stamped on every transaction

        Returns:
            ParseResult with transactions in line order and the summary
        """
        lines = [line.strip() for line in (raw_text or "").split("\n")]
        lines = [line for line in lines if line]

        transactions: list[Transaction] = []
        skipped = 0
        examples: list[str] = []

        for line in lines:
            result = self.line_parser.parse(line, statement_id)
            if isinstance(result, ParsedLine):
                transactions.append(result.transaction)
                continue

            skipped += 1
            if len(examples) < self.max_skipped_examples:
                examples.append(line)
            logger.debug("Skipped line (%s): %r", result.reason.value, line)

        summary = ParsingSummary(
            lines_scanned=len(lines),
            transactions_extracted=len(transactions),
            skipped_lines=skipped,
            examples_of_skipped=tuple(examples),
        )
        logger.info(
            "Statement %s: %d lines, %d transactions, %d skipped",
            statement_id,
            summary.lines_scanned,
            summary.transactions_extracted,
            summary.skipped_lines,
        )
        return ParseResult(transactions=tuple(transactions), summary=summary)


def parse_statement(
    raw_text: str | None,
    statement_id: str,
    rules: ParserRules | None = None,
) -> ParseResult:
    """Parse one statement with the given (or default) rule set."""
    return StatementParser(rules).parse(raw_text, statement_id)
