"""Main processor class that orchestrates reading, parsing and analytics."""

import csv
import json
import logging
import uuid
from dataclasses import dataclass
from pathlib import Path

from statement_analytics.analytics import compute_analytics
from statement_analytics.models import AnalyticsReport, ParseResult, Transaction
from statement_analytics.parsers import StatementParser
from statement_analytics.rules import ParserRules
from statement_analytics.utils import normalize_text, read_file

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = [".txt", ".xls", ".xlsx"]


@dataclass(frozen=True)
class StatementResult:
    """Outcome of processing one statement file."""

    statement_id: str
    source: Path
    parsed: ParseResult
    report: AnalyticsReport

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return self.parsed.transactions


def new_statement_id() -> str:
    """Generate a fresh statement identifier."""
    return str(uuid.uuid4())


class StatementProcessor:
    """
    Main class for turning statement files into transactions and reports.

    Usage:
        processor = StatementProcessor()
        results = processor.process_files([Path("jan.txt"), Path("feb.xls")])
        processor.write_csv(results[0].transactions, Path("output.csv"))
    """

    def __init__(self, rules: ParserRules | None = None) -> None:
        """
        Initialize processor.

        Args:
            rules: Parser rule set (defaults to the built-in rules)
        """
        self.parser = StatementParser(rules)
        self._errors: list[tuple[Path, str]] = []

    @property
    def errors(self) -> list[tuple[Path, str]]:
        """Get list of (filepath, error_message) for failed files."""
        return self._errors.copy()

    def process_text(self, text: str, statement_id: str, source: Path) -> StatementResult:
        """Normalize, parse and aggregate already-extracted statement text."""
        parsed = self.parser.parse(normalize_text(text), statement_id)
        report = compute_analytics(statement_id, parsed.transactions, parsed.summary)
        return StatementResult(
            statement_id=statement_id,
            source=source,
            parsed=parsed,
            report=report,
        )

    def process_file(
        self, filepath: Path, statement_id: str | None = None
    ) -> StatementResult | None:
        """
        Process a single statement file.

        Args:
            filepath: Path to the file
            statement_id: Identifier for the statement (generated if omitted)

        Returns:
            StatementResult, or None if the file could not be read
        """
        try:
            content = read_file(filepath)
        except ValueError as e:
            logger.warning("Skipping %s: %s", filepath, e)
            self._errors.append((filepath, str(e)))
            return None

        result = self.process_text(content, statement_id or new_statement_id(), filepath)
        if result.parsed.is_empty:
            self._errors.append((filepath, "No transactions found"))
        return result

    def process_files(self, filepaths: list[Path]) -> list[StatementResult]:
        """
        Process multiple files, one statement each.

        Args:
            filepaths: List of file paths

        Returns:
            Results for every file that could be read, in input order
        """
        self._errors = []
        results: list[StatementResult] = []

        for filepath in filepaths:
            result = self.process_file(filepath)
            if result is not None:
                results.append(result)

        return results

    def process_directory(
        self, directory: Path, extensions: list[str] | None = None
    ) -> list[StatementResult]:
        """
        Process all matching files in a directory.

        Args:
            directory: Directory path
            extensions: File extensions to include (default: txt, xls, xlsx)

        Returns:
            List of StatementResult objects
        """
        return self.process_files(collect_files(directory, extensions))

    @staticmethod
    def write_csv(
        transactions: list[Transaction] | tuple[Transaction, ...],
        output_path: Path,
        delimiter: str = ",",
    ) -> None:
        """
        Write transactions to CSV file.

        Args:
            transactions: List of transactions
            output_path: Output file path
            delimiter: CSV delimiter (default comma)
        """
        with open(output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f, delimiter=delimiter)
            writer.writerow(["Date", "Description", "Amount", "Type", "Category", "Confidence"])
            for tx in transactions:
                writer.writerow([
                    tx.date,
                    tx.description,
                    str(tx.amount),
                    tx.type.value,
                    tx.category,
                    f"{tx.confidence:.2f}",
                ])

    @staticmethod
    def write_report(results: list[StatementResult], output_path: Path) -> None:
        """
        Write analytics reports for all statements to a JSON file.

        Args:
            results: Processed statements
            output_path: Output file path
        """
        payload = {
            "statements": [
                {"source": str(result.source), **result.report.to_dict()}
                for result in results
            ]
        }
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
            f.write("\n")


def collect_files(directory: Path, extensions: list[str] | None = None) -> list[Path]:
    """List statement files in a directory, sorted by name."""
    if extensions is None:
        extensions = SUPPORTED_EXTENSIONS

    files: set[Path] = set()
    for ext in extensions:
        files.update(directory.glob(f"*{ext}"))
        files.update(directory.glob(f"*{ext.upper()}"))

    return sorted(files)
