"""Data models for statement transactions and analytics."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any

NO_DESCRIPTION = "(no description)"


class TransactionType(str, Enum):
    """Direction of money movement for a transaction."""

    CREDIT = "credit"
    DEBIT = "debit"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Transaction:
    """Represents a transaction extracted from one statement line."""

    statement_id: str
    date: str  # YYYY-MM-DD
    description: str
    amount: Decimal  # always >= 0, direction lives in ``type``
    type: TransactionType
    category: str = "other"
    confidence: float = 0.0
    raw_line: str = ""
    created_at: datetime = field(default_factory=_utcnow, compare=False)

    def __post_init__(self) -> None:
        """Validate transaction data."""
        if not self.description.strip():
            object.__setattr__(self, "description", NO_DESCRIPTION)

    @property
    def is_income(self) -> bool:
        """Return True if money came into the account."""
        return self.type is TransactionType.CREDIT

    @property
    def is_expense(self) -> bool:
        """Return True if money left the account."""
        return self.type is TransactionType.DEBIT

    @property
    def month_key(self) -> str:
        """Return the YYYY-MM prefix of the date."""
        return self.date[:7] if len(self.date) >= 7 else ""

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for CSV/JSON output."""
        return {
            "statement_id": self.statement_id,
            "date": self.date,
            "description": self.description,
            "amount": str(self.amount),
            "type": self.type.value,
            "category": self.category,
            "confidence": f"{self.confidence:.2f}",
            "raw_line": self.raw_line,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Transaction":
        """
        Rebuild a transaction from a stored record.

        Accepts the output of ``to_dict`` as well as records coming back
        from a document store, where numbers may already be floats.

        Raises:
            ValueError: If a required field is missing or malformed
        """
        try:
            created_raw = data.get("created_at")
            if isinstance(created_raw, datetime):
                created_at = created_raw
            elif created_raw:
                created_at = datetime.fromisoformat(str(created_raw))
            else:
                created_at = _utcnow()

            return cls(
                statement_id=str(data["statement_id"]),
                date=str(data["date"]),
                description=str(data.get("description") or ""),
                amount=abs(Decimal(str(data["amount"]))),
                type=TransactionType(str(data["type"]).lower()),
                category=data.get("category") or "other",
                confidence=float(data.get("confidence") or 0.0),
                raw_line=str(data.get("raw_line") or ""),
                created_at=created_at,
            )
        except KeyError as e:
            raise ValueError(f"Missing transaction field: {e.args[0]}") from e
        except ArithmeticError as e:
            raise ValueError(f"Invalid amount: {data.get('amount')!r}") from e


@dataclass(frozen=True)
class ParsingSummary:
    """Counters describing one parse run."""

    lines_scanned: int = 0
    transactions_extracted: int = 0
    skipped_lines: int = 0
    examples_of_skipped: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "lines_scanned": self.lines_scanned,
            "transactions_extracted": self.transactions_extracted,
            "skipped_lines": self.skipped_lines,
            "examples_of_skipped": list(self.examples_of_skipped),
        }


@dataclass(frozen=True)
class ParseResult:
    """Transactions extracted from a statement together with its summary."""

    transactions: tuple[Transaction, ...]
    summary: ParsingSummary

    @property
    def is_empty(self) -> bool:
        """Return True if no transaction could be extracted."""
        return not self.transactions


@dataclass(frozen=True)
class MonthlyTrend:
    """Income and expense totals for one calendar month."""

    month: str  # YYYY-MM
    income: Decimal
    expense: Decimal

    def to_dict(self) -> dict[str, str]:
        return {
            "month": self.month,
            "income": str(self.income),
            "expense": str(self.expense),
        }


@dataclass(frozen=True)
class AnalyticsReport:
    """Summary analytics derived from a set of transactions."""

    statement_id: str
    total_income: Decimal
    total_expense: Decimal
    net: Decimal
    by_category: dict[str, Decimal]
    top5_expenses: tuple[Transaction, ...]
    monthly_trends: tuple[MonthlyTrend, ...]
    transaction_count: int
    avg_transaction_amount: Decimal
    parsing_summary: ParsingSummary | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "statement_id": self.statement_id,
            "total_income": str(self.total_income),
            "total_expense": str(self.total_expense),
            "net": str(self.net),
            "by_category": {k: str(v) for k, v in self.by_category.items()},
            "top5_expenses": [
                {
                    "date": tx.date,
                    "description": tx.description,
                    "amount": f"{tx.amount:.2f}",
                    "category": tx.category,
                }
                for tx in self.top5_expenses
            ],
            "monthly_trends": [trend.to_dict() for trend in self.monthly_trends],
            "transaction_count": self.transaction_count,
            "avg_transaction_amount": str(self.avg_transaction_amount),
            "parsing_summary": (
                self.parsing_summary.to_dict() if self.parsing_summary else None
            ),
        }
