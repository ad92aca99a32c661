"""Summary analytics over a set of transactions."""

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from statement_analytics.models import (
    AnalyticsReport,
    MonthlyTrend,
    ParsingSummary,
    Transaction,
)
from statement_analytics.rules import OTHER

TOP_EXPENSES = 5
_CENTS = Decimal("0.01")


def round_money(value: Decimal | int | float) -> Decimal:
    """Round to 2 decimal places, halves away from zero."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(_CENTS, rounding=ROUND_HALF_UP)


def compute_analytics(
    statement_id: str,
    transactions: Iterable[Transaction],
    summary: ParsingSummary | None = None,
) -> AnalyticsReport:
    """
    Compute totals, category breakdown, top expenses and monthly trend.

    The report is a pure function of its inputs, so it can be recomputed
    for transactions reloaded from storage, where no parsing summary may
    be available.

    Args:
        statement_id: Statement the transactions belong to
        transactions: Transactions to aggregate
        summary: Parsing summary to embed in the report, if known

    Returns:
        AnalyticsReport with every amount rounded to cents
    """
    income = Decimal("0")
    expense = Decimal("0")
    total = Decimal("0")
    count = 0
    by_category: dict[str, Decimal] = {}
    expenses: list[Transaction] = []
    by_month: dict[str, list[Decimal]] = {}

    for tx in transactions:
        count += 1
        total += tx.amount
        if tx.is_income:
            income += tx.amount
        else:
            expense += tx.amount
            expenses.append(tx)

        category = tx.category or OTHER
        by_category[category] = by_category.get(category, Decimal("0")) + tx.amount

        month = tx.month_key
        if month:
            month_totals = by_month.setdefault(month, [Decimal("0"), Decimal("0")])
            month_totals[0 if tx.is_income else 1] += tx.amount

    # sorted() is stable, so equal amounts keep their encounter order
    top_expenses = sorted(expenses, key=lambda t: t.amount, reverse=True)[:TOP_EXPENSES]

    monthly_trends = tuple(
        MonthlyTrend(month=month, income=round_money(totals[0]), expense=round_money(totals[1]))
        for month, totals in sorted(by_month.items())
    )

    return AnalyticsReport(
        statement_id=statement_id,
        total_income=round_money(income),
        total_expense=round_money(expense),
        net=round_money(income - expense),
        by_category={k: round_money(v) for k, v in by_category.items()},
        top5_expenses=tuple(top_expenses),
        monthly_trends=monthly_trends,
        transaction_count=count,
        avg_transaction_amount=round_money(total / count) if count else round_money(0),
        parsing_summary=summary,
    )
