"""Rule tables for categorization, credit/debit inference and confidence.

All rule data is immutable. ``DEFAULT_RULES`` is shared process-wide and a
different ``ParserRules`` instance can be handed to the parsers, for example
one built from the user's config file or a reduced table in tests.

Both rule tables are ordered and evaluated top-down; the first rule that
matches decides the outcome.
"""

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace

from statement_analytics.models import TransactionType
from statement_analytics.utils.parsing import AmountToken

OTHER = "other"

CATEGORY_VOCABULARY = (
    "salary",
    "rent",
    "atm-withdrawal",
    "utilities",
    "groceries",
    "fuel",
    "loan",
    "insurance",
    "shopping",
    "food",
    "interest",
    "refund",
    "transfer",
    OTHER,
)


@dataclass(frozen=True)
class CategoryRule:
    """Assigns ``category`` to any text matching ``pattern``."""

    pattern: re.Pattern[str]
    category: str

    @classmethod
    def compile(cls, pattern: str, category: str) -> "CategoryRule":
        """Build a rule from a case-insensitive regular expression."""
        return cls(re.compile(pattern, re.IGNORECASE), category)

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


DEFAULT_CATEGORY_RULES: tuple[CategoryRule, ...] = (
    CategoryRule.compile(r"salary|payroll|wages", "salary"),
    CategoryRule.compile(r"rent", "rent"),
    CategoryRule.compile(r"atm|cash\s*withdrawal", "atm-withdrawal"),
    CategoryRule.compile(r"upi|bill|electricity|gas|water|mobile|dth|recharge", "utilities"),
    CategoryRule.compile(
        r"grocery|groceries|supermarket|big\s*bazaar|more\s*supermarket|dmart", "groceries"
    ),
    CategoryRule.compile(r"fuel|petrol|diesel|shell|hpcl|bpcl|iocl", "fuel"),
    CategoryRule.compile(r"emi|loan", "loan"),
    CategoryRule.compile(r"insurance", "insurance"),
    CategoryRule.compile(r"amazon|flipkart|myntra|ajio|nykaa|shopping|pos", "shopping"),
    CategoryRule.compile(r"zomato|swiggy|uber|ola|foodpanda|eat|restaurant|coffee", "food"),
    CategoryRule.compile(r"interest", "interest"),
    CategoryRule.compile(r"refund|reversal", "refund"),
    CategoryRule.compile(r"neft|imps|rtgs|transfer|to\s+acct|from\s+acct", "transfer"),
)

DEFAULT_CREDIT_KEYWORDS = (
    "cr",
    "credit",
    "refund",
    "reversal",
    "interest",
    "salary",
    "deposit",
    "received",
)

DEFAULT_DEBIT_KEYWORDS = (
    "dr",
    "debit",
    "payment",
    "upi",
    "imps",
    "neft",
    "atm",
    "withdrawal",
    "pos",
    "charge",
    "fee",
    "rent",
    "emi",
)

DEFAULT_CREDIT_VOCABULARY = re.compile(r"refund|reversal|interest|salary|credited", re.IGNORECASE)


@dataclass(frozen=True)
class TypeSignals:
    """Evidence about money direction collected from one line."""

    negative: bool = False
    positive: bool = False
    credit_keyword: bool = False
    debit_keyword: bool = False
    credit_vocabulary: bool = False


@dataclass(frozen=True)
class TypeRule:
    """Assigns ``result`` when ``predicate`` holds for the line's signals."""

    name: str
    predicate: Callable[[TypeSignals], bool]
    result: TransactionType


# A negative marker wins over everything, so a line carrying both a sign and
# credit vocabulary is decided by the sign of the amount itself.
DEFAULT_TYPE_RULES: tuple[TypeRule, ...] = (
    TypeRule("negative-marker", lambda s: s.negative, TransactionType.DEBIT),
    TypeRule("positive-marker", lambda s: s.positive, TransactionType.CREDIT),
    TypeRule("credit-keyword", lambda s: s.credit_keyword, TransactionType.CREDIT),
    TypeRule("debit-keyword", lambda s: s.debit_keyword, TransactionType.DEBIT),
    TypeRule("credit-vocabulary", lambda s: s.credit_vocabulary, TransactionType.CREDIT),
)

# Confidence weights per detected signal
DATE_WEIGHT = 0.35
AMOUNT_WEIGHT = 0.35
TYPE_WEIGHT = 0.15
CATEGORY_WEIGHT = 0.10
DESCRIPTION_WEIGHT = 0.05
MIN_DESCRIPTION_LENGTH = 3


def confidence_score(
    has_date: bool,
    has_amount: bool,
    has_type: bool,
    has_category: bool,
    description_length: int,
) -> float:
    """Score how many expected signals were found for a transaction, in [0, 1]."""
    score = 0.0
    if has_date:
        score += DATE_WEIGHT
    if has_amount:
        score += AMOUNT_WEIGHT
    if has_type:
        score += TYPE_WEIGHT
    if has_category:
        score += CATEGORY_WEIGHT
    if description_length > MIN_DESCRIPTION_LENGTH:
        score += DESCRIPTION_WEIGHT
    return min(1.0, round(score, 2))


@dataclass(frozen=True)
class ParserRules:
    """Immutable rule set used by the line parser."""

    category_rules: tuple[CategoryRule, ...] = DEFAULT_CATEGORY_RULES
    fallback_keywords: tuple[str, ...] = ("upi",)
    fallback_category: str = "utilities"
    credit_keywords: tuple[str, ...] = DEFAULT_CREDIT_KEYWORDS
    debit_keywords: tuple[str, ...] = DEFAULT_DEBIT_KEYWORDS
    credit_vocabulary: re.Pattern[str] = DEFAULT_CREDIT_VOCABULARY
    type_rules: tuple[TypeRule, ...] = DEFAULT_TYPE_RULES
    default_type: TransactionType = TransactionType.DEBIT

    def categorize(self, text: str) -> str:
        """Return the category of the first rule matching ``text``."""
        for rule in self.category_rules:
            if rule.matches(text):
                return rule.category

        lower = text.lower()
        if any(keyword in lower for keyword in self.fallback_keywords):
            return self.fallback_category
        return OTHER

    def type_signals(self, line: str, token: AmountToken) -> TypeSignals:
        """Collect credit/debit evidence from a line and its amount token."""
        lower = line.lower()
        return TypeSignals(
            negative=token.negative,
            positive=token.positive,
            credit_keyword=any(k in lower for k in self.credit_keywords),
            debit_keyword=any(k in lower for k in self.debit_keywords),
            credit_vocabulary=self.credit_vocabulary.search(line) is not None,
        )

    def classify(self, signals: TypeSignals) -> TransactionType:
        """Apply the type rules in order; fall back to ``default_type``."""
        for rule in self.type_rules:
            if rule.predicate(signals):
                return rule.result
        return self.default_type

    def classify_type(self, line: str, token: AmountToken) -> TransactionType:
        return self.classify(self.type_signals(line, token))

    def with_overrides(
        self,
        categories: Iterable[CategoryRule] | None = None,
        credit_keywords: Iterable[str] | None = None,
        debit_keywords: Iterable[str] | None = None,
    ) -> "ParserRules":
        """
        Derive a new rule set.

        Extra category rules are placed before the existing ones so they
        take precedence. Keyword lists replace the current ones.
        """
        changes: dict[str, object] = {}
        if categories is not None:
            changes["category_rules"] = tuple(categories) + self.category_rules
        if credit_keywords is not None:
            changes["credit_keywords"] = tuple(k.lower() for k in credit_keywords)
        if debit_keywords is not None:
            changes["debit_keywords"] = tuple(k.lower() for k in debit_keywords)
        return replace(self, **changes)  # type: ignore[arg-type]


DEFAULT_RULES = ParserRules()
