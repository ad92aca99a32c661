"""Low-level scanning and parsing helpers for statement text."""

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from pathlib import Path

import xlrd  # type: ignore[import-untyped]

_MONTH_NAMES = (
    "january",
    "february",
    "march",
    "april",
    "may",
    "june",
    "july",
    "august",
    "september",
    "october",
    "november",
    "december",
)

_DATE_TOKEN_RE = re.compile(
    r"\d{1,2}[/.\-]\d{1,2}[/.\-]\d{2,4}"  # 12/01/2024, 5-3-24
    r"|\d{4}[/.\-]\d{1,2}[/.\-]\d{1,2}"  # 2024-03-05
    r"|\d{1,2}\s+[A-Za-z]{3,}\.?,?\s+\d{2,4}"  # 20 Jan 2025, 3 Sept. 24
)

_YEAR_FIRST_RE = re.compile(r"(\d{4})[/.\-](\d{1,2})[/.\-](\d{1,2})")
_DAY_FIRST_RE = re.compile(r"(\d{1,2})[/.\-](\d{1,2})[/.\-](\d{2,4})")
_MONTH_NAME_RE = re.compile(r"(\d{1,2})\s+([A-Za-z]{3,})\.?,?\s+(\d{2,4})")

_AMOUNT_RE = re.compile(
    r"(?:(?:\b(?:rs\.?|inr|usd)|[$₹])\s*)?"
    r"(?P<sign>[+\-])?"
    r"(?P<open>\()?"
    r"(?P<number>\d{1,3}(?:,\d{2,3})+|\d+)"
    r"(?P<fraction>\.\d{1,2})?"
    r"(?(open)\))",
    re.IGNORECASE,
)
_CURRENCY_RE = re.compile(r"rs\.?|inr|usd|[$₹]", re.IGNORECASE)

# Longest digit run accepted for an amount written without separators or
# decimals. Longer runs are almost always account or reference numbers.
MAX_PLAIN_DIGITS = 8

_TRAILING_MARKER_RE = re.compile(r"(?:^|\s+)(?:cr|dr)\b\.?$", re.IGNORECASE)


def find_date_token(line: str) -> re.Match[str] | None:
    """Return the first date-like token in a line, if any."""
    return _DATE_TOKEN_RE.search(line)


def _month_from_name(name: str) -> int | None:
    name = name.lower().rstrip(".,")
    if len(name) < 3:
        return None
    for index, full_name in enumerate(_MONTH_NAMES, start=1):
        if full_name.startswith(name):
            return index
    return None


def _canonical(year: int, month: int | None, day: int) -> str | None:
    if month is None or not 1 <= month <= 12 or not 1 <= day <= 31:
        return None
    return f"{year:04d}-{month:02d}-{day:02d}"


def parse_date(date_str: str) -> str | None:
    """
    Parse a date token to canonical YYYY-MM-DD form.

    Supported shapes, tried in order:
    - YYYY-MM-DD, YYYY/MM/DD, YYYY.MM.DD (2024-03-05)
    - DD-MM-YY(YY) with any of - / . (12/01/2024, 5.3.24)
    - DD MonthName YY(YY) (20 Jan 2025, 3 Sept. 24, 1 December, 2025)

    Two-digit years are read as 20yy. Month and day ranges are checked,
    day-of-month against the calendar is not.

    Args:
        date_str: Date token to parse

    Returns:
        Canonical date string if successful, None otherwise
    """
    if not date_str:
        return None
    date_str = date_str.strip()

    match = _YEAR_FIRST_RE.fullmatch(date_str)
    if match:
        result = _canonical(int(match.group(1)), int(match.group(2)), int(match.group(3)))
        if result:
            return result

    match = _DAY_FIRST_RE.fullmatch(date_str)
    if match:
        year = int(match.group(3))
        if year < 100:
            year += 2000
        result = _canonical(year, int(match.group(2)), int(match.group(1)))
        if result:
            return result

    match = _MONTH_NAME_RE.fullmatch(date_str)
    if match:
        year = int(match.group(3))
        if year < 100:
            year += 2000
        return _canonical(year, _month_from_name(match.group(2)), int(match.group(1)))

    return None


@dataclass(frozen=True)
class AmountToken:
    """A currency-like token found in a statement line."""

    text: str
    start: int
    end: int
    negative: bool = False
    positive: bool = False
    digits: int = 0
    has_fraction: bool = False
    has_separator: bool = False

    @property
    def is_candidate(self) -> bool:
        """Return True if the token plausibly is a money amount."""
        return self.digits >= 2 and (
            self.has_fraction or self.has_separator or self.digits <= MAX_PLAIN_DIGITS
        )

    def overlaps(self, start: int, end: int) -> bool:
        """Return True if the token shares any character with [start, end)."""
        return self.start < end and start < self.end


def scan_amount_tokens(line: str) -> list[AmountToken]:
    """Return every currency-like token in a line, filtered or not."""
    tokens: list[AmountToken] = []
    for match in _AMOUNT_RE.finditer(line):
        number = match.group("number")
        fraction = match.group("fraction") or ""
        sign = match.group("sign")
        tokens.append(
            AmountToken(
                text=match.group(0),
                start=match.start(),
                end=match.end(),
                negative=sign == "-" or match.group("open") is not None,
                positive=sign == "+",
                digits=sum(ch.isdigit() for ch in number + fraction),
                has_fraction=bool(fraction),
                has_separator="," in number,
            )
        )
    return tokens


def find_amount_tokens(line: str) -> list[AmountToken]:
    """
    Find amount candidates in a line, in line order.

    A token is kept if it has at least two digits and either a decimal
    fraction, a thousands separator, or no more than eight digits.
    """
    return [token for token in scan_amount_tokens(line) if token.is_candidate]


def select_amount(tokens: list[AmountToken]) -> AmountToken | None:
    """Pick the transaction amount: the last candidate on the line."""
    return tokens[-1] if tokens else None


def parse_amount(amount_str: str) -> Decimal | None:
    """
    Parse amount string to Decimal.

    Handles:
    - Currency markers (Rs, INR, USD, $, ₹)
    - Thousands separators (commas)
    - Negative values (both -123 and (123))
    - Explicit plus signs and quoted values

    Args:
        amount_str: Amount string to parse

    Returns:
        Finite Decimal if successful, None otherwise
    """
    if not amount_str or not amount_str.strip():
        return None

    amount_str = amount_str.strip().strip('"').strip()
    amount_str = _CURRENCY_RE.sub("", amount_str)
    amount_str = re.sub(r"\s+", "", amount_str).replace(",", "")

    if not amount_str:
        return None

    # Sign comes before the parentheses: -(2,500.00)
    is_negative = amount_str.startswith("-")
    if amount_str[:1] in ("-", "+"):
        amount_str = amount_str[1:]

    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    try:
        value = Decimal(amount_str)
    except InvalidOperation:
        return None

    if not value.is_finite():
        return None
    return -value if is_negative else value


def clean_description(desc: str) -> str:
    """
    Clean up a transaction description.

    Removes:
    - Extra whitespace
    - Trailing CR/DR marker words
    """
    desc = " ".join(desc.split())

    while True:
        stripped = _TRAILING_MARKER_RE.sub("", desc)
        if stripped == desc:
            break
        desc = stripped

    return desc.strip()


def normalize_text(text: str | None) -> str:
    """
    Normalize extracted statement text to one record per line.

    Unifies line endings, turns tabs into spaces, strips trailing
    whitespace on every line and collapses runs of three or more spaces
    to two, keeping column gaps visible without breaking amounts.
    """
    if not text:
        return ""
    text = text.replace("\r\n", "\n").replace("\r", "\n").replace("\t", " ")
    text = "\n".join(line.rstrip() for line in text.split("\n"))
    return re.sub(r" {3,}", "  ", text)


def read_file(filepath: Path) -> str:
    """
    Read statement content, handling both text and Excel files.

    Args:
        filepath: Path to the file

    Returns:
        File content as string (Excel rows become one line each)

    Raises:
        ValueError: If file cannot be read
    """
    if not filepath.exists():
        raise ValueError(f"File not found: {filepath}")

    is_xls = False
    try:
        with open(filepath, "rb") as f:
            magic = f.read(8)
    except OSError as e:
        raise ValueError(f"Could not open {filepath}: {e}") from e

    if magic.startswith(b"%PDF-"):
        raise ValueError(
            f"{filepath} is a PDF; extract its text before parsing"
        )

    # OLE2 (.xls) or zip (.xlsx) magic bytes
    if magic[:4] == b"\xd0\xcf\x11\xe0" or magic[:4] == b"PK\x03\x04":
        is_xls = True

    if filepath.suffix.lower() in [".xls", ".xlsx"]:
        is_xls = True

    if is_xls:
        return _read_excel(filepath)
    else:
        return _read_text(filepath)


def _read_text(filepath: Path) -> str:
    """Read text file with encoding detection."""
    encodings = ["utf-8-sig", "utf-8", "latin-1", "cp1252"]

    for encoding in encodings:
        try:
            with open(filepath, encoding=encoding) as f:
                return f.read()
        except UnicodeDecodeError:
            continue

    raise ValueError(f"Could not decode file {filepath} with any known encoding")


def _read_excel(filepath: Path) -> str:
    """Read the first sheet of a spreadsheet as statement lines."""
    try:
        wb = xlrd.open_workbook(str(filepath))
        sheet = wb.sheet_by_index(0)

        lines = []
        for row in range(sheet.nrows):
            row_data = []
            for col in range(sheet.ncols):
                cell = sheet.cell(row, col)
                if cell.ctype == xlrd.XL_CELL_EMPTY:
                    continue
                if cell.ctype == xlrd.XL_CELL_DATE:
                    dt = xlrd.xldate_as_datetime(cell.value, wb.datemode)
                    row_data.append(dt.strftime("%d %b %Y"))
                elif cell.ctype == xlrd.XL_CELL_NUMBER:
                    value = float(cell.value)
                    row_data.append(str(int(value)) if value.is_integer() else f"{value:.2f}")
                else:
                    row_data.append(str(cell.value).strip())
            lines.append("  ".join(v for v in row_data if v))

        return "\n".join(lines)

    except Exception as e:
        raise ValueError(f"Could not read Excel file {filepath}: {e}") from e
