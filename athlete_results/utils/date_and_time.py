import re
from datetime import UTC, date, datetime

from dateutil import parser as date_parser

# Month/day/year with slashes or dashes and a 2 or 4 digit year,
# e.g. "3/4/24" or "03-04-2024"
NUMERIC_DATE_RE = re.compile(r"\b(\d{1,2})[/-](\d{1,2})[/-](\d{4}|\d{2})\b")

# Two defaults that differ in every date component. A string only describes a
# full calendar date if parsing it against either default gives the same day.
_DEFAULT_A = datetime(2001, 1, 1)
_DEFAULT_B = datetime(2002, 2, 2)


def parse_date(date_str: str) -> date | None:
    """Parses a free-form date string into a calendar date.

    Args:
        date_str: The input string, e.g. "March 4, 2024", "3/4/24" or
            "2024-03-04T10:00:00Z".

    Returns:
        The date (in UTC for strings carrying an offset), or None if the string
        does not name a complete year, month and day.
    """
    if not date_str or not date_str.strip():
        return None

    text = date_str.strip()
    try:
        first = date_parser.parse(text, default=_DEFAULT_A)
        second = date_parser.parse(text, default=_DEFAULT_B)
    except (ValueError, OverflowError):
        return None

    if first.date() != second.date():
        return None

    if first.tzinfo is not None:
        try:
            first = first.astimezone(UTC)
        except OverflowError:
            # Shifting to UTC leaves the supported year range
            return None
    return first.date()


def normalize_date(raw: str) -> str:
    """Normalizes a scraped date string to YYYY-MM-DD.

    Strings that cannot be understood are returned trimmed but otherwise
    unchanged, so no input ever raises.

    Args:
        raw: The raw date text from a page.

    Returns:
        The ISO date, an empty string for blank input, or the trimmed input.
    """
    if not raw:
        return ""

    text = raw.strip()
    if not text:
        return ""

    parsed = parse_date(text)
    if parsed is not None:
        return parsed.isoformat()

    match = NUMERIC_DATE_RE.search(text)
    if match:
        month = match.group(1).zfill(2)
        day = match.group(2).zfill(2)
        year = match.group(3)
        if len(year) == 2:
            year = "20" + year
        return f"{year}-{month}-{day}"

    return text


def sortable_date_value(date_str: str) -> int:
    """Returns a sort key for a stored date; unparseable dates sort as 0."""
    parsed = parse_date(date_str)
    return parsed.toordinal() if parsed else 0
