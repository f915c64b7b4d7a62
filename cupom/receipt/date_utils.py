"""Date helpers for receipt parsing."""

import re
from datetime import date

# dd/mm/yyyy or dd/mm/yy
BR_DATE_PATTERN = re.compile(r"\b(\d{2})/(\d{2})/(\d{4}|\d{2})\b")


def parse_br_date(text: str) -> date | None:
    """Return the first valid dd/mm/yyyy (or dd/mm/yy) date found in text."""
    for match in BR_DATE_PATTERN.finditer(text):
        day, month, year = (int(group) for group in match.groups())
        if year < 100:
            year += 2000
        try:
            return date(year, month, day)
        except ValueError:
            continue
    return None


def parse_purchase_date(text: str | None) -> date | None:
    """Parse a service-provided date: ISO ("2025-03-01", "2025-03-01 10:22:00") or dd/mm/yyyy."""
    if not text:
        return None
    text = text.strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return parse_br_date(text)
