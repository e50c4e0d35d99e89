"""Publication date parsing across the formats providers publish."""

from __future__ import annotations

from datetime import date, datetime

from .errors import DateParseError

# Order matters: the first format that parses wins.
DATE_FORMATS: tuple[str, ...] = (
    "%B %d, %Y",  # July 16, 2019
    "%Y-%m-%d",  # 2019-07-16
    "%B, %d %Y",  # July, 16 2019
)

# Open Library also publishes bare years and "Month Year".
EXTENDED_DATE_FORMATS: tuple[str, ...] = DATE_FORMATS + (
    "%Y",
    "%B %Y",
)


def parse_date(raw: str, formats: tuple[str, ...] = DATE_FORMATS) -> date:
    """Return the date from the first of ``formats`` that matches ``raw``.

    Raises DateParseError when no format matches.
    """
    text = raw.strip()
    for fmt in formats:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise DateParseError(raw, "no known date format matched")
