"""
REAXML Date Parsing Utilities

REAXML timestamps use ``YYYY-MM-DD-HH:MM:SS`` (note the third hyphen),
although feeds in the wild also send plain ISO dates and date-times.
Inspection times are free text such as ``21-Jan-2009 11:00am to 1:00pm``.

All results are naive datetimes in feed-local time.
"""

import re
from datetime import datetime
from typing import Any, Optional, Tuple

from reaxmlfeed.logging_config import get_logger

logger = get_logger(__name__)

# "2009-01-01-12:30:00" -> "2009-01-01T12:30:00"
_REA_TIMESTAMP = re.compile(r"^(\d{4}-\d{2}-\d{2})-(\d{2}:\d{2}(?::\d{2})?)$")

# Formats tried after the REAXML rewrite when fromisoformat() gives up
DATE_FORMATS = [
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M",
    "%Y-%m-%d",
    "%Y%m%d-%H%M%S",
    "%Y%m%d",
    "%d/%m/%Y",
]

_INSPECTION = re.compile(
    r"^(\d{1,2}-[A-Za-z]{3}-\d{4})\s+(\d{1,2}:\d{2}(?:am|pm))\s+to\s+(\d{1,2}:\d{2}(?:am|pm))$",
    re.IGNORECASE,
)
_CLOCK = re.compile(r"^(\d{1,2}):(\d{2})(am|pm)$", re.IGNORECASE)

MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}


def parse_rea_date(value: Any) -> Optional[datetime]:
    """Parse a REAXML date or timestamp.

    Args:
        value: Raw attribute or element text.

    Returns:
        datetime, or None if the value is blank or unparseable.

    Example:
        >>> parse_rea_date("2009-01-01-12:30:00")
        datetime(2009, 1, 1, 12, 30)
        >>> parse_rea_date("2009-01-21")
        datetime(2009, 1, 21, 0, 0)
    """
    if value is None:
        return None

    text = str(value).strip()
    if not text:
        return None

    text = _REA_TIMESTAMP.sub(r"\1T\2", text)

    try:
        parsed = datetime.fromisoformat(text)
        return parsed.replace(tzinfo=None) if parsed.tzinfo else parsed
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue

    logger.debug("Could not parse REAXML date: %s", text)
    return None


def parse_inspection_time(description: str) -> Tuple[Optional[datetime], Optional[datetime]]:
    """Parse an inspection description into start and end datetimes.

    Args:
        description: Text like ``"21-Jan-2009 11:00am to 1:00pm"``.

    Returns:
        (starts_at, ends_at). Both are None when the text does not follow
        the pattern; that is a partial extraction, not an error.
    """
    if not description:
        return None, None

    match = _INSPECTION.match(description.strip())
    if not match:
        return None, None

    date_part, start_time, end_time = match.groups()
    return _combine(date_part, start_time), _combine(date_part, end_time)


def _combine(date_part: str, clock: str) -> Optional[datetime]:
    """Combine ``21-Jan-2009`` and ``11:00am`` into one datetime."""
    day_text, month_text, year_text = date_part.split("-")
    month = MONTHS.get(month_text.lower())
    if month is None:
        return None

    clock_match = _CLOCK.match(clock)
    if not clock_match:
        return None

    hours = int(clock_match.group(1))
    minutes = int(clock_match.group(2))
    meridiem = clock_match.group(3).lower()

    if meridiem == "pm" and hours != 12:
        hours += 12
    if meridiem == "am" and hours == 12:
        hours = 0

    try:
        return datetime(int(year_text), month, int(day_text), hours, minutes)
    except ValueError:
        logger.debug("Invalid inspection date: %s %s", date_part, clock)
        return None
