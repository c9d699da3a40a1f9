"""
Deadline normalization for tasks coming from users or the LLM.

Ambiguous numeric dates like 03/04 are always read day-first (3 April),
whatever the locale.
"""

import logging
import re
from datetime import datetime, date, time, timedelta
from typing import Optional, Union

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

DAY_NAMES = ['sunday', 'monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday']

SLASH_PATTERN = re.compile(r'^\s*(\d{1,2})/(\d{1,2})(?:/(\d{2}|\d{4}))?\s*$')
DATE_ONLY_PATTERN = re.compile(r'^\s*\d{4}-\d{1,2}-\d{1,2}\s*$')

# A date without a time means "by the end of that day"
END_OF_DAY = time(23, 59)


def to_local_naive(moment: datetime) -> datetime:
    """Convert an aware datetime to naive local time; naive values pass through."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone().replace(tzinfo=None)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, END_OF_DAY)


def _weekday_index(day: date) -> int:
    return day.isoweekday() % 7


def _parse_relative(text: str, now: datetime) -> Optional[datetime]:
    if text == "today":
        return end_of_day(now.date())
    if text == "tomorrow":
        return end_of_day(now.date() + timedelta(days=1))
    if text in DAY_NAMES:
        days_ahead = (DAY_NAMES.index(text) - _weekday_index(now.date())) % 7
        if days_ahead == 0:
            days_ahead = 7  # today's name means next week
        return end_of_day(now.date() + timedelta(days=days_ahead))
    return None


def _parse_day_first(match, now: datetime) -> Optional[datetime]:
    day = int(match.group(1))
    month = int(match.group(2))
    year_text = match.group(3)
    if year_text is None:
        year = now.year
    elif len(year_text) == 2:
        year = 2000 + int(year_text)
    else:
        year = int(year_text)
    try:
        return end_of_day(date(year, month, day))
    except ValueError:
        logger.warning(f"Ignoring invalid day-first date {match.group(0).strip()!r}")
        return None


def parse_deadline(value: Union[str, datetime, date, None], now: Optional[datetime] = None) -> Optional[datetime]:
    """
    Turn a deadline into a naive local datetime, or None if there isn't one.

    Accepts datetimes, dates, ISO-8601 strings, 'today', 'tomorrow',
    weekday names and DD/MM[/YYYY]. Anything else is handed to dateutil
    with dayfirst=True; if that fails too the deadline is dropped.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return to_local_naive(value)
    if isinstance(value, date):
        return end_of_day(value)

    text = str(value).strip().lower()
    if not text:
        return None

    now = now or datetime.now()

    relative = _parse_relative(text, now)
    if relative is not None:
        return relative

    slash_match = SLASH_PATTERN.match(text)
    if slash_match:
        return _parse_day_first(slash_match, now)

    if DATE_ONLY_PATTERN.match(text):
        try:
            return end_of_day(date.fromisoformat(_zero_pad_iso_date(text)))
        except ValueError:
            logger.warning(f"Ignoring invalid date {value!r}")
            return None

    try:
        return to_local_naive(datetime.fromisoformat(text.upper().replace("Z", "+00:00")))
    except ValueError:
        pass

    try:
        parsed = date_parser.parse(text, dayfirst=True, default=datetime.combine(now.date(), END_OF_DAY))
    except (ValueError, OverflowError) as e:
        logger.warning(f"Could not parse deadline {value!r}: {e}")
        return None
    return to_local_naive(parsed)


def _zero_pad_iso_date(text: str) -> str:
    year, month, day = text.strip().split("-")
    return f"{int(year):04d}-{int(month):02d}-{int(day):02d}"
