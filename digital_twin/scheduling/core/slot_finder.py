"""
First-fit slot search within working hours.
"""

import logging
from datetime import datetime, timedelta
from typing import Iterable, Optional

from .constants import MAX_DAYS, STEP_MINUTES
from .time_slot import TimeSlot
from .working_hours import WorkingHours

logger = logging.getLogger(__name__)


def initial_cursor(earliest_start: datetime, start_hour: int) -> datetime:
    """
    Where the search begins. Before working hours this is today's start
    hour; once the start hour has been reached it is the next full hour,
    so at 14:20 the first candidate is 15:00 (not 14:20 or 14:30).
    """
    if earliest_start.hour >= start_hour:
        return earliest_start.replace(minute=0, second=0, microsecond=0) + timedelta(hours=1)
    return earliest_start.replace(hour=start_hour, minute=0, second=0, microsecond=0)


def find_conflict(busy: Iterable[TimeSlot], start: datetime, end: datetime) -> Optional[TimeSlot]:
    """Return the first busy interval overlapping [start, end), if any."""
    for interval in busy:
        if interval.overlaps(start, end):
            return interval
    return None


def find_slot(busy: Iterable[TimeSlot], duration_minutes: int, working_hours: WorkingHours,
              earliest_start: datetime, deadline: Optional[datetime] = None) -> Optional[TimeSlot]:
    """
    Find the earliest free slot of `duration_minutes` inside working hours.

    Days are scanned for at most MAX_DAYS, candidates are stepped every
    STEP_MINUTES and the first one that clears every busy interval wins.
    Returns None when nothing fits before the deadline or the day cap.
    """
    working_hours.validate()

    day_minutes = (working_hours.end_hour - working_hours.start_hour) * 60
    if duration_minutes > day_minutes:
        logger.debug(f"{duration_minutes}min task is longer than the {day_minutes}min working day")
        return None

    busy = list(busy)
    duration = timedelta(minutes=duration_minutes)
    step = timedelta(minutes=STEP_MINUTES)

    cursor = initial_cursor(earliest_start, working_hours.start_hour)

    for _ in range(MAX_DAYS):
        if deadline is not None and cursor >= deadline:
            logger.debug(f"Search cursor {cursor} reached deadline {deadline}")
            return None

        if not working_hours.is_work_day(cursor):
            logger.debug(f"Skipping {cursor.strftime('%a %Y-%m-%d')}: not a work day")
        else:
            day_end = working_hours.day_end(cursor)
            candidate = max(cursor, working_hours.day_start(cursor))

            while True:
                slot_end = candidate + duration
                if slot_end > day_end:
                    break
                if deadline is not None and slot_end > deadline:
                    logger.debug(f"Candidate {candidate} would finish at {slot_end}, after deadline {deadline}")
                    return None

                conflict = find_conflict(busy, candidate, slot_end)
                if conflict is None:
                    return TimeSlot(candidate, slot_end)

                logger.debug(f"Candidate {candidate} - {slot_end} overlaps {conflict!r}")
                candidate += step

        # Later days always start at the beginning of working hours
        cursor = working_hours.day_start(cursor + timedelta(days=1))

    logger.debug(f"No {duration_minutes}min slot found within {MAX_DAYS} days of {earliest_start}")
    return None
