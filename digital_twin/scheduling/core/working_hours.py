"""
Working-hour constraints for a scheduling run.
"""

from datetime import datetime
from typing import Iterable

from .constants import DEFAULT_START_HOUR, DEFAULT_END_HOUR, DEFAULT_WORK_DAYS
from ..exceptions import SchedulingConfigError


def weekday_index(moment: datetime) -> int:
    """Weekday with 0=Sunday .. 6=Saturday."""
    return moment.isoweekday() % 7


class WorkingHours:
    """
    Daily time-of-day window plus the weekdays placement is allowed on.
    Weekdays use 0=Sunday .. 6=Saturday.
    """
    def __init__(self, start_hour: int = DEFAULT_START_HOUR, end_hour: int = DEFAULT_END_HOUR,
                 work_days: Iterable[int] = DEFAULT_WORK_DAYS):
        self.start_hour = start_hour
        self.end_hour = end_hour
        self.work_days = frozenset(work_days)

    def validate(self):
        """Raise SchedulingConfigError if no slot could ever be produced."""
        for name, hour in (("start_hour", self.start_hour), ("end_hour", self.end_hour)):
            if not isinstance(hour, int) or isinstance(hour, bool) or not 0 <= hour <= 23:
                raise SchedulingConfigError(f"{name} must be an integer between 0 and 23, got {hour!r}")
        if self.start_hour >= self.end_hour:
            raise SchedulingConfigError(
                f"start_hour ({self.start_hour}) must be before end_hour ({self.end_hour})"
            )
        if not self.work_days:
            raise SchedulingConfigError("work_days must contain at least one weekday")
        invalid = sorted((day for day in self.work_days if not isinstance(day, int) or not 0 <= day <= 6), key=repr)
        if invalid:
            raise SchedulingConfigError(f"work_days must be between 0 (Sunday) and 6 (Saturday), got {invalid}")
        return self

    def is_work_day(self, moment: datetime) -> bool:
        return weekday_index(moment) in self.work_days

    def day_start(self, moment: datetime) -> datetime:
        return moment.replace(hour=self.start_hour, minute=0, second=0, microsecond=0)

    def day_end(self, moment: datetime) -> datetime:
        return moment.replace(hour=self.end_hour, minute=0, second=0, microsecond=0)

    def __repr__(self):
        return f"WorkingHours({self.start_hour:02d}:00-{self.end_hour:02d}:00, days={sorted(self.work_days)})"
