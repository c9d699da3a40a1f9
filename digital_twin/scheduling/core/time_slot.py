"""
Time slot representation for the scheduling system.
"""

from datetime import datetime, timedelta


class TimeSlot:
    """
    A half-open time range [start, end).

    Used both for busy intervals (existing commitments, or tasks placed
    earlier in the same run) and for the slots handed out to tasks.
    Slots are read-only once created.
    """
    __slots__ = ("_start", "_end")

    def __init__(self, start: datetime, end: datetime):
        if end < start:
            raise ValueError(f"Slot ends before it starts ({start} - {end})")
        self._start = start
        self._end = end

    @property
    def start(self) -> datetime:
        return self._start

    @property
    def end(self) -> datetime:
        return self._end

    def duration(self) -> timedelta:
        return self._end - self._start

    def overlaps(self, start: datetime, end: datetime) -> bool:
        """Half-open overlap test against another range."""
        return start < self._end and end > self._start

    def __eq__(self, other):
        if not isinstance(other, TimeSlot):
            return NotImplemented
        return self._start == other._start and self._end == other._end

    def __hash__(self):
        return hash((self._start, self._end))

    def __lt__(self, other):
        return self._start < other._start

    def __repr__(self):
        return f"TimeSlot({self._start.strftime('%a %Y-%m-%d %H:%M')} - {self._end.strftime('%H:%M')})"


# Existing calendar commitments use the same shape
BusyInterval = TimeSlot
