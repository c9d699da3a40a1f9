"""
Task input and scheduled-event output types.
"""

import enum
from datetime import datetime
from typing import Optional

from .constants import DEFAULT_DURATION_MINUTES
from .time_slot import TimeSlot
from ..exceptions import TaskInputError


class Priority(str, enum.Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def coerce(cls, value) -> "Priority":
        """Map free-form input to a Priority; missing or unknown values become MEDIUM."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.MEDIUM


class Task:
    """
    A unit of work waiting for a calendar slot. Tasks are never mutated by
    the scheduler; unscheduled tasks are detected by comparing the input
    against the returned events.
    """
    def __init__(self, description: str, priority=Priority.MEDIUM, deadline: Optional[datetime] = None,
                 duration_minutes: Optional[int] = None):
        self.description = description
        self.priority = Priority.coerce(priority)
        self.deadline = deadline
        self.duration_minutes = self._normalize_duration(duration_minutes)

    @staticmethod
    def _normalize_duration(duration_minutes) -> int:
        if duration_minutes is None:
            return DEFAULT_DURATION_MINUTES
        if isinstance(duration_minutes, bool) or not isinstance(duration_minutes, int):
            raise TaskInputError(f"duration_minutes must be an integer, got {duration_minutes!r}")
        if duration_minutes <= 0:
            raise TaskInputError(f"duration_minutes must be positive, got {duration_minutes}")
        return duration_minutes

    def to_dict(self) -> dict:
        return {
            "description": self.description,
            "priority": self.priority.value,
            "deadline": self.deadline.isoformat() if self.deadline else None,
            "duration_minutes": self.duration_minutes,
        }

    def __repr__(self):
        deadline = self.deadline.strftime('%Y-%m-%d %H:%M') if self.deadline else None
        return f"Task({self.description!r}, {self.priority.value}, deadline={deadline}, {self.duration_minutes}min)"


class ScheduledEvent:
    """A task that has been given a slot."""
    __slots__ = ("_task", "_slot", "_color_tag")

    def __init__(self, task: Task, slot: TimeSlot, color_tag: str):
        self._task = task
        self._slot = slot
        self._color_tag = color_tag

    @property
    def task(self) -> Task:
        return self._task

    @property
    def slot(self) -> TimeSlot:
        return self._slot

    @property
    def color_tag(self) -> str:
        return self._color_tag

    @property
    def start(self) -> datetime:
        return self._slot.start

    @property
    def end(self) -> datetime:
        return self._slot.end

    def to_dict(self) -> dict:
        data = self._task.to_dict()
        data.update({
            "start_time": self.start.isoformat(),
            "end_time": self.end.isoformat(),
            "color_tag": self._color_tag,
        })
        return data

    def __repr__(self):
        return f"ScheduledEvent({self._task.description!r}, {self._slot!r}, {self._color_tag})"
