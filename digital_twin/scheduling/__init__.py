"""
Digital Twin Scheduling Engine

Greedy, first-fit placement of prioritized tasks into working hours around
existing calendar commitments. Pure functions and classes only: fetching
busy time and persisting results is left to the services layer.
"""

from .core.scheduler import TaskScheduler, unscheduled_tasks
from .core.slot_finder import find_slot
from .core.task import Task, ScheduledEvent, Priority
from .core.time_slot import TimeSlot, BusyInterval
from .core.working_hours import WorkingHours
from .exceptions import SchedulingError, SchedulingConfigError, TaskInputError

__version__ = "1.0.0"
