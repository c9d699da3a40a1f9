"""
Errors raised by the scheduling engine.

Failing to find a slot is not an error: unschedulable tasks are simply left
out of the result. These exceptions cover structural problems only.
"""


class SchedulingError(Exception):
    """Base class for scheduling errors."""


class SchedulingConfigError(SchedulingError, ValueError):
    """Working hours cannot produce any slot (bad hours or no work days)."""


class TaskInputError(SchedulingError, ValueError):
    """A task carries a value the scheduler cannot work with."""
