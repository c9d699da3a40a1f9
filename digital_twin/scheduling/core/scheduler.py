"""
Main scheduler class that orders tasks and places them one by one.
"""

import logging
from datetime import datetime
from typing import Iterable, List

from .slot_finder import find_slot
from .task import Task, ScheduledEvent
from .time_slot import TimeSlot
from .working_hours import WorkingHours
from ..scoring.priority_scoring import order_tasks, color_for_priority

logger = logging.getLogger(__name__)


class TaskScheduler:
    """
    Greedy placement of tasks around existing commitments.

    Tasks are ordered by priority and deadline, then each one takes the
    first free slot. Every placement is appended to the run's own busy-set
    so later tasks cannot collide with it. Placed tasks are never moved
    again, even if a later task would have fit better.
    """
    def __init__(self, slot_finder=find_slot):
        self.slot_finder = slot_finder

    def schedule(self, tasks: Iterable[Task], busy: Iterable[TimeSlot], working_hours: WorkingHours,
                 now: datetime) -> List[ScheduledEvent]:
        """
        Place every task that fits and return the events in placement order.
        Tasks that cannot be placed are left out; no error is raised for them.
        """
        working_hours.validate()

        # Private copy: the caller's intervals are never touched
        busy_set: List[TimeSlot] = list(busy)
        scheduled: List[ScheduledEvent] = []

        for task in order_tasks(list(tasks)):
            slot = self.slot_finder(busy_set, task.duration_minutes, working_hours, now, task.deadline)
            if slot is None:
                logger.debug(f"Could not place {task!r}")
                continue

            event = ScheduledEvent(task, slot, color_for_priority(task.priority))
            scheduled.append(event)
            busy_set.append(slot)
            logger.debug(f"Placed {event!r}")

        logger.info(f"Scheduled {len(scheduled)} task(s), busy-set now has {len(busy_set)} interval(s)")
        return scheduled


def unscheduled_tasks(tasks: Iterable[Task], scheduled: Iterable[ScheduledEvent]) -> List[Task]:
    """Input tasks missing from the schedule, in input order."""
    placed_ids = {id(event.task) for event in scheduled}
    return [task for task in tasks if id(task) not in placed_ids]
