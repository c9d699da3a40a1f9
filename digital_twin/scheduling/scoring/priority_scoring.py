"""
Priority-based ordering and color tagging for tasks.
"""

from datetime import datetime
from typing import List, Tuple

from ..core.constants import RED, YELLOW, BLUE
from ..core.task import Priority, Task


PRIORITY_RANK = {
    Priority.HIGH: 0,
    Priority.MEDIUM: 1,
    Priority.LOW: 2,
}


def calculate_priority_rank(task: Task) -> int:
    """
    Map priority to rank: High: 0, Medium: 1, Low: 2 (lower goes first)
    """
    return PRIORITY_RANK.get(task.priority, PRIORITY_RANK[Priority.MEDIUM])


def task_sort_key(task: Task) -> Tuple[int, bool, datetime]:
    """
    Composite ordering key:
    1. priority rank
    2. tasks with a deadline before tasks without one
    3. earlier deadline first
    """
    has_no_deadline = task.deadline is None
    return (
        calculate_priority_rank(task),
        has_no_deadline,
        datetime.max if has_no_deadline else task.deadline,
    )


def order_tasks(tasks: List[Task]) -> List[Task]:
    """Stable sort of tasks into placement order. Ties keep their input order."""
    return sorted(tasks, key=task_sort_key)


def color_for_priority(priority) -> str:
    if priority == Priority.HIGH:
        return RED
    elif priority == Priority.MEDIUM:
        return YELLOW
    else:
        return BLUE
