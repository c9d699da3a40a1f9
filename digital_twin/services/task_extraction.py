"""
Extract schedulable tasks from free text using the LLM provider chain.
"""

import json
import logging
import re
from datetime import datetime
from typing import Callable, List, Optional

from .date_parsing import parse_deadline
from .llm_fallback import generate_text, LLMResult
from ..scheduling.core.task import Task
from ..scheduling.exceptions import TaskInputError

logger = logging.getLogger(__name__)

TASK_EXTRACTION_PROMPT = """Extract actionable tasks from the following text. Format as a JSON array of task objects with:
- 'task': string - The task description
- 'priority': string - Either "high", "medium", or "low"
- 'deadline': string - Deadline in format YYYY-MM-DD if a specific date is mentioned, or relative like "today", "tomorrow", or a day of the week like "Friday". Use null if there is none. Write numeric dates day-first (DD/MM/YYYY).
- 'duration_minutes': integer - Estimated time needed in minutes, or null if unknown
Return only the raw JSON without markdown formatting or code blocks."""

CODE_BLOCK_PATTERN = re.compile(r"```(?:json)?\s*([\s\S]*?)```")


class TaskExtractionError(ValueError):
    """The LLM reply could not be turned into tasks."""


def strip_code_fences(text: str) -> str:
    match = CODE_BLOCK_PATTERN.search(text)
    if match:
        return match.group(1).strip()
    return text.strip()


def task_from_dict(item: dict, now: datetime) -> Task:
    description = item.get("task") or item.get("description")
    if not description or not isinstance(description, str):
        raise TaskExtractionError(f"Extracted task has no description: {item!r}")

    duration = item.get("duration_minutes")
    if isinstance(duration, float) and duration.is_integer():
        duration = int(duration)
    elif isinstance(duration, str) and duration.strip().isdigit():
        duration = int(duration.strip())

    return Task(
        description=description.strip(),
        priority=item.get("priority"),
        deadline=parse_deadline(item.get("deadline"), now),
        duration_minutes=duration,
    )


def extract_tasks(text: str, now: Optional[datetime] = None,
                  generate: Callable[..., LLMResult] = generate_text) -> List[Task]:
    """
    Ask the LLM chain for tasks found in `text`.
    Returns an empty list if every provider failed.
    """
    now = now or datetime.now()
    result = generate(text, system=TASK_EXTRACTION_PROMPT)
    if result.is_fallback:
        logger.warning("No LLM provider available, no tasks extracted")
        return []

    raw = strip_code_fences(result.text)
    try:
        items = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.error(f"❌ {result.provider} returned invalid JSON: {raw[:200]!r}")
        raise TaskExtractionError(f"The AI returned invalid JSON: {e}") from e

    if not isinstance(items, list):
        raise TaskExtractionError("The AI did not return an array of tasks")

    tasks = []
    for item in items:
        if not isinstance(item, dict):
            raise TaskExtractionError(f"Extracted task is not an object: {item!r}")
        try:
            tasks.append(task_from_dict(item, now))
        except TaskInputError as e:
            raise TaskExtractionError(str(e)) from e

    logger.info(f"Extracted {len(tasks)} task(s) via {result.provider}")
    return tasks
