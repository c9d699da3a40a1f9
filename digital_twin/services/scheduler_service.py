"""
Auto-scheduling against a user's Google Calendar.

Fetches busy time, runs the scheduling engine, then writes every placed
event back to Google and records it locally. Runs for the same user must
not overlap; callers are responsible for serializing them.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from ..models import GoogleOAuthToken, ScheduledEventRecord
from ..scheduling import TaskScheduler, unscheduled_tasks
from ..scheduling.core.constants import MAX_DAYS
from ..scheduling.core.task import Task, ScheduledEvent
from ..scheduling.core.working_hours import WorkingHours
from . import google_calendar

logger = logging.getLogger(__name__)


class MissingCalendarToken(LookupError):
    """No Google OAuth token stored for this user."""


def get_google_token(db: Session, email: str) -> GoogleOAuthToken:
    google_token = db.query(GoogleOAuthToken).filter(GoogleOAuthToken.email == email).first()
    if not google_token:
        raise MissingCalendarToken(f"No Google OAuth token found for {email}")
    return google_token


def record_scheduled_event(db: Session, email: str, event: ScheduledEvent,
                           google_event_id: Optional[str] = None) -> ScheduledEventRecord:
    record = ScheduledEventRecord(
        owner_email=email,
        description=event.task.description,
        priority=event.task.priority,
        deadline=event.task.deadline,
        start_time=event.start,
        end_time=event.end,
        color_tag=event.color_tag,
        google_event_id=google_event_id,
    )
    db.add(record)
    return record


def auto_schedule(db: Session, email: str, tasks: List[Task], working_hours: WorkingHours,
                  now: Optional[datetime] = None, service=None) -> Tuple[List[ScheduledEvent], List[Task]]:
    """
    Schedule `tasks` into the user's calendar.
    Returns (scheduled events, tasks that could not be placed).
    """
    working_hours.validate()
    now = now or datetime.now()

    if service is None:
        service = google_calendar.build_calendar_service(get_google_token(db, email))

    # One day of slack past the search cap covers the last day's working hours
    busy = google_calendar.fetch_busy_intervals(service, now, now + timedelta(days=MAX_DAYS + 1))

    scheduled = TaskScheduler().schedule(tasks, busy, working_hours, now)

    # Commit per event so local records match what already reached Google
    for event in scheduled:
        created = google_calendar.create_calendar_event(service, event)
        record_scheduled_event(db, email, event, created.get("id"))
        db.commit()

    skipped = unscheduled_tasks(tasks, scheduled)
    if skipped:
        logger.info(f"{len(skipped)} task(s) could not be scheduled for {email}: {[t.description for t in skipped]}")
    return scheduled, skipped
