"""
Google Calendar as busy-interval source and event sink.
"""

import logging
from datetime import datetime, date
from typing import List

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build

from .. import config
from ..models import GoogleOAuthToken
from ..scheduling.core.constants import GOOGLE_COLOR_IDS
from ..scheduling.core.task import ScheduledEvent
from ..scheduling.core.time_slot import BusyInterval
from .date_parsing import to_local_naive

logger = logging.getLogger(__name__)

SCOPES = [
    "https://www.googleapis.com/auth/calendar",
    "https://www.googleapis.com/auth/calendar.events",
]


def build_calendar_service(google_token: GoogleOAuthToken):
    creds = Credentials(
        token=google_token.access_token,
        refresh_token=google_token.refresh_token,
        token_uri=config.GOOGLE_TOKEN_URI,
        client_id=config.GOOGLE_CLIENT_ID,
        client_secret=config.GOOGLE_CLIENT_SECRET,
        scopes=SCOPES,
    )
    return build("calendar", "v3", credentials=creds)


def _to_google_time(moment: datetime) -> str:
    """RFC3339 timestamp for timeMin/timeMax."""
    if moment.tzinfo is None:
        moment = moment.astimezone()
    return moment.isoformat()


def event_to_busy_interval(g_event: dict):
    """Convert one Google event to a BusyInterval, or None if it doesn't block time."""
    if g_event.get("status") == "cancelled" or g_event.get("transparency") == "transparent":
        return None

    start = g_event.get("start", {})
    end = g_event.get("end", {})

    if start.get("dateTime") and end.get("dateTime"):
        start_dt = to_local_naive(datetime.fromisoformat(start["dateTime"].replace("Z", "+00:00")))
        end_dt = to_local_naive(datetime.fromisoformat(end["dateTime"].replace("Z", "+00:00")))
    elif start.get("date") and end.get("date"):
        # All-day events block whole local days; Google's end date is exclusive
        start_dt = datetime.combine(date.fromisoformat(start["date"]), datetime.min.time())
        end_dt = datetime.combine(date.fromisoformat(end["date"]), datetime.min.time())
    else:
        return None

    if end_dt <= start_dt:
        return None
    return BusyInterval(start_dt, end_dt)


def fetch_busy_intervals(service, time_min: datetime, time_max: datetime,
                         calendar_id: str = "primary") -> List[BusyInterval]:
    """List events in [time_min, time_max) and return the ones that block time."""
    busy = []
    page_token = None
    fetched = 0
    while True:
        events_result = (
            service.events().list(
                calendarId=calendar_id,
                timeMin=_to_google_time(time_min),
                timeMax=_to_google_time(time_max),
                singleEvents=True,
                orderBy="startTime",
                pageToken=page_token,
            ).execute()
        )
        items = events_result.get("items", [])
        fetched += len(items)
        for g_event in items:
            interval = event_to_busy_interval(g_event)
            if interval is not None:
                busy.append(interval)
        page_token = events_result.get("nextPageToken")
        if not page_token:
            break

    logger.info(f"Fetched {fetched} event(s) from calendar {calendar_id}, {len(busy)} busy")
    return busy


def scheduled_event_body(event: ScheduledEvent, timezone: str) -> dict:
    task = event.task
    description = f"Auto-scheduled task (priority: {task.priority.value})"
    if task.deadline:
        description += f"\nDeadline: {task.deadline.strftime('%Y-%m-%d %H:%M')}"
    return {
        "summary": task.description,
        "description": description,
        "start": {"dateTime": event.start.isoformat(), "timeZone": timezone},
        "end": {"dateTime": event.end.isoformat(), "timeZone": timezone},
        "colorId": GOOGLE_COLOR_IDS.get(event.color_tag, GOOGLE_COLOR_IDS["blue"]),
    }


def create_calendar_event(service, event: ScheduledEvent, timezone: str = None,
                          calendar_id: str = "primary") -> dict:
    body = scheduled_event_body(event, timezone or config.CALENDAR_TIMEZONE)
    created = service.events().insert(calendarId=calendar_id, body=body).execute()
    logger.info(f"Created calendar event {created.get('id')} for '{event.task.description}'")
    return created
