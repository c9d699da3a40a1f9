"""
Schedule API endpoints
"""

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from googleapiclient.errors import HttpError
from sqlalchemy.orm import Session

from ..config import default_working_hours
from ..database import get_db
from ..models import ScheduledEventRecord
from ..schemas import (
    SchedulePreviewRequest, AutoScheduleRequest, TextScheduleRequest, ScheduleResponse,
    ScheduledEventRecordOut, TaskIn, BusyIntervalIn, WorkingHoursIn,
)
from ..scheduling import (
    TaskScheduler, Task, TimeSlot, WorkingHours, SchedulingError, unscheduled_tasks,
)
from ..services.date_parsing import parse_deadline, to_local_naive
from ..services.scheduler_service import auto_schedule, MissingCalendarToken
from ..services.task_extraction import extract_tasks, TaskExtractionError

logger = logging.getLogger(__name__)

router = APIRouter()


# ================================
# REQUEST CONVERSION
# ================================

def to_working_hours(working_hours_in: Optional[WorkingHoursIn]) -> WorkingHours:
    if working_hours_in is None:
        return default_working_hours()
    return WorkingHours(
        start_hour=working_hours_in.start_hour,
        end_hour=working_hours_in.end_hour,
        work_days=working_hours_in.work_days,
    )


def to_tasks(tasks_in: List[TaskIn], now: datetime) -> List[Task]:
    return [
        Task(
            description=task_in.description,
            priority=task_in.priority,
            deadline=parse_deadline(task_in.deadline, now),
            duration_minutes=task_in.duration_minutes,
        )
        for task_in in tasks_in
    ]


def to_busy(busy_in: List[BusyIntervalIn]) -> List[TimeSlot]:
    busy = []
    for interval in busy_in:
        try:
            busy.append(TimeSlot(to_local_naive(interval.start), to_local_naive(interval.end)))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
    return busy


def build_response(tasks: List[Task], scheduled) -> dict:
    return {
        "scheduled": [event.to_dict() for event in scheduled],
        "unscheduled": [task.to_dict() for task in unscheduled_tasks(tasks, scheduled)],
    }


def run_schedule(tasks: List[Task], busy: List[TimeSlot], working_hours: WorkingHours, now: datetime) -> dict:
    try:
        scheduled = TaskScheduler().schedule(tasks, busy, working_hours, now)
    except SchedulingError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return build_response(tasks, scheduled)


# ================================
# ENDPOINTS
# ================================

@router.post("/preview", response_model=ScheduleResponse)
def preview_schedule(request: SchedulePreviewRequest):
    """
    Place tasks around the given busy intervals without touching any calendar.
    """
    now = to_local_naive(request.now) if request.now else datetime.now()
    try:
        tasks = to_tasks(request.tasks, now)
    except SchedulingError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return run_schedule(tasks, to_busy(request.busy), to_working_hours(request.working_hours), now)


@router.post("/from-text", response_model=ScheduleResponse)
def schedule_from_text(request: TextScheduleRequest):
    """
    Extract tasks from free text with the LLM, then place them like /preview.
    """
    now = to_local_naive(request.now) if request.now else datetime.now()
    try:
        tasks = extract_tasks(request.text, now)
    except TaskExtractionError as e:
        raise HTTPException(status_code=400, detail=f"Failed to parse tasks: {e}")
    return run_schedule(tasks, to_busy(request.busy), to_working_hours(request.working_hours), now)


@router.post("/auto", response_model=ScheduleResponse)
def auto_schedule_tasks(request: AutoScheduleRequest, db: Session = Depends(get_db)):
    """
    Place tasks into the user's Google Calendar and record them.
    """
    now = to_local_naive(request.now) if request.now else datetime.now()
    try:
        tasks = to_tasks(request.tasks, now)
        scheduled, _ = auto_schedule(db, request.email, tasks, to_working_hours(request.working_hours), now)
    except SchedulingError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except MissingCalendarToken as e:
        raise HTTPException(status_code=401, detail=str(e))
    except HttpError as e:
        logger.error(f"❌ Google Calendar error while scheduling for {request.email}: {e}")
        raise HTTPException(status_code=502, detail="Google Calendar request failed")
    return build_response(tasks, scheduled)


@router.get("/events", response_model=List[ScheduledEventRecordOut])
def list_scheduled_events(
    email: str = Query(..., description="Owner of the scheduled events"),
    db: Session = Depends(get_db),
):
    return (
        db.query(ScheduledEventRecord)
        .filter(ScheduledEventRecord.owner_email == email)
        .order_by(ScheduledEventRecord.start_time.asc())
        .all()
    )
