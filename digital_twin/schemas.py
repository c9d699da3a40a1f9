from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional, List, Union

from .scheduling.core.constants import DEFAULT_START_HOUR, DEFAULT_END_HOUR, DEFAULT_WORK_DAYS
from .scheduling.core.task import Priority

# ----------------- Scheduling Input Schemas ---------------------

class TaskIn(BaseModel):
    description: str
    priority: Optional[str] = None  # high / medium / low, anything else counts as medium
    deadline: Optional[Union[datetime, str]] = None  # ISO-8601, DD/MM/YYYY, "tomorrow", "Friday", ...
    duration_minutes: Optional[int] = None  # defaults to 60

class BusyIntervalIn(BaseModel):
    start: datetime
    end: datetime

class WorkingHoursIn(BaseModel):
    start_hour: int = DEFAULT_START_HOUR
    end_hour: int = DEFAULT_END_HOUR
    work_days: List[int] = Field(default_factory=lambda: list(DEFAULT_WORK_DAYS))  # 0=Sunday .. 6=Saturday

class SchedulePreviewRequest(BaseModel):
    tasks: List[TaskIn]
    busy: List[BusyIntervalIn] = Field(default_factory=list)
    working_hours: Optional[WorkingHoursIn] = None
    now: Optional[datetime] = None

class AutoScheduleRequest(BaseModel):
    email: str
    tasks: List[TaskIn]
    working_hours: Optional[WorkingHoursIn] = None
    now: Optional[datetime] = None

class TextScheduleRequest(BaseModel):
    text: str
    busy: List[BusyIntervalIn] = Field(default_factory=list)
    working_hours: Optional[WorkingHoursIn] = None
    now: Optional[datetime] = None

# ----------------- Scheduling Output Schemas ---------------------

class TaskOut(BaseModel):
    description: str
    priority: Priority
    deadline: Optional[datetime] = None
    duration_minutes: int

class ScheduledEventOut(BaseModel):
    description: str
    priority: Priority
    deadline: Optional[datetime] = None
    duration_minutes: int
    start_time: datetime
    end_time: datetime
    color_tag: str

class ScheduleResponse(BaseModel):
    scheduled: List[ScheduledEventOut]
    unscheduled: List[TaskOut]

class ScheduledEventRecordOut(BaseModel):
    id: int
    owner_email: str
    description: str
    priority: Priority
    deadline: Optional[datetime] = None
    start_time: datetime
    end_time: datetime
    color_tag: str
    google_event_id: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
