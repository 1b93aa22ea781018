# apigestion/schemas/alert.py
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from apigestion.models.alert import AlertKind, AlertPriority


class AlertCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1)
    kind: AlertKind
    priority: AlertPriority


class AlertOut(BaseModel):
    id: int
    title: str
    message: str
    kind: AlertKind
    priority: AlertPriority
    owner_id: int
    is_read: bool
    created_at: datetime
    is_recurring: bool
    frequency_days: Optional[int]
    entity_type: Optional[str]
    entity_id: Optional[int]
    next_due_at: Optional[datetime]
    last_fired_at: Optional[datetime]
    active: Optional[bool]

    class Config:
        from_attributes = True


class SchedulerStatus(BaseModel):
    is_active: bool
    interval_seconds: float


class SweepResult(BaseModel):
    generated: int
