"""Change log and appointment history response schemas."""

from datetime import date, datetime, time
from typing import Any, Optional

from pydantic import BaseModel


class ChangePayload(BaseModel):
    old: Optional[Any] = None
    new: Optional[Any] = None


class ChangeLogResponse(BaseModel):
    log_id: int
    entity_type: str
    entity_id: int
    action: str
    changed_by: str
    changes: ChangePayload
    created_at: datetime


class AppointmentHistoryResponse(BaseModel):
    history_id: int
    appointment_id: int
    client_name: str
    service_name: str
    service_price: float
    service_category: Optional[str] = None
    service_description: Optional[str] = None
    appointment_date: date
    start_time: time
    end_time: time
    notes: Optional[str] = None
    status: str
    staff_id: Optional[int] = None
    changed_by: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
