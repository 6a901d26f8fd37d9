"""Appointment request/response schemas."""

from datetime import date, time
from typing import Literal, Optional

from pydantic import BaseModel


class AppointmentCreate(BaseModel):
    client_id: int
    service_id: int
    appointment_date: date
    start_time: time
    end_time: time
    staff_id: Optional[int] = None
    notes: Optional[str] = None
    status: Literal["pending", "confirmed", "declined"] = "pending"


class AppointmentUpdate(BaseModel):
    """Partial update; only fields sent by the client are applied."""

    client_id: Optional[int] = None
    service_id: Optional[int] = None
    appointment_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    staff_id: Optional[int] = None
    notes: Optional[str] = None
    status: Optional[Literal["pending", "confirmed", "declined"]] = None


class AppointmentDecision(BaseModel):
    status: str  # confirmed | declined
    staff_id: Optional[int] = None
    reason: Optional[str] = None


class AppointmentResponse(BaseModel):
    appointment_id: int
    client_id: int
    service_id: int
    staff_id: Optional[int] = None
    appointment_date: date
    start_time: time
    end_time: time
    notes: Optional[str] = None
    status: str
    client_first_name: Optional[str] = None
    client_last_name: Optional[str] = None
    service_name: Optional[str] = None
    service_description: Optional[str] = None
    service_price: Optional[float] = None
    service_category: Optional[str] = None
