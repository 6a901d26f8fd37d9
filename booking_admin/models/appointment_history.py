"""Appointment history model — one denormalized "last known state" row per appointment.

Rows are overwritten in place on every appointment mutation and are not
removed when the appointment itself is deleted.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Float, Date, Time, DateTime, Text

from booking_admin.database import Base


class AppointmentHistory(Base):
    __tablename__ = "AppointmentHistory"

    history_id = Column(Integer, primary_key=True, autoincrement=True)
    # No FK: the row outlives the appointment it describes.
    appointment_id = Column(Integer, unique=True, nullable=False)
    client_name = Column(String(255), nullable=False)
    service_name = Column(String(255), nullable=False)
    service_price = Column(Float, nullable=False)
    service_category = Column(String(100), nullable=True)
    service_description = Column(Text, nullable=True)
    appointment_date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    notes = Column(Text, nullable=True)
    status = Column(String(20), nullable=False)
    staff_id = Column(Integer, nullable=True)
    changed_by = Column(String(255), nullable=True)
    created_at = Column(DateTime, nullable=False, index=True, default=lambda: datetime.now(timezone.utc))
