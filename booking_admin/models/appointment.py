"""Appointment model."""

from sqlalchemy import Column, Integer, String, Date, Time, Text, ForeignKey
from sqlalchemy.orm import relationship

from booking_admin.database import Base


class Appointment(Base):
    __tablename__ = "Appointments"

    appointment_id = Column(Integer, primary_key=True, autoincrement=True)
    client_id = Column(Integer, ForeignKey("Clients.client_id"), nullable=False)
    service_id = Column(Integer, ForeignKey("Services.service_id"), nullable=False)
    staff_id = Column(Integer, ForeignKey("Staff.staff_id"), nullable=True)
    appointment_date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    notes = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="pending")  # pending | confirmed | declined

    # Relationships
    client = relationship("Client", back_populates="appointments")
    service = relationship("Service", back_populates="appointments")
    staff = relationship("Staff", back_populates="appointments")
