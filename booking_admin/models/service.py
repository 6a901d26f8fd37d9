"""Service model — the bookable catalogue (haircut, massage, ...)."""

from sqlalchemy import Column, Integer, String, Float, Text
from sqlalchemy.orm import relationship

from booking_admin.database import Base


class Service(Base):
    __tablename__ = "Services"

    service_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    price = Column(Float, nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(100), nullable=False)

    appointments = relationship("Appointment", back_populates="service")
