"""Client model."""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from booking_admin.database import Base


class Client(Base):
    __tablename__ = "Clients"

    client_id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    phone_number = Column(String(30), nullable=False)
    address = Column(String(255), nullable=True)
    city = Column(String(100), nullable=True)
    postal_code = Column(String(20), nullable=True)

    appointments = relationship("Appointment", back_populates="client")
