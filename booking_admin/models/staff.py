"""Staff model (dashboard users)."""

from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship

from booking_admin.database import Base


class Staff(Base):
    __tablename__ = "Staff"

    staff_id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone_number = Column(String(30), nullable=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    username = Column(String(100), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    role_id = Column(Integer, ForeignKey("Roles.role_id"), nullable=False)
    address = Column(String(255), nullable=True)
    city = Column(String(100), nullable=True)
    province = Column(String(100), nullable=True)
    postal_code = Column(String(20), nullable=True)

    # Relationships
    role = relationship("Role", back_populates="staff")
    appointments = relationship("Appointment", back_populates="staff")

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
