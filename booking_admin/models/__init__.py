"""SQLAlchemy ORM models."""

from booking_admin.models.role import Role, Permission, RolePermission
from booking_admin.models.staff import Staff
from booking_admin.models.client import Client
from booking_admin.models.service import Service
from booking_admin.models.appointment import Appointment
from booking_admin.models.change_log import ChangeLog
from booking_admin.models.appointment_history import AppointmentHistory

__all__ = [
    "Role",
    "Permission",
    "RolePermission",
    "Staff",
    "Client",
    "Service",
    "Appointment",
    "ChangeLog",
    "AppointmentHistory",
]
