"""Appointment history service — last-known-state snapshots of appointments.

``refresh_snapshot`` re-reads the joined appointment view and upserts one
``AppointmentHistory`` row per appointment id. Concurrent refreshes of the
same appointment are last-writer-wins; no version token is kept.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from booking_admin.exceptions import PersistenceError
from booking_admin.models.appointment import Appointment
from booking_admin.models.appointment_history import AppointmentHistory
from booking_admin.models.client import Client
from booking_admin.models.service import Service
from booking_admin.services.audit_service import resolve_actor

logger = logging.getLogger(__name__)


def _joined_view(db: Session, appointment_id: int) -> Optional[dict]:
    row = (
        db.query(Appointment, Client, Service)
        .join(Client, Appointment.client_id == Client.client_id)
        .join(Service, Appointment.service_id == Service.service_id)
        .filter(Appointment.appointment_id == appointment_id)
        .first()
    )
    if row is None:
        return None
    appointment, client, service = row
    return {
        "client_name": f"{client.first_name} {client.last_name}",
        "service_name": service.name,
        "service_price": service.price,
        "service_category": service.category,
        "service_description": service.description,
        "appointment_date": appointment.appointment_date,
        "start_time": appointment.start_time,
        "end_time": appointment.end_time,
        "notes": appointment.notes,
        "status": appointment.status,
        "staff_id": appointment.staff_id,
    }


def refresh_snapshot(
    db: Session, appointment_id: int, actor: Optional[str] = None
) -> Optional[AppointmentHistory]:
    """Upsert the snapshot row for an appointment.

    Returns None without writing anything if the appointment does not exist
    (e.g. it was just deleted). Raises PersistenceError if the upsert fails.
    """
    view = _joined_view(db, appointment_id)
    if view is None:
        logger.debug(f"No appointment #{appointment_id}, snapshot left untouched")
        return None

    try:
        snapshot = (
            db.query(AppointmentHistory)
            .filter(AppointmentHistory.appointment_id == appointment_id)
            .first()
        )
        if snapshot is None:
            snapshot = AppointmentHistory(appointment_id=appointment_id)
            db.add(snapshot)

        for field, value in view.items():
            setattr(snapshot, field, value)
        snapshot.changed_by = resolve_actor(actor)
        snapshot.created_at = datetime.now(timezone.utc)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceError(f"Failed to refresh snapshot for appointment #{appointment_id}") from e

    db.refresh(snapshot)
    return snapshot


def refresh_snapshot_best_effort(
    db: Session, appointment_id: int, actor: Optional[str] = None
) -> Optional[AppointmentHistory]:
    """Call ``refresh_snapshot`` and log, rather than raise, a persistence failure."""
    try:
        return refresh_snapshot(db, appointment_id, actor)
    except PersistenceError:
        logger.exception(f"Snapshot refresh failed for appointment #{appointment_id}")
        return None


def list_appointment_snapshots(
    db: Session, limit: Optional[int] = None, offset: int = 0
) -> list[AppointmentHistory]:
    """All snapshot rows, most recently refreshed first."""
    query = db.query(AppointmentHistory).order_by(
        AppointmentHistory.created_at.desc(), AppointmentHistory.history_id.desc()
    )
    if offset:
        query = query.offset(offset)
    if limit is not None:
        query = query.limit(limit)
    return query.all()
