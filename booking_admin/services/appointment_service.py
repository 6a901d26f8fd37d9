"""Appointment service — booking CRUD, confirm/decline, audit and snapshots.

Every successful create/update/confirm/decline commits the appointment,
then refreshes its history snapshot and writes a change record. Deletes
write a change record only; the snapshot row is kept as the last known
state.
"""

from typing import Optional

from sqlalchemy.orm import Session

from booking_admin.exceptions import NotFoundError
from booking_admin.models.appointment import Appointment
from booking_admin.models.client import Client
from booking_admin.models.service import Service
from booking_admin.models.staff import Staff
from booking_admin.services.audit_service import entity_snapshot, record_change_best_effort
from booking_admin.services.history_service import refresh_snapshot_best_effort

STATUSES = ("pending", "confirmed", "declined")
EDITABLE_FIELDS = (
    "client_id",
    "service_id",
    "staff_id",
    "appointment_date",
    "start_time",
    "end_time",
    "notes",
    "status",
)
REQUIRED_FIELDS = ("client_id", "service_id", "appointment_date", "start_time", "end_time")


def appointment_view(appointment: Appointment) -> dict:
    """Appointment columns joined with client and service details."""
    view = entity_snapshot(appointment)
    client = appointment.client
    service = appointment.service
    view.update({
        "client_first_name": client.first_name if client else None,
        "client_last_name": client.last_name if client else None,
        "service_name": service.name if service else None,
        "service_description": service.description if service else None,
        "service_price": service.price if service else None,
        "service_category": service.category if service else None,
    })
    return view


def list_appointments(db: Session) -> list[dict]:
    appointments = (
        db.query(Appointment)
        .order_by(Appointment.appointment_date, Appointment.start_time, Appointment.appointment_id)
        .all()
    )
    return [appointment_view(a) for a in appointments]


def _get(db: Session, appointment_id: int) -> Optional[Appointment]:
    return db.query(Appointment).filter(Appointment.appointment_id == appointment_id).first()


def get_appointment(db: Session, appointment_id: int) -> Optional[dict]:
    appointment = _get(db, appointment_id)
    return appointment_view(appointment) if appointment else None


def _validate(db: Session, values: dict) -> None:
    missing = [f for f in REQUIRED_FIELDS if values.get(f) is None]
    if missing:
        raise ValueError(f"Missing required fields: {', '.join(missing)}")
    if values.get("status") not in STATUSES:
        raise ValueError(f"status must be one of: {', '.join(STATUSES)}")
    if values["end_time"] <= values["start_time"]:
        raise ValueError("end_time must be after start_time")
    if not db.query(Client).filter(Client.client_id == values["client_id"]).first():
        raise ValueError("Client does not exist")
    if not db.query(Service).filter(Service.service_id == values["service_id"]).first():
        raise ValueError("Service does not exist")
    staff_id = values.get("staff_id")
    if staff_id is not None and not db.query(Staff).filter(Staff.staff_id == staff_id).first():
        raise ValueError("Staff member does not exist")


def _after_write(
    db: Session,
    appointment_id: int,
    action: str,
    actor: Optional[str],
    old: Optional[dict] = None,
    new: Optional[dict] = None,
) -> None:
    if action != "delete":
        refresh_snapshot_best_effort(db, appointment_id, actor)
    record_change_best_effort(db, "appointment", appointment_id, action, actor, old=old, new=new)


def create_appointment(db: Session, data: dict, actor: Optional[str]) -> Appointment:
    values = {f: data.get(f) for f in EDITABLE_FIELDS}
    values["status"] = values["status"] or "pending"
    _validate(db, values)

    appointment = Appointment(**values)
    db.add(appointment)
    db.commit()
    db.refresh(appointment)

    appointment_id = appointment.appointment_id
    _after_write(db, appointment_id, "create", actor, new=entity_snapshot(appointment))
    return appointment


def update_appointment(
    db: Session, appointment_id: int, changes: dict, actor: Optional[str]
) -> Appointment:
    """Apply a partial update; keys outside EDITABLE_FIELDS are ignored."""
    appointment = _get(db, appointment_id)
    if not appointment:
        raise NotFoundError("Appointment not found")

    changes = {k: v for k, v in changes.items() if k in EDITABLE_FIELDS}
    if not changes:
        raise ValueError("At least one field required for update.")

    before = entity_snapshot(appointment)
    merged = {**before, **changes}
    _validate(db, merged)

    for field, value in changes.items():
        setattr(appointment, field, value)
    db.commit()
    db.refresh(appointment)

    _after_write(db, appointment_id, "update", actor, old=before, new=entity_snapshot(appointment))
    return appointment


def confirm_or_decline(
    db: Session,
    appointment_id: int,
    status: str,
    actor: Optional[str],
    staff_id: Optional[int] = None,
    reason: Optional[str] = None,
) -> Appointment:
    """Confirm (assigning a staff member) or decline (with a reason) an appointment.

    Declining stores the reason as the appointment notes and clears the
    staff assignment. Logged as an ``update``.
    """
    if status not in ("confirmed", "declined"):
        raise ValueError("Invalid status value provided.")

    appointment = _get(db, appointment_id)
    if not appointment:
        raise NotFoundError("Appointment not found")

    if status == "confirmed":
        if not staff_id:
            raise ValueError("Staff ID is required to confirm an appointment")
        if not db.query(Staff).filter(Staff.staff_id == staff_id).first():
            raise ValueError("Staff member does not exist")
    elif not (reason or "").strip():
        raise ValueError("Reason is required when declining an appointment")

    before = entity_snapshot(appointment)
    appointment.status = status
    appointment.staff_id = staff_id if status == "confirmed" else None
    appointment.notes = reason if status == "declined" else appointment.notes
    db.commit()
    db.refresh(appointment)

    _after_write(db, appointment_id, "update", actor, old=before, new=entity_snapshot(appointment))
    return appointment


def delete_appointment(db: Session, appointment_id: int, actor: Optional[str]) -> None:
    appointment = _get(db, appointment_id)
    if not appointment:
        raise NotFoundError("Appointment not found")

    before = entity_snapshot(appointment)
    db.delete(appointment)
    db.commit()

    _after_write(db, appointment_id, "delete", actor, old=before)
