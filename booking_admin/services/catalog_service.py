"""Catalog service — CRUD for bookable services."""

from typing import Optional

from sqlalchemy.orm import Session

from booking_admin.exceptions import ConflictError, NotFoundError
from booking_admin.models.appointment import Appointment
from booking_admin.models.service import Service
from booking_admin.services.audit_service import entity_snapshot, record_change_best_effort

SERVICE_FIELDS = ("name", "duration_minutes", "price", "description", "category")


def _validate(data: dict) -> None:
    missing = [f for f in SERVICE_FIELDS if data.get(f) is None or str(data.get(f)).strip() == ""]
    if missing:
        raise ValueError("All fields are required.")
    if int(data["duration_minutes"]) <= 0:
        raise ValueError("duration_minutes must be positive")
    if float(data["price"]) < 0:
        raise ValueError("price cannot be negative")


def list_services(db: Session) -> list[Service]:
    return db.query(Service).order_by(Service.service_id).all()


def get_service(db: Session, service_id: int) -> Optional[Service]:
    return db.query(Service).filter(Service.service_id == service_id).first()


def create_service(db: Session, data: dict, actor: Optional[str]) -> Service:
    _validate(data)
    service = Service(**{f: data[f] for f in SERVICE_FIELDS})
    db.add(service)
    db.commit()
    db.refresh(service)

    record_change_best_effort(
        db, "service", service.service_id, "create", actor, new=entity_snapshot(service)
    )
    return service


def update_service(db: Session, service_id: int, data: dict, actor: Optional[str]) -> Service:
    _validate(data)
    service = get_service(db, service_id)
    if not service:
        raise NotFoundError("Service not found.")

    before = entity_snapshot(service)
    for field in SERVICE_FIELDS:
        setattr(service, field, data[field])
    db.commit()
    db.refresh(service)

    record_change_best_effort(
        db, "service", service_id, "update", actor, old=before, new=entity_snapshot(service)
    )
    return service


def delete_service(db: Session, service_id: int, actor: Optional[str]) -> None:
    service = get_service(db, service_id)
    if not service:
        raise NotFoundError("Service not found.")
    booked = db.query(Appointment).filter(Appointment.service_id == service_id).count()
    if booked:
        raise ConflictError("Cannot delete service because it has appointments.")

    before = entity_snapshot(service)
    db.delete(service)
    db.commit()

    record_change_best_effort(db, "service", service_id, "delete", actor, old=before)
