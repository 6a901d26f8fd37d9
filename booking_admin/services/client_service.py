"""Client service — client CRUD with change logging."""

from typing import Optional

from sqlalchemy.orm import Session

from booking_admin.exceptions import ConflictError, NotFoundError
from booking_admin.models.appointment import Appointment
from booking_admin.models.client import Client
from booking_admin.services.audit_service import entity_snapshot, record_change_best_effort

CLIENT_FIELDS = ("first_name", "last_name", "email", "phone_number", "address", "city", "postal_code")
REQUIRED_FIELDS = ("first_name", "last_name", "email", "phone_number")


def _validate(data: dict) -> None:
    missing = [f for f in REQUIRED_FIELDS if not str(data.get(f) or "").strip()]
    if missing:
        raise ValueError(f"Missing required fields: {', '.join(missing)}")


def list_clients(db: Session) -> list[Client]:
    return db.query(Client).order_by(Client.client_id).all()


def get_client(db: Session, client_id: int) -> Optional[Client]:
    return db.query(Client).filter(Client.client_id == client_id).first()


def create_client(db: Session, data: dict, actor: Optional[str]) -> Client:
    """Create a client and log the creation."""
    _validate(data)
    client = Client(**{f: data.get(f) for f in CLIENT_FIELDS})
    db.add(client)
    db.commit()
    db.refresh(client)

    record_change_best_effort(
        db, "client", client.client_id, "create", actor, new=entity_snapshot(client)
    )
    return client


def update_client(db: Session, client_id: int, data: dict, actor: Optional[str]) -> Client:
    """Replace every editable field of a client."""
    _validate(data)
    client = get_client(db, client_id)
    if not client:
        raise NotFoundError("Client not found")

    before = entity_snapshot(client)
    for field in CLIENT_FIELDS:
        setattr(client, field, data.get(field))
    db.commit()
    db.refresh(client)

    record_change_best_effort(
        db, "client", client_id, "update", actor, old=before, new=entity_snapshot(client)
    )
    return client


def delete_client(db: Session, client_id: int, actor: Optional[str]) -> None:
    client = get_client(db, client_id)
    if not client:
        raise NotFoundError("Client not found")
    booked = db.query(Appointment).filter(Appointment.client_id == client_id).count()
    if booked:
        raise ConflictError("Cannot delete client because they have appointments.")

    before = entity_snapshot(client)
    db.delete(client)
    db.commit()

    record_change_best_effort(db, "client", client_id, "delete", actor, old=before)
