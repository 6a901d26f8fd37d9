"""Staff service — staff CRUD, password checks and login lookup."""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from booking_admin.exceptions import ConflictError, NotFoundError
from booking_admin.middleware.auth import hash_password, verify_password
from booking_admin.models.appointment import Appointment
from booking_admin.models.role import Role
from booking_admin.models.staff import Staff
from booking_admin.services.audit_service import entity_snapshot, record_change_best_effort

PROFILE_FIELDS = (
    "first_name",
    "last_name",
    "phone_number",
    "email",
    "username",
    "role_id",
    "address",
    "city",
    "province",
    "postal_code",
)
REQUIRED_FIELDS = ("first_name", "last_name", "email", "username", "password", "role_id")


def list_staff(db: Session) -> list[Staff]:
    return db.query(Staff).order_by(Staff.staff_id).all()


def get_staff(db: Session, staff_id: int) -> Optional[Staff]:
    return db.query(Staff).filter(Staff.staff_id == staff_id).first()


def find_by_identifier(db: Session, identifier: str) -> Optional[Staff]:
    """Look a staff member up by email or username."""
    return (
        db.query(Staff)
        .filter(or_(Staff.email == identifier, Staff.username == identifier))
        .first()
    )


def authenticate(db: Session, identifier: str, password: str) -> Optional[Staff]:
    staff = find_by_identifier(db, identifier)
    if not staff or not verify_password(password, staff.hashed_password):
        return None
    return staff


def _check_unique(db: Session, email: Optional[str], username: Optional[str], exclude_id=None) -> None:
    for column, value, label in ((Staff.email, email, "Email"), (Staff.username, username, "Username")):
        if not value:
            continue
        query = db.query(Staff).filter(column == value)
        if exclude_id is not None:
            query = query.filter(Staff.staff_id != exclude_id)
        if query.first():
            raise ConflictError(f"{label} already in use")


def _check_role(db: Session, role_id) -> None:
    if not db.query(Role).filter(Role.role_id == role_id).first():
        raise ValueError("Role does not exist")


def create_staff(db: Session, data: dict, actor: Optional[str]) -> Staff:
    """Create a staff member; the plain ``password`` is stored bcrypt-hashed."""
    missing = [f for f in REQUIRED_FIELDS if not data.get(f)]
    if missing:
        raise ValueError("Missing required fields.")
    _check_role(db, data["role_id"])
    _check_unique(db, data["email"], data["username"])

    staff = Staff(
        **{f: data.get(f) for f in PROFILE_FIELDS},
        hashed_password=hash_password(data["password"]),
    )
    db.add(staff)
    db.commit()
    db.refresh(staff)

    record_change_best_effort(db, "staff", staff.staff_id, "create", actor, new=entity_snapshot(staff))
    return staff


def update_staff(db: Session, staff_id: int, data: dict, actor: Optional[str]) -> Staff:
    """Update only the fields provided with a truthy value."""
    staff = get_staff(db, staff_id)
    if not staff:
        raise NotFoundError("Staff member not found.")

    changes = {f: data[f] for f in PROFILE_FIELDS if data.get(f)}
    if data.get("password"):
        changes["hashed_password"] = hash_password(data["password"])
    if not changes:
        raise ValueError("At least one field required for update.")
    if "role_id" in changes:
        _check_role(db, changes["role_id"])
    _check_unique(db, changes.get("email"), changes.get("username"), exclude_id=staff_id)

    before = entity_snapshot(staff)
    for field, value in changes.items():
        setattr(staff, field, value)
    db.commit()
    db.refresh(staff)

    record_change_best_effort(
        db, "staff", staff_id, "update", actor, old=before, new=entity_snapshot(staff)
    )
    return staff


def delete_staff(db: Session, staff_id: int, actor: Optional[str]) -> None:
    """Delete a staff member together with the appointments assigned to them."""
    staff = get_staff(db, staff_id)
    if not staff:
        raise NotFoundError("Staff member not found.")

    appointments = db.query(Appointment).filter(Appointment.staff_id == staff_id).all()
    removed = [(a.appointment_id, entity_snapshot(a)) for a in appointments]
    before = entity_snapshot(staff)
    for appointment in appointments:
        db.delete(appointment)
    db.delete(staff)
    db.commit()

    for appointment_id, snapshot in removed:
        record_change_best_effort(db, "appointment", appointment_id, "delete", actor, old=snapshot)
    record_change_best_effort(db, "staff", staff_id, "delete", actor, old=before)


def verify_staff_password(db: Session, staff_id: int, password: str) -> bool:
    staff = get_staff(db, staff_id)
    if not staff:
        raise NotFoundError("Staff member not found.")
    return verify_password(password, staff.hashed_password)
