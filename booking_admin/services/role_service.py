"""Role service — roles, permissions and the grants between them.

Role creation, deletion and permission grant changes are change-logged as
entity type ``role``; a grant change is an ``update`` whose old/new states
list the role's permission names before and after.
"""

from typing import Optional

from sqlalchemy.orm import Session

from booking_admin.exceptions import ConflictError, NotFoundError
from booking_admin.middleware.auth import permissions_for_role
from booking_admin.models.role import Permission, Role, RolePermission
from booking_admin.models.staff import Staff
from booking_admin.services.audit_service import entity_snapshot, record_change_best_effort

# Every permission the API checks, with the description shown in the dashboard.
DEFAULT_PERMISSIONS = {
    "appointment_read_all": "List all appointments and their history",
    "appointment_read_single": "View a single appointment",
    "appointment_create": "Book appointments",
    "appointment_update": "Edit appointments",
    "appointment_delete": "Delete appointments",
    "appointment_confirm_deny": "Confirm or decline appointments",
    "client_read_all": "List clients",
    "client_read_single": "View a single client",
    "client_create": "Create clients",
    "client_update": "Edit clients",
    "client_delete": "Delete clients",
    "service_read_all": "List services",
    "service_read_single": "View a single service",
    "service_create": "Create services",
    "service_update": "Edit services",
    "service_delete": "Delete services",
    "staff_read_all": "List staff",
    "staff_read_single": "View a single staff member",
    "staff_create": "Create staff",
    "staff_update": "Edit staff",
    "staff_delete": "Delete staff",
    "verify_password": "Verify a staff member's password",
    "role_read_all": "List roles and their permissions",
    "role_create": "Create roles",
    "role_delete": "Delete roles",
    "role_permission_update": "Grant or revoke role permissions",
    "permission_read_all": "List permissions",
    "permission_create": "Create permissions",
    "permission_delete": "Delete permissions",
    "logs_read_all": "Read the change log",
}


def _role_state(db: Session, role: Role) -> dict:
    state = entity_snapshot(role)
    state["permissions"] = permissions_for_role(db, role.role_id)
    return state


# ── Roles ────────────────────────────────────────────────────────────────────

def list_roles(db: Session) -> list[Role]:
    return db.query(Role).order_by(Role.role_id).all()


def get_role(db: Session, role_id: int) -> Optional[Role]:
    return db.query(Role).filter(Role.role_id == role_id).first()


def create_role(db: Session, role_name: str, actor: Optional[str]) -> Role:
    role_name = (role_name or "").strip()
    if not role_name:
        raise ValueError("Role name is required.")
    if db.query(Role).filter(Role.role_name == role_name).first():
        raise ConflictError("Role already exists.")

    role = Role(role_name=role_name)
    db.add(role)
    db.commit()
    db.refresh(role)

    record_change_best_effort(db, "role", role.role_id, "create", actor, new=_role_state(db, role))
    return role


def delete_role(db: Session, role_id: int, actor: Optional[str]) -> None:
    role = get_role(db, role_id)
    if not role:
        raise NotFoundError("Role not found.")
    if db.query(Staff).filter(Staff.role_id == role_id).count():
        raise ConflictError("Cannot delete role because it is assigned to staff members.")

    before = _role_state(db, role)
    db.delete(role)
    db.commit()

    record_change_best_effort(db, "role", role_id, "delete", actor, old=before)


# ── Permissions ──────────────────────────────────────────────────────────────

def list_permissions(db: Session) -> list[Permission]:
    return db.query(Permission).order_by(Permission.permission_id).all()


def create_permission(db: Session, permission_name: str, description: Optional[str] = None) -> Permission:
    permission_name = (permission_name or "").strip()
    if not permission_name:
        raise ValueError("Permission name is required.")
    if db.query(Permission).filter(Permission.permission_name == permission_name).first():
        raise ConflictError("Permission already exists.")

    permission = Permission(permission_name=permission_name, permission_description=description)
    db.add(permission)
    db.commit()
    db.refresh(permission)
    return permission


def delete_permission(db: Session, permission_id: int) -> None:
    permission = db.query(Permission).filter(Permission.permission_id == permission_id).first()
    if not permission:
        raise NotFoundError("Permission not found.")
    db.delete(permission)
    db.commit()


# ── Role <-> Permission ──────────────────────────────────────────────────────

def list_role_permissions(db: Session, role_id: int) -> list[Permission]:
    if not get_role(db, role_id):
        raise NotFoundError("Role not found.")
    return (
        db.query(Permission)
        .join(RolePermission, RolePermission.permission_id == Permission.permission_id)
        .filter(RolePermission.role_id == role_id)
        .order_by(Permission.permission_id)
        .all()
    )


def add_permission_to_role(db: Session, role_id: int, permission_id: int, actor: Optional[str]) -> None:
    role = get_role(db, role_id)
    if not role:
        raise NotFoundError("Role not found.")
    if not db.query(Permission).filter(Permission.permission_id == permission_id).first():
        raise NotFoundError("Permission not found.")
    existing = db.query(RolePermission).filter(
        RolePermission.role_id == role_id,
        RolePermission.permission_id == permission_id,
    ).first()
    if existing:
        raise ConflictError("This permission is already assigned to this role.")

    before = _role_state(db, role)
    db.add(RolePermission(role_id=role_id, permission_id=permission_id))
    db.commit()

    record_change_best_effort(db, "role", role_id, "update", actor, old=before, new=_role_state(db, role))


def remove_permission_from_role(db: Session, role_id: int, permission_id: int, actor: Optional[str]) -> None:
    role = get_role(db, role_id)
    if not role:
        raise NotFoundError("Role not found.")
    link = db.query(RolePermission).filter(
        RolePermission.role_id == role_id,
        RolePermission.permission_id == permission_id,
    ).first()
    if not link:
        raise NotFoundError("Permission not found for this role.")

    before = _role_state(db, role)
    db.delete(link)
    db.commit()

    record_change_best_effort(db, "role", role_id, "update", actor, old=before, new=_role_state(db, role))


def seed_defaults(db: Session, admin_role_name: str = "Admin") -> Role:
    """Ensure every default permission exists and the admin role holds them all.

    Idempotent; returns the admin role.
    """
    existing = {p.permission_name: p for p in db.query(Permission).all()}
    for name, description in DEFAULT_PERMISSIONS.items():
        if name not in existing:
            permission = Permission(permission_name=name, permission_description=description)
            db.add(permission)
            existing[name] = permission

    role = db.query(Role).filter(Role.role_name == admin_role_name).first()
    if not role:
        role = Role(role_name=admin_role_name)
        db.add(role)
    db.flush()

    granted = {
        link.permission_id
        for link in db.query(RolePermission).filter(RolePermission.role_id == role.role_id).all()
    }
    for name in DEFAULT_PERMISSIONS:
        permission = existing[name]
        if permission.permission_id not in granted:
            db.add(RolePermission(role_id=role.role_id, permission_id=permission.permission_id))
    db.commit()
    db.refresh(role)
    return role
