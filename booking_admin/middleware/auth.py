"""JWT authentication, request context and permission dependencies."""

from datetime import datetime, timedelta, timezone

import bcrypt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from pydantic import BaseModel
from sqlalchemy.orm import Session

from booking_admin.config import settings
from booking_admin.database import get_db
from booking_admin.models.role import Permission, RolePermission
from booking_admin.models.staff import Staff

security = HTTPBearer()


class RequestContext(BaseModel):
    """Who is making the current request and what they may do.

    Built fresh for every request from the bearer token and the database;
    handlers receive it explicitly instead of reading ambient state.
    """

    staff_id: int
    username: str
    display_name: str
    role_id: int
    role_name: str
    permissions: list[str] = []

    def has_permissions(self, *required: str) -> bool:
        return all(p in self.permissions for p in required)


def hash_password(password: str) -> str:
    """Hash a password using bcrypt directly (passlib is broken with bcrypt>=4.1)."""
    pwd_bytes = password.encode("utf-8")
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(pwd_bytes, salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a bcrypt hash."""
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"),
            hashed_password.encode("utf-8"),
        )
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def create_access_token(data: dict) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> dict:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        return payload
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )


def permissions_for_role(db: Session, role_id: int) -> list[str]:
    """Names of every permission granted to a role, alphabetically."""
    rows = (
        db.query(Permission.permission_name)
        .join(RolePermission, RolePermission.permission_id == Permission.permission_id)
        .filter(RolePermission.role_id == role_id)
        .order_by(Permission.permission_name)
        .all()
    )
    return [name for (name,) in rows]


def build_context(db: Session, staff: Staff) -> RequestContext:
    return RequestContext(
        staff_id=staff.staff_id,
        username=staff.username,
        display_name=staff.display_name,
        role_id=staff.role_id,
        role_name=staff.role.role_name if staff.role else "No Role",
        permissions=permissions_for_role(db, staff.role_id),
    )


def get_request_context(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> RequestContext:
    payload = decode_token(credentials.credentials)
    staff_id = payload.get("sub")
    if not staff_id:
        raise HTTPException(status_code=401, detail="Invalid token payload")
    try:
        staff_id = int(staff_id)
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid token payload")
    staff = db.query(Staff).filter(Staff.staff_id == staff_id).first()
    if not staff:
        raise HTTPException(status_code=401, detail="Staff member not found")
    return build_context(db, staff)


def require_permissions(*required: str):
    """Dependency factory: 403 unless the caller holds every named permission."""

    def dependency(ctx: RequestContext = Depends(get_request_context)) -> RequestContext:
        if not ctx.has_permissions(*required):
            raise HTTPException(status_code=403, detail="Forbidden")
        return ctx

    return dependency
