"""Auth router — staff login and current staff info."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from booking_admin.config import settings
from booking_admin.database import get_db
from booking_admin.middleware.auth import (
    RequestContext,
    build_context,
    create_access_token,
    get_request_context,
)
from booking_admin.middleware.rate_limit import limiter
from booking_admin.routers.staff import to_response
from booking_admin.schemas.auth import LoginRequest, TokenResponse
from booking_admin.schemas.staff import StaffResponse
from booking_admin.services import staff_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
def login(request: Request, req: LoginRequest, db: Session = Depends(get_db)):
    """Login with email or username and get a JWT token."""
    if not req.identifier or not req.password:
        raise HTTPException(status_code=400, detail="Email/username and password are required.")

    staff = staff_service.authenticate(db, req.identifier, req.password)
    if not staff:
        logger.info(f"Failed login for '{req.identifier}'")
        raise HTTPException(status_code=401, detail="Invalid credentials.")

    ctx = build_context(db, staff)
    token = create_access_token({
        "sub": str(ctx.staff_id),
        "username": ctx.username,
        "display_name": ctx.display_name,
        "role_id": ctx.role_id,
        "role_name": ctx.role_name,
        "permissions": ctx.permissions,
    })
    return TokenResponse(
        access_token=token,
        username=ctx.username,
        display_name=ctx.display_name,
        role=ctx.role_name,
        permissions=ctx.permissions,
    )


@router.get("/me", response_model=StaffResponse)
def get_me(
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context),
):
    """Get the logged-in staff member's profile."""
    staff = staff_service.get_staff(db, ctx.staff_id)
    if not staff:
        raise HTTPException(status_code=404, detail="Staff member not found.")
    return to_response(staff)
