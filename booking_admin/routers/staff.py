"""Staff router — staff CRUD and password verification."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from booking_admin.database import get_db
from booking_admin.exceptions import status_for
from booking_admin.middleware.auth import RequestContext, require_permissions
from booking_admin.models.staff import Staff
from booking_admin.schemas.auth import MessageResponse
from booking_admin.schemas.staff import (
    StaffCreate,
    StaffUpdate,
    StaffResponse,
    VerifyPasswordRequest,
    VerifyPasswordResponse,
)
from booking_admin.services import staff_service

router = APIRouter(prefix="/api/staff", tags=["staff"])


def to_response(staff: Staff) -> StaffResponse:
    return StaffResponse(
        staff_id=staff.staff_id,
        first_name=staff.first_name,
        last_name=staff.last_name,
        email=staff.email,
        username=staff.username,
        role_id=staff.role_id,
        position=staff.role.role_name if staff.role else None,
        phone_number=staff.phone_number,
        address=staff.address,
        city=staff.city,
        province=staff.province,
        postal_code=staff.postal_code,
    )


@router.get("", response_model=list[StaffResponse])
def list_staff(
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_permissions("staff_read_all")),
):
    return [to_response(s) for s in staff_service.list_staff(db)]


@router.get("/{staff_id}", response_model=StaffResponse)
def get_staff(
    staff_id: int,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_permissions("staff_read_single")),
):
    staff = staff_service.get_staff(db, staff_id)
    if not staff:
        raise HTTPException(status_code=404, detail="Staff member not found.")
    return to_response(staff)


@router.post("", response_model=StaffResponse, status_code=201)
def create_staff(
    req: StaffCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_permissions("staff_create")),
):
    try:
        staff = staff_service.create_staff(db, req.model_dump(), ctx.display_name)
    except ValueError as e:
        raise HTTPException(status_code=status_for(e), detail=str(e))
    return to_response(staff)


@router.put("/{staff_id}", response_model=StaffResponse)
def update_staff(
    staff_id: int,
    req: StaffUpdate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_permissions("staff_update")),
):
    try:
        staff = staff_service.update_staff(db, staff_id, req.model_dump(), ctx.display_name)
    except ValueError as e:
        raise HTTPException(status_code=status_for(e), detail=str(e))
    return to_response(staff)


@router.delete("/{staff_id}", response_model=MessageResponse)
def delete_staff(
    staff_id: int,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_permissions("staff_delete")),
):
    """Delete a staff member and every appointment assigned to them."""
    try:
        staff_service.delete_staff(db, staff_id, ctx.display_name)
    except ValueError as e:
        raise HTTPException(status_code=status_for(e), detail=str(e))
    return MessageResponse(message="Staff member deleted successfully.")


@router.post("/{staff_id}/verify-password", response_model=VerifyPasswordResponse)
def verify_password(
    staff_id: int,
    req: VerifyPasswordRequest,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_permissions("verify_password")),
):
    try:
        valid = staff_service.verify_staff_password(db, staff_id, req.password)
    except ValueError as e:
        raise HTTPException(status_code=status_for(e), detail=str(e))
    return VerifyPasswordResponse(valid=valid)
