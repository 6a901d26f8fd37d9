"""Appointments router — booking CRUD and confirm/decline."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from booking_admin.database import get_db
from booking_admin.exceptions import status_for
from booking_admin.middleware.auth import RequestContext, require_permissions
from booking_admin.schemas.appointment import (
    AppointmentCreate,
    AppointmentUpdate,
    AppointmentDecision,
    AppointmentResponse,
)
from booking_admin.schemas.auth import MessageResponse
from booking_admin.services import appointment_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/appointments", tags=["appointments"])


@router.get("", response_model=list[AppointmentResponse])
def list_appointments(
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_permissions("appointment_read_all")),
):
    return [AppointmentResponse(**a) for a in appointment_service.list_appointments(db)]


@router.get("/{appointment_id}", response_model=AppointmentResponse)
def get_appointment(
    appointment_id: int,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_permissions("appointment_read_single")),
):
    view = appointment_service.get_appointment(db, appointment_id)
    if not view:
        raise HTTPException(status_code=404, detail="Not found")
    return AppointmentResponse(**view)


@router.post("", response_model=AppointmentResponse, status_code=201)
def create_appointment(
    req: AppointmentCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_permissions("appointment_create")),
):
    try:
        appointment = appointment_service.create_appointment(db, req.model_dump(), ctx.display_name)
    except ValueError as e:
        raise HTTPException(status_code=status_for(e), detail=str(e))
    return AppointmentResponse(**appointment_service.appointment_view(appointment))


@router.put("/{appointment_id}", response_model=AppointmentResponse)
def update_appointment(
    appointment_id: int,
    req: AppointmentUpdate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_permissions("appointment_update")),
):
    try:
        appointment = appointment_service.update_appointment(
            db, appointment_id, req.model_dump(exclude_unset=True), ctx.display_name
        )
    except ValueError as e:
        raise HTTPException(status_code=status_for(e), detail=str(e))
    return AppointmentResponse(**appointment_service.appointment_view(appointment))


@router.patch("/{appointment_id}", response_model=AppointmentResponse)
def confirm_or_decline(
    appointment_id: int,
    req: AppointmentDecision,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_permissions("appointment_confirm_deny")),
):
    """Confirm (requires staff_id) or decline (requires reason) an appointment."""
    logger.info(f"Appointment #{appointment_id} -> {req.status} by {ctx.display_name}")
    try:
        appointment = appointment_service.confirm_or_decline(
            db,
            appointment_id,
            req.status,
            ctx.display_name,
            staff_id=req.staff_id,
            reason=req.reason,
        )
    except ValueError as e:
        raise HTTPException(status_code=status_for(e), detail=str(e))
    return AppointmentResponse(**appointment_service.appointment_view(appointment))


@router.delete("/{appointment_id}", response_model=MessageResponse)
def delete_appointment(
    appointment_id: int,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_permissions("appointment_delete")),
):
    try:
        appointment_service.delete_appointment(db, appointment_id, ctx.display_name)
    except ValueError as e:
        raise HTTPException(status_code=status_for(e), detail=str(e))
    return MessageResponse(message="Appointment deleted successfully")
