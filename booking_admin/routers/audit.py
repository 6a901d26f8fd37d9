"""Audit router — change log and appointment history for the dashboard."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from booking_admin.database import get_db
from booking_admin.middleware.auth import RequestContext, require_permissions
from booking_admin.schemas.audit import ChangeLogResponse, AppointmentHistoryResponse
from booking_admin.services import audit_service, history_service

router = APIRouter(prefix="/api", tags=["audit"])


@router.get("/logs", response_model=list[ChangeLogResponse])
def list_logs(
    entity_type: Optional[str] = None,
    entity_id: Optional[int] = None,
    limit: Optional[int] = Query(None, ge=1),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_permissions("logs_read_all")),
):
    """Change records, most recent first."""
    records = audit_service.list_change_records(
        db, entity_type=entity_type, entity_id=entity_id, limit=limit, offset=offset
    )
    return [ChangeLogResponse(**r) for r in records]


@router.get("/history", response_model=list[AppointmentHistoryResponse])
def list_history(
    limit: Optional[int] = Query(None, ge=1),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_permissions("appointment_read_all")),
):
    """Last known state of every appointment, most recently changed first."""
    snapshots = history_service.list_appointment_snapshots(db, limit=limit, offset=offset)
    return [AppointmentHistoryResponse.model_validate(s) for s in snapshots]
