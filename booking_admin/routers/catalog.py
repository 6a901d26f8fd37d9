"""Services router — CRUD for the bookable service catalog."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from booking_admin.database import get_db
from booking_admin.exceptions import status_for
from booking_admin.middleware.auth import RequestContext, require_permissions
from booking_admin.schemas.auth import MessageResponse
from booking_admin.schemas.catalog import ServiceRequest, ServiceResponse
from booking_admin.services import catalog_service

router = APIRouter(prefix="/api/services", tags=["services"])


@router.get("", response_model=list[ServiceResponse])
def list_services(
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_permissions("service_read_all")),
):
    return [ServiceResponse.model_validate(s) for s in catalog_service.list_services(db)]


@router.get("/{service_id}", response_model=ServiceResponse)
def get_service(
    service_id: int,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_permissions("service_read_single")),
):
    service = catalog_service.get_service(db, service_id)
    if not service:
        raise HTTPException(status_code=404, detail="Service not found.")
    return ServiceResponse.model_validate(service)


@router.post("", response_model=ServiceResponse, status_code=201)
def create_service(
    req: ServiceRequest,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_permissions("service_create")),
):
    try:
        service = catalog_service.create_service(db, req.model_dump(), ctx.display_name)
    except ValueError as e:
        raise HTTPException(status_code=status_for(e), detail=str(e))
    return ServiceResponse.model_validate(service)


@router.put("/{service_id}", response_model=ServiceResponse)
def update_service(
    service_id: int,
    req: ServiceRequest,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_permissions("service_update")),
):
    try:
        service = catalog_service.update_service(db, service_id, req.model_dump(), ctx.display_name)
    except ValueError as e:
        raise HTTPException(status_code=status_for(e), detail=str(e))
    return ServiceResponse.model_validate(service)


@router.delete("/{service_id}", response_model=MessageResponse)
def delete_service(
    service_id: int,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_permissions("service_delete")),
):
    try:
        catalog_service.delete_service(db, service_id, ctx.display_name)
    except ValueError as e:
        raise HTTPException(status_code=status_for(e), detail=str(e))
    return MessageResponse(message="Service deleted successfully.")
