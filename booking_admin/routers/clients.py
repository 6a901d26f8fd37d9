"""Clients router — client CRUD."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from booking_admin.database import get_db
from booking_admin.exceptions import status_for
from booking_admin.middleware.auth import RequestContext, require_permissions
from booking_admin.schemas.auth import MessageResponse
from booking_admin.schemas.client import ClientRequest, ClientResponse
from booking_admin.services import client_service

router = APIRouter(prefix="/api/clients", tags=["clients"])


@router.get("", response_model=list[ClientResponse])
def list_clients(
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_permissions("client_read_all")),
):
    return [ClientResponse.model_validate(c) for c in client_service.list_clients(db)]


@router.get("/{client_id}", response_model=ClientResponse)
def get_client(
    client_id: int,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_permissions("client_read_single")),
):
    client = client_service.get_client(db, client_id)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")
    return ClientResponse.model_validate(client)


@router.post("", response_model=ClientResponse, status_code=201)
def create_client(
    req: ClientRequest,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_permissions("client_create")),
):
    try:
        client = client_service.create_client(db, req.model_dump(), ctx.display_name)
    except ValueError as e:
        raise HTTPException(status_code=status_for(e), detail=str(e))
    return ClientResponse.model_validate(client)


@router.put("/{client_id}", response_model=ClientResponse)
def update_client(
    client_id: int,
    req: ClientRequest,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_permissions("client_update")),
):
    try:
        client = client_service.update_client(db, client_id, req.model_dump(), ctx.display_name)
    except ValueError as e:
        raise HTTPException(status_code=status_for(e), detail=str(e))
    return ClientResponse.model_validate(client)


@router.delete("/{client_id}", response_model=MessageResponse)
def delete_client(
    client_id: int,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_permissions("client_delete")),
):
    try:
        client_service.delete_client(db, client_id, ctx.display_name)
    except ValueError as e:
        raise HTTPException(status_code=status_for(e), detail=str(e))
    return MessageResponse(message="Client deleted successfully")
