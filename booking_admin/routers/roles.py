"""Roles router — roles, permissions and role permission grants."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from booking_admin.database import get_db
from booking_admin.exceptions import status_for
from booking_admin.middleware.auth import RequestContext, require_permissions
from booking_admin.schemas.auth import MessageResponse
from booking_admin.schemas.role import (
    RoleCreate,
    RoleResponse,
    PermissionCreate,
    PermissionResponse,
    RolePermissionRequest,
)
from booking_admin.services import role_service

router = APIRouter(prefix="/api", tags=["roles"])


# ── Roles ────────────────────────────────────────────────────────────────────

@router.get("/roles", response_model=list[RoleResponse])
def list_roles(
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_permissions("role_read_all")),
):
    return [RoleResponse.model_validate(r) for r in role_service.list_roles(db)]


@router.post("/roles", response_model=RoleResponse, status_code=201)
def create_role(
    req: RoleCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_permissions("role_create")),
):
    try:
        role = role_service.create_role(db, req.role_name, ctx.display_name)
    except ValueError as e:
        raise HTTPException(status_code=status_for(e), detail=str(e))
    return RoleResponse.model_validate(role)


@router.delete("/roles/{role_id}", response_model=MessageResponse)
def delete_role(
    role_id: int,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_permissions("role_delete")),
):
    try:
        role_service.delete_role(db, role_id, ctx.display_name)
    except ValueError as e:
        raise HTTPException(status_code=status_for(e), detail=str(e))
    return MessageResponse(message="Role deleted successfully.")


@router.get("/roles/{role_id}/permissions", response_model=list[PermissionResponse])
def list_role_permissions(
    role_id: int,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_permissions("role_read_all")),
):
    try:
        permissions = role_service.list_role_permissions(db, role_id)
    except ValueError as e:
        raise HTTPException(status_code=status_for(e), detail=str(e))
    return [PermissionResponse.model_validate(p) for p in permissions]


@router.post("/roles/{role_id}/permissions", response_model=MessageResponse, status_code=201)
def add_permission_to_role(
    role_id: int,
    req: RolePermissionRequest,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_permissions("role_permission_update")),
):
    try:
        role_service.add_permission_to_role(db, role_id, req.permission_id, ctx.display_name)
    except ValueError as e:
        raise HTTPException(status_code=status_for(e), detail=str(e))
    return MessageResponse(message="Permission added to role successfully.")


@router.delete("/roles/{role_id}/permissions/{permission_id}", response_model=MessageResponse)
def remove_permission_from_role(
    role_id: int,
    permission_id: int,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_permissions("role_permission_update")),
):
    try:
        role_service.remove_permission_from_role(db, role_id, permission_id, ctx.display_name)
    except ValueError as e:
        raise HTTPException(status_code=status_for(e), detail=str(e))
    return MessageResponse(message="Permission removed from role successfully.")


# ── Permissions ──────────────────────────────────────────────────────────────

@router.get("/permissions", response_model=list[PermissionResponse])
def list_permissions(
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_permissions("permission_read_all")),
):
    return [PermissionResponse.model_validate(p) for p in role_service.list_permissions(db)]


@router.post("/permissions", response_model=PermissionResponse, status_code=201)
def create_permission(
    req: PermissionCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_permissions("permission_create")),
):
    try:
        permission = role_service.create_permission(db, req.permission_name, req.permission_description)
    except ValueError as e:
        raise HTTPException(status_code=status_for(e), detail=str(e))
    return PermissionResponse.model_validate(permission)


@router.delete("/permissions/{permission_id}", response_model=MessageResponse)
def delete_permission(
    permission_id: int,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_permissions("permission_delete")),
):
    try:
        role_service.delete_permission(db, permission_id)
    except ValueError as e:
        raise HTTPException(status_code=status_for(e), detail=str(e))
    return MessageResponse(message="Permission deleted successfully.")
