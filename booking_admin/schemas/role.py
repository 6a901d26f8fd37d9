"""Role and permission request/response schemas."""

from typing import Optional

from pydantic import BaseModel


class RoleCreate(BaseModel):
    role_name: str


class RoleResponse(BaseModel):
    role_id: int
    role_name: str

    class Config:
        from_attributes = True


class PermissionCreate(BaseModel):
    permission_name: str
    permission_description: Optional[str] = None


class PermissionResponse(BaseModel):
    permission_id: int
    permission_name: str
    permission_description: Optional[str] = None

    class Config:
        from_attributes = True


class RolePermissionRequest(BaseModel):
    permission_id: int
