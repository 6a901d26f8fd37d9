"""Staff request/response schemas. Password hashes never leave the API."""

from typing import Optional

from pydantic import BaseModel


class StaffCreate(BaseModel):
    first_name: str
    last_name: str
    email: str
    username: str
    password: str
    role_id: int
    phone_number: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    postal_code: Optional[str] = None


class StaffUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    role_id: Optional[int] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    postal_code: Optional[str] = None


class StaffResponse(BaseModel):
    staff_id: int
    first_name: str
    last_name: str
    email: str
    username: str
    role_id: int
    position: Optional[str] = None  # role name
    phone_number: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    postal_code: Optional[str] = None


class VerifyPasswordRequest(BaseModel):
    password: str


class VerifyPasswordResponse(BaseModel):
    valid: bool
