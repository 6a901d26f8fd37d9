"""Auth request/response schemas."""

from pydantic import BaseModel


class LoginRequest(BaseModel):
    identifier: str  # email or username
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    username: str
    display_name: str
    role: str
    permissions: list[str]


class MessageResponse(BaseModel):
    message: str
