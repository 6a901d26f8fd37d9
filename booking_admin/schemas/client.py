"""Client request/response schemas."""

from typing import Optional

from pydantic import BaseModel


class ClientRequest(BaseModel):
    first_name: str
    last_name: str
    email: str
    phone_number: str
    address: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None


class ClientResponse(ClientRequest):
    client_id: int

    class Config:
        from_attributes = True
