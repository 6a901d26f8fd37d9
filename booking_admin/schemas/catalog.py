"""Service (catalog entry) request/response schemas."""

from pydantic import BaseModel


class ServiceRequest(BaseModel):
    name: str
    duration_minutes: int
    price: float
    description: str
    category: str


class ServiceResponse(ServiceRequest):
    service_id: int

    class Config:
        from_attributes = True
