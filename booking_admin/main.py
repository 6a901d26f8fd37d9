"""Booking admin — FastAPI application entry point."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from booking_admin.config import settings
from booking_admin.middleware.rate_limit import limiter
from booking_admin.routers import auth, appointments, audit, catalog, clients, roles, staff
from booking_admin.database import engine, Base, SessionLocal
from booking_admin import models  # noqa: F401  (registers tables on Base)
from booking_admin.services import role_service

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Create all tables on startup
Base.metadata.create_all(bind=engine)

_cors_origins = [o.strip() for o in settings.ALLOWED_ORIGINS.split(",") if o.strip()]

app = FastAPI(
    title="Booking Admin",
    description="Appointment booking administration API with change auditing.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(auth.router)
app.include_router(appointments.router)
app.include_router(clients.router)
app.include_router(catalog.router)
app.include_router(staff.router)
app.include_router(roles.router)
app.include_router(audit.router)


@app.on_event("startup")
def on_startup():
    """Make sure the default permissions and admin role exist."""
    db = SessionLocal()
    try:
        role = role_service.seed_defaults(db, settings.ADMIN_ROLE_NAME)
        logger.info(f"Permissions seeded; admin role is #{role.role_id}")
    finally:
        db.close()


@app.get("/health")
def health():
    return {"status": "ok"}
