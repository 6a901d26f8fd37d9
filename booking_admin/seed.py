"""Seed default permissions, the admin role and an initial admin account.

Usage:
    python -m booking_admin.seed --email admin@example.com --username admin --password admin123
"""

import argparse
import logging

from sqlalchemy.orm import Session

from booking_admin.config import settings
from booking_admin.database import Base, SessionLocal, engine
from booking_admin.middleware.auth import hash_password
from booking_admin.models.staff import Staff
from booking_admin.services import role_service

logger = logging.getLogger(__name__)


def ensure_admin(db: Session, email: str, username: str, password: str,
                 first_name: str = "System", last_name: str = "Administrator") -> Staff:
    """Get or create the admin staff account, returning the Staff row."""
    role = role_service.seed_defaults(db, settings.ADMIN_ROLE_NAME)
    staff = db.query(Staff).filter(Staff.username == username).first()
    if not staff:
        staff = Staff(
            first_name=first_name,
            last_name=last_name,
            email=email,
            username=username,
            hashed_password=hash_password(password),
            role_id=role.role_id,
        )
        db.add(staff)
        db.commit()
        db.refresh(staff)
        logger.info(f"Inserted staff: {username}")
    return staff


def main(argv=None):
    parser = argparse.ArgumentParser(description="Seed the booking admin database.")
    parser.add_argument("--email", default="admin@example.com")
    parser.add_argument("--username", default="admin")
    parser.add_argument("--password", required=True)
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.LOG_LEVEL)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        ensure_admin(db, args.email, args.username, args.password)
    finally:
        db.close()


if __name__ == "__main__":
    main()
