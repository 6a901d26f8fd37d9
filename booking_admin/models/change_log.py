"""Change log model — append-only record of every entity mutation."""

from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, Text

from booking_admin.database import Base


class ChangeLog(Base):
    __tablename__ = "ChangeLogs"

    log_id = Column(Integer, primary_key=True, autoincrement=True)
    entity_type = Column(String(20), nullable=False, index=True)  # staff | appointment | service | client | role
    entity_id = Column(Integer, nullable=False, index=True)
    action = Column(String(20), nullable=False)  # create | update | delete
    changed_by = Column(String(255), nullable=False, default="Unknown")
    changes = Column(Text, nullable=False)  # JSON string: {"old": ..., "new": ...}
    created_at = Column(DateTime, nullable=False, index=True, default=lambda: datetime.now(timezone.utc))
