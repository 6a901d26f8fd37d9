"""Audit service — the change logger and its read surface.

Every entity mutation is recorded as one append-only ``ChangeLogs`` row
holding a redacted ``{"old": ..., "new": ...}`` JSON payload.

Entity services commit their own write first and only then call
``record_change_best_effort``, so a failed audit write never undoes the
mutation it describes.
"""

import json
import logging
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from booking_admin.exceptions import PersistenceError
from booking_admin.models.change_log import ChangeLog
from booking_admin.redaction import redact_change

logger = logging.getLogger(__name__)

ENTITY_TYPES = ("staff", "appointment", "service", "client", "role")
ACTIONS = ("create", "update", "delete")
UNKNOWN_ACTOR = "Unknown"


def resolve_actor(actor: Optional[str]) -> str:
    """Return the actor display name, or "Unknown" when it is missing or blank."""
    if actor is None:
        return UNKNOWN_ACTOR
    actor = str(actor).strip()
    return actor or UNKNOWN_ACTOR


def entity_snapshot(obj: Any) -> dict:
    """Column name -> value for every mapped column of an ORM instance."""
    mapper = inspect(obj).mapper
    return {attr.key: getattr(obj, attr.key) for attr in mapper.column_attrs}


def _json_default(value: Any):
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    return str(value)


def _check_pairing(action: str, old: Any, new: Any) -> None:
    if action == "create" and (old is not None or new is None):
        raise ValueError("A create change must have no old state and a new state")
    if action == "delete" and (old is None or new is not None):
        raise ValueError("A delete change must have an old state and no new state")
    if action == "update" and (old is None or new is None):
        raise ValueError("An update change must have both old and new states")


def record_change(
    db: Session,
    entity_type: str,
    entity_id: int,
    action: str,
    actor: Optional[str],
    old: Optional[Any] = None,
    new: Optional[Any] = None,
) -> None:
    """Persist one change record.

    ``old``/``new`` are redacted independently before being serialized.
    Raises ValueError for an unknown entity type or action, or when the
    old/new pair does not match the action; raises PersistenceError when the
    row cannot be written (the session is rolled back first).
    """
    if entity_type not in ENTITY_TYPES:
        raise ValueError(f"Unknown entity type '{entity_type}'")
    if action not in ACTIONS:
        raise ValueError(f"Unknown action '{action}'")
    _check_pairing(action, old, new)

    payload = json.dumps(redact_change({"old": old, "new": new}), default=_json_default)
    entry = ChangeLog(
        entity_type=entity_type,
        entity_id=int(entity_id),
        action=action,
        changed_by=resolve_actor(actor),
        changes=payload,
    )
    try:
        db.add(entry)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceError(
            f"Failed to write change log for {entity_type} #{entity_id} ({action})"
        ) from e
    logger.debug(f"Recorded {action} of {entity_type} #{entity_id} by {entry.changed_by}")


def record_change_best_effort(
    db: Session,
    entity_type: str,
    entity_id: int,
    action: str,
    actor: Optional[str],
    old: Optional[Any] = None,
    new: Optional[Any] = None,
) -> bool:
    """Call ``record_change`` and log, rather than raise, a persistence failure.

    Returns True when the record was written.
    """
    # TODO: audit writes run after the entity commit, so a failure here loses
    # the record; moving both into one transaction would close that gap.
    try:
        record_change(db, entity_type, entity_id, action, actor, old=old, new=new)
    except PersistenceError:
        logger.exception(f"Audit write failed for {entity_type} #{entity_id} ({action})")
        return False
    return True


def decode_changes(raw: Optional[str]) -> dict:
    """Decode a stored ``changes`` column back into ``{"old": ..., "new": ...}``."""
    if not raw:
        return {"old": None, "new": None}
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Undecodable change payload, returning empty change")
        return {"old": None, "new": None}
    if not isinstance(data, dict):
        return {"old": None, "new": None}
    return {"old": data.get("old"), "new": data.get("new")}


def list_change_records(
    db: Session,
    entity_type: Optional[str] = None,
    entity_id: Optional[int] = None,
    limit: Optional[int] = None,
    offset: int = 0,
) -> list[dict]:
    """Change records, most recent first, with their payload decoded.

    Records sharing a timestamp are ordered by insertion (log_id) so the
    result is stable even at coarse clock resolution.
    """
    query = db.query(ChangeLog)
    if entity_type:
        query = query.filter(ChangeLog.entity_type == entity_type)
    if entity_id is not None:
        query = query.filter(ChangeLog.entity_id == entity_id)
    query = query.order_by(ChangeLog.created_at.desc(), ChangeLog.log_id.desc())
    if offset:
        query = query.offset(offset)
    if limit is not None:
        query = query.limit(limit)

    return [
        {
            "log_id": log.log_id,
            "entity_type": log.entity_type,
            "entity_id": log.entity_id,
            "action": log.action,
            "changed_by": log.changed_by,
            "changes": decode_changes(log.changes),
            "created_at": log.created_at,
        }
        for log in query.all()
    ]
