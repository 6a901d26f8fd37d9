"""Redaction of sensitive fields in audit payloads.

Pure functions with no database dependency:

    redact(value)          -> deep copy with sensitive keys masked
    redact_change(change)  -> {"old": redact(old), "new": redact(new)}

Redaction is by denylist: any mapping key in SENSITIVE_KEYS has its value
replaced by REDACTION_MARKER, at any nesting depth. The denylist does not
fail safe for sensitive columns added later; an allowlist per entity would.
"""

from typing import Any, Optional

SENSITIVE_KEYS = frozenset({"password", "hashed_password"})
REDACTION_MARKER = "***hidden***"


def redact(value: Any) -> Any:
    """Return a deep copy of a JSON-like value with sensitive keys masked.

    Mappings are copied key by key, sequences element by element (order and
    length preserved, tuples become lists). Anything else is returned as is.
    Never raises.
    """
    if isinstance(value, dict):
        return {
            key: REDACTION_MARKER if key in SENSITIVE_KEYS else redact(item)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [redact(item) for item in value]
    return value


def redact_change(change: Optional[dict]) -> dict:
    """Redact the ``old`` and ``new`` halves of a change independently."""
    change = change or {}
    return {
        "old": redact(change.get("old")),
        "new": redact(change.get("new")),
    }
