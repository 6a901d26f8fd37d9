"""Service-layer error types.

Services raise plain ``ValueError`` for bad input; the subclasses below let
routers pick a more specific status code.
"""


class NotFoundError(ValueError):
    """The entity addressed by a mutation does not exist."""


class ConflictError(ValueError):
    """The mutation would violate a uniqueness or referential rule."""


class PersistenceError(RuntimeError):
    """An audit or snapshot row could not be written."""


def status_for(error: ValueError) -> int:
    """HTTP status code a router should answer a service ValueError with."""
    if isinstance(error, NotFoundError):
        return 404
    if isinstance(error, ConflictError):
        return 409
    return 400
