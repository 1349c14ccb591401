"""Institution context management using contextvars.

Every request handled on behalf of a school carries the institution it
belongs to. Services read it from here instead of taking it as an argument.
"""

import contextvars
import uuid

from scholaris.exceptions import TenantContextError

_institution_id: contextvars.ContextVar[uuid.UUID | None] = contextvars.ContextVar(
    "institution_id", default=None
)


def get_institution_id() -> uuid.UUID:
    """Get the current institution ID.

    Returns:
        The current institution's UUID

    Raises:
        TenantContextError: If institution context is not set
    """
    iid = _institution_id.get()
    if iid is None:
        raise TenantContextError("Institution context is not set")
    return iid


def get_institution_id_or_none() -> uuid.UUID | None:
    """Get the current institution ID or None if not set."""
    return _institution_id.get()


def set_institution_id(iid: uuid.UUID | None) -> None:
    """Set the current institution ID.

    Args:
        iid: Institution UUID to set (or None to clear)
    """
    _institution_id.set(iid)


def clear_institution_context() -> None:
    """Clear the institution context."""
    _institution_id.set(None)
