"""Legacy field resolution for visitor rows.

Each logical attribute maps to an ordered tuple of columns; the first column
holding a non-empty value wins. The same tuples drive the SQL side
(``effective_timestamp_expr``) so the resolution order lives in one place.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import func

UNKNOWN = "Unknown"
NOT_PROVIDED = "Not provided"

NAME_FIELDS = ("full_name", "visitor_name")
IDENTITY_FIELDS = ("cnic", "visitor_cnic")
PHONE_FIELDS = ("phone", "visitor_phone")
EMAIL_FIELDS = ("email",)
TIMESTAMP_FIELDS = ("entry_time", "timestamp")

# Columns a free-text search looks at, in display order.
SEARCH_FIELDS = (*NAME_FIELDS, "email", "host", *IDENTITY_FIELDS, *PHONE_FIELDS, "purpose")


def get_field(record: Any, field: str) -> Any:
    """Read ``field`` from an ORM row or a plain mapping."""
    if isinstance(record, Mapping):
        return record.get(field)
    return getattr(record, field, None)


def first_present(record: Any, fields: tuple[str, ...]) -> Any:
    """Return the first value in ``fields`` that is neither None nor an empty string."""
    for field in fields:
        value = get_field(record, field)
        if value is not None and value != "":
            return value
    return None


def as_utc(value: datetime | None) -> datetime | None:
    """Normalize a stored timestamp to aware UTC. Naive values are stored UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def resolve_name(record: Any) -> str:
    return first_present(record, NAME_FIELDS) or UNKNOWN


def resolve_identity_number(record: Any) -> str:
    return first_present(record, IDENTITY_FIELDS) or NOT_PROVIDED


def resolve_phone(record: Any) -> str:
    return first_present(record, PHONE_FIELDS) or NOT_PROVIDED


def resolve_email(record: Any) -> str:
    return first_present(record, EMAIL_FIELDS) or NOT_PROVIDED


def effective_timestamp(record: Any) -> datetime | None:
    """Primary ``entry_time`` if set, else ``timestamp``, else None."""
    return as_utc(first_present(record, TIMESTAMP_FIELDS))


def effective_timestamp_expr(model: Any):
    """SQL counterpart of ``effective_timestamp``: COALESCE over the timestamp columns."""
    return func.coalesce(*(getattr(model, field) for field in TIMESTAMP_FIELDS))
