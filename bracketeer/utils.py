"""Utility functions for the application."""

from __future__ import annotations

import datetime
from typing import Any


def utc_now() -> datetime.datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.datetime.now(datetime.timezone.utc)


def to_iso(value: datetime.datetime | None) -> str | None:
    """Serialize a datetime the way tournament documents store timestamps."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=datetime.timezone.utc)
    return value.astimezone(datetime.timezone.utc).isoformat()


def parse_iso(value: Any) -> datetime.datetime | None:
    """Parse a stored timestamp back into an aware datetime.

    Accepts ISO strings as well as native datetimes returned by Firestore.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime.datetime):
        parsed = value
    else:
        parsed = datetime.datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=datetime.timezone.utc)
    return parsed
