"""Timestamp helpers shared by the row models."""

from datetime import datetime
from typing import Any, Optional


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a timestamp coming from the backend.

    Accepts datetime objects, ISO-8601 strings (with "Z" or an offset)
    and None. Unparseable strings yield None.
    """
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """ISO format or None."""
    return value.isoformat() if value else None
