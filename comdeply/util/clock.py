"""Timestamp helpers.

Timestamps are timezone-aware UTC everywhere, matching the
``TIMESTAMP WITH TIME ZONE`` columns they are stored in.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)
