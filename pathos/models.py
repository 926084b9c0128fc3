"""Canonical enumerations shared by every component.

Defined once here, referenced by schemas and services.
"""

from datetime import UTC, datetime
from typing import Literal

PrivacyLevel = Literal["private", "friends", "public"]

ProjectStatus = Literal["active", "paused", "completed", "archived"]
ProjectStage = Literal["idea", "planning", "development", "testing", "launch", "maintenance"]

MilestoneStatus = Literal["planned", "active", "completed", "skipped"]

EntryType = Literal["progress", "milestone", "note", "media", "link"]


def utc_now() -> str:
    """Current time as an ISO-8601 UTC string, the storage format for timestamps."""
    return datetime.now(UTC).isoformat()


def to_iso(value: datetime | None) -> str | None:
    """Normalize a request datetime to a UTC ISO-8601 string.

    Naive datetimes are taken as UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat()
