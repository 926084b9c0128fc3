"""JSON helpers for list-valued columns stored as text."""

import json
from typing import Any


def parse_json_list(raw: str | list | None) -> list[Any]:
    """Parse a JSON array column, returning [] on failure or empty.

    For entry media_urls, links, and tags. Lists pass through as-is.
    Returns [] for: None, empty string, invalid JSON, non-list JSON.
    """
    if raw is None:
        return []
    if isinstance(raw, list):
        return raw
    if isinstance(raw, str):
        if not raw:
            return []
        try:
            parsed = json.loads(raw)
            if isinstance(parsed, list):
                return parsed
        except (ValueError, TypeError):
            pass
    return []


def json_list_str(values: list[Any] | None) -> str:
    """Serialize a list for storage. None is stored as an empty array."""
    return json.dumps([str(v) for v in values] if values else [])
