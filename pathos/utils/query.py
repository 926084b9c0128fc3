"""Lenient query-string parsing for list endpoints."""

MAX_LIMIT = 200


def parse_int(raw: str | None, default: int) -> int:
    """Parse an integer query param, falling back to default on anything non-numeric.

    Missing, empty, garbage, and zero all yield the default.
    """
    if raw is None:
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        return default
    return value or default


def parse_limit(raw: str | None, default: int) -> int:
    """Page size clamped to 1..MAX_LIMIT."""
    return max(1, min(parse_int(raw, default), MAX_LIMIT))


def parse_offset(raw: str | None) -> int:
    """Row offset, never negative."""
    return max(0, parse_int(raw, 0))


def parse_bool(raw: str | None) -> bool | None:
    """``"true"`` is True, any other present value is False, absent is None."""
    if raw is None:
        return None
    return raw.strip().lower() == "true"
