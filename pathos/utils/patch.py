"""Partial-update helpers.

A PATCH/PUT body is a pydantic model whose ``model_fields_set`` records which
keys the client actually sent. Omitted keys are left alone; keys sent as
``null`` clear the column, provided the column is nullable.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from pathos.errors import ValidationError
from pathos.models import to_iso


def present_fields(request: BaseModel) -> dict[str, Any]:
    """The fields the client sent, with their (possibly None) values.

    Datetimes are normalized to the ISO storage format.
    """
    changes: dict[str, Any] = {}
    for field_name in request.model_fields_set:
        value = getattr(request, field_name)
        if isinstance(value, datetime):
            value = to_iso(value)
        changes[field_name] = value
    return changes


def require_non_null(changes: dict[str, Any], fields: set[str]) -> None:
    """Reject explicit nulls for columns that cannot be cleared."""
    for field_name in sorted(fields & changes.keys()):
        if changes[field_name] is None:
            raise ValidationError(field_name, "cannot be null")
