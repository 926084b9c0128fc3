"""Tests for query-string, JSON-column, and partial-update helpers."""

from datetime import UTC, datetime

import pytest
from pydantic import BaseModel

from pathos.errors import ValidationError
from pathos.utils.json import json_list_str, parse_json_list
from pathos.utils.patch import present_fields, require_non_null
from pathos.utils.query import MAX_LIMIT, parse_bool, parse_int, parse_limit, parse_offset


class TestParseInt:
    def test_numeric(self):
        assert parse_int("7", 50) == 7

    def test_missing_uses_default(self):
        assert parse_int(None, 50) == 50

    def test_garbage_uses_default(self):
        assert parse_int("abc", 50) == 50

    def test_empty_uses_default(self):
        assert parse_int("", 20) == 20

    def test_zero_uses_default(self):
        """Zero is falsy, so it falls back like the other non-values."""
        assert parse_int("0", 20) == 20


class TestParseLimitOffset:
    def test_limit_clamped_to_max(self):
        assert parse_limit("100000", 50) == MAX_LIMIT

    def test_negative_limit_clamped_to_one(self):
        assert parse_limit("-5", 50) == 1

    def test_offset_never_negative(self):
        assert parse_offset("-10") == 0

    def test_offset_garbage_is_zero(self):
        assert parse_offset("ten") == 0

    def test_offset_numeric(self):
        assert parse_offset("30") == 30


class TestParseBool:
    def test_true(self):
        assert parse_bool("true") is True

    def test_other_value_is_false(self):
        assert parse_bool("yes") is False

    def test_absent_is_none(self):
        assert parse_bool(None) is None


class TestJsonList:
    def test_parse_string(self):
        assert parse_json_list('["a", "b"]') == ["a", "b"]

    def test_none_and_empty(self):
        assert parse_json_list(None) == []
        assert parse_json_list("") == []

    def test_invalid_json(self):
        assert parse_json_list("not json") == []

    def test_non_list_json(self):
        assert parse_json_list('{"a": 1}') == []

    def test_store_none_as_empty_array(self):
        assert json_list_str(None) == "[]"

    def test_store_stringifies_values(self):
        assert json_list_str(["x", 1]) == '["x", "1"]'


class _Patch(BaseModel):
    title: str | None = None
    due: datetime | None = None
    note: str | None = None


class TestPresentFields:
    def test_only_sent_fields(self):
        changes = present_fields(_Patch.model_validate({"title": "New"}))
        assert changes == {"title": "New"}

    def test_explicit_null_is_kept(self):
        changes = present_fields(_Patch.model_validate({"note": None}))
        assert changes == {"note": None}

    def test_datetime_normalized_to_utc_iso(self):
        changes = present_fields(_Patch.model_validate({"due": "2026-03-01T10:00:00"}))
        assert changes["due"] == datetime(2026, 3, 1, 10, tzinfo=UTC).isoformat()

    def test_require_non_null_rejects_null(self):
        with pytest.raises(ValidationError) as exc_info:
            require_non_null({"title": None}, {"title"})
        assert exc_info.value.field == "title"

    def test_require_non_null_ignores_absent(self):
        require_non_null({"note": None}, {"title"})
