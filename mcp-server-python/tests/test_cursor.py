"""
Unit tests for cursor encoding/decoding utilities.

Tests encoding, decoding, and error handling for pagination cursors.
"""

import base64
import json

import pytest
from hypothesis import given, strategies as st

from models.errors import ErrorCode, ToolError
from utils.cursor import decode_cursor, encode_cursor


def raw_cursor(payload) -> str:
    return base64.b64encode(json.dumps(payload).encode("utf-8")).decode("ascii")


@st.composite
def iso8601_timestamps(draw):
    """Generate timestamps in the format produced by get_current_utc_timestamp."""
    year = draw(st.integers(min_value=2000, max_value=2099))
    month = draw(st.integers(min_value=1, max_value=12))
    day = draw(st.integers(min_value=1, max_value=28))
    hour = draw(st.integers(min_value=0, max_value=23))
    minute = draw(st.integers(min_value=0, max_value=59))
    second = draw(st.integers(min_value=0, max_value=59))
    millisecond = draw(st.integers(min_value=0, max_value=999))

    return (
        f"{year:04d}-{month:02d}-{day:02d}T{hour:02d}:{minute:02d}:{second:02d}.{millisecond:03d}Z"
    )


class TestEncodeCursor:
    """Tests for encode_cursor function."""

    def test_encode_cursor_contains_both_fields(self):
        """Test that the payload carries date_applied and id."""
        cursor = encode_cursor("2026-02-04T03:47:36.966Z", 42)

        payload = json.loads(base64.b64decode(cursor))

        assert payload == {"date_applied": "2026-02-04T03:47:36.966Z", "id": 42}

    def test_encode_cursor_is_compact(self):
        """Test that the JSON payload has no whitespace separators."""
        decoded = base64.b64decode(encode_cursor("2026-02-04T03:47:36.966Z", 1)).decode()
        assert " " not in decoded


class TestDecodeCursor:
    """Tests for decode_cursor function."""

    def test_decode_none_returns_none(self):
        assert decode_cursor(None) is None

    def test_decode_valid_cursor(self):
        cursor = raw_cursor({"date_applied": "2026-01-01T00:00:00.000Z", "id": 7})
        assert decode_cursor(cursor) == ("2026-01-01T00:00:00.000Z", 7)

    @given(date_applied=iso8601_timestamps(), record_id=st.integers(min_value=1, max_value=2**31 - 1))
    def test_cursor_round_trip_consistency(self, date_applied, record_id):
        """
        **Property: Cursor round-trip consistency**

        For any (date_applied, id) pair, decoding an encoded cursor returns
        the original values.
        """
        assert decode_cursor(encode_cursor(date_applied, record_id)) == (date_applied, record_id)


class TestDecodeCursorErrors:
    """Tests for decode_cursor error handling."""

    @pytest.mark.parametrize(
        "cursor,fragment",
        [
            ("not-base64!!!", "malformed base64"),
            (base64.b64encode(b"not json").decode(), "malformed JSON"),
            (raw_cursor([1, 2]), "payload must be a JSON object"),
            (raw_cursor({"id": 1}), "missing 'date_applied' field"),
            (raw_cursor({"date_applied": "2026-01-01T00:00:00.000Z"}), "missing 'id' field"),
            (raw_cursor({"date_applied": 123, "id": 1}), "'date_applied'"),
            (raw_cursor({"date_applied": "2026-01-01T00:00:00.000Z", "id": "1"}), "'id'"),
            (base64.b64encode(b"\xff\xfe").decode(), "invalid UTF-8"),
        ],
    )
    def test_malformed_cursor_raises_validation_error(self, cursor, fragment):
        with pytest.raises(ToolError) as exc_info:
            decode_cursor(cursor)

        assert exc_info.value.code == ErrorCode.VALIDATION_ERROR
        assert exc_info.value.message.startswith("Invalid cursor format")
        assert fragment in exc_info.value.message

    def test_extra_fields_rejected(self):
        cursor = raw_cursor({"date_applied": "2026-01-01T00:00:00.000Z", "id": 1, "x": 2})

        with pytest.raises(ToolError) as exc_info:
            decode_cursor(cursor)

        assert exc_info.value.code == ErrorCode.VALIDATION_ERROR
