from datetime import datetime, timedelta, timezone

import pytest

from handoff.core.errors import ParseError
from handoff.utils.parsing import format_timestamp, parse_timestamp


def test_parse_timestamp_with_z_suffix():
    result = parse_timestamp("2024-01-01T10:00:00Z")
    assert result == datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)


def test_parse_timestamp_naive_is_utc():
    result = parse_timestamp("2024-01-01T10:00:00")
    assert result.tzinfo == timezone.utc
    assert result.hour == 10


def test_parse_timestamp_converts_offset():
    result = parse_timestamp("2024-01-01T19:00:00+09:00")
    assert result == datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)


def test_parse_timestamp_accepts_datetime():
    value = datetime(2024, 1, 1, 10, 0, tzinfo=timezone(timedelta(hours=1)))
    assert parse_timestamp(value).hour == 9


def test_parse_timestamp_invalid():
    with pytest.raises(ParseError):
        parse_timestamp("yesterday")


def test_parse_timestamp_missing():
    with pytest.raises(ParseError) as exc_info:
        parse_timestamp(None, "next_med_time")
    assert exc_info.value.code == "TX_PARSE_001"
    assert "next_med_time" in exc_info.value.message


def test_format_timestamp():
    value = datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)
    assert format_timestamp(value) == "2024-01-01T10:00:00Z"

