from datetime import datetime, timedelta, timezone

import pytest

from app.shared.utils.datetime_utils import DateTimeUtils


def test_parse_feed_timestamp_with_z_suffix():
    result = DateTimeUtils.parse_feed_timestamp("2024-03-05T12:00:00Z")
    assert result == datetime(2024, 3, 5, 12, tzinfo=timezone.utc)


def test_parse_feed_timestamp_truncates_nanoseconds():
    # El feed manda 9 digitos; se conservan los microsegundos
    result = DateTimeUtils.parse_feed_timestamp("2025-01-13T00:30:05.813548892Z")
    assert result.microsecond == 813548


def test_parse_feed_timestamp_converts_offset_to_utc():
    result = DateTimeUtils.parse_feed_timestamp("2024-03-05T09:00:00-03:00")
    assert result == datetime(2024, 3, 5, 12, tzinfo=timezone.utc)
    assert result.utcoffset() == timedelta(0)


def test_parse_feed_timestamp_naive_is_utc():
    result = DateTimeUtils.parse_feed_timestamp("2024-03-05T12:00:00")
    assert result.tzinfo == timezone.utc


@pytest.mark.parametrize("value", ["", "   ", "not a date", "2024-13-01T00:00:00Z"])
def test_parse_feed_timestamp_invalid(value):
    with pytest.raises(ValueError):
        DateTimeUtils.parse_feed_timestamp(value)


def test_to_iso_z():
    dt = datetime(2024, 3, 5, 9, 0, tzinfo=timezone(timedelta(hours=-3)))
    assert DateTimeUtils.to_iso_z(dt) == "2024-03-05T12:00:00Z"
    assert DateTimeUtils.to_iso_z(datetime(2024, 3, 5, 12, 0)) == "2024-03-05T12:00:00Z"
