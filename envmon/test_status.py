from unittest.mock import patch

import pytest

from envmon.status import ONLINE_THRESHOLD_MS, is_online
from envmon.testing import BASE_TS, ReadingFactory


def test_absent_reading_is_offline():
    assert is_online(None, now=BASE_TS * 1000) is False


@pytest.mark.parametrize("age_ms, expected", [
    (0, True),
    (10_000, True),
    (ONLINE_THRESHOLD_MS, True),
    (ONLINE_THRESHOLD_MS + 1, False),
    (3_600_000, False),
])
def test_online_iff_age_within_threshold(age_ms, expected):
    reading = ReadingFactory(recorded_at=str(BASE_TS))
    assert is_online(reading, now=BASE_TS * 1000 + age_ms) is expected


def test_future_timestamp_counts_as_online():
    """Clock skew is not corrected: a negative age is still within the threshold."""
    reading = ReadingFactory(recorded_at=str(BASE_TS + 3600))
    assert is_online(reading, now=BASE_TS * 1000) is True


def test_fractional_timestamp_uses_whole_seconds():
    reading = ReadingFactory(recorded_at=f"{BASE_TS}.9")
    assert is_online(reading, now=BASE_TS * 1000 + ONLINE_THRESHOLD_MS) is True
    assert is_online(reading, now=BASE_TS * 1000 + ONLINE_THRESHOLD_MS + 1) is False


def test_defaults_to_wall_clock():
    reading = ReadingFactory(recorded_at=str(BASE_TS))
    with patch("envmon.status.time.time", return_value=BASE_TS + 5.0):
        assert is_online(reading) is True
    with patch("envmon.status.time.time", return_value=BASE_TS + 25.0):
        assert is_online(reading) is False
