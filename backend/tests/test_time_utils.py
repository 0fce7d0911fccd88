# Overview: Pytest coverage for timestamp helpers.

from datetime import datetime, timezone

from stockroom.time_utils import epoch_millis, to_display_string, to_utc_z


def test_display_string_in_kolkata():
    dt = datetime(2026, 10, 16, 9, 35, 9)
    assert to_display_string(dt, "Asia/Kolkata") == "10/16/2026, 3:05:09 PM"


def test_display_string_midnight_is_twelve_am():
    dt = datetime(2026, 10, 16, 18, 30, 0)
    assert to_display_string(dt, "Asia/Kolkata") == "10/17/2026, 12:00:00 AM"


def test_display_string_noon_is_twelve_pm():
    dt = datetime(2026, 1, 5, 12, 0, 7)
    assert to_display_string(dt, "UTC") == "1/5/2026, 12:00:07 PM"


def test_to_utc_z_treats_naive_as_utc():
    assert to_utc_z(datetime(2026, 10, 16, 9, 35, 9, 500)) == "2026-10-16T09:35:09Z"
    assert to_utc_z(None) is None


def test_epoch_millis():
    dt = datetime(1970, 1, 1, 0, 0, 1, tzinfo=timezone.utc)
    assert epoch_millis(dt) == 1000
    assert epoch_millis(datetime(1970, 1, 1, 0, 0, 2)) == 2000
