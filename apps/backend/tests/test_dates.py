"""
날짜 유틸 테스트
"""

from datetime import date, datetime

import pytest

from app.core.config import settings
from app.utils.dates import local_zone, month_key, now_local_naive, to_calendar_date, today_local


class TestToCalendarDate:
    def test_datetime_drops_time(self):
        assert to_calendar_date(datetime(2024, 1, 8, 23, 59)) == date(2024, 1, 8)

    def test_date_passthrough(self):
        assert to_calendar_date(date(2024, 1, 8)) == date(2024, 1, 8)

    def test_iso_strings(self):
        assert to_calendar_date("2024-01-08") == date(2024, 1, 8)
        assert to_calendar_date(" 2024-01-08T10:00:00Z ") == date(2024, 1, 8)

    def test_invalid_inputs(self):
        with pytest.raises(ValueError):
            to_calendar_date("08/01/2024")
        with pytest.raises(TypeError):
            to_calendar_date(20240108)


def test_month_key():
    assert month_key(date(2024, 2, 29)) == (2024, 2)


def test_timezone_setting(monkeypatch):
    monkeypatch.setattr(settings, "TIMEZONE", None)
    assert local_zone() is None

    monkeypatch.setattr(settings, "TIMEZONE", "Asia/Seoul")
    assert local_zone() is not None
    assert now_local_naive().tzinfo is None
    assert isinstance(today_local(), date)

