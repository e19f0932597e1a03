"""
설정 검증 테스트: 잘못된 값은 조용히 무시하지 않고 로딩 시점에 실패
"""

import pytest
from pydantic import ValidationError

from app.core.config import Settings
from app.core.logging_config import configure_logging


class TestLogLevel:
    def test_normalized_to_upper_case(self):
        assert Settings(LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"
        assert Settings(LOG_LEVEL=" warning ").LOG_LEVEL == "WARNING"

    def test_unknown_level_rejected(self):
        with pytest.raises(ValidationError):
            Settings(LOG_LEVEL="LOUD")

    def test_configure_logging_rejects_unknown_level(self):
        with pytest.raises(ValueError, match="unknown log level"):
            configure_logging("LOUD")


class TestTimezone:
    def test_unset_follows_host_clock(self):
        assert Settings(TIMEZONE=None).TIMEZONE is None
        assert Settings(TIMEZONE="  ").TIMEZONE is None

    def test_known_zone(self):
        assert Settings(TIMEZONE="Asia/Seoul").TIMEZONE == "Asia/Seoul"

    @pytest.mark.parametrize("name", ["Not/AZone", "../etc/passwd"])
    def test_unknown_zone_rejected(self, name):
        with pytest.raises(ValidationError, match="unknown time zone"):
            Settings(TIMEZONE=name)
