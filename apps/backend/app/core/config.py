from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    APP_NAME: str = "Finance Tracker API"
    ENV: str = "dev"
    # apps/backend/db.sqlite3 as an absolute path so the CWD does not matter
    _default_db_path = Path(__file__).resolve().parents[2] / "db.sqlite3"
    DATABASE_URL: str = f"sqlite:///{_default_db_path}"
    CORS_ORIGINS: list[str] = ["*"]
    # None means "whatever the host clock says"; otherwise an IANA zone name
    TIMEZONE: str | None = None
    LOG_LEVEL: str = "INFO"
    RECURRING_SCHEDULER_ENABLED: bool = False
    RECURRING_SCHEDULE_HOUR: int = 0
    RECURRING_SCHEDULE_MINUTE: int = 5
    PREVIEW_MAX_DAYS: int = 366
    model_config = SettingsConfigDict(env_file=(".env",), env_prefix="FT_", case_sensitive=False)

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def _check_log_level(cls, v):
        level = str(v or "INFO").strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}")
        return level

    @field_validator("TIMEZONE", mode="before")
    @classmethod
    def _check_timezone(cls, v):
        if v is None or not str(v).strip():
            return None
        name = str(v).strip()
        try:
            ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"unknown time zone {name!r}")
        return name


settings = Settings()
