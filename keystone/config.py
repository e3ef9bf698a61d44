import os
from pathlib import Path

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).resolve().parents[1]
load_dotenv(ROOT_DIR / ".env")


def _week_start_day(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        return 0
    return value if value in (0, 1) else 0


class Settings:
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./keystone.db")
    AUTO_CREATE_SCHEMA: bool = os.getenv("AUTO_CREATE_SCHEMA", "0") == "1"
    DEFAULT_TIMEZONE: str = os.getenv("DEFAULT_TIMEZONE", "America/New_York").strip() or "America/New_York"
    DEFAULT_WEEK_START_DAY: int = _week_start_day(os.getenv("DEFAULT_WEEK_START_DAY", "0"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"
    CORS_ORIGINS: list[str] = [
        item.strip()
        for item in os.getenv("CORS_ORIGINS", "*").split(",")
        if item.strip()
    ]


settings = Settings()
