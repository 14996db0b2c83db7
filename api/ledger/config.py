from functools import lru_cache

from pydantic_settings import BaseSettings
from pydantic import Field, AnyUrl

class Settings(BaseSettings):
    app_name: str = Field("Monthly Ledger API", alias="APP_NAME")
    app_env: str = Field("development", alias="APP_ENV")
    app_url: AnyUrl | str = Field("http://localhost:3000", alias="APP_URL")

    database_url: str = Field("sqlite:///./ledger.db", alias="DATABASE_URL")

    # Base URL of a remote ledger service, used by HttpLedgerRepository
    ledger_api_url: str = Field("http://localhost:8000", alias="LEDGER_API_URL")
    http_timeout_seconds: float = Field(10.0, alias="HTTP_TIMEOUT_SECONDS")

    log_level: str = Field("INFO", alias="LOG_LEVEL")

    max_repeat_count: int = Field(120, alias="MAX_REPEAT_COUNT")
    compensate_failed_series: bool = Field(True, alias="COMPENSATE_FAILED_SERIES")

    # Once-per-session overdue notice bookkeeping
    session_flag_max_entries: int = Field(10_000, alias="SESSION_FLAG_MAX_ENTRIES")
    session_flag_ttl_seconds: float = Field(12 * 60 * 60, alias="SESSION_FLAG_TTL_SECONDS")

    class Config:
        env_file = ".env"
        case_sensitive = False
        populate_by_name = True


@lru_cache
def get_settings() -> Settings:
    return Settings()
