from enum import Enum
from functools import lru_cache

from pydantic_settings import BaseSettings


class PromoterDeletePolicy(str, Enum):
    REASSIGN_TO_OWNER = "reassign_to_owner"
    CASCADE = "cascade"
    FORBID = "forbid"


class Settings(BaseSettings):
    # App
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    debug: bool = True
    frontend_url: str = "http://localhost:3000"
    cors_origins: list[str] = ["*"]

    ENVIRONMENT: str = "Production"

    # Blob store
    DB_DSN: str = "sqlite+aiosqlite:///./guestlist.db"
    LOG_DB: bool = False

    SENTRY_DSN: str = ""
    SENTRY_TRACES_SAMPLE_RATE: float = 0.0
    SENTRY_PROFILES_SAMPLE_RATE: float = 0.0

    RUN_MIGRATIONS_ON_STARTUP: bool = False

    # Confirmation codes
    CONFIRMATION_CODE_PREFIX: str = "CONF-"
    CONFIRMATION_CODE_LENGTH: int = 6
    CODE_GENERATION_ATTEMPTS: int = 10

    # Guest list policies
    ALLOW_DECLINE_AFTER_CONFIRM: bool = False
    PROMOTER_DELETE_POLICY: PromoterDeletePolicy = PromoterDeletePolicy.REASSIGN_TO_OWNER

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
