from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # App
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    debug: bool = True
    # Base URL embedded in local RSVP links
    app_url: str = "http://localhost:3000"
    cors_origins: list[str] = ["*"]

    ENVIRONMENT: str = "Production"

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./rsvp_engine.db"
    LOG_DB: bool = False
    storage_backend: str = "sql"  # "sql" or "memory"
    # When False, an unreachable store degrades to in-memory mode instead of failing
    persistence_required: bool = False

    # Invites
    max_invite_batch_size: int = 100

    # External hosting of RSVP documents
    external_hosting_url: str = ""
    external_hosting_token: str = ""
    external_hosting_timeout_seconds: float = 5.0

    # Host access; empty disables the check
    host_api_token: str = ""

    SENTRY_DSN: str = ""
    SENTRY_TRACES_SAMPLE_RATE: float = 0.0
    SENTRY_PROFILES_SAMPLE_RATE: float = 0.0

    RUN_MIGRATIONS_ON_STARTUP: bool = False

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
