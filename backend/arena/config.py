"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    DEBUG: bool = False
    LOG_LEVEL: str = "info"
    CORS_ORIGINS: list[str] = ["*"]

    # Submission store
    REDIS_URL: str = "redis://localhost:6379/0"
    USE_REDIS: bool = True
    SUBMISSION_TTL_SECONDS: int = 30 * 86400
    MEMORY_STORE_MAX_ENTRIES: int = 1000
    STORE_MAX_RETRIES: int = 3

    # Rate Limiting
    RATE_LIMIT_MAX_SUBMISSIONS: int = 5
    RATE_LIMIT_WINDOW_SECONDS: int = 60
    RATE_LIMIT_MAX_CLIENTS: int = 10000
    # Peers whose X-Forwarded-For header is believed
    TRUSTED_PROXIES: list[str] = []

    # Investor business rules
    RESTRICTED_COUNTRIES: list[str] = ["CN", "RU", "IR", "KP"]
    MINIMUM_CHECK_SIZE: dict[str, str] = {
        "institutional": "50k-250k",
        "family-office": "50k-250k",
    }
    MIN_VERIFICATION_FILE_BYTES: int = 1024

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
