from decimal import Decimal
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        validate_default=True,
        extra="ignore",
    )

    # Database settings
    DB_URL: Optional[str] = None  # Optional full DB URL
    DB_USER: str = "root"
    DB_PASSWORD: str = ""
    DB_HOST: str = "localhost"
    DB_PORT: int = 3306
    DB_NAME: str = "finance_ledger"

    # API settings
    API_VERSION: str = "v1"
    DEBUG: bool = False

    # Auth settings
    SECRET_KEY: str = "change-me"  # Override in .env for any real deployment
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # Balance policy
    ENFORCE_BALANCE_FLOOR: bool = True
    BALANCE_FLOOR: Decimal = Decimal("0.00")
    # False for stores that commit every statement on its own
    ATOMIC_MUTATIONS: bool = True
    CONFLICT_RETRY_ATTEMPTS: int = 3

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    @property
    def async_db_url(self) -> str:
        """Get asynchronous database URL."""
        if self.DB_URL:
            return self.DB_URL
        return f"mysql+aiomysql://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"


@lru_cache()
def get_settings() -> Settings:
    """
    Returns cached Settings instance to avoid reloading .env file on every access
    """
    return Settings()
