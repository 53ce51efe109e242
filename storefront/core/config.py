# storefront/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Everything has a default so the API boots against a local SQLite file.
    Override via env vars or a .env file:
      - DATABASE_URL (Postgres connection string in production)
      - CORS_ORIGIN (comma-separated list of allowed origins)
      - ENVIRONMENT ("development" allows any origin and exposes error detail)
    """

    PROJECT_NAME: str = "E-Commerce Storefront API"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"
    ENVIRONMENT: str = "development"

    HOST: str = "0.0.0.0"
    PORT: int = 5000

    DATABASE_URL: str = "sqlite:///./storefront.db"
    SQL_ECHO: bool = False

    CORS_ORIGIN: str = "http://localhost:3000"

    # Cart identity: the caller names its cart through this header.
    CART_SESSION_HEADER: str = "X-Cart-Session"
    DEFAULT_CART_SESSION_ID: str = "defaultCart"

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGIN.split(",") if o.strip()]

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
