# invoice_api/config.py

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

API_PREFIX = "/api/v1"


class Settings(BaseSettings):
    """Application settings, read from environment variables or a .env file."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    database_url: str = "sqlite:///db.sqlite"  # file in project root
    sql_echo: bool = False

    host: str = "0.0.0.0"
    port: int = 8080

    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
