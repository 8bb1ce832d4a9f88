"""
Service configuration, loaded from the environment or a local .env file.
"""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

TABLE_NAME = "Test"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # Airtable
    AIRTABLE_API_KEY: str = ""
    AIRTABLE_BASE_ID: str = "app9RExLP4U518wyK"
    AIRTABLE_API_URL: str = "https://api.airtable.com/v0"
    AIRTABLE_TIMEOUT: float = 30.0

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # Environment
    APP_ENV: str = "development"
    LOG_LEVEL: str = "info"
    DEBUG: bool = False


@lru_cache
def get_settings() -> Settings:
    return Settings()
