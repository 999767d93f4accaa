from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration.

    Values are loaded from environment variables and optional .env file.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)

    # App
    app_name: str = "Customer Registration"
    environment: str = "dev"  # dev|staging|prod
    api_prefix: str = "/api"
    log_level: str = "INFO"

    # Data store
    data_store_backend: str = "sql"  # sql|supabase
    customers_table: str = "customers"

    # Local backend
    database_url: str = "sqlite:///./customers.db"

    # Hosted backend (PostgREST)
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_timeout_seconds: float = 10.0


@lru_cache
def get_settings() -> Settings:
    return Settings()
