"""
Application configuration using Pydantic Settings.
"""

import os
from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings


def get_env_file() -> str:
    """Determine which env file to use based on environment."""
    env = os.getenv("APP_ENV", "development")
    if env == "production":
        return ".env.production"
    return ".env.development"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database (comparison tray)
    database_url: str = "sqlite:///./dev.db"

    # App settings
    app_name: str = "Finclamp"
    debug: bool = False
    log_level: str = "INFO"
    app_env: str = "development"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Share links are built against this base, never the current request URL
    base_url: str = "http://localhost:8000/"

    # Query-string contract
    calculator_param: str = "in"
    reserved_params: List[str] = ["in"]

    # Comparison tray
    comparison_tray_limit: int = 50

    class Config:
        env_file = get_env_file()
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
