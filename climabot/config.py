"""Application configuration management using Pydantic's BaseSettings."""

from functools import lru_cache
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Defines all configuration settings for the API, loaded from .env file."""

    # API Keys
    gemini_api_key: Optional[str] = None

    # App settings
    app_env: str = "production"
    log_level: str = "INFO"

    # Gemini settings
    gemini_model: str = "gemini-2.0-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_timeout_seconds: float = 30.0

    class Config:
        """Pydantic model configuration."""

        env_file = ".env"
        extra = "ignore"

    @property
    def is_development(self) -> bool:
        """Whether diagnostic details may be echoed back to callers."""
        return self.app_env.lower() == "development"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
