# barbershop/config.py
"""
Application settings and configuration
"""
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables"""

    APP_NAME: str = Field(default="Barbershop Scheduling")
    LOG_LEVEL: str = Field(default="INFO")

    # Database settings
    DATABASE_URL: str = Field(default="sqlite:///./barbershop.db")
    SQL_ECHO: bool = Field(default=False)

    # JWT Authentication settings
    SECRET_KEY: str = Field(default="change-me-later")
    ALGORITHM: str = Field(default="HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=30)

    # Scheduling
    SLOT_MINUTES: int = Field(default=30)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
