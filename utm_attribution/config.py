"""
Configuration management for the UTM attribution middleware
"""
from pydantic import Field
from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional

# Ten years
MAX_COOKIE_TTL = 60 * 60 * 24 * 365 * 10


class Settings(BaseSettings):
    """Application settings"""

    # Application
    app_name: str = "UTM Attribution"
    environment: str = "development"
    log_level: str = "INFO"
    log_file: Optional[str] = None  # e.g. "logs/utm_{time:YYYY-MM-DD}.log"

    # Attribution cookies
    utm_cookie_ttl: int = Field(default=60 * 60 * 24 * 30, ge=0, le=MAX_COOKIE_TTL)  # 30 days
    utm_cookie_domain: Optional[str] = None  # None = host-only cookie
    utm_overwrite: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
