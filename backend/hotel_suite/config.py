"""
Application settings
Read from environment variables or a local .env file
"""
from typing import List
from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    APP_NAME: str = "Hotel Suite"
    DEBUG: bool = False

    # Database
    DATABASE_URL: str = "sqlite:///./hotel_suite.db"

    # JWT
    SECRET_KEY: str = "hotel-suite-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 480

    # Logging
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: List[str] = ["*"]

    # Dashboards and reports
    DASHBOARD_ACTIVITY_LIMIT: int = 10
    DEFAULT_REVENUE_YEARS: int = 5

    model_config = ConfigDict(env_file=".env", case_sensitive=True)


settings = Settings()
