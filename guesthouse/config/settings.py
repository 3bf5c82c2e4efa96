"""
Environment configuration for the guest accommodation service.

Uses Pydantic's settings management to handle environment variables
with proper type validation and default values.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Union

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

# Load environment variables from .env file if it exists
env_path = Path(".") / ".env"
load_dotenv(dotenv_path=env_path)


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Application configuration
    APP_NAME: str = "Guest Accommodation Service"
    API_VERSION: str = "v1"
    API_V1_STR: str = "/api/v1"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"

    # Facility calendar; stay dates and pass expiry are evaluated here
    TIMEZONE: str = "Asia/Kolkata"

    CORS_ORIGINS: List[str] = Field(default=["*"])

    # Database configuration
    DATABASE_URL: str = "sqlite:///./guesthouse.db"
    DB_ECHO: bool = False
    DB_POOL_PRE_PING: bool = True

    # Identity tokens (issued by the external auth service)
    JWT_SECRET_KEY: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    JWT_ISSUER: Optional[str] = None

    # Guest profile directory
    USER_DIRECTORY_URL: Optional[str] = None
    USER_DIRECTORY_TIMEOUT_SECONDS: float = 5.0

    # Business defaults
    DEFAULT_GUEST_NAME: str = "Primary Guest"
    DEFAULT_PASS_COLOR: str = "#808080"
    REQUEST_PUBLIC_ID_PREFIX: str = "REQ"

    # Monitoring and logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore",
    }

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        """Parse CORS_ORIGINS from string to list"""
        if isinstance(v, str):
            # Handle JSON string format from .env
            if v.startswith("[") and v.endswith("]"):
                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    pass
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        level = v.upper()
        if level not in allowed:
            raise ValueError(f"LOG_LEVEL must be one of {sorted(allowed)}")
        return level

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        fmt = v.lower()
        if fmt not in {"json", "console"}:
            raise ValueError("LOG_FORMAT must be 'json' or 'console'")
        return fmt

    @field_validator("DEFAULT_PASS_COLOR")
    @classmethod
    def validate_default_color(cls, v: str) -> str:
        if len(v) != 7 or not v.startswith("#"):
            raise ValueError("DEFAULT_PASS_COLOR must be a hex colour like #FF5733")
        return v

    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
