"""
FastAPI Configuration Management

© 2025 HaloLight Project

Environment-driven settings for the back-office API: server, JWT, database,
Celery and logging configuration with Pydantic validation.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from halolight.utils.durations import parse_duration
from halolight.utils.logging_utils import setup_universal_logging

# Development-only signing secrets; ProductionSettings refuses them.
DEV_JWT_SECRET = "dev-jwt-secret-minimum-32-characters-long"
DEV_JWT_REFRESH_SECRET = "dev-refresh-secret-minimum-32-characters"

DEFAULT_ACCESS_TOKEN_SECONDS = 15 * 60
DEFAULT_REFRESH_TOKEN_SECONDS = 7 * 24 * 60 * 60


class Settings(BaseSettings):
    """
    Application settings with automatic environment variable loading.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow",
    )

    # === CORE APPLICATION METADATA ===
    APP_NAME: str = "HaloLight API"
    APP_VERSION: str = "1.0.0"
    APP_SUMMARY: str = "Back-office API for users, teams, documents and notifications."
    APP_DESCRIPTION: str = (
        "Multi-tenant back-office service covering RBAC user management, team membership, "
        "document sharing and tagging, notifications and dashboard statistics."
    )
    DEBUG: bool = False
    TESTING: bool = False

    # Server configuration
    HOST: str = "127.0.0.1"
    PORT: int = 3002
    WORKERS: int = 1
    API_PREFIX: str = "/api"

    # === SECURITY ===
    JWT_SECRET: str = DEV_JWT_SECRET
    JWT_REFRESH_SECRET: str = DEV_JWT_REFRESH_SECRET
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRES_IN: str = "15m"
    JWT_REFRESH_EXPIRES_IN: str = "7d"

    # Role assigned to self-registered users when it exists
    DEFAULT_ROLE_NAME: str = "user"

    # CORS and security
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]
    ALLOWED_HOSTS: List[str] = ["localhost", "127.0.0.1"]
    API_DOCS_ENABLED: bool | None = None
    API_DOCS_URL: str = "/docs"
    API_REDOC_URL: str = "/redoc"
    API_OPENAPI_URL: str = "/openapi.json"
    API_DOCS_PERSIST_AUTH: bool = True
    API_DOCS_DISPLAY_REQUEST_DURATION: bool = True

    # === DATABASE ===
    DATABASE_URL: str = "sqlite+aiosqlite:///./halolight.db"
    DB_ECHO: bool = False
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20

    # === BACKGROUND TASKS ===
    CELERY_BROKER_URL: str = "redis://localhost:6379/0"
    CELERY_RESULT_BACKEND: str = "redis://localhost:6379/0"
    CELERY_TASK_DEFAULT_QUEUE: str = "halolight-maintenance"
    REFRESH_TOKEN_SWEEP_INTERVAL_SECONDS: int = 3600

    # === LOGGING ===
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/halolight.log"
    LOG_MAX_SIZE: int = 50 * 1024 * 1024  # 50MB
    LOG_BACKUP_COUNT: int = 10
    # Rotation strategy: 'size' (default) or 'time'
    LOG_ROTATION_TYPE: str = "size"
    LOG_ROTATION_WHEN: Optional[str] = "midnight"
    LOG_ROTATION_INTERVAL: int = 1

    @field_validator("JWT_SECRET", "JWT_REFRESH_SECRET")
    @classmethod
    def validate_jwt_secret(cls, v):
        if len(v) < 32:
            raise ValueError("JWT secrets must be at least 32 characters long")
        return v

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("ALLOWED_HOSTS", mode="before")
    @classmethod
    def parse_allowed_hosts(cls, v):
        if isinstance(v, str):
            return [host.strip() for host in v.split(",") if host.strip()]
        return v

    @field_validator("API_PREFIX")
    @classmethod
    def normalize_api_prefix(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if v and not v.startswith("/"):
            v = f"/{v}"
        return v

    @property
    def access_token_ttl_seconds(self) -> int:
        """Access token lifetime in seconds, as reported to clients in ``expiresIn``."""
        return parse_duration(self.JWT_EXPIRES_IN, DEFAULT_ACCESS_TOKEN_SECONDS)

    @property
    def refresh_token_ttl_seconds(self) -> int:
        """Refresh token lifetime in seconds."""
        return parse_duration(self.JWT_REFRESH_EXPIRES_IN, DEFAULT_REFRESH_TOKEN_SECONDS)

    def create_directories(self) -> None:
        """Create the log directory if it doesn't exist."""
        Path(self.LOG_FILE).parent.mkdir(parents=True, exist_ok=True)

    def setup_logging(self) -> None:
        """Initialize application logging."""
        setup_universal_logging(
            log_file=self.LOG_FILE,
            log_level=self.LOG_LEVEL,
            rotation_type=self.LOG_ROTATION_TYPE,
            rotation_when=self.LOG_ROTATION_WHEN,
            rotation_interval=self.LOG_ROTATION_INTERVAL,
            max_bytes=self.LOG_MAX_SIZE,
            backup_count=self.LOG_BACKUP_COUNT,
        )


class DevelopmentSettings(Settings):
    """Development environment settings."""
    DEBUG: bool = True
    LOG_LEVEL: str = "DEBUG"
    HOST: str = "0.0.0.0"
    CORS_ORIGINS: List[str] = ["*"]

    def init_dev_features(self) -> None:
        """Initialize development-specific features."""
        self.setup_logging()


class ProductionSettings(Settings):
    """Production environment settings with enhanced security."""
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    DB_ECHO: bool = False

    @model_validator(mode="after")
    def reject_development_secrets(self):
        """Production must be configured with its own signing secrets."""
        if self.JWT_SECRET == DEV_JWT_SECRET:
            raise ValueError("JWT_SECRET must be set in production")
        if self.JWT_REFRESH_SECRET == DEV_JWT_REFRESH_SECRET:
            raise ValueError("JWT_REFRESH_SECRET must be set in production")
        return self

    def init_production_features(self) -> None:
        """Initialize production-specific features."""
        self.setup_logging()


class TestingSettings(Settings):
    """Testing environment settings."""
    TESTING: bool = True
    DEBUG: bool = True
    DATABASE_URL: str = "sqlite+aiosqlite:///:memory:"
    LOG_LEVEL: str = "DEBUG"
    LOG_FILE: str = "logs/halolight_test.log"
    ALLOWED_HOSTS: List[str] = ["localhost", "127.0.0.1", "testserver"]
    CELERY_BROKER_URL: str = "memory://"
    CELERY_RESULT_BACKEND: str = "cache+memory://"

    def init_test_features(self) -> None:
        """Initialize testing-specific features."""
        self.setup_logging()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings based on environment.
    Uses lru_cache to avoid recreating settings on every call.
    """
    env = os.getenv("FASTAPI_ENV", "development").lower()

    if env == "production":
        production_settings = ProductionSettings()
        production_settings.init_production_features()
        settings: Settings = production_settings
    elif env == "testing":
        testing_settings = TestingSettings()
        testing_settings.init_test_features()
        settings = testing_settings
    else:
        development_settings = DevelopmentSettings()
        development_settings.init_dev_features()
        settings = development_settings

    settings.create_directories()

    return settings
