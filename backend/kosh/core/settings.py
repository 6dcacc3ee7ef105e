"""
Settings Module

This module manages all application configuration using Pydantic v2 Settings.
Includes configurations for:
- Application core settings
- Database connection
- Authentication and password hashing
- Logging and error tracking
- CORS
- Demo account and default savings rules
"""

from decimal import Decimal
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file if present
load_dotenv()

DEFAULT_JWT_SECRET = "dev-secret-change-me"


class AppConfig(BaseSettings):
    """Application core configuration."""

    TITLE: str = "Kosh API"
    VERSION: str = "1.0.0"
    DESCRIPTION: str = "Auto-save, treasury and mock mutual fund API for merchants"
    SERVICE_NAME: str = "kosh-server"

    # Environment
    ENVIRONMENT: str = Field(
        default="development",
        pattern="^(development|staging|production|test)$"
    )
    DEBUG: bool = Field(default=False)

    # Server
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=4000)

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    model_config = SettingsConfigDict(
        env_prefix="APP_"
    )


class DatabaseConfig(BaseSettings):
    """Database connection configuration."""

    DATABASE_URL: str = Field(default="sqlite+aiosqlite:///./kosh.db")
    ECHO: bool = Field(default=False)

    # Connection Pool (ignored by SQLite)
    POOL_SIZE: int = Field(default=10)
    MAX_OVERFLOW: int = Field(default=5)
    POOL_RECYCLE: int = Field(default=1800)  # 30 minutes

    @field_validator("DATABASE_URL")
    @classmethod
    def normalise_driver(cls, v: str) -> str:
        """Hosted Postgres hands out postgres:// URLs; the async engine needs asyncpg."""
        if v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql+asyncpg://", 1)
        if v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    model_config = SettingsConfigDict(
        env_prefix="DB_"
    )


class AuthConfig(BaseSettings):
    """Authentication configuration."""

    # JWT Settings
    JWT_SECRET_KEY: SecretStr = SecretStr(DEFAULT_JWT_SECRET)
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=60 * 24 * 7)

    # Password Hashing
    ARGON2_TIME_COST: int = Field(default=2)
    ARGON2_MEMORY_COST: int = Field(default=102400)
    ARGON2_PARALLELISM: int = Field(default=8)

    model_config = SettingsConfigDict(
        env_prefix="AUTH_"
    )


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    LEVEL: str = Field(default="INFO")
    JSON_LOGS: bool = Field(default=True)

    # Sentry
    SENTRY_DSN: Optional[str] = None
    SENTRY_TRACES_SAMPLE_RATE: float = Field(default=1.0)

    model_config = SettingsConfigDict(
        env_prefix="LOG_"
    )


class SecurityConfig(BaseSettings):
    """Security configuration."""

    # CORS
    CORS_ORIGINS: List[str] = Field(default=[])
    CORS_ORIGIN_REGEX: Optional[str] = Field(default=r"^http://localhost:\d+$")
    CORS_ALLOW_CREDENTIALS: bool = Field(default=True)
    CORS_ALLOW_METHODS: List[str] = Field(
        default=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
    )
    CORS_ALLOW_HEADERS: List[str] = Field(default=["*"])

    model_config = SettingsConfigDict(
        env_prefix="SECURITY_"
    )


class DemoConfig(BaseSettings):
    """Demo account and default savings rules."""

    EMAIL: str = Field(default="demo@local")
    NAME: str = Field(default="Demo User")

    # Requests without a bearer token act as the demo user
    ANONYMOUS_ACCESS: bool = Field(default=True)

    # Defaults applied to every new Settings row
    AUTO_SAVE_RATE: Decimal = Field(default=Decimal("3.5"))
    WEEKLY_TOP_UP: Decimal = Field(default=Decimal("500"))
    MIN_THRESHOLD: Decimal = Field(default=Decimal("100"))
    ROUND_UPS_ENABLED: bool = Field(default=True)

    SEED_NAV: Decimal = Field(default=Decimal("100"))

    # Development seed account
    SEED_EMAIL: str = Field(default="test@example.com")
    SEED_PASSWORD: str = Field(default="Test@1234")
    SEED_NAME: str = Field(default="Test User")

    model_config = SettingsConfigDict(
        env_prefix="DEMO_"
    )


class AppSettings(BaseSettings):
    """Main settings class combining all configuration sections."""

    app: AppConfig = AppConfig()
    db: DatabaseConfig = DatabaseConfig()
    auth: AuthConfig = AuthConfig()
    logging: LoggingConfig = LoggingConfig()
    security: SecurityConfig = SecurityConfig()
    demo: DemoConfig = DemoConfig()

    @model_validator(mode="after")
    def validate_production_settings(self) -> "AppSettings":
        """Validate production environment settings."""
        if self.app.is_production:
            if self.auth.JWT_SECRET_KEY.get_secret_value() == DEFAULT_JWT_SECRET:
                raise ValueError("AUTH_JWT_SECRET_KEY must be set in production")
            if self.app.DEBUG:
                raise ValueError("Debug mode must be disabled in production")
        return self

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=True,
        extra="ignore"
    )


@lru_cache()
def get_settings() -> AppSettings:
    """
    Create cached settings instance.

    Returns:
        Cached AppSettings instance
    """
    return AppSettings()


# Create global settings instance
settings = get_settings()
