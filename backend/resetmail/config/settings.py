"""Application settings and configuration."""

from enum import Enum
from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings


class Environment(str, Enum):
    """Environment types for deployment."""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class LogFormat(str, Enum):
    JSON = "json"
    CONSOLE = "console"


# Settings that must all be present before a live transport is attempted
REQUIRED_SMTP_SETTINGS = ("SMTP_HOST", "SMTP_PORT", "SMTP_USER", "SMTP_PASS")

DEFAULT_FRONTEND_BASE_URL = "http://203.64.84.209:3000"
DEFAULT_SMTP_PORT = 587
DEFAULT_SMTP_TIMEOUT = 30.0


class Settings(BaseSettings):
    """Application settings."""

    # Environment (NODE_ENV accepted for deployments shared with the frontend)
    ENVIRONMENT: Environment = Field(
        Environment.DEVELOPMENT,
        validation_alias=AliasChoices("ENVIRONMENT", "NODE_ENV"),
    )

    # Application
    APP_NAME: str = "resetmail"
    DEBUG: bool = False
    FRONTEND_BASE_URL: str = DEFAULT_FRONTEND_BASE_URL

    # Mail branding
    MAIL_PRODUCT_NAME: str = "Medical System"

    # SMTP Configuration
    # Kept as raw strings: malformed values must degrade to simulated sends,
    # not abort settings load.
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: Optional[str] = None
    SMTP_SECURE: Optional[str] = None
    SMTP_USER: Optional[str] = None
    SMTP_PASS: Optional[str] = Field(None, repr=False)
    SMTP_FROM: Optional[str] = None
    SMTP_TIMEOUT: Optional[str] = None

    # Monitoring
    ENABLE_METRICS: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: LogFormat = LogFormat.JSON

    @field_validator("ENVIRONMENT", mode="before")
    @classmethod
    def validate_environment(cls, v):
        """Only production is significant; unknown names run as development."""
        if isinstance(v, Environment):
            return v
        try:
            return Environment(str(v).strip().lower())
        except ValueError:
            return Environment.DEVELOPMENT

    @field_validator("FRONTEND_BASE_URL")
    @classmethod
    def validate_frontend_base_url(cls, v: str) -> str:
        """Fall back to the default base URL when blank."""
        v = (v or "").strip()
        return v or DEFAULT_FRONTEND_BASE_URL

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        return v.upper()

    def is_production(self) -> bool:
        """Check if running in production."""
        return self.ENVIRONMENT == Environment.PRODUCTION

    def smtp_secure_enabled(self) -> bool:
        """Implicit TLS is only enabled by the literal value ``true``."""
        return (self.SMTP_SECURE or "").strip().lower() == "true"

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
        "extra": "ignore"  # Ignore extra environment variables
    }


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
