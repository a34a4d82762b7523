"""Application configuration."""

from enum import Enum
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StatusUpdatePolicy(str, Enum):
    """Who may change the status of an appointment."""

    AUTHENTICATED = "authenticated"
    OWNER = "owner"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_parse_none_str="null",
    )

    # Application
    app_name: str = Field(default="Smart Health Portal API", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")
    api_v1_prefix: str = Field(default="/api/v1", alias="API_V1_PREFIX")

    # Server
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8000, alias="PORT")
    reload: bool = Field(default=False, alias="RELOAD")

    # Database
    database_url: str = Field(..., alias="DATABASE_URL")

    # JWT
    jwt_secret_key: str = Field(..., alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(default=60, alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    # Email
    resend_api_key: str = Field(default="", alias="RESEND_API_KEY")
    email_from: str = Field(
        default="Smart Health Portal <no-reply@smarthealth.local>",
        alias="EMAIL_FROM",
    )

    # Clinic
    clinic_timezone: str = Field(default="Asia/Kolkata", alias="CLINIC_TIMEZONE")

    # Reminders
    reminder_enabled: bool = Field(default=True, alias="REMINDER_ENABLED")
    reminder_hour: int = Field(default=9, ge=0, le=23, alias="REMINDER_HOUR")
    reminder_minute: int = Field(default=0, ge=0, le=59, alias="REMINDER_MINUTE")
    reminder_dedupe_hours: int = Field(default=24, ge=1, alias="REMINDER_DEDUPE_HOURS")

    # Appointments
    status_update_policy: StatusUpdatePolicy = Field(
        default=StatusUpdatePolicy.AUTHENTICATED,
        alias="STATUS_UPDATE_POLICY",
        description="'authenticated' lets any signed-in patient or provider change status; "
        "'owner' restricts it to the owning patient or the treating provider",
    )

    # CORS
    cors_origins_str: str = Field(
        default="http://localhost:3000",
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")

    @property
    def cors_origins(self) -> list[str]:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="json", alias="LOG_FORMAT")

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()  # type: ignore[call-arg]


# Global settings instance
settings = get_settings()
