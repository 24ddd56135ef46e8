"""
Application configuration via pydantic-settings.

All settings are loaded from environment variables (and .env file).

The JWT signing secret is never hard-coded: either JWT_SECRET or an RS256
key pair (JWT_PRIVATE_KEY / JWT_PUBLIC_KEY) must be supplied out-of-band.
"""

from __future__ import annotations

from typing import Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class _EnvSettings(BaseSettings):
    """Reads process env first, then .env; unknown keys are ignored."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


class DatabaseSettings(_EnvSettings):
    mongodb_uri: str
    db_name: str = "restaurant-reservation"


class RedisSettings(_EnvSettings):
    # Optional; sessions fall back to MongoDB when Redis is absent
    redis_uri: Optional[str] = None


class JWTSettings(_EnvSettings):
    jwt_issuer: str = "restaurant-reservation"
    jwt_audience: str = "restaurant-reservation.api"
    access_token_ttl_seconds: int = 3600
    cookie_secure: bool = True
    auth_cookie_name: str = "authToken"

    # RS256 keys (preferred)
    jwt_private_key: str = ""
    jwt_public_key: str = ""

    # HS256 (used when RS256 keys are absent)
    jwt_secret: str = ""

    @property
    def use_rs256(self) -> bool:
        return bool(self.jwt_private_key and self.jwt_public_key)


class SessionSettings(_EnvSettings):
    session_cookie_name: str = "session_id"
    session_ttl_seconds: int = 86400


class OtpSettings(_EnvSettings):
    # Codes are always 6 digits; only their lifetime is configurable
    otp_ttl_seconds: int = 300


class EmailSettings(_EnvSettings):
    zepto_api_token: str = ""
    zepto_from_email: str = "noreply@restaurant.example"
    zepto_from_name: str = "Restaurant Reservations"


class LoggingSettings(_EnvSettings):
    log_level: str = "INFO"
    log_format: str = "console"  # "json" in production


class SentrySettings(_EnvSettings):
    sentry_dsn: str = ""
    sentry_send_pii: bool = False
    sentry_traces_sample_rate: float = 0.1
    sentry_profile_sample_rate: float = 0.05


_SUB_CONFIGS: dict[str, type[_EnvSettings]] = {
    "db": DatabaseSettings,
    "redis": RedisSettings,
    "jwt": JWTSettings,
    "session": SessionSettings,
    "otp": OtpSettings,
    "email": EmailSettings,
    "logging": LoggingSettings,
    "sentry": SentrySettings,
}


class AppSettings(_EnvSettings):
    # Core
    env: str = "development"
    app_url: str = "http://localhost:8000"
    app_name: str = "Restaurant Reservation API"
    api_docs_url: str = "https://api-docs-url.com"

    # Reservation slots are interpreted in the restaurant's local time
    restaurant_timezone: str = "UTC"

    # CORS; credentials are required for the session and auth cookies
    cors_origins: list[str] = ["http://localhost:5173"]

    # OpenAPI docs UI path; never served when ENV=production
    docs_url: Optional[str] = "/docs"

    # Sub-configs (composed via model_validator below)
    db: Optional[DatabaseSettings] = None
    redis: Optional[RedisSettings] = None
    jwt: Optional[JWTSettings] = None
    session: Optional[SessionSettings] = None
    otp: Optional[OtpSettings] = None
    email: Optional[EmailSettings] = None
    logging: Optional[LoggingSettings] = None
    sentry: Optional[SentrySettings] = None

    @model_validator(mode="after")
    def _populate_sub_configs(self) -> "AppSettings":
        # Sub-configs not passed explicitly read the same env/.env sources
        for field_name, settings_cls in _SUB_CONFIGS.items():
            if getattr(self, field_name) is None:
                setattr(self, field_name, settings_cls())
        return self

    @property
    def is_production(self) -> bool:
        return self.env == "production"
