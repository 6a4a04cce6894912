"""
Configuration management using Pydantic Settings.
"""

from typing import List, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


FALSE_FLAGS = {"", "false", "0", "no", "off"}


def _parse_origins(value: str) -> List[str]:
    """Parse a comma-separated origins string, dropping blanks."""
    if not value or not value.strip():
        return []
    return [origin.strip() for origin in value.split(",") if origin.strip()]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Stripe
    stripe_secret_key: Optional[str] = None
    stripe_api_version: Optional[str] = None
    stripe_webhook_secret: str = Field(
        "",
        validation_alias=AliasChoices(
            "STRIPE_WEBHOOK_SECRET", "VITE_AUTH_STRIPE_WEBHOOK_SECRET"
        ),
    )
    stripe_signature_tolerance: int = 300  # seconds
    stripe_payment_success_url: str = "http://localhost:5173/payment?status=success"
    stripe_payment_failure_url: str = "http://localhost:5173/payment?status=cancelled"
    stripe_return_url: str = "http://localhost:5173/settings"
    stripe_refresh_url: str = "http://localhost:5173/settings"

    # Site / internal endpoints
    site_url: str = Field(
        "http://localhost:8888",
        validation_alias=AliasChoices("SITE_URL", "VITE_SITE_URL"),
    )
    admin_key: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("ADMIN_KEY", "VITE_SITE_ADMIN_AUTHORIZED_KEY"),
    )
    allow_site_uris: str = ""

    # Email collaborator
    email_send_path: str = "/.netlify/functions/0001_send_email_fn"
    email_timeout: float = 15.0

    # Firestore credentials
    dev_env: bool = Field(
        False,
        validation_alias=AliasChoices("DEV_ENV", "VITE_DEVELOPMENT_ENV"),
    )
    firebase_credentials_path: str = "./dev/account.json"
    firebase_service_account: Optional[str] = Field(
        None,
        validation_alias=AliasChoices(
            "FIREBASE_SERVICE_ACCOUNT", "VITE_FIREBASE_SERVICE_ACCOUNT"
        ),
    )
    firebase_admin_project_id: Optional[str] = None
    firebase_admin_client_email: Optional[str] = None
    firebase_admin_private_key: Optional[str] = None

    # Application
    environment: str = "development"
    log_level: str = "INFO"
    log_json: bool = False
    log_file_path: Optional[str] = None
    sentry_dsn: Optional[str] = None

    @field_validator("dev_env", mode="before")
    @classmethod
    def _parse_dev_env(cls, value):
        # Legacy deployments set any non-empty string to mean development
        if isinstance(value, str):
            return value.strip().lower() not in FALSE_FLAGS
        return value

    @property
    def allowed_origins(self) -> List[str]:
        return _parse_origins(self.allow_site_uris)

    @property
    def email_send_url(self) -> str:
        return f"{self.site_url.rstrip('/')}{self.email_send_path}"


settings = Settings()
