"""
Application settings.

Values come from the environment, falling back to a ``.env`` file in the
working directory.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the buyer API service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_env: str = "development"
    app_log_level: str = "INFO"
    app_host: str = "0.0.0.0"
    app_port: int = 8000

    google_application_credentials: str = "service-account.json"
    buyer_api_version: str = "v2beta1"
    buyer_api_max_attempts: int = Field(3, ge=1)
    buyer_api_retry_initial: float = Field(1.0, ge=0)
    buyer_api_retry_max: float = Field(10.0, ge=0)

    jwt_jwks_public_path: str = "/tmp/jwks-public.json"
    jwt_jwks_private_path: str = "/tmp/jwks-private.json"
    api_jwt_audience: str = "buyer-api"
    api_jwt_issuer: str = "buyer-auth"
    jwt_expiry_minutes: int = 15

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def use_mock(self) -> bool:
        return self.app_env == "development"


@lru_cache
def get_settings() -> Settings:
    """Load settings once per process."""
    return Settings()
