"""Configuration management using pydantic-settings."""

from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class AdminApiSettings(BaseSettings):
    """Admin API connection settings loaded from ZKIT_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ZKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    service_url: Optional[str] = Field(
        default=None,
        description="Tenant service URL",
    )
    admin_key: Optional[SecretStr] = Field(
        default=None,
        description="Tenant admin key, 64 hexadecimal characters",
    )
    tenant_id: Optional[str] = Field(
        default=None,
        description="Tenant id (inferred from service_url if not set)",
    )
