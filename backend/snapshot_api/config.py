"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Tenant, client and subscription ids are required (no defaults);
      an empty value counts as missing
    - Both AZURE_* and the legacy REACT_APP_AZURE_* names are accepted
    - get_settings() is cached (lru_cache): single instance per process

Design Decisions:
    - Missing required ids raise pydantic ValidationError on first access,
      which the CLI turns into a fatal startup error
"""

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore",
    )

    # Azure identity / subscription
    azure_tenant_id: str = Field(
        min_length=1,
        validation_alias=AliasChoices(
            "AZURE_TENANT_ID", "REACT_APP_AZURE_TENANT_ID",
        ),
    )
    azure_client_id: str = Field(
        min_length=1,
        validation_alias=AliasChoices(
            "AZURE_CLIENT_ID", "REACT_APP_AZURE_CLIENT_ID",
        ),
    )
    azure_subscription_id: str = Field(
        min_length=1,
        validation_alias=AliasChoices(
            "AZURE_SUBSCRIPTION_ID", "REACT_APP_AZURE_SUBSCRIPTION_ID",
        ),
    )
    azure_management_scope: str = "https://management.azure.com/.default"

    # Long-running operations
    lro_poll_interval_seconds: float = 1.0

    # Server
    host: str = "0.0.0.0"  # nosec B104
    port: int = 8080
    shutdown_timeout_seconds: int = 5

    # API
    cors_origins: list[str] = [
        "http://localhost:8080", "http://localhost:80",
    ]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


REQUIRED_ENV_VARS = (
    "AZURE_TENANT_ID", "AZURE_CLIENT_ID", "AZURE_SUBSCRIPTION_ID",
)


@lru_cache
def get_settings() -> Settings:
    return Settings()
