"""
Application settings loaded from environment variables.

Uses pydantic-settings for validation and type safety.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache


class Settings(BaseSettings):
    """
    Application settings.

    All values loaded from .env file or environment variables.
    Validation happens automatically on startup.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),  # Check current dir, then parent
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra env vars
    )

    # ===================
    # SUPABASE
    # ===================
    supabase_url: str = Field(
        ...,
        description="Supabase project URL"
    )
    supabase_key: str = Field(
        ...,
        description="Supabase anon/public key"
    )

    # ===================
    # BRØNNØYSUND REGISTRY
    # ===================
    brreg_enabled: bool = Field(
        default=True,
        description="Look up new business customers in Enhetsregisteret"
    )
    brreg_base_url: str = Field(
        default="https://data.brreg.no/enhetsregisteret/api",
        description="Enhetsregisteret API base URL"
    )
    brreg_timeout_seconds: float = Field(
        default=5.0,
        ge=1,
        le=60,
        description="Timeout per registry lookup"
    )

    # ===================
    # IMPORT
    # ===================
    import_delete_scope: str = Field(
        default="period",
        pattern="^(period|tagged)$",
        description=(
            "Which sales a period import replaces: 'period' removes every sale "
            "in the date range, 'tagged' only those carrying the period's import_ref"
        )
    )
    import_insert_batch_size: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Sales rows per bulk insert"
    )
    import_max_file_bytes: int = Field(
        default=10 * 1024 * 1024,
        ge=1024,
        description="Largest accepted upload"
    )
    preview_ttl_minutes: int = Field(
        default=30,
        ge=1,
        le=240,
        description="How long an uploaded file waits for mapping confirmation"
    )

    # ===================
    # APP SETTINGS
    # ===================
    environment: str = Field(
        default="development",
        pattern="^(development|staging|production)$",
        description="Application environment"
    )
    debug: bool = Field(
        default=True,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level"
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API host"
    )
    api_port: int = Field(
        default=8000,
        ge=1000,
        le=65535,
        description="API port"
    )
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"],
        description="Allowed browser origins"
    )

    # ===================
    # COMPUTED PROPERTIES
    # ===================
    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"

    @property
    def delete_tagged_only(self) -> bool:
        """Check if period imports only replace their own tagged sales."""
        return self.import_delete_scope == "tagged"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload.

    Returns:
        Settings: Application settings

    Raises:
        ValidationError: If required env vars are missing or invalid
    """
    return Settings()


# For convenient imports: from config.settings import settings
settings = get_settings()
