"""
Centralized settings configuration using Pydantic BaseSettings.

All environment variables are defined here with types, defaults, and validation.
Use get_settings() for dependency injection compatibility in FastAPI.

Usage:
    from backend.settings import get_settings, Settings

    # In FastAPI endpoints (dependency injection)
    @app.get("/")
    def read_root(settings: Settings = Depends(get_settings)):
        return {"environment": settings.environment}

    # Direct access (module-level)
    settings = get_settings()
    print(settings.supabase_url)
"""

from functools import lru_cache
from typing import Dict, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from domain.models.subscription import SubscriptionTier


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Core Environment
    # -------------------------------------------------------------------------
    environment: str = Field(
        default="development",
        description="Runtime environment: development, staging, production",
    )

    # -------------------------------------------------------------------------
    # Supabase Database / Auth
    # -------------------------------------------------------------------------
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL",
    )
    supabase_service_role_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key (full access)",
    )
    supabase_anon_key: Optional[str] = Field(
        default=None,
        description="Supabase anonymous key (limited access)",
    )
    supabase_jwt_secret: str = Field(
        default="",
        description="Supabase JWT secret used to verify access tokens (HS256)",
    )

    @property
    def supabase_key(self) -> Optional[str]:
        """Get the best available Supabase key (service role preferred)."""
        return self.supabase_service_role_key or self.supabase_anon_key

    # -------------------------------------------------------------------------
    # Authentication - API keys
    # -------------------------------------------------------------------------
    api_keys: str = Field(
        default="",
        description="Comma-separated list of valid API keys",
    )

    @property
    def api_keys_list(self) -> list[str]:
        """Parse API keys into a list."""
        return [k.strip() for k in self.api_keys.split(",") if k.strip()]

    # -------------------------------------------------------------------------
    # External Services - OpenAI (chat trainer)
    # -------------------------------------------------------------------------
    openai_api_key: Optional[str] = Field(
        default=None,
        description="OpenAI API key for the chat trainer",
    )
    chat_model: str = Field(
        default="gpt-4o-mini",
        description="OpenAI chat model name",
    )
    chat_temperature: float = Field(
        default=0.7,
        description="Sampling temperature for chat replies",
    )
    chat_max_tokens: int = Field(
        default=500,
        description="Maximum tokens per chat reply",
    )
    helicone_enabled: bool = Field(
        default=False,
        description="Proxy OpenAI calls through Helicone",
    )
    helicone_api_key: Optional[str] = Field(
        default=None,
        description="Helicone API key",
    )

    # -------------------------------------------------------------------------
    # External Services - Stripe (billing)
    # -------------------------------------------------------------------------
    stripe_secret_key: Optional[str] = Field(
        default=None,
        description="Stripe secret API key",
    )
    stripe_webhook_secret: Optional[str] = Field(
        default=None,
        description="Stripe webhook signing secret",
    )
    stripe_price_basic: str = Field(
        default="",
        description="Stripe price ID for the Basic tier",
    )
    stripe_price_pro: str = Field(
        default="",
        description="Stripe price ID for the Pro tier",
    )
    stripe_price_elite: str = Field(
        default="",
        description="Stripe price ID for the Elite tier",
    )
    app_url: str = Field(
        default="http://localhost:5173",
        description="Public URL of the web app (checkout redirects)",
    )

    @property
    def stripe_price_ids(self) -> Dict[SubscriptionTier, str]:
        """Configured price ID per tier (empty string when unset)."""
        return {
            SubscriptionTier.BASIC: self.stripe_price_basic,
            SubscriptionTier.PRO: self.stripe_price_pro,
            SubscriptionTier.ELITE: self.stripe_price_elite,
        }

    # -------------------------------------------------------------------------
    # HTTP
    # -------------------------------------------------------------------------
    cors_allowed_origins: str = Field(
        default="*",
        description="Comma-separated CORS origins, or * for any",
    )

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_allowed_origins.split(",") if o.strip()]

    # -------------------------------------------------------------------------
    # Workout session runtime
    # -------------------------------------------------------------------------
    tick_interval_seconds: float = Field(
        default=1.0,
        gt=0,
        description="Wall-clock seconds between tracker ticks",
    )
    autosave_interval_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Wall-clock seconds between periodic snapshots",
    )

    # -------------------------------------------------------------------------
    # Observability - Sentry
    # -------------------------------------------------------------------------
    sentry_dsn: Optional[str] = Field(
        default=None,
        description="Sentry DSN for error tracking",
    )

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------
    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is a valid value."""
        valid_environments = {"development", "staging", "production", "test"}
        if v.lower() not in valid_environments:
            raise ValueError(
                f"Invalid environment '{v}'. Must be one of: {valid_environments}"
            )
        return v.lower()

    # -------------------------------------------------------------------------
    # Helper Properties
    # -------------------------------------------------------------------------
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_test(self) -> bool:
        """Check if running in test environment."""
        return self.environment == "test"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    For testing, you can clear the cache with get_settings.cache_clear().

    Returns:
        Settings: Application settings instance
    """
    return Settings()
