"""Application configuration using Pydantic Settings with YAML support.

This module provides centralized configuration management with:
- YAML-based configuration files organized by domain
- Environment-specific overrides (local, test, development, production)
- Environment variable loading for secrets
- Computed URLs for the upstream APIs
"""

from __future__ import annotations

from enum import StrEnum
from functools import lru_cache
from typing import TYPE_CHECKING, Annotated

from pydantic import BaseModel, BeforeValidator, Field
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from .yaml_source import MultiYamlConfigSettingsSource


if TYPE_CHECKING:
    from pydantic_settings import PydanticBaseSettingsSource


class AuthMode(StrEnum):
    """How caller identity tokens are validated.

    - SUPABASE: Validate via the identity provider's /auth/v1/user endpoint
    - HEADER: Trust the X-User-ID header (local development and tests only)
    """

    SUPABASE = "supabase"
    HEADER = "header"


class CredentialBackend(StrEnum):
    """Where per-user Kroger credentials are kept."""

    MEMORY = "memory"
    REDIS = "redis"


def parse_list(v: str | list[str]) -> list[str]:
    """Parse comma-separated string or list into list of strings."""
    if isinstance(v, str):
        return [x.strip() for x in v.split(",") if x.strip()]
    return v


# =============================================================================
# Nested Configuration Models (from YAML)
# =============================================================================


class AppSettings(BaseModel):
    """Application identity settings."""

    name: str = "Deals to Meals API"
    version: str = "0.1.0"
    debug: bool = False


class ServerSettings(BaseModel):
    """Server configuration settings."""

    host: str = "127.0.0.1"
    port: int = 5000


class ApiSettings(BaseModel):
    """API configuration settings."""

    prefix: str = "/api"
    cors_origins: list[str] = ["*"]
    static_dir: str | None = "public"


class AuthHeaderSettings(BaseModel):
    """Header-based auth settings."""

    user_id: str = "X-User-ID"


class AuthSettings(BaseModel):
    """Identity provider configuration."""

    mode: str = "supabase"
    supabase_url: str | None = None
    timeout: float = 5.0
    headers: AuthHeaderSettings = AuthHeaderSettings()


class KrogerSettings(BaseModel):
    """Kroger partner API configuration."""

    api_base: str = "https://api.kroger.com/v1"
    token_url: str = "https://api.kroger.com/v1/connect/oauth2/token"
    authorize_url: str = "https://api.kroger.com/v1/connect/oauth2/authorize"
    redirect_uri: str = "https://dealstomeals.co/auth/kroger/callback"
    app_url: str = "https://dealstomeals.co"
    app_scope: str = "product.compact"
    user_scope: str = "cart.basic:write product.compact"
    store_radius_miles: int = 15
    store_limit: int = 8
    cart_modality: str = "PICKUP"


class DealsSettings(BaseModel):
    """Deal aggregation configuration.

    An empty ``categories`` list means the built-in category list is used.
    """

    batch_size: int = Field(default=8, gt=0)
    products_per_category: int = Field(default=20, gt=0)
    max_results: int = Field(default=200, gt=0)
    categories: list[str] = []


class SpoonacularSettings(BaseModel):
    """Recipe search API configuration."""

    base_url: str = "https://api.spoonacular.com"
    results_per_search: int = 50
    max_ingredients: int = 20


class LLMSettings(BaseModel):
    """LLM completion API passthrough configuration."""

    url: str = "https://api.anthropic.com/v1/messages"
    api_version: str = "2023-06-01"
    timeout: float = 60.0


class CredentialSettings(BaseModel):
    """Per-user credential store configuration."""

    backend: str = "memory"
    key_prefix: str = "kroger:credentials"
    ttl_seconds: int = 60 * 60 * 24 * 30


class HttpSettings(BaseModel):
    """Shared outbound HTTP client configuration."""

    timeout: float = 10.0
    max_connections: int = 50


class RedisSettings(BaseModel):
    """Redis configuration settings."""

    host: str = "localhost"
    port: int = 6379
    user: str | None = None
    db: int = 0


class DatabaseSettings(BaseModel):
    """PostgreSQL database configuration settings."""

    enabled: bool = True
    host: str = "localhost"
    port: int = 5432
    name: str = "postgres"
    db_schema: str = "public"
    user: str | None = None
    min_pool_size: int = 1
    max_pool_size: int = 10
    command_timeout: float = 30.0
    ssl: bool = False


class SiteSettings(BaseModel):
    """Shared-secret gate for the static site."""

    cookie_name: str = "site_auth"
    cookie_max_age: int = 86400
    login_path: str = "/login.html"
    open_prefixes: list[str] = ["/api", "/auth"]


class LoggingSettings(BaseModel):
    """Logging configuration settings."""

    level: str = "INFO"
    format: str = "json"


# =============================================================================
# Main Settings Class
# =============================================================================


class Settings(BaseSettings):
    """Application settings with YAML + environment variable support.

    Configuration is loaded from multiple sources with the following priority
    (highest to lowest):
    1. Environment variables
    2. .env file (secrets only)
    3. Environment-specific YAML files (config/environments/{APP_ENV}/)
    4. Base YAML files (config/base/)
    5. Default values in code

    Environment variables can override any setting using the nested delimiter '__'.
    For example: DEALS__BATCH_SIZE=4 overrides deals.batch_size.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        case_sensitive=False,
        env_nested_delimiter="__",
    )

    APP_ENV: str = "development"

    app: AppSettings = AppSettings()
    server: ServerSettings = ServerSettings()
    api: ApiSettings = ApiSettings()
    auth: AuthSettings = AuthSettings()
    kroger: KrogerSettings = KrogerSettings()
    deals: DealsSettings = DealsSettings()
    spoonacular: SpoonacularSettings = SpoonacularSettings()
    llm: LLMSettings = LLMSettings()
    credentials: CredentialSettings = CredentialSettings()
    http: HttpSettings = HttpSettings()
    redis: RedisSettings = RedisSettings()
    database: DatabaseSettings = DatabaseSettings()
    site: SiteSettings = SiteSettings()
    logging: LoggingSettings = LoggingSettings()

    # =========================================================================
    # Secrets (from .env only - never in YAML)
    # =========================================================================
    KROGER_CLIENT_ID: str = ""
    KROGER_CLIENT_SECRET: str = ""
    SPOONACULAR_API_KEY: str = ""
    SUPABASE_SERVICE_KEY: str = ""
    LLM_API_KEY: str = ""
    SITE_PASSWORD: str = ""
    REDIS_PASSWORD: str = ""
    DATABASE_PASSWORD: str = ""

    # Extra allowed origins for CORS (comma-separated in .env)
    EXTRA_CORS_ORIGINS: Annotated[list[str], NoDecode, BeforeValidator(parse_list)] = []

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings loading order."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            MultiYamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    # =========================================================================
    # Computed Fields
    # =========================================================================

    @property
    def auth_mode_enum(self) -> AuthMode:
        """Get auth mode as enum with validation."""
        try:
            return AuthMode(self.auth.mode.lower())
        except ValueError:
            msg = (
                f"Invalid auth mode: {self.auth.mode}. "
                f"Must be one of: {', '.join(m.value for m in AuthMode)}"
            )
            raise ValueError(msg) from None

    @property
    def credential_backend_enum(self) -> CredentialBackend:
        """Get credential store backend as enum with validation."""
        try:
            return CredentialBackend(self.credentials.backend.lower())
        except ValueError:
            msg = (
                f"Invalid credential backend: {self.credentials.backend}. "
                f"Must be one of: {', '.join(b.value for b in CredentialBackend)}"
            )
            raise ValueError(msg) from None

    @property
    def supabase_user_url(self) -> str | None:
        """Full identity provider user endpoint URL."""
        if self.auth.supabase_url:
            return f"{self.auth.supabase_url.rstrip('/')}/auth/v1/user"
        return None

    @property
    def cors_origins(self) -> list[str]:
        """Configured CORS origins plus any extra ones from the environment."""
        return [*self.api.cors_origins, *self.EXTRA_CORS_ORIGINS]

    @property
    def redis_url(self) -> str:
        """Build Redis connection URL.

        URL format: redis://[user:password@]host:port/db
        """
        auth_part = ""
        if self.redis.user and self.REDIS_PASSWORD:
            auth_part = f"{self.redis.user}:{self.REDIS_PASSWORD}@"
        elif self.REDIS_PASSWORD:
            auth_part = f":{self.REDIS_PASSWORD}@"
        elif self.redis.user:
            auth_part = f"{self.redis.user}@"

        return f"redis://{auth_part}{self.redis.host}:{self.redis.port}/{self.redis.db}"

    @property
    def site_gate_enabled(self) -> bool:
        """The site gate only applies when a password is configured."""
        return bool(self.SITE_PASSWORD)

    # =========================================================================
    # Environment Helpers
    # =========================================================================

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.APP_ENV == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.APP_ENV == "production"

    @property
    def is_testing(self) -> bool:
        """Check if running in test environment."""
        return self.APP_ENV == "test"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Using lru_cache ensures settings are only loaded once.
    """
    return Settings()
