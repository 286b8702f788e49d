"""
Team Cook API: Application Configuration
==========================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by the application factory, the lifespan and Alembic.
When:  Loaded once at module import time; the API key is validated when the
       lifespan starts, so a missing credential stops the server from serving.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from teamcook_api.exceptions import ConfigurationError


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Defaults are suitable for local development. SPOONACULAR_API_KEY has no
    usable default and must be provided before the server will start.
    """

    # ── Upstream (Spoonacular) ────────────────────────────────────────────
    # What: Credential appended as the `apiKey` query parameter on every
    #       proxied call. Empty means "not configured".
    spoonacular_api_key: str = Field(
        default="",
        description="Spoonacular API key injected into upstream requests",
    )

    # What: Base URL that proxied endpoint paths are appended to
    upstream_base_url: str = Field(default="https://api.spoonacular.com")

    # What: Total timeout for one upstream call, in seconds
    upstream_timeout_seconds: float = Field(default=30.0, gt=0, le=300)

    # ── Cache Store ───────────────────────────────────────────────────────
    # What: Async SQLAlchemy URL of the durable cache table
    # Format: sqlite+aiosqlite:///<path> or postgresql+asyncpg://user:pw@host/db
    cache_database_url: str = Field(
        default="sqlite+aiosqlite:///./cache.sqlite",
        description="Async database URL backing the response cache",
    )

    # What: Lifetime of a cached upstream payload
    # Default: 24 hours = 86400 seconds
    cache_ttl_seconds: int = Field(default=86_400, ge=1)

    # ── Ingredient Identity ───────────────────────────────────────────────
    # What: Semicolon-delimited reference dataset; the second field of each
    #       line is a known ingredient ID. Only its maximum is used.
    ingredient_reference_path: str = Field(
        default="data/ingredients-with-possible-units.csv"
    )

    # What: Mounts the handler that appends the "a lot of love" ingredient
    enable_love_ingredient: bool = Field(default=False)

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=3000, ge=1024, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @field_validator("upstream_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Endpoint paths start with '/', so the base must not end with one."""
        return v.rstrip("/")

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # SPOONACULAR_API_KEY and spoonacular_api_key both work
    }

    def validate_required_for_production(self) -> None:
        """
        What:  Validates that critical settings are configured.
        When:  Called during app startup (lifespan), before anything is served.
        How:   Collects every problem and raises a single ConfigurationError.
        """
        errors = []
        if not self.spoonacular_api_key or self.spoonacular_api_key == "your_spoonacular_api_key_here":
            errors.append(
                "SPOONACULAR_API_KEY is not set. "
                "Get a key at https://spoonacular.com/food-api/console"
            )
        if errors:
            raise ConfigurationError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


# Singleton instance, read by the application factory and Alembic
settings = Settings()
