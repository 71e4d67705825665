"""
Configuration Management for RupeeWise

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see what external dependencies exist and
ensures all required configuration is validated at startup.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GeminiSettings(BaseSettings):
    """Gemini LLM configuration for the financial advisor."""

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    api_key: str = Field(
        ...,
        description="Gemini API key"
    )
    model_name: str = Field(
        default="gemini-2.5-flash",
        description="Gemini model to use"
    )
    max_tokens: int = Field(
        default=1024,
        ge=100,
        le=8192,
        description="Maximum tokens in response"
    )
    temperature: float = Field(
        default=0.4,
        ge=0.0,
        le=1.0,
        description="Model temperature (lower = more deterministic)"
    )
    request_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Give up on the advisor call after this many seconds"
    )


class StorageSettings(BaseSettings):
    """Local key-value storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RUPEEWISE_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path("~/.rupeewise"),
        description="Directory holding one JSON file per collection"
    )
    key_prefix: str = Field(
        default="rupeeWise_",
        min_length=1,
        description="Prefix of the per-collection storage keys"
    )

    @field_validator('data_dir')
    @classmethod
    def expand_data_dir(cls, v: Path) -> Path:
        """Expand ~ so the directory can be created directly."""
        return v.expanduser()


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level for structured log output"
    )

    # Display
    currency_symbol: str = Field(
        default="₹",
        description="Currency symbol used in prompts and the UI"
    )

    # Validation thresholds
    max_reasonable_amount: float = Field(
        default=10000000.0,
        gt=0,
        description="Amounts above this are flagged (for sanity checking)"
    )
    future_date_tolerance_days: int = Field(
        default=7,
        ge=0,
        description="How many days in the future a transaction date can be"
    )

    # Budget display
    budget_warning_ratio: float = Field(
        default=0.8,
        gt=0.0,
        le=1.0,
        description="Share of a budget after which spending is 'near the limit'"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Sub-settings are loaded lazily to allow partial configuration
    # (the tracker works without a Gemini key).

    @property
    def gemini(self) -> GeminiSettings:
        return GeminiSettings()

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus
    {setting_name}_error entries for the failing ones.
    Useful for startup checks and the settings page.
    """
    results = {}

    settings = get_settings()

    for name in ("gemini", "storage", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
