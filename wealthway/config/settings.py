"""
Configuration Management for WealthWay

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see what external dependencies exist and
ensures all required configuration is validated at startup.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Every settings class reads the same optional .env and ignores unknown keys
_ENV_FILE = {
    "env_file": ".env",
    "env_file_encoding": "utf-8",
    "extra": "ignore",
}


class GeminiSettings(BaseSettings):
    """Gemini LLM configuration for the advice panel."""

    model_config = SettingsConfigDict(env_prefix="GEMINI_", **_ENV_FILE)

    api_key: str = Field(
        ...,
        description="Gemini API key"
    )
    model_name: str = Field(
        default="gemini-1.5-flash",
        description="Gemini model to use"
    )
    max_tokens: int = Field(
        default=1024,
        ge=100,
        le=8192,
        description="Maximum tokens in response"
    )
    # Advice is prose, not extraction: a warmer temperature reads better
    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Model temperature"
    )


class StorageSettings(BaseSettings):
    """Local state storage configuration."""

    model_config = SettingsConfigDict(env_prefix="WEALTHWAY_STORAGE_", **_ENV_FILE)

    data_path: Optional[str] = Field(
        default=".wealthway/state.json",
        description="JSON file holding transactions and settings. Empty keeps state in memory."
    )

    @field_validator("data_path")
    @classmethod
    def empty_means_memory(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(**_ENV_FILE)

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
        description="Log level for the structured activity log"
    )

    # Display
    currency_symbol: str = Field(
        default="¥",
        max_length=5,
        description="Symbol shown before amounts"
    )
    currency_code: str = Field(
        default="JPY",
        min_length=3,
        max_length=3,
        description="ISO currency code mentioned to the advisor"
    )

    # Used only when nothing is stored yet
    default_cycle_start_day: int = Field(
        default=1,
        ge=1,
        le=28,
        description="Cycle start day before the user picks one"
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.strip().upper()


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(**_ENV_FILE)

    # Note: These are loaded lazily to allow partial configuration

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

    Returns a dict of {setting_name: is_valid}, plus "<name>_error" entries
    for the ones that failed. Useful for the settings page.
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
