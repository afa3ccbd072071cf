"""
Configuration Management for Record Keeper

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Each record domain (notes, expenses, wiki) picks its own backend, so a
deployment can keep notes in the remote spreadsheet while expenses stay
on the device.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


Backend = Literal["remote", "local"]


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets (remote store) configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    credentials_path: str = Field(
        ...,
        description="Path to Google service account credentials JSON"
    )
    spreadsheet_id: str = Field(
        ...,
        description="ID of the Google Sheets spreadsheet to use"
    )

    # One worksheet per domain
    notes_sheet_name: str = Field(default="notes")
    expenses_sheet_name: str = Field(default="expenses")
    wiki_sheet_name: str = Field(default="wiki_commands")

    @field_validator('credentials_path')
    @classmethod
    def validate_credentials_path(cls, v: str) -> str:
        """Warn if credentials file doesn't exist (but don't fail - might be mounted later)."""
        if not Path(v).exists():
            import warnings
            warnings.warn(
                f"Google credentials file not found at {v}. "
                "Make sure it exists before running the application."
            )
        return v

    def sheet_name_for(self, domain: str) -> str:
        return {
            "notes": self.notes_sheet_name,
            "expenses": self.expenses_sheet_name,
            "wiki": self.wiki_sheet_name,
        }[domain]


class LocalStorageSettings(BaseSettings):
    """On-device JSON storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LOCAL_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    data_dir: str = Field(
        default=".recordkeeper",
        description="Directory holding one JSON blob per domain"
    )

    # Fixed storage key per domain
    notes_key: str = Field(default="notes")
    expenses_key: str = Field(default="expenses")
    wiki_key: str = Field(default="wiki_commands")

    def key_for(self, domain: str) -> str:
        return {
            "notes": self.notes_key,
            "expenses": self.expenses_key,
            "wiki": self.wiki_key,
        }[domain]


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
        description="Standard logging level name"
    )

    # Backend per domain
    notes_backend: Backend = Field(default="remote")
    expenses_backend: Backend = Field(default="local")
    wiki_backend: Backend = Field(default="remote")

    uncategorized_label: str = Field(
        default="Sem categoria",
        min_length=1,
        description="Category given to expenses submitted without one"
    )

    def backend_for(self, domain: str) -> Backend:
        return {
            "notes": self.notes_backend,
            "expenses": self.expenses_backend,
            "wiki": self.wiki_backend,
        }[domain]


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

    # Sub-settings are loaded lazily so the remote store can stay
    # unconfigured when every domain is local

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def local_storage(self) -> LocalStorageSettings:
        return LocalStorageSettings()

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

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("google_sheets", "local_storage", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
