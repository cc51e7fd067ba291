"""
Configuration Management for Khata Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The remote store is optional, so its settings are allowed to be empty;
the local store always works with its defaults.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets (remote table store) configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    credentials_path: Optional[str] = Field(
        default=None,
        description="Path to Google service account credentials JSON"
    )
    spreadsheet_id: Optional[str] = Field(
        default=None,
        description="ID of the Google Sheets spreadsheet to use"
    )

    # One worksheet per table
    persons_sheet_name: str = Field(
        default="persons",
        description="Name of the worksheet holding persons"
    )
    expenses_sheet_name: str = Field(
        default="expense_entries",
        description="Name of the worksheet holding expense entries"
    )

    @field_validator('credentials_path')
    @classmethod
    def validate_credentials_path(cls, v: Optional[str]) -> Optional[str]:
        """Warn if credentials file doesn't exist (but don't fail - might be mounted later)."""
        if v and not Path(v).exists():
            import warnings
            warnings.warn(
                f"Google credentials file not found at {v}. "
                "The app will fall back to local storage."
            )
        return v or None

    @property
    def is_configured(self) -> bool:
        """Both the credentials and the spreadsheet must be set."""
        return bool(self.credentials_path and self.spreadsheet_id)


class LocalStoreSettings(BaseSettings):
    """On-device storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LOCAL_STORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    path: str = Field(
        default=".khata/ledger.json",
        description="JSON document holding the local collections"
    )
    seed_on_first_run: bool = Field(
        default=True,
        description="Populate empty collections with the default records"
    )


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

    # Display
    organization_name: str = Field(
        default="Cardboard Factory",
        description="Shown in page titles and the factory summary"
    )
    currency_symbol: str = Field(
        default="₹",
        max_length=3,
        description="Prefix used when formatting amounts"
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

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def local_store(self) -> LocalStoreSettings:
        return LocalStoreSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}. The remote store
    additionally reports whether it is configured at all.
    """
    results = {}

    settings = get_settings()

    try:
        sheets = settings.google_sheets
        results["google_sheets"] = True
        results["google_sheets_configured"] = sheets.is_configured
    except Exception as e:
        results["google_sheets"] = False
        results["google_sheets_error"] = str(e)

    try:
        _ = settings.local_store
        results["local_store"] = True
    except Exception as e:
        results["local_store"] = False
        results["local_store_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
