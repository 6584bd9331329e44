"""
Configuration Management for Finance Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see what external dependencies exist and
ensures all required configuration is validated at startup.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets document store configuration."""

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

    # One worksheet holds every record of the document store
    records_sheet_name: str = Field(
        default="Records",
        description="Name of the sheet holding document records"
    )

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


class AccountsStoreSettings(BaseSettings):
    """
    Where and how the account collection is persisted.

    The whole collection lives in ONE record, attached as ONE asset.
    """

    model_config = SettingsConfigDict(
        env_prefix="ACCOUNTS_STORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: Literal["google_sheets", "memory"] = Field(
        default="google_sheets",
        description="Document store backend"
    )
    record_name: str = Field(
        default="AccountsRecord",
        min_length=1,
        description="Fixed identifier of the record holding all accounts"
    )
    record_type: str = Field(
        default="Accounts",
        min_length=1,
        description="Type of the accounts record"
    )
    asset_field: str = Field(
        default="accounts",
        min_length=1,
        description="Record field carrying the encoded accounts asset"
    )
    staging_dir: Optional[str] = Field(
        default=None,
        description="Directory for staging files (platform temp dir when unset)"
    )
    keep_staging_files: bool = Field(
        default=False,
        description="Leave staging files on disk after each save"
    )
    pretty_print: bool = Field(
        default=True,
        description="Indent the encoded accounts document"
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
        description="Application environment (development logs to the console)"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for the structured log"
    )

    # Amount entry
    decimal_separator: str = Field(
        default=".",
        min_length=1,
        max_length=1,
        description="Separator between whole and fractional part of amounts"
    )
    currency_symbol: str = Field(
        default="$",
        description="Symbol shown in front of formatted balances"
    )

    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def json_logs(self) -> bool:
        """JSON log lines outside development; readable console output otherwise."""
        return self.app_environment != "development" and not self.debug_mode


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

    # Note: These are loaded lazily to allow partial configuration

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def accounts_store(self) -> AccountsStoreSettings:
        return AccountsStoreSettings()

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

    Returns a dict of {setting_name: is_valid}, plus a
    "<setting_name>_error" entry for each section that failed.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    sections = {
        "google_sheets": lambda: settings.google_sheets,
        "accounts_store": lambda: settings.accounts_store,
        "app": lambda: settings.app,
    }

    for name, load in sections.items():
        try:
            load()
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
