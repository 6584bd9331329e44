"""Configuration package."""

from src.config.settings import (
    AccountsStoreSettings,
    AppSettings,
    GoogleSheetsSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AccountsStoreSettings",
    "AppSettings",
    "GoogleSheetsSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
