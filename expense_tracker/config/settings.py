"""
Expense Tracker settings

Everything tunable comes from environment variables (or a local .env),
read through pydantic-settings so bad values fail loudly at load time.

Two groups:
- GoogleSheetsSettings: only needed when the durable backend is used
- AppSettings: entry form limits and report defaults, all with defaults
"""

import warnings
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from expense_tracker.models.expense import NOTES_MAX_LENGTH


class GoogleSheetsSettings(BaseSettings):
    """Where expenses and audit events are persisted."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        extra="ignore"
    )

    credentials_path: str = Field(
        ...,
        description="Service account key file (JSON)"
    )
    spreadsheet_id: str = Field(
        ...,
        description="Key of the spreadsheet holding the worksheets below"
    )

    expenses_sheet_name: str = Field(
        default="Expenses",
        description="Worksheet with one row per expense"
    )
    audit_sheet_name: str = Field(
        default="AuditLog",
        description="Append-only worksheet of audit events"
    )

    @field_validator('credentials_path')
    @classmethod
    def warn_if_credentials_missing(cls, v: str) -> str:
        # Containers often mount the key after settings are read
        if not Path(v).is_file():
            warnings.warn(f"No Google credentials file at {v} yet.")
        return v


class AppSettings(BaseSettings):
    """Entry form limits and reporting defaults."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    app_environment: str = Field(
        default="development",
        description="development / staging / production"
    )
    debug_mode: bool = Field(
        default=False,
        description="Verbose local logging"
    )

    notes_max_length: int = Field(
        default=NOTES_MAX_LENGTH,
        ge=0,
        le=NOTES_MAX_LENGTH,
        description="Entry form notes limit (can only be lowered)"
    )
    max_expense_amount: float = Field(
        default=1000000.0,
        gt=0,
        description="Amounts above this get an 'unusually high' warning"
    )
    report_window_days: int = Field(
        default=7,
        ge=1,
        le=366,
        description="Length of the rolling report, ending today"
    )


class Settings(BaseSettings):
    """
    Entry point for all settings groups.

    Groups are built on access, so the app can run in memory
    with no Google Sheets variables set at all.
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
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """Shared Settings instance. Tests call get_settings.cache_clear()."""
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Startup check: try to load every settings group.

    Returns {group: loaded_ok}, plus "<group>_error" with the
    message for each group that failed.
    """
    settings = get_settings()
    results = {}

    for group in ("google_sheets", "app"):
        try:
            getattr(settings, group)
        except Exception as e:
            results[group] = False
            results[f"{group}_error"] = str(e)
        else:
            results[group] = True

    return results
