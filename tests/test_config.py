"""
Tests for configuration loading
"""

import pytest

from expense_tracker.config import (
    AppSettings,
    GoogleSheetsSettings,
    get_settings,
    validate_all_settings,
)


@pytest.fixture
def no_sheets_env(monkeypatch):
    monkeypatch.delenv("GOOGLE_SHEETS_CREDENTIALS_PATH", raising=False)
    monkeypatch.delenv("GOOGLE_SHEETS_SPREADSHEET_ID", raising=False)


class TestAppSettings:
    """Tests for application settings."""

    def test_defaults(self):
        """Test default limits."""
        settings = AppSettings()
        assert settings.notes_max_length == 100
        assert settings.report_window_days == 7
        assert settings.max_expense_amount == 1000000.0
        assert settings.debug_mode is False

    def test_env_override(self, monkeypatch):
        """Test that environment variables override defaults."""
        monkeypatch.setenv("REPORT_WINDOW_DAYS", "14")
        monkeypatch.setenv("DEBUG_MODE", "true")
        settings = get_settings().app
        assert settings.report_window_days == 14
        assert settings.debug_mode is True

    def test_notes_limit_capped(self, monkeypatch):
        """Test that the notes limit can't be raised above 100."""
        monkeypatch.setenv("NOTES_MAX_LENGTH", "500")
        with pytest.raises(ValueError):
            AppSettings()


class TestGoogleSheetsSettings:
    """Tests for Google Sheets settings."""

    def test_required_fields(self, no_sheets_env):
        """Test that missing settings are rejected."""
        with pytest.raises(ValueError):
            GoogleSheetsSettings()

    def test_missing_credentials_file_warns(self, monkeypatch, tmp_path):
        """Test the warning for a credentials path that doesn't exist yet."""
        monkeypatch.setenv("GOOGLE_SHEETS_CREDENTIALS_PATH", str(tmp_path / "missing.json"))
        monkeypatch.setenv("GOOGLE_SHEETS_SPREADSHEET_ID", "sheet-123")
        with pytest.warns(UserWarning):
            settings = GoogleSheetsSettings()
        assert settings.spreadsheet_id == "sheet-123"
        assert settings.expenses_sheet_name == "Expenses"
        assert settings.audit_sheet_name == "AuditLog"


class TestValidateAllSettings:
    """Tests for the startup check."""

    def test_reports_missing_sheets(self, no_sheets_env):
        results = validate_all_settings()
        assert results["google_sheets"] is False
        assert "google_sheets_error" in results
        assert results["app"] is True

    def test_all_configured(self, monkeypatch, tmp_path):
        credentials = tmp_path / "credentials.json"
        credentials.write_text("{}")
        monkeypatch.setenv("GOOGLE_SHEETS_CREDENTIALS_PATH", str(credentials))
        monkeypatch.setenv("GOOGLE_SHEETS_SPREADSHEET_ID", "sheet-123")
        results = validate_all_settings()
        assert results == {"google_sheets": True, "app": True}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
