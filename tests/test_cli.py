"""Tests for CLI module."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from statekeeper.cli import app
from statekeeper.settings import get_settings
from statekeeper.storage.json_file import JsonFileStoreFactory

runner = CliRunner()


def seed(directory: Path) -> None:
    store = JsonFileStoreFactory(directory).create_store("window")
    store.set("width", 640)
    store.commit()


class TestStoresCommand:
    """Tests for the stores command."""

    def test_lists_records(self, temp_dir: Path) -> None:
        """Persisted keys are listed."""
        seed(temp_dir)
        result = runner.invoke(app, ["stores", "--dir", str(temp_dir)])
        assert result.exit_code == 0
        assert "Persisted Records (1)" in result.stdout
        assert "window" in result.stdout

    def test_empty_directory(self, temp_dir: Path) -> None:
        """An empty directory lists no records."""
        result = runner.invoke(app, ["stores", "--dir", str(temp_dir)])
        assert result.exit_code == 0
        assert "Persisted Records (0)" in result.stdout


class TestShowCommand:
    """Tests for the show command."""

    def test_show_record(self, temp_dir: Path) -> None:
        """Values of a record are shown."""
        seed(temp_dir)
        result = runner.invoke(app, ["show", "window", "--dir", str(temp_dir)])
        assert result.exit_code == 0
        assert "width" in result.stdout
        assert "640" in result.stdout

    def test_show_missing(self, temp_dir: Path) -> None:
        """Unknown keys exit with an error."""
        result = runner.invoke(app, ["show", "missing", "--dir", str(temp_dir)])
        assert result.exit_code == 1
        assert "No record" in result.stdout


class TestClearCommand:
    """Tests for the clear command."""

    def test_clear_record(self, temp_dir: Path) -> None:
        """A record is deleted."""
        seed(temp_dir)
        result = runner.invoke(app, ["clear", "window", "--dir", str(temp_dir)])
        assert result.exit_code == 0
        assert JsonFileStoreFactory(temp_dir).read("window") is None

    def test_clear_missing(self, temp_dir: Path) -> None:
        """Clearing an unknown key exits with an error."""
        result = runner.invoke(app, ["clear", "window", "--dir", str(temp_dir)])
        assert result.exit_code == 1


class TestVersionCommand:
    """Tests for the version command."""

    def test_version(self) -> None:
        """Show version information."""
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert "StateKeeper" in result.stdout
        assert "0.1" in result.stdout


class TestSettingsErrors:
    """Tests for invalid environment settings."""

    def test_invalid_backend_reported(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Commands without --dir report settings errors and exit."""
        monkeypatch.setenv("SK_STORE_BACKEND", "sqlite")
        get_settings.cache_clear()
        try:
            result = runner.invoke(app, ["stores"])
        finally:
            get_settings.cache_clear()

        assert result.exit_code == 1
        assert "Unknown store backend" in result.stdout
        assert "SK_STORE_BACKEND" in result.stdout
