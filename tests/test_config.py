"""
Tests for configuration loading.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from tutorschedule.config import AppConfig, GridConfig
from tutorschedule.domain.timegrid import DayWindow


class TestGridConfig:
    """Tests for GridConfig validation."""

    def test_defaults(self):
        """Test the default 08:00 - 22:00 half-hour grid."""
        assert GridConfig().to_day_window() == DayWindow(start_hour=8, end_hour=22, interval_minutes=30)

    def test_invalid_hour(self):
        """Test that hours must lie within a day."""
        with pytest.raises(ValidationError):
            GridConfig(start_hour=25)

    def test_window_order(self):
        """Test that the window must open before it closes."""
        with pytest.raises(ValidationError, match="end_hour"):
            GridConfig(start_hour=18, end_hour=9)

    def test_interval_must_divide_hour(self):
        """Test that slots must tile an hour."""
        with pytest.raises(ValidationError):
            GridConfig(interval_minutes=45)


class TestAppConfig:
    """Tests for AppConfig loading."""

    def test_load_from_yaml(self, tmp_path: Path):
        """Test loading a full config file."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text(
            "grid:\n"
            "  start_hour: 9\n"
            "  end_hour: 20\n"
            "timezone: Europe/Berlin\n"
            "data_file: data/lessons.json\n"
            "log_level: info\n",
            encoding="utf-8",
        )

        config = AppConfig.load_from_yaml(config_path)

        assert config.grid.start_hour == 9
        assert config.grid.end_hour == 20
        assert config.timezone == "Europe/Berlin"
        assert config.log_level == "INFO"
        assert config.data_file == tmp_path / "data" / "lessons.json"

    def test_empty_file_uses_defaults(self, tmp_path: Path):
        """Test that an empty file yields the default config."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text("", encoding="utf-8")

        config = AppConfig.load_from_yaml(config_path)

        assert config.grid == GridConfig()
        assert config.data_file == tmp_path / "schedule.json"

    def test_missing_file(self, tmp_path: Path):
        """Test that an explicit missing file is an error."""
        with pytest.raises(FileNotFoundError):
            AppConfig.load_from_yaml(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path: Path):
        """Test that broken YAML is reported as a value error."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text("grid: [unclosed", encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid YAML"):
            AppConfig.load_from_yaml(config_path)

    def test_non_mapping_root(self, tmp_path: Path):
        """Test that the root must be a mapping."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ValueError, match="mapping"):
            AppConfig.load_from_yaml(config_path)

    def test_invalid_log_level(self):
        """Test that unknown log levels are rejected."""
        with pytest.raises(ValidationError):
            AppConfig(log_level="chatty")

    def test_load_without_file_uses_defaults(self, tmp_path: Path, monkeypatch):
        """Test that no config file at all falls back to defaults."""
        monkeypatch.setattr("tutorschedule.config.get_default_config_path", lambda: tmp_path / "config.yaml")

        config = AppConfig.load()

        assert config == AppConfig()
