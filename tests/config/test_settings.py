"""Tests for Settings configuration helpers."""

from pathlib import Path

import pytest

from splitfetch.config.settings import (
    DEFAULT_CHUNK_SIZE,
    MAX_WORKERS,
    LogLevel,
    Settings,
    build_settings,
)


@pytest.fixture
def default_settings():
    """Provide default Settings for comparison."""
    return Settings()


class TestSettingsDefaults:
    def test_default_workers_bounded_by_cpu_count(self, mocker):
        mocker.patch("splitfetch.config.settings.os.cpu_count", return_value=6)
        assert Settings().workers == 6

    def test_default_workers_capped(self, mocker):
        mocker.patch("splitfetch.config.settings.os.cpu_count", return_value=512)
        assert Settings().workers == MAX_WORKERS

    def test_default_workers_when_cpu_count_unknown(self, mocker):
        mocker.patch("splitfetch.config.settings.os.cpu_count", return_value=None)
        assert Settings().workers == 1

    def test_other_defaults(self, default_settings):
        assert default_settings.save_dir == Path(".")
        assert default_settings.resume is True
        assert default_settings.chunk_size == DEFAULT_CHUNK_SIZE


class TestBuildSettings:
    """Test our build_settings helper logic."""

    def test_filters_none_values(self, default_settings):
        """build_settings ignores None overrides."""
        settings = build_settings(workers=None, log_level=LogLevel.DEBUG)

        assert settings.workers == default_settings.workers
        assert settings.log_level == LogLevel.DEBUG

    def test_applies_all_overrides(self, tmp_path):
        """build_settings applies all non-None overrides."""
        settings = build_settings(
            workers=10,
            log_level=LogLevel.ERROR,
            save_dir=tmp_path,
            resume=False,
        )

        assert settings.workers == 10
        assert settings.log_level == LogLevel.ERROR
        assert settings.save_dir == tmp_path
        assert settings.resume is False

    def test_unknown_override_rejected(self):
        with pytest.raises(TypeError):
            build_settings(max_retries=3)
