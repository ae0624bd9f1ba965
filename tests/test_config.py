"""
Tests for settings and logging configuration
"""

import logging

import pytest
from pydantic import ValidationError

from config import Settings, configure_logging, get_settings
from core.enums import InterpolationQuality


class TestSettings:
    """Test settings defaults and environment overrides"""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("IMAGEOPS_IMAGE__DEFAULT_QUALITY", raising=False)
        settings = Settings()

        assert settings.image.default_quality == InterpolationQuality.HIGH
        assert settings.image.thumbnail_size == 100
        assert settings.system.log_level == "INFO"

    def test_env_override(self, monkeypatch):
        """Nested sections are read with a double underscore"""
        monkeypatch.setenv("IMAGEOPS_IMAGE__DEFAULT_QUALITY", "bilinear")
        monkeypatch.setenv("IMAGEOPS_IMAGE__THUMBNAIL_SIZE", "64")

        settings = Settings()

        assert settings.image.default_quality == InterpolationQuality.BILINEAR
        assert settings.image.thumbnail_size == 64

    def test_log_level_normalized(self):
        assert Settings(system={"log_level": "debug"}).system.log_level == "DEBUG"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"system": {"log_level": "verbose"}},
            {"image": {"default_quality": "ultra"}},
            {"image": {"thumbnail_size": 0}},
        ],
    )
    def test_invalid_values(self, overrides):
        with pytest.raises(ValidationError):
            Settings(**overrides)

    def test_to_dict(self):
        data = Settings(image={"default_quality": 0}).to_dict()

        assert data["image"]["default_quality"] == "nearest"
        assert data["system"]["log_level"] == "INFO"

    def test_get_settings_cached(self):
        assert get_settings() is get_settings()


def test_configure_logging(monkeypatch):
    """configure_logging passes the configured level to basicConfig"""
    calls = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.update(kwargs))

    configure_logging(Settings(system={"log_level": "warning"}))

    assert calls["level"] == logging.WARNING
    assert "%(name)s" in calls["format"]
