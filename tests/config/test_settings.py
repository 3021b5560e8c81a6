"""Tests for configuration"""
from pathlib import Path

from bookmarker.config.outline_limits import (
    EMIT_DEFAULT_PAGE,
    FIRST_PAGE,
    SORT_DEFAULT_PAGE,
    UNTITLED_TITLE,
)
from bookmarker.config.settings import Settings


class TestOutlineLimits:
    def test_constants_are_defined(self):
        assert UNTITLED_TITLE == "Untitled"
        assert FIRST_PAGE == 1
        assert SORT_DEFAULT_PAGE == 0
        assert EMIT_DEFAULT_PAGE == 1


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("UPLOAD_DIR", "KEEP_AFTER_PROCESS", "UPLOAD_TTL_HOURS", "PORT", "CORS_ORIGINS"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings.from_env()
        assert settings.upload_dir == Path("uploads")
        assert settings.keep_after_process is False
        assert settings.upload_ttl_hours == 6
        assert settings.upload_ttl_seconds == 6 * 3600
        assert settings.port == 4000
        assert settings.cors_origins == ["*"]

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("UPLOAD_DIR", "/data/uploads")
        monkeypatch.setenv("KEEP_AFTER_PROCESS", "true")
        monkeypatch.setenv("UPLOAD_TTL_HOURS", "2")
        monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test")
        settings = Settings.from_env()
        assert settings.upload_dir == Path("/data/uploads")
        assert settings.keep_after_process is True
        assert settings.upload_ttl_hours == 2
        assert settings.cors_origins == ["http://a.test", "http://b.test"]

    def test_malformed_numbers_fall_back(self, monkeypatch):
        monkeypatch.setenv("UPLOAD_TTL_HOURS", "soon")
        monkeypatch.setenv("PORT", "")
        settings = Settings.from_env()
        assert settings.upload_ttl_hours == 6
        assert settings.port == 4000

    def test_keep_after_process_only_for_true(self, monkeypatch):
        monkeypatch.setenv("KEEP_AFTER_PROCESS", "yes")
        assert Settings.from_env().keep_after_process is False
