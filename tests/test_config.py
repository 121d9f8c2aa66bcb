"""Tests for settings loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from distserve.config import DEFAULT_DIST_DIR, DEFAULT_SITE_ADDR, Settings, get_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SITE_ADDR", raising=False)
    monkeypatch.delenv("DIST_DIR", raising=False)


class TestSettings:
    """Environment handling for the two server settings."""

    def test_defaults(self) -> None:
        """Unset variables fall back to the development defaults."""
        settings = Settings(_env_file=None)

        assert settings.site_addr == DEFAULT_SITE_ADDR == "127.0.0.1:3000"
        assert settings.dist_dir == DEFAULT_DIST_DIR
        assert settings.dist_dir.parts[-2:] == ("frontend", "dist")
        assert settings.uses_default_dist_dir

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """SITE_ADDR and DIST_DIR override the defaults."""
        monkeypatch.setenv("SITE_ADDR", "0.0.0.0:8080")
        monkeypatch.setenv("DIST_DIR", str(tmp_path))

        settings = Settings(_env_file=None)

        assert settings.site_addr == "0.0.0.0:8080"
        assert settings.dist_dir == tmp_path
        assert not settings.uses_default_dist_dir

    def test_empty_values_use_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """An empty variable counts as unset."""
        monkeypatch.setenv("SITE_ADDR", "")
        monkeypatch.setenv("DIST_DIR", "")

        settings = Settings(_env_file=None)

        assert settings.site_addr == DEFAULT_SITE_ADDR
        assert settings.dist_dir == DEFAULT_DIST_DIR

    def test_values_are_independent(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Setting one variable leaves the other at its default."""
        monkeypatch.setenv("SITE_ADDR", "localhost:9000")

        settings = Settings(_env_file=None)

        assert settings.site_addr == "localhost:9000"
        assert settings.dist_dir == DEFAULT_DIST_DIR

    def test_no_validation_of_values(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Bad addresses and missing directories are accepted at load time."""
        monkeypatch.setenv("SITE_ADDR", "not an address")
        monkeypatch.setenv("DIST_DIR", "/does/not/exist")

        settings = Settings(_env_file=None)

        assert settings.site_addr == "not an address"
        assert settings.dist_dir == Path("/does/not/exist")

    def test_settings_are_immutable(self) -> None:
        """Settings cannot change after startup."""
        settings = Settings(_env_file=None)

        with pytest.raises(ValidationError):
            settings.site_addr = "127.0.0.1:1"

    def test_get_settings_is_cached(self) -> None:
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()
