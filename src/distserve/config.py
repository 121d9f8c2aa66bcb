"""distserve configuration management."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Project checkout root (src/distserve/config.py -> project root)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

DEFAULT_SITE_ADDR = "127.0.0.1:3000"
DEFAULT_DIST_DIR = PROJECT_ROOT / "frontend" / "dist"


class Settings(BaseSettings):
    """Server settings loaded from environment.

    Read once at startup and handed to the app factory. Neither value is
    validated here: a bad address fails at bind time, a missing directory
    makes every asset request 404.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
    )

    # Listener - "host:port"
    site_addr: str = DEFAULT_SITE_ADDR

    # Built frontend bundle. The default only makes sense in a source checkout.
    dist_dir: Path = DEFAULT_DIST_DIR

    @property
    def uses_default_dist_dir(self) -> bool:
        """True when DIST_DIR was not supplied by the environment."""
        return "dist_dir" not in self.model_fields_set


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
