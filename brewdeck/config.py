"""
Configuration module for brewdeck.
Uses pydantic-settings for environment variable management.
"""

from pathlib import Path
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_BREW_PATHS = [
    "/opt/homebrew/bin/brew",               # Apple Silicon
    "/usr/local/bin/brew",                  # Intel macOS
    "/home/linuxbrew/.linuxbrew/bin/brew",  # Linuxbrew
]

DEFAULT_FORMULA_CATALOG_URL = "https://formulae.brew.sh/api/formula.json"
DEFAULT_CASK_CATALOG_URL = "https://formulae.brew.sh/api/cask.json"
DEFAULT_HTTP_TIMEOUT = 60.0  # seconds


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="BREWDECK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Executable lookup, checked in order
    brew_paths: list[str] = list(DEFAULT_BREW_PATHS)

    # Remote catalogs
    formula_catalog_url: str = DEFAULT_FORMULA_CATALOG_URL
    cask_catalog_url: str = DEFAULT_CASK_CATALOG_URL
    http_timeout: float = DEFAULT_HTTP_TIMEOUT

    # Persisted inventory
    inventory_dir: str = "./data/inventory"

    # Incremental search
    filter_batch_size: int = 256

    # Server Configuration
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    log_level: str = "INFO"

    @property
    def inventory_path(self) -> Path:
        """Return the inventory directory as an absolute Path."""
        return Path(self.inventory_dir).resolve()


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
