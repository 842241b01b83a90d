"""Runtime settings and environment loading utilities."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENV_PATH = Path(".env")


class _Settings(BaseSettings):
    """Settings loaded from environment variables or .env files."""

    model_config = SettingsConfigDict(
        env_file=_ENV_PATH, env_file_encoding="utf-8", case_sensitive=False, populate_by_name=True
    )

    # Local stores
    data_dir: Path = Field(default=Path.home() / ".local" / "share" / "tome", alias="TOME_DATA_DIR")

    # Account sync (optional; unset token means "not signed in")
    account_url: str = Field(default="http://localhost:3000", alias="TOME_ACCOUNT_URL")
    account_token: SecretStr | None = Field(default=None, alias="TOME_ACCOUNT_TOKEN")
    account_timeout_seconds: float = Field(default=10.0, alias="TOME_ACCOUNT_TIMEOUT")

    log_level: str = Field(default="info", alias="TOME_LOG_LEVEL")
    log_file: Path | None = Field(default=None, alias="TOME_LOG_FILE")

    @property
    def async_store_dir(self) -> Path:
        """Directory backing the async local store."""
        return self.data_dir / "store"

    @property
    def legacy_store_dir(self) -> Path:
        """Directory holding legacy single-document stores."""
        return self.data_dir / "legacy"


@lru_cache(maxsize=1)
def get_settings() -> _Settings:
    """Return cached settings loaded from the environment."""
    return _Settings()
