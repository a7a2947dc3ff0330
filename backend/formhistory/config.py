import logging
from pathlib import Path

from pydantic_settings import BaseSettings
from functools import lru_cache

_config_logger = logging.getLogger(__name__)

_BACKEND_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _BACKEND_DIR / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "Form History API"
    app_version: str = "0.1.0"
    app_env: str = "development"
    database_url: str = "sqlite:///./formhistory.db"
    cors_origins: list[str] = ["http://localhost:3020"]

    # Roles allowed to view, compare and restore
    version_access_roles: list[str] = ["admin", "doctor"]
    default_change_note: str = "Form updated"

    # Per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_sql: str = "WARNING"           # sqlalchemy.engine SQL queries
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error
    log_level_versioning: str = "INFO"       # snapshot writes, restorations

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }

    def model_post_init(self, __context: object) -> None:
        """Normalise role names so header matching is case-insensitive."""
        roles = [r.strip().lower() for r in self.version_access_roles if r.strip()]
        if not roles:
            _config_logger.warning(
                "version_access_roles is empty; version history endpoints will reject every caller"
            )
        object.__setattr__(self, "version_access_roles", roles)


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance — reads .env once."""
    return Settings()
