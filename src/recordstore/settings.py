from pathlib import Path
from typing import Literal, Optional, List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):

    # ---- Data roots ----
    project_root: Path = Path(".").resolve()
    data_root: Path = Path("data")

    # ---- Store files ----
    json_indent: Optional[int] = None  # None writes compact JSON

    # ---- app/runtime ----
    env: Literal["dev", "staging", "prod"] = "dev"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # ---- API server configuration ----
    api_host: str = "127.0.0.1"  # localhost for dev, 0.0.0.0 for docker/prod
    api_port: int = 8000
    api_reload: bool = True  # Auto-reload on code changes (dev only)
    api_workers: int = 1  # Stores are single-writer, keep one worker
    cors_origins: List[str] = ["*"]  # Allowed CORS origins (restrict in prod)

    model_config = SettingsConfigDict(
        env_file = ".env",
        env_prefix="APP_",      # APP_DATA_ROOT, APP_LOG_LEVEL, etc.
        env_nested_delimiter='__',
        extra = "ignore"
    )


def get_settings() -> Settings:
    """Accessor so callers do not build Settings by hand."""
    return Settings()
