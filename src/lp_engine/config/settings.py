"""Application settings using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="LP_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Runtime
    environment: str = "development"
    log_level: str = "INFO"

    # API
    api_host: str = "127.0.0.1"
    api_port: int = 8000
    api_workers: int = 1

    # --- Storage cache ---
    cache_root: str = "~/.lp-engine/storage"

    # --- Git backend ---
    git_executable: str = "git"
    clone_depth: int = 1
    commit_author_name: str = "LP-Engine"
    commit_author_email: str = "lp-engine@localhost"

    # --- Workspace sync ---
    sync_commit_message: str = "sync user workspace changes"
    # Workspace subdirectories never treated as packages (dot-directories are always skipped)
    reserved_dir_names: list[str] = Field(
        default_factory=lambda: [".obsidian", ".git", ".trash", "plugins"]
    )

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self.cache_root = str(Path(self.cache_root).expanduser())

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
