"""Application configuration from environment variables."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    clipeditor_env: str = "development"
    clipeditor_log_level: str = "debug"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Project store (JSON file standing in for browser storage)
    projects_file: Path = Path(__file__).parent / "data" / "projects.json"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
