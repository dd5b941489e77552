from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Central configuration loaded from environment / .env file."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    # Revision (explicit value wins over the file, the file over git)
    revision: str = ""
    revision_file: str = "REVISION"
    revision_dir: str = "."  # where `git rev-parse` runs

    # Check execution
    check_timeout_seconds: float = 5.0  # 0 disables the timeout, checks run inline
    check_workers: int = 8

    # Check definitions + error message overrides (YAML)
    checks_file: str = "checks.yaml"
    error_messages_file: str = ""

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    status_path: str = "/status"

    # Logging
    log_level: str = "INFO"


settings = Settings()
