"""Application settings loaded from environment variables."""

from __future__ import annotations

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All configuration is driven by environment variables."""

    # Command processor (the shell every command line is handed to)
    brew_processor_path: str = "/bin/sh"
    brew_processor_flag: Optional[str] = "-c"

    # Homebrew
    brew_executable: str = "/usr/local/bin/brew"

    # Output handling
    brew_read_chunk_size: int = Field(default=1024 * 1024, gt=0)
    brew_output_encoding: str = "utf-8"

    # API key
    brew_api_key: str = ""

    # Logging
    brew_log_level: str = "INFO"
    brew_log_json: bool = False

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


# Singleton – import this from anywhere
settings = Settings()
