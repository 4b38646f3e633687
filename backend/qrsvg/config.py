"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    qrsvg_env: str = "development"
    qrsvg_log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Conversion defaults (overridable per request)
    default_threshold: int = Field(default=127, ge=0, le=255)
    default_steps: int | None = None
    trim_image: bool = False
    sampling_workers: int = Field(default=1, ge=1)

    # Decoded upload ceiling
    max_image_bytes: int = 10 * 1024 * 1024

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
