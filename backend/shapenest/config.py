"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    shapenest_env: str = "development"
    shapenest_log_level: str = "debug"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Editor
    canvas_width: float = 640.0
    canvas_height: float = 480.0
    circle_points: int = 100
    detect_collinear_overlap: bool = True

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
