"""Settings for the CLI and API, read from the environment and ``.env``."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Live analysis needs a key; simulation mode works without one
    anthropic_api_key: str = ""

    llm_model: str = "claude-sonnet-4-5-20250929"
    llm_max_tokens: int = Field(default=3500, ge=256)
    llm_temperature: float = Field(default=0.7, ge=0.0, le=1.0)
    # Extra attempts after the LLM returns an analysis that fails validation
    llm_max_retries: int = Field(default=1, ge=0)

    data_dir: Path = Path("./data")

    # Similar-case ranking
    similarity_min_score: int = Field(default=20, ge=0, le=100)
    similarity_top_n: int = Field(default=3, ge=1)
    similarity_candidate_limit: int = Field(default=50, ge=1)
    null_trend_matches_zero: bool = True

    history_limit: int = Field(default=10, ge=1, le=100)

    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"

    api_host: str = "127.0.0.1"
    api_port: int = 8000

    @property
    def db_path(self) -> Path:
        return self.data_dir / "growthcase.db"

    def ensure_data_dir(self) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
