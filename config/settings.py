"""Application settings and configuration management."""
from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


PROJECT_ROOT = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    """Settings loaded from environment variables or defaults."""

    DB_PATH: str = Field(default="data/interview.db")
    CONFIG_PATH: str = Field(default=str(PROJECT_ROOT / "app_config.json"))

    TOKEN_BUDGET: int = Field(default=20000, ge=1)
    BUDGET_GUARD_RATIO: float = Field(default=0.9, gt=0.0, le=1.0)
    COST_PER_TOKEN: float = 0.00015
    MAX_CODE_CHECKS: int = Field(default=3, ge=1)

    ALLOWED_ORIGINS: str = "*"

    model_config = SettingsConfigDict(env_file=".env", validate_assignment=True, extra="ignore")


settings = Settings()
