"""Configuration schema for LLM routing."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Dict, Tuple

from pydantic import BaseModel, Field


BEHAVIOURAL_QUESTION_KEY = "interview.behavioural_question"
CODE_COACHING_KEY = "interview.code_coaching"
PERFORMANCE_REPORT_KEY = "interview.performance_report"


class LlmRoute(BaseModel):  # LLM endpoint configuration
    name: str
    base_url: str
    endpoint: str = "/v1/messages"
    model: str
    timeout_s: float = Field(default=60.0, ge=0.1)
    api_key_env: str | None = "ANTHROPIC_API_KEY"
    api_key_header: str = "x-api-key"
    extra_headers: Dict[str, str] = Field(default_factory=dict)


class TaskProfile(BaseModel):  # Per-task generation parameters
    route: str
    max_tokens: int = Field(ge=1)
    temperature: float = Field(default=0.7, ge=0.0, le=1.0)


class AppConfig(BaseModel):  # Application configuration root
    llm_routes: Dict[str, LlmRoute]
    tasks: Dict[str, TaskProfile]


def load_config(path: Path) -> AppConfig:  # Load configuration from disk
    data = path.read_text(encoding="utf-8")
    return AppConfig.model_validate_json(data)


@lru_cache(maxsize=None)
def cached_config(path: str) -> AppConfig:  # Parse each config file once per process
    return load_config(Path(path))


def resolve_task(cfg: AppConfig, key: str) -> Tuple[LlmRoute, TaskProfile]:  # Look up route and profile for a task
    if key not in cfg.tasks:
        raise KeyError(f"Task entry missing for '{key}'")
    profile = cfg.tasks[key]
    if profile.route not in cfg.llm_routes:
        raise KeyError(f"Route '{profile.route}' missing for '{key}'")
    return cfg.llm_routes[profile.route], profile
