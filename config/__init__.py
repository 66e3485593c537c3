"""Configuration package for interview platform services."""
from .routes import (
    BEHAVIOURAL_QUESTION_KEY,
    CODE_COACHING_KEY,
    PERFORMANCE_REPORT_KEY,
    AppConfig,
    LlmRoute,
    TaskProfile,
    cached_config,
    load_config,
    resolve_task,
)
from .settings import Settings, settings

__all__ = [
    "BEHAVIOURAL_QUESTION_KEY",
    "CODE_COACHING_KEY",
    "PERFORMANCE_REPORT_KEY",
    "AppConfig",
    "LlmRoute",
    "TaskProfile",
    "cached_config",
    "load_config",
    "resolve_task",
    "Settings",
    "settings",
]
