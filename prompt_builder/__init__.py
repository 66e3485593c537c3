from __future__ import annotations  # Re-export prompt_builder public API

from .prompt_builder import (
    PromptBundle,
    Scenario,
    TranscriptEntry,
    build_behavioural_question,
    build_code_coaching,
    build_performance_report,
    build_report_transcript,
)

__all__ = [
    "PromptBundle",
    "Scenario",
    "TranscriptEntry",
    "build_behavioural_question",
    "build_code_coaching",
    "build_performance_report",
    "build_report_transcript",
]
