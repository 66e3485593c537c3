from __future__ import annotations  # Performance report domain models

from typing import List

from pydantic import BaseModel, Field

from services.interview import PerformanceAnalysis
from storage.responses import InterviewResponse


class PerformanceReport(BaseModel):  # Analysis plus the responses it was built from
    candidate_email: str
    generated_at: str
    analysis: PerformanceAnalysis
    responses: List[InterviewResponse] = Field(default_factory=list)


__all__ = ["PerformanceReport"]
