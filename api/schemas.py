"""Pydantic schemas for the interview platform API."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from progress.tracker import StageCard
from prompt_builder import Scenario
from services.interview import CamelModel, CoachingResult, PerformanceAnalysis, QuestionResult


class AnalyzeReq(BaseModel):
    candidateEmail: Optional[str] = None


class BehaviouralReq(BaseModel):
    scenario: Optional[Scenario] = None
    role: Optional[str] = None


class CheckCodeReq(BaseModel):
    code: Optional[str] = None
    taskDescription: Optional[str] = None
    starterCode: Optional[str] = None
    checksUsed: Optional[int] = 0
    candidateEmail: Optional[str] = None
    taskId: Optional[str] = None


class ResponseReq(BaseModel):
    candidateEmail: Optional[str] = None
    interviewType: Optional[str] = None
    taskTitle: str = ""
    response: str = ""
    timeSpentSeconds: Optional[int] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


class ProgressReq(BaseModel):
    technical1_completed: Optional[str] = None
    technical2_completed: Optional[str] = None
    behavioural_progress: Optional[str] = None


class AnalyzeResp(PerformanceAnalysis):
    success: bool = True


class BehaviouralResp(QuestionResult):
    success: bool = True


class CheckCodeResp(CoachingResult):
    success: bool = True


class ResponseCreatedResp(BaseModel):
    success: bool = True
    id: int


class ProgressResp(CamelModel):
    completed: List[str] = Field(default_factory=list)
    completed_count: int = 0
    total_stages: int = 0
    percentage: float = 0.0
    stages: List[StageCard] = Field(default_factory=list)


class DbStatusResp(BaseModel):
    success: bool
    message: str
    database: Optional[str] = None
    error: Optional[str] = None
