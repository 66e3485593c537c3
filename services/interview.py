"""Interview orchestration: prompt construction, model calls and persistence."""
from __future__ import annotations

import logging
import sqlite3
from typing import Any, Dict, List, Optional, Sequence

import pydantic
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from config import (
    BEHAVIOURAL_QUESTION_KEY,
    CODE_COACHING_KEY,
    PERFORMANCE_REPORT_KEY,
    LlmRoute,
    TaskProfile,
    cached_config,
    resolve_task,
)
from config.settings import settings
from llm_gateway import (
    HttpClient,
    LlmReply,
    TokenBudget,
    default_budget,
    ensure_budget,
    ensure_check_available,
    invoke,
)
from observability import log_event, span
from prompt_builder import (
    PromptBundle,
    Scenario,
    TranscriptEntry,
    build_behavioural_question,
    build_code_coaching,
    build_performance_report,
)
from storage.code_checks import count_checks, record_check
from storage.responses import InterviewResponse, append_response, list_by_candidate

from .errors import NotFound, UpstreamError, ValidationError


logger = logging.getLogger(__name__)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TokenUsage(CamelModel):
    input: int
    output: int
    total: int


class BudgetedTokenUsage(TokenUsage):
    cumulative_total: int
    estimated_cost: str


class ResponseStats(CamelModel):
    total_responses: int = 0
    technical1_count: int = 0
    technical2_count: int = 0
    behavioural_count: int = 0
    total_time_spent: int = 0


class QuestionResult(CamelModel):
    response: str
    token_usage: BudgetedTokenUsage


class CoachingResult(CamelModel):
    feedback: str
    checks_remaining: int


class PerformanceAnalysis(CamelModel):
    feedback: str
    stats: ResponseStats
    token_usage: TokenUsage


def _task(key: str) -> tuple[LlmRoute, TaskProfile]:
    return resolve_task(cached_config(settings.CONFIG_PATH), key)


def _call(
    bundle: PromptBundle,
    key: str,
    *,
    subject: str,
    budget: TokenBudget,
    client: Optional[HttpClient],
) -> LlmReply:
    route, profile = _task(key)
    with span(key, subject, route=route.name):
        return invoke(
            bundle.system,
            bundle.user,
            profile.max_tokens,
            profile.temperature,
            cfg=route,
            client=client,
            budget=budget,
        )


def _usage(reply: LlmReply) -> TokenUsage:
    return TokenUsage(input=reply.input_tokens, output=reply.output_tokens, total=reply.total_tokens)


def generate_behavioural_question(
    scenario: Optional[Scenario],
    role: Optional[str],
    *,
    budget: TokenBudget = default_budget,
    client: Optional[HttpClient] = None,
) -> QuestionResult:
    """Ask the model for one probing question about a workplace scenario."""

    bundle = build_behavioural_question(scenario, role)
    ensure_budget(budget)
    reply = _call(bundle, BEHAVIOURAL_QUESTION_KEY, subject="-", budget=budget, client=client)
    cumulative = budget.used
    return QuestionResult(
        response=reply.text,
        token_usage=BudgetedTokenUsage(
            input=reply.input_tokens,
            output=reply.output_tokens,
            total=reply.total_tokens,
            cumulative_total=cumulative,
            estimated_cost=f"${cumulative * settings.COST_PER_TOKEN:.4f}",
        ),
    )


def coach_code(
    code: Optional[str],
    task_description: Optional[str],
    starter_code: Optional[str] = None,
    checks_used: Optional[int] = None,
    *,
    candidate_email: Optional[str] = None,
    task_id: Optional[str] = None,
    budget: TokenBudget = default_budget,
    client: Optional[HttpClient] = None,
) -> CoachingResult:
    """Review in-progress code with Socratic hints, bounded per task."""

    if not code or not task_description:
        raise ValidationError("Missing required fields")
    used = checks_used or 0
    tracked = bool(candidate_email and task_id)
    if tracked:
        used = max(used, _stored_checks(candidate_email, task_id))
    else:
        # Cap relies on the client counter alone here.
        logger.warning("Code check without candidateEmail/taskId; trusting client counter=%s", used)
    remaining = ensure_check_available(used)
    bundle = build_code_coaching(code, task_description, starter_code)
    subject = candidate_email or "-"
    reply = _call(bundle, CODE_COACHING_KEY, subject=subject, budget=budget, client=client)
    if tracked:
        try:
            record_check(candidate_email=candidate_email, task_id=task_id)
        except sqlite3.Error as exc:
            raise UpstreamError("Failed to record code check", details=str(exc)) from exc
    log_event("code_check", subject, count=used + 1, remaining=remaining)
    return CoachingResult(feedback=reply.text, checks_remaining=remaining)


def _stored_checks(candidate_email: str, task_id: str) -> int:
    try:
        return count_checks(candidate_email, task_id)
    except sqlite3.Error as exc:
        raise UpstreamError("Failed to read code checks", details=str(exc)) from exc


def record_response(**data: Any) -> int:
    """Validate and append one candidate response."""

    try:
        row_id = append_response(**data)
    except pydantic.ValidationError as exc:
        raise ValidationError("Invalid interview response", details=str(exc)) from exc
    except sqlite3.Error as exc:
        raise UpstreamError("Failed to store interview response", details=str(exc)) from exc
    log_event(
        "response_appended",
        str(data.get("candidate_email")),
        interview_type=data.get("interview_type"),
    )
    return row_id


def partition_responses(records: Sequence[InterviewResponse]) -> Dict[str, List[InterviewResponse]]:
    groups: Dict[str, List[InterviewResponse]] = {"technical1": [], "technical2": [], "behavioural": []}
    for record in records:
        groups.setdefault(record.interview_type, []).append(record)
    return groups


def compute_stats(records: Sequence[InterviewResponse]) -> ResponseStats:
    groups = partition_responses(records)
    return ResponseStats(
        total_responses=len(records),
        technical1_count=len(groups["technical1"]),
        technical2_count=len(groups["technical2"]),
        behavioural_count=len(groups["behavioural"]),
        total_time_spent=sum(record.time_spent_seconds or 0 for record in records),
    )


def _entries(records: Sequence[InterviewResponse]) -> List[TranscriptEntry]:
    return [
        TranscriptEntry(
            task_title=record.task_title,
            response=record.response,
            time_spent_seconds=record.time_spent_seconds,
            metadata=record.metadata,
        )
        for record in records
    ]


def load_responses(candidate_email: Optional[str]) -> List[InterviewResponse]:
    """Fetch a candidate's responses, treating an empty history as NotFound."""

    if not candidate_email or not candidate_email.strip():
        raise ValidationError("Candidate email is required")
    try:
        records = list_by_candidate(candidate_email)
    except sqlite3.Error as exc:
        raise UpstreamError("Failed to load interview responses", details=str(exc)) from exc
    if not records:
        raise NotFound("No interview responses found for this candidate")
    return records


def analyze_records(
    candidate_email: str,
    records: Sequence[InterviewResponse],
    *,
    budget: TokenBudget = default_budget,
    client: Optional[HttpClient] = None,
) -> PerformanceAnalysis:
    groups = partition_responses(records)
    bundle = build_performance_report(
        _entries(groups["technical1"]),
        _entries(groups["technical2"]),
        _entries(groups["behavioural"]),
    )
    reply = _call(bundle, PERFORMANCE_REPORT_KEY, subject=candidate_email, budget=budget, client=client)
    stats = compute_stats(records)
    log_event("performance_report", candidate_email, count=stats.total_responses, tokens=reply.total_tokens)
    return PerformanceAnalysis(feedback=reply.text, stats=stats, token_usage=_usage(reply))


def analyze_performance(
    candidate_email: Optional[str],
    *,
    budget: TokenBudget = default_budget,
    client: Optional[HttpClient] = None,
) -> PerformanceAnalysis:
    """Synthesize a holistic report from every stored response of a candidate."""

    records = load_responses(candidate_email)
    return analyze_records(str(candidate_email), records, budget=budget, client=client)


__all__ = [
    "BudgetedTokenUsage",
    "CoachingResult",
    "PerformanceAnalysis",
    "QuestionResult",
    "ResponseStats",
    "TokenUsage",
    "analyze_performance",
    "analyze_records",
    "coach_code",
    "compute_stats",
    "generate_behavioural_question",
    "load_responses",
    "partition_responses",
    "record_response",
]
