"""FastAPI routes for the interview platform."""
from __future__ import annotations

import logging
import re
import sqlite3
from datetime import datetime, timezone

from fastapi import APIRouter, Response
from fastapi.responses import JSONResponse

from api.schemas import (
    AnalyzeReq,
    AnalyzeResp,
    BehaviouralReq,
    BehaviouralResp,
    CheckCodeReq,
    CheckCodeResp,
    DbStatusResp,
    ProgressReq,
    ProgressResp,
    ResponseCreatedResp,
    ResponseReq,
)
from progress import StageMarkers, snapshot
from services.errors import InterviewError, UpstreamError
from services.interview import (
    analyze_performance,
    analyze_records,
    coach_code,
    generate_behavioural_question,
    load_responses,
    record_response,
)
from session_reports import PerformanceReport, generate_performance_report_pdf
from storage.sqlite import ping


logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/analyze-performance", response_model=AnalyzeResp)
def analyze(req: AnalyzeReq) -> AnalyzeResp:
    try:
        analysis = analyze_performance(req.candidateEmail)
    except InterviewError:
        raise
    except Exception as exc:  # noqa: BLE001
        logger.exception("Unexpected error during performance analysis")
        raise UpstreamError("Failed to analyze performance", details=str(exc)) from exc
    return AnalyzeResp(**analysis.model_dump())


@router.post("/analyze-performance/pdf")
def analyze_pdf(req: AnalyzeReq) -> Response:
    try:
        records = load_responses(req.candidateEmail)
        email = str(req.candidateEmail)
        analysis = analyze_records(email, records)
        report = PerformanceReport(
            candidate_email=email,
            generated_at=datetime.now(timezone.utc).isoformat(),
            analysis=analysis,
            responses=records,
        )
        payload = generate_performance_report_pdf(report)
    except InterviewError:
        raise
    except Exception as exc:  # noqa: BLE001
        logger.exception("Unexpected error while rendering performance report")
        raise UpstreamError("Failed to render performance report", details=str(exc)) from exc
    filename = f"{_safe_slug(email) or 'candidate'}-performance-report.pdf"
    headers = {"Content-Disposition": f"attachment; filename=\"{filename}\""}
    return Response(content=payload, media_type="application/pdf", headers=headers)


@router.post("/behavioral-ai", response_model=BehaviouralResp)
def behavioural_question(req: BehaviouralReq) -> BehaviouralResp:
    try:
        result = generate_behavioural_question(req.scenario, req.role)
    except InterviewError:
        raise
    except Exception as exc:  # noqa: BLE001
        logger.exception("Unexpected error during question generation")
        raise UpstreamError("Failed to generate AI response", details=str(exc)) from exc
    return BehaviouralResp(**result.model_dump())


@router.post("/check-code", response_model=CheckCodeResp)
def check_code(req: CheckCodeReq) -> CheckCodeResp:
    try:
        result = coach_code(
            req.code,
            req.taskDescription,
            req.starterCode,
            req.checksUsed,
            candidate_email=req.candidateEmail,
            task_id=req.taskId,
        )
    except InterviewError:
        raise
    except Exception as exc:  # noqa: BLE001
        logger.exception("Unexpected error during code check")
        raise UpstreamError("Failed to check code", details=str(exc)) from exc
    return CheckCodeResp(**result.model_dump())


@router.post("/responses", response_model=ResponseCreatedResp, status_code=201)
def create_response(req: ResponseReq) -> ResponseCreatedResp:
    row_id = record_response(
        candidate_email=req.candidateEmail,
        interview_type=req.interviewType,
        task_title=req.taskTitle,
        response=req.response,
        time_spent_seconds=req.timeSpentSeconds or 0,
        metadata=req.metadata,
    )
    return ResponseCreatedResp(id=row_id)


@router.post("/progress", response_model=ProgressResp)
def stage_progress(req: ProgressReq) -> ProgressResp:
    markers = StageMarkers(**req.model_dump())
    return ProgressResp(**snapshot(markers).model_dump())


@router.get("/test-db", response_model=DbStatusResp)
def db_status() -> DbStatusResp | JSONResponse:
    try:
        database = ping()
    except (sqlite3.Error, OSError) as exc:
        logger.error("Database check failed: %s", exc)
        failure = DbStatusResp(success=False, message="Database connection failed", error=str(exc))
        return JSONResponse(status_code=500, content=failure.model_dump())
    return DbStatusResp(success=True, message="Database connected successfully!", database=database)


def _safe_slug(value: str) -> str:  # Sanitize value for filenames
    if not value:
        return ""
    lowered = value.lower()
    slug = re.sub(r"[^a-z0-9]+", "-", lowered)
    slug = re.sub(r"-+", "-", slug).strip("-")
    return slug
