from services.interview import PerformanceAnalysis, ResponseStats, TokenUsage
from session_reports import PerformanceReport, generate_performance_report_pdf
from storage.responses import InterviewResponse


def _report(feedback: str) -> PerformanceReport:
    responses = [
        InterviewResponse(
            id=1,
            candidate_email="ada@example.com",
            interview_type="technical1",
            task_title="Fix login bug",
            response="Added a null check",
            time_spent_seconds=125,
            created_at="2026-10-01T09:30:00+00:00",
        ),
        InterviewResponse(
            id=2,
            candidate_email="ada@example.com",
            interview_type="behavioural",
            task_title="Missed deadline",
            response="Talk first",
            time_spent_seconds=40,
            metadata={"question": "How would you raise it?"},
            created_at="2026-10-01T10:00:00Z",
        ),
    ]
    analysis = PerformanceAnalysis(
        feedback=feedback,
        stats=ResponseStats(
            total_responses=2,
            technical1_count=1,
            technical2_count=0,
            behavioural_count=1,
            total_time_spent=165,
        ),
        token_usage=TokenUsage(input=900, output=300, total=1200),
    )
    return PerformanceReport(
        candidate_email="ada@example.com",
        generated_at="2026-10-02T12:00:00+00:00",
        analysis=analysis,
        responses=responses,
    )


def test_pdf_is_generated():
    feedback = (
        "## Overall assessment\n"
        "The candidate’s debugging was **methodical**.\n\n"
        "## Key strengths\n"
        "- Clear reasoning\n"
        "* Calm under pressure\n"
    )
    payload = generate_performance_report_pdf(_report(feedback))
    assert isinstance(payload, bytes)
    assert payload.startswith(b"%PDF")
    assert len(payload) > 1000


def test_pdf_handles_long_feedback():
    feedback = "\n".join(f"- Observation number {index} about the candidate" for index in range(200))
    payload = generate_performance_report_pdf(_report(feedback))
    assert payload.startswith(b"%PDF")
