from __future__ import annotations  # Prompt construction for the interview LLM tasks

from textwrap import dedent
from typing import Any, Mapping, Optional, Sequence

from pydantic import BaseModel, Field

from services.errors import ValidationError


NO_RESPONSES = "No responses submitted"
ENTRY_SEPARATOR = "\n---\n"


class PromptBundle(BaseModel):  # System prompt plus the single user turn
    system: str
    user: str


class Scenario(BaseModel):  # Behavioural scenario shown to the candidate
    id: Optional[Any] = None
    title: Optional[str] = None
    situation: Optional[str] = None


class TranscriptEntry(BaseModel):  # One stored response as seen by the report prompt
    task_title: str = ""
    response: str = ""
    time_spent_seconds: int = 0
    metadata: Mapping[str, Any] = Field(default_factory=dict)


_BEHAVIOURAL_SYSTEM = dedent(
    """
    You are a concise technical interviewer evaluating candidates for a {role} position.
    Your job is to ask ONE focused question for each behavioral scenario presented to you.

    Guidelines:
    - Keep the question short (1-2 sentences max, about 20-30 words)
    - Ask a specific, probing question that tests their decision-making, communication, or integrity
    - Be direct and professional
    - Do NOT repeat the scenario back to them
    - The question should make them think deeply about their approach
    """
).strip()

_BEHAVIOURAL_USER = (
    "Generate ONE focused interview question for this scenario. The question should probe how "
    "the candidate would handle this situation, focusing on their decision-making process and values."
)

_COACHING_SYSTEM = dedent(
    """
    You are an experienced technical interviewer conducting a live coding interview.

    Your role is to:
    1. Check for syntax errors (if any)
    2. Analyze if the candidate is on the right track to solving the problem
    3. Provide helpful guidance like a real interviewer would - be encouraging but don't give away the answer
    4. If there are issues, give subtle hints that guide them in the right direction
    5. If they're doing well, acknowledge it and nudge them to consider edge cases or improvements

    IMPORTANT GUIDELINES:
    - NEVER provide the complete solution or fix the code directly
    - Use questions to make them think ("Have you considered...?", "What happens when...?")
    - Be supportive and encouraging (this is a real interview)
    - If there are syntax errors, point them out specifically
    - If the logic is flawed, ask guiding questions
    - Keep your response concise (3-5 sentences max)
    - Use a conversational, friendly tone like you're screen-sharing with them

    Respond as if you're speaking directly to the candidate during a live interview session.
    """
).strip()

_REPORT_SYSTEM = dedent(
    """
    You are a senior engineering manager providing constructive feedback after a comprehensive technical interview.

    Your task is to analyze the candidate's performance across all three interview sections and provide:
    1. Overall assessment (1-2 sentences)
    2. Key strengths (2-3 bullet points)
    3. Areas for improvement (2-3 bullet points with specific, actionable advice)
    4. Recommended next steps for their development

    Be:
    - Constructive and encouraging
    - Specific (reference actual responses when possible)
    - Actionable (give concrete steps they can take)
    - Balanced (acknowledge strengths even when pointing out weaknesses)
    - Professional and supportive

    Format your response in clear sections with markdown formatting, in the order listed above.
    """
).strip()


def _require(value: Any, name: str) -> str:
    text = "" if value is None else str(value).strip()
    if not text:
        raise ValidationError(f"{name} is required")
    return text


def build_behavioural_question(scenario: Optional[Scenario], role: Optional[str]) -> PromptBundle:
    """Prompt asking for one probing question about ``scenario``."""

    if scenario is None:
        raise ValidationError("scenario is required")
    title = _require(scenario.title, "scenario.title")
    situation = _require(scenario.situation, "scenario.situation")
    role_text = _require(role, "role")
    system = _BEHAVIOURAL_SYSTEM.format(role=role_text) + f'\n\nScenario: "{title}" - {situation}'
    return PromptBundle(system=system, user=_BEHAVIOURAL_USER)


def build_code_coaching(code: str, task_description: str, starter_code: Optional[str]) -> PromptBundle:
    """Prompt for a Socratic review of the candidate's current code."""

    user = "\n".join(
        [
            "The candidate is working on the following problem:",
            "",
            "PROBLEM:",
            task_description,
            "",
            "ORIGINAL CODE:",
            starter_code or "",
            "",
            "CANDIDATE'S CURRENT CODE:",
            code,
            "",
            "Please review their code and provide guidance.",
        ]
    )
    return PromptBundle(system=_COACHING_SYSTEM, user=user)


def _technical_entry(entry: TranscriptEntry) -> str:
    difficulty = entry.metadata.get("difficulty") or "Unknown"
    return "\n".join(
        [
            f"Task: {entry.task_title}",
            f"Difficulty: {difficulty}",
            "Response:",
            entry.response,
            f"Time Spent: {entry.time_spent_seconds}s",
        ]
    )


def _behavioural_entry(entry: TranscriptEntry) -> str:
    question = entry.metadata.get("question") or "N/A"
    return "\n".join(
        [
            f"Scenario: {entry.task_title}",
            f"Question Asked: {question}",
            "Candidate Response:",
            entry.response,
        ]
    )


def _section(header: str, body: str) -> str:
    return f"=== {header} ===\n{body or NO_RESPONSES}"


def build_report_transcript(
    technical1: Sequence[TranscriptEntry],
    technical2: Sequence[TranscriptEntry],
    behavioural: Sequence[TranscriptEntry],
) -> str:
    sections = [
        "INTERVIEW PERFORMANCE ANALYSIS",
        _section(
            "TECHNICAL ASSESSMENT 1 (Coding & Bug Fixes)",
            ENTRY_SEPARATOR.join(_technical_entry(entry) for entry in technical1),
        ),
        _section(
            "TECHNICAL ASSESSMENT 2 (Scenario Analysis & Decision Making)",
            ENTRY_SEPARATOR.join(_technical_entry(entry) for entry in technical2),
        ),
        _section(
            "BEHAVIORAL ASSESSMENT (Workplace Scenarios)",
            ENTRY_SEPARATOR.join(_behavioural_entry(entry) for entry in behavioural),
        ),
    ]
    return "\n\n".join(sections)


def build_performance_report(
    technical1: Sequence[TranscriptEntry],
    technical2: Sequence[TranscriptEntry],
    behavioural: Sequence[TranscriptEntry],
) -> PromptBundle:
    """Prompt synthesizing a four-part report from the full response history."""

    transcript = build_report_transcript(technical1, technical2, behavioural)
    user = (
        "Please analyze this candidate's interview performance and provide detailed feedback:\n\n"
        + transcript
    )
    return PromptBundle(system=_REPORT_SYSTEM, user=user)
