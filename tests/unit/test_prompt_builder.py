import pytest

from prompt_builder import (
    Scenario,
    TranscriptEntry,
    build_behavioural_question,
    build_code_coaching,
    build_performance_report,
    build_report_transcript,
)
from services.errors import ValidationError


def _scenario() -> Scenario:
    return Scenario(
        id=1,
        title="Missed deadline",
        situation="A teammate quietly slipped a release date you promised to a client.",
    )


def test_behavioural_prompt_embeds_role_and_scenario() -> None:
    bundle = build_behavioural_question(_scenario(), "Senior Software Engineer")
    assert "Senior Software Engineer position" in bundle.system
    assert "ONE focused question" in bundle.system
    assert "20-30 words" in bundle.system
    assert "Do NOT repeat the scenario" in bundle.system
    assert bundle.system.endswith(
        'Scenario: "Missed deadline" - A teammate quietly slipped a release date you promised to a client.'
    )
    assert bundle.user.startswith("Generate ONE focused interview question")


@pytest.mark.parametrize(
    "scenario, role",
    [
        (None, "Engineer"),
        (Scenario(title="", situation="Something happened"), "Engineer"),
        (Scenario(title="Conflict", situation=None), "Engineer"),
        (Scenario(title="Conflict", situation="Something happened"), None),
        (Scenario(title="Conflict", situation="Something happened"), "   "),
    ],
)
def test_behavioural_prompt_requires_inputs(scenario, role) -> None:
    with pytest.raises(ValidationError):
        build_behavioural_question(scenario, role)


def test_code_coaching_prompt_sections() -> None:
    bundle = build_code_coaching("def add(a, b):\n    return a - b", "Fix the add function", "def add(a, b):\n    pass")
    assert "NEVER provide the complete solution" in bundle.system
    assert "3-5 sentences" in bundle.system
    assert "PROBLEM:\nFix the add function" in bundle.user
    assert "ORIGINAL CODE:\ndef add(a, b):\n    pass" in bundle.user
    assert "CANDIDATE'S CURRENT CODE:\ndef add(a, b):\n    return a - b" in bundle.user
    assert bundle.user.endswith("Please review their code and provide guidance.")


def test_code_coaching_prompt_tolerates_missing_starter() -> None:
    bundle = build_code_coaching("x = 1", "Assign x", None)
    assert "ORIGINAL CODE:\n\n" in bundle.user


def test_report_transcript_groups_sections() -> None:
    technical1 = [
        TranscriptEntry(task_title="Fix login bug", response="Patched the null check", time_spent_seconds=120,
                        metadata={"difficulty": "medium"}),
        TranscriptEntry(task_title="Refactor cache", response="Split the class", time_spent_seconds=90),
    ]
    behavioural = [
        TranscriptEntry(task_title="Missed deadline", response="I would talk to them first",
                        metadata={"question": "How would you raise it?"}),
    ]
    transcript = build_report_transcript(technical1, [], behavioural)

    assert transcript.startswith("INTERVIEW PERFORMANCE ANALYSIS")
    t1 = transcript.index("=== TECHNICAL ASSESSMENT 1 (Coding & Bug Fixes) ===")
    t2 = transcript.index("=== TECHNICAL ASSESSMENT 2 (Scenario Analysis & Decision Making) ===")
    bh = transcript.index("=== BEHAVIORAL ASSESSMENT (Workplace Scenarios) ===")
    assert t1 < t2 < bh

    technical_block = transcript[t1:t2]
    assert "Task: Fix login bug\nDifficulty: medium\nResponse:\nPatched the null check\nTime Spent: 120s" in technical_block
    assert "Difficulty: Unknown" in technical_block
    assert "\n---\n" in technical_block

    assert "No responses submitted" in transcript[t2:bh]

    behavioural_block = transcript[bh:]
    assert "Scenario: Missed deadline" in behavioural_block
    assert "Question Asked: How would you raise it?" in behavioural_block
    assert "Candidate Response:\nI would talk to them first" in behavioural_block


def test_report_prompt_requests_four_parts() -> None:
    bundle = build_performance_report([], [], [])
    for part in ("Overall assessment", "Key strengths", "Areas for improvement", "Recommended next steps"):
        assert part in bundle.system
    assert bundle.system.index("Overall assessment") < bundle.system.index("Recommended next steps")
    assert bundle.user.startswith("Please analyze this candidate's interview performance")
    assert bundle.user.count("No responses submitted") == 3
