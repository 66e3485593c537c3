import sys

from observability import admin_cli
from storage.code_checks import record_check
from storage.responses import append_response


def test_tail_helpers_print_latest_rows(capsys):
    append_response(
        candidate_email="ada@example.com",
        interview_type="technical2",
        task_title="Queue design",
        response="Use a bounded queue",
        time_spent_seconds=300,
    )
    record_check(candidate_email="ada@example.com", task_id="task-1")
    record_check(candidate_email="ada@example.com", task_id="task-1")

    responses = admin_cli.tail_responses(5)
    checks = admin_cli.tail_checks(5)

    assert len(responses) == 1
    assert "ada@example.com technical2:Queue design time=300s" in responses[0]
    assert checks[0].endswith("ada@example.com task=task-1 checks=2")
    out = capsys.readouterr().out
    assert "Queue design" in out


def test_main_dispatches_flags(monkeypatch, capsys):
    record_check(candidate_email="bob@example.com", task_id="task-9")
    monkeypatch.setattr(sys, "argv", ["admin_cli", "--tail-checks", "3"])
    admin_cli.main()
    assert "bob@example.com task=task-9 checks=1" in capsys.readouterr().out
