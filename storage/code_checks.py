"""Server-side tally of code coaching checks per candidate and task."""
from __future__ import annotations

import datetime as dt
from typing import Any

from pydantic import BaseModel, Field

from .sqlite import get_conn


class CodeCheckPayload(BaseModel):
    candidate_email: str = Field(min_length=1)
    task_id: str = Field(min_length=1)


def count_checks(candidate_email: str, task_id: str) -> int:
    """Return how many checks were recorded for the candidate on this task."""

    with get_conn() as conn:
        row = conn.execute(
            "SELECT COUNT(*) FROM code_checks WHERE candidate_email = ? AND task_id = ?",
            (candidate_email, task_id),
        ).fetchone()
    return int(row[0])


def record_check(**data: Any) -> int:
    """Insert a code check row and return its primary key."""

    payload = CodeCheckPayload(**data)
    timestamp = dt.datetime.now(dt.timezone.utc).isoformat()
    with get_conn() as conn:
        cur = conn.cursor()
        cur.execute(
            "INSERT INTO code_checks (timestamp, candidate_email, task_id) VALUES (?, ?, ?)",
            (timestamp, payload.candidate_email, payload.task_id),
        )
        return int(cur.lastrowid)


__all__ = ["count_checks", "record_check"]
