"""Persistence helpers for candidate interview responses.

Records are append-only: there is no update or delete path, and reads return
every record for a candidate in creation order. Partitioning by interview type
is left to callers.
"""
from __future__ import annotations

import datetime as dt
import json
from typing import Any, Dict, List, Literal

from pydantic import BaseModel, Field

from .sqlite import get_conn


InterviewType = Literal["technical1", "technical2", "behavioural"]


class ResponsePayload(BaseModel):
    candidate_email: str = Field(min_length=1)
    interview_type: InterviewType
    task_title: str = ""
    response: str = ""
    time_spent_seconds: int = Field(default=0, ge=0)
    metadata: Dict[str, Any] = Field(default_factory=dict)


class InterviewResponse(ResponsePayload):
    id: int
    created_at: str


def append_response(**data: Any) -> int:
    """Insert one response record and return its primary key."""

    payload = ResponsePayload(**data)
    created_at = dt.datetime.now(dt.timezone.utc).isoformat()
    with get_conn() as conn:
        cur = conn.cursor()
        cur.execute(
            """INSERT INTO interview_responses
               (candidate_email, interview_type, task_title, response,
                time_spent_seconds, metadata, created_at)
               VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (
                payload.candidate_email,
                payload.interview_type,
                payload.task_title,
                payload.response,
                payload.time_spent_seconds,
                json.dumps(payload.metadata),
                created_at,
            ),
        )
        return int(cur.lastrowid)


def list_by_candidate(candidate_email: str) -> List[InterviewResponse]:
    """Return every response stored for ``candidate_email``, oldest first."""

    with get_conn() as conn:
        rows = conn.execute(
            """SELECT id, candidate_email, interview_type, task_title, response,
                      time_spent_seconds, metadata, created_at
               FROM interview_responses
               WHERE candidate_email = ?
               ORDER BY created_at ASC, id ASC""",
            (candidate_email,),
        ).fetchall()
    return [
        InterviewResponse(
            id=row["id"],
            candidate_email=row["candidate_email"],
            interview_type=row["interview_type"],
            task_title=row["task_title"],
            response=row["response"],
            time_spent_seconds=row["time_spent_seconds"] or 0,
            metadata=json.loads(row["metadata"]) if row["metadata"] else {},
            created_at=row["created_at"],
        )
        for row in rows
    ]


__all__ = ["InterviewType", "InterviewResponse", "ResponsePayload", "append_response", "list_by_candidate"]
