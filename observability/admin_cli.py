"""Lightweight CLI helpers for inspecting stored interview data."""
from __future__ import annotations

import argparse
import sqlite3
from typing import List

from config.settings import settings


def tail_responses(limit: int = 20) -> List[str]:
    conn = sqlite3.connect(settings.DB_PATH)
    try:
        cursor = conn.cursor()
        cursor.execute(
            """
            SELECT created_at, candidate_email, interview_type, task_title, time_spent_seconds
            FROM interview_responses
            ORDER BY id DESC
            LIMIT ?
            """,
            (limit,),
        )
        lines = [
            f"[{ts}] {email} {interview_type}:{title} time={spent}s"
            for ts, email, interview_type, title, spent in cursor.fetchall()
        ]
    finally:
        conn.close()
    for line in lines:
        print(line)
    return lines


def tail_checks(limit: int = 20) -> List[str]:
    conn = sqlite3.connect(settings.DB_PATH)
    try:
        cursor = conn.cursor()
        cursor.execute(
            """
            SELECT candidate_email, task_id, COUNT(*), MAX(timestamp)
            FROM code_checks
            GROUP BY candidate_email, task_id
            ORDER BY MAX(id) DESC
            LIMIT ?
            """,
            (limit,),
        )
        lines = [
            f"[{last}] {email} task={task_id} checks={count}"
            for email, task_id, count, last in cursor.fetchall()
        ]
    finally:
        conn.close()
    for line in lines:
        print(line)
    return lines


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--tail-responses", type=int, help="Show the latest stored interview responses")
    parser.add_argument("--tail-checks", type=int, help="Show code check counts per candidate and task")
    args = parser.parse_args()

    if args.tail_responses:
        tail_responses(args.tail_responses)
    if args.tail_checks:
        tail_checks(args.tail_checks)


if __name__ == "__main__":
    main()
