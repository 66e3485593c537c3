"""Stage completion derived from client-held progress markers.

Each stage UI writes its own marker into browser storage. The markers arrive
here as raw strings; anything that does not parse into the expected shape is
logged and the stage is reported as incomplete.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Set

from pydantic import BaseModel, Field

from observability import log_event


logger = logging.getLogger(__name__)

TECHNICAL = "technical"
BEHAVIOURAL = "behavioural"
SIMULATION = "simulation"


class StageInfo(BaseModel):  # Static description of an interview stage
    id: str
    title: str
    href: str
    duration: str
    tasks: int = 1


STAGES: List[StageInfo] = [
    StageInfo(
        id=TECHNICAL,
        title="Technical Assessment",
        href="/interview_environment/technical",
        duration="30 min",
    ),
    StageInfo(
        id=BEHAVIOURAL,
        title="Behavioural Assessment",
        href="/interview_environment/behavioural",
        duration="25 min",
    ),
    StageInfo(
        id=SIMULATION,
        title="Work Simulation",
        href="/interview_environment/technical2",
        duration="35 min",
    ),
]


class StageMarkers(BaseModel):  # Raw marker strings as stored by the client
    technical1_completed: Optional[str] = None
    technical2_completed: Optional[str] = None
    behavioural_progress: Optional[str] = None


class StageCard(StageInfo):
    completed: bool = False


class ProgressSnapshot(BaseModel):
    completed: List[str] = Field(default_factory=list)
    completed_count: int = 0
    total_stages: int = len(STAGES)
    percentage: float = 0.0
    stages: List[StageCard] = Field(default_factory=list)


# Absent marker, or one already reported as unparseable.
_UNSET = object()


def _parse(raw: Optional[str], marker: str) -> Any:
    if raw is None or raw == "":
        return _UNSET
    try:
        return json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Failed to parse %s marker", marker)
        log_event("progress_marker_invalid", "-", stage=marker)
        return _UNSET


def task_list_status(raw: Optional[str], marker: str) -> Optional[bool]:
    """Return whether a completed-task list is non-empty, or None when malformed."""

    parsed = _parse(raw, marker)
    if parsed is _UNSET:
        return None
    if not isinstance(parsed, list):
        logger.warning("Marker %s is not a list", marker)
        log_event("progress_marker_invalid", "-", stage=marker)
        return None
    return len(parsed) > 0


def scenario_map_status(raw: Optional[str], marker: str = "behavioural_progress") -> Optional[bool]:
    """Return whether any scenario is flagged completed, or None when malformed."""

    parsed = _parse(raw, marker)
    if parsed is _UNSET:
        return None
    if not isinstance(parsed, dict):
        logger.warning("Marker %s is not an object", marker)
        log_event("progress_marker_invalid", "-", stage=marker)
        return None
    return any(isinstance(entry, dict) and bool(entry.get("completed")) for entry in parsed.values())


def completed_stages(markers: StageMarkers) -> Set[str]:
    statuses: Dict[str, Optional[bool]] = {
        TECHNICAL: task_list_status(markers.technical1_completed, "technical1_completed"),
        SIMULATION: task_list_status(markers.technical2_completed, "technical2_completed"),
        BEHAVIOURAL: scenario_map_status(markers.behavioural_progress),
    }
    return {stage for stage, status in statuses.items() if status is True}


def completion_percentage(completed: Set[str]) -> float:
    return round(len(completed) / len(STAGES) * 100, 1)


def snapshot(markers: StageMarkers) -> ProgressSnapshot:
    completed = completed_stages(markers)
    return ProgressSnapshot(
        completed=[stage.id for stage in STAGES if stage.id in completed],
        completed_count=len(completed),
        total_stages=len(STAGES),
        percentage=completion_percentage(completed),
        stages=[StageCard(**stage.model_dump(), completed=stage.id in completed) for stage in STAGES],
    )


__all__ = [
    "BEHAVIOURAL",
    "SIMULATION",
    "STAGES",
    "TECHNICAL",
    "ProgressSnapshot",
    "StageCard",
    "StageInfo",
    "StageMarkers",
    "completed_stages",
    "completion_percentage",
    "scenario_map_status",
    "snapshot",
    "task_list_status",
]
