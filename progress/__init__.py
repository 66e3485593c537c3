from __future__ import annotations  # Progress tracker package exports

from .tracker import (
    STAGES,
    ProgressSnapshot,
    StageMarkers,
    completed_stages,
    completion_percentage,
    snapshot,
)

__all__ = [
    "STAGES",
    "ProgressSnapshot",
    "StageMarkers",
    "completed_stages",
    "completion_percentage",
    "snapshot",
]
