from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import ScoreConfidence


@dataclass(frozen=True)
class GradeBreakdown:
    """Computed 30-point score, plus the raw counts it came from."""

    attendance_score: float
    weekly_reports_score: float
    supervisor_approval_score: float
    total_score: float
    grade: str
    attendance_days: int
    submitted_weeks: int
    approved_weeks: int
    score_confidence: ScoreConfidence = ScoreConfidence.FULL
    degraded_components: tuple[str, ...] = ()

    @property
    def degraded(self) -> bool:
        return self.score_confidence is ScoreConfidence.DEGRADED


@dataclass(frozen=True)
class Grade:
    """Stored grade, one per (student, supervisor)."""

    grade_id: int
    student_id: int
    supervisor_id: int
    attendance_score: float
    weekly_reports_score: float
    supervisor_approval_score: float
    total_score: float
    grade: str
    auto_calculated: bool
    score_confidence: ScoreConfidence = ScoreConfidence.FULL
    remarks: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
