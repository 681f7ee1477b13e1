"""Rule-based 30-point grading.

Attendance 10, weekly reports 15, supervisor approval 5. Each sub-score is
rounded half-up to 2 decimals before it is summed.
"""
from __future__ import annotations

from ..common.number_utils import round_half_up
from ..core.constants import (
    FAILING_GRADE,
    GRADE_THRESHOLDS,
    MAX_ATTENDANCE_SCORE,
    MAX_EXPECTED_ATTENDANCE_DAYS,
    MAX_SUPERVISOR_APPROVAL_SCORE,
    MAX_TOTAL_SCORE,
    MAX_WEEKLY_REPORTS_SCORE,
    MAX_WEEKS,
)


def score_to_grade(score: float) -> str:
    for threshold, letter in GRADE_THRESHOLDS:
        if score >= threshold:
            return letter
    return FAILING_GRADE


def attendance_score(checked_in_days: int) -> float:
    raw = checked_in_days / MAX_EXPECTED_ATTENDANCE_DAYS * MAX_ATTENDANCE_SCORE
    return round_half_up(min(MAX_ATTENDANCE_SCORE, max(raw, 0)))


def weekly_reports_score(submitted_weeks: int) -> float:
    raw = submitted_weeks / MAX_WEEKS * MAX_WEEKLY_REPORTS_SCORE
    return round_half_up(min(MAX_WEEKLY_REPORTS_SCORE, max(raw, 0)))


def supervisor_approval_score(approved_weeks: int, submitted_weeks: int) -> float:
    if submitted_weeks <= 0:
        return 0.0
    raw = approved_weeks / submitted_weeks * MAX_SUPERVISOR_APPROVAL_SCORE
    return round_half_up(min(MAX_SUPERVISOR_APPROVAL_SCORE, max(raw, 0)))


def total_score(attendance: float, weekly_reports: float, supervisor_approval: float) -> float:
    return round_half_up(min(MAX_TOTAL_SCORE, attendance + weekly_reports + supervisor_approval))
