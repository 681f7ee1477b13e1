from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Optional

from ..assignments.resolver import AssignmentResolver
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import fmt_datetime, now_local
from ..common.number_utils import round_half_up
from ..common.validators import optional_text, require_number_in_range
from ..core.constants import (
    MAX_ATTENDANCE_SCORE,
    MAX_SUPERVISOR_APPROVAL_SCORE,
    MAX_TOTAL_SCORE,
    MAX_WEEKLY_REPORTS_SCORE,
)
from ..core.enums import Role, ScoreConfidence, SupervisorType, WeekStatus
from ..core.exceptions import AuthorizationError, DatastoreError, NotFoundError
from ..core.principal import Principal
from ..students.model import Student
from ..students.repository import StudentRepository
from ..weeks.repository import WeekRepository
from . import rules
from .model import Grade, GradeBreakdown
from .repository import GradeRepository

logger = logging.getLogger(__name__)


def _breakdown_block(attendance: float, weekly: float, approval: float, total: float) -> dict:
    return {
        "attendance": {"score": attendance, "max": MAX_ATTENDANCE_SCORE},
        "weekly_reports": {"score": weekly, "max": MAX_WEEKLY_REPORTS_SCORE},
        "supervisor_approval": {"score": approval, "max": MAX_SUPERVISOR_APPROVAL_SCORE},
        "total": {"score": total, "max": MAX_TOTAL_SCORE},
    }


def breakdown_payload(b: GradeBreakdown) -> dict:
    return {
        "attendance_score": b.attendance_score,
        "weekly_reports_score": b.weekly_reports_score,
        "supervisor_approval_score": b.supervisor_approval_score,
        "total_score": b.total_score,
        "grade": b.grade,
        "counts": {
            "attendance_days": b.attendance_days,
            "submitted_weeks": b.submitted_weeks,
            "approved_weeks": b.approved_weeks,
        },
        "score_confidence": b.score_confidence.value,
        "degraded_components": list(b.degraded_components),
        "breakdown": _breakdown_block(
            b.attendance_score, b.weekly_reports_score, b.supervisor_approval_score, b.total_score
        ),
    }


def grade_payload(g: Grade) -> dict:
    return {
        "id": g.grade_id,
        "student_id": g.student_id,
        "supervisor_id": g.supervisor_id,
        "attendance_score": g.attendance_score,
        "weekly_reports_score": g.weekly_reports_score,
        "supervisor_approval_score": g.supervisor_approval_score,
        "total_score": g.total_score,
        "grade": g.grade,
        "auto_calculated": g.auto_calculated,
        "score_confidence": g.score_confidence.value,
        "remarks": g.remarks,
        "created_at": fmt_datetime(g.created_at),
        "updated_at": fmt_datetime(g.updated_at),
        "breakdown": _breakdown_block(
            g.attendance_score, g.weekly_reports_score, g.supervisor_approval_score, g.total_score
        ),
    }


class GradingService:
    """Rule-based 30-point grading.

    Scores are computed from the attendance ledger and the logbook weeks.
    Submitting a grade also locks the student, in the same transaction.
    """

    def __init__(
        self,
        grades: GradeRepository,
        students: StudentRepository,
        attendance: AttendanceRepository,
        weeks: WeekRepository,
        resolver: AssignmentResolver,
        *,
        abort_on_degraded_read: bool = True,
        clock: Callable[[], datetime] = now_local,
    ):
        self._grades = grades
        self._students = students
        self._attendance = attendance
        self._weeks = weeks
        self._resolver = resolver
        self._abort_on_degraded = bool(abort_on_degraded_read)
        self._clock = clock

    # -------- Counting (each read degrades on its own) --------
    def _attendance_days(self, student_id: int) -> tuple[int, bool]:
        try:
            return self._attendance.count_checked_in_days(int(student_id)), False
        except DatastoreError:
            logger.exception("Attendance count failed for student %s", student_id)
            return 0, True

    def _week_counts(self, student_id: int) -> tuple[int, int, bool]:
        try:
            counts = self._weeks.count_by_status(int(student_id))
        except DatastoreError:
            logger.exception("Week count failed for student %s", student_id)
            return 0, 0, True
        submitted = sum(n for status, n in counts.items() if status.counts_as_submitted)
        return submitted, counts.get(WeekStatus.APPROVED, 0), False

    def calculate_attendance_score(self, student_id: int) -> float:
        days, _ = self._attendance_days(student_id)
        return rules.attendance_score(days)

    def calculate_weekly_reports_score(self, student_id: int) -> float:
        submitted, _, _ = self._week_counts(student_id)
        return rules.weekly_reports_score(submitted)

    def calculate_supervisor_approval_score(self, student_id: int) -> float:
        submitted, approved, _ = self._week_counts(student_id)
        return rules.supervisor_approval_score(approved, submitted)

    def calculate_grade_breakdown(
        self,
        student_id: int,
        *,
        weekly_reports_override: Optional[float] = None,
    ) -> GradeBreakdown:
        days, attendance_degraded = self._attendance_days(student_id)
        submitted, approved, weeks_degraded = self._week_counts(student_id)

        attendance = rules.attendance_score(days)
        weekly = rules.weekly_reports_score(submitted)
        approval = rules.supervisor_approval_score(approved, submitted)
        if weekly_reports_override is not None:
            weekly = weekly_reports_override

        total = rules.total_score(attendance, weekly, approval)

        degraded: list[str] = []
        if attendance_degraded:
            degraded.append("attendance")
        if weeks_degraded:
            degraded.extend(["weekly_reports", "supervisor_approval"])

        return GradeBreakdown(
            attendance_score=attendance,
            weekly_reports_score=weekly,
            supervisor_approval_score=approval,
            total_score=total,
            grade=rules.score_to_grade(total),
            attendance_days=days,
            submitted_weeks=submitted,
            approved_weeks=approved,
            score_confidence=ScoreConfidence.DEGRADED if degraded else ScoreConfidence.FULL,
            degraded_components=tuple(degraded),
        )

    # -------- Use cases --------
    def _authorize_grader(self, principal: Principal, student_id: int):
        supervisor = self._resolver.require_supervisor(principal, SupervisorType.SCHOOL)
        student = self._students.get_by_id(int(student_id))
        if not student:
            raise NotFoundError("Student not found")
        self._resolver.require_assignment(supervisor, student.student_id, SupervisorType.SCHOOL)
        return supervisor, student

    @staticmethod
    def _parse_override(value: Any) -> Optional[float]:
        if value is None or value == "":
            return None
        override = require_number_in_range(value, "Weekly reports override", 0, MAX_WEEKLY_REPORTS_SCORE)
        return round_half_up(override)

    def submit_grade(
        self,
        principal: Principal,
        student_id: int,
        *,
        weekly_reports_override: Any = None,
        remarks: Any = None,
        now: datetime | None = None,
    ) -> tuple[Grade, GradeBreakdown]:
        supervisor, student = self._authorize_grader(principal, student_id)
        override = self._parse_override(weekly_reports_override)

        breakdown = self.calculate_grade_breakdown(student.student_id, weekly_reports_override=override)
        if breakdown.degraded and self._abort_on_degraded:
            logger.warning(
                "Grade for student %s not saved, degraded components: %s",
                student.student_id,
                ", ".join(breakdown.degraded_components),
            )
            raise DatastoreError("Could not read all grading inputs. The grade was not saved, please retry.")

        grade = self._grades.save_and_lock(
            student_id=student.student_id,
            supervisor_id=supervisor.supervisor_id,
            breakdown=breakdown,
            auto_calculated=override is None,
            remarks=optional_text(remarks),
            at=now or self._clock(),
        )
        logger.info(
            "Supervisor %s graded student %s: %.2f (%s), student locked",
            supervisor.supervisor_id,
            student.student_id,
            grade.total_score,
            grade.grade,
        )
        return grade, breakdown

    def preview_grade(self, principal: Principal, student_id: int) -> GradeBreakdown:
        _, student = self._authorize_grader(principal, student_id)
        return self.calculate_grade_breakdown(student.student_id)

    def get_grade(self, principal: Principal, student_id: int) -> Optional[Grade]:
        student: Optional[Student] = self._students.get_by_id(int(student_id))
        if not student:
            raise NotFoundError("Student not found")

        is_self = principal.role is Role.STUDENT and student.user_id == principal.user_id
        if not is_self and not self._resolver.supervisor_for_user(principal.user_id, SupervisorType.SCHOOL):
            raise AuthorizationError("Unauthorized")

        return self._grades.get_latest_for_student(student.student_id)
