from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..core.enums import ScoreConfidence
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Grade, GradeBreakdown
from .repository import GradeRepository

_COLUMNS = """
    grade_id, student_id, supervisor_id, attendance_score, weekly_reports_score,
    supervisor_approval_score, total_score, grade, auto_calculated, score_confidence,
    remarks, created_at, updated_at
"""


def _row_to_grade(r: dict) -> Grade:
    return Grade(
        grade_id=int(r["grade_id"]),
        student_id=int(r["student_id"]),
        supervisor_id=int(r["supervisor_id"]),
        attendance_score=float(r["attendance_score"] or 0),
        weekly_reports_score=float(r["weekly_reports_score"] or 0),
        supervisor_approval_score=float(r["supervisor_approval_score"] or 0),
        total_score=float(r["total_score"] or 0),
        grade=r["grade"],
        auto_calculated=bool(r.get("auto_calculated")),
        score_confidence=ScoreConfidence(r.get("score_confidence") or ScoreConfidence.FULL.value),
        remarks=r.get("remarks"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLGradeRepository(GradeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_latest_for_student(self, student_id: int) -> Optional[Grade]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM supervisor_grades
                WHERE student_id=%s
                ORDER BY updated_at DESC, grade_id DESC
                LIMIT 1
                """,
                (int(student_id),),
            )
            r = fetchone(cur)
            return _row_to_grade(r) if r else None

    def save_and_lock(
        self,
        *,
        student_id: int,
        supervisor_id: int,
        breakdown: GradeBreakdown,
        auto_calculated: bool,
        remarks: Optional[str],
        at: datetime,
    ) -> Grade:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO supervisor_grades(
                    student_id, supervisor_id, attendance_score, weekly_reports_score,
                    supervisor_approval_score, total_score, grade, auto_calculated,
                    score_confidence, remarks
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    attendance_score=VALUES(attendance_score),
                    weekly_reports_score=VALUES(weekly_reports_score),
                    supervisor_approval_score=VALUES(supervisor_approval_score),
                    total_score=VALUES(total_score),
                    grade=VALUES(grade),
                    auto_calculated=VALUES(auto_calculated),
                    score_confidence=VALUES(score_confidence),
                    remarks=VALUES(remarks)
                """,
                (
                    int(student_id),
                    int(supervisor_id),
                    breakdown.attendance_score,
                    breakdown.weekly_reports_score,
                    breakdown.supervisor_approval_score,
                    breakdown.total_score,
                    breakdown.grade,
                    1 if auto_calculated else 0,
                    breakdown.score_confidence.value,
                    remarks,
                ),
            )
            # lock timestamps keep the first lock; graded_at tracks the latest grade
            cur.execute(
                """
                UPDATE students
                SET graded=1, graded_at=%s,
                    siwes_locked=1, siwes_locked_at=COALESCE(siwes_locked_at, %s)
                WHERE student_id=%s
                """,
                (at, at, int(student_id)),
            )
            cur.execute(
                f"SELECT {_COLUMNS} FROM supervisor_grades WHERE student_id=%s AND supervisor_id=%s",
                (int(student_id), int(supervisor_id)),
            )
            return _row_to_grade(fetchone(cur))
