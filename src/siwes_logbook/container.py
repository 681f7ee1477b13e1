from __future__ import annotations

from dataclasses import dataclass

from .assignments.mysql_assignment_repository import MySQLAssignmentRepository
from .assignments.resolver import AssignmentResolver
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .grading.mysql_grade_repository import MySQLGradeRepository
from .grading.service import GradingService
from .locking.gate import LockingGate
from .students.mysql_student_repository import MySQLStudentRepository
from .weeks.mysql_week_repository import MySQLWeekRepository
from .weeks.service import WeekService


@dataclass(frozen=True)
class Container:
    attendance_service: AttendanceService
    week_service: WeekService
    grading_service: GradingService


def build_container(
    *,
    db_config: dict,
    two_tier_approval: bool = True,
    current_session_id: int | None = None,
    abort_on_degraded_read: bool = True,
) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    students_repo = MySQLStudentRepository(conn)
    assignments_repo = MySQLAssignmentRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    weeks_repo = MySQLWeekRepository(conn)
    grades_repo = MySQLGradeRepository(conn)

    resolver = AssignmentResolver(assignments_repo, current_session_id=current_session_id)
    gate = LockingGate(students_repo)

    attendance_service = AttendanceService(attendance_repo, students_repo, resolver, gate)
    week_service = WeekService(
        weeks_repo,
        students_repo,
        resolver,
        gate,
        two_tier_approval=two_tier_approval,
    )
    grading_service = GradingService(
        grades_repo,
        students_repo,
        attendance_repo,
        weeks_repo,
        resolver,
        abort_on_degraded_read=abort_on_degraded_read,
    )

    return Container(
        attendance_service=attendance_service,
        week_service=week_service,
        grading_service=grading_service,
    )
