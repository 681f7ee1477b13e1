from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..assignments.model import Supervisor
from ..assignments.resolver import AssignmentResolver
from ..common.datetime_utils import fmt_date, fmt_time, now_local
from ..common.number_utils import round_half_up
from ..core.enums import SupervisorType
from ..core.exceptions import (
    AlreadyCheckedInError,
    AlreadyCheckedOutError,
    ConflictError,
    DatastoreError,
    NoCheckInError,
    NotFoundError,
)
from ..core.principal import Principal
from ..locking.gate import LockingGate
from ..students.model import Student
from ..students.repository import StudentRepository
from .hours import HoursCalculator, WallClockHoursCalculator
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def _contact(assigned: Optional[Supervisor], name: Optional[str], email: Optional[str]) -> Optional[dict]:
    if assigned:
        return {"name": assigned.name, "email": assigned.email, "assigned": True}
    if name or email:
        return {"name": name, "email": email, "assigned": False}
    return None


def _record_row(r: AttendanceRecord) -> dict:
    return {
        "id": r.attendance_id,
        "student_id": r.student_id,
        "date": fmt_date(r.work_date),
        "check_in_time": fmt_time(r.check_in_time),
        "check_out_time": fmt_time(r.check_out_time),
        "verified": r.verified,
    }


class AttendanceService:
    """Daily check-in/check-out ledger.

    The server clock decides the date and times; clients never send them.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        resolver: AssignmentResolver,
        gate: LockingGate,
        *,
        hours_calculator: HoursCalculator | None = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._students = students
        self._resolver = resolver
        self._gate = gate
        self._hours = hours_calculator or WallClockHoursCalculator()
        self._clock = clock

    def _student_for_user(self, user_id: int) -> Student:
        student = self._students.get_by_user_id(int(user_id))
        if not student:
            raise NotFoundError("Student record not found")
        return student

    def check_in(self, student_user_id: int, *, now: datetime | None = None) -> dict:
        student = self._student_for_user(student_user_id)
        self._gate.ensure_unlocked(student)

        now = now or self._clock()
        today = now.date()
        check_in_time = now.time().replace(microsecond=0)

        if self._attendance.get_for_student_and_date(student.student_id, today):
            raise AlreadyCheckedInError("You have already checked in today")

        try:
            attendance_id = self._attendance.create_checkin(
                student_id=student.student_id,
                work_date=today,
                check_in_time=check_in_time,
                verified=True,
            )
        except ConflictError:
            # another request inserted today's row between our read and insert
            raise AlreadyCheckedInError("You have already checked in today")

        logger.info("Student %s checked in on %s at %s", student.student_id, today, check_in_time)
        record = AttendanceRecord(
            attendance_id=attendance_id,
            student_id=student.student_id,
            work_date=today,
            check_in_time=check_in_time,
            check_out_time=None,
            verified=True,
        )
        return {"attendance": _record_row(record), "time": fmt_time(check_in_time)}

    def check_out(self, student_user_id: int, *, now: datetime | None = None) -> dict:
        student = self._student_for_user(student_user_id)
        self._gate.ensure_unlocked(student)

        now = now or self._clock()
        today = now.date()
        check_out_time = now.time().replace(microsecond=0)

        record = self._attendance.get_for_student_and_date(student.student_id, today)
        if not record:
            raise NoCheckInError("You must check in first before checking out")
        if record.check_out_time is not None:
            raise AlreadyCheckedOutError("You have already checked out today")

        if not self._attendance.update_checkout(attendance_id=record.attendance_id, check_out_time=check_out_time):
            raise AlreadyCheckedOutError("You have already checked out today")

        logger.info("Student %s checked out on %s at %s", student.student_id, today, check_out_time)
        updated = AttendanceRecord(
            attendance_id=record.attendance_id,
            student_id=record.student_id,
            work_date=record.work_date,
            check_in_time=record.check_in_time,
            check_out_time=check_out_time,
            verified=record.verified,
        )
        return {"attendance": _record_row(updated), "time": fmt_time(check_out_time)}

    def today_status(self, student_user_id: int, *, now: datetime | None = None) -> dict:
        student = self._student_for_user(student_user_id)
        today = (now or self._clock()).date()

        record = self._attendance.get_for_student_and_date(student.student_id, today)
        return {
            "date": fmt_date(today),
            "has_checked_in": bool(record and record.check_in_time),
            "has_checked_out": bool(record and record.check_out_time),
            "attendance": _record_row(record) if record else None,
            "siwes_locked": student.siwes_locked,
            "supervisors": self._supervisor_contacts(student),
        }

    def _supervisor_contacts(self, student: Student) -> dict:
        # an active assignment wins over the contact typed in at registration
        assigned = self._resolver.supervisors_for_student(student.student_id)
        return {
            "industry": _contact(
                assigned.industry, student.industry_supervisor_name, student.industry_supervisor_email
            ),
            "school": _contact(assigned.school, student.school_supervisor_name, student.school_supervisor_email),
        }

    def _safe_list(self, student_id: int, *, newest_first: bool) -> tuple[Sequence[AttendanceRecord], bool]:
        try:
            return self._attendance.list_for_student(student_id, newest_first=newest_first), False
        except DatastoreError:
            logger.exception("Attendance read failed for student %s", student_id)
            return [], True

    @staticmethod
    def _stats(records: Sequence[AttendanceRecord]) -> dict:
        return {
            "total_days": len(records),
            "days_with_check_out": sum(1 for r in records if r.check_in_time and r.check_out_time),
            "verified_days": sum(1 for r in records if r.verified),
        }

    def history(self, student_user_id: int) -> dict:
        student = self._student_for_user(student_user_id)
        records, degraded = self._safe_list(student.student_id, newest_first=True)
        return {
            "attendance": [_record_row(r) for r in records],
            "stats": self._stats(records),
            "degraded": degraded,
        }

    def total_hours(self, records: Sequence[AttendanceRecord]) -> float:
        return round_half_up(sum(self._hours.worked_hours(r) for r in records), 1)

    def student_attendance(self, supervisor_principal: Principal, student_id: int) -> dict:
        self._resolver.require_supervisor(supervisor_principal, SupervisorType.SCHOOL)

        student = self._students.get_by_id(int(student_id))
        if not student:
            raise NotFoundError("Student not found")

        records, degraded = self._safe_list(student.student_id, newest_first=False)
        stats = self._stats(records)
        stats["total_hours"] = self.total_hours(records)
        return {
            "student": student.summary(),
            "siwes_locked": self._gate.is_locked(student.student_id),
            "attendance": [_record_row(r) for r in records],
            "stats": stats,
            "degraded": degraded,
        }

    def supervisor_summary(self, supervisor_principal: Principal, *, now: datetime | None = None) -> dict:
        supervisor = self._resolver.supervisor_for_user(supervisor_principal.user_id)
        if not supervisor:
            raise NotFoundError("Supervisor record not found. Please contact admin.")

        today: date = (now or self._clock()).date()
        student_ids = self._resolver.assigned_student_ids(supervisor)
        if not student_ids:
            return {"students": [], "date": fmt_date(today), "degraded": False}

        students = self._students.list_by_ids(student_ids)
        degraded = False
        try:
            records = self._attendance.list_for_students([s.student_id for s in students])
        except DatastoreError:
            logger.exception("Attendance summary read failed for supervisor %s", supervisor.supervisor_id)
            records, degraded = [], True

        by_student: dict[int, list[AttendanceRecord]] = {}
        for r in records:
            by_student.setdefault(r.student_id, []).append(r)

        summaries = []
        for s in students:
            own = by_student.get(s.student_id, [])
            today_record = next((r for r in own if r.work_date == today), None)
            summaries.append(
                {
                    "student_id": s.student_id,
                    "full_name": s.full_name,
                    "matric_no": s.matric_no,
                    "department": s.department,
                    "total_days": len(own),
                    "days_with_check_out": sum(1 for r in own if r.check_in_time and r.check_out_time),
                    "verified_days": sum(1 for r in own if r.verified),
                    "today_status": (
                        {
                            "checked_in": bool(today_record.check_in_time),
                            "checked_out": bool(today_record.check_out_time),
                            "check_in_time": fmt_time(today_record.check_in_time),
                            "check_out_time": fmt_time(today_record.check_out_time),
                        }
                        if today_record
                        else None
                    ),
                }
            )

        return {"students": summaries, "date": fmt_date(today), "degraded": degraded}
