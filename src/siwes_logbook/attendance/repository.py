from __future__ import annotations

from datetime import date, time
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_student_and_date(self, student_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_student(self, student_id: int, *, newest_first: bool = True) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_students(self, student_ids: Sequence[int]) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create_checkin(
        self,
        *,
        student_id: int,
        work_date: date,
        check_in_time: time,
        verified: bool = True,
    ) -> int:
        """Insert today's row. Raises ConflictError when the row already exists."""

        raise NotImplementedError

    def update_checkout(self, *, attendance_id: int, check_out_time: time) -> bool:
        """Set check-out only if it is still empty. False when nothing changed."""

        raise NotImplementedError

    def count_checked_in_days(self, student_id: int) -> int:
        raise NotImplementedError
