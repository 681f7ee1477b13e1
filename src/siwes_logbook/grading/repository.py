from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .model import Grade, GradeBreakdown


class GradeRepository(Protocol):
    def get_latest_for_student(self, student_id: int) -> Optional[Grade]:
        raise NotImplementedError

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
        """Upsert the (student, supervisor) grade and lock the student.

        Both writes commit together or not at all.
        """

        raise NotImplementedError
