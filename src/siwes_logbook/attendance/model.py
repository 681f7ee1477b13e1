from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Optional


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's presence on one calendar day."""

    attendance_id: int
    student_id: int
    work_date: date
    check_in_time: Optional[time]
    check_out_time: Optional[time] = None
    verified: bool = True
