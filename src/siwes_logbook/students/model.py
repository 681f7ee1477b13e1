from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class Student:
    """Domain entity: a student on placement.

    Note: plain data object, no DB access here.
    """

    student_id: int
    user_id: int
    full_name: str
    matric_no: str
    organisation_name: Optional[str] = None
    faculty: Optional[str] = None
    department: Optional[str] = None
    # contact details captured at registration, before any assignment exists
    industry_supervisor_name: Optional[str] = None
    industry_supervisor_email: Optional[str] = None
    school_supervisor_name: Optional[str] = None
    school_supervisor_email: Optional[str] = None
    start_date: Optional[date] = None
    graded: bool = False
    graded_at: Optional[datetime] = None
    siwes_locked: bool = False
    siwes_locked_at: Optional[datetime] = None

    def summary(self) -> dict:
        return {
            "id": self.student_id,
            "full_name": self.full_name,
            "matric_no": self.matric_no,
            "department": self.department,
            "faculty": self.faculty,
            "organisation": self.organisation_name,
        }
