from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import WeekStatus

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday")


@dataclass(frozen=True)
class WeekContent:
    """What the student writes: one entry per working day plus extras."""

    activities: dict[str, Optional[str]] = field(default_factory=dict)
    comments: Optional[str] = None
    evidence_refs: tuple[str, ...] = ()

    def activity(self, day: str) -> Optional[str]:
        return self.activities.get(day)


@dataclass(frozen=True)
class Week:
    """Domain entity: one logbook week, keyed by (student, week_number)."""

    week_id: int
    student_id: int
    week_number: int
    status: WeekStatus
    content: WeekContent
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    submitted_at: Optional[datetime] = None
    industry_supervisor_id: Optional[int] = None
    industry_supervisor_approved_at: Optional[datetime] = None
    industry_supervisor_comments: Optional[str] = None
    stamp_ref: Optional[str] = None
    school_supervisor_id: Optional[int] = None
    school_approved_at: Optional[datetime] = None
    school_supervisor_comments: Optional[str] = None
    score: Optional[float] = None
    rejection_reason: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
