from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import SupervisorType, WeekStatus
from .model import Week, WeekContent


class WeekRepository(Protocol):
    def get_by_id(self, week_id: int) -> Optional[Week]:
        raise NotImplementedError

    def get_for_student_and_number(self, student_id: int, week_number: int) -> Optional[Week]:
        raise NotImplementedError

    def list_for_student(self, student_id: int) -> Sequence[Week]:
        raise NotImplementedError

    def count_by_status(self, student_id: int) -> dict[WeekStatus, int]:
        raise NotImplementedError

    def create(
        self,
        *,
        student_id: int,
        week_number: int,
        start_date: Optional[date],
        end_date: Optional[date],
        content: WeekContent,
        status: WeekStatus,
        submitted_at: Optional[datetime],
    ) -> int:
        """Raises ConflictError when (student, week_number) already exists."""

        raise NotImplementedError

    def update_content(
        self,
        *,
        week_id: int,
        expected_status: WeekStatus,
        start_date: Optional[date],
        end_date: Optional[date],
        content: WeekContent,
        status: WeekStatus,
        submitted_at: Optional[datetime],
        clear_rejection: bool,
    ) -> bool:
        """Overwrite the student's content. False if the status moved meanwhile."""

        raise NotImplementedError

    def forward(
        self,
        *,
        week_id: int,
        supervisor_id: int,
        comments: Optional[str],
        stamp_ref: Optional[str],
        at: datetime,
    ) -> bool:
        raise NotImplementedError

    def approve(
        self,
        *,
        week_id: int,
        expected_status: WeekStatus,
        supervisor_id: int,
        comments: Optional[str],
        score: Optional[float],
        at: datetime,
    ) -> bool:
        raise NotImplementedError

    def reject(
        self,
        *,
        week_id: int,
        expected_status: WeekStatus,
        supervisor_id: int,
        supervisor_type: SupervisorType,
        reason: str,
        comments: Optional[str],
        at: datetime,
    ) -> bool:
        raise NotImplementedError
