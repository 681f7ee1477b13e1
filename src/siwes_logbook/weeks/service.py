from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Optional, Sequence

from ..assignments.resolver import AssignmentResolver
from ..common.datetime_utils import fmt_date, fmt_datetime, now_local, week_dates
from ..common.validators import (
    optional_text,
    require_non_empty,
    require_number_in_range,
    require_string_list,
    require_week_number,
)
from ..core.constants import MAX_WEEK_SCORE, MIN_WEEK_SCORE
from ..core.enums import Role, WeekAction, WeekStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..core.principal import Principal
from ..locking.gate import LockingGate
from ..students.model import Student
from ..students.repository import StudentRepository
from .model import WEEKDAYS, Week, WeekContent
from .repository import WeekRepository
from .transitions import next_status

logger = logging.getLogger(__name__)

REVIEW_ACTIONS = (WeekAction.FORWARD, WeekAction.APPROVE, WeekAction.REJECT)


def week_payload(w: Week) -> dict:
    data: dict[str, Any] = {
        "id": w.week_id,
        "student_id": w.student_id,
        "week_number": w.week_number,
        "status": w.status.value,
        "start_date": fmt_date(w.start_date),
        "end_date": fmt_date(w.end_date),
    }
    for day in WEEKDAYS:
        data[f"{day}_activity"] = w.content.activity(day)
    data.update(
        {
            "comments": w.content.comments,
            "evidence_refs": list(w.content.evidence_refs),
            "submitted_at": fmt_datetime(w.submitted_at),
            "industry_supervisor_id": w.industry_supervisor_id,
            "industry_supervisor_approved_at": fmt_datetime(w.industry_supervisor_approved_at),
            "industry_supervisor_comments": w.industry_supervisor_comments,
            "stamp_ref": w.stamp_ref,
            "school_supervisor_id": w.school_supervisor_id,
            "school_approved_at": fmt_datetime(w.school_approved_at),
            "school_supervisor_comments": w.school_supervisor_comments,
            "score": w.score,
            "rejection_reason": w.rejection_reason,
            "reviewed_at": fmt_datetime(w.reviewed_at),
        }
    )
    return data


class WeekService:
    """Logbook weeks and their approval workflow.

    Student writes go through the locking gate; supervisor reviews do not.
    Every status change is a conditional update on the status that was read,
    so two reviewers racing on one week cannot both win.
    """

    def __init__(
        self,
        weeks: WeekRepository,
        students: StudentRepository,
        resolver: AssignmentResolver,
        gate: LockingGate,
        *,
        two_tier_approval: bool = True,
        clock: Callable[[], datetime] = now_local,
    ):
        self._weeks = weeks
        self._students = students
        self._resolver = resolver
        self._gate = gate
        self._two_tier = bool(two_tier_approval)
        self._clock = clock

    def _student_for_user(self, user_id: int) -> Student:
        student = self._students.get_by_user_id(int(user_id))
        if not student:
            raise NotFoundError("Student record not found")
        return student

    @staticmethod
    def _build_content(activities: Optional[dict], comments: Any, evidence_refs: Any) -> WeekContent:
        if activities is not None and not isinstance(activities, dict):
            raise ValidationError("Activities must be an object keyed by weekday")
        activities = activities or {}
        unknown = set(activities) - set(WEEKDAYS)
        if unknown:
            raise ValidationError(f"Unknown weekday: {sorted(unknown)[0]}")
        return WeekContent(
            activities={day: optional_text(activities.get(day)) for day in WEEKDAYS},
            comments=optional_text(comments),
            evidence_refs=tuple(require_string_list(evidence_refs, "Evidence references")),
        )

    def save_week(
        self,
        student_user_id: int,
        week_number: Any,
        *,
        activities: Optional[dict] = None,
        comments: Any = None,
        evidence_refs: Any = None,
        submit: bool = True,
        now: datetime | None = None,
    ) -> tuple[Week, bool]:
        """Create or overwrite the student's week. Returns (week, created)."""
        student = self._student_for_user(student_user_id)
        self._gate.ensure_unlocked(student)

        week_number = require_week_number(week_number)
        content = self._build_content(activities, comments, evidence_refs)
        action = WeekAction.SUBMIT if submit else WeekAction.SAVE_DRAFT
        now = now or self._clock()
        start_date, end_date = week_dates(student.start_date, week_number)

        existing = self._weeks.get_for_student_and_number(student.student_id, week_number)
        if existing is None:
            status = next_status(None, action, Role.STUDENT, two_tier=self._two_tier)
            try:
                week_id = self._weeks.create(
                    student_id=student.student_id,
                    week_number=week_number,
                    start_date=start_date,
                    end_date=end_date,
                    content=content,
                    status=status,
                    submitted_at=now if status is WeekStatus.SUBMITTED else None,
                )
            except ConflictError:
                # lost the insert race; the row exists now, so update it instead
                existing = self._weeks.get_for_student_and_number(student.student_id, week_number)
                if existing is None:
                    raise
            else:
                logger.info("Student %s saved week %s as %s", student.student_id, week_number, status.value)
                return self._reload(week_id), True

        status = next_status(existing.status, action, Role.STUDENT, two_tier=self._two_tier)
        entering_submitted = status is WeekStatus.SUBMITTED
        updated = self._weeks.update_content(
            week_id=existing.week_id,
            expected_status=existing.status,
            start_date=start_date,
            end_date=end_date,
            content=content,
            status=status,
            submitted_at=now if entering_submitted else existing.submitted_at,
            clear_rejection=entering_submitted,
        )
        if not updated:
            raise ConflictError("This week was reviewed while you were editing it. Reload and try again.")

        logger.info(
            "Student %s updated week %s: %s -> %s",
            student.student_id,
            week_number,
            existing.status.value,
            status.value,
        )
        return self._reload(existing.week_id), False

    def _reload(self, week_id: int) -> Week:
        week = self._weeks.get_by_id(week_id)
        if not week:
            raise NotFoundError("Week not found")
        return week

    def review_week(
        self,
        supervisor_principal: Principal,
        week_id: int,
        action: Any,
        *,
        comment: Any = None,
        reason: Any = None,
        score: Any = None,
        stamp_ref: Any = None,
        now: datetime | None = None,
    ) -> Week:
        try:
            action = WeekAction(action)
        except ValueError:
            action = None
        if action not in REVIEW_ACTIONS:
            raise ValidationError("Action must be one of: forward, approve, reject")

        supervisor = self._resolver.require_supervisor(supervisor_principal)
        actor = Role(supervisor.supervisor_type.value)

        week = self._weeks.get_by_id(int(week_id))
        if not week:
            raise NotFoundError("Week not found")

        self._resolver.require_assignment(supervisor, week.student_id, supervisor.supervisor_type)

        comment = optional_text(comment)
        if action is WeekAction.REJECT:
            reason = require_non_empty(reason, "Rejection reason")
        if action is WeekAction.APPROVE and score is not None and score != "":
            score = require_number_in_range(score, "Score", MIN_WEEK_SCORE, MAX_WEEK_SCORE)
        else:
            score = None

        new_status = next_status(week.status, action, actor, two_tier=self._two_tier)
        now = now or self._clock()

        if action is WeekAction.FORWARD:
            done = self._weeks.forward(
                week_id=week.week_id,
                supervisor_id=supervisor.supervisor_id,
                comments=comment,
                stamp_ref=optional_text(stamp_ref),
                at=now,
            )
        elif action is WeekAction.APPROVE:
            done = self._weeks.approve(
                week_id=week.week_id,
                expected_status=week.status,
                supervisor_id=supervisor.supervisor_id,
                comments=comment,
                score=score,
                at=now,
            )
        else:
            done = self._weeks.reject(
                week_id=week.week_id,
                expected_status=week.status,
                supervisor_id=supervisor.supervisor_id,
                supervisor_type=supervisor.supervisor_type,
                reason=reason,
                comments=comment,
                at=now,
            )

        if not done:
            raise ConflictError("Week was changed by someone else. Reload and try again.")

        logger.info(
            "Supervisor %s %s week %s: %s -> %s",
            supervisor.supervisor_id,
            action.value,
            week.week_id,
            week.status.value,
            new_status.value,
        )
        return self._reload(week.week_id)

    def my_weeks(self, student_user_id: int) -> Sequence[Week]:
        student = self._student_for_user(student_user_id)
        return self._weeks.list_for_student(student.student_id)

    def student_weeks(self, supervisor_principal: Principal, student_id: int) -> Sequence[Week]:
        supervisor = self._resolver.require_supervisor(supervisor_principal)
        student = self._students.get_by_id(int(student_id))
        if not student:
            raise NotFoundError("Student not found")
        self._resolver.require_assignment(supervisor, student.student_id, supervisor.supervisor_type)
        return self._weeks.list_for_student(student.student_id)

