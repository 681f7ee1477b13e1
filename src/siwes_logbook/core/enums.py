from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Role attached to the authenticated principal by the identity provider."""

    STUDENT = "student"
    SCHOOL_SUPERVISOR = "school_supervisor"
    INDUSTRY_SUPERVISOR = "industry_supervisor"
    ADMIN = "admin"


class SupervisorType(str, Enum):
    SCHOOL = "school_supervisor"
    INDUSTRY = "industry_supervisor"


class WeekStatus(str, Enum):
    """Lifecycle state of a logbook week.

    FORWARDED is a submitted week that the industry supervisor has stamped
    and passed on to the school supervisor.
    """

    DRAFT = "draft"
    SUBMITTED = "submitted"
    FORWARDED = "forwarded"
    APPROVED = "approved"
    REJECTED = "rejected"

    @property
    def counts_as_submitted(self) -> bool:
        return self in {WeekStatus.SUBMITTED, WeekStatus.FORWARDED, WeekStatus.APPROVED}


class WeekAction(str, Enum):
    SAVE_DRAFT = "save_draft"
    SUBMIT = "submit"
    FORWARD = "forward"
    APPROVE = "approve"
    REJECT = "reject"


class ScoreConfidence(str, Enum):
    FULL = "full"
    DEGRADED = "degraded"
