from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import SupervisorType


@dataclass(frozen=True)
class Supervisor:
    supervisor_id: int
    user_id: int
    name: str
    email: str
    supervisor_type: SupervisorType
    is_active: bool = True


@dataclass(frozen=True)
class SupervisorAssignment:
    """Binds one supervisor to one student for an academic session."""

    assignment_id: int
    supervisor_id: int
    student_id: int
    assignment_type: SupervisorType
    session_id: Optional[int] = None
    is_active: bool = True


@dataclass(frozen=True)
class StudentSupervisors:
    industry: Optional[Supervisor] = None
    school: Optional[Supervisor] = None
