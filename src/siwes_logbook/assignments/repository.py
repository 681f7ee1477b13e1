from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import SupervisorType
from .model import Supervisor, SupervisorAssignment


class AssignmentRepository(Protocol):
    def get_supervisor_by_user(self, user_id: int) -> Optional[Supervisor]:
        raise NotImplementedError

    def get_supervisor_by_id(self, supervisor_id: int) -> Optional[Supervisor]:
        raise NotImplementedError

    def current_session_id(self) -> Optional[int]:
        """Session flagged ``is_current``, if there is one."""

        raise NotImplementedError

    def get_active_assignment(
        self,
        *,
        supervisor_id: int,
        student_id: int,
        assignment_type: SupervisorType,
        session_id: Optional[int] = None,
    ) -> Optional[SupervisorAssignment]:
        raise NotImplementedError

    def list_active_for_supervisor(
        self,
        *,
        supervisor_id: int,
        session_id: Optional[int] = None,
    ) -> Sequence[SupervisorAssignment]:
        raise NotImplementedError

    def list_active_for_student(
        self,
        *,
        student_id: int,
        session_id: Optional[int] = None,
    ) -> Sequence[SupervisorAssignment]:
        raise NotImplementedError
