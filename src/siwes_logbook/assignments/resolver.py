from __future__ import annotations

import logging
from typing import Optional

from ..core.enums import SupervisorType
from ..core.exceptions import AuthorizationError
from ..core.principal import Principal
from .model import StudentSupervisors, Supervisor, SupervisorAssignment
from .repository import AssignmentRepository

logger = logging.getLogger(__name__)


class AssignmentResolver:
    """Read-only view of who supervises whom.

    Lookups are scoped to one academic session: the configured one, else the
    session flagged as current, else none (any active assignment counts).
    """

    def __init__(self, assignments: AssignmentRepository, *, current_session_id: int | None = None):
        self._assignments = assignments
        self._current_session_id = current_session_id

    def _session_id(self) -> Optional[int]:
        if self._current_session_id is not None:
            return self._current_session_id
        return self._assignments.current_session_id()

    def supervisor_for_user(
        self,
        user_id: int,
        supervisor_type: SupervisorType | None = None,
    ) -> Optional[Supervisor]:
        supervisor = self._assignments.get_supervisor_by_user(int(user_id))
        if not supervisor or not supervisor.is_active:
            return None
        if supervisor_type is not None and supervisor.supervisor_type != supervisor_type:
            return None
        return supervisor

    def require_supervisor(
        self,
        principal: Principal,
        supervisor_type: SupervisorType | None = None,
    ) -> Supervisor:
        supervisor = self.supervisor_for_user(principal.user_id, supervisor_type)
        if not supervisor:
            if supervisor_type is SupervisorType.SCHOOL:
                raise AuthorizationError("Only an active school supervisor can perform this action")
            if supervisor_type is SupervisorType.INDUSTRY:
                raise AuthorizationError("Only an active industry supervisor can perform this action")
            raise AuthorizationError("Active supervisor record not found")
        return supervisor

    def require_assignment(
        self,
        supervisor: Supervisor,
        student_id: int,
        assignment_type: SupervisorType,
    ) -> SupervisorAssignment:
        assignment = self._assignments.get_active_assignment(
            supervisor_id=supervisor.supervisor_id,
            student_id=int(student_id),
            assignment_type=assignment_type,
            session_id=self._session_id(),
        )
        if not assignment:
            logger.info(
                "Supervisor %s is not assigned to student %s as %s",
                supervisor.supervisor_id,
                student_id,
                assignment_type.value,
            )
            raise AuthorizationError("You are not assigned to this student")
        return assignment

    def assigned_student_ids(self, supervisor: Supervisor) -> list[int]:
        rows = self._assignments.list_active_for_supervisor(
            supervisor_id=supervisor.supervisor_id,
            session_id=self._session_id(),
        )
        # a supervisor may hold both assignment types for one student
        seen: list[int] = []
        for a in rows:
            if a.student_id not in seen:
                seen.append(a.student_id)
        return seen

    def supervisors_for_student(self, student_id: int) -> StudentSupervisors:
        industry: Optional[Supervisor] = None
        school: Optional[Supervisor] = None
        for a in self._assignments.list_active_for_student(student_id=int(student_id), session_id=self._session_id()):
            supervisor = self._assignments.get_supervisor_by_id(a.supervisor_id)
            if not supervisor or not supervisor.is_active:
                continue
            if a.assignment_type is SupervisorType.INDUSTRY and industry is None:
                industry = supervisor
            elif a.assignment_type is SupervisorType.SCHOOL and school is None:
                school = supervisor
        return StudentSupervisors(industry=industry, school=school)
