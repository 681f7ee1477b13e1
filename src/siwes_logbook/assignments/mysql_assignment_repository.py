from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import SupervisorType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Supervisor, SupervisorAssignment
from .repository import AssignmentRepository


def _row_to_supervisor(r: dict) -> Supervisor:
    return Supervisor(
        supervisor_id=int(r["supervisor_id"]),
        user_id=int(r["user_id"]),
        name=r["name"],
        email=r["email"],
        supervisor_type=SupervisorType(r["supervisor_type"]),
        is_active=bool(r.get("is_active")),
    )


def _row_to_assignment(r: dict) -> SupervisorAssignment:
    return SupervisorAssignment(
        assignment_id=int(r["assignment_id"]),
        supervisor_id=int(r["supervisor_id"]),
        student_id=int(r["student_id"]),
        assignment_type=SupervisorType(r["assignment_type"]),
        session_id=int(r["session_id"]) if r.get("session_id") is not None else None,
        is_active=bool(r.get("is_active")),
    )


class MySQLAssignmentRepository(AssignmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_supervisor_by_user(self, user_id: int) -> Optional[Supervisor]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT supervisor_id, user_id, name, email, supervisor_type, is_active
                FROM supervisors
                WHERE user_id=%s
                """,
                (int(user_id),),
            )
            r = fetchone(cur)
            return _row_to_supervisor(r) if r else None

    def get_supervisor_by_id(self, supervisor_id: int) -> Optional[Supervisor]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT supervisor_id, user_id, name, email, supervisor_type, is_active
                FROM supervisors
                WHERE supervisor_id=%s
                """,
                (int(supervisor_id),),
            )
            r = fetchone(cur)
            return _row_to_supervisor(r) if r else None

    def current_session_id(self) -> Optional[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT session_id FROM academic_sessions WHERE is_current=1 ORDER BY session_id DESC LIMIT 1")
            r = fetchone(cur)
            return int(r["session_id"]) if r else None

    def get_active_assignment(
        self,
        *,
        supervisor_id: int,
        student_id: int,
        assignment_type: SupervisorType,
        session_id: Optional[int] = None,
    ) -> Optional[SupervisorAssignment]:
        clauses = ["supervisor_id=%s", "student_id=%s", "assignment_type=%s", "is_active=1"]
        params: list[object] = [int(supervisor_id), int(student_id), assignment_type.value]
        if session_id is not None:
            clauses.append("session_id=%s")
            params.append(int(session_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT assignment_id, supervisor_id, student_id, session_id, assignment_type, is_active
                FROM supervisor_assignments
                WHERE {" AND ".join(clauses)}
                ORDER BY assignment_id DESC
                LIMIT 1
                """,
                tuple(params),
            )
            r = fetchone(cur)
            return _row_to_assignment(r) if r else None

    def list_active_for_supervisor(
        self,
        *,
        supervisor_id: int,
        session_id: Optional[int] = None,
    ) -> Sequence[SupervisorAssignment]:
        clauses = ["supervisor_id=%s", "is_active=1"]
        params: list[object] = [int(supervisor_id)]
        if session_id is not None:
            clauses.append("session_id=%s")
            params.append(int(session_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT assignment_id, supervisor_id, student_id, session_id, assignment_type, is_active
                FROM supervisor_assignments
                WHERE {" AND ".join(clauses)}
                ORDER BY student_id
                """,
                tuple(params),
            )
            return [_row_to_assignment(r) for r in fetchall(cur)]

    def list_active_for_student(
        self,
        *,
        student_id: int,
        session_id: Optional[int] = None,
    ) -> Sequence[SupervisorAssignment]:
        clauses = ["student_id=%s", "is_active=1"]
        params: list[object] = [int(student_id)]
        if session_id is not None:
            clauses.append("session_id=%s")
            params.append(int(session_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT assignment_id, supervisor_id, student_id, session_id, assignment_type, is_active
                FROM supervisor_assignments
                WHERE {" AND ".join(clauses)}
                ORDER BY assignment_id DESC
                """,
                tuple(params),
            )
            return [_row_to_assignment(r) for r in fetchall(cur)]
