from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Student
from .repository import StudentRepository

_COLUMNS = """
    student_id, user_id, full_name, matric_no, organisation_name, faculty, department,
    industry_supervisor_name, industry_supervisor_email, school_supervisor_name, school_supervisor_email,
    start_date, graded, graded_at, siwes_locked, siwes_locked_at
"""


def _row_to_student(r: dict) -> Student:
    return Student(
        student_id=int(r["student_id"]),
        user_id=int(r["user_id"]),
        full_name=r["full_name"],
        matric_no=r["matric_no"],
        organisation_name=r.get("organisation_name"),
        faculty=r.get("faculty"),
        department=r.get("department"),
        industry_supervisor_name=r.get("industry_supervisor_name"),
        industry_supervisor_email=r.get("industry_supervisor_email"),
        school_supervisor_name=r.get("school_supervisor_name"),
        school_supervisor_email=r.get("school_supervisor_email"),
        start_date=r.get("start_date"),
        graded=bool(r.get("graded")),
        graded_at=r.get("graded_at"),
        siwes_locked=bool(r.get("siwes_locked")),
        siwes_locked_at=r.get("siwes_locked_at"),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, student_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE student_id=%s", (int(student_id),))
            r = fetchone(cur)
            return _row_to_student(r) if r else None

    def get_by_user_id(self, user_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE user_id=%s", (int(user_id),))
            r = fetchone(cur)
            return _row_to_student(r) if r else None

    def list_by_ids(self, student_ids: Sequence[int]) -> Sequence[Student]:
        ids = [int(i) for i in student_ids]
        if not ids:
            return []
        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM students WHERE student_id IN ({placeholders}) ORDER BY full_name",
                tuple(ids),
            )
            return [_row_to_student(r) for r in fetchall(cur)]
