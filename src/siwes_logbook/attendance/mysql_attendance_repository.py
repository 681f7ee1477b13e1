from __future__ import annotations

from datetime import date, time
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import AttendanceRecord
from .repository import AttendanceRepository


def _row_to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        student_id=int(r["student_id"]),
        work_date=r["work_date"],
        check_in_time=normalize_mysql_time(r.get("check_in_time")),
        check_out_time=normalize_mysql_time(r.get("check_out_time")),
        verified=bool(r.get("verified")),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_student_and_date(self, student_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT attendance_id, student_id, work_date, check_in_time, check_out_time, verified
                FROM attendance_records
                WHERE student_id=%s AND work_date=%s
                """,
                (int(student_id), work_date),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def list_for_student(self, student_id: int, *, newest_first: bool = True) -> Sequence[AttendanceRecord]:
        order = "DESC" if newest_first else "ASC"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT attendance_id, student_id, work_date, check_in_time, check_out_time, verified
                FROM attendance_records
                WHERE student_id=%s
                ORDER BY work_date {order}
                """,
                (int(student_id),),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def list_for_students(self, student_ids: Sequence[int]) -> Sequence[AttendanceRecord]:
        ids = [int(i) for i in student_ids]
        if not ids:
            return []
        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT attendance_id, student_id, work_date, check_in_time, check_out_time, verified
                FROM attendance_records
                WHERE student_id IN ({placeholders})
                ORDER BY student_id, work_date
                """,
                tuple(ids),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def create_checkin(
        self,
        *,
        student_id: int,
        work_date: date,
        check_in_time: time,
        verified: bool = True,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(student_id, work_date, check_in_time, verified)
                VALUES(%s,%s,%s,%s)
                """,
                (int(student_id), work_date, check_in_time, 1 if verified else 0),
            )
            return int(cur.lastrowid)

    def update_checkout(self, *, attendance_id: int, check_out_time: time) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s
                WHERE attendance_id=%s AND check_out_time IS NULL
                """,
                (check_out_time, int(attendance_id)),
            )
            return cur.rowcount > 0

    def count_checked_in_days(self, student_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS n
                FROM attendance_records
                WHERE student_id=%s AND check_in_time IS NOT NULL
                """,
                (int(student_id),),
            )
            r = fetchone(cur)
            return int(r["n"]) if r else 0
