from __future__ import annotations

import json
from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import SupervisorType, WeekStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, load_json_list
from .model import WEEKDAYS, Week, WeekContent
from .repository import WeekRepository

_COLUMNS = """
    week_id, student_id, week_number, start_date, end_date,
    monday_activity, tuesday_activity, wednesday_activity,
    thursday_activity, friday_activity, saturday_activity,
    comments, evidence_refs, status, submitted_at,
    industry_supervisor_id, industry_supervisor_approved_at, industry_supervisor_comments, stamp_ref,
    school_supervisor_id, school_approved_at, school_supervisor_comments,
    score, rejection_reason, reviewed_at, created_at, updated_at
"""


def _row_to_week(r: dict) -> Week:
    content = WeekContent(
        activities={day: r.get(f"{day}_activity") for day in WEEKDAYS},
        comments=r.get("comments"),
        evidence_refs=tuple(load_json_list(r.get("evidence_refs"))),
    )
    return Week(
        week_id=int(r["week_id"]),
        student_id=int(r["student_id"]),
        week_number=int(r["week_number"]),
        status=WeekStatus(r["status"]),
        content=content,
        start_date=r.get("start_date"),
        end_date=r.get("end_date"),
        submitted_at=r.get("submitted_at"),
        industry_supervisor_id=r.get("industry_supervisor_id"),
        industry_supervisor_approved_at=r.get("industry_supervisor_approved_at"),
        industry_supervisor_comments=r.get("industry_supervisor_comments"),
        stamp_ref=r.get("stamp_ref"),
        school_supervisor_id=r.get("school_supervisor_id"),
        school_approved_at=r.get("school_approved_at"),
        school_supervisor_comments=r.get("school_supervisor_comments"),
        score=float(r["score"]) if r.get("score") is not None else None,
        rejection_reason=r.get("rejection_reason"),
        reviewed_at=r.get("reviewed_at"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def _content_params(content: WeekContent) -> list[object]:
    return [content.activity(day) for day in WEEKDAYS] + [
        content.comments,
        json.dumps(list(content.evidence_refs)),
    ]


class MySQLWeekRepository(WeekRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, week_id: int) -> Optional[Week]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM weeks WHERE week_id=%s", (int(week_id),))
            r = fetchone(cur)
            return _row_to_week(r) if r else None

    def get_for_student_and_number(self, student_id: int, week_number: int) -> Optional[Week]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM weeks WHERE student_id=%s AND week_number=%s",
                (int(student_id), int(week_number)),
            )
            r = fetchone(cur)
            return _row_to_week(r) if r else None

    def list_for_student(self, student_id: int) -> Sequence[Week]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM weeks WHERE student_id=%s ORDER BY week_number",
                (int(student_id),),
            )
            return [_row_to_week(r) for r in fetchall(cur)]

    def count_by_status(self, student_id: int) -> dict[WeekStatus, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT status, COUNT(*) AS n
                FROM weeks
                WHERE student_id=%s
                GROUP BY status
                """,
                (int(student_id),),
            )
            return {WeekStatus(r["status"]): int(r["n"]) for r in fetchall(cur)}

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO weeks(
                    student_id, week_number, start_date, end_date,
                    monday_activity, tuesday_activity, wednesday_activity,
                    thursday_activity, friday_activity, saturday_activity,
                    comments, evidence_refs, status, submitted_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                tuple(
                    [int(student_id), int(week_number), start_date, end_date]
                    + _content_params(content)
                    + [status.value, submitted_at]
                ),
            )
            return int(cur.lastrowid)

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE weeks
                SET start_date=%s, end_date=%s,
                    monday_activity=%s, tuesday_activity=%s, wednesday_activity=%s,
                    thursday_activity=%s, friday_activity=%s, saturday_activity=%s,
                    comments=%s, evidence_refs=%s,
                    status=%s, submitted_at=%s,
                    rejection_reason=IF(%s, NULL, rejection_reason)
                WHERE week_id=%s AND status=%s
                """,
                tuple(
                    [start_date, end_date]
                    + _content_params(content)
                    + [status.value, submitted_at, 1 if clear_rejection else 0, int(week_id), expected_status.value]
                ),
            )
            return cur.rowcount > 0

    def forward(
        self,
        *,
        week_id: int,
        supervisor_id: int,
        comments: Optional[str],
        stamp_ref: Optional[str],
        at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE weeks
                SET status=%s, industry_supervisor_id=%s, industry_supervisor_approved_at=%s,
                    industry_supervisor_comments=%s, stamp_ref=%s, reviewed_at=%s
                WHERE week_id=%s AND status=%s
                """,
                (
                    WeekStatus.FORWARDED.value,
                    int(supervisor_id),
                    at,
                    comments,
                    stamp_ref,
                    at,
                    int(week_id),
                    WeekStatus.SUBMITTED.value,
                ),
            )
            return cur.rowcount > 0

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE weeks
                SET status=%s, school_supervisor_id=%s, school_approved_at=%s,
                    school_supervisor_comments=%s, score=%s, reviewed_at=%s
                WHERE week_id=%s AND status=%s
                """,
                (
                    WeekStatus.APPROVED.value,
                    int(supervisor_id),
                    at,
                    comments,
                    score,
                    at,
                    int(week_id),
                    expected_status.value,
                ),
            )
            return cur.rowcount > 0

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
        if supervisor_type is SupervisorType.INDUSTRY:
            reviewer_columns = "industry_supervisor_id=%s, industry_supervisor_comments=%s"
        else:
            reviewer_columns = "school_supervisor_id=%s, school_supervisor_comments=%s"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE weeks
                SET status=%s, {reviewer_columns}, rejection_reason=%s, reviewed_at=%s
                WHERE week_id=%s AND status=%s
                """,
                (
                    WeekStatus.REJECTED.value,
                    int(supervisor_id),
                    comments,
                    reason,
                    at,
                    int(week_id),
                    expected_status.value,
                ),
            )
            return cur.rowcount > 0
