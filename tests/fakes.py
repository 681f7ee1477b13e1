"""In-memory repositories shared by the service and API tests."""
from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time

from siwes_logbook.assignments.model import Supervisor, SupervisorAssignment
from siwes_logbook.attendance.model import AttendanceRecord
from siwes_logbook.core.enums import SupervisorType, WeekStatus
from siwes_logbook.core.exceptions import ConflictError, DatastoreError
from siwes_logbook.grading.model import Grade
from siwes_logbook.students.model import Student
from siwes_logbook.weeks.model import Week, WeekContent


class FakeStudentRepo:
    def __init__(self, students=()):
        self.students: dict[int, Student] = {s.student_id: s for s in students}

    def add(self, student: Student) -> Student:
        self.students[student.student_id] = student
        return student

    def get_by_id(self, student_id):
        return self.students.get(int(student_id))

    def get_by_user_id(self, user_id):
        return next((s for s in self.students.values() if s.user_id == int(user_id)), None)

    def list_by_ids(self, student_ids):
        return [self.students[i] for i in student_ids if i in self.students]

    def lock(self, student_id, at):
        s = self.students[int(student_id)]
        self.students[s.student_id] = replace(
            s,
            graded=True,
            graded_at=at,
            siwes_locked=True,
            siwes_locked_at=s.siwes_locked_at or at,
        )


class FakeAssignmentRepo:
    def __init__(self):
        self.supervisors: dict[int, Supervisor] = {}
        self.assignments: list[SupervisorAssignment] = []
        self.flagged_session_id = None

    def add_supervisor(self, supervisor: Supervisor) -> Supervisor:
        self.supervisors[supervisor.supervisor_id] = supervisor
        return supervisor

    def assign(self, supervisor: Supervisor, student_id: int, assignment_type=None, *, session_id=None, is_active=True):
        a = SupervisorAssignment(
            assignment_id=len(self.assignments) + 1,
            supervisor_id=supervisor.supervisor_id,
            student_id=int(student_id),
            assignment_type=assignment_type or supervisor.supervisor_type,
            session_id=session_id,
            is_active=is_active,
        )
        self.assignments.append(a)
        return a

    def get_supervisor_by_user(self, user_id):
        return next((s for s in self.supervisors.values() if s.user_id == int(user_id)), None)

    def get_supervisor_by_id(self, supervisor_id):
        return self.supervisors.get(int(supervisor_id))

    def current_session_id(self):
        return self.flagged_session_id

    def _active(self, session_id):
        return [
            a
            for a in self.assignments
            if a.is_active and (session_id is None or a.session_id == session_id)
        ]

    def get_active_assignment(self, *, supervisor_id, student_id, assignment_type, session_id=None):
        return next(
            (
                a
                for a in self._active(session_id)
                if a.supervisor_id == supervisor_id
                and a.student_id == int(student_id)
                and a.assignment_type == assignment_type
            ),
            None,
        )

    def list_active_for_supervisor(self, *, supervisor_id, session_id=None):
        return [a for a in self._active(session_id) if a.supervisor_id == supervisor_id]

    def list_active_for_student(self, *, student_id, session_id=None):
        return [a for a in self._active(session_id) if a.student_id == int(student_id)]


class FakeAttendanceRepo:
    def __init__(self):
        self.records: dict[int, AttendanceRecord] = {}
        self._next_id = 1
        self.fail_reads = False
        # rows another request inserts between our read and our insert
        self.race_rows: list[AttendanceRecord] = []
        self.lose_checkout_race = False

    def add(self, student_id: int, work_date: date, check_in: time | None, check_out: time | None = None, verified=True):
        rec = AttendanceRecord(
            attendance_id=self._next_id,
            student_id=int(student_id),
            work_date=work_date,
            check_in_time=check_in,
            check_out_time=check_out,
            verified=verified,
        )
        self.records[rec.attendance_id] = rec
        self._next_id += 1
        return rec

    def _check_reads(self):
        if self.fail_reads:
            raise DatastoreError("Database request failed")

    def get_for_student_and_date(self, student_id, work_date):
        return next(
            (r for r in self.records.values() if r.student_id == int(student_id) and r.work_date == work_date),
            None,
        )

    def list_for_student(self, student_id, *, newest_first=True):
        self._check_reads()
        rows = [r for r in self.records.values() if r.student_id == int(student_id)]
        return sorted(rows, key=lambda r: r.work_date, reverse=newest_first)

    def list_for_students(self, student_ids):
        self._check_reads()
        ids = {int(i) for i in student_ids}
        return sorted((r for r in self.records.values() if r.student_id in ids), key=lambda r: r.work_date)

    def create_checkin(self, *, student_id, work_date, check_in_time, verified=True):
        for row in self.race_rows:
            self.records[row.attendance_id] = row
        self.race_rows = []
        if self.get_for_student_and_date(student_id, work_date):
            raise ConflictError("Record already exists")
        return self.add(student_id, work_date, check_in_time, None, verified).attendance_id

    def update_checkout(self, *, attendance_id, check_out_time):
        rec = self.records.get(int(attendance_id))
        if not rec or rec.check_out_time is not None or self.lose_checkout_race:
            return False
        self.records[rec.attendance_id] = replace(rec, check_out_time=check_out_time)
        return True

    def count_checked_in_days(self, student_id):
        self._check_reads()
        return sum(1 for r in self.records.values() if r.student_id == int(student_id) and r.check_in_time)


class FakeWeekRepo:
    def __init__(self):
        self.weeks: dict[int, Week] = {}
        self._next_id = 1
        self.fail_reads = False
        self.conflict_on_create: Week | None = None
        # status a concurrent reviewer sets right before our conditional update
        self.concurrent_status: WeekStatus | None = None

    def _store(self, week: Week) -> Week:
        self.weeks[week.week_id] = week
        return week

    def add(self, student_id: int, week_number: int, status: WeekStatus, content=None, **fields) -> Week:
        week = Week(
            week_id=self._next_id,
            student_id=int(student_id),
            week_number=int(week_number),
            status=status,
            content=content or WeekContent(),
            **fields,
        )
        self._next_id += 1
        return self._store(week)

    def _race(self, week_id):
        if self.concurrent_status is not None:
            w = self.weeks[int(week_id)]
            self._store(replace(w, status=self.concurrent_status))
            self.concurrent_status = None

    def get_by_id(self, week_id):
        return self.weeks.get(int(week_id))

    def get_for_student_and_number(self, student_id, week_number):
        return next(
            (w for w in self.weeks.values() if w.student_id == int(student_id) and w.week_number == int(week_number)),
            None,
        )

    def list_for_student(self, student_id):
        return sorted((w for w in self.weeks.values() if w.student_id == int(student_id)), key=lambda w: w.week_number)

    def count_by_status(self, student_id):
        if self.fail_reads:
            raise DatastoreError("Database request failed")
        counts: dict[WeekStatus, int] = {}
        for w in self.weeks.values():
            if w.student_id == int(student_id):
                counts[w.status] = counts.get(w.status, 0) + 1
        return counts

    def create(self, *, student_id, week_number, start_date, end_date, content, status, submitted_at):
        if self.conflict_on_create is not None:
            self._store(self.conflict_on_create)
            self.conflict_on_create = None
            raise ConflictError("Record already exists")
        if self.get_for_student_and_number(student_id, week_number):
            raise ConflictError("Record already exists")
        return self.add(
            student_id,
            week_number,
            status,
            content,
            start_date=start_date,
            end_date=end_date,
            submitted_at=submitted_at,
        ).week_id

    def update_content(
        self,
        *,
        week_id,
        expected_status,
        start_date,
        end_date,
        content,
        status,
        submitted_at,
        clear_rejection,
    ):
        self._race(week_id)
        w = self.weeks.get(int(week_id))
        if not w or w.status != expected_status:
            return False
        self._store(
            replace(
                w,
                start_date=start_date,
                end_date=end_date,
                content=content,
                status=status,
                submitted_at=submitted_at,
                rejection_reason=None if clear_rejection else w.rejection_reason,
            )
        )
        return True

    def forward(self, *, week_id, supervisor_id, comments, stamp_ref, at):
        self._race(week_id)
        w = self.weeks.get(int(week_id))
        if not w or w.status != WeekStatus.SUBMITTED:
            return False
        self._store(
            replace(
                w,
                status=WeekStatus.FORWARDED,
                industry_supervisor_id=supervisor_id,
                industry_supervisor_approved_at=at,
                industry_supervisor_comments=comments,
                stamp_ref=stamp_ref,
                reviewed_at=at,
            )
        )
        return True

    def approve(self, *, week_id, expected_status, supervisor_id, comments, score, at):
        self._race(week_id)
        w = self.weeks.get(int(week_id))
        if not w or w.status != expected_status:
            return False
        self._store(
            replace(
                w,
                status=WeekStatus.APPROVED,
                school_supervisor_id=supervisor_id,
                school_approved_at=at,
                school_supervisor_comments=comments,
                score=score,
                reviewed_at=at,
            )
        )
        return True

    def reject(self, *, week_id, expected_status, supervisor_id, supervisor_type, reason, comments, at):
        self._race(week_id)
        w = self.weeks.get(int(week_id))
        if not w or w.status != expected_status:
            return False
        if supervisor_type is SupervisorType.INDUSTRY:
            w = replace(w, industry_supervisor_id=supervisor_id, industry_supervisor_comments=comments)
        else:
            w = replace(w, school_supervisor_id=supervisor_id, school_supervisor_comments=comments)
        self._store(replace(w, status=WeekStatus.REJECTED, rejection_reason=reason, reviewed_at=at))
        return True


class FakeGradeRepo:
    """Grade rows plus the student lock, applied together like one transaction."""

    def __init__(self, students: FakeStudentRepo):
        self._students = students
        self.grades: dict[tuple[int, int], Grade] = {}
        self._next_id = 1
        self.save_calls = 0

    def get_latest_for_student(self, student_id):
        rows = [g for (sid, _), g in self.grades.items() if sid == int(student_id)]
        return max(rows, key=lambda g: (g.updated_at, g.grade_id)) if rows else None

    def save_and_lock(self, *, student_id, supervisor_id, breakdown, auto_calculated, remarks, at):
        self.save_calls += 1
        key = (int(student_id), int(supervisor_id))
        existing = self.grades.get(key)
        grade = Grade(
            grade_id=existing.grade_id if existing else self._next_id,
            student_id=int(student_id),
            supervisor_id=int(supervisor_id),
            attendance_score=breakdown.attendance_score,
            weekly_reports_score=breakdown.weekly_reports_score,
            supervisor_approval_score=breakdown.supervisor_approval_score,
            total_score=breakdown.total_score,
            grade=breakdown.grade,
            auto_calculated=auto_calculated,
            score_confidence=breakdown.score_confidence,
            remarks=remarks,
            created_at=existing.created_at if existing else at,
            updated_at=at,
        )
        if not existing:
            self._next_id += 1
        self.grades[key] = grade
        self._students.lock(student_id, at)
        return grade


def make_student(student_id=1, user_id=100, **fields) -> Student:
    defaults = dict(full_name=f"Student {student_id}", matric_no=f"MAT/{student_id:04d}", department="Computer Science")
    defaults.update(fields)
    return Student(student_id=student_id, user_id=user_id, **defaults)


def make_supervisor(supervisor_id=1, user_id=200, supervisor_type=SupervisorType.SCHOOL, **fields) -> Supervisor:
    defaults = dict(name=f"Supervisor {supervisor_id}", email=f"sup{supervisor_id}@example.edu", is_active=True)
    defaults.update(fields)
    return Supervisor(supervisor_id=supervisor_id, user_id=user_id, supervisor_type=supervisor_type, **defaults)


FIXED_NOW = datetime(2026, 3, 2, 9, 15, 30)
