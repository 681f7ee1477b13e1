from __future__ import annotations

from dataclasses import fields

import pytest

from siwes_logbook.assignments.resolver import AssignmentResolver
from siwes_logbook.attendance.service import AttendanceService
from siwes_logbook.container import Container
from siwes_logbook.core.enums import SupervisorType, WeekStatus
from siwes_logbook.grading.service import GradingService
from siwes_logbook.locking.gate import LockingGate
from siwes_logbook.main import create_app
from siwes_logbook.weeks.service import WeekService
from tests.fakes import (
    FIXED_NOW,
    FakeAssignmentRepo,
    FakeAttendanceRepo,
    FakeGradeRepo,
    FakeStudentRepo,
    FakeWeekRepo,
    make_student,
    make_supervisor,
)


class Stack:
    def __init__(self):
        self.students = FakeStudentRepo([make_student()])
        self.assignments = FakeAssignmentRepo()
        self.attendance = FakeAttendanceRepo()
        self.weeks = FakeWeekRepo()
        self.grades = FakeGradeRepo(self.students)

        school = self.assignments.add_supervisor(make_supervisor(1, 200, SupervisorType.SCHOOL))
        industry = self.assignments.add_supervisor(make_supervisor(2, 300, SupervisorType.INDUSTRY))
        self.assignments.assign(school, 1)
        self.assignments.assign(industry, 1)

        clock = lambda: FIXED_NOW  # noqa: E731
        resolver = AssignmentResolver(self.assignments)
        gate = LockingGate(self.students)
        self.container = Container(
            attendance_service=AttendanceService(self.attendance, self.students, resolver, gate, clock=clock),
            week_service=WeekService(self.weeks, self.students, resolver, gate, clock=clock),
            grading_service=GradingService(
                self.grades, self.students, self.attendance, self.weeks, resolver, clock=clock
            ),
        )


@pytest.fixture()
def stack(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    return Stack()


@pytest.fixture()
def client(stack):
    app = create_app(container=stack.container)
    return app.test_client()


def login(client, user_id, role):
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["role"] = role


def test_requires_session(client):
    r = client.post("/attendance/check-in")
    assert r.status_code == 401
    assert r.get_json() == {
        "success": False,
        "error": {"code": "unauthenticated", "message": "Authentication required"},
    }


def test_wrong_role_is_forbidden(client):
    login(client, 200, "school_supervisor")
    r = client.post("/attendance/check-in")
    assert r.status_code == 403
    assert r.get_json()["error"]["code"] == "forbidden"


def test_check_in_then_duplicate(client, stack):
    login(client, 100, "student")

    first = client.post("/attendance/check-in")
    second = client.post("/attendance/check-in")

    assert first.status_code == 201
    assert first.get_json()["data"]["time"] == "09:15:30"
    assert second.status_code == 400
    assert second.get_json()["error"]["code"] == "already_checked_in"
    assert len(stack.attendance.records) == 1


def test_locked_student_cannot_check_in(client, stack):
    stack.students.lock(1, FIXED_NOW)
    login(client, 100, "student")

    r = client.post("/attendance/check-in")

    assert r.status_code == 403
    assert r.get_json()["error"]["code"] == "locked"
    assert stack.attendance.records == {}


def test_submit_week_creates_then_updates(client):
    login(client, 100, "student")
    body = {"week_number": 3, "monday_activity": "Network setup", "comments": "ok"}

    created = client.post("/weeks/submit-week", json=body)
    updated = client.post("/weeks/submit-week", json={**body, "submit": False})

    assert created.status_code == 201
    assert created.get_json()["data"]["status"] == "submitted"
    assert created.get_json()["data"]["monday_activity"] == "Network setup"
    # a submitted week cannot go back to draft
    assert updated.status_code == 400
    assert updated.get_json()["error"]["code"] == "illegal_transition"


def test_submit_week_resubmission_returns_200(client):
    login(client, 100, "student")
    client.post("/weeks/submit-week", json={"week_number": 3, "activities": {"monday": "a"}})

    r = client.post("/weeks/submit-week", json={"week_number": 3, "activities": {"monday": "b"}})

    assert r.status_code == 200
    assert r.get_json()["data"]["monday_activity"] == "b"


@pytest.mark.parametrize("body", [{}, {"week_number": 25}, {"week_number": 2, "submit": "yes"}])
def test_submit_week_validation(client, body):
    login(client, 100, "student")
    r = client.post("/weeks/submit-week", json=body)
    assert r.status_code == 400
    assert r.get_json()["success"] is False


def test_review_flow_and_conflict(client, stack):
    week = stack.weeks.add(1, 1, WeekStatus.SUBMITTED)

    login(client, 300, "industry_supervisor")
    fwd = client.post("/weeks/review-week", json={"week_id": week.week_id, "action": "forward"})
    assert fwd.status_code == 200
    assert fwd.get_json()["data"]["status"] == "forwarded"

    login(client, 200, "school_supervisor")
    stack.weeks.concurrent_status = WeekStatus.REJECTED
    r = client.post("/weeks/review-week", json={"week_id": week.week_id, "action": "approve"})
    assert r.status_code == 409
    assert r.get_json()["error"]["code"] == "conflict"


def test_review_requires_week_and_action(client):
    login(client, 200, "school_supervisor")
    r = client.post("/weeks/review-week", json={"action": "approve"})
    assert r.status_code == 400


def test_unknown_week_is_404(client):
    login(client, 200, "school_supervisor")
    r = client.post("/weeks/review-week", json={"week_id": 999, "action": "approve"})
    assert r.status_code == 404


def test_submit_grade_locks_student(client, stack):
    for n in range(1, 5):
        stack.weeks.add(1, n, WeekStatus.APPROVED)
    login(client, 200, "school_supervisor")

    r = client.post("/grading/submit-grade", json={"student_id": 1, "remarks": "Good"})

    assert r.status_code == 200
    data = r.get_json()["data"]
    assert data["weekly_reports_score"] == 2.5
    assert data["supervisor_approval_score"] == 5.0
    assert data["counts"]["approved_weeks"] == 4
    assert stack.students.get_by_id(1).siwes_locked is True

    login(client, 100, "student")
    blocked = client.post("/attendance/check-in")
    assert blocked.status_code == 403
    assert blocked.get_json()["error"]["code"] == "locked"


def test_submit_grade_rejects_bad_override(client, stack):
    login(client, 200, "school_supervisor")
    r = client.post("/grading/submit-grade", json={"student_id": 1, "weekly_reports_override": 16})
    assert r.status_code == 400
    assert stack.grades.save_calls == 0


def test_submit_grade_needs_student_id(client):
    login(client, 200, "school_supervisor")
    r = client.post("/grading/submit-grade", json={})
    assert r.status_code == 400


def test_degraded_grade_submission_is_503(client, stack):
    stack.attendance.fail_reads = True
    login(client, 200, "school_supervisor")

    r = client.post("/grading/submit-grade", json={"student_id": 1})

    assert r.status_code == 503
    assert r.get_json()["error"]["code"] == "datastore_unavailable"
    assert stack.students.get_by_id(1).siwes_locked is False


def test_get_grade_before_and_after(client):
    login(client, 100, "student")
    assert client.get("/grading/get-grade/1").get_json()["data"] is None

    login(client, 200, "school_supervisor")
    client.post("/grading/submit-grade", json={"student_id": 1})

    login(client, 100, "student")
    data = client.get("/grading/get-grade/1").get_json()["data"]
    assert data["grade"] == "F"
    assert data["breakdown"]["total"]["max"] == 30


def test_preview_reports_confidence(client, stack):
    stack.weeks.fail_reads = True
    login(client, 200, "school_supervisor")

    data = client.get("/grading/preview/1").get_json()["data"]

    assert data["score_confidence"] == "degraded"
    assert stack.grades.save_calls == 0


def test_unknown_route_uses_error_shape(client):
    r = client.get("/nope")
    assert r.status_code == 404
    assert r.get_json()["error"]["code"] == "not_found"


def test_container_exposes_only_services():
    assert [f.name for f in fields(Container)] == ["attendance_service", "week_service", "grading_service"]


def test_today_shows_supervisors_and_lock(client, stack):
    login(client, 100, "student")

    data = client.get("/attendance/today").get_json()["data"]

    assert data["siwes_locked"] is False
    assert data["supervisors"]["school"]["name"] == "Supervisor 1"
    assert data["supervisors"]["industry"]["name"] == "Supervisor 2"


def test_student_attendance_route_reports_lock(client, stack):
    stack.students.lock(1, FIXED_NOW)
    login(client, 200, "school_supervisor")

    data = client.get("/attendance/student/1").get_json()["data"]

    assert data["siwes_locked"] is True
    assert data["stats"]["verified_days"] == 0
