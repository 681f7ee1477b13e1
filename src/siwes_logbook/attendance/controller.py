from __future__ import annotations

from flask import Flask

from ..common.http import ok, roles_required
from ..core.enums import Role
from ..core.principal import Principal
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    @roles_required(Role.STUDENT)
    def check_in(principal: Principal):
        data = service.check_in(principal.user_id)
        return ok(data, status=201, message="Check-in successful!")

    @app.route("/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    @roles_required(Role.STUDENT)
    def check_out(principal: Principal):
        data = service.check_out(principal.user_id)
        return ok(data, message="Check-out successful!")

    @app.route("/attendance/today", methods=["GET"], endpoint="attendance_today")
    @roles_required(Role.STUDENT)
    def today(principal: Principal):
        return ok(service.today_status(principal.user_id))

    @app.route("/attendance/history", methods=["GET"], endpoint="attendance_history")
    @roles_required(Role.STUDENT)
    def history(principal: Principal):
        return ok(service.history(principal.user_id))

    @app.route("/attendance/student/<int:student_id>", methods=["GET"], endpoint="attendance_for_student")
    @roles_required(Role.SCHOOL_SUPERVISOR)
    def student_attendance(principal: Principal, student_id: int):
        return ok(service.student_attendance(principal, student_id))

    @app.route("/attendance/supervisor/summary", methods=["GET"], endpoint="attendance_supervisor_summary")
    @roles_required(Role.SCHOOL_SUPERVISOR)
    def supervisor_summary(principal: Principal):
        return ok(service.supervisor_summary(principal))
