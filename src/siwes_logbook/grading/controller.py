from __future__ import annotations

from flask import Flask

from ..common.http import json_body, ok, roles_required
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..core.principal import Principal
from ..container import Container
from .service import breakdown_payload, grade_payload


def register(app: Flask, container: Container) -> None:
    service = container.grading_service

    @app.route("/grading/submit-grade", methods=["POST"], endpoint="grading_submit")
    @roles_required(Role.SCHOOL_SUPERVISOR)
    def submit_grade(principal: Principal):
        body = json_body()
        student_id = body.get("student_id")
        if student_id is None or isinstance(student_id, bool):
            raise ValidationError("Student ID is required")
        try:
            student_id = int(student_id)
        except (TypeError, ValueError):
            raise ValidationError("Student ID must be an integer")

        grade, breakdown = service.submit_grade(
            principal,
            student_id,
            weekly_reports_override=body.get("weekly_reports_override"),
            remarks=body.get("remarks"),
        )
        data = grade_payload(grade)
        data["counts"] = breakdown_payload(breakdown)["counts"]
        return ok(data, message="Grade submitted successfully. Student account is now locked.")

    @app.route("/grading/get-grade/<int:student_id>", methods=["GET"], endpoint="grading_get")
    @roles_required(Role.STUDENT, Role.SCHOOL_SUPERVISOR)
    def get_grade(principal: Principal, student_id: int):
        grade = service.get_grade(principal, student_id)
        return ok(grade_payload(grade) if grade else None)

    @app.route("/grading/preview/<int:student_id>", methods=["GET"], endpoint="grading_preview")
    @roles_required(Role.SCHOOL_SUPERVISOR)
    def preview_grade(principal: Principal, student_id: int):
        return ok(breakdown_payload(service.preview_grade(principal, student_id)))
