from __future__ import annotations

from flask import Flask

from ..common.http import json_body, ok, roles_required
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..core.principal import Principal
from ..container import Container
from .model import WEEKDAYS
from .service import week_payload


def register(app: Flask, container: Container) -> None:
    service = container.week_service

    @app.route("/weeks/submit-week", methods=["POST"], endpoint="weeks_submit")
    @roles_required(Role.STUDENT)
    def submit_week(principal: Principal):
        body = json_body()
        if body.get("week_number") is None:
            raise ValidationError("Week number is required")

        # accept either {"activities": {...}} or flat monday_activity..saturday_activity fields
        activities = body.get("activities")
        if activities is None:
            activities = {day: body.get(f"{day}_activity") for day in WEEKDAYS}

        submit = body.get("submit", True)
        if not isinstance(submit, bool):
            raise ValidationError("submit must be true or false")

        week, created = service.save_week(
            principal.user_id,
            body.get("week_number"),
            activities=activities,
            comments=body.get("comments"),
            evidence_refs=body.get("evidence_refs"),
            submit=submit,
        )
        message = "Week submitted successfully" if submit else "Week saved as draft"
        return ok(week_payload(week), status=201 if created else 200, message=message)

    @app.route("/weeks/my", methods=["GET"], endpoint="weeks_mine")
    @roles_required(Role.STUDENT)
    def my_weeks(principal: Principal):
        return ok([week_payload(w) for w in service.my_weeks(principal.user_id)])

    @app.route("/weeks/student/<int:student_id>", methods=["GET"], endpoint="weeks_for_student")
    @roles_required(Role.SCHOOL_SUPERVISOR, Role.INDUSTRY_SUPERVISOR)
    def student_weeks(principal: Principal, student_id: int):
        return ok([week_payload(w) for w in service.student_weeks(principal, student_id)])

    @app.route("/weeks/review-week", methods=["POST"], endpoint="weeks_review")
    @roles_required(Role.SCHOOL_SUPERVISOR, Role.INDUSTRY_SUPERVISOR)
    def review_week(principal: Principal):
        body = json_body()
        week_id = body.get("week_id")
        action = body.get("action")
        if week_id is None or not action:
            raise ValidationError("Week ID and action are required")
        try:
            week_id = int(week_id)
        except (TypeError, ValueError):
            raise ValidationError("Week ID must be an integer")

        week = service.review_week(
            principal,
            week_id,
            action,
            comment=body.get("comment"),
            reason=body.get("reason"),
            score=body.get("score"),
            stamp_ref=body.get("stamp_ref"),
        )
        return ok(week_payload(week), message=f"Week {week.status.value} successfully")
