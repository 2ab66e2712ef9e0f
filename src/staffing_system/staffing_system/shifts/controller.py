from __future__ import annotations

from flask import Flask, request

from ..common.api import auth_required, current_user_id, json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required = auth_required(container)
    service = container.shift_service

    @app.route("/api/shift", methods=["GET"], endpoint="list_shifts")
    @login_required
    def list_shifts():
        data = service.list_shifts(
            staff_id=request.args.get("staff_id"),
            shift_date=request.args.get("shift_date"),
            shift_type=request.args.get("shift_type"),
            start_date=request.args.get("start_date"),
            end_date=request.args.get("end_date"),
        )
        return ok(count=len(data), data=data)

    @app.route("/api/shift", methods=["POST"], endpoint="add_shift")
    @login_required
    def add_shift():
        body = json_body()
        assignment = service.add(
            staff_id=body.get("staff_id"),
            shift_date=body.get("shift_date"),
            shift_type=body.get("shift_type"),
            start_time=body.get("start_time"),
            end_time=body.get("end_time"),
            notes=body.get("notes"),
            assigned_by=current_user_id(),
        )
        return ok(201, message="Shift assigned", data=assignment.as_dict())

    @app.route("/api/shift/schedule/daily", methods=["GET"], endpoint="daily_schedule")
    @login_required
    def daily_schedule():
        result = service.daily_schedule(
            shift_date=request.args.get("date"),
            shift_type=request.args.get("shift_type"),
        )
        return ok(data=result)

    @app.route("/api/shift/stats/summary", methods=["GET"], endpoint="shift_statistics")
    @login_required
    def shift_statistics():
        stats = service.statistics(
            staff_id=request.args.get("staff_id"),
            month=request.args.get("month"),
            year=request.args.get("year"),
            shift_type=request.args.get("shift_type"),
        )
        return ok(data=stats)

    @app.route("/api/shift/staff/<staff_id>", methods=["GET"], endpoint="staff_shifts")
    @login_required
    def staff_shifts(staff_id: str):
        result = service.for_staff(
            staff_id=staff_id,
            start_date=request.args.get("start_date"),
            end_date=request.args.get("end_date"),
        )
        return ok(**result)

    @app.route("/api/shift/<shift_id>", methods=["GET"], endpoint="get_shift")
    @login_required
    def get_shift(shift_id: str):
        return ok(data=service.get(shift_assignment_id=shift_id))

    @app.route("/api/shift/<shift_id>", methods=["PUT"], endpoint="update_shift")
    @login_required
    def update_shift(shift_id: str):
        body = json_body()
        assignment = service.update(
            shift_assignment_id=shift_id,
            shift_type=body.get("shift_type"),
            start_time=body.get("start_time"),
            end_time=body.get("end_time"),
            notes=body.get("notes"),
        )
        return ok(message="Shift updated", data=assignment.as_dict())

    @app.route("/api/shift/<shift_id>", methods=["DELETE"], endpoint="delete_shift")
    @login_required
    def delete_shift(shift_id: str):
        service.delete(shift_assignment_id=shift_id)
        return ok(message="Shift assignment deleted")
