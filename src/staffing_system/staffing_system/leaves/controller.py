from __future__ import annotations

from flask import Flask, request

from ..common.api import auth_required, current_user_id, json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required = auth_required(container)
    service = container.leave_service

    @app.route("/api/leave", methods=["GET"], endpoint="list_leaves")
    @login_required
    def list_leaves():
        data = service.list_leaves(
            staff_id=request.args.get("staff_id"),
            status=request.args.get("status"),
            leave_type=request.args.get("leave_type"),
            start_date=request.args.get("start_date"),
            end_date=request.args.get("end_date"),
        )
        return ok(count=len(data), data=data)

    @app.route("/api/leave/apply", methods=["POST"], endpoint="apply_leave")
    @login_required
    def apply_leave():
        body = json_body()
        leave = service.apply(
            staff_id=body.get("staff_id"),
            leave_type=body.get("leave_type"),
            start_date=body.get("start_date"),
            end_date=body.get("end_date"),
            reason=body.get("reason"),
        )
        return ok(201, message="Leave application submitted", data=leave.as_dict())

    @app.route("/api/leave/stats/summary", methods=["GET"], endpoint="leave_statistics")
    @login_required
    def leave_statistics():
        stats = service.statistics(
            staff_id=request.args.get("staff_id"),
            month=request.args.get("month"),
            year=request.args.get("year"),
        )
        return ok(data=stats)

    @app.route("/api/leave/staff/<staff_id>", methods=["GET"], endpoint="staff_leaves")
    @login_required
    def staff_leaves(staff_id: str):
        return ok(**service.for_staff(staff_id=staff_id))

    @app.route("/api/leave/<leave_id>", methods=["GET"], endpoint="get_leave")
    @login_required
    def get_leave(leave_id: str):
        return ok(data=service.get(leave_id=leave_id))

    @app.route("/api/leave/<leave_id>/approve", methods=["PUT"], endpoint="approve_leave")
    @login_required
    def approve_leave(leave_id: str):
        leave = service.approve(
            leave_id=leave_id,
            approved_by=current_user_id(),
            remarks=json_body().get("remarks"),
        )
        return ok(message="Leave approved", data=leave.as_dict())

    @app.route("/api/leave/<leave_id>/reject", methods=["PUT"], endpoint="reject_leave")
    @login_required
    def reject_leave(leave_id: str):
        leave = service.reject(
            leave_id=leave_id,
            rejected_by=current_user_id(),
            remarks=json_body().get("remarks"),
        )
        return ok(message="Leave rejected", data=leave.as_dict())

    @app.route("/api/leave/<leave_id>/cancel", methods=["PUT"], endpoint="cancel_leave")
    @login_required
    def cancel_leave(leave_id: str):
        leave = service.cancel(leave_id=leave_id)
        return ok(message="Leave cancelled", data=leave.as_dict())
