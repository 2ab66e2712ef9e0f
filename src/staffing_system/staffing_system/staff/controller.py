from __future__ import annotations

from flask import Flask, request

from ..common.api import auth_required, json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required = auth_required(container)
    service = container.staff_service

    @app.route("/api/staff", methods=["GET"], endpoint="list_staff")
    @login_required
    def list_staff():
        result = service.list_staff(
            shift=request.args.get("shift"),
            work_date=request.args.get("date"),
        )
        return ok(**result)

    @app.route("/api/staff", methods=["POST"], endpoint="create_staff")
    @login_required
    def create_staff():
        body = json_body()
        member = service.create(
            name=body.get("name"),
            role=body.get("role"),
            shift=body.get("shift"),
            email=body.get("email"),
        )
        return ok(201, message="Staff member created", data=member.as_dict())

    @app.route("/api/staff/<staff_id>", methods=["GET"], endpoint="get_staff")
    @login_required
    def get_staff(staff_id: str):
        return ok(data=service.get(staff_id=staff_id, work_date=request.args.get("date")))

    @app.route("/api/staff/<staff_id>", methods=["PUT"], endpoint="update_staff")
    @login_required
    def update_staff(staff_id: str):
        body = json_body()
        member = service.update(
            staff_id=staff_id,
            name=body.get("name"),
            role=body.get("role"),
            shift=body.get("shift"),
            email=body.get("email"),
        )
        return ok(message="Staff member updated", data=member.as_dict())

    @app.route("/api/staff/<staff_id>", methods=["DELETE"], endpoint="delete_staff")
    @login_required
    def delete_staff(staff_id: str):
        service.delete(staff_id=staff_id)
        return ok(message="Staff member deleted")

    @app.route("/api/staff/<staff_ref>/weekly-stats", methods=["GET"], endpoint="staff_weekly_stats")
    @login_required
    def staff_weekly_stats(staff_ref: str):
        return ok(data=service.weekly_stats(ref=staff_ref))
