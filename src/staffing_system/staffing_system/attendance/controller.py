from __future__ import annotations

from flask import Flask, request

from ..common.api import auth_required, current_user_id, json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required = auth_required(container)
    service = container.attendance_service

    def _marked(result, created_message: str, updated_message: str):
        if result.created:
            return ok(201, message=created_message, data=result.record.as_dict())
        return ok(message=updated_message, data=result.record.as_dict())

    @app.route("/api/attendance", methods=["GET"], endpoint="list_attendance")
    @login_required
    def list_attendance():
        result = service.list_records(
            work_date=request.args.get("date"),
            shift=request.args.get("shift"),
            staff_id=request.args.get("staff_id"),
            status=request.args.get("status"),
        )
        return ok(**result)

    @app.route("/api/attendance", methods=["POST"], endpoint="mark_attendance")
    @login_required
    def mark_attendance():
        body = json_body()
        result = service.mark(
            staff_id=body.get("staff_id"),
            work_date=body.get("date"),
            shift=body.get("shift"),
            status=body.get("status"),
            remarks=body.get("remarks"),
            marked_by=current_user_id(),
        )
        return _marked(result, "Attendance marked", "Attendance updated")

    @app.route("/api/attendance/bulk", methods=["POST"], endpoint="mark_attendance_bulk")
    @login_required
    def mark_attendance_bulk():
        body = json_body()
        result = service.mark_bulk(body.get("attendance_records"), marked_by=current_user_id())
        return ok(
            message=f"Marked {result.success_count} records, {result.error_count} failed",
            success_count=result.success_count,
            error_count=result.error_count,
            results=[r.as_dict() for r in result.results],
            errors=[e.as_dict() for e in result.errors],
        )

    @app.route("/api/attendance/quick-mark", methods=["POST"], endpoint="quick_mark_attendance")
    @login_required
    def quick_mark_attendance():
        body = json_body()
        result = service.quick_mark(
            staff_ref=body.get("staff_id"),
            work_date=body.get("date"),
            remarks=body.get("remarks"),
            marked_by=current_user_id(),
        )
        return _marked(result, "Marked present", "Marked present")

    @app.route("/api/attendance/apply-leave", methods=["POST"], endpoint="apply_leave_day")
    @login_required
    def apply_leave_day():
        body = json_body()
        result = service.apply_leave_day(
            staff_ref=body.get("staff_id"),
            work_date=body.get("date"),
            remarks=body.get("remarks"),
            marked_by=current_user_id(),
        )
        return _marked(result, "Leave applied", "Leave applied")

    @app.route("/api/attendance/<attendance_id>", methods=["PUT"], endpoint="update_attendance")
    @login_required
    def update_attendance(attendance_id: str):
        body = json_body()
        record = service.update_record(
            attendance_id=attendance_id,
            status=body.get("status"),
            remarks=body.get("remarks"),
            marked_by=current_user_id(),
        )
        return ok(message="Attendance updated", data=record.as_dict())

    @app.route("/api/attendance/<attendance_id>", methods=["DELETE"], endpoint="delete_attendance")
    @login_required
    def delete_attendance(attendance_id: str):
        service.delete_record(attendance_id=attendance_id)
        return ok(message="Attendance record deleted")

    @app.route("/api/attendance/staff/<staff_id>", methods=["GET"], endpoint="staff_attendance")
    @login_required
    def staff_attendance(staff_id: str):
        result = service.records_for_staff(
            staff_id=staff_id,
            start_date=request.args.get("start_date"),
            end_date=request.args.get("end_date"),
        )
        return ok(**result)
