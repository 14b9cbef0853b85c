from __future__ import annotations

from flask import Flask, request

from ..common.web import current_actor, json_body, login_required, ok, roles_required
from ..common.validators import require_int
from ..core.enums import Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    marking_roles = (Role.ADMIN, Role.HR, Role.SUPERVISOR)

    @app.route("/attendance", methods=["POST"], endpoint="mark_attendance")
    @roles_required(*marking_roles)
    def mark_attendance():
        actor = current_actor()
        data = json_body()
        result = container.attendance_service.mark_attendance(
            current_role=actor.role,
            actor_id=actor.identity_id,
            employee_id=require_int(data.get("employeeId"), "employeeId"),
            work_date=data.get("date"),
            status=data.get("status"),
            time_in=data.get("timeIn"),
            time_out=data.get("timeOut"),
        )
        return ok(result.as_dict(), 201 if result.created else 200)

    @app.route("/attendance", methods=["GET"], endpoint="list_attendance")
    @login_required
    def list_attendance():
        actor = current_actor()
        rows = container.attendance_service.list_attendance(
            current_role=actor.role,
            actor_id=actor.identity_id,
            day=request.args.get("date") or None,
            start=request.args.get("startDate") or None,
            end=request.args.get("endDate") or None,
        )
        return ok([r.as_dict() for r in rows], count=len(rows))

    @app.route("/attendance/<int:attendance_id>", methods=["PUT"], endpoint="correct_attendance")
    @roles_required(*marking_roles)
    def correct_attendance(attendance_id: int):
        actor = current_actor()
        data = json_body()
        record = container.attendance_service.correct_attendance(
            current_role=actor.role,
            actor_id=actor.identity_id,
            attendance_id=attendance_id,
            status=data.get("status"),
            time_in=data.get("timeIn"),
            time_out=data.get("timeOut"),
        )
        return ok(record.as_dict())

    @app.route("/attendance/<int:attendance_id>", methods=["DELETE"], endpoint="delete_attendance")
    @roles_required(Role.ADMIN, Role.HR)
    def delete_attendance(attendance_id: int):
        container.attendance_service.delete_attendance(current_role=current_actor().role, attendance_id=attendance_id)
        return ok(message="Attendance record deleted")

    @app.route("/attendance/reports/attendance-summary", methods=["GET"], endpoint="attendance_summary")
    @roles_required(Role.ADMIN, Role.HR)
    def attendance_summary():
        report = container.payroll_report_service.build_summary_report(
            request.args.get("startDate"),
            request.args.get("endDate"),
        )
        return ok(report.rows, startDate=report.start.isoformat(), endDate=report.end.isoformat())

    # ===== Modification requests =====

    @app.route("/attendance/request-modification", methods=["POST"], endpoint="request_modification")
    @roles_required(Role.SUPERVISOR)
    def request_modification():
        actor = current_actor()
        data = json_body()
        changes = data.get("requestedChanges") or {}
        created = container.modification_service.create(
            current_role=actor.role,
            actor_id=actor.identity_id,
            employee_id=require_int(data.get("employeeId"), "employeeId"),
            work_date=data.get("date"),
            reason=data.get("reason"),
            status=changes.get("status"),
            time_in=changes.get("timeIn"),
            time_out=changes.get("timeOut"),
        )
        return ok(created.as_dict(), 201)

    @app.route("/attendance/modification-requests", methods=["GET"], endpoint="modification_requests")
    @roles_required(Role.ADMIN, Role.HR)
    def modification_requests():
        rows = container.modification_service.list_pending(current_role=current_actor().role)
        return ok([r.as_dict() for r in rows], count=len(rows))

    @app.route(
        "/attendance/modification-requests/<int:request_id>",
        methods=["PUT"],
        endpoint="decide_modification_request",
    )
    @roles_required(Role.ADMIN, Role.HR)
    def decide_modification_request(request_id: int):
        actor = current_actor()
        data = json_body()
        decided = container.modification_service.decide(
            current_role=actor.role,
            actor_id=actor.identity_id,
            request_id=request_id,
            decision=data.get("status"),
            note=data.get("approvalNote"),
        )
        return ok(decided.as_dict())
