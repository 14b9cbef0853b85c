from __future__ import annotations

from flask import Flask, request

from ..common.web import ok, roles_required
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/reports/attendance-monthly", methods=["GET"], endpoint="attendance_monthly_report")
    @roles_required(Role.ADMIN, Role.HR)
    def attendance_monthly_report():
        year, month = request.args.get("year"), request.args.get("month")
        if not year or not month:
            raise ValidationError("year and month are required")

        report = container.payroll_report_service.build_monthly_report(year, month)
        return ok(report.rows, startDate=report.start.isoformat(), endDate=report.end.isoformat())
