from __future__ import annotations

from datetime import date
from typing import Optional

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date
from ..container import Container
from ..core.scope import Scope
from ..web import hr_required, json_body, json_patch, ok


def _optional_date(name: str) -> Optional[date]:
    value = request.args.get(name)
    return parse_iso_date(value) if value else None


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="api_attendance_check_in")
    @hr_required
    def check_in(scope: Scope):
        body = json_body()
        record = service.check_in(scope, body.get("employeeId"), location=body.get("location"))
        return ok(record, 201)

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="api_attendance_check_out")
    @hr_required
    def check_out(scope: Scope):
        body = json_body()
        record = service.check_out(scope, body.get("employeeId"))
        return ok(record)

    @app.route("/api/attendance/statistics", methods=["GET"], endpoint="api_attendance_statistics")
    @hr_required
    def statistics(scope: Scope):
        stats = service.statistics(
            scope,
            employee_id=request.args.get("employeeId"),
            month=request.args.get("month"),
            year=request.args.get("year"),
            start_date=_optional_date("startDate"),
            end_date=_optional_date("endDate"),
        )
        return ok(stats)

    @app.route("/api/attendance/<int:attendance_id>", methods=["GET"], endpoint="api_attendance_get")
    @hr_required
    def get_record(scope: Scope, attendance_id: int):
        return ok(service.get(scope, attendance_id))

    @app.route("/api/attendance/<int:attendance_id>", methods=["PATCH"], endpoint="api_attendance_edit")
    @hr_required
    def edit_record(scope: Scope, attendance_id: int):
        return ok(service.manual_edit(scope, attendance_id, json_patch()))

    @app.route("/api/attendance/<int:attendance_id>", methods=["DELETE"], endpoint="api_attendance_delete")
    @hr_required
    def delete_record(scope: Scope, attendance_id: int):
        service.delete(scope, attendance_id)
        return ok(None)
