from __future__ import annotations

from flask import Flask

from ..container import Container
from ..core.scope import Scope
from ..web import hr_required, ok


def register(app: Flask, container: Container) -> None:
    service = container.report_service

    @app.route("/api/reports/dashboard", methods=["GET"], endpoint="api_reports_dashboard")
    @hr_required
    def dashboard(scope: Scope):
        return ok(service.dashboard(scope))

    @app.route("/api/reports/employees/<int:employee_id>/summary", methods=["GET"], endpoint="api_reports_summary")
    @hr_required
    def employee_summary(scope: Scope, employee_id: int):
        return ok(service.employee_summary(scope, employee_id))
