from __future__ import annotations

from flask import Flask, request

from ..container import Container
from ..core.scope import Scope
from ..web import hr_required, json_body, json_patch, ok


def register(app: Flask, container: Container) -> None:
    service = container.payroll_service

    @app.route("/api/payroll/generate", methods=["POST"], endpoint="api_payroll_generate")
    @hr_required
    def generate(scope: Scope):
        body = json_body()
        statement = service.generate(scope, body.get("employeeId"), body.get("month"), body.get("year"))
        return ok(statement, 201)

    @app.route("/api/payroll/<int:payroll_id>/mark-paid", methods=["PATCH"], endpoint="api_payroll_mark_paid")
    @hr_required
    def mark_paid(scope: Scope, payroll_id: int):
        body = json_body()
        statement = service.mark_paid(scope, payroll_id, body.get("paymentMethod"), body.get("transactionId"))
        return ok(statement)

    @app.route("/api/payroll/statistics", methods=["GET"], endpoint="api_payroll_statistics")
    @hr_required
    def statistics(scope: Scope):
        stats = service.statistics(scope, year=request.args.get("year"), month=request.args.get("month"))
        return ok(stats)

    @app.route("/api/payroll/<int:payroll_id>", methods=["GET"], endpoint="api_payroll_get")
    @hr_required
    def get_statement(scope: Scope, payroll_id: int):
        return ok(service.get(scope, payroll_id))

    @app.route("/api/payroll/<int:payroll_id>", methods=["PATCH"], endpoint="api_payroll_edit")
    @hr_required
    def edit_statement(scope: Scope, payroll_id: int):
        return ok(service.edit(scope, payroll_id, json_patch()))

    @app.route("/api/payroll/<int:payroll_id>", methods=["DELETE"], endpoint="api_payroll_delete")
    @hr_required
    def delete_statement(scope: Scope, payroll_id: int):
        service.delete(scope, payroll_id)
        return ok(None)
