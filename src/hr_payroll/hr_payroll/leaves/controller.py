from __future__ import annotations

from flask import Flask, request

from ..container import Container
from ..core.scope import Scope
from ..web import hr_required, json_body, json_patch, ok


def register(app: Flask, container: Container) -> None:
    service = container.leave_service

    @app.route("/api/leaves", methods=["POST"], endpoint="api_leaves_apply")
    @hr_required
    def apply(scope: Scope):
        body = json_body()
        leave = service.apply(
            scope,
            body.get("employeeId"),
            body.get("leaveType"),
            body.get("startDate"),
            body.get("endDate"),
            body.get("reason"),
        )
        return ok(leave, 201)

    @app.route("/api/leaves/<int:request_id>/approve", methods=["PATCH"], endpoint="api_leaves_approve")
    @hr_required
    def approve(scope: Scope, request_id: int):
        body = json_body()
        return ok(service.approve(scope, request_id, body.get("approverId")))

    @app.route("/api/leaves/<int:request_id>/reject", methods=["PATCH"], endpoint="api_leaves_reject")
    @hr_required
    def reject(scope: Scope, request_id: int):
        body = json_body()
        return ok(service.reject(scope, request_id, body.get("approverId"), body.get("rejectionReason")))

    @app.route("/api/leaves/<int:request_id>/cancel", methods=["PATCH"], endpoint="api_leaves_cancel")
    @hr_required
    def cancel(scope: Scope, request_id: int):
        return ok(service.cancel(scope, request_id))

    @app.route("/api/leaves/statistics", methods=["GET"], endpoint="api_leaves_statistics")
    @hr_required
    def statistics(scope: Scope):
        stats = service.statistics(
            scope,
            employee_id=request.args.get("employeeId"),
            year=request.args.get("year"),
        )
        return ok(stats)

    @app.route("/api/leaves/<int:request_id>", methods=["GET"], endpoint="api_leaves_get")
    @hr_required
    def get_leave(scope: Scope, request_id: int):
        return ok(service.get(scope, request_id))

    @app.route("/api/leaves/<int:request_id>", methods=["PATCH"], endpoint="api_leaves_update")
    @hr_required
    def update_leave(scope: Scope, request_id: int):
        return ok(service.update(scope, request_id, json_patch()))

    @app.route("/api/leaves/<int:request_id>", methods=["DELETE"], endpoint="api_leaves_delete")
    @hr_required
    def delete_leave(scope: Scope, request_id: int):
        service.delete(scope, request_id)
        return ok(None)
