from __future__ import annotations

import io

from flask import Flask, g, jsonify, request, send_file

from ..auth.guards import build_auth_required
from ..common.http import json_body, ok, query_int
from ..core.constants import DEFAULT_USAGE_LIMIT
from ..core.enums import Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth_required = build_auth_required(container)
    equipment = container.equipment_service
    maintenance = container.maintenance_service
    damage = container.damage_report_service
    usage = container.equipment_usage_service

    # -------- Equipment --------
    @app.route("/api/equipment", methods=["GET"], endpoint="list_equipment")
    @auth_required()
    def list_equipment():
        rows = equipment.list_equipment(status=request.args.get("status"), assigned_to=query_int("assignedTo"))
        return jsonify(ok([e.to_dict() for e in rows]))

    @app.route("/api/equipment", methods=["POST"], endpoint="create_equipment")
    @auth_required(Role.ADMIN, Role.INVENTORY_MANAGER)
    def create_equipment():
        item = equipment.create_equipment(body=json_body())
        return jsonify(ok(item.to_dict(), message="Equipment created")), 201

    @app.route("/api/equipment/<int:equipment_id>", methods=["GET"], endpoint="equipment_detail")
    @auth_required()
    def equipment_detail(equipment_id: int):
        return jsonify(ok(equipment.get_equipment(equipment_id).to_dict()))

    @app.route("/api/equipment/<int:equipment_id>", methods=["PATCH"], endpoint="update_equipment")
    @auth_required(Role.ADMIN, Role.INVENTORY_MANAGER)
    def update_equipment(equipment_id: int):
        item = equipment.update_equipment(equipment_id=equipment_id, body=json_body())
        return jsonify(ok(item.to_dict(), message="Equipment updated"))

    @app.route("/api/equipment/<int:equipment_id>/qr.png", methods=["GET"], endpoint="equipment_qr")
    @auth_required()
    def equipment_qr(equipment_id: int):
        png = equipment.qr_png(equipment_id)
        return send_file(io.BytesIO(png), mimetype="image/png")

    @app.route("/api/equipment/scan", methods=["GET"], endpoint="scan_equipment")
    @auth_required()
    def scan_equipment():
        result = equipment.scan(g.current_user, code=request.args.get("code"))
        data = result.equipment.to_dict()
        data["current_holder"] = (
            {"id": result.holder.user_id, "full_name": result.holder.full_name} if result.holder else None
        )
        return jsonify(ok(data))

    @app.route("/api/equipment/checkout", methods=["POST"], endpoint="checkout_equipment")
    @auth_required(Role.ADMIN, Role.INVENTORY_MANAGER)
    def checkout_equipment():
        body = json_body()
        assignment = equipment.checkout(
            g.current_user,
            equipment_id=body.get("equipmentId"),
            operator_id=body.get("operatorId"),
            notes=body.get("notes"),
        )
        return jsonify(ok(assignment.to_dict(), message="Equipment checked out successfully"))

    @app.route("/api/equipment/<int:equipment_id>/return", methods=["POST"], endpoint="return_equipment")
    @auth_required()
    def return_equipment(equipment_id: int):
        item = equipment.return_equipment(g.current_user, equipment_id=equipment_id, notes=json_body().get("notes"))
        return jsonify(ok(item.to_dict(), message="Equipment returned"))

    @app.route("/api/equipment/<int:equipment_id>/assignments", methods=["GET"], endpoint="equipment_assignments")
    @auth_required()
    def equipment_assignments(equipment_id: int):
        return jsonify(ok([a.to_dict() for a in equipment.assignments(equipment_id=equipment_id)]))

    @app.route("/api/operator/<int:operator_id>/equipment", methods=["GET"], endpoint="operator_equipment")
    @auth_required()
    def operator_equipment(operator_id: int):
        rows = equipment.operator_equipment(g.current_user, operator_id=operator_id)
        return jsonify(ok([e.to_dict() for e in rows]))

    # -------- Turn-in requests --------
    @app.route("/api/equipment/turn-in-requests", methods=["POST"], endpoint="create_turn_in")
    @auth_required()
    def create_turn_in():
        req = maintenance.create_turn_in(g.current_user, body=json_body())
        return jsonify(ok(req.to_dict(), message="Turn-in request submitted successfully")), 201

    @app.route("/api/equipment/turn-in-requests", methods=["GET"], endpoint="list_turn_ins")
    @auth_required()
    def list_turn_ins():
        rows = maintenance.list_turn_ins(
            g.current_user,
            status=request.args.get("status"),
            equipment_id=query_int("equipmentId"),
        )
        return jsonify(ok([r.to_dict() for r in rows]))

    @app.route("/api/equipment/turn-in-requests/<int:request_id>", methods=["PATCH"], endpoint="update_turn_in")
    @auth_required(Role.ADMIN)
    def update_turn_in(request_id: int):
        req = maintenance.update_turn_in(g.current_user, request_id=request_id, body=json_body())
        return jsonify(ok(req.to_dict(), message="Turn-in request updated successfully"))

    # -------- Maintenance alerts --------
    @app.route("/api/equipment/maintenance-alerts", methods=["GET"], endpoint="maintenance_alerts")
    @auth_required(Role.ADMIN)
    def maintenance_alerts():
        rows = maintenance.list_alerts(resolved=request.args.get("resolved"))
        return jsonify(ok([a.to_dict() for a in rows]))

    @app.route(
        "/api/equipment/maintenance-alerts/<int:alert_id>/resolve",
        methods=["POST"],
        endpoint="resolve_maintenance_alert",
    )
    @auth_required(Role.ADMIN)
    def resolve_maintenance_alert(alert_id: int):
        alert = maintenance.resolve_alert(alert_id=alert_id)
        return jsonify(ok(alert.to_dict(), message="Maintenance alert resolved"))

    # -------- Damage reports --------
    @app.route("/api/equipment/damage-reports", methods=["POST"], endpoint="create_damage_report")
    @auth_required()
    def create_damage_report():
        report = damage.report(g.current_user, body=json_body())
        return jsonify(ok(report.to_dict(), message="Damage report submitted successfully")), 201

    @app.route("/api/equipment/damage-reports", methods=["GET"], endpoint="list_damage_reports")
    @auth_required()
    def list_damage_reports():
        rows = damage.list_reports(
            g.current_user,
            equipment_id=query_int("equipmentId"),
            status=request.args.get("status"),
        )
        return jsonify(ok([r.to_dict() for r in rows]))

    @app.route("/api/equipment/damage-reports/<int:report_id>", methods=["PATCH"], endpoint="review_damage_report")
    @auth_required(Role.ADMIN)
    def review_damage_report(report_id: int):
        report = damage.review(g.current_user, report_id=report_id, body=json_body())
        return jsonify(ok(report.to_dict(), message="Damage report updated successfully"))

    # -------- Usage --------
    @app.route("/api/equipment-usage", methods=["POST"], endpoint="record_equipment_usage")
    @auth_required()
    def record_equipment_usage():
        row = usage.record(g.current_user, body=json_body())
        return jsonify(ok(row.to_dict(), message="Equipment usage recorded successfully")), 201

    @app.route("/api/equipment-usage", methods=["GET"], endpoint="list_equipment_usage")
    @auth_required()
    def list_equipment_usage():
        rows = usage.list_usage(
            g.current_user,
            job_id=query_int("job_order_id"),
            operator_id=query_int("operator_id"),
            equipment_type=request.args.get("equipment_type"),
            limit=query_int("limit", DEFAULT_USAGE_LIMIT),
        )
        return jsonify(ok([r.to_dict() for r in rows]))

    @app.route("/api/equipment/<int:equipment_id>/usage-history", methods=["GET"], endpoint="equipment_usage_history")
    @auth_required()
    def equipment_usage_history(equipment_id: int):
        rows = usage.usage_history(equipment_id=equipment_id, limit=query_int("limit", DEFAULT_USAGE_LIMIT))
        return jsonify(ok([r.to_dict() for r in rows]))
