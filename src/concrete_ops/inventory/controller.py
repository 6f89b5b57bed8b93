from __future__ import annotations

from flask import Flask, g, jsonify

from ..auth.guards import build_auth_required
from ..common.http import json_body, ok, query_flag, query_int
from ..core.enums import Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth_required = build_auth_required(container)
    inventory = container.inventory_service

    @app.route("/api/inventory", methods=["GET"], endpoint="list_inventory")
    @auth_required()
    def list_inventory():
        items = inventory.list_items(low_stock_only=query_flag("lowStock"))
        return jsonify(ok([i.to_dict() for i in items], lowStockCount=sum(1 for i in items if i.is_low_stock)))

    @app.route("/api/inventory", methods=["POST"], endpoint="create_inventory_item")
    @auth_required(Role.ADMIN, Role.INVENTORY_MANAGER)
    def create_inventory_item():
        item = inventory.create_item(g.current_user, body=json_body())
        return jsonify(ok(item.to_dict(), message="Inventory item created")), 201

    @app.route("/api/inventory/<int:inventory_id>", methods=["GET"], endpoint="inventory_detail")
    @auth_required()
    def inventory_detail(inventory_id: int):
        return jsonify(ok(inventory.get_item(inventory_id).to_dict()))

    @app.route("/api/inventory/<int:inventory_id>/add-stock", methods=["POST"], endpoint="add_inventory_stock")
    @auth_required(Role.ADMIN, Role.INVENTORY_MANAGER)
    def add_inventory_stock(inventory_id: int):
        body = json_body()
        change = inventory.add_stock(
            g.current_user,
            inventory_id=inventory_id,
            quantity=body.get("quantity"),
            notes=body.get("notes"),
        )
        return jsonify(
            ok(
                {"quantity_before": change.quantity_before, "quantity_after": change.quantity_after},
                message="Stock added successfully",
            )
        )

    @app.route("/api/inventory/<int:inventory_id>/assign", methods=["POST"], endpoint="assign_inventory")
    @auth_required(Role.ADMIN, Role.INVENTORY_MANAGER)
    def assign_inventory(inventory_id: int):
        body = json_body()
        unit = inventory.assign(
            g.current_user,
            inventory_id=inventory_id,
            operator_id=body.get("operator_id"),
            serial_number=body.get("serial_number"),
            notes=body.get("notes"),
        )
        return jsonify(
            ok(
                {
                    "equipment_id": unit.equipment_id,
                    "serial_number": unit.serial_number,
                    "qr_code": unit.qr_code,
                    "operator_id": unit.operator.user_id,
                    "operator_name": unit.operator.full_name,
                    "quantity_remaining": unit.change.quantity_after,
                },
                message="Equipment assigned successfully",
            )
        )

    @app.route("/api/inventory/history", methods=["GET"], endpoint="inventory_history")
    @auth_required(Role.ADMIN, Role.INVENTORY_MANAGER)
    def inventory_history():
        rows = inventory.history(inventory_id=query_int("inventoryId"), limit=query_int("limit", 100))
        return jsonify(ok([t.to_dict() for t in rows]))
