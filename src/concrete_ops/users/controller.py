from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..auth.guards import build_auth_required
from ..common.http import json_body, ok
from ..core.enums import Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth_required = build_auth_required(container)

    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        body = json_body()
        token, user = container.auth_service.login(body.get("email"), body.get("password"))
        return jsonify(ok({"token": token, "user": user.to_public_dict()}))

    @app.route("/api/auth/me", methods=["GET"], endpoint="me")
    @auth_required()
    def me():
        return jsonify(ok(g.current_user.to_public_dict()))

    @app.route("/api/admin/users", methods=["GET"], endpoint="admin_users")
    @auth_required(Role.ADMIN)
    def admin_users():
        users = container.user_service.list_users(role=request.args.get("role"))
        return jsonify(ok([u.to_public_dict() for u in users]))

    @app.route("/api/admin/users/<int:user_id>", methods=["GET"], endpoint="admin_user_detail")
    @auth_required(Role.ADMIN)
    def admin_user_detail(user_id: int):
        return jsonify(ok(container.user_service.get_user(user_id).to_public_dict()))

    @app.route("/api/admin/users/<int:user_id>", methods=["PATCH"], endpoint="admin_update_user")
    @auth_required(Role.ADMIN)
    def admin_update_user(user_id: int):
        user = container.user_service.update_user(acting_user=g.current_user, user_id=user_id, body=json_body())
        return jsonify(ok(user.to_public_dict(), message="User updated"))

    @app.route("/api/admin/users/<int:user_id>", methods=["DELETE"], endpoint="admin_delete_user")
    @auth_required(Role.ADMIN)
    def admin_delete_user(user_id: int):
        container.user_service.delete_user(acting_user=g.current_user, user_id=user_id)
        return jsonify(ok(message="User deleted"))

    @app.route("/api/admin/operators", methods=["GET"], endpoint="admin_operators")
    @auth_required(Role.ADMIN)
    def admin_operators():
        operators = container.user_service.list_active_operators()
        return jsonify(ok([u.to_public_dict() for u in operators]))
