from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..auth.guards import build_auth_required
from ..common.http import json_body, ok
from ..core.enums import Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth_required = build_auth_required(container)
    service = container.access_request_service

    @app.route("/api/access-requests", methods=["POST"], endpoint="submit_access_request")
    def submit_access_request():
        body = json_body()
        result = service.submit(
            full_name=body.get("fullName"),
            email=body.get("email"),
            password=body.get("password"),
            date_of_birth=body.get("dateOfBirth"),
            position=body.get("position"),
        )
        return (
            jsonify(
                ok(
                    {"id": result.request_id},
                    message="Access request submitted. An administrator will review it shortly.",
                    confirmationEmailSent=result.confirmation_email_sent,
                )
            ),
            201,
        )

    @app.route("/api/access-requests", methods=["GET"], endpoint="list_access_requests")
    @auth_required(Role.ADMIN)
    def list_access_requests():
        rows = service.list_requests(status=request.args.get("status"))
        return jsonify(ok([r.to_dict() for r in rows]))

    @app.route("/api/access-requests/<int:request_id>/approve", methods=["POST"], endpoint="approve_access_request")
    @auth_required(Role.ADMIN)
    def approve_access_request(request_id: int):
        result = service.approve(reviewer=g.current_user, request_id=request_id, role=json_body().get("role"))
        return jsonify(
            ok({"userId": result.user_id, "emailSent": result.email_sent}, message="Access request approved")
        )

    @app.route("/api/access-requests/<int:request_id>/deny", methods=["POST"], endpoint="deny_access_request")
    @auth_required(Role.ADMIN)
    def deny_access_request(request_id: int):
        sent = service.deny(reviewer=g.current_user, request_id=request_id, reason=json_body().get("denialReason"))
        return jsonify(ok({"emailSent": sent}, message="Access request denied"))

    @app.route("/api/access-requests/<int:request_id>", methods=["PATCH"], endpoint="update_access_request")
    @auth_required(Role.ADMIN)
    def update_access_request(request_id: int):
        updated = service.update(request_id=request_id, body=json_body())
        return jsonify(ok(updated.to_dict(), message="Access request updated"))

    @app.route("/api/access-requests/<int:request_id>", methods=["DELETE"], endpoint="delete_access_request")
    @auth_required(Role.ADMIN)
    def delete_access_request(request_id: int):
        service.delete(request_id=request_id)
        return jsonify(ok(message="Access request deleted"))
