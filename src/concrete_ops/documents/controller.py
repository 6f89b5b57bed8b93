from __future__ import annotations

import io

from flask import Flask, g, jsonify, send_file

from ..auth.guards import build_auth_required
from ..common.http import json_body, ok
from ..core.enums import DocumentType, Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth_required = build_auth_required(container)
    documents = container.document_service
    workflow = container.job_workflow_service

    def _generate(job_id: int, doc_type: DocumentType):
        body = json_body()
        result = documents.generate(
            g.current_user,
            job_id=job_id,
            doc_type=doc_type,
            customer_name=body.get("customerName"),
            customer_email=body.get("customerEmail"),
        )
        return (
            jsonify(
                ok(
                    result.document.to_dict(),
                    message="Document generated",
                    documentId=result.document.document_id,
                    emailSent=result.email_sent,
                )
            ),
            201,
        )

    @app.route(
        "/api/job-orders/<int:job_id>/documents/liability-release", methods=["POST"], endpoint="liability_release"
    )
    @auth_required()
    def liability_release(job_id: int):
        return _generate(job_id, DocumentType.LIABILITY_RELEASE)

    @app.route(
        "/api/job-orders/<int:job_id>/documents/work-order-agreement",
        methods=["POST"],
        endpoint="work_order_agreement",
    )
    @auth_required()
    def work_order_agreement(job_id: int):
        return _generate(job_id, DocumentType.WORK_ORDER_AGREEMENT)

    @app.route("/api/job-orders/<int:job_id>/documents", methods=["GET"], endpoint="job_documents")
    @auth_required()
    def job_documents(job_id: int):
        rows = documents.list_for_job(g.current_user, job_id=job_id)
        return jsonify(ok([d.to_dict() for d in rows]))

    @app.route("/api/documents/<int:document_id>", methods=["GET"], endpoint="download_document")
    @auth_required()
    def download_document(document_id: int):
        document = documents.download(g.current_user, document_id=document_id)
        return send_file(
            io.BytesIO(document.content or b""),
            mimetype="application/pdf",
            as_attachment=True,
            download_name=document.file_name,
        )

    @app.route(
        "/api/job-orders/<int:job_id>/completion-signature", methods=["POST"], endpoint="completion_signature"
    )
    @auth_required()
    def completion_signature(job_id: int):
        job = workflow.sign_completion(g.current_user, job_id=job_id, signer_name=json_body().get("signerName"))
        return jsonify(ok(job.to_dict(), message="Completion signature recorded"))

    # -------- Outbound messages --------
    @app.route("/api/send-email", methods=["POST"], endpoint="send_email")
    @auth_required(Role.ADMIN)
    def send_email():
        body = json_body()
        documents.send_email(
            g.current_user,
            to=body.get("to"),
            subject=body.get("subject"),
            html=body.get("html"),
            document_id=body.get("documentId"),
        )
        return jsonify(ok(message="Email sent successfully"))

    @app.route("/api/send-sms", methods=["POST"], endpoint="send_sms")
    @auth_required(Role.ADMIN)
    def send_sms():
        body = json_body()
        result = documents.send_sms(to=body.get("to"), message=body.get("message"))
        message = "SMS sent successfully" if result.status == "sent" else "SMS service not configured; message logged"
        return jsonify(ok(result.to_dict(), message=message))

    @app.route("/api/admin/send-schedule", methods=["POST"], endpoint="send_schedule")
    @auth_required(Role.ADMIN)
    def send_schedule():
        report = documents.send_schedule(scheduled_date=json_body().get("scheduled_date"))
        return jsonify(ok(report.to_dict(), **report.to_dict()))
