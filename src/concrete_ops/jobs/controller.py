from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..auth.guards import build_auth_required
from ..common.http import json_body, ok, query_date, query_flag, query_int
from ..core.enums import Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth_required = build_auth_required(container)
    jobs = container.job_order_service
    workflow = container.job_workflow_service
    standby = container.standby_service

    # -------- Admin scheduling --------
    @app.route("/api/admin/job-orders", methods=["POST"], endpoint="create_job_order")
    @auth_required(Role.ADMIN)
    def create_job_order():
        job = jobs.create_job(creator=g.current_user, body=json_body())
        return jsonify(ok(job.to_dict(), message="Job order created")), 201

    @app.route("/api/admin/job-orders", methods=["GET"], endpoint="admin_job_orders")
    @auth_required(Role.ADMIN)
    def admin_job_orders():
        listing = jobs.admin_list(
            status=request.args.get("status"),
            assigned_to=query_int("assignedTo"),
            start_date=query_date("startDate"),
            end_date=query_date("endDate"),
        )
        return jsonify(ok([j.to_dict() for j in listing.jobs], summary=listing.summary))

    @app.route("/api/admin/job-orders/<int:job_id>", methods=["PATCH"], endpoint="update_job_order")
    @auth_required(Role.ADMIN)
    def update_job_order(job_id: int):
        job = jobs.update_job(job_id=job_id, body=json_body())
        return jsonify(ok(job.to_dict(), message="Job order updated"))

    @app.route("/api/job-orders/<int:job_id>", methods=["DELETE"], endpoint="delete_job_order")
    @auth_required(Role.ADMIN)
    def delete_job_order(job_id: int):
        jobs.delete_job(job_id=job_id)
        return jsonify(ok(None, message="Job order deleted"))

    @app.route("/api/admin/sync-job-statuses", methods=["POST"], endpoint="sync_job_statuses")
    @auth_required(Role.ADMIN)
    def sync_job_statuses():
        report = workflow.sync_statuses()
        message = f"Checked {report.checked} jobs, updated {report.updated}"
        return jsonify(ok(report.to_dict(), message=message))

    # -------- Operator views --------
    @app.route("/api/job-orders", methods=["GET"], endpoint="job_orders")
    @auth_required()
    def job_orders():
        rows = jobs.list_for_user(
            g.current_user,
            status=request.args.get("status"),
            include_completed=query_flag("includeCompleted"),
            scheduled_date=query_date("scheduledDate"),
        )
        return jsonify(ok([j.to_dict() for j in rows]))

    @app.route("/api/job-orders/<int:job_id>", methods=["GET"], endpoint="job_order_detail")
    @auth_required()
    def job_order_detail(job_id: int):
        return jsonify(ok(jobs.get_for_user(g.current_user, job_id).to_dict()))

    @app.route("/api/job-orders/<int:job_id>/status", methods=["POST", "PUT"], endpoint="job_order_status")
    @auth_required()
    def job_order_status(job_id: int):
        body = json_body()
        job = jobs.update_status(
            g.current_user,
            job_id=job_id,
            status=body.get("status"),
            latitude=body.get("latitude"),
            longitude=body.get("longitude"),
        )
        return jsonify(ok(job.to_dict(), message=f"Job status updated to: {job.status.value}"))

    @app.route("/api/job-orders/<int:job_id>/history", methods=["GET"], endpoint="job_order_history")
    @auth_required()
    def job_order_history(job_id: int):
        return jsonify(ok([h.to_dict() for h in jobs.history(g.current_user, job_id)]))

    @app.route("/api/job-orders/<int:job_id>/daily-log", methods=["POST"], endpoint="submit_daily_log")
    @auth_required()
    def submit_daily_log(job_id: int):
        result = workflow.submit_daily_log(g.current_user, job_id=job_id, body=json_body())
        message = (
            "Daily log saved. Job will continue tomorrow."
            if result.continue_next_day
            else "Daily log saved. Ready for final completion."
        )
        return jsonify(ok(result.log.to_dict(), message=message, continueNextDay=result.continue_next_day))

    @app.route("/api/job-orders/<int:job_id>/daily-log", methods=["GET"], endpoint="daily_logs")
    @auth_required()
    def daily_logs(job_id: int):
        return jsonify(ok([log.to_dict() for log in workflow.list_daily_logs(g.current_user, job_id=job_id)]))

    @app.route("/api/job-orders/<int:job_id>/work-items", methods=["POST"], endpoint="add_work_item")
    @auth_required()
    def add_work_item(job_id: int):
        item = workflow.add_work_item(g.current_user, job_id=job_id, body=json_body())
        return jsonify(ok(item.to_dict(), message="Work item recorded")), 201

    @app.route("/api/job-orders/<int:job_id>/work-items", methods=["GET"], endpoint="work_items")
    @auth_required()
    def work_items(job_id: int):
        return jsonify(ok([i.to_dict() for i in workflow.list_work_items(g.current_user, job_id=job_id)]))

    @app.route("/api/operator/complete-job", methods=["POST"], endpoint="complete_job")
    @auth_required()
    def complete_job():
        body = json_body()
        record = workflow.complete_job(
            g.current_user,
            job_id=body.get("jobId"),
            hours_worked=body.get("hoursWorked"),
            customer_rating=body.get("customerRating"),
        )
        return jsonify(ok(record.to_dict(), message="Job performance recorded"))

    # -------- Standby --------
    @app.route("/api/standby", methods=["POST"], endpoint="start_standby")
    @auth_required()
    def start_standby():
        log = standby.start(g.current_user, body=json_body())
        return jsonify(ok(log.to_dict(), message="Standby started")), 201

    @app.route("/api/standby", methods=["PUT"], endpoint="end_standby")
    @auth_required()
    def end_standby():
        log = standby.end(g.current_user, body=json_body())
        return jsonify(ok(log.to_dict(), message="Standby ended"))

    @app.route("/api/standby", methods=["GET"], endpoint="standby_logs")
    @auth_required()
    def standby_logs():
        rows = standby.list_logs(g.current_user, job_id=query_int("jobId"), operator_id=query_int("operatorId"))
        return jsonify(ok([log.to_dict() for log in rows]))
