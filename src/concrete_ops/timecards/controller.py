from __future__ import annotations

import csv
import io

from flask import Flask, g, jsonify

from ..auth.guards import build_auth_required
from ..common.http import json_body, ok, query_date, query_flag, query_int
from ..core.constants import DEFAULT_ADMIN_LIST_LIMIT, DEFAULT_HISTORY_LIMIT
from ..core.enums import Role
from ..container import Container

CSV_FIELDS = [
    "date",
    "user_id",
    "full_name",
    "email",
    "clock_in_time",
    "clock_out_time",
    "total_hours",
    "is_approved",
    "notes",
]


def register(app: Flask, container: Container) -> None:
    auth_required = build_auth_required(container)
    service = container.timecard_service

    def _clock_payload(event) -> dict:
        tc = event.timecard
        return {
            "id": tc.timecard_id,
            "clockInTime": tc.clock_in_time.isoformat(),
            "clockOutTime": tc.clock_out_time.isoformat() if tc.clock_out_time else None,
            "totalHours": tc.total_hours,
            "distanceFromShop": event.location.distance_formatted,
        }

    @app.route("/api/timecard/clock-in", methods=["POST"], endpoint="clock_in")
    @auth_required()
    def clock_in():
        body = json_body()
        event = service.clock_in(
            g.current_user,
            latitude=body.get("latitude"),
            longitude=body.get("longitude"),
            accuracy=body.get("accuracy"),
        )
        message = f"Clocked in successfully at {event.timecard.clock_in_time:%H:%M:%S}"
        return jsonify(ok(_clock_payload(event), message=message)), 201

    @app.route("/api/timecard/clock-out", methods=["POST"], endpoint="clock_out")
    @auth_required()
    def clock_out():
        body = json_body()
        event = service.clock_out(
            g.current_user,
            latitude=body.get("latitude"),
            longitude=body.get("longitude"),
            accuracy=body.get("accuracy"),
        )
        message = f"Clocked out successfully. Total hours: {event.timecard.total_hours:.2f}"
        return jsonify(ok(_clock_payload(event), message=message))

    @app.route("/api/timecard/current", methods=["GET"], endpoint="timecard_current")
    @auth_required()
    def timecard_current():
        timecard, hours = service.current(g.current_user)
        if not timecard:
            return jsonify(ok(None, isClockedIn=False))
        data = timecard.to_dict()
        data["currentHours"] = hours
        return jsonify(ok(data, isClockedIn=True))

    @app.route("/api/timecard/history", methods=["GET"], endpoint="timecard_history")
    @auth_required()
    def timecard_history():
        result = service.history(
            g.current_user,
            start_date=query_date("startDate"),
            end_date=query_date("endDate"),
            limit=query_int("limit", DEFAULT_HISTORY_LIMIT),
        )
        return jsonify(
            ok(
                {
                    "timecards": [t.to_dict() for t in result.timecards],
                    "totalHours": result.total_hours,
                    "totalEntries": len(result.timecards),
                }
            )
        )

    def _admin_report():
        return service.admin_report(
            user_id=query_int("userId"),
            start_date=query_date("startDate"),
            end_date=query_date("endDate"),
            pending_only=query_flag("pending"),
            limit=query_int("limit", DEFAULT_ADMIN_LIST_LIMIT),
        )

    @app.route("/api/admin/timecards", methods=["GET"], endpoint="admin_timecards")
    @auth_required(Role.ADMIN)
    def admin_timecards():
        report = _admin_report()
        return jsonify(
            ok(
                {
                    "timecards": [r.to_dict() for r in report.rows],
                    "summary": report.summary,
                    "userSummary": report.user_summary,
                }
            )
        )

    @app.route("/api/admin/timecards/export.csv", methods=["GET"], endpoint="admin_timecards_csv")
    @auth_required(Role.ADMIN)
    def admin_timecards_csv():
        report = _admin_report()

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=CSV_FIELDS, extrasaction="ignore")
        writer.writeheader()
        for row in report.rows:
            writer.writerow(row.to_dict())

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": "attachment; filename=timecards.csv"},
        )

    @app.route("/api/admin/timecards/<int:timecard_id>/approve", methods=["POST"], endpoint="approve_timecard")
    @auth_required(Role.ADMIN)
    def approve_timecard(timecard_id: int):
        tc = service.approve(admin=g.current_user, timecard_id=timecard_id)
        return jsonify(ok(tc.to_dict(), message="Timecard approved"))

    @app.route("/api/admin/timecards/<int:timecard_id>", methods=["PUT"], endpoint="update_timecard")
    @auth_required(Role.ADMIN)
    def update_timecard(timecard_id: int):
        tc = service.update(timecard_id=timecard_id, body=json_body())
        return jsonify(ok(tc.to_dict(), message="Timecard updated"))
