from __future__ import annotations

from datetime import date

import pytest
from werkzeug.security import generate_password_hash

from concrete_ops import create_app
from concrete_ops.access_requests.service import AccessRequestService
from concrete_ops.auth.tokens import TokenSigner
from concrete_ops.common.geo import Geofence, ShopLocation
from concrete_ops.container import Container
from concrete_ops.core.enums import Role
from concrete_ops.documents.service import DocumentService
from concrete_ops.equipment.damage_service import DamageReportService
from concrete_ops.equipment.maintenance_service import MaintenanceService
from concrete_ops.equipment.service import EquipmentService
from concrete_ops.equipment.usage_service import EquipmentUsageService
from concrete_ops.inventory.service import InventoryService
from concrete_ops.jobs.service import JobOrderService
from concrete_ops.jobs.standby_service import StandbyService
from concrete_ops.jobs.workflow_service import JobWorkflowService
from concrete_ops.notifications.sms import SMSSender
from concrete_ops.timecards.service import TimecardService
from concrete_ops.users.service import AuthService, UserService

from conftest import (
    InMemoryAccessRequests,
    InMemoryDamageReports,
    InMemoryDocuments,
    InMemoryEquipment,
    InMemoryEquipmentUsage,
    InMemoryInventory,
    InMemoryJobActivity,
    InMemoryJobs,
    InMemoryMaintenance,
    InMemoryStandby,
    InMemoryTimecards,
)

SHOP = ShopLocation(name="Pontifex Shop", latitude=33.97121, longitude=-84.18066)
SIGNER = TokenSigner("test-secret")


@pytest.fixture
def jobs(users):
    return InMemoryJobs(users)


@pytest.fixture
def container(users, notifier, jobs):
    activity = InMemoryJobActivity()
    equipment = InMemoryEquipment(users)
    job_orders = JobOrderService(jobs, activity, users)
    return Container(
        auth_service=AuthService(users, SIGNER),
        user_service=UserService(users),
        access_request_service=AccessRequestService(InMemoryAccessRequests(), users, notifier),
        timecard_service=TimecardService(InMemoryTimecards(users), Geofence(SHOP, allowed_radius_meters=100)),
        job_order_service=job_orders,
        job_workflow_service=JobWorkflowService(jobs, activity, job_orders),
        standby_service=StandbyService(InMemoryStandby(jobs, users), job_orders),
        equipment_service=EquipmentService(equipment, users),
        maintenance_service=MaintenanceService(InMemoryMaintenance(), equipment),
        damage_report_service=DamageReportService(InMemoryDamageReports(equipment, users), equipment),
        equipment_usage_service=EquipmentUsageService(InMemoryEquipmentUsage(equipment, jobs), equipment, job_orders),
        inventory_service=InventoryService(InMemoryInventory(equipment), equipment, users),
        document_service=DocumentService(
            InMemoryDocuments(),
            jobs,
            job_orders,
            users,
            notifier,
            SMSSender("", ""),
            company_name="Pontifex Industries",
        ),
    )


@pytest.fixture
def client(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container=container)
    return app.test_client()


def auth(user) -> dict:
    return {"Authorization": f"Bearer {SIGNER.issue(user.user_id)}"}


def test_missing_token_is_rejected(client):
    resp = client.get("/api/auth/me")

    assert resp.status_code == 401
    assert resp.get_json() == {"success": False, "error": "Unauthorized. Please log in."}


def test_garbage_token_is_rejected(client):
    resp = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})

    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_operator_cannot_reach_admin_routes(client, operator):
    resp = client.get("/api/admin/users", headers=auth(operator))

    assert resp.status_code == 403
    assert resp.get_json()["error"] == "Forbidden. Admin access required."


def test_login_then_me(client, users):
    users.create_user(
        full_name="Dana Driller",
        email="dana@pontifex.example",
        password_hash=generate_password_hash("hunter22"),
        role=Role.OPERATOR,
    )

    resp = client.post("/api/auth/login", json={"email": "Dana@Pontifex.example", "password": "hunter22"})
    assert resp.status_code == 200
    token = resp.get_json()["data"]["token"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.get_json()["data"]["email"] == "dana@pontifex.example"
    assert "password_hash" not in me.get_json()["data"]


def test_login_with_wrong_password(client, users):
    users.create_user(
        full_name="Dana Driller",
        email="dana@pontifex.example",
        password_hash=generate_password_hash("hunter22"),
        role=Role.OPERATOR,
    )

    resp = client.post("/api/auth/login", json={"email": "dana@pontifex.example", "password": "nope-nope"})

    assert resp.status_code == 401
    assert resp.get_json()["error"] == "Invalid email or password"


def test_clock_in_far_from_shop_reports_distance(client, operator):
    resp = client.post("/api/timecard/clock-in", headers=auth(operator), json={"latitude": 34.5, "longitude": -84.18066})

    body = resp.get_json()
    assert resp.status_code == 403
    assert body["success"] is False
    assert body["error"] == "You must be at Pontifex Shop to clock in."
    assert body["allowedRadius"] == 100
    assert body["distance"] > 50_000
    assert "details" in body


def test_clock_in_and_export_csv(client, operator, admin):
    resp = client.post(
        "/api/timecard/clock-in", headers=auth(operator), json={"latitude": SHOP.latitude, "longitude": SHOP.longitude}
    )
    assert resp.status_code == 201
    assert resp.get_json()["message"].startswith("Clocked in successfully")

    current = client.get("/api/timecard/current", headers=auth(operator)).get_json()
    assert current["isClockedIn"] is True

    export = client.get("/api/admin/timecards/export.csv", headers=auth(admin))
    assert export.status_code == 200
    assert export.mimetype == "text/csv"
    lines = export.data.decode("utf-8-sig").splitlines()
    assert lines[0].startswith("date,user_id,full_name")
    assert "Oscar Operator" in lines[1]


def test_create_job_order_and_operator_sees_it(client, admin, operator):
    body = {
        "job_number": "J-900",
        "title": "Core holes for conduit",
        "customer_name": "Acme Builders",
        "job_type": "core_drilling",
        "location": "Midtown",
        "address": "55 Peachtree St",
        "assigned_to": operator.user_id,
        "scheduled_date": "2026-03-11",
    }

    created = client.post("/api/admin/job-orders", headers=auth(admin), json=body)
    assert created.status_code == 201
    assert created.get_json()["data"]["job_number"] == "J-900"

    duplicate = client.post("/api/admin/job-orders", headers=auth(admin), json=body)
    assert duplicate.status_code == 409

    mine = client.get("/api/job-orders", headers=auth(operator)).get_json()["data"]
    assert [j["job_number"] for j in mine] == ["J-900"]


def test_create_job_order_requires_fields(client, admin):
    resp = client.post("/api/admin/job-orders", headers=auth(admin), json={"title": "Half a job"})

    assert resp.status_code == 400
    assert resp.get_json()["error"].startswith("Missing required fields: job_number")


def test_generate_and_download_liability_release(client, jobs, operator):
    job = jobs.add(assigned_to=operator.user_id, job_number="J-321")

    resp = client.post(
        f"/api/job-orders/{job.job_id}/documents/liability-release",
        headers=auth(operator),
        json={"customerName": "Carla Customer"},
    )
    assert resp.status_code == 201
    document_id = resp.get_json()["documentId"]

    download = client.get(f"/api/documents/{document_id}", headers=auth(operator))
    assert download.status_code == 200
    assert download.mimetype == "application/pdf"
    assert download.data.startswith(b"%PDF")
    assert "liability_release_J-321.pdf" in download.headers["Content-Disposition"]


def test_other_operator_cannot_download_document(client, jobs, operator, other_operator):
    job = jobs.add(assigned_to=operator.user_id)
    document_id = client.post(
        f"/api/job-orders/{job.job_id}/documents/work-order-agreement",
        headers=auth(operator),
        json={"customerName": "Carla Customer"},
    ).get_json()["documentId"]

    resp = client.get(f"/api/documents/{document_id}", headers=auth(other_operator))

    assert resp.status_code == 403


def test_inventory_create_and_assign(client, manager, operator):
    created = client.post(
        "/api/inventory",
        headers=auth(manager),
        json={"name": "14in diamond blade", "category": "blade", "quantity_in_stock": 1, "reorder_level": 1},
    )
    assert created.status_code == 201
    item = created.get_json()["data"]
    assert item["is_low_stock"] is True

    assigned = client.post(
        f"/api/inventory/{item['id']}/assign",
        headers=auth(manager),
        json={"operator_id": operator.user_id, "serial_number": "BLD-0001"},
    )
    assert assigned.status_code == 200
    data = assigned.get_json()["data"]
    assert data["operator_name"] == "Oscar Operator"
    assert data["quantity_remaining"] == 0

    empty = client.post(
        f"/api/inventory/{item['id']}/assign",
        headers=auth(manager),
        json={"operator_id": operator.user_id, "serial_number": "BLD-0002"},
    )
    assert empty.status_code == 400
    assert empty.get_json()["error"] == "No 14in diamond blade left in stock"


def test_operator_cannot_manage_inventory(client, operator):
    resp = client.post("/api/inventory", headers=auth(operator), json={"name": "Core bit"})

    assert resp.status_code == 403


def test_send_schedule_reports_counts(client, jobs, admin, operator, mailer):
    jobs.add(assigned_to=operator.user_id, scheduled_date=date(2026, 3, 11))
    jobs.add(assigned_to=operator.user_id, scheduled_date=date(2026, 3, 11))

    resp = client.post("/api/admin/send-schedule", headers=auth(admin), json={"scheduled_date": "2026-03-11"})

    body = resp.get_json()
    assert resp.status_code == 200
    assert body["sent_count"] == 1
    assert body["total"] == 1
    assert body["errors"] == []
    assert mailer.sent[0]["to"] == operator.email


def test_submit_access_request_is_public(client, mailer):
    resp = client.post(
        "/api/access-requests",
        json={
            "fullName": "Nina New",
            "email": "nina@pontifex.example",
            "password": "longenough",
            "dateOfBirth": "1990-05-01",
        },
    )

    assert resp.status_code == 201
    assert resp.get_json()["confirmationEmailSent"] is True
    assert mailer.sent[0]["to"] == "nina@pontifex.example"


def test_unknown_route_uses_json_error(client):
    resp = client.get("/api/nope")

    assert resp.status_code == 404
    assert resp.get_json()["success"] is False


@pytest.mark.parametrize("path", ["/api/access-requests", "/api/auth/login"])
def test_non_object_json_body_is_a_validation_error(client, path):
    resp = client.post(path, json=[1, 2])

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_send_email_with_non_numeric_document_id(client, admin, mailer):
    resp = client.post(
        "/api/send-email",
        headers=auth(admin),
        json={"to": "a@example.com", "subject": "Docs", "html": "<p>x</p>", "documentId": "abc"},
    )

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "documentId must be a whole number"
    assert mailer.sent == []


def test_timecard_history_with_negative_limit(client, operator):
    client.post(
        "/api/timecard/clock-in", headers=auth(operator), json={"latitude": SHOP.latitude, "longitude": SHOP.longitude}
    )

    resp = client.get("/api/timecard/history?limit=-1", headers=auth(operator))

    assert resp.status_code == 200
    assert len(resp.get_json()["data"]["timecards"]) == 1


def test_standby_start_end_and_list(client, jobs, operator, admin):
    job = jobs.add(assigned_to=operator.user_id, job_number="J-777")

    started = client.post(
        "/api/standby",
        headers=auth(operator),
        json={"jobId": job.job_id, "reason": "Waiting on GC", "startedAt": "2026-03-10T08:00:00"},
    )
    assert started.status_code == 201
    log_id = started.get_json()["data"]["id"]

    ended = client.put(
        "/api/standby", headers=auth(operator), json={"standbyLogId": log_id, "endedAt": "2026-03-10T10:00:00"}
    )
    assert ended.status_code == 200
    data = ended.get_json()["data"]
    assert data["status"] == "completed"
    assert data["duration_hours"] == 2.0
    assert data["billed_amount"] == 378.0

    listed = client.get(f"/api/standby?jobId={job.job_id}", headers=auth(admin)).get_json()["data"]
    assert [row["job_number"] for row in listed] == ["J-777"]


def test_standby_requires_reason(client, jobs, operator):
    job = jobs.add(assigned_to=operator.user_id)

    resp = client.post("/api/standby", headers=auth(operator), json={"jobId": job.job_id})

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Missing required fields: jobId and reason"


def test_damage_report_flow(client, admin, operator):
    item = client.post("/api/equipment", headers=auth(admin), json={"name": "Flat saw"}).get_json()["data"]

    created = client.post(
        "/api/equipment/damage-reports",
        headers=auth(operator),
        json={"equipmentId": item["id"], "damageTitle": "Bent shroud", "damageDescription": "Hit a column"},
    )
    assert created.status_code == 201
    report_id = created.get_json()["data"]["id"]

    denied = client.patch(
        f"/api/equipment/damage-reports/{report_id}", headers=auth(operator), json={"status": "under_review"}
    )
    assert denied.status_code == 403

    reviewed = client.patch(
        f"/api/equipment/damage-reports/{report_id}", headers=auth(admin), json={"status": "no_action_needed"}
    )
    assert reviewed.status_code == 200
    assert reviewed.get_json()["data"]["resolved_at"] is not None

    mine = client.get("/api/equipment/damage-reports", headers=auth(operator)).get_json()["data"]
    assert [r["id"] for r in mine] == [report_id]


def test_equipment_usage_flow(client, jobs, admin, operator):
    job = jobs.add(assigned_to=operator.user_id)
    item = client.post("/api/equipment", headers=auth(admin), json={"name": "Wire saw"}).get_json()["data"]

    recorded = client.post(
        "/api/equipment-usage",
        headers=auth(operator),
        json={
            "job_order_id": job.job_id,
            "equipment_type": "wire_saw",
            "task_type": "cutting",
            "equipment_id": item["id"],
            "linear_feet_cut": 30,
        },
    )
    assert recorded.status_code == 201
    assert recorded.get_json()["message"] == "Equipment usage recorded successfully"

    history = client.get(f"/api/equipment/{item['id']}/usage-history", headers=auth(admin)).get_json()["data"]
    assert [row["linear_feet_cut"] for row in history] == [30.0]

    detail = client.get(f"/api/equipment/{item['id']}", headers=auth(admin)).get_json()["data"]
    assert detail["total_usage_feet"] == 30.0

    missing = client.post("/api/equipment-usage", headers=auth(operator), json={"job_order_id": job.job_id})
    assert missing.status_code == 400
