"""In-memory repositories shared by the service and API tests.

They mirror the MySQL repositories' behaviour closely enough for the services,
without needing a database.
"""
from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Any, Optional

import pytest

from concrete_ops.access_requests.model import AccessRequest
from concrete_ops.core.enums import (
    AccessRequestStatus,
    AssignmentStatus,
    EquipmentType,
    InventoryTransactionType,
    JobStatus,
    Role,
    StandbyStatus,
)
from concrete_ops.documents.model import JobDocument
from concrete_ops.equipment.model import (
    DamageReport,
    Equipment,
    EquipmentAssignment,
    EquipmentUsage,
    MaintenanceAlert,
    TurnInRequest,
)
from concrete_ops.inventory.model import InventoryItem, InventoryTransaction, StockChange
from concrete_ops.jobs.model import DailyLog, JobOrder, PerformanceRecord, StandbyLog, StatusHistoryEntry, WorkItem
from concrete_ops.notifications.emails import EmailNotifier
from concrete_ops.timecards.model import Timecard, TimecardRow
from concrete_ops.users.model import User

CREATED_AT = datetime(2026, 3, 1, 8, 0, 0)


class InMemoryUsers:
    def __init__(self, users: list[User] = ()):
        self.users: dict[int, User] = {u.user_id: u for u in users}
        self._next_id = max(self.users, default=0) + 1

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users.get(int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.email == email), None)

    def create_user(self, *, full_name, email, password_hash, role, phone=None, position=None) -> int:
        uid = self._next_id
        self._next_id += 1
        self.users[uid] = User(
            user_id=uid,
            full_name=full_name,
            email=email,
            password_hash=password_hash,
            role=role,
            phone=phone,
            position=position,
            created_at=CREATED_AT,
        )
        return uid

    def update_fields(self, user_id: int, fields: dict[str, Any]) -> bool:
        self.users[int(user_id)] = replace(self.users[int(user_id)], **fields)
        return True

    def delete_by_id(self, user_id: int) -> bool:
        return self.users.pop(int(user_id), None) is not None

    def list_users(self, *, role: Optional[Role] = None, active_only: bool = False):
        rows = [u for u in self.users.values() if (role is None or u.role == role) and (u.is_active or not active_only)]
        return sorted(rows, key=lambda u: u.full_name)


class InMemoryAccessRequests:
    def __init__(self):
        self.rows: dict[int, AccessRequest] = {}
        self._next_id = 1

    def create(self, *, full_name, email, password_hash, date_of_birth, position) -> int:
        rid = self._next_id
        self._next_id += 1
        self.rows[rid] = AccessRequest(
            request_id=rid,
            full_name=full_name,
            email=email,
            password_hash=password_hash,
            date_of_birth=date_of_birth,
            position=position,
            status=AccessRequestStatus.PENDING,
            created_at=CREATED_AT,
        )
        return rid

    def get_by_id(self, request_id: int):
        return self.rows.get(int(request_id))

    def find_by_email(self, email: str, *, status):
        return next((r for r in self.rows.values() if r.email == email and r.status == status), None)

    def list_requests(self, *, status=None):
        rows = [r for r in self.rows.values() if status is None or r.status == status]
        return sorted(rows, key=lambda r: r.request_id, reverse=True)

    def mark_approved(self, request_id, *, reviewed_by, role, reviewed_at) -> bool:
        self.rows[request_id] = replace(
            self.rows[request_id],
            status=AccessRequestStatus.APPROVED,
            assigned_role=role,
            reviewed_by=reviewed_by,
            reviewed_at=reviewed_at,
        )
        return True

    def mark_denied(self, request_id, *, reviewed_by, reason, reviewed_at) -> bool:
        self.rows[request_id] = replace(
            self.rows[request_id],
            status=AccessRequestStatus.DENIED,
            denial_reason=reason,
            reviewed_by=reviewed_by,
            reviewed_at=reviewed_at,
        )
        return True

    def update_fields(self, request_id, fields) -> bool:
        self.rows[request_id] = replace(self.rows[request_id], **fields)
        return True

    def delete_by_id(self, request_id) -> bool:
        return self.rows.pop(int(request_id), None) is not None


class InMemoryTimecards:
    def __init__(self, users: InMemoryUsers):
        self.rows: dict[int, Timecard] = {}
        self._users = users
        self._next_id = 1

    def get_by_id(self, timecard_id):
        return self.rows.get(int(timecard_id))

    def get_active_for_user(self, user_id):
        return next((t for t in self.rows.values() if t.user_id == user_id and t.is_active), None)

    def create_clock_in(self, *, user_id, work_date, clock_in_time, latitude, longitude, accuracy) -> int:
        tid = self._next_id
        self._next_id += 1
        self.rows[tid] = Timecard(
            timecard_id=tid,
            user_id=user_id,
            work_date=work_date,
            clock_in_time=clock_in_time,
            clock_in_latitude=latitude,
            clock_in_longitude=longitude,
            clock_in_accuracy=accuracy,
        )
        return tid

    def set_clock_out(self, timecard_id, *, clock_out_time, latitude, longitude, accuracy, total_hours) -> bool:
        self.rows[timecard_id] = replace(
            self.rows[timecard_id],
            clock_out_time=clock_out_time,
            clock_out_latitude=latitude,
            clock_out_longitude=longitude,
            clock_out_accuracy=accuracy,
            total_hours=total_hours,
        )
        return True

    def _filtered(self, user_id=None, start_date=None, end_date=None):
        for t in sorted(self.rows.values(), key=lambda t: t.clock_in_time, reverse=True):
            if user_id is not None and t.user_id != user_id:
                continue
            if start_date and t.work_date < start_date:
                continue
            if end_date and t.work_date > end_date:
                continue
            yield t

    def list_for_user(self, user_id, *, start_date=None, end_date=None, limit=100):
        return list(self._filtered(user_id, start_date, end_date))[:limit]

    def list_with_users(self, *, user_id=None, start_date=None, end_date=None, pending_only=False, limit=500):
        rows = []
        for t in self._filtered(user_id, start_date, end_date):
            if pending_only and t.is_approved:
                continue
            user = self._users.get_by_id(t.user_id)
            rows.append(TimecardRow(timecard=t, full_name=user.full_name, email=user.email))
        return rows[:limit]

    def approve(self, timecard_id, *, approved_by, approved_at) -> bool:
        self.rows[timecard_id] = replace(
            self.rows[timecard_id], is_approved=True, approved_by=approved_by, approved_at=approved_at
        )
        return True

    def update_fields(self, timecard_id, fields) -> bool:
        self.rows[timecard_id] = replace(self.rows[timecard_id], **fields)
        return True


class InMemoryJobs:
    def __init__(self, users: InMemoryUsers):
        self.rows: dict[int, JobOrder] = {}
        self._users = users
        self._next_id = 1
        self.fail_updates_for: set[int] = set()

    def _with_operator_name(self, job: JobOrder) -> JobOrder:
        operator = self._users.get_by_id(job.assigned_to) if job.assigned_to else None
        return replace(job, assigned_operator_name=operator.full_name if operator else None)

    def create(self, fields) -> int:
        jid = self._next_id
        self._next_id += 1
        self.rows[jid] = JobOrder(job_id=jid, created_at=CREATED_AT, **fields)
        return jid

    def add(self, **fields) -> JobOrder:
        fields.setdefault("title", "Slab cut")
        fields.setdefault("customer_name", "Acme Builders")
        fields.setdefault("job_type", "wall_sawing")
        fields.setdefault("location", "Downtown")
        fields.setdefault("address", "1 Main St")
        fields.setdefault("job_number", f"J-{self._next_id:03d}")
        return self.get_by_id(self.create(fields))

    def get_by_id(self, job_id):
        job = self.rows.get(int(job_id))
        return self._with_operator_name(job) if job else None

    def get_by_number(self, job_number):
        return next((self._with_operator_name(j) for j in self.rows.values() if j.job_number == job_number), None)

    def list_jobs(self, *, status=None, assigned_to=None, start_date=None, end_date=None, include_completed=True):
        rows = []
        for job in self.rows.values():
            if status is not None and job.status != status:
                continue
            if assigned_to is not None and job.assigned_to != assigned_to:
                continue
            if start_date and (job.scheduled_date is None or job.scheduled_date < start_date):
                continue
            if end_date and (job.scheduled_date is None or job.scheduled_date > end_date):
                continue
            if not include_completed and job.status == JobStatus.COMPLETED:
                continue
            rows.append(self._with_operator_name(job))
        return sorted(rows, key=lambda j: (j.scheduled_date or date.max, j.job_number))

    def update_fields(self, job_id, fields) -> bool:
        if int(job_id) in self.fail_updates_for:
            raise RuntimeError("database is read-only")
        self.rows[int(job_id)] = replace(self.rows[int(job_id)], **fields)
        return True

    def delete_by_id(self, job_id) -> bool:
        return self.rows.pop(int(job_id), None) is not None


class InMemoryJobActivity:
    def __init__(self):
        self.history: list[StatusHistoryEntry] = []
        self.logs: list[DailyLog] = []
        self.items: list[WorkItem] = []
        self.performance: dict[tuple[int, int], PerformanceRecord] = {}
        self.fail_history = False

    def add_status_history(self, *, job_id, operator_id, status, latitude, longitude, changed_at) -> int:
        if self.fail_history:
            raise RuntimeError("history table missing")
        entry = StatusHistoryEntry(
            history_id=len(self.history) + 1,
            job_id=job_id,
            operator_id=operator_id,
            status=status,
            changed_at=changed_at,
            latitude=latitude,
            longitude=longitude,
        )
        self.history.append(entry)
        return entry.history_id

    def list_status_history(self, job_id):
        return [h for h in self.history if h.job_id == job_id]

    def add_daily_log(self, *, latitude, longitude, **values) -> int:
        log = DailyLog(log_id=len(self.logs) + 1, day_end_latitude=latitude, day_end_longitude=longitude, **values)
        self.logs.append(log)
        return log.log_id

    def list_daily_logs(self, job_id):
        return [log for log in self.logs if log.job_id == job_id]

    def add_work_item(self, **values) -> int:
        item = WorkItem(item_id=len(self.items) + 1, created_at=CREATED_AT, **values)
        self.items.append(item)
        return item.item_id

    def list_work_items(self, job_id):
        return [i for i in self.items if i.job_id == job_id]

    def upsert_performance(self, record) -> None:
        self.performance[(record.operator_id, record.job_id)] = record


class InMemoryStandby:
    def __init__(self, jobs: InMemoryJobs, users: InMemoryUsers):
        self.rows: dict[int, StandbyLog] = {}
        self._jobs = jobs
        self._users = users

    def _joined(self, log: StandbyLog) -> StandbyLog:
        job = self._jobs.get_by_id(log.job_id)
        operator = self._users.get_by_id(log.operator_id)
        return replace(
            log,
            job_number=job.job_number if job else None,
            operator_name=operator.full_name if operator else None,
        )

    def create(self, *, job_id, operator_id, reason, started_at) -> int:
        sid = len(self.rows) + 1
        self.rows[sid] = StandbyLog(
            standby_id=sid,
            job_id=job_id,
            operator_id=operator_id,
            reason=reason,
            started_at=started_at,
            created_at=CREATED_AT,
        )
        return sid

    def get_by_id(self, standby_id):
        log = self.rows.get(int(standby_id))
        return self._joined(log) if log else None

    def find_active(self, *, job_id, operator_id):
        return next(
            (
                self._joined(s)
                for s in self.rows.values()
                if s.job_id == job_id and s.operator_id == operator_id and s.status == StandbyStatus.ACTIVE
            ),
            None,
        )

    def list_logs(self, *, job_id=None, operator_id=None):
        rows = [
            self._joined(s)
            for s in self.rows.values()
            if (job_id is None or s.job_id == job_id) and (operator_id is None or s.operator_id == operator_id)
        ]
        return sorted(rows, key=lambda s: (s.started_at, s.standby_id), reverse=True)

    def finish(self, standby_id, *, ended_at, duration_hours, billed_amount) -> bool:
        log = self.rows[int(standby_id)]
        if log.status != StandbyStatus.ACTIVE:
            return False
        self.rows[log.standby_id] = replace(
            log,
            status=StandbyStatus.COMPLETED,
            ended_at=ended_at,
            duration_hours=duration_hours,
            billed_amount=billed_amount,
        )
        return True


class InMemoryEquipment:
    def __init__(self, users: InMemoryUsers):
        self.rows: dict[int, Equipment] = {}
        self.assignments: dict[int, EquipmentAssignment] = {}
        self.scans: list[tuple[int, Optional[int], str]] = []
        self._users = users
        self._next_id = 1

    def create(self, fields) -> int:
        eid = self._next_id
        self._next_id += 1
        values = dict(fields)
        values["is_from_inventory"] = bool(values.get("is_from_inventory", False))
        self.rows[eid] = Equipment(equipment_id=eid, created_at=CREATED_AT, **values)
        return eid

    def add(self, **fields) -> Equipment:
        fields.setdefault("name", "Core drill")
        fields.setdefault("equipment_type", EquipmentType.TOOL)
        fields.setdefault("qr_code", f"EQ-TEST{self._next_id:04d}")
        return self.get_by_id(self.create(fields))

    def get_by_id(self, equipment_id):
        item = self.rows.get(int(equipment_id))
        if item and item.assigned_to:
            holder = self._users.get_by_id(item.assigned_to)
            item = replace(item, assigned_to_name=holder.full_name if holder else None)
        return item

    def get_by_qr_code(self, qr_code):
        return next((self.get_by_id(e.equipment_id) for e in self.rows.values() if e.qr_code == qr_code), None)

    def get_by_serial(self, serial_number):
        return next((e for e in self.rows.values() if e.serial_number == serial_number), None)

    def list_equipment(self, *, status=None, assigned_to=None):
        return [
            self.get_by_id(e.equipment_id)
            for e in self.rows.values()
            if (status is None or e.status == status) and (assigned_to is None or e.assigned_to == assigned_to)
        ]

    def update_fields(self, equipment_id, fields) -> bool:
        self.rows[int(equipment_id)] = replace(self.rows[int(equipment_id)], **fields)
        return True

    def log_scan(self, *, equipment_id, user_id, action, notes=None) -> None:
        self.scans.append((equipment_id, user_id, action))

    def create_assignment(self, *, equipment_id, operator_id, assigned_at, notes=None) -> int:
        aid = len(self.assignments) + 1
        self.assignments[aid] = EquipmentAssignment(
            assignment_id=aid,
            equipment_id=equipment_id,
            operator_id=operator_id,
            assigned_at=assigned_at,
            checkout_notes=notes,
        )
        return aid

    def get_active_assignment(self, equipment_id):
        return next(
            (
                a
                for a in self.assignments.values()
                if a.equipment_id == equipment_id and a.status == AssignmentStatus.ACTIVE
            ),
            None,
        )

    def close_assignment(self, assignment_id, *, returned_at, notes=None) -> bool:
        self.assignments[assignment_id] = replace(
            self.assignments[assignment_id],
            status=AssignmentStatus.RETURNED,
            returned_at=returned_at,
            return_notes=notes,
        )
        return True

    def list_assignments(self, *, equipment_id=None, operator_id=None, active_only=False):
        rows = [
            a
            for a in self.assignments.values()
            if (equipment_id is None or a.equipment_id == equipment_id)
            and (operator_id is None or a.operator_id == operator_id)
            and (not active_only or a.status == AssignmentStatus.ACTIVE)
        ]
        return sorted(rows, key=lambda a: (a.assigned_at, a.assignment_id), reverse=True)

    def add_usage_feet(self, equipment_id, feet) -> None:
        item = self.rows[int(equipment_id)]
        self.rows[item.equipment_id] = replace(item, total_usage_feet=item.total_usage_feet + feet)


class InMemoryMaintenance:
    def __init__(self):
        self.turn_ins: dict[int, TurnInRequest] = {}
        self.alerts: dict[int, MaintenanceAlert] = {}

    def create_turn_in(self, *, equipment_id, requested_by, reason, description, urgency) -> int:
        rid = len(self.turn_ins) + 1
        self.turn_ins[rid] = TurnInRequest(
            request_id=rid,
            equipment_id=equipment_id,
            requested_by=requested_by,
            reason=reason,
            description=description,
            urgency=urgency,
            created_at=CREATED_AT,
        )
        return rid

    def get_turn_in(self, request_id):
        return self.turn_ins.get(int(request_id))

    def list_turn_ins(self, *, status=None, equipment_id=None, requested_by=None):
        return [
            r
            for r in self.turn_ins.values()
            if (status is None or r.status == status)
            and (equipment_id is None or r.equipment_id == equipment_id)
            and (requested_by is None or r.requested_by == requested_by)
        ]

    def update_turn_in(self, request_id, fields) -> bool:
        self.turn_ins[request_id] = replace(self.turn_ins[request_id], **fields)
        return True

    def create_alert(self, *, equipment_id, operator_id, alert_type, severity, title, message) -> int:
        aid = len(self.alerts) + 1
        self.alerts[aid] = MaintenanceAlert(
            alert_id=aid,
            equipment_id=equipment_id,
            operator_id=operator_id,
            alert_type=alert_type,
            severity=severity,
            title=title,
            message=message,
            created_at=CREATED_AT,
        )
        return aid

    def get_alert(self, alert_id):
        return self.alerts.get(int(alert_id))

    def list_alerts(self, *, resolved=None):
        return [a for a in self.alerts.values() if resolved is None or a.is_resolved == resolved]

    def resolve_alert(self, alert_id, *, resolved_at) -> bool:
        self.alerts[alert_id] = replace(self.alerts[alert_id], is_resolved=True, resolved_at=resolved_at)
        return True


class InMemoryDamageReports:
    def __init__(self, equipment: InMemoryEquipment, users: InMemoryUsers):
        self.rows: dict[int, DamageReport] = {}
        self._equipment = equipment
        self._users = users

    def _joined(self, report: DamageReport) -> DamageReport:
        item = self._equipment.get_by_id(report.equipment_id)
        reporter = self._users.get_by_id(report.reported_by)
        reviewer = self._users.get_by_id(report.reviewed_by) if report.reviewed_by else None
        return replace(
            report,
            equipment_name=item.name if item else None,
            reporter_name=reporter.full_name if reporter else None,
            reviewer_name=reviewer.full_name if reviewer else None,
        )

    def create(self, fields) -> int:
        rid = len(self.rows) + 1
        self.rows[rid] = DamageReport(report_id=rid, created_at=CREATED_AT, **fields)
        return rid

    def get_by_id(self, report_id):
        report = self.rows.get(int(report_id))
        return self._joined(report) if report else None

    def list_reports(self, *, equipment_id=None, status=None, reported_by=None):
        rows = [
            self._joined(r)
            for r in self.rows.values()
            if (equipment_id is None or r.equipment_id == equipment_id)
            and (status is None or r.status == status)
            and (reported_by is None or r.reported_by == reported_by)
        ]
        return sorted(rows, key=lambda r: r.report_id, reverse=True)

    def update_fields(self, report_id, fields) -> bool:
        self.rows[int(report_id)] = replace(self.rows[int(report_id)], **fields)
        return True


class InMemoryEquipmentUsage:
    def __init__(self, equipment: InMemoryEquipment, jobs: InMemoryJobs):
        self.rows: dict[int, EquipmentUsage] = {}
        self._equipment = equipment
        self._jobs = jobs

    def record(self, fields) -> int:
        uid = len(self.rows) + 1
        self.rows[uid] = EquipmentUsage(usage_id=uid, created_at=CREATED_AT, **fields)
        if fields.get("equipment_id") and fields.get("linear_feet_cut", 0) > 0:
            self._equipment.add_usage_feet(fields["equipment_id"], fields["linear_feet_cut"])
        return uid

    def get_by_id(self, usage_id):
        row = self.rows.get(int(usage_id))
        if not row:
            return None
        job = self._jobs.get_by_id(row.job_id)
        return replace(row, job_number=job.job_number if job else None)

    def list_usage(self, *, job_id=None, operator_id=None, equipment_id=None, equipment_type=None, limit=100):
        rows = [
            self.get_by_id(u.usage_id)
            for u in self.rows.values()
            if (job_id is None or u.job_id == job_id)
            and (operator_id is None or u.operator_id == operator_id)
            and (equipment_id is None or u.equipment_id == equipment_id)
            and (equipment_type is None or u.equipment_type == equipment_type)
        ]
        return sorted(rows, key=lambda u: u.usage_id, reverse=True)[:limit]


class InMemoryInventory:
    def __init__(self, equipment: InMemoryEquipment):
        self.items: dict[int, InventoryItem] = {}
        self.transactions: list[InventoryTransaction] = []
        self._equipment = equipment

    def _record(self, inventory_id, kind, before, after, performed_by, operator_id=None, equipment_id=None, notes=None):
        self.transactions.append(
            InventoryTransaction(
                transaction_id=len(self.transactions) + 1,
                inventory_id=inventory_id,
                transaction_type=kind,
                quantity_change=after - before,
                quantity_before=before,
                quantity_after=after,
                operator_id=operator_id,
                equipment_id=equipment_id,
                performed_by=performed_by,
                notes=notes,
                created_at=CREATED_AT,
                item_name=self.items[inventory_id].name,
            )
        )

    def create(self, fields, *, performed_by) -> int:
        iid = len(self.items) + 1
        self.items[iid] = InventoryItem(inventory_id=iid, created_by=performed_by, created_at=CREATED_AT, **fields)
        self._record(
            iid, InventoryTransactionType.INITIAL_STOCK, 0, self.items[iid].quantity_in_stock, performed_by, notes="Initial stock"
        )
        return iid

    def get_by_id(self, inventory_id):
        return self.items.get(int(inventory_id))

    def list_items(self, *, low_stock_only=False):
        return [i for i in self.items.values() if i.is_low_stock or not low_stock_only]

    def add_stock(self, inventory_id, *, quantity, performed_by, notes=None):
        item = self.items.get(inventory_id)
        if not item:
            return None
        after = item.quantity_in_stock + quantity
        self.items[inventory_id] = replace(item, quantity_in_stock=after)
        self._record(inventory_id, InventoryTransactionType.STOCK_ADDED, item.quantity_in_stock, after, performed_by, notes=notes)
        return StockChange(quantity_before=item.quantity_in_stock, quantity_after=after)

    def assign_unit(self, inventory_id, *, operator_id, equipment_fields, performed_by, assigned_at, notes=None):
        item = self.items.get(inventory_id)
        if not item or item.quantity_in_stock < 1:
            return None
        after = item.quantity_in_stock - 1
        self.items[inventory_id] = replace(item, quantity_in_stock=after)
        equipment_id = self._equipment.create(equipment_fields)
        self._equipment.create_assignment(
            equipment_id=equipment_id, operator_id=operator_id, assigned_at=assigned_at, notes=notes
        )
        self._record(
            inventory_id,
            InventoryTransactionType.ASSIGNED,
            item.quantity_in_stock,
            after,
            performed_by,
            operator_id=operator_id,
            equipment_id=equipment_id,
            notes=notes,
        )
        return StockChange(quantity_before=item.quantity_in_stock, quantity_after=after, equipment_id=equipment_id)

    def list_transactions(self, *, inventory_id=None, limit=100):
        rows = [t for t in reversed(self.transactions) if inventory_id is None or t.inventory_id == inventory_id]
        return rows[:limit]


class InMemoryDocuments:
    def __init__(self):
        self.rows: dict[int, JobDocument] = {}

    def create(self, *, job_id, doc_type, file_name, content, signer_name, created_by) -> int:
        did = len(self.rows) + 1
        self.rows[did] = JobDocument(
            document_id=did,
            job_id=job_id,
            doc_type=doc_type,
            file_name=file_name,
            signer_name=signer_name,
            created_by=created_by,
            created_at=CREATED_AT,
            content=content,
        )
        return did

    def get_by_id(self, document_id):
        return self.rows.get(int(document_id))

    def list_for_job(self, job_id):
        return [replace(d, content=None) for d in self.rows.values() if d.job_id == job_id]


class FakeMailer:
    """Stands in for the SMTP Mailer; records what would have been sent."""

    def __init__(self, *, configured: bool = True, succeed: bool = True):
        self.is_configured = configured
        self.succeed = succeed
        self.sent: list[dict] = []

    def send(self, *, to, subject, html, attachments=()) -> bool:
        if not self.is_configured:
            return False
        self.sent.append({"to": to, "subject": subject, "html": html, "attachments": list(attachments)})
        return self.succeed


def make_user(user_id: int, role: Role, *, name: Optional[str] = None, email: Optional[str] = None, **kw) -> User:
    return User(
        user_id=user_id,
        full_name=name or f"User {user_id}",
        email=email or f"user{user_id}@pontifex.example",
        password_hash=kw.pop("password_hash", "not-a-real-hash"),
        role=role,
        created_at=CREATED_AT,
        **kw,
    )


@pytest.fixture
def admin() -> User:
    return make_user(1, Role.ADMIN, name="Alice Admin")


@pytest.fixture
def operator() -> User:
    return make_user(2, Role.OPERATOR, name="Oscar Operator")


@pytest.fixture
def manager() -> User:
    return make_user(3, Role.INVENTORY_MANAGER, name="Ivy Inventory")


@pytest.fixture
def other_operator() -> User:
    return make_user(4, Role.OPERATOR, name="Olga Operator")


@pytest.fixture
def users(admin, operator, manager, other_operator) -> InMemoryUsers:
    return InMemoryUsers([admin, operator, manager, other_operator])


@pytest.fixture
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture
def notifier(mailer) -> EmailNotifier:
    return EmailNotifier(mailer, company_name="Pontifex Industries", app_url="http://localhost:5000")
