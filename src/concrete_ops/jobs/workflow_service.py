from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable, Optional

from ..common.datetime_utils import hours_between, now_local
from ..common.validators import optional_str, require_non_empty
from ..core.constants import DEFAULT_JOB_HOURS
from ..core.enums import JobStatus
from ..core.exceptions import AuthorizationError, ValidationError
from ..users.model import User
from .model import DailyLog, JobOrder, PerformanceRecord, WorkItem
from .repository import JobActivityRepository, JobOrderRepository
from .service import JobOrderService, ensure_can_access
from .status_sync import derive_job_status

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DailyLogResult:
    log: DailyLog
    continue_next_day: bool


@dataclass
class SyncReport:
    checked: int = 0
    updated: int = 0
    changes: list[dict] = field(default_factory=list)
    errors: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"checked": self.checked, "updated": self.updated, "changes": self.changes, "errors": self.errors}


def _optional_number(value: Any, field_name: str, cast: Callable[[Any], Any]):
    if value is None or value == "":
        return None
    try:
        return cast(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")


def _work_performed(value: Any) -> list[str]:
    if value is None or value == "":
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    return [str(value)]


def primary_work_type(items: list[WorkItem]) -> Optional[str]:
    """Most frequent work type; the earliest recorded one wins a tie."""
    counts: dict[str, int] = {}
    for item in items:
        if item.work_type:
            counts[item.work_type] = counts.get(item.work_type, 0) + 1
    if not counts:
        return None
    return max(counts, key=counts.__getitem__)


class JobWorkflowService:
    """Use case: field work on a job (daily logs, cuts, completion) and status sync."""

    def __init__(
        self,
        jobs: JobOrderRepository,
        activity: JobActivityRepository,
        job_orders: JobOrderService,
        *,
        today: Callable[[], date] = date.today,
    ):
        self._jobs = jobs
        self._activity = activity
        self._job_orders = job_orders
        self._today = today

    def submit_daily_log(self, user: User, *, job_id: int, body: dict[str, Any], now: Optional[datetime] = None) -> DailyLogResult:
        job = self._job_orders.get_job(job_id)
        if job.assigned_to != user.user_id:
            raise AuthorizationError("You are not assigned to this job")

        now = now or now_local()
        start = job.work_started_at or job.route_started_at
        hours = round(hours_between(start, now), 2) if start else 0.0

        values = dict(
            job_id=job.job_id,
            operator_id=user.user_id,
            log_date=now.date(),
            route_started_at=job.route_started_at,
            work_started_at=job.work_started_at,
            day_completed_at=now,
            work_performed=_work_performed(body.get("workPerformed")),
            notes=optional_str(body.get("notes")),
            hours_worked=hours,
            signer_name=optional_str(body.get("signerName")),
        )
        latitude = _optional_number(body.get("latitude"), "latitude", float)
        longitude = _optional_number(body.get("longitude"), "longitude", float)
        log_id = self._activity.add_daily_log(latitude=latitude, longitude=longitude, **values)
        log = DailyLog(log_id=log_id, day_end_latitude=latitude, day_end_longitude=longitude, **values)

        continue_next_day = bool(body.get("continueNextDay"))
        if continue_next_day:
            self._jobs.update_fields(
                job.job_id,
                {
                    "is_multi_day": True,
                    "status": JobStatus.SCHEDULED,
                    "route_started_at": None,
                    "work_started_at": None,
                    "route_start_latitude": None,
                    "route_start_longitude": None,
                    "work_start_latitude": None,
                    "work_start_longitude": None,
                },
            )
            logger.info("Job %s continues next day after %.2f hours", job.job_id, hours)

        return DailyLogResult(log=log, continue_next_day=continue_next_day)

    def list_daily_logs(self, user: User, *, job_id: int) -> list[DailyLog]:
        self._job_orders.get_for_user(user, job_id)
        return list(self._activity.list_daily_logs(int(job_id)))

    def add_work_item(self, user: User, *, job_id: int, body: dict[str, Any]) -> WorkItem:
        job = self._job_orders.get_job(job_id)
        ensure_can_access(user, job)

        work_type = require_non_empty(body.get("work_type"), "work_type")
        values = dict(
            job_id=job.job_id,
            operator_id=user.user_id,
            work_type=work_type,
            linear_feet_cut=_optional_number(body.get("linear_feet_cut"), "linear_feet_cut", float),
            core_quantity=_optional_number(body.get("core_quantity"), "core_quantity", int),
            core_depth_inches=_optional_number(body.get("core_depth_inches"), "core_depth_inches", float),
            notes=optional_str(body.get("notes")),
        )
        item_id = self._activity.add_work_item(**values)
        logger.info("Work item %s (%s) added to job %s", item_id, work_type, job.job_id)
        return WorkItem(item_id=item_id, **values)

    def list_work_items(self, user: User, *, job_id: int) -> list[WorkItem]:
        self._job_orders.get_for_user(user, job_id)
        return list(self._activity.list_work_items(int(job_id)))

    def complete_job(
        self,
        user: User,
        *,
        job_id: Any,
        hours_worked: Any = None,
        customer_rating: Any = None,
        now: Optional[datetime] = None,
    ) -> PerformanceRecord:
        if not job_id:
            raise ValidationError("jobId is required")
        job = self._job_orders.get_job(_optional_number(job_id, "jobId", int))

        items = list(self._activity.list_work_items(job.job_id))
        total_feet = round(sum(i.linear_feet_cut or 0 for i in items), 2)

        hours = _optional_number(hours_worked, "hoursWorked", float)
        if not hours and job.work_started_at and job.work_completed_at:
            hours = hours_between(job.work_started_at, job.work_completed_at)
        if not hours or hours <= 0:
            hours = DEFAULT_JOB_HOURS

        record = PerformanceRecord(
            operator_id=user.user_id,
            job_id=job.job_id,
            work_type=primary_work_type(items),
            linear_feet_cut=total_feet,
            hours_worked=round(hours, 2),
            productivity_rate=round(total_feet / hours, 2),
            job_date=now or now_local(),
            customer_rating=_optional_number(customer_rating, "customerRating", int),
        )
        self._activity.upsert_performance(record)
        logger.info(
            "Performance recorded for operator %s on job %s: %.2f ft in %.2f h",
            user.user_id,
            job.job_id,
            record.linear_feet_cut,
            record.hours_worked,
        )
        return record

    def sign_completion(self, user: User, *, job_id: int, signer_name: Any, now: Optional[datetime] = None) -> JobOrder:
        signer = require_non_empty(signer_name, "Signer name")
        job = self._job_orders.get_for_user(user, job_id)

        now = now or now_local()
        fields: dict[str, Any] = {
            "completion_signed_at": now,
            "completion_signer_name": signer,
            "status": JobStatus.COMPLETED,
        }
        self._jobs.update_fields(job.job_id, fields)
        logger.info("Job %s signed off by %s", job.job_id, signer)
        return self._job_orders.get_job(job.job_id)

    def sync_statuses(self) -> SyncReport:
        today = self._today()
        report = SyncReport()
        for job in self._jobs.list_jobs():
            report.checked += 1
            new_status = derive_job_status(job, today)
            if new_status is None or new_status == job.status:
                continue
            try:
                self._jobs.update_fields(job.job_id, {"status": new_status})
            except Exception as e:
                logger.warning("Status sync failed for job %s: %s", job.job_id, e)
                report.errors.append({"jobId": job.job_id, "jobNumber": job.job_number, "error": str(e)})
                continue
            report.updated += 1
            report.changes.append(
                {"jobId": job.job_id, "jobNumber": job.job_number, "from": job.status.value, "to": new_status.value}
            )
        logger.info("Status sync: checked=%s updated=%s errors=%s", report.checked, report.updated, len(report.errors))
        return report
