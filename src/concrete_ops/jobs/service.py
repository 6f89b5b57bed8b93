from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

from ..common.datetime_utils import now_local, parse_optional_date
from ..common.validators import optional_str, pick_fields, require_email, require_non_empty
from ..core.enums import JobPriority, JobStatus
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..users.model import User
from ..users.repository import UserRepository
from .model import JobOrder, StatusHistoryEntry
from .repository import JobActivityRepository, JobOrderRepository

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("job_number", "title", "customer_name", "job_type", "location", "address")

EDITABLE_FIELDS = REQUIRED_FIELDS + (
    "customer_contact",
    "customer_email",
    "description",
    "assigned_to",
    "foreman_name",
    "foreman_phone",
    "salesman_name",
    "status",
    "priority",
    "scheduled_date",
    "arrival_time",
    "shop_arrival_time",
    "estimated_hours",
    "equipment_needed",
    "po_number",
)

_TEXT_FIELDS = (
    "customer_contact",
    "description",
    "foreman_name",
    "foreman_phone",
    "salesman_name",
    "arrival_time",
    "shop_arrival_time",
    "po_number",
)

# First time a job reaches one of these statuses, stamp the matching timestamp/coordinates.
_STATUS_STAMPS = {
    JobStatus.IN_ROUTE: ("route_started_at", "route_start_latitude", "route_start_longitude"),
    JobStatus.IN_PROGRESS: ("work_started_at", "work_start_latitude", "work_start_longitude"),
    JobStatus.COMPLETED: ("work_completed_at", "work_end_latitude", "work_end_longitude"),
}


@dataclass(frozen=True)
class JobListing:
    jobs: list[JobOrder]
    summary: dict


# Older clients send "en_route".
STATUS_ALIASES = {"en_route": JobStatus.IN_ROUTE}


def parse_status(value: Any) -> JobStatus:
    if isinstance(value, str) and value in STATUS_ALIASES:
        return STATUS_ALIASES[value]
    try:
        return JobStatus(value)
    except ValueError:
        valid = ", ".join(s.value for s in JobStatus)
        raise ValidationError(f"Invalid status. Must be one of: {valid}")


def ensure_can_access(user: User, job: JobOrder) -> None:
    if user.is_admin:
        return
    if job.assigned_to != user.user_id:
        raise AuthorizationError("You can only access jobs assigned to you")


def _optional_float(value: Any, field_name: str) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")


def _equipment_list(value: Any) -> list[str]:
    if value is None or value == "":
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value if str(v).strip()]
    raise ValidationError("equipment_needed must be a list")


class JobOrderService:
    """Use case: schedule job orders and move them through their statuses."""

    def __init__(self, jobs: JobOrderRepository, activity: JobActivityRepository, users: UserRepository):
        self._jobs = jobs
        self._activity = activity
        self._users = users

    def _clean_fields(self, fields: dict[str, Any]) -> dict[str, Any]:
        clean: dict[str, Any] = {}
        for key in REQUIRED_FIELDS:
            if key in fields:
                clean[key] = require_non_empty(fields[key], key)
        for key in _TEXT_FIELDS:
            if key in fields:
                clean[key] = optional_str(fields[key])

        if "customer_email" in fields:
            email = optional_str(fields["customer_email"])
            clean["customer_email"] = require_email(email) if email else None
        if "status" in fields:
            clean["status"] = parse_status(fields["status"])
        if "priority" in fields:
            try:
                clean["priority"] = JobPriority(fields["priority"] or JobPriority.MEDIUM.value)
            except ValueError:
                raise ValidationError("Invalid priority. Must be one of: low, medium, high, urgent")
        if "scheduled_date" in fields:
            clean["scheduled_date"] = parse_optional_date(fields["scheduled_date"])
        if "estimated_hours" in fields:
            clean["estimated_hours"] = _optional_float(fields["estimated_hours"], "estimated_hours")
        if "equipment_needed" in fields:
            clean["equipment_needed"] = _equipment_list(fields["equipment_needed"])
        if "assigned_to" in fields:
            clean["assigned_to"] = self._resolve_operator(fields["assigned_to"])
        return clean

    def _resolve_operator(self, value: Any) -> Optional[int]:
        if value is None or value == "":
            return None
        try:
            operator_id = int(value)
        except (TypeError, ValueError):
            raise ValidationError("assigned_to must be a user id")
        if not self._users.get_by_id(operator_id):
            raise ValidationError("Assigned operator not found")
        return operator_id

    def get_job(self, job_id: int) -> JobOrder:
        job = self._jobs.get_by_id(int(job_id))
        if not job:
            raise NotFoundError("Job order not found")
        return job

    def create_job(self, *, creator: User, body: dict[str, Any], now: Optional[datetime] = None) -> JobOrder:
        missing = [k for k in REQUIRED_FIELDS if not optional_str(body.get(k))]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        fields = self._clean_fields(pick_fields(body, EDITABLE_FIELDS))
        if self._jobs.get_by_number(fields["job_number"]):
            raise ConflictError(f"Job number {fields['job_number']} already exists")

        fields.setdefault("priority", JobPriority.MEDIUM)
        if fields.get("assigned_to"):
            fields["status"] = JobStatus.ASSIGNED
            fields["assigned_at"] = now or now_local()
        else:
            fields["status"] = JobStatus.SCHEDULED
        fields["created_by"] = creator.user_id

        job_id = self._jobs.create(fields)
        logger.info("Job %s (%s) created by %s", job_id, fields["job_number"], creator.user_id)
        return self.get_job(job_id)

    def admin_list(
        self,
        *,
        status: Optional[str] = None,
        assigned_to: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> JobListing:
        jobs = list(
            self._jobs.list_jobs(
                status=parse_status(status) if status else None,
                assigned_to=assigned_to,
                start_date=start_date,
                end_date=end_date,
            )
        )
        counts = {s.value: 0 for s in JobStatus}
        for job in jobs:
            counts[job.status.value] += 1
        hours = [j.estimated_hours for j in jobs if j.estimated_hours is not None]
        summary = {
            "totalJobs": len(jobs),
            "statusCounts": counts,
            "avgEstimatedHours": round(sum(hours) / len(hours), 2) if hours else 0,
        }
        return JobListing(jobs=jobs, summary=summary)

    def update_job(self, *, job_id: int, body: dict[str, Any], now: Optional[datetime] = None) -> JobOrder:
        job = self.get_job(job_id)
        fields = self._clean_fields(pick_fields(body, EDITABLE_FIELDS))
        if not fields:
            raise ValidationError("No valid fields to update")

        number = fields.get("job_number")
        if number and number != job.job_number and self._jobs.get_by_number(number):
            raise ConflictError(f"Job number {number} already exists")

        new_operator = fields.get("assigned_to")
        if new_operator and new_operator != job.assigned_to:
            fields["assigned_at"] = now or now_local()
            if job.status == JobStatus.SCHEDULED and "status" not in fields:
                fields["status"] = JobStatus.ASSIGNED

        self._jobs.update_fields(job.job_id, fields)
        logger.info("Job %s updated: %s", job.job_id, sorted(fields))
        return self.get_job(job.job_id)

    def delete_job(self, *, job_id: int) -> None:
        job = self.get_job(job_id)
        if not self._jobs.delete_by_id(job.job_id):
            raise NotFoundError("Job order not found")
        logger.info("Job %s (%s) deleted", job.job_id, job.job_number)

    def list_for_user(
        self,
        user: User,
        *,
        status: Optional[str] = None,
        include_completed: bool = False,
        scheduled_date: Optional[date] = None,
    ) -> list[JobOrder]:
        status_filter = parse_status(status) if status else None
        return list(
            self._jobs.list_jobs(
                status=status_filter,
                assigned_to=None if user.is_admin else user.user_id,
                start_date=scheduled_date,
                end_date=scheduled_date,
                include_completed=include_completed or status_filter == JobStatus.COMPLETED,
            )
        )

    def get_for_user(self, user: User, job_id: int) -> JobOrder:
        job = self.get_job(job_id)
        ensure_can_access(user, job)
        return job

    def update_status(
        self,
        user: User,
        *,
        job_id: int,
        status: Any,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        now: Optional[datetime] = None,
    ) -> JobOrder:
        new_status = parse_status(status)
        latitude = _optional_float(latitude, "latitude")
        longitude = _optional_float(longitude, "longitude")
        job = self.get_job(job_id)
        if not user.is_admin and job.assigned_to != user.user_id:
            raise AuthorizationError("You can only update jobs assigned to you")

        now = now or now_local()
        fields: dict[str, Any] = {"status": new_status}
        stamp = _STATUS_STAMPS.get(new_status)
        if stamp and getattr(job, stamp[0]) is None:
            fields[stamp[0]] = now
            fields[stamp[1]] = latitude
            fields[stamp[2]] = longitude

        self._jobs.update_fields(job.job_id, fields)
        logger.info("Job %s status %s -> %s by %s", job.job_id, job.status.value, new_status.value, user.user_id)

        try:
            self._activity.add_status_history(
                job_id=job.job_id,
                operator_id=user.user_id,
                status=new_status,
                latitude=latitude,
                longitude=longitude,
                changed_at=now,
            )
        except Exception:
            logger.warning("Could not record status history for job %s", job.job_id, exc_info=True)

        return self.get_job(job.job_id)

    def history(self, user: User, job_id: int) -> list[StatusHistoryEntry]:
        self.get_for_user(user, job_id)
        return list(self._activity.list_status_history(int(job_id)))
