from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import iso
from ..core.constants import STANDBY_HOURLY_RATE, STANDBY_POLICY_VERSION
from ..core.enums import JobPriority, JobStatus, StandbyStatus


@dataclass(frozen=True)
class JobOrder:
    """Domain entity: a scheduled cutting job for a customer."""

    job_id: int
    job_number: str
    title: str
    customer_name: str
    job_type: str
    location: str
    address: str
    status: JobStatus = JobStatus.SCHEDULED
    priority: JobPriority = JobPriority.MEDIUM
    customer_contact: Optional[str] = None
    customer_email: Optional[str] = None
    description: Optional[str] = None
    assigned_to: Optional[int] = None
    assigned_operator_name: Optional[str] = None
    foreman_name: Optional[str] = None
    foreman_phone: Optional[str] = None
    salesman_name: Optional[str] = None
    scheduled_date: Optional[date] = None
    arrival_time: Optional[str] = None
    shop_arrival_time: Optional[str] = None
    estimated_hours: Optional[float] = None
    equipment_needed: list[str] = field(default_factory=list)
    po_number: Optional[str] = None
    assigned_at: Optional[datetime] = None
    route_started_at: Optional[datetime] = None
    work_started_at: Optional[datetime] = None
    work_completed_at: Optional[datetime] = None
    completion_signed_at: Optional[datetime] = None
    completion_signer_name: Optional[str] = None
    route_start_latitude: Optional[float] = None
    route_start_longitude: Optional[float] = None
    work_start_latitude: Optional[float] = None
    work_start_longitude: Optional[float] = None
    work_end_latitude: Optional[float] = None
    work_end_longitude: Optional[float] = None
    is_multi_day: bool = False
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.job_id,
            "job_number": self.job_number,
            "title": self.title,
            "customer_name": self.customer_name,
            "customer_contact": self.customer_contact,
            "customer_email": self.customer_email,
            "job_type": self.job_type,
            "location": self.location,
            "address": self.address,
            "description": self.description,
            "assigned_to": self.assigned_to,
            "operator_name": self.assigned_operator_name,
            "foreman_name": self.foreman_name,
            "foreman_phone": self.foreman_phone,
            "salesman_name": self.salesman_name,
            "status": self.status.value,
            "priority": self.priority.value,
            "scheduled_date": iso(self.scheduled_date),
            "arrival_time": self.arrival_time,
            "shop_arrival_time": self.shop_arrival_time,
            "estimated_hours": self.estimated_hours,
            "equipment_needed": list(self.equipment_needed),
            "po_number": self.po_number,
            "assigned_at": iso(self.assigned_at),
            "route_started_at": iso(self.route_started_at),
            "work_started_at": iso(self.work_started_at),
            "work_completed_at": iso(self.work_completed_at),
            "completion_signed_at": iso(self.completion_signed_at),
            "completion_signer_name": self.completion_signer_name,
            "route_start_latitude": self.route_start_latitude,
            "route_start_longitude": self.route_start_longitude,
            "work_start_latitude": self.work_start_latitude,
            "work_start_longitude": self.work_start_longitude,
            "work_end_latitude": self.work_end_latitude,
            "work_end_longitude": self.work_end_longitude,
            "is_multi_day": self.is_multi_day,
            "created_by": self.created_by,
            "created_at": iso(self.created_at),
        }


@dataclass(frozen=True)
class StatusHistoryEntry:
    history_id: int
    job_id: int
    operator_id: int
    status: JobStatus
    changed_at: datetime
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "id": self.history_id,
            "job_id": self.job_id,
            "operator_id": self.operator_id,
            "status": self.status.value,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "changed_at": iso(self.changed_at),
        }


@dataclass(frozen=True)
class DailyLog:
    """One day of work on a (possibly multi-day) job."""

    log_id: int
    job_id: int
    operator_id: int
    log_date: date
    day_completed_at: datetime
    hours_worked: float
    route_started_at: Optional[datetime] = None
    work_started_at: Optional[datetime] = None
    work_performed: list[str] = field(default_factory=list)
    notes: Optional[str] = None
    signer_name: Optional[str] = None
    day_end_latitude: Optional[float] = None
    day_end_longitude: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "id": self.log_id,
            "job_id": self.job_id,
            "operator_id": self.operator_id,
            "log_date": iso(self.log_date),
            "route_started_at": iso(self.route_started_at),
            "work_started_at": iso(self.work_started_at),
            "day_completed_at": iso(self.day_completed_at),
            "work_performed": list(self.work_performed),
            "notes": self.notes,
            "hours_worked": self.hours_worked,
            "signer_name": self.signer_name,
            "day_end_latitude": self.day_end_latitude,
            "day_end_longitude": self.day_end_longitude,
        }


@dataclass(frozen=True)
class WorkItem:
    """A cut record: sawing (linear feet) or core drilling (quantity/depth)."""

    item_id: int
    job_id: int
    work_type: str
    operator_id: Optional[int] = None
    linear_feet_cut: Optional[float] = None
    core_quantity: Optional[int] = None
    core_depth_inches: Optional[float] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.item_id,
            "job_id": self.job_id,
            "operator_id": self.operator_id,
            "work_type": self.work_type,
            "linear_feet_cut": self.linear_feet_cut,
            "core_quantity": self.core_quantity,
            "core_depth_inches": self.core_depth_inches,
            "notes": self.notes,
            "created_at": iso(self.created_at),
        }


@dataclass(frozen=True)
class PerformanceRecord:
    operator_id: int
    job_id: int
    work_type: Optional[str]
    linear_feet_cut: float
    hours_worked: float
    productivity_rate: float
    job_date: datetime
    customer_rating: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "operatorId": self.operator_id,
            "jobId": self.job_id,
            "workType": self.work_type,
            "linearFeetCut": self.linear_feet_cut,
            "hoursWorked": self.hours_worked,
            "productivityRate": self.productivity_rate,
            "customerRating": self.customer_rating,
            "jobDate": iso(self.job_date),
        }


@dataclass(frozen=True)
class StandbyLog:
    """Time an operator spent waiting on site, billed to the customer once ended."""

    standby_id: int
    job_id: int
    operator_id: int
    reason: str
    started_at: datetime
    status: StandbyStatus = StandbyStatus.ACTIVE
    ended_at: Optional[datetime] = None
    duration_hours: Optional[float] = None
    billed_amount: Optional[float] = None
    created_at: Optional[datetime] = None
    job_number: Optional[str] = None
    operator_name: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status == StandbyStatus.ACTIVE

    def to_dict(self) -> dict:
        return {
            "id": self.standby_id,
            "job_order_id": self.job_id,
            "job_number": self.job_number,
            "operator_id": self.operator_id,
            "operator_name": self.operator_name,
            "reason": self.reason,
            "status": self.status.value,
            "started_at": iso(self.started_at),
            "ended_at": iso(self.ended_at),
            "duration_hours": self.duration_hours,
            "billed_amount": self.billed_amount,
            "hourly_rate": STANDBY_HOURLY_RATE,
            "policy_version": STANDBY_POLICY_VERSION,
            "created_at": iso(self.created_at),
        }
