from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional, Protocol, Sequence

from ..core.enums import JobStatus
from .model import DailyLog, JobOrder, PerformanceRecord, StandbyLog, StatusHistoryEntry, WorkItem


class JobOrderRepository(Protocol):
    def create(self, fields: dict[str, Any]) -> int:
        raise NotImplementedError

    def get_by_id(self, job_id: int) -> Optional[JobOrder]:
        raise NotImplementedError

    def get_by_number(self, job_number: str) -> Optional[JobOrder]:
        raise NotImplementedError

    def list_jobs(
        self,
        *,
        status: Optional[JobStatus] = None,
        assigned_to: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        include_completed: bool = True,
    ) -> Sequence[JobOrder]:
        """Ordered by scheduled date, then job number."""
        raise NotImplementedError

    def update_fields(self, job_id: int, fields: dict[str, Any]) -> bool:
        raise NotImplementedError

    def delete_by_id(self, job_id: int) -> bool:
        raise NotImplementedError


class JobActivityRepository(Protocol):
    """Rows recorded while a job is being worked: history, daily logs, cuts, performance."""

    def add_status_history(
        self,
        *,
        job_id: int,
        operator_id: int,
        status: JobStatus,
        latitude: Optional[float],
        longitude: Optional[float],
        changed_at: datetime,
    ) -> int:
        raise NotImplementedError

    def list_status_history(self, job_id: int) -> Sequence[StatusHistoryEntry]:
        raise NotImplementedError

    def add_daily_log(
        self,
        *,
        job_id: int,
        operator_id: int,
        log_date: date,
        route_started_at: Optional[datetime],
        work_started_at: Optional[datetime],
        day_completed_at: datetime,
        work_performed: list[str],
        notes: Optional[str],
        hours_worked: float,
        signer_name: Optional[str],
        latitude: Optional[float],
        longitude: Optional[float],
    ) -> int:
        raise NotImplementedError

    def list_daily_logs(self, job_id: int) -> Sequence[DailyLog]:
        raise NotImplementedError

    def add_work_item(
        self,
        *,
        job_id: int,
        operator_id: Optional[int],
        work_type: str,
        linear_feet_cut: Optional[float],
        core_quantity: Optional[int],
        core_depth_inches: Optional[float],
        notes: Optional[str],
    ) -> int:
        raise NotImplementedError

    def list_work_items(self, job_id: int) -> Sequence[WorkItem]:
        raise NotImplementedError

    def upsert_performance(self, record: PerformanceRecord) -> None:
        """One row per (operator, job); later completions overwrite earlier ones."""
        raise NotImplementedError


class StandbyRepository(Protocol):
    def create(self, *, job_id: int, operator_id: int, reason: str, started_at: datetime) -> int:
        raise NotImplementedError

    def get_by_id(self, standby_id: int) -> Optional[StandbyLog]:
        raise NotImplementedError

    def find_active(self, *, job_id: int, operator_id: int) -> Optional[StandbyLog]:
        raise NotImplementedError

    def list_logs(self, *, job_id: Optional[int] = None, operator_id: Optional[int] = None) -> Sequence[StandbyLog]:
        """Most recently started first."""
        raise NotImplementedError

    def finish(self, standby_id: int, *, ended_at: datetime, duration_hours: float, billed_amount: float) -> bool:
        """Close an active log; False when it was already closed."""
        raise NotImplementedError
