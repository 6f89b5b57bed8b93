from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from ..common.datetime_utils import hours_between, now_local, parse_iso_datetime
from ..common.validators import optional_str, require_positive_int
from ..core.constants import STANDBY_HOURLY_RATE, STANDBY_MINIMUM_HOURS
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..users.model import User
from .model import StandbyLog
from .repository import StandbyRepository
from .service import JobOrderService, ensure_can_access

logger = logging.getLogger(__name__)


def standby_charge(hours: float) -> float:
    """Amount billed for a standby period; anything under the minimum bills as the minimum."""
    return round(max(hours, STANDBY_MINIMUM_HOURS) * STANDBY_HOURLY_RATE, 2)


class StandbyService:
    """Use case: operators start and end standby on a job; ending it prices the wait."""

    def __init__(self, standby: StandbyRepository, job_orders: JobOrderService):
        self._standby = standby
        self._job_orders = job_orders

    def start(self, user: User, *, body: dict[str, Any], now: Optional[datetime] = None) -> StandbyLog:
        reason = optional_str(body.get("reason"))
        if not body.get("jobId") or not reason:
            raise ValidationError("Missing required fields: jobId and reason")

        job = self._job_orders.get_job(require_positive_int(body["jobId"], "jobId"))
        ensure_can_access(user, job)
        if self._standby.find_active(job_id=job.job_id, operator_id=user.user_id):
            raise ConflictError("Standby is already running for this job")

        started_at = parse_iso_datetime(body["startedAt"]) if body.get("startedAt") else (now or now_local())
        standby_id = self._standby.create(
            job_id=job.job_id, operator_id=user.user_id, reason=reason, started_at=started_at
        )
        logger.info("Standby %s started on job %s by %s: %s", standby_id, job.job_id, user.user_id, reason)
        return self._get(standby_id)

    def end(self, user: User, *, body: dict[str, Any], now: Optional[datetime] = None) -> StandbyLog:
        if not body.get("standbyLogId"):
            raise ValidationError("Missing required field: standbyLogId")

        log = self._standby.get_by_id(require_positive_int(body["standbyLogId"], "standbyLogId"))
        if not log or log.operator_id != user.user_id:
            raise NotFoundError("Standby log not found")
        if not log.is_active:
            raise ValidationError("Standby has already ended")

        ended_at = parse_iso_datetime(body["endedAt"]) if body.get("endedAt") else (now or now_local())
        if ended_at < log.started_at:
            raise ValidationError("Standby cannot end before it started")

        hours = round(hours_between(log.started_at, ended_at), 2)
        amount = standby_charge(hours)
        if not self._standby.finish(log.standby_id, ended_at=ended_at, duration_hours=hours, billed_amount=amount):
            raise ValidationError("Standby has already ended")
        logger.info("Standby %s ended after %.2fh, billed %.2f", log.standby_id, hours, amount)
        return self._get(log.standby_id)

    def list_logs(
        self, user: User, *, job_id: Optional[int] = None, operator_id: Optional[int] = None
    ) -> list[StandbyLog]:
        if not user.is_admin:
            operator_id = user.user_id
        return list(self._standby.list_logs(job_id=job_id, operator_id=operator_id))

    def _get(self, standby_id: int) -> StandbyLog:
        log = self._standby.get_by_id(standby_id)
        if not log:
            raise NotFoundError("Standby log not found")
        return log
