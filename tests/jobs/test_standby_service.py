from __future__ import annotations

from datetime import datetime

import pytest

from concrete_ops.core.enums import StandbyStatus
from concrete_ops.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from concrete_ops.jobs.service import JobOrderService
from concrete_ops.jobs.standby_service import StandbyService, standby_charge

from conftest import InMemoryJobActivity, InMemoryJobs, InMemoryStandby

ARRIVED = datetime(2026, 3, 10, 8, 0, 0)


@pytest.fixture
def jobs(users):
    return InMemoryJobs(users)


@pytest.fixture
def standby(jobs, users):
    return InMemoryStandby(jobs, users)


@pytest.fixture
def service(standby, jobs, users):
    return StandbyService(standby, JobOrderService(jobs, InMemoryJobActivity(), users))


@pytest.mark.parametrize(
    "hours, amount",
    [(0.0, 189.0), (0.25, 189.0), (1.0, 189.0), (1.5, 283.5), (2.5, 472.5)],
)
def test_standby_charge_has_one_hour_minimum(hours, amount):
    assert standby_charge(hours) == amount


def test_start_then_end_bills_the_wait(service, jobs, operator):
    job = jobs.add(assigned_to=operator.user_id, job_number="J-410")

    log = service.start(operator, body={"jobId": job.job_id, "reason": "Slab not poured yet"}, now=ARRIVED)
    assert log.status == StandbyStatus.ACTIVE
    assert log.started_at == ARRIVED
    assert log.job_number == "J-410"

    ended = service.end(operator, body={"standbyLogId": log.standby_id}, now=datetime(2026, 3, 10, 9, 30, 0))

    assert ended.status == StandbyStatus.COMPLETED
    assert ended.duration_hours == 1.5
    assert ended.billed_amount == 283.5
    assert ended.to_dict()["hourly_rate"] == 189.0


def test_short_standby_bills_the_minimum(service, jobs, operator):
    job = jobs.add(assigned_to=operator.user_id)
    log = service.start(
        operator, body={"jobId": job.job_id, "reason": "Gate locked", "startedAt": "2026-03-10T08:00:00"}
    )

    ended = service.end(operator, body={"standbyLogId": log.standby_id, "endedAt": "2026-03-10T08:10:00"})

    assert ended.duration_hours == 0.17
    assert ended.billed_amount == 189.0


def test_start_requires_job_and_reason(service, jobs, operator):
    job = jobs.add(assigned_to=operator.user_id)
    with pytest.raises(ValidationError, match="jobId and reason"):
        service.start(operator, body={"jobId": job.job_id})
    with pytest.raises(ValidationError, match="jobId and reason"):
        service.start(operator, body={"reason": "waiting"})
    with pytest.raises(NotFoundError):
        service.start(operator, body={"jobId": 999, "reason": "waiting"})


def test_only_one_running_standby_per_job(service, jobs, operator):
    job = jobs.add(assigned_to=operator.user_id)
    service.start(operator, body={"jobId": job.job_id, "reason": "Crane late"}, now=ARRIVED)

    with pytest.raises(ConflictError):
        service.start(operator, body={"jobId": job.job_id, "reason": "Still waiting"}, now=ARRIVED)


def test_operator_cannot_log_standby_on_someone_elses_job(service, jobs, operator, other_operator):
    job = jobs.add(assigned_to=other_operator.user_id)

    with pytest.raises(AuthorizationError):
        service.start(operator, body={"jobId": job.job_id, "reason": "waiting"})


def test_end_checks_owner_and_state(service, jobs, operator, other_operator):
    job = jobs.add(assigned_to=operator.user_id)
    log = service.start(operator, body={"jobId": job.job_id, "reason": "waiting"}, now=ARRIVED)

    with pytest.raises(NotFoundError, match="Standby log not found"):
        service.end(other_operator, body={"standbyLogId": log.standby_id})
    with pytest.raises(ValidationError, match="cannot end before"):
        service.end(operator, body={"standbyLogId": log.standby_id}, now=datetime(2026, 3, 10, 7, 0, 0))

    service.end(operator, body={"standbyLogId": log.standby_id}, now=datetime(2026, 3, 10, 10, 0, 0))
    with pytest.raises(ValidationError, match="already ended"):
        service.end(operator, body={"standbyLogId": log.standby_id}, now=datetime(2026, 3, 10, 11, 0, 0))


def test_operators_only_list_their_own_standby(service, jobs, admin, operator, other_operator):
    mine = jobs.add(assigned_to=operator.user_id)
    theirs = jobs.add(assigned_to=other_operator.user_id)
    service.start(operator, body={"jobId": mine.job_id, "reason": "waiting"}, now=ARRIVED)
    service.start(other_operator, body={"jobId": theirs.job_id, "reason": "waiting"}, now=ARRIVED)

    own = service.list_logs(operator, operator_id=other_operator.user_id)
    assert [log.operator_id for log in own] == [operator.user_id]

    assert len(service.list_logs(admin)) == 2
    assert [log.job_id for log in service.list_logs(admin, job_id=theirs.job_id)] == [theirs.job_id]
