from __future__ import annotations

from datetime import date, datetime

import pytest

from concrete_ops.core.enums import JobPriority, JobStatus
from concrete_ops.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from concrete_ops.jobs.service import JobOrderService

from conftest import InMemoryJobActivity, InMemoryJobs

NOW = datetime(2026, 3, 10, 6, 30, 0)

BODY = {
    "job_number": "J-100",
    "title": "Wall saw opening",
    "customer_name": "Acme Builders",
    "job_type": "wall_sawing",
    "location": "Midtown",
    "address": "200 Peachtree St",
}


@pytest.fixture
def jobs(users):
    return InMemoryJobs(users)


@pytest.fixture
def activity():
    return InMemoryJobActivity()


@pytest.fixture
def service(jobs, activity, users):
    return JobOrderService(jobs, activity, users)


def test_create_without_operator_is_scheduled(service, admin):
    job = service.create_job(creator=admin, body=BODY)
    assert job.status == JobStatus.SCHEDULED
    assert job.priority == JobPriority.MEDIUM
    assert job.created_by == admin.user_id
    assert job.assigned_at is None


def test_create_with_operator_is_assigned(service, admin, operator):
    job = service.create_job(
        creator=admin,
        body={**BODY, "assigned_to": operator.user_id, "equipment_needed": "core drill, vacuum", "status": "completed"},
        now=NOW,
    )
    assert job.status == JobStatus.ASSIGNED
    assert job.assigned_at == NOW
    assert job.assigned_operator_name == operator.full_name
    assert job.equipment_needed == ["core drill", "vacuum"]


def test_create_validation(service, admin):
    with pytest.raises(ValidationError, match="Missing required fields: address"):
        service.create_job(creator=admin, body={**BODY, "address": ""})
    with pytest.raises(ValidationError, match="Assigned operator not found"):
        service.create_job(creator=admin, body={**BODY, "assigned_to": 77})

    service.create_job(creator=admin, body=BODY)
    with pytest.raises(ConflictError):
        service.create_job(creator=admin, body=BODY)


def test_assigning_operator_to_scheduled_job_moves_it_to_assigned(service, admin, operator):
    job = service.create_job(creator=admin, body=BODY)
    updated = service.update_job(job_id=job.job_id, body={"assigned_to": operator.user_id}, now=NOW)
    assert updated.status == JobStatus.ASSIGNED
    assert updated.assigned_at == NOW

    with pytest.raises(ValidationError, match="No valid fields"):
        service.update_job(job_id=job.job_id, body={"bogus": 1})


def test_admin_list_summary(service, jobs, admin):
    jobs.add(status=JobStatus.SCHEDULED, estimated_hours=4)
    jobs.add(status=JobStatus.COMPLETED, estimated_hours=8)
    jobs.add(status=JobStatus.COMPLETED)

    listing = service.admin_list()
    assert listing.summary["totalJobs"] == 3
    assert listing.summary["statusCounts"]["completed"] == 2
    assert listing.summary["avgEstimatedHours"] == 6.0


def test_operators_only_see_their_own_open_jobs(service, jobs, admin, operator, other_operator):
    mine = jobs.add(assigned_to=operator.user_id, status=JobStatus.ASSIGNED, scheduled_date=date(2026, 3, 10))
    jobs.add(assigned_to=operator.user_id, status=JobStatus.COMPLETED)
    theirs = jobs.add(assigned_to=other_operator.user_id, status=JobStatus.ASSIGNED)

    assert [j.job_id for j in service.list_for_user(operator)] == [mine.job_id]
    assert len(service.list_for_user(operator, include_completed=True)) == 2
    assert len(service.list_for_user(admin, include_completed=True)) == 3

    with pytest.raises(AuthorizationError):
        service.get_for_user(operator, theirs.job_id)
    assert service.get_for_user(admin, theirs.job_id).job_id == theirs.job_id


def test_status_update_stamps_first_transition_and_writes_history(service, jobs, activity, operator):
    job = jobs.add(assigned_to=operator.user_id, status=JobStatus.ASSIGNED)

    updated = service.update_status(
        operator, job_id=job.job_id, status="in_route", latitude="33.9", longitude=-84.1, now=NOW
    )
    assert updated.status == JobStatus.IN_ROUTE
    assert updated.route_started_at == NOW
    assert updated.route_start_latitude == 33.9

    later = datetime(2026, 3, 10, 9, 0, 0)
    service.update_status(operator, job_id=job.job_id, status="in_route", now=later)
    assert jobs.get_by_id(job.job_id).route_started_at == NOW

    assert [h.status for h in service.history(operator, job.job_id)] == [JobStatus.IN_ROUTE, JobStatus.IN_ROUTE]


def test_status_update_survives_history_failure(service, jobs, activity, operator):
    job = jobs.add(assigned_to=operator.user_id, status=JobStatus.IN_ROUTE)
    activity.fail_history = True

    updated = service.update_status(operator, job_id=job.job_id, status="in_progress", now=NOW)
    assert updated.status == JobStatus.IN_PROGRESS
    assert updated.work_started_at == NOW


def test_en_route_is_accepted_as_in_route(service, jobs, operator):
    job = jobs.add(assigned_to=operator.user_id, status=JobStatus.ASSIGNED)

    updated = service.update_status(operator, job_id=job.job_id, status="en_route", now=NOW)

    assert updated.status == JobStatus.IN_ROUTE
    assert updated.route_started_at == NOW


def test_status_update_checks(service, jobs, operator, other_operator):
    job = jobs.add(assigned_to=operator.user_id)
    with pytest.raises(ValidationError, match="Invalid status"):
        service.update_status(operator, job_id=job.job_id, status="flying")
    with pytest.raises(AuthorizationError):
        service.update_status(other_operator, job_id=job.job_id, status="in_route")
    with pytest.raises(NotFoundError):
        service.update_status(operator, job_id=999, status="in_route")


def test_delete(service, jobs):
    job = jobs.add()
    service.delete_job(job_id=job.job_id)
    with pytest.raises(NotFoundError):
        service.delete_job(job_id=job.job_id)
