"""Recompute a job's status from the timestamps operators record in the field.

Rules, in order:
  1. cancelled jobs are never touched;
  2. a completion signature or work completion means completed;
  3. work started -> in_progress when scheduled today, back to scheduled when the
     scheduled day is past (multi-day carry-over), otherwise unchanged;
  4. route started -> in_route;
  5. due today or overdue -> scheduled, except assigned jobs stay assigned;
  6. anything else is unchanged.
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from ..core.enums import JobStatus
from .model import JobOrder


def derive_job_status(job: JobOrder, today: date) -> Optional[JobStatus]:
    """Return the status the job should have, or None to leave it alone."""
    if job.status == JobStatus.CANCELLED:
        return None

    if job.completion_signed_at or job.work_completed_at:
        return JobStatus.COMPLETED

    scheduled = job.scheduled_date
    if job.work_started_at:
        if scheduled == today:
            return JobStatus.IN_PROGRESS
        if scheduled is not None and scheduled < today:
            return JobStatus.SCHEDULED
        return None

    if job.route_started_at:
        return JobStatus.IN_ROUTE

    if scheduled is not None and scheduled <= today:
        if job.status == JobStatus.ASSIGNED:
            return JobStatus.ASSIGNED
        return JobStatus.SCHEDULED

    return None
