from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

from ..common.datetime_utils import hours_between, now_local, parse_iso_datetime
from ..common.geo import Geofence, LocationCheck
from ..common.validators import optional_str, require_coordinate
from ..core.constants import DEFAULT_ADMIN_LIST_LIMIT, DEFAULT_HISTORY_LIMIT, MAX_LIST_LIMIT
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.model import User
from .model import Timecard, TimecardRow
from .repository import TimecardRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClockEvent:
    timecard: Timecard
    location: LocationCheck


@dataclass(frozen=True)
class TimecardHistory:
    timecards: list[Timecard]
    total_hours: float


@dataclass(frozen=True)
class AdminTimecardReport:
    rows: list[TimecardRow]
    summary: dict
    user_summary: list[dict]


def _optional_accuracy(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _clamp_limit(limit: Any) -> int:
    return max(1, min(int(limit), MAX_LIST_LIMIT))


class TimecardService:
    def __init__(self, timecards: TimecardRepository, geofence: Geofence):
        self._timecards = timecards
        self._geofence = geofence

    def _verify_location(self, latitude: Any, longitude: Any, *, action: str) -> tuple[float, float, LocationCheck]:
        lat = require_coordinate(latitude, "latitude")
        lon = require_coordinate(longitude, "longitude")

        check = self._geofence.check(lat, lon)
        if not check.is_within_range:
            radius = self._geofence.allowed_radius_meters
            raise AuthorizationError(
                f"You must be at {self._geofence.shop.name} to {action}.",
                details=f"You are {check.distance_formatted} away. Maximum allowed distance is {radius:g}m.",
                extra={"distance": round(check.distance, 2), "allowedRadius": radius},
            )
        return lat, lon, check

    def clock_in(
        self,
        user: User,
        *,
        latitude: Any,
        longitude: Any,
        accuracy: Any = None,
        now: Optional[datetime] = None,
    ) -> ClockEvent:
        lat, lon, check = self._verify_location(latitude, longitude, action="clock in")
        now = now or now_local()

        active = self._timecards.get_active_for_user(user.user_id)
        if active:
            raise ValidationError(
                "You are already clocked in",
                details=f"You clocked in at {active.clock_in_time:%H:%M:%S}. Please clock out first.",
            )

        timecard_id = self._timecards.create_clock_in(
            user_id=user.user_id,
            work_date=now.date(),
            clock_in_time=now,
            latitude=lat,
            longitude=lon,
            accuracy=_optional_accuracy(accuracy),
        )
        logger.info("User %s clocked in (%s from shop)", user.user_id, check.distance_formatted)

        timecard = self._timecards.get_by_id(timecard_id)
        if not timecard:
            raise NotFoundError("Timecard not found")
        return ClockEvent(timecard=timecard, location=check)

    def clock_out(
        self,
        user: User,
        *,
        latitude: Any,
        longitude: Any,
        accuracy: Any = None,
        now: Optional[datetime] = None,
    ) -> ClockEvent:
        lat, lon, check = self._verify_location(latitude, longitude, action="clock out")
        now = now or now_local()

        active = self._timecards.get_active_for_user(user.user_id)
        if not active:
            raise ValidationError("No active clock-in found", details="You must clock in before clocking out.")

        total_hours = round(hours_between(active.clock_in_time, now), 2)
        self._timecards.set_clock_out(
            active.timecard_id,
            clock_out_time=now,
            latitude=lat,
            longitude=lon,
            accuracy=_optional_accuracy(accuracy),
            total_hours=total_hours,
        )
        logger.info("User %s clocked out after %.2f hours", user.user_id, total_hours)

        timecard = self._timecards.get_by_id(active.timecard_id)
        if not timecard:
            raise NotFoundError("Timecard not found")
        return ClockEvent(timecard=timecard, location=check)

    def current(self, user: User, *, now: Optional[datetime] = None) -> tuple[Optional[Timecard], Optional[float]]:
        """Active timecard (if any) and the hours elapsed on it so far."""
        active = self._timecards.get_active_for_user(user.user_id)
        if not active:
            return None, None
        now = now or now_local()
        return active, round(hours_between(active.clock_in_time, now), 2)

    def history(
        self,
        user: User,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> TimecardHistory:
        limit = _clamp_limit(limit)
        rows = list(self._timecards.list_for_user(user.user_id, start_date=start_date, end_date=end_date, limit=limit))
        total = round(sum(t.total_hours or 0 for t in rows), 2)
        return TimecardHistory(timecards=rows, total_hours=total)

    def admin_report(
        self,
        *,
        user_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        pending_only: bool = False,
        limit: int = DEFAULT_ADMIN_LIST_LIMIT,
    ) -> AdminTimecardReport:
        limit = _clamp_limit(limit)
        rows = list(
            self._timecards.list_with_users(
                user_id=user_id,
                start_date=start_date,
                end_date=end_date,
                pending_only=pending_only,
                limit=limit,
            )
        )

        per_user: dict[int, dict] = {}
        for row in rows:
            tc = row.timecard
            s = per_user.get(tc.user_id)
            if not s:
                s = {"userId": tc.user_id, "fullName": row.full_name, "email": row.email, "totalHours": 0.0, "entries": 0}
                per_user[tc.user_id] = s
            s["totalHours"] += tc.total_hours or 0
            s["entries"] += 1
        for s in per_user.values():
            s["totalHours"] = round(s["totalHours"], 2)

        summary = {
            "totalEntries": len(rows),
            "totalHours": round(sum(r.timecard.total_hours or 0 for r in rows), 2),
            "pendingApproval": sum(1 for r in rows if not r.timecard.is_approved),
            "activeEntries": sum(1 for r in rows if r.timecard.is_active),
        }
        return AdminTimecardReport(rows=rows, summary=summary, user_summary=list(per_user.values()))

    def approve(self, *, admin: User, timecard_id: int, now: Optional[datetime] = None) -> Timecard:
        tc = self._timecards.get_by_id(int(timecard_id))
        if not tc:
            raise NotFoundError("Timecard not found")
        if tc.is_approved:
            raise ValidationError("Timecard is already approved")

        self._timecards.approve(tc.timecard_id, approved_by=admin.user_id, approved_at=now or now_local())
        logger.info("Timecard %s approved by %s", tc.timecard_id, admin.user_id)
        return self._timecards.get_by_id(tc.timecard_id) or tc

    def update(self, *, timecard_id: int, body: dict[str, Any]) -> Timecard:
        tc = self._timecards.get_by_id(int(timecard_id))
        if not tc:
            raise NotFoundError("Timecard not found")

        fields: dict[str, Any] = {}
        clock_in = tc.clock_in_time
        clock_out = tc.clock_out_time

        if body.get("clock_in_time"):
            clock_in = parse_iso_datetime(body["clock_in_time"])
            fields["clock_in_time"] = clock_in
            fields["work_date"] = clock_in.date()
        if body.get("clock_out_time"):
            clock_out = parse_iso_datetime(body["clock_out_time"])
            fields["clock_out_time"] = clock_out
        if "notes" in body:
            fields["notes"] = optional_str(body.get("notes"))

        if not fields:
            raise ValidationError("No valid fields to update")

        if clock_in and clock_out:
            if clock_out < clock_in:
                raise ValidationError("Clock-out time cannot be before clock-in time")
            fields["total_hours"] = round(hours_between(clock_in, clock_out), 2)

        self._timecards.update_fields(tc.timecard_id, fields)
        logger.info("Timecard %s updated: %s", tc.timecard_id, sorted(fields))
        return self._timecards.get_by_id(tc.timecard_id) or tc
