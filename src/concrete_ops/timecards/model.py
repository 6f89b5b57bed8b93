from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import iso


@dataclass(frozen=True)
class Timecard:
    """Domain entity: one clock-in/clock-out pair of an operator."""

    timecard_id: int
    user_id: int
    work_date: date
    clock_in_time: datetime
    clock_out_time: Optional[datetime] = None
    clock_in_latitude: Optional[float] = None
    clock_in_longitude: Optional[float] = None
    clock_in_accuracy: Optional[float] = None
    clock_out_latitude: Optional[float] = None
    clock_out_longitude: Optional[float] = None
    clock_out_accuracy: Optional[float] = None
    total_hours: Optional[float] = None
    notes: Optional[str] = None
    is_approved: bool = False
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.clock_out_time is None

    def to_dict(self) -> dict:
        return {
            "id": self.timecard_id,
            "user_id": self.user_id,
            "date": iso(self.work_date),
            "clock_in_time": iso(self.clock_in_time),
            "clock_out_time": iso(self.clock_out_time),
            "clock_in_latitude": self.clock_in_latitude,
            "clock_in_longitude": self.clock_in_longitude,
            "clock_in_accuracy": self.clock_in_accuracy,
            "clock_out_latitude": self.clock_out_latitude,
            "clock_out_longitude": self.clock_out_longitude,
            "clock_out_accuracy": self.clock_out_accuracy,
            "total_hours": self.total_hours,
            "notes": self.notes,
            "is_approved": self.is_approved,
            "approved_by": self.approved_by,
            "approved_at": iso(self.approved_at),
        }


@dataclass(frozen=True)
class TimecardRow:
    """Read-model for admin views: a timecard joined with its owner."""

    timecard: Timecard
    full_name: str
    email: str

    def to_dict(self) -> dict:
        data = self.timecard.to_dict()
        data["full_name"] = self.full_name
        data["email"] = self.email
        return data
