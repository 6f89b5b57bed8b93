from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional, Protocol, Sequence

from .model import Timecard, TimecardRow


class TimecardRepository(Protocol):
    def get_by_id(self, timecard_id: int) -> Optional[Timecard]:
        raise NotImplementedError

    def get_active_for_user(self, user_id: int) -> Optional[Timecard]:
        """Most recent timecard without a clock-out."""
        raise NotImplementedError

    def create_clock_in(
        self,
        *,
        user_id: int,
        work_date: date,
        clock_in_time: datetime,
        latitude: float,
        longitude: float,
        accuracy: Optional[float],
    ) -> int:
        raise NotImplementedError

    def set_clock_out(
        self,
        timecard_id: int,
        *,
        clock_out_time: datetime,
        latitude: float,
        longitude: float,
        accuracy: Optional[float],
        total_hours: float,
    ) -> bool:
        raise NotImplementedError

    def list_for_user(
        self,
        user_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int = 100,
    ) -> Sequence[Timecard]:
        raise NotImplementedError

    def list_with_users(
        self,
        *,
        user_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        pending_only: bool = False,
        limit: int = 500,
    ) -> Sequence[TimecardRow]:
        raise NotImplementedError

    def approve(self, timecard_id: int, *, approved_by: int, approved_at: datetime) -> bool:
        raise NotImplementedError

    def update_fields(self, timecard_id: int, fields: dict[str, Any]) -> bool:
        raise NotImplementedError
