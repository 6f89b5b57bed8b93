from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Protocol, Sequence

from ..core.enums import DamageReportStatus, EquipmentStatus, TurnInStatus
from .model import DamageReport, Equipment, EquipmentAssignment, EquipmentUsage, MaintenanceAlert, TurnInRequest


class EquipmentRepository(Protocol):
    def create(self, fields: dict[str, Any]) -> int:
        raise NotImplementedError

    def get_by_id(self, equipment_id: int) -> Optional[Equipment]:
        raise NotImplementedError

    def get_by_qr_code(self, qr_code: str) -> Optional[Equipment]:
        raise NotImplementedError

    def get_by_serial(self, serial_number: str) -> Optional[Equipment]:
        raise NotImplementedError

    def list_equipment(
        self, *, status: Optional[EquipmentStatus] = None, assigned_to: Optional[int] = None
    ) -> Sequence[Equipment]:
        raise NotImplementedError

    def update_fields(self, equipment_id: int, fields: dict[str, Any]) -> bool:
        raise NotImplementedError

    def log_scan(self, *, equipment_id: int, user_id: Optional[int], action: str, notes: Optional[str] = None) -> None:
        raise NotImplementedError

    def create_assignment(
        self, *, equipment_id: int, operator_id: int, assigned_at: datetime, notes: Optional[str] = None
    ) -> int:
        raise NotImplementedError

    def get_active_assignment(self, equipment_id: int) -> Optional[EquipmentAssignment]:
        raise NotImplementedError

    def close_assignment(self, assignment_id: int, *, returned_at: datetime, notes: Optional[str] = None) -> bool:
        raise NotImplementedError

    def list_assignments(
        self, *, equipment_id: Optional[int] = None, operator_id: Optional[int] = None, active_only: bool = False
    ) -> Sequence[EquipmentAssignment]:
        """Newest first."""
        raise NotImplementedError


class MaintenanceRepository(Protocol):
    def create_turn_in(
        self,
        *,
        equipment_id: int,
        requested_by: int,
        reason: str,
        description: str,
        urgency: str,
    ) -> int:
        raise NotImplementedError

    def get_turn_in(self, request_id: int) -> Optional[TurnInRequest]:
        raise NotImplementedError

    def list_turn_ins(
        self,
        *,
        status: Optional[TurnInStatus] = None,
        equipment_id: Optional[int] = None,
        requested_by: Optional[int] = None,
    ) -> Sequence[TurnInRequest]:
        raise NotImplementedError

    def update_turn_in(self, request_id: int, fields: dict[str, Any]) -> bool:
        raise NotImplementedError

    def create_alert(
        self,
        *,
        equipment_id: int,
        operator_id: Optional[int],
        alert_type: str,
        severity: str,
        title: str,
        message: str,
    ) -> int:
        raise NotImplementedError

    def get_alert(self, alert_id: int) -> Optional[MaintenanceAlert]:
        raise NotImplementedError

    def list_alerts(self, *, resolved: Optional[bool] = None) -> Sequence[MaintenanceAlert]:
        raise NotImplementedError

    def resolve_alert(self, alert_id: int, *, resolved_at: datetime) -> bool:
        raise NotImplementedError


class DamageReportRepository(Protocol):
    def create(self, fields: dict[str, Any]) -> int:
        raise NotImplementedError

    def get_by_id(self, report_id: int) -> Optional[DamageReport]:
        raise NotImplementedError

    def list_reports(
        self,
        *,
        equipment_id: Optional[int] = None,
        status: Optional[DamageReportStatus] = None,
        reported_by: Optional[int] = None,
    ) -> Sequence[DamageReport]:
        """Newest first."""
        raise NotImplementedError

    def update_fields(self, report_id: int, fields: dict[str, Any]) -> bool:
        raise NotImplementedError


class EquipmentUsageRepository(Protocol):
    def record(self, fields: dict[str, Any]) -> int:
        """Insert a usage row; feet cut also add to the equipment's running total."""
        raise NotImplementedError

    def get_by_id(self, usage_id: int) -> Optional[EquipmentUsage]:
        raise NotImplementedError

    def list_usage(
        self,
        *,
        job_id: Optional[int] = None,
        operator_id: Optional[int] = None,
        equipment_id: Optional[int] = None,
        equipment_type: Optional[str] = None,
        limit: int = 100,
    ) -> Sequence[EquipmentUsage]:
        """Newest first."""
        raise NotImplementedError
