from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import iso
from ..core.enums import (
    AssignmentStatus,
    DamageReportStatus,
    DamageSeverity,
    DifficultyLevel,
    EquipmentStatus,
    EquipmentType,
    TurnInStatus,
)


@dataclass(frozen=True)
class Equipment:
    equipment_id: int
    name: str
    equipment_type: EquipmentType
    qr_code: str
    status: EquipmentStatus = EquipmentStatus.AVAILABLE
    brand: Optional[str] = None
    model: Optional[str] = None
    serial_number: Optional[str] = None
    assigned_to: Optional[int] = None
    assigned_to_name: Optional[str] = None
    assigned_at: Optional[datetime] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    is_from_inventory: bool = False
    total_usage_feet: float = 0.0
    created_at: Optional[datetime] = None

    @property
    def is_checked_out(self) -> bool:
        return self.assigned_to is not None or self.status in (EquipmentStatus.ASSIGNED, EquipmentStatus.IN_USE)

    def to_dict(self) -> dict:
        return {
            "id": self.equipment_id,
            "name": self.name,
            "type": self.equipment_type.value,
            "brand": self.brand,
            "model": self.model,
            "serial_number": self.serial_number,
            "qr_code": self.qr_code,
            "status": self.status.value,
            "assigned_to": self.assigned_to,
            "assigned_to_name": self.assigned_to_name,
            "assigned_at": iso(self.assigned_at),
            "location": self.location,
            "notes": self.notes,
            "is_from_inventory": self.is_from_inventory,
            "total_usage_feet": self.total_usage_feet,
            "created_at": iso(self.created_at),
        }


@dataclass(frozen=True)
class EquipmentAssignment:
    assignment_id: int
    equipment_id: int
    operator_id: int
    assigned_at: datetime
    status: AssignmentStatus = AssignmentStatus.ACTIVE
    returned_at: Optional[datetime] = None
    checkout_notes: Optional[str] = None
    return_notes: Optional[str] = None
    equipment_name: Optional[str] = None
    operator_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.assignment_id,
            "equipment_id": self.equipment_id,
            "equipment_name": self.equipment_name,
            "operator_id": self.operator_id,
            "operator_name": self.operator_name,
            "assigned_at": iso(self.assigned_at),
            "returned_at": iso(self.returned_at),
            "checkout_notes": self.checkout_notes,
            "return_notes": self.return_notes,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class TurnInRequest:
    """An operator handing equipment back for service or retirement."""

    request_id: int
    equipment_id: int
    requested_by: int
    reason: str
    description: str
    urgency: str = "normal"
    status: TurnInStatus = TurnInStatus.PENDING
    admin_notes: Optional[str] = None
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    service_started_at: Optional[datetime] = None
    service_completed_at: Optional[datetime] = None
    service_performed_by: Optional[str] = None
    service_cost: Optional[float] = None
    created_at: Optional[datetime] = None
    equipment_name: Optional[str] = None
    requester_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.request_id,
            "equipment_id": self.equipment_id,
            "equipment_name": self.equipment_name,
            "requested_by": self.requested_by,
            "requested_by_name": self.requester_name,
            "reason": self.reason,
            "description": self.description,
            "urgency": self.urgency,
            "status": self.status.value,
            "admin_notes": self.admin_notes,
            "reviewed_by": self.reviewed_by,
            "reviewed_at": iso(self.reviewed_at),
            "service_started_at": iso(self.service_started_at),
            "service_completed_at": iso(self.service_completed_at),
            "service_performed_by": self.service_performed_by,
            "service_cost": self.service_cost,
            "created_at": iso(self.created_at),
        }


@dataclass(frozen=True)
class MaintenanceAlert:
    alert_id: int
    equipment_id: int
    alert_type: str
    severity: str
    title: str
    message: str
    operator_id: Optional[int] = None
    is_resolved: bool = False
    resolved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.alert_id,
            "equipment_id": self.equipment_id,
            "operator_id": self.operator_id,
            "alert_type": self.alert_type,
            "severity": self.severity,
            "title": self.title,
            "message": self.message,
            "is_resolved": self.is_resolved,
            "resolved_at": iso(self.resolved_at),
            "created_at": iso(self.created_at),
        }


@dataclass(frozen=True)
class DamageReport:
    """Damage an operator found on a piece of equipment, and the shop's assessment of it."""

    report_id: int
    equipment_id: int
    reported_by: int
    damage_title: str
    damage_description: str
    severity: DamageSeverity = DamageSeverity.MODERATE
    status: DamageReportStatus = DamageReportStatus.REPORTED
    job_id: Optional[int] = None
    last_used_by: Optional[int] = None
    incident_type: Optional[str] = None
    incident_description: Optional[str] = None
    location_of_incident: Optional[str] = None
    date_of_incident: Optional[date] = None
    photo_urls: list[str] = field(default_factory=list)
    video_urls: list[str] = field(default_factory=list)
    equipment_operable: bool = False
    safety_concern: bool = False
    assessment_notes: Optional[str] = None
    estimated_repair_cost: Optional[float] = None
    estimated_downtime_days: Optional[int] = None
    parts_needed: list[str] = field(default_factory=list)
    admin_notes: Optional[str] = None
    resolution_notes: Optional[str] = None
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    equipment_name: Optional[str] = None
    reporter_name: Optional[str] = None
    reviewer_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.report_id,
            "equipment_id": self.equipment_id,
            "equipment_name": self.equipment_name,
            "job_order_id": self.job_id,
            "reported_by": self.reported_by,
            "reported_by_name": self.reporter_name,
            "last_used_by": self.last_used_by,
            "damage_title": self.damage_title,
            "damage_description": self.damage_description,
            "severity": self.severity.value,
            "incident_type": self.incident_type,
            "incident_description": self.incident_description,
            "location_of_incident": self.location_of_incident,
            "date_of_incident": iso(self.date_of_incident),
            "photo_urls": list(self.photo_urls),
            "video_urls": list(self.video_urls),
            "equipment_operable": self.equipment_operable,
            "safety_concern": self.safety_concern,
            "status": self.status.value,
            "assessment_notes": self.assessment_notes,
            "estimated_repair_cost": self.estimated_repair_cost,
            "estimated_downtime_days": self.estimated_downtime_days,
            "parts_needed": list(self.parts_needed),
            "admin_notes": self.admin_notes,
            "resolution_notes": self.resolution_notes,
            "reviewed_by": self.reviewed_by,
            "reviewed_by_name": self.reviewer_name,
            "reviewed_at": iso(self.reviewed_at),
            "resolved_at": iso(self.resolved_at),
            "created_at": iso(self.created_at),
        }


@dataclass(frozen=True)
class EquipmentUsage:
    """What one piece of equipment did on a job: feet cut, blades and hoses used, setup effort."""

    usage_id: int
    job_id: int
    operator_id: int
    equipment_type: str
    task_type: str
    equipment_id: Optional[int] = None
    linear_feet_cut: float = 0.0
    difficulty_level: DifficultyLevel = DifficultyLevel.MEDIUM
    difficulty_notes: Optional[str] = None
    blade_type: Optional[str] = None
    blades_used: int = 0
    blade_wear_notes: Optional[str] = None
    hydraulic_hose_used_ft: float = 0.0
    water_hose_used_ft: float = 0.0
    power_hours: float = 0.0
    location_changes: int = 0
    setup_time_minutes: int = 0
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    job_number: Optional[str] = None
    operator_name: Optional[str] = None
    equipment_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.usage_id,
            "job_order_id": self.job_id,
            "job_number": self.job_number,
            "operator_id": self.operator_id,
            "operator_name": self.operator_name,
            "equipment_id": self.equipment_id,
            "equipment_name": self.equipment_name,
            "equipment_type": self.equipment_type,
            "task_type": self.task_type,
            "linear_feet_cut": self.linear_feet_cut,
            "difficulty_level": self.difficulty_level.value,
            "difficulty_notes": self.difficulty_notes,
            "blade_type": self.blade_type,
            "blades_used": self.blades_used,
            "blade_wear_notes": self.blade_wear_notes,
            "hydraulic_hose_used_ft": self.hydraulic_hose_used_ft,
            "water_hose_used_ft": self.water_hose_used_ft,
            "power_hours": self.power_hours,
            "location_changes": self.location_changes,
            "setup_time_minutes": self.setup_time_minutes,
            "notes": self.notes,
            "created_at": iso(self.created_at),
        }
