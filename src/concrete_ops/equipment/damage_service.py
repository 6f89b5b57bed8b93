from __future__ import annotations

import logging
from typing import Any, Optional

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.validators import optional_str, parse_bool, require_positive_int
from ..core.enums import DamageReportStatus, DamageSeverity, EquipmentStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..users.model import User
from .model import DamageReport
from .repository import DamageReportRepository, EquipmentRepository
from .service import MANAGER_ROLES

logger = logging.getLogger(__name__)

# Statuses that close a report.
RESOLVED_STATUSES = (
    DamageReportStatus.REPAIR_COMPLETED,
    DamageReportStatus.EQUIPMENT_RETIRED,
    DamageReportStatus.NO_ACTION_NEEDED,
)


def parse_damage_status(value: Any) -> DamageReportStatus:
    try:
        return DamageReportStatus(value)
    except ValueError:
        valid = ", ".join(s.value for s in DamageReportStatus)
        raise ValidationError(f"Invalid status. Must be one of: {valid}")


def parse_severity(value: Any) -> DamageSeverity:
    try:
        return DamageSeverity(value)
    except ValueError:
        valid = ", ".join(s.value for s in DamageSeverity)
        raise ValidationError(f"Invalid severity. Must be one of: {valid}")


def _string_list(value: Any, field_name: str) -> list[str]:
    if value is None or value == "":
        return []
    if not isinstance(value, (list, tuple)):
        raise ValidationError(f"{field_name} must be a list")
    return [str(v) for v in value if str(v).strip()]


class DamageReportService:
    """Use case: operators report equipment damage; admins assess and close the reports."""

    def __init__(self, reports: DamageReportRepository, equipment: EquipmentRepository):
        self._reports = reports
        self._equipment = equipment

    def report(self, user: User, *, body: dict[str, Any]) -> DamageReport:
        title = optional_str(body.get("damageTitle"))
        description = optional_str(body.get("damageDescription"))
        if not body.get("equipmentId") or not title or not description:
            raise ValidationError("Missing required fields: equipmentId, damageTitle, damageDescription")

        item = self._equipment.get_by_id(require_positive_int(body["equipmentId"], "equipmentId"))
        if not item:
            raise NotFoundError("Equipment not found")

        fields: dict[str, Any] = {
            "equipment_id": item.equipment_id,
            "reported_by": user.user_id,
            "last_used_by": self._last_user(item.equipment_id),
            "damage_title": title,
            "damage_description": description,
            "severity": parse_severity(body.get("severity") or DamageSeverity.MODERATE.value),
            "status": DamageReportStatus.REPORTED,
            "incident_type": optional_str(body.get("incidentType")),
            "incident_description": optional_str(body.get("incidentDescription")),
            "location_of_incident": optional_str(body.get("locationOfIncident")),
            "photo_urls": _string_list(body.get("photoUrls"), "photoUrls"),
            "video_urls": _string_list(body.get("videoUrls"), "videoUrls"),
            "equipment_operable": parse_bool(body.get("equipmentOperable") or False, "equipmentOperable"),
            "safety_concern": parse_bool(body.get("safetyConcern") or False, "safetyConcern"),
        }
        if body.get("jobOrderId"):
            fields["job_id"] = require_positive_int(body["jobOrderId"], "jobOrderId")
        if body.get("dateOfIncident"):
            fields["date_of_incident"] = parse_iso_date(body["dateOfIncident"])

        report_id = self._reports.create(fields)
        logger.info(
            "Damage report %s on equipment %s by %s (%s)",
            report_id,
            item.equipment_id,
            user.user_id,
            fields["severity"].value,
        )
        return self._get(report_id)

    def list_reports(
        self, user: User, *, equipment_id: Optional[int] = None, status: Optional[str] = None
    ) -> list[DamageReport]:
        return list(
            self._reports.list_reports(
                equipment_id=equipment_id,
                status=parse_damage_status(status) if status else None,
                reported_by=None if user.role in MANAGER_ROLES else user.user_id,
            )
        )

    def review(self, admin: User, *, report_id: int, body: dict[str, Any]) -> DamageReport:
        report = self._get(report_id)

        now = now_local()
        fields: dict[str, Any] = {"reviewed_by": admin.user_id, "reviewed_at": now}
        status = parse_damage_status(body["status"]) if body.get("status") else None
        if status:
            fields["status"] = status
            if status in RESOLVED_STATUSES:
                fields["resolved_at"] = now
        for key, column in (
            ("assessmentNotes", "assessment_notes"),
            ("adminNotes", "admin_notes"),
            ("resolutionNotes", "resolution_notes"),
        ):
            if key in body:
                fields[column] = optional_str(body.get(key))
        if body.get("estimatedRepairCost") is not None:
            try:
                fields["estimated_repair_cost"] = float(body["estimatedRepairCost"])
            except (TypeError, ValueError):
                raise ValidationError("estimatedRepairCost must be a number")
        if body.get("estimatedDowntimeDays") is not None:
            try:
                days = int(body["estimatedDowntimeDays"])
            except (TypeError, ValueError):
                raise ValidationError("estimatedDowntimeDays must be a whole number")
            if days < 0:
                raise ValidationError("estimatedDowntimeDays cannot be negative")
            fields["estimated_downtime_days"] = days
        if "partsNeeded" in body:
            fields["parts_needed"] = _string_list(body.get("partsNeeded"), "partsNeeded")

        self._reports.update_fields(report.report_id, fields)
        if status == DamageReportStatus.EQUIPMENT_RETIRED:
            self._equipment.update_fields(report.equipment_id, {"status": EquipmentStatus.RETIRED})
        logger.info("Damage report %s reviewed by %s: %s", report.report_id, admin.user_id, sorted(fields))
        return self._get(report.report_id)

    def _last_user(self, equipment_id: int) -> Optional[int]:
        assignments = self._equipment.list_assignments(equipment_id=equipment_id)
        return assignments[0].operator_id if assignments else None

    def _get(self, report_id: int) -> DamageReport:
        report = self._reports.get_by_id(int(report_id))
        if not report:
            raise NotFoundError("Damage report not found")
        return report
