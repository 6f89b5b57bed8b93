from __future__ import annotations

import logging
from typing import Any, Optional

from ..common.datetime_utils import now_local, parse_iso_datetime
from ..common.validators import optional_str, require_positive_int
from ..core.enums import EquipmentStatus, TurnInStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..users.model import User
from .model import MaintenanceAlert, TurnInRequest
from .repository import EquipmentRepository, MaintenanceRepository
from .service import MANAGER_ROLES

logger = logging.getLogger(__name__)

# Equipment status applied when a turn-in request reaches one of these statuses.
_EQUIPMENT_STATUS_ON = {
    TurnInStatus.APPROVED: EquipmentStatus.MAINTENANCE,
    TurnInStatus.COMPLETED: EquipmentStatus.AVAILABLE,
}


def parse_turn_in_status(value: Any) -> TurnInStatus:
    try:
        return TurnInStatus(value)
    except ValueError:
        valid = ", ".join(s.value for s in TurnInStatus)
        raise ValidationError(f"Invalid status. Must be one of: {valid}")


class MaintenanceService:
    """Use case: equipment turn-in requests and the maintenance alerts they raise."""

    def __init__(self, maintenance: MaintenanceRepository, equipment: EquipmentRepository):
        self._maintenance = maintenance
        self._equipment = equipment

    def create_turn_in(self, user: User, *, body: dict[str, Any]) -> TurnInRequest:
        equipment_id = body.get("equipmentId")
        reason = optional_str(body.get("reason"))
        description = optional_str(body.get("description"))
        if not equipment_id or not reason or not description:
            raise ValidationError("Missing required fields: equipmentId, reason, description")

        item = self._equipment.get_by_id(require_positive_int(equipment_id, "equipmentId"))
        if not item:
            raise NotFoundError("Equipment not found")

        urgency = optional_str(body.get("urgency")) or "normal"
        request_id = self._maintenance.create_turn_in(
            equipment_id=item.equipment_id,
            requested_by=user.user_id,
            reason=reason,
            description=description,
            urgency=urgency,
        )
        logger.info("Turn-in request %s for equipment %s by %s (%s)", request_id, item.equipment_id, user.user_id, reason)

        if reason == "scheduled_maintenance":
            self._maintenance.create_alert(
                equipment_id=item.equipment_id,
                operator_id=user.user_id,
                alert_type="turn_in_requested",
                severity="critical" if urgency == "critical" else "warning",
                title="Equipment Turn-In Requested",
                message=f"Turn-in requested for maintenance: {description}",
            )

        created = self._maintenance.get_turn_in(request_id)
        if not created:
            raise NotFoundError("Turn-in request not found")
        return created

    def list_turn_ins(
        self, user: User, *, status: Optional[str] = None, equipment_id: Optional[int] = None
    ) -> list[TurnInRequest]:
        return list(
            self._maintenance.list_turn_ins(
                status=parse_turn_in_status(status) if status else None,
                equipment_id=equipment_id,
                requested_by=None if user.role in MANAGER_ROLES else user.user_id,
            )
        )

    def update_turn_in(self, admin: User, *, request_id: int, body: dict[str, Any]) -> TurnInRequest:
        req = self._maintenance.get_turn_in(int(request_id))
        if not req:
            raise NotFoundError("Turn-in request not found")

        fields: dict[str, Any] = {"reviewed_by": admin.user_id, "reviewed_at": now_local()}
        status = parse_turn_in_status(body["status"]) if body.get("status") else None
        if status:
            fields["status"] = status
        if body.get("adminNotes"):
            fields["admin_notes"] = str(body["adminNotes"]).strip()
        if body.get("serviceStartedAt"):
            fields["service_started_at"] = parse_iso_datetime(body["serviceStartedAt"])
        if body.get("serviceCompletedAt"):
            fields["service_completed_at"] = parse_iso_datetime(body["serviceCompletedAt"])
        if body.get("servicePerformedBy"):
            fields["service_performed_by"] = str(body["servicePerformedBy"]).strip()
        if body.get("serviceCost") is not None:
            try:
                fields["service_cost"] = float(body["serviceCost"])
            except (TypeError, ValueError):
                raise ValidationError("serviceCost must be a number")

        self._maintenance.update_turn_in(req.request_id, fields)
        if status in _EQUIPMENT_STATUS_ON:
            self._equipment.update_fields(req.equipment_id, {"status": _EQUIPMENT_STATUS_ON[status]})
        logger.info("Turn-in request %s updated by %s: %s", req.request_id, admin.user_id, sorted(fields))

        return self._maintenance.get_turn_in(req.request_id) or req

    def list_alerts(self, *, resolved: Optional[str] = None) -> list[MaintenanceAlert]:
        flag = None
        if resolved is not None and resolved != "":
            flag = resolved.lower() == "true"
        return list(self._maintenance.list_alerts(resolved=flag))

    def resolve_alert(self, *, alert_id: int) -> MaintenanceAlert:
        alert = self._maintenance.get_alert(int(alert_id))
        if not alert:
            raise NotFoundError("Maintenance alert not found")
        if alert.is_resolved:
            raise ValidationError("Maintenance alert is already resolved")

        self._maintenance.resolve_alert(alert.alert_id, resolved_at=now_local())
        logger.info("Maintenance alert %s resolved", alert.alert_id)
        return self._maintenance.get_alert(alert.alert_id) or alert
