from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from ..common.datetime_utils import now_local
from ..common.validators import optional_str, pick_fields, require_non_empty, require_positive_int
from ..core.enums import EquipmentStatus, EquipmentType, Role
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..users.model import User
from ..users.repository import UserRepository
from .labels import new_qr_code, render_qr_png
from .model import Equipment, EquipmentAssignment
from .repository import EquipmentRepository

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "equipment_type", "brand", "model", "serial_number", "status", "location", "notes")

# Roles that manage the equipment pool on behalf of operators.
MANAGER_ROLES = (Role.ADMIN, Role.INVENTORY_MANAGER)


@dataclass(frozen=True)
class ScanResult:
    equipment: Equipment
    holder: Optional[User]


def parse_equipment_type(value: Any) -> EquipmentType:
    try:
        return EquipmentType(value)
    except ValueError:
        valid = ", ".join(t.value for t in EquipmentType)
        raise ValidationError(f"Invalid equipment type. Must be one of: {valid}")


def parse_equipment_status(value: Any) -> EquipmentStatus:
    try:
        return EquipmentStatus(value)
    except ValueError:
        valid = ", ".join(s.value for s in EquipmentStatus)
        raise ValidationError(f"Invalid equipment status. Must be one of: {valid}")


class EquipmentService:
    """Use case: track shop equipment and who currently holds it."""

    def __init__(self, equipment: EquipmentRepository, users: UserRepository):
        self._equipment = equipment
        self._users = users

    def get_equipment(self, equipment_id: int) -> Equipment:
        item = self._equipment.get_by_id(int(equipment_id))
        if not item:
            raise NotFoundError("Equipment not found")
        return item

    def list_equipment(self, *, status: Optional[str] = None, assigned_to: Optional[int] = None) -> list[Equipment]:
        return list(
            self._equipment.list_equipment(
                status=parse_equipment_status(status) if status else None,
                assigned_to=assigned_to,
            )
        )

    def _clean_fields(self, fields: dict[str, Any]) -> dict[str, Any]:
        clean: dict[str, Any] = {}
        if "name" in fields:
            clean["name"] = require_non_empty(fields["name"], "Name")
        if "equipment_type" in fields:
            clean["equipment_type"] = parse_equipment_type(fields["equipment_type"])
        if "status" in fields:
            clean["status"] = parse_equipment_status(fields["status"])
        for key in ("brand", "model", "serial_number", "location", "notes"):
            if key in fields:
                clean[key] = optional_str(fields[key])
        return clean

    def _ensure_serial_free(self, serial_number: Optional[str], *, equipment_id: Optional[int] = None) -> None:
        if not serial_number:
            return
        existing = self._equipment.get_by_serial(serial_number)
        if existing and existing.equipment_id != equipment_id:
            raise ConflictError(f"Serial number {serial_number} already exists")

    def create_equipment(self, *, body: dict[str, Any]) -> Equipment:
        fields = self._clean_fields(pick_fields(body, EDITABLE_FIELDS))
        if "name" not in fields:
            raise ValidationError("Name is required")
        fields.setdefault("equipment_type", EquipmentType.TOOL)
        fields.setdefault("status", EquipmentStatus.AVAILABLE)
        self._ensure_serial_free(fields.get("serial_number"))

        fields["qr_code"] = optional_str(body.get("qr_code")) or new_qr_code()
        if self._equipment.get_by_qr_code(fields["qr_code"]):
            raise ConflictError("QR code already in use")

        equipment_id = self._equipment.create(fields)
        logger.info("Equipment %s (%s) created with QR %s", equipment_id, fields["name"], fields["qr_code"])
        return self.get_equipment(equipment_id)

    def update_equipment(self, *, equipment_id: int, body: dict[str, Any]) -> Equipment:
        item = self.get_equipment(equipment_id)
        fields = self._clean_fields(pick_fields(body, EDITABLE_FIELDS))
        if not fields:
            raise ValidationError("No valid fields to update")
        self._ensure_serial_free(fields.get("serial_number"), equipment_id=item.equipment_id)

        self._equipment.update_fields(item.equipment_id, fields)
        logger.info("Equipment %s updated: %s", item.equipment_id, sorted(fields))
        return self.get_equipment(item.equipment_id)

    def qr_png(self, equipment_id: int) -> bytes:
        return render_qr_png(self.get_equipment(equipment_id).qr_code)

    def scan(self, user: User, *, code: Optional[str]) -> ScanResult:
        code = require_non_empty(code, "QR code")
        item = self._equipment.get_by_qr_code(code)
        if not item:
            raise NotFoundError("Equipment not found")

        self._equipment.log_scan(equipment_id=item.equipment_id, user_id=user.user_id, action="scan")
        holder = self._users.get_by_id(item.assigned_to) if item.assigned_to else None
        return ScanResult(equipment=item, holder=holder)

    def checkout(
        self,
        user: User,
        *,
        equipment_id: Any,
        operator_id: Any,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> EquipmentAssignment:
        if not equipment_id or not operator_id:
            raise ValidationError("Equipment ID and Operator ID are required")

        item = self.get_equipment(require_positive_int(equipment_id, "equipmentId"))
        if item.is_checked_out:
            raise ConflictError("Equipment is already checked out")
        operator = self._users.get_by_id(require_positive_int(operator_id, "operatorId"))
        if not operator:
            raise NotFoundError("Operator not found")

        now = now or now_local()
        notes = optional_str(notes)
        assignment_id = self._equipment.create_assignment(
            equipment_id=item.equipment_id, operator_id=operator.user_id, assigned_at=now, notes=notes
        )
        self._equipment.update_fields(
            item.equipment_id,
            {"status": EquipmentStatus.ASSIGNED, "assigned_to": operator.user_id, "assigned_at": now},
        )
        self._equipment.log_scan(equipment_id=item.equipment_id, user_id=user.user_id, action="checkout", notes=notes)
        logger.info("Equipment %s checked out to %s by %s", item.equipment_id, operator.user_id, user.user_id)

        return EquipmentAssignment(
            assignment_id=assignment_id,
            equipment_id=item.equipment_id,
            operator_id=operator.user_id,
            assigned_at=now,
            checkout_notes=notes,
            equipment_name=item.name,
            operator_name=operator.full_name,
        )

    def return_equipment(
        self, user: User, *, equipment_id: int, notes: Optional[str] = None, now: Optional[datetime] = None
    ) -> Equipment:
        item = self.get_equipment(equipment_id)
        if user.role not in MANAGER_ROLES and item.assigned_to != user.user_id:
            raise AuthorizationError("You can only return equipment assigned to you")

        active = self._equipment.get_active_assignment(item.equipment_id)
        if not active and not item.is_checked_out:
            raise ValidationError("Equipment is not checked out")

        now = now or now_local()
        notes = optional_str(notes)
        if active:
            self._equipment.close_assignment(active.assignment_id, returned_at=now, notes=notes)
        self._equipment.update_fields(
            item.equipment_id,
            {"status": EquipmentStatus.AVAILABLE, "assigned_to": None, "assigned_at": None},
        )
        self._equipment.log_scan(equipment_id=item.equipment_id, user_id=user.user_id, action="return", notes=notes)
        logger.info("Equipment %s returned by %s", item.equipment_id, user.user_id)
        return self.get_equipment(item.equipment_id)

    def assignments(self, *, equipment_id: int) -> list[EquipmentAssignment]:
        item = self.get_equipment(equipment_id)
        return list(self._equipment.list_assignments(equipment_id=item.equipment_id))

    def operator_equipment(self, user: User, *, operator_id: int) -> list[Equipment]:
        if user.role not in MANAGER_ROLES and user.user_id != int(operator_id):
            raise AuthorizationError("You can only view your own equipment")
        return list(self._equipment.list_equipment(assigned_to=int(operator_id)))
