from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from ..common.validators import optional_str, require_positive_int
from ..core.constants import DEFAULT_USAGE_LIMIT, MAX_LIST_LIMIT
from ..core.enums import DifficultyLevel
from ..core.exceptions import NotFoundError, ValidationError
from ..jobs.service import JobOrderService, ensure_can_access
from ..users.model import User
from .model import EquipmentUsage
from .repository import EquipmentRepository, EquipmentUsageRepository

logger = logging.getLogger(__name__)

# body key -> cast for the optional numeric usage fields; all default to zero.
_NUMERIC_FIELDS: dict[str, Callable[[Any], Any]] = {
    "linear_feet_cut": float,
    "blades_used": int,
    "hydraulic_hose_used_ft": float,
    "water_hose_used_ft": float,
    "power_hours": float,
    "location_changes": int,
    "setup_time_minutes": int,
}

_TEXT_FIELDS = ("difficulty_notes", "blade_type", "blade_wear_notes", "notes")


def parse_difficulty(value: Any) -> DifficultyLevel:
    try:
        return DifficultyLevel(value)
    except ValueError:
        valid = ", ".join(d.value for d in DifficultyLevel)
        raise ValidationError(f"Invalid difficulty_level. Must be one of: {valid}")


def _non_negative(value: Any, field_name: str, cast: Callable[[Any], Any]):
    if value is None or value == "":
        return cast(0)
    try:
        number = cast(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if number < 0:
        raise ValidationError(f"{field_name} cannot be negative")
    return number


class EquipmentUsageService:
    """Use case: record what equipment did on each job and keep per-item cut totals."""

    def __init__(self, usage: EquipmentUsageRepository, equipment: EquipmentRepository, job_orders: JobOrderService):
        self._usage = usage
        self._equipment = equipment
        self._job_orders = job_orders

    def record(self, user: User, *, body: dict[str, Any]) -> EquipmentUsage:
        equipment_type = optional_str(body.get("equipment_type"))
        task_type = optional_str(body.get("task_type"))
        if not body.get("job_order_id") or not equipment_type or not task_type:
            raise ValidationError("Missing required fields: job_order_id, equipment_type, task_type")

        job = self._job_orders.get_job(require_positive_int(body["job_order_id"], "job_order_id"))
        ensure_can_access(user, job)

        fields: dict[str, Any] = {
            "job_id": job.job_id,
            "operator_id": user.user_id,
            "equipment_type": equipment_type,
            "task_type": task_type,
            "difficulty_level": parse_difficulty(body.get("difficulty_level") or DifficultyLevel.MEDIUM.value),
        }
        if body.get("equipment_id"):
            item = self._equipment.get_by_id(require_positive_int(body["equipment_id"], "equipment_id"))
            if not item:
                raise NotFoundError("Equipment not found")
            fields["equipment_id"] = item.equipment_id
        for key, cast in _NUMERIC_FIELDS.items():
            fields[key] = _non_negative(body.get(key), key, cast)
        for key in _TEXT_FIELDS:
            fields[key] = optional_str(body.get(key))

        usage_id = self._usage.record(fields)
        logger.info(
            "Usage %s on job %s by %s: %s %s, %.1f ft",
            usage_id,
            job.job_id,
            user.user_id,
            equipment_type,
            task_type,
            fields["linear_feet_cut"],
        )
        created = self._usage.get_by_id(usage_id)
        if not created:
            raise NotFoundError("Equipment usage not found")
        return created

    def list_usage(
        self,
        user: User,
        *,
        job_id: Optional[int] = None,
        operator_id: Optional[int] = None,
        equipment_type: Optional[str] = None,
        limit: int = DEFAULT_USAGE_LIMIT,
    ) -> list[EquipmentUsage]:
        if not user.is_admin:
            operator_id = user.user_id
        return list(
            self._usage.list_usage(
                job_id=job_id,
                operator_id=operator_id,
                equipment_type=optional_str(equipment_type),
                limit=max(1, min(int(limit), MAX_LIST_LIMIT)),
            )
        )

    def usage_history(self, *, equipment_id: int, limit: int = DEFAULT_USAGE_LIMIT) -> list[EquipmentUsage]:
        item = self._equipment.get_by_id(int(equipment_id))
        if not item:
            raise NotFoundError("Equipment not found")
        return list(
            self._usage.list_usage(equipment_id=item.equipment_id, limit=max(1, min(int(limit), MAX_LIST_LIMIT)))
        )
