from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles stored in the users table and checked on every request."""

    ADMIN = "admin"
    OPERATOR = "operator"
    INVENTORY_MANAGER = "inventory_manager"


class AccessRequestStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"


class JobStatus(str, Enum):
    SCHEDULED = "scheduled"
    ASSIGNED = "assigned"
    IN_ROUTE = "in_route"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class JobPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class EquipmentType(str, Enum):
    TOOL = "tool"
    BLADE = "blade"
    VEHICLE = "vehicle"
    SAFETY = "safety"
    OTHER = "other"


class EquipmentStatus(str, Enum):
    AVAILABLE = "available"
    IN_USE = "in_use"
    ASSIGNED = "assigned"
    MAINTENANCE = "maintenance"
    RETIRED = "retired"


class AssignmentStatus(str, Enum):
    ACTIVE = "active"
    RETURNED = "returned"


class TurnInStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    IN_SERVICE = "in_service"
    COMPLETED = "completed"
    REJECTED = "rejected"


class InventoryTransactionType(str, Enum):
    INITIAL_STOCK = "initial_stock"
    STOCK_ADDED = "stock_added"
    ASSIGNED = "assigned"


class DocumentType(str, Enum):
    LIABILITY_RELEASE = "liability_release"
    WORK_ORDER_AGREEMENT = "work_order_agreement"


class StandbyStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"


class DamageSeverity(str, Enum):
    MINOR = "minor"
    MODERATE = "moderate"
    MAJOR = "major"
    CRITICAL = "critical"


class DamageReportStatus(str, Enum):
    REPORTED = "reported"
    UNDER_REVIEW = "under_review"
    APPROVED_FOR_REPAIR = "approved_for_repair"
    REPAIR_IN_PROGRESS = "repair_in_progress"
    REPAIR_COMPLETED = "repair_completed"
    EQUIPMENT_RETIRED = "equipment_retired"
    NO_ACTION_NEEDED = "no_action_needed"


class DifficultyLevel(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    EXTREME = "extreme"
