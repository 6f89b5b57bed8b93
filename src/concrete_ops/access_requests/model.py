from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import iso
from ..core.enums import AccessRequestStatus, Role


@dataclass(frozen=True)
class AccessRequest:
    """Someone asking for an account; becomes a User once an admin approves it."""

    request_id: int
    full_name: str
    email: str
    password_hash: str
    date_of_birth: date
    position: str
    status: AccessRequestStatus
    created_at: Optional[datetime] = None
    assigned_role: Optional[Role] = None
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    denial_reason: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.status == AccessRequestStatus.PENDING

    def to_dict(self) -> dict:
        return {
            "id": self.request_id,
            "full_name": self.full_name,
            "email": self.email,
            "date_of_birth": iso(self.date_of_birth),
            "position": self.position,
            "status": self.status.value,
            "assigned_role": self.assigned_role.value if self.assigned_role else None,
            "reviewed_by": self.reviewed_by,
            "reviewed_at": iso(self.reviewed_at),
            "denial_reason": self.denial_reason,
            "created_at": iso(self.created_at),
        }
