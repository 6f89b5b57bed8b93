from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import iso
from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: an employee account (profile).

    Plain data object, no DB access code.
    """

    user_id: int
    full_name: str
    email: str
    password_hash: str
    role: Role
    phone: Optional[str] = None
    position: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def to_public_dict(self) -> dict:
        return {
            "id": self.user_id,
            "full_name": self.full_name,
            "email": self.email,
            "role": self.role.value,
            "phone": self.phone,
            "position": self.position,
            "is_active": self.is_active,
            "created_at": iso(self.created_at),
        }
