from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional, Protocol, Sequence

from ..core.enums import AccessRequestStatus, Role
from .model import AccessRequest


class AccessRequestRepository(Protocol):
    def create(
        self,
        *,
        full_name: str,
        email: str,
        password_hash: str,
        date_of_birth: date,
        position: str,
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, request_id: int) -> Optional[AccessRequest]:
        raise NotImplementedError

    def find_by_email(self, email: str, *, status: AccessRequestStatus) -> Optional[AccessRequest]:
        raise NotImplementedError

    def list_requests(self, *, status: Optional[AccessRequestStatus] = None) -> Sequence[AccessRequest]:
        """Newest first."""
        raise NotImplementedError

    def mark_approved(self, request_id: int, *, reviewed_by: int, role: Role, reviewed_at: datetime) -> bool:
        raise NotImplementedError

    def mark_denied(self, request_id: int, *, reviewed_by: int, reason: str, reviewed_at: datetime) -> bool:
        raise NotImplementedError

    def update_fields(self, request_id: int, fields: dict[str, Any]) -> bool:
        raise NotImplementedError

    def delete_by_id(self, request_id: int) -> bool:
        raise NotImplementedError
