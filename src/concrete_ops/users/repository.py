from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(
        self,
        *,
        full_name: str,
        email: str,
        password_hash: str,
        role: Role,
        phone: Optional[str] = None,
        position: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def update_fields(self, user_id: int, fields: dict[str, Any]) -> bool:
        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        raise NotImplementedError

    def list_users(self, *, role: Optional[Role] = None, active_only: bool = False) -> Sequence[User]:
        raise NotImplementedError
