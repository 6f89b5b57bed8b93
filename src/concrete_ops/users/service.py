from __future__ import annotations

import logging
from typing import Any, Optional

from werkzeug.security import check_password_hash

from ..auth.tokens import INVALID_SESSION, TokenSigner
from ..common.validators import optional_str, parse_bool, pick_fields, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("full_name", "phone", "position", "role", "is_active")


class AuthService:
    """Use case: authenticate user (login) and resolve bearer tokens."""

    def __init__(self, users: UserRepository, tokens: TokenSigner):
        self._users = users
        self._tokens = tokens

    def login(self, email: Optional[str], password: Optional[str]) -> tuple[str, User]:
        email = require_non_empty(email, "Email").lower()
        password = require_non_empty(password, "Password")

        user = self._users.get_by_email(email)
        if not user or not user.is_active:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # placeholder hashes such as "CHANGE_ME"
            ok = False
        if not ok:
            raise AuthenticationError("Invalid email or password")

        logger.info("User %s signed in", user.user_id)
        return self._tokens.issue(user.user_id), user

    def authenticate_token(self, token: str) -> User:
        user = self._users.get_by_id(self._tokens.verify(token))
        if not user or not user.is_active:
            raise AuthenticationError(INVALID_SESSION)
        return user


class UserService:
    """Use case: manage employee profiles (admin)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def get_user(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    def list_users(self, *, role: Optional[str] = None) -> list[User]:
        role_filter = None
        if role:
            try:
                role_filter = Role(role)
            except ValueError:
                raise ValidationError(f"Invalid role: {role}")
        return list(self._users.list_users(role=role_filter))

    def list_active_operators(self) -> list[User]:
        return list(self._users.list_users(role=Role.OPERATOR, active_only=True))

    def update_user(self, *, acting_user: User, user_id: int, body: dict[str, Any]) -> User:
        user = self.get_user(user_id)
        fields = pick_fields(body, EDITABLE_FIELDS)

        if "full_name" in fields:
            fields["full_name"] = require_non_empty(fields["full_name"], "Full name")
        for key in ("phone", "position"):
            if key in fields:
                fields[key] = optional_str(fields[key])
        if "role" in fields:
            try:
                fields["role"] = Role(fields["role"]).value
            except ValueError:
                raise ValidationError(f"Invalid role: {fields['role']}")
        if "is_active" in fields:
            fields["is_active"] = 1 if parse_bool(fields["is_active"], "is_active") else 0

        if user.user_id == acting_user.user_id and (
            fields.get("role", Role.ADMIN.value) != Role.ADMIN.value or fields.get("is_active", 1) == 0
        ):
            raise ValidationError("You cannot demote or deactivate your own account")

        self._users.update_fields(user.user_id, fields)
        logger.info("User %s updated by %s: %s", user.user_id, acting_user.user_id, sorted(fields))
        return self.get_user(user.user_id)

    def delete_user(self, *, acting_user: User, user_id: int) -> None:
        if not acting_user.is_admin:
            raise AuthorizationError("Forbidden. Admin access required.")

        user = self.get_user(user_id)
        if user.user_id == acting_user.user_id:
            raise ValidationError("You cannot delete your own account")

        if not self._users.delete_by_id(user.user_id):
            raise ValidationError("Failed to delete user")
        logger.info("User %s (%s) deleted by %s", user.user_id, user.email, acting_user.user_id)
