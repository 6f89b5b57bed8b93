from __future__ import annotations

from functools import wraps
from typing import TYPE_CHECKING

from flask import g, request

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError

if TYPE_CHECKING:
    from ..container import Container

MISSING_TOKEN = "Unauthorized. Please log in."


def bearer_token() -> str:
    header = request.headers.get("Authorization", "")
    if not header.startswith("Bearer "):
        raise AuthenticationError(MISSING_TOKEN)
    token = header[len("Bearer "):].strip()
    if not token:
        raise AuthenticationError(MISSING_TOKEN)
    return token


def _forbidden_message(roles: tuple[Role, ...]) -> str:
    if roles == (Role.ADMIN,):
        return "Forbidden. Admin access required."
    allowed = " or ".join(r.value for r in roles)
    return f"Forbidden. Requires {allowed} access."


def build_auth_required(container: "Container"):
    """Decorator factory bound to the container's AuthService.

    `@auth_required()` accepts any signed-in user, `@auth_required(Role.ADMIN, ...)`
    additionally restricts by the role currently stored in the users table.
    """

    def auth_required(*roles: Role):
        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                user = container.auth_service.authenticate_token(bearer_token())
                if roles and user.role not in roles:
                    raise AuthorizationError(_forbidden_message(roles))
                g.current_user = user
                return view(*args, **kwargs)

            return wrapper

        return decorator

    return auth_required
