"""Signed bearer tokens for the JSON API."""
from __future__ import annotations

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from ..core.constants import DEFAULT_TOKEN_MAX_AGE_SECONDS
from ..core.exceptions import AuthenticationError

INVALID_SESSION = "Unauthorized. Invalid or expired session."


class TokenSigner:
    def __init__(self, secret_key: str, *, max_age_seconds: int = DEFAULT_TOKEN_MAX_AGE_SECONDS):
        self._serializer = URLSafeTimedSerializer(secret_key, salt="api-token")
        self._max_age = int(max_age_seconds)

    def issue(self, user_id: int) -> str:
        return self._serializer.dumps({"uid": int(user_id)})

    def verify(self, token: str) -> int:
        """Return the user id carried by a token, or raise AuthenticationError."""
        try:
            payload = self._serializer.loads(token, max_age=self._max_age)
        except SignatureExpired:
            raise AuthenticationError(INVALID_SESSION)
        except BadSignature:
            raise AuthenticationError(INVALID_SESSION)

        try:
            return int(payload["uid"])
        except (KeyError, TypeError, ValueError):
            raise AuthenticationError(INVALID_SESSION)
