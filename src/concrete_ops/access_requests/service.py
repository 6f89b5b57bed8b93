from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Optional

from werkzeug.security import generate_password_hash

from ..common.datetime_utils import age_on, now_local, parse_iso_date
from ..common.validators import optional_str, pick_fields, require_email, require_min_length, require_non_empty
from ..core.constants import DEFAULT_POSITION, MIN_APPLICANT_AGE, MIN_PASSWORD_LENGTH
from ..core.enums import AccessRequestStatus, Role
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..notifications.emails import EmailNotifier
from ..users.model import User
from ..users.repository import UserRepository
from .model import AccessRequest
from .repository import AccessRequestRepository

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("full_name", "position", "date_of_birth")


@dataclass(frozen=True)
class SubmittedRequest:
    request_id: int
    confirmation_email_sent: bool


@dataclass(frozen=True)
class ApprovedRequest:
    user_id: int
    email_sent: bool


class AccessRequestService:
    """Use case: public sign-up requests reviewed by an admin."""

    def __init__(
        self,
        requests: AccessRequestRepository,
        users: UserRepository,
        notifier: EmailNotifier,
        *,
        today: Callable[[], date] = date.today,
    ):
        self._requests = requests
        self._users = users
        self._notifier = notifier
        self._today = today

    def submit(
        self,
        *,
        full_name: Optional[str],
        email: Optional[str],
        password: Optional[str],
        date_of_birth: Optional[str],
        position: Optional[str] = None,
    ) -> SubmittedRequest:
        if not full_name or not email or not password or not date_of_birth:
            raise ValidationError("Missing required fields: fullName, email, password, dateOfBirth")

        full_name = require_non_empty(full_name, "Full name")
        email = require_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        dob = parse_iso_date(date_of_birth)
        if age_on(dob, self._today()) < MIN_APPLICANT_AGE:
            raise ValidationError(f"You must be at least {MIN_APPLICANT_AGE} years old to request access")

        if self._requests.find_by_email(email, status=AccessRequestStatus.PENDING):
            raise ConflictError("A pending request already exists for this email")
        if self._requests.find_by_email(email, status=AccessRequestStatus.APPROVED):
            raise ConflictError("This email has already been approved. Please log in.")
        if self._users.get_by_email(email):
            raise ConflictError("An account with this email already exists")

        request_id = self._requests.create(
            full_name=full_name,
            email=email,
            password_hash=generate_password_hash(password),
            date_of_birth=dob,
            position=optional_str(position) or DEFAULT_POSITION,
        )
        logger.info("Access request %s submitted for %s", request_id, email)

        sent = self._notifier.access_request_received(to=email, full_name=full_name)
        if not sent:
            logger.warning("Confirmation email for access request %s was not sent", request_id)
        return SubmittedRequest(request_id=request_id, confirmation_email_sent=sent)

    def list_requests(self, *, status: Optional[str] = None) -> list[AccessRequest]:
        status_filter = None
        if status:
            try:
                status_filter = AccessRequestStatus(status)
            except ValueError:
                raise ValidationError(f"Invalid status: {status}")
        return list(self._requests.list_requests(status=status_filter))

    def _get_pending(self, request_id: int) -> AccessRequest:
        req = self._requests.get_by_id(int(request_id))
        if not req:
            raise NotFoundError("Access request not found")
        if not req.is_pending:
            raise ValidationError("Request has already been reviewed")
        return req

    def approve(self, *, reviewer: User, request_id: int, role: Optional[str]) -> ApprovedRequest:
        try:
            assigned_role = Role(role or "")
        except ValueError:
            raise ValidationError("Invalid role. Must be admin, operator or inventory_manager")

        req = self._get_pending(request_id)
        if self._users.get_by_email(req.email):
            raise ConflictError("An account with this email already exists")

        # The applicant keeps the password chosen at sign-up.
        user_id = self._users.create_user(
            full_name=req.full_name,
            email=req.email,
            password_hash=req.password_hash,
            role=assigned_role,
            position=req.position,
        )
        self._requests.mark_approved(
            req.request_id, reviewed_by=reviewer.user_id, role=assigned_role, reviewed_at=now_local()
        )
        logger.info("Access request %s approved by %s as %s", req.request_id, reviewer.user_id, assigned_role.value)

        sent = self._notifier.access_request_approved(to=req.email, full_name=req.full_name, role=assigned_role.value)
        return ApprovedRequest(user_id=user_id, email_sent=sent)

    def deny(self, *, reviewer: User, request_id: int, reason: Optional[str]) -> bool:
        reason = require_non_empty(reason, "Denial reason")
        req = self._get_pending(request_id)

        self._requests.mark_denied(req.request_id, reviewed_by=reviewer.user_id, reason=reason, reviewed_at=now_local())
        logger.info("Access request %s denied by %s", req.request_id, reviewer.user_id)

        return self._notifier.access_request_denied(to=req.email, full_name=req.full_name, reason=reason)

    def update(self, *, request_id: int, body: dict[str, Any]) -> AccessRequest:
        req = self._get_pending(request_id)
        fields = pick_fields(body, EDITABLE_FIELDS)
        if not fields:
            raise ValidationError("No valid fields to update")

        if "full_name" in fields:
            fields["full_name"] = require_non_empty(fields["full_name"], "Full name")
        if "position" in fields:
            fields["position"] = optional_str(fields["position"]) or DEFAULT_POSITION
        if "date_of_birth" in fields:
            fields["date_of_birth"] = parse_iso_date(fields["date_of_birth"])

        self._requests.update_fields(req.request_id, fields)
        updated = self._requests.get_by_id(req.request_id)
        if not updated:
            raise NotFoundError("Access request not found")
        return updated

    def delete(self, *, request_id: int) -> None:
        if not self._requests.delete_by_id(int(request_id)):
            raise NotFoundError("Access request not found")
        logger.info("Access request %s deleted", request_id)
