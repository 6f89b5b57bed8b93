from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional

import requests

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.validators import optional_str, require_email, require_non_empty, require_positive_int
from ..core.enums import DocumentType, JobStatus
from ..core.exceptions import NotFoundError, ServiceUnavailableError, ValidationError
from ..jobs.model import JobOrder
from ..jobs.repository import JobOrderRepository
from ..jobs.service import JobOrderService, ensure_can_access
from ..notifications.emails import EmailNotifier
from ..notifications.mailer import Attachment
from ..notifications.sms import SMSResult, SMSSender
from ..users.model import User
from ..users.repository import UserRepository
from .model import JobDocument
from .pdf import TEMPLATES, DocumentContext, file_name_for, render_document
from .repository import DocumentRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeneratedDocument:
    document: JobDocument
    email_sent: bool


@dataclass
class ScheduleReport:
    sent_count: int = 0
    total: int = 0
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"sent_count": self.sent_count, "total": self.total, "errors": list(self.errors)}


class DocumentService:
    """Use case: job paperwork (PDF), plus outbound email and SMS on behalf of the office."""

    def __init__(
        self,
        documents: DocumentRepository,
        jobs: JobOrderRepository,
        job_orders: JobOrderService,
        users: UserRepository,
        notifier: EmailNotifier,
        sms: SMSSender,
        *,
        company_name: str,
    ):
        self._documents = documents
        self._jobs = jobs
        self._job_orders = job_orders
        self._users = users
        self._notifier = notifier
        self._sms = sms
        self._company_name = company_name

    def generate(
        self,
        user: User,
        *,
        job_id: int,
        doc_type: DocumentType,
        customer_name: Any,
        customer_email: Any = None,
        now: Optional[datetime] = None,
    ) -> GeneratedDocument:
        signer = require_non_empty(customer_name, "customerName")
        email = optional_str(customer_email)
        if email:
            email = require_email(email)
        job = self._job_orders.get_for_user(user, job_id)

        now = now or now_local()
        content = render_document(
            doc_type,
            DocumentContext(
                company_name=self._company_name,
                job_number=job.job_number,
                job_title=job.title,
                customer_name=job.customer_name,
                address=job.address,
                operator_name=job.assigned_operator_name,
                signer_name=signer,
                signed_at=now,
            ),
        )
        file_name = file_name_for(doc_type, job.job_number)
        document_id = self._documents.create(
            job_id=job.job_id,
            doc_type=doc_type,
            file_name=file_name,
            content=content,
            signer_name=signer,
            created_by=user.user_id,
        )
        logger.info("Generated %s document %s for job %s", doc_type.value, document_id, job.job_number)

        email_sent = False
        if email:
            title = TEMPLATES[doc_type][0]
            email_sent = self._notifier.job_document(
                to=email,
                customer_name=signer,
                job_number=job.job_number,
                title=title,
                attachment=Attachment(filename=file_name, content=content),
            )
            if not email_sent:
                logger.warning("Document %s was stored but not emailed to %s", document_id, email)

        document = JobDocument(
            document_id=document_id,
            job_id=job.job_id,
            doc_type=doc_type,
            file_name=file_name,
            signer_name=signer,
            created_by=user.user_id,
            created_at=now,
        )
        return GeneratedDocument(document=document, email_sent=email_sent)

    def list_for_job(self, user: User, *, job_id: int) -> list[JobDocument]:
        job = self._job_orders.get_for_user(user, job_id)
        return list(self._documents.list_for_job(job.job_id))

    def download(self, user: User, *, document_id: int) -> JobDocument:
        document = self._documents.get_by_id(int(document_id))
        if not document:
            raise NotFoundError("Document not found")
        ensure_can_access(user, self._job_orders.get_job(document.job_id))
        return document

    def send_email(self, user: User, *, to: Any, subject: Any, html: Any, document_id: Any = None) -> None:
        if not to or not subject or not html:
            raise ValidationError("Missing required fields: to, subject, html")
        if document_id:
            document_id = require_positive_int(document_id, "documentId")
        if not self._notifier.is_configured:
            logger.warning("SMTP not configured; email to %s (%s) not sent", to, subject)
            raise ServiceUnavailableError("Email service not configured")

        attachments = []
        if document_id:
            document = self.download(user, document_id=document_id)
            attachments.append(Attachment(filename=document.file_name, content=document.content or b""))

        if not self._notifier.send_html(to=str(to), subject=str(subject), html=str(html), attachments=attachments):
            raise ServiceUnavailableError("Failed to send email")

    def send_sms(self, *, to: Any, message: Any) -> SMSResult:
        if not to or not message:
            raise ValidationError("Phone number and message are required")
        try:
            return self._sms.send(to=str(to), text=str(message))
        except requests.RequestException as e:
            logger.exception("SMS to %s failed", to)
            raise ServiceUnavailableError("Failed to send SMS", details=str(e))

    def _jobs_by_operator(self, scheduled_date: date) -> dict[int, list[JobOrder]]:
        grouped: dict[int, list[JobOrder]] = defaultdict(list)
        for job in self._jobs.list_jobs(start_date=scheduled_date, end_date=scheduled_date):
            if job.status == JobStatus.CANCELLED or not job.assigned_to:
                continue
            grouped[job.assigned_to].append(job)
        return grouped

    def send_schedule(self, *, scheduled_date: Any) -> ScheduleReport:
        if not scheduled_date:
            raise ValidationError("Missing required fields: scheduled_date")
        day = parse_iso_date(str(scheduled_date))

        grouped = self._jobs_by_operator(day)
        report = ScheduleReport(total=len(grouped))
        for operator_id, jobs in grouped.items():
            operator = self._users.get_by_id(operator_id)
            if not operator:
                report.errors.append(f"Operator {operator_id}: not found")
                continue
            if self._notifier.operator_schedule(
                to=operator.email, operator_name=operator.full_name, scheduled_date=day, jobs=jobs
            ):
                report.sent_count += 1
            else:
                report.errors.append(f"{operator.full_name}: email not sent")
        logger.info("Schedules for %s: sent %s of %s", day, report.sent_count, report.total)
        return report
