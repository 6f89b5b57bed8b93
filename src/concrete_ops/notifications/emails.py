"""HTML email bodies rendered from the package's Jinja2 templates."""
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Sequence

from jinja2 import Environment, PackageLoader, select_autoescape

from .mailer import Attachment, Mailer

logger = logging.getLogger(__name__)


class EmailNotifier:
    def __init__(self, mailer: Mailer, *, company_name: str, app_url: str):
        self._mailer = mailer
        self._company_name = company_name
        self._app_url = app_url
        self._env = Environment(
            loader=PackageLoader("concrete_ops", "templates/email"),
            autoescape=select_autoescape(["html"]),
        )

    @property
    def is_configured(self) -> bool:
        return self._mailer.is_configured

    def render(self, template: str, **context: Any) -> str:
        context.setdefault("company_name", self._company_name)
        context.setdefault("app_url", self._app_url)
        return self._env.get_template(template).render(**context)

    def send_html(self, *, to: str, subject: str, html: str, attachments: Sequence[Attachment] = ()) -> bool:
        return self._mailer.send(to=to, subject=subject, html=html, attachments=attachments)

    def access_request_received(self, *, to: str, full_name: str) -> bool:
        html = self.render("access_request_received.html", full_name=full_name)
        return self.send_html(to=to, subject=f"{self._company_name}: access request received", html=html)

    def access_request_approved(self, *, to: str, full_name: str, role: str) -> bool:
        html = self.render("access_request_approved.html", full_name=full_name, role=role)
        return self.send_html(to=to, subject=f"{self._company_name}: your access was approved", html=html)

    def access_request_denied(self, *, to: str, full_name: str, reason: str) -> bool:
        html = self.render("access_request_denied.html", full_name=full_name, reason=reason)
        return self.send_html(to=to, subject=f"{self._company_name}: access request update", html=html)

    def operator_schedule(self, *, to: str, operator_name: str, scheduled_date: date, jobs: Sequence[Any]) -> bool:
        html = self.render("operator_schedule.html", operator_name=operator_name, scheduled_date=scheduled_date, jobs=jobs)
        subject = f"Your schedule for {scheduled_date.strftime('%A, %B %d, %Y')}"
        return self.send_html(to=to, subject=subject, html=html)

    def job_document(self, *, to: str, customer_name: str, job_number: str, title: str, attachment: Attachment) -> bool:
        html = self.render("job_document.html", customer_name=customer_name, job_number=job_number, title=title)
        return self.send_html(to=to, subject=f"{title} - Job {job_number}", html=html, attachments=[attachment])
