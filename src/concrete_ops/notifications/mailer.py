"""Outgoing email over SMTP."""
from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email import encoders
from email.mime.base import MIMEBase
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Attachment:
    filename: str
    content: bytes
    maintype: str = "application"
    subtype: str = "pdf"


@dataclass(frozen=True)
class SMTPSettings:
    host: str
    port: int = 587
    user: str = ""
    password: str = ""
    from_email: str = "no-reply@localhost"
    use_tls: bool = True

    @classmethod
    def from_dict(cls, smtp: dict) -> "SMTPSettings":
        return cls(
            host=str(smtp.get("host") or ""),
            port=int(smtp.get("port") or 587),
            user=str(smtp.get("user") or ""),
            password=str(smtp.get("password") or ""),
            from_email=str(smtp.get("from_email") or "no-reply@localhost"),
            use_tls=bool(smtp.get("use_tls", True)),
        )


class Mailer:
    def __init__(self, settings: SMTPSettings):
        self._settings = settings

    @property
    def is_configured(self) -> bool:
        return bool(self._settings.host)

    def build_message(self, *, to: str, subject: str, html: str, attachments: Sequence[Attachment] = ()) -> MIMEMultipart:
        msg = MIMEMultipart()
        msg["From"] = self._settings.from_email
        msg["To"] = to
        msg["Subject"] = subject
        msg.attach(MIMEText(html, "html"))

        for attachment in attachments:
            part = MIMEBase(attachment.maintype, attachment.subtype)
            part.set_payload(attachment.content)
            encoders.encode_base64(part)
            part.add_header("Content-Disposition", f'attachment; filename="{attachment.filename}"')
            msg.attach(part)
        return msg

    def send(self, *, to: str, subject: str, html: str, attachments: Sequence[Attachment] = ()) -> bool:
        """Send one email. Returns False (and logs) when SMTP is unset or delivery fails."""
        if not self.is_configured:
            logger.info("SMTP not configured; email to %s logged only: %s", to, subject)
            return False

        msg = self.build_message(to=to, subject=subject, html=html, attachments=attachments)
        s = self._settings
        try:
            with smtplib.SMTP(s.host, s.port, timeout=30) as server:
                if s.use_tls:
                    server.starttls()
                if s.user:
                    server.login(s.user, s.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError):
            logger.exception("Failed to send email to %s", to)
            return False

        logger.info("Email sent to %s: %s", to, subject)
        return True
