"""Text messages through the Telnyx REST API."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import requests

logger = logging.getLogger(__name__)

TELNYX_MESSAGES_URL = "https://api.telnyx.com/v2/messages"


@dataclass(frozen=True)
class SMSResult:
    status: str  # "sent" or "logged"
    message_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {"status": self.status, "messageId": self.message_id}


class SMSSender:
    def __init__(self, api_key: str, from_number: str, *, session: Optional[requests.Session] = None):
        self._api_key = api_key
        self._from_number = from_number
        self._session = session or requests.Session()

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key and self._from_number)

    def send(self, *, to: str, text: str) -> SMSResult:
        if not self.is_configured:
            logger.info("Telnyx not configured; SMS to %s logged only: %s", to, text)
            return SMSResult(status="logged")

        resp = self._session.post(
            TELNYX_MESSAGES_URL,
            json={"from": self._from_number, "to": to, "text": text},
            headers={"Authorization": f"Bearer {self._api_key}"},
            timeout=15,
        )
        resp.raise_for_status()
        message_id = (resp.json().get("data") or {}).get("id")
        logger.info("SMS sent to %s (id=%s)", to, message_id)
        return SMSResult(status="sent", message_id=message_id)
