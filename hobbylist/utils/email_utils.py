# hobbylist/utils/email_utils.py
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

import resend

from hobbylist.core.config import settings

log = logging.getLogger(__name__)


class ResendMailer:
    """Thin wrapper around the Resend SDK. Never raises on delivery problems."""

    def __init__(self, api_key: str, sender: str, override_to: Optional[str] = None):
        self.api_key = api_key
        self.sender = sender
        self.override_to = override_to

    def send_mail(self, to_email: str, subject: str, html_body: str) -> bool:
        recipient = self.override_to or to_email
        params: resend.Emails.SendParams = {
            "from": self.sender,
            "to": [recipient],
            "subject": subject,
            "html": html_body,
        }

        try:
            # the SDK reads the key from module state
            resend.api_key = self.api_key
            resp = resend.Emails.send(params)
        except Exception as ex:
            log.error("Mail to %s failed (%s): %s", recipient, subject, ex)
            return False

        log.info("Mail sent to %s: %s (id=%s)", recipient, subject, _message_id(resp))
        return True


def _message_id(resp) -> Optional[str]:
    if isinstance(resp, dict):
        return resp.get("id")
    return getattr(resp, "id", None)


@lru_cache
def get_mailer() -> ResendMailer:
    return ResendMailer(
        api_key=settings.RESEND_API_KEY,
        sender=settings.MAIL_FROM,
        override_to=settings.MAIL_OVERRIDE_TO,
    )
