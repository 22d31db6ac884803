# hobbylist/services/notification_service.py
from __future__ import annotations

import logging

from hobbylist.models.verification_token import TokenPurpose
from hobbylist.utils.email_utils import ResendMailer

log = logging.getLogger(__name__)


_TEMPLATES: dict[TokenPurpose, tuple[str, str]] = {
    TokenPurpose.EMAIL_VERIFICATION: (
        "Verify your email",
        '<p>Click the link to verify your account: <a href="{url}">{url}</a></p>',
    ),
    TokenPurpose.PASSWORD_RESET: (
        "Reset your password",
        '<p>Click the link to reset your password: <a href="{url}">{url}</a></p>',
    ),
}


def render_message(purpose: TokenPurpose, url: str) -> tuple[str, str]:
    """Return ``(subject, html)`` for a token email."""
    subject, html = _TEMPLATES[purpose]
    return subject, html.format(url=url)


def send_token_email(mailer: ResendMailer, purpose: TokenPurpose, to_email: str, url: str) -> bool:
    """
    Send the verification/reset mail for ``purpose``.
    Errors are logged and reported as False, never raised.
    """
    try:
        subject, html = render_message(purpose, url)
        return mailer.send_mail(to_email, subject, html)
    except Exception:
        log.exception("Token email (%s) to %s could not be sent", purpose.value, to_email)
        return False
