# hobbylist/services/verification_service.py
from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session

from hobbylist.core.config import settings
from hobbylist.core.password_policy import validate_password
from hobbylist.core.security import hash_password
from hobbylist.models.user import User
from hobbylist.models.verification_token import TokenPurpose, VerificationToken
from hobbylist.repositories.token_repo import delete_token, find_by_token, save_token
from hobbylist.repositories.user_repo import get_by_email, mark_user_active, update_password_hash
from hobbylist.services.notification_service import send_token_email
from hobbylist.utils.email_utils import ResendMailer

log = logging.getLogger(__name__)

_LINK_PATHS = {
    TokenPurpose.EMAIL_VERIFICATION: "verification",
    TokenPurpose.PASSWORD_RESET: "reset-password",
}


class InvalidTokenError(Exception):
    """Token unknown, already consumed or issued for another purpose."""


def build_link(purpose: TokenPurpose, token: str, base_url: str | None = None) -> str:
    base = (base_url if base_url is not None else settings.FRONTEND_URL).rstrip("/")
    return f"{base}/{_LINK_PATHS[purpose]}?token={token}"


def issue_token(db: Session, user: User, purpose: TokenPurpose, mailer: ResendMailer) -> VerificationToken:
    """
    Create and store a one-time token for ``user`` and mail the link.

    Database errors propagate. Mail errors are logged and ignored, the token
    stays stored either way.
    """
    record = save_token(db, VerificationToken(token=str(uuid.uuid4()), user=user, purpose=purpose))
    log.info("Issued %s token for user %s", purpose.value, user.id)

    send_token_email(mailer, purpose, user.email, build_link(purpose, record.token))
    return record


def confirm_email(db: Session, token: str) -> User:
    """Redeem an EMAIL_VERIFICATION token: activate the user, drop the token."""
    row = _lookup(db, token, TokenPurpose.EMAIL_VERIFICATION)
    user = row.user
    with _redeeming(db):
        mark_user_active(db, user)
        delete_token(db, row)
    log.info("User %s verified", user.id)
    return user


def request_password_reset(db: Session, email: str, mailer: ResendMailer) -> bool:
    """Issue a PASSWORD_RESET token if the account exists. Returns whether one was issued."""
    user = get_by_email(db, email)
    if not user:
        log.info("Password reset requested for unknown address")
        return False
    issue_token(db, user, TokenPurpose.PASSWORD_RESET, mailer)
    return True


def reset_password(db: Session, token: str, new_password: str) -> User:
    """
    Redeem a PASSWORD_RESET token and store the new password hash.
    Raises PasswordPolicyError before the token is looked up.
    """
    validate_password(new_password)
    row = _lookup(db, token, TokenPurpose.PASSWORD_RESET)
    user = row.user
    with _redeeming(db):
        update_password_hash(db, user, hash_password(new_password))
        delete_token(db, row)
    log.info("Password reset for user %s", user.id)
    return user


@contextmanager
def _redeeming(db: Session) -> Iterator[None]:
    """User change and token deletion commit together or not at all."""
    try:
        yield
        db.commit()
    except Exception:
        db.rollback()
        raise


def _lookup(db: Session, token: str, purpose: TokenPurpose) -> VerificationToken:
    token = (token or "").strip()
    if not token:
        raise InvalidTokenError(token)
    row = find_by_token(db, token, purpose=purpose)
    if row is None:
        raise InvalidTokenError(token)
    return row
