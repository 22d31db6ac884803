# hobbylist/services/auth_service.py
from __future__ import annotations

import logging
from datetime import timedelta
from typing import Literal

from sqlalchemy.orm import Session

from hobbylist.repositories.user_repo import get_by_email, create_user
from hobbylist.core.security import hash_password, verify_password, jwt_service
from hobbylist.core.config import settings
from hobbylist.core.password_policy import validate_password
from hobbylist.models.verification_token import TokenPurpose
from hobbylist.services.verification_service import issue_token
from hobbylist.utils.email_utils import ResendMailer

log = logging.getLogger(__name__)

SignupStatus = Literal["CREATED", "RESENT"]


class EmailInUseError(Exception):
    pass


class LoginError(Exception):
    def __init__(self, reason: Literal["INVALID_CREDENTIALS", "NOT_ACTIVATED"]):
        super().__init__(reason)
        self.reason = reason


def normalize_email(raw: str) -> str:
    return (raw or "").strip().lower()


def register_user(db: Session, *, email: str, password: str, mailer: ResendMailer) -> SignupStatus:
    """
    Create an inactive account and send the verification mail.
    An existing but inactive account gets a fresh verification mail instead.
    Raises PasswordPolicyError for weak passwords.
    """
    validate_password(password)
    email = normalize_email(email)
    existing = get_by_email(db, email)
    if existing is not None:
        if existing.is_active:
            raise EmailInUseError(email)
        issue_token(db, existing, TokenPurpose.EMAIL_VERIFICATION, mailer)
        return "RESENT"

    user = create_user(db, email=email, password_hash=hash_password(password))
    log.info("Registered user %s", user.id)
    issue_token(db, user, TokenPurpose.EMAIL_VERIFICATION, mailer)
    return "CREATED"


def login_user(db: Session, *, email: str, password: str) -> str:
    """Check credentials and return a signed access token."""
    user = get_by_email(db, normalize_email(email))
    if not user or not verify_password(password, user.password_hash):
        raise LoginError("INVALID_CREDENTIALS")
    if not user.is_active:
        raise LoginError("NOT_ACTIVATED")

    return jwt_service.create_token(
        subject=str(user.id),
        expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        claims={"email": user.email, "role": user.role},
    )
