"""Tests for issuing and redeeming one-time tokens."""

from __future__ import annotations

import logging
import uuid

import pytest
import resend
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from hobbylist.core.password_policy import PasswordPolicyError
from hobbylist.core.security import verify_password
from hobbylist.models import TokenPurpose, VerificationToken
from hobbylist.services import verification_service
from hobbylist.services.verification_service import (
    InvalidTokenError,
    build_link,
    confirm_email,
    issue_token,
    request_password_reset,
    reset_password,
)
from hobbylist.utils.email_utils import ResendMailer

from conftest import FakeMailer


def _tokens(db_session):
    return db_session.scalars(select(VerificationToken)).all()


@pytest.mark.parametrize("purpose", list(TokenPurpose))
def test_issue_persists_one_token_for_user_and_purpose(db_session, make_user, mailer, purpose):
    user = make_user()

    record = issue_token(db_session, user, purpose, mailer)

    rows = _tokens(db_session)
    assert len(rows) == 1
    assert rows[0].user_id == user.id
    assert rows[0].purpose == purpose
    assert rows[0].token == record.token
    assert str(uuid.UUID(record.token)) == record.token


def test_issue_sends_verification_link(db_session, make_user, mailer):
    user = make_user()

    record = issue_token(db_session, user, TokenPurpose.EMAIL_VERIFICATION, mailer)

    assert len(mailer.sent) == 1
    sent = mailer.sent[0]
    assert sent["to"] == "test@example.com"
    assert sent["subject"] == "Verify your email"
    assert f"http://localhost:3000/verification?token={record.token}" in sent["html"]


def test_issue_sends_reset_link(db_session, make_user, mailer):
    user = make_user()

    record = issue_token(db_session, user, TokenPurpose.PASSWORD_RESET, mailer)

    sent = mailer.sent[0]
    assert sent["subject"] == "Reset your password"
    assert f"http://localhost:3000/reset-password?token={record.token}" in sent["html"]


def test_build_link_handles_trailing_slash():
    assert build_link(TokenPurpose.PASSWORD_RESET, "abc", "http://localhost:3000/") == (
        "http://localhost:3000/reset-password?token=abc"
    )
    assert build_link(TokenPurpose.EMAIL_VERIFICATION, "abc", "https://hobbylist.app") == (
        "https://hobbylist.app/verification?token=abc"
    )


def test_build_link_defaults_to_configured_frontend():
    assert build_link(TokenPurpose.PASSWORD_RESET, "t1") == "http://localhost:3000/reset-password?token=t1"


def test_issue_does_not_invalidate_older_tokens(db_session, make_user, mailer):
    user = make_user()

    first = issue_token(db_session, user, TokenPurpose.EMAIL_VERIFICATION, mailer)
    second = issue_token(db_session, user, TokenPurpose.EMAIL_VERIFICATION, mailer)

    assert first.token != second.token
    assert len(_tokens(db_session)) == 2


def test_mailer_failure_still_persists_token(db_session, make_user):
    user = make_user()

    issue_token(db_session, user, TokenPurpose.EMAIL_VERIFICATION, FakeMailer(fail=True))

    assert len(_tokens(db_session)) == 1


def test_token_saved_once_before_provider_call(db_session, make_user, monkeypatch):
    """A failing provider call happens after exactly one save."""

    user = make_user()
    calls: list[str] = []
    real_save = verification_service.save_token

    def _recording_save(db, token):
        calls.append("save")
        return real_save(db, token)

    def _failing_send(params):
        calls.append("send")
        raise ConnectionError("resend unreachable")

    monkeypatch.setattr(verification_service, "save_token", _recording_save)
    monkeypatch.setattr(resend.Emails, "send", _failing_send)

    mailer = ResendMailer(api_key="re_test", sender="HobbyList <onboarding@resend.dev>")
    issue_token(db_session, user, TokenPurpose.PASSWORD_RESET, mailer)

    assert calls == ["save", "send"]
    assert len(_tokens(db_session)) == 1


def test_persistence_failure_propagates(db_session, make_user, mailer, monkeypatch):
    user = make_user()
    fixed = uuid.UUID("11111111-2222-3333-4444-555555555555")
    monkeypatch.setattr(verification_service.uuid, "uuid4", lambda: fixed)

    issue_token(db_session, user, TokenPurpose.EMAIL_VERIFICATION, mailer)
    with pytest.raises(IntegrityError):
        issue_token(db_session, user, TokenPurpose.EMAIL_VERIFICATION, mailer)

    # no mail for the failed issuance
    assert len(mailer.sent) == 1


def test_confirm_email_activates_user_and_deletes_token(db_session, make_user, mailer):
    user = make_user()
    record = issue_token(db_session, user, TokenPurpose.EMAIL_VERIFICATION, mailer)

    confirmed = confirm_email(db_session, record.token)

    assert confirmed.id == user.id
    db_session.refresh(user)
    assert user.is_active is True
    assert _tokens(db_session) == []


def test_confirm_email_twice_fails(db_session, make_user, mailer):
    user = make_user()
    record = issue_token(db_session, user, TokenPurpose.EMAIL_VERIFICATION, mailer)
    confirm_email(db_session, record.token)

    with pytest.raises(InvalidTokenError):
        confirm_email(db_session, record.token)


@pytest.mark.parametrize("token", ["", "   ", "does-not-exist"])
def test_confirm_email_unknown_token_changes_nothing(db_session, make_user, mailer, token):
    user = make_user()
    issue_token(db_session, user, TokenPurpose.EMAIL_VERIFICATION, mailer)

    with pytest.raises(InvalidTokenError):
        confirm_email(db_session, token)

    db_session.refresh(user)
    assert user.is_active is False
    assert len(_tokens(db_session)) == 1


def test_confirm_email_rejects_reset_token(db_session, make_user, mailer):
    user = make_user()
    record = issue_token(db_session, user, TokenPurpose.PASSWORD_RESET, mailer)

    with pytest.raises(InvalidTokenError):
        confirm_email(db_session, record.token)

    db_session.refresh(user)
    assert user.is_active is False
    assert len(_tokens(db_session)) == 1


def test_request_password_reset_unknown_email(db_session, mailer):
    assert request_password_reset(db_session, "nobody@example.com", mailer) is False
    assert _tokens(db_session) == []
    assert mailer.sent == []


def test_reset_password_replaces_hash_and_deletes_token(db_session, make_user, mailer):
    user = make_user(active=True)
    assert request_password_reset(db_session, user.email, mailer) is True
    token = _tokens(db_session)[0].token

    reset_password(db_session, token, "newsecret42")

    db_session.refresh(user)
    assert verify_password("newsecret42", user.password_hash)
    assert not verify_password("password123", user.password_hash)
    assert _tokens(db_session) == []


def test_reset_password_weak_password_keeps_token(db_session, make_user, mailer):
    user = make_user(active=True)
    record = issue_token(db_session, user, TokenPurpose.PASSWORD_RESET, mailer)

    with pytest.raises(PasswordPolicyError):
        reset_password(db_session, record.token, "short")

    assert len(_tokens(db_session)) == 1


def test_reset_password_rejects_verification_token(db_session, make_user, mailer):
    user = make_user()
    record = issue_token(db_session, user, TokenPurpose.EMAIL_VERIFICATION, mailer)

    with pytest.raises(InvalidTokenError):
        reset_password(db_session, record.token, "newsecret42")

    db_session.refresh(user)
    assert verify_password("password123", user.password_hash)


def _broken_delete(db, row):
    raise RuntimeError("database down")


def test_confirm_email_failed_delete_rolls_back_activation(db_session, make_user, mailer, monkeypatch):
    user = make_user()
    record = issue_token(db_session, user, TokenPurpose.EMAIL_VERIFICATION, mailer)
    monkeypatch.setattr(verification_service, "delete_token", _broken_delete)

    with pytest.raises(RuntimeError):
        confirm_email(db_session, record.token)

    db_session.refresh(user)
    assert user.is_active is False
    assert [t.token for t in _tokens(db_session)] == [record.token]


def test_reset_password_failed_delete_keeps_old_hash(db_session, make_user, mailer, monkeypatch):
    user = make_user(active=True)
    record = issue_token(db_session, user, TokenPurpose.PASSWORD_RESET, mailer)
    old_hash = user.password_hash
    monkeypatch.setattr(verification_service, "delete_token", _broken_delete)

    with pytest.raises(RuntimeError):
        reset_password(db_session, record.token, "newsecret42")

    db_session.refresh(user)
    assert user.password_hash == old_hash
    assert [t.token for t in _tokens(db_session)] == [record.token]


def test_provider_failure_logged_once(db_session, make_user, monkeypatch, caplog):
    user = make_user()

    def _failing_send(params):
        raise ConnectionError("resend unreachable")

    monkeypatch.setattr(resend.Emails, "send", _failing_send)
    mailer = ResendMailer(api_key="re_test", sender="HobbyList <onboarding@resend.dev>")

    with caplog.at_level(logging.WARNING):
        issue_token(db_session, user, TokenPurpose.EMAIL_VERIFICATION, mailer)

    problems = [r for r in caplog.records if r.levelno >= logging.WARNING]
    assert [r.levelno for r in problems] == [logging.ERROR]
