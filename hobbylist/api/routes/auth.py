# hobbylist/api/routes/auth.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from hobbylist.core.errors import bad_request, unauthorized
from hobbylist.core.password_policy import PasswordPolicyError
from hobbylist.db.database import get_db
from hobbylist.schemas.auth import (
    ForgotPasswordIn,
    LoginIn,
    LoginOut,
    MessageOut,
    ResetPasswordIn,
    SignupIn,
)
from hobbylist.services.auth_service import (
    EmailInUseError,
    LoginError,
    login_user,
    normalize_email,
    register_user,
)
from hobbylist.services.verification_service import (
    InvalidTokenError,
    confirm_email,
    request_password_reset,
    reset_password,
)
from hobbylist.utils.email_utils import ResendMailer, get_mailer

router = APIRouter(tags=["Auth"])

_LOGIN_ERRORS = {
    "INVALID_CREDENTIALS": "Invalid email or password",
    "NOT_ACTIVATED": "Account not activated",
}


@router.post("/signup", response_model=MessageOut, openapi_extra={"security": []})
def api_signup(
    body: SignupIn,
    db: Session = Depends(get_db),
    mailer: ResendMailer = Depends(get_mailer),
):
    try:
        result = register_user(db, email=body.email, password=body.password, mailer=mailer)
    except PasswordPolicyError:
        bad_request("Password too weak")
    except EmailInUseError:
        bad_request("Email in use")
    if result == "RESENT":
        return {"message": "Verification email resent"}
    return {"message": "User registered successfully"}


@router.post("/login", response_model=LoginOut, openapi_extra={"security": []})
def api_login(body: LoginIn, db: Session = Depends(get_db)):
    try:
        token = login_user(db, email=body.email, password=body.password)
    except LoginError as ex:
        unauthorized(_LOGIN_ERRORS[ex.reason])
    return {"token": token}


@router.get("/verify", response_model=MessageOut, openapi_extra={"security": []})
def api_verify(token: str = Query(...), db: Session = Depends(get_db)):
    try:
        confirm_email(db, token)
    except InvalidTokenError:
        bad_request("Invalid verification token")
    return {"message": "Account verified successfully"}


# ----------------------------
# Password reset
# ----------------------------

@router.post("/forgot-password", response_model=MessageOut, openapi_extra={"security": []})
def api_forgot_password(
    body: ForgotPasswordIn,
    db: Session = Depends(get_db),
    mailer: ResendMailer = Depends(get_mailer),
):
    # same answer whether or not the address is registered
    request_password_reset(db, normalize_email(body.email), mailer)
    return {"message": "If the account exists, a reset link has been sent"}


@router.post("/reset-password", response_model=MessageOut, openapi_extra={"security": []})
def api_reset_password(body: ResetPasswordIn, db: Session = Depends(get_db)):
    try:
        reset_password(db, body.token, body.new_password)
    except PasswordPolicyError:
        bad_request("Password too weak")
    except InvalidTokenError:
        bad_request("Invalid reset token")
    return {"message": "Password reset successfully"}
