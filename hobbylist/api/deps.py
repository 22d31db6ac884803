# hobbylist/api/deps.py
from __future__ import annotations
from dataclasses import dataclass

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from jwt import ExpiredSignatureError, InvalidTokenError

from hobbylist.core.errors import unauthorized
from hobbylist.core.security import jwt_service
from hobbylist.db.database import get_db
from hobbylist.repositories.user_repo import get_by_id

# ----------------------------------------------------------
# Security
# ----------------------------------------------------------
security = HTTPBearer(auto_error=False)

@dataclass
class CurrentUser:
    id: int
    email: str
    role: str
    is_active: bool


def _user_from_payload(db: Session, payload: dict) -> CurrentUser:
    try:
        user_id = int(payload.get("sub", 0) or 0)
    except (TypeError, ValueError):
        unauthorized("Invalid token")
    user = get_by_id(db, user_id)
    if not user:
        unauthorized("User not found")

    return CurrentUser(id=user.id, email=user.email, role=user.role, is_active=user.is_active)


def _decode_or_401(token: str, db: Session) -> CurrentUser:
    try:
        payload = jwt_service.decode_token(token)
    except ExpiredSignatureError:
        unauthorized("Token expired")
    except InvalidTokenError:
        unauthorized("Invalid token")
    return _user_from_payload(db, payload)


# ----------------------------------------------------------
# Bearer authentication
# ----------------------------------------------------------
def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> CurrentUser:
    if not credentials or credentials.scheme.lower() != "bearer":
        unauthorized("Not authenticated")
    return _decode_or_401(credentials.credentials, db)
