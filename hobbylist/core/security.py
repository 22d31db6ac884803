# hobbylist/core/security.py

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Optional
import jwt

from passlib.context import CryptContext

from hobbylist.core.config import settings

# =============================
# Password hashing
# =============================

# "argon2" (Argon2id) or "bcrypt" (bcrypt_sha256); both stay verifiable
_SCHEMES = {"argon2": "argon2", "bcrypt": "bcrypt_sha256"}

pwd_context = CryptContext(
    schemes=["argon2", "bcrypt_sha256"],
    default=_SCHEMES.get(settings.PASSWORD_SCHEME.lower().strip(), "argon2"),
    argon2__type="ID",
    argon2__time_cost=2,
    argon2__memory_cost=102_400,
    argon2__parallelism=8,
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return pwd_context.verify(password, password_hash)
    except (ValueError, TypeError):
        # unknown or malformed hash
        return False


# =============================
# JWT (auth tokens)
# =============================

ALGORITHM = "HS256"


class JWTService:
    def __init__(self, secret: str, algorithm: str = ALGORITHM):
        self.secret = secret
        self.algorithm = algorithm

    def create_token(
        self,
        subject: str | int,
        expires_delta: timedelta,
        claims: Optional[dict[str, Any]] = None,
    ) -> str:
        """Create a signed JWT with subject, expiry and optional extra claims."""
        now = datetime.now(timezone.utc)
        payload: dict[str, Any] = {
            "sub": str(subject),
            "iat": int(now.timestamp()),
            "exp": int((now + expires_delta).timestamp()),
        }
        if claims:
            payload.update(claims)
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode_token(self, token: str) -> dict[str, Any]:
        """Decode and validate a JWT."""
        return jwt.decode(token, self.secret, algorithms=[self.algorithm])


jwt_service = JWTService(settings.SECRET_KEY)
