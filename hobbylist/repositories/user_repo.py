# hobbylist/repositories/user_repo.py
from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from hobbylist.models.user import DEFAULT_ROLE, User


# ------------------------------------------------------------
# READ
# ------------------------------------------------------------
def get_by_id(db: Session, user_id: int) -> Optional[User]:
    return db.get(User, user_id)


def get_by_email(db: Session, email: str) -> Optional[User]:
    return db.scalar(select(User).where(User.email == email))


# ------------------------------------------------------------
# CREATE / UPDATE
# ------------------------------------------------------------
def create_user(
    db: Session,
    *,
    email: str,
    password_hash: str,
    role: str = DEFAULT_ROLE,
) -> User:
    user = User(email=email, password_hash=password_hash, role=role, is_active=False)
    db.add(user)
    try:
        db.flush()
        db.commit()
    except IntegrityError:
        db.rollback()
        raise
    db.refresh(user)
    return user


# Caller commits
def update_password_hash(db: Session, user: User, new_hash: str) -> None:
    user.password_hash = new_hash
    db.add(user)


def mark_user_active(db: Session, user: User) -> None:
    """Activate the account. Idempotent. Caller commits."""
    if user.is_active:
        return
    user.is_active = True
    db.add(user)
