# hobbylist/repositories/token_repo.py
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from hobbylist.models.verification_token import TokenPurpose, VerificationToken


def save_token(db: Session, token: VerificationToken) -> VerificationToken:
    db.add(token)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(token)
    return token


def find_by_token(
    db: Session,
    token_str: str,
    purpose: Optional[TokenPurpose] = None,
) -> Optional[VerificationToken]:
    stmt = select(VerificationToken).where(VerificationToken.token == token_str)
    if purpose is not None:
        stmt = stmt.where(VerificationToken.purpose == purpose)
    return db.execute(stmt.limit(1)).scalar_one_or_none()


def delete_token(db: Session, token: VerificationToken) -> None:
    """Mark the token for deletion. Caller commits."""
    db.delete(token)
