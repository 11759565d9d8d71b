"""
SQLAlchemy Implementation of the Used Token Repository.
"""

from datetime import datetime

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.domain.models.used_token import UsedToken
from app.domain.repositories.used_token_repository import UsedTokenRepository


class SQLAlchemyUsedTokenRepository(UsedTokenRepository):
    """Single-use token store kept in the database so it survives restarts and is shared across instances."""

    def __init__(self, db: Session):
        self.db = db

    def is_used(self, token_hash: str) -> bool:
        return (
            self.db.query(UsedToken.id).filter(UsedToken.token_hash == token_hash).first()
            is not None
        )

    def mark_used(self, token_hash: str, email: str, purpose: str, expires_at: datetime) -> bool:
        self.db.add(
            UsedToken(
                token_hash=token_hash,
                email=email,
                purpose=purpose,
                expires_at=expires_at,
            )
        )
        try:
            self.db.commit()
        except IntegrityError:
            # Unique token_hash: another request consumed it first
            self.db.rollback()
            return False
        return True

    def purge_expired(self, now: datetime) -> int:
        result = self.db.execute(delete(UsedToken).where(UsedToken.expires_at < now))
        self.db.commit()
        return result.rowcount or 0
