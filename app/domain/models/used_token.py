"""Used token registry: single-use OTP and reset tokens that were already consumed."""

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func

from app.infrastructure.database import Base


class UsedToken(Base):
    __tablename__ = "used_tokens"

    id = Column(Integer, primary_key=True, autoincrement=True)
    token_hash = Column(String(64), unique=True, nullable=False, index=True)  # sha256 hex
    email = Column(String(255), nullable=False, index=True)
    purpose = Column(String(30), nullable=False)  # forgotPassword, passwordReset, activation
    used_at = Column(DateTime(timezone=True), server_default=func.now())
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)

    def __repr__(self):
        return f"<UsedToken {self.purpose} {self.email}>"
