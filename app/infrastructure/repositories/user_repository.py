"""
SQLAlchemy Implementation of User Repository.
"""

from typing import List, Optional

from app.domain.models.user import User
from app.domain.repositories.user_repository import UserRepository
from app.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyUserRepository(SQLAlchemyRepository[User], UserRepository):
    """User repository implementation using SQLAlchemy."""

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def get_by_user_name(self, user_name: str) -> Optional[User]:
        return self.db.query(User).filter(User.user_name == user_name).first()

    def get_by_phone(self, phone: str) -> Optional[User]:
        return self.db.query(User).filter(User.phone == phone).first()

    def list_unverified(self) -> List[User]:
        return (
            self.db.query(User)
            .filter(User.kyc_verified.is_(False))
            .order_by(User.created_at.asc(), User.id.asc())
            .all()
        )

    def set_verified(self, user: User) -> User:
        return self.update(user, {"kyc_verified": True})

    def set_credit_balance(self, user: User, amount: float) -> User:
        return self.update(user, {"credit_bal": float(amount)})

    def set_password_hash(self, user: User, password_hash: str, commit: bool = True) -> User:
        if commit:
            return self.update(user, {"password_hash": password_hash})
        user.password_hash = password_hash
        self.db.add(user)
        return user
