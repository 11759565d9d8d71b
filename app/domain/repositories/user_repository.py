"""
User Repository Interface.
Credential store: lookups and the few mutations admins and the auth flow perform.
"""

from typing import List, Optional

from app.domain.repositories.base import BaseRepository
from app.domain.models.user import User


class UserRepository(BaseRepository[User]):
    """Interface for User-specific operations."""

    def get_by_email(self, email: str) -> Optional[User]:
        ...

    def get_by_user_name(self, user_name: str) -> Optional[User]:
        ...

    def get_by_phone(self, phone: str) -> Optional[User]:
        ...

    def list_unverified(self) -> List[User]:
        """Users still waiting for KYC verification."""
        ...

    def set_verified(self, user: User) -> User:
        ...

    def set_credit_balance(self, user: User, amount: float) -> User:
        ...

    def set_password_hash(self, user: User, password_hash: str, commit: bool = True) -> User:
        """With commit=False the change is only staged on the session."""
        ...
