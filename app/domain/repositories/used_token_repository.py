"""
Used Token Repository Interface.
Durable nonce store backing single-use OTP and reset tokens.
"""

from datetime import datetime
from typing import Protocol


class UsedTokenRepository(Protocol):
    """Interface for single-use token bookkeeping."""

    def is_used(self, token_hash: str) -> bool:
        ...

    def mark_used(self, token_hash: str, email: str, purpose: str, expires_at: datetime) -> bool:
        """Record the token as consumed. False when it had already been consumed."""
        ...

    def purge_expired(self, now: datetime) -> int:
        """Drop entries whose token can no longer verify anyway."""
        ...
