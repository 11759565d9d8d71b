"""Pydantic schemas for User and Auth."""

from datetime import datetime
from typing import Optional, Union

from app.domain.schemas.base import CamelModel


class RegisterRequest(CamelModel):
    full_name: Optional[str] = None
    user_name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    phone_number: Optional[str] = None
    kyc_card: Optional[str] = None
    role: Optional[str] = None


class LoginRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class RefreshRequest(CamelModel):
    refresh_token: Optional[str] = None


class EmailRequest(CamelModel):
    email: Optional[str] = None


class VerifyOtpRequest(CamelModel):
    token: Optional[str] = None
    otp: Optional[Union[int, str]] = None


class ResetPasswordRequest(CamelModel):
    token: Optional[str] = None
    password: Optional[str] = None


class UserRead(CamelModel):
    id: int
    full_name: str
    user_name: str
    email: str
    phone: str
    kyc_card: str
    role: str
    kyc_verified: bool
    credit_bal: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserCredit(CamelModel):
    id: int
    full_name: str
    credit_bal: float


class AuthenticatedUser(CamelModel):
    """Identity attached to a request by the auth dependency."""

    id: int
    email: str
    role: Optional[str] = None
