"""Auth service: registration, login, token refresh and the password reset flow."""

from dataclasses import dataclass
from typing import Optional

import structlog
from fastapi import status
from passlib.context import CryptContext

from app.application.services import token_service
from app.config import get_settings
from app.core.exceptions import ErrorResponse, validate_required_fields
from app.domain.models.user import ROLE_ADMIN, ROLES, User
from app.domain.repositories.used_token_repository import UsedTokenRepository
from app.domain.repositories.user_repository import UserRepository
from app.domain.schemas.auth import RegisterRequest

settings = get_settings()
logger = structlog.get_logger(__name__)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS)


@dataclass
class LoginResult:
    user: User
    access_token: str
    refresh_token: str


@dataclass
class OtpVerification:
    reset_token: str
    email: str


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def _find_user_or_404(repo: UserRepository, email: str) -> User:
    user = repo.get_by_email(email)
    if not user:
        raise ErrorResponse("User not found", status.HTTP_404_NOT_FOUND)
    return user


def create_user(
    repo: UserRepository,
    full_name: str,
    user_name: str,
    email: str,
    password: str,
    phone: str,
    kyc_card: str,
    role: str,
) -> User:
    return repo.create(
        {
            "full_name": full_name,
            "user_name": user_name,
            "email": email,
            "password_hash": hash_password(password),
            "phone": phone,
            "kyc_card": kyc_card,
            "role": role,
            # Admins skip KYC; everyone else waits for an admin to verify them
            "kyc_verified": role == ROLE_ADMIN,
        }
    )


def register(repo: UserRepository, body: RegisterRequest) -> User:
    fields = body.model_dump(by_alias=True)
    validate_required_fields(
        fields,
        ["email", "password", "userName", "fullName", "phoneNumber", "kycCard", "role"],
    )

    if body.role not in ROLES:
        raise ErrorResponse(f"Invalid role. Allowed roles: {', '.join(ROLES)}", status.HTTP_400_BAD_REQUEST)
    if repo.get_by_user_name(body.user_name):
        raise ErrorResponse("Username already taken", status.HTTP_400_BAD_REQUEST)
    if repo.get_by_phone(body.phone_number):
        raise ErrorResponse("Phone number already taken", status.HTTP_400_BAD_REQUEST)
    if repo.get_by_email(body.email):
        raise ErrorResponse("User already exists", status.HTTP_400_BAD_REQUEST)

    user = create_user(
        repo,
        full_name=body.full_name,
        user_name=body.user_name,
        email=body.email,
        password=body.password,
        phone=body.phone_number,
        kyc_card=body.kyc_card,
        role=body.role,
    )

    # No mail delivery: the activation code only reaches the log
    _, code = token_service.create_otp_token(user, token_service.PURPOSE_ACTIVATION)
    logger.info("User registered", user_id=user.id, role=user.role, activation_code=code)
    return user


def login(repo: UserRepository, email: Optional[str], password: Optional[str]) -> LoginResult:
    validate_required_fields({"email": email, "password": password}, ["email", "password"])

    user = _find_user_or_404(repo, email)
    if not verify_password(password, user.password_hash):
        raise ErrorResponse("Invalid Password", status.HTTP_400_BAD_REQUEST)
    if not user.kyc_verified:
        raise ErrorResponse("User is not verified yet!", status.HTTP_403_FORBIDDEN)

    logger.info("User logged in", user_id=user.id)
    return LoginResult(
        user=user,
        access_token=token_service.create_access_token(user),
        refresh_token=token_service.create_refresh_token(user),
    )


def refresh_access_token(repo: UserRepository, refresh_token: Optional[str]) -> str:
    """Exchange a refresh token for a new access token. The refresh token is left as is."""
    if not refresh_token:
        raise ErrorResponse("Refresh token is required", status.HTTP_400_BAD_REQUEST)

    payload = token_service.decode_refresh_token(refresh_token)
    if payload is None:
        raise ErrorResponse("Invalid or expired refresh token", status.HTTP_401_UNAUTHORIZED)

    user = repo.get_by_id(payload["id"])
    if not user:
        raise ErrorResponse("User not found", status.HTTP_401_UNAUTHORIZED)

    return token_service.create_access_token(user)


def forgot_password(repo: UserRepository, email: Optional[str]) -> str:
    validate_required_fields({"email": email}, ["email"])
    user = _find_user_or_404(repo, email)

    token, code = token_service.create_otp_token(user, token_service.PURPOSE_FORGOT_PASSWORD)
    logger.info("Password reset requested", user_id=user.id, otp=code)
    return token


def resend_forgot_password_otp(repo: UserRepository, email: Optional[str]) -> str:
    return forgot_password(repo, email)


def resend_verification_otp(repo: UserRepository, email: Optional[str]) -> str:
    validate_required_fields({"email": email}, ["email"])
    user = _find_user_or_404(repo, email)

    token, code = token_service.create_otp_token(user, token_service.PURPOSE_ACTIVATION)
    logger.info("Verification code reissued", user_id=user.id, activation_code=code)
    return token


def verify_otp(
    repo: UserRepository,
    used_tokens: UsedTokenRepository,
    token: Optional[str],
    otp,
) -> OtpVerification:
    """Check the code inside a forgot-password token and trade the token for a reset token."""
    validate_required_fields({"token": token, "otp": otp}, ["token", "otp"])

    fingerprint = token_service.token_fingerprint(token)
    if used_tokens.is_used(fingerprint):
        raise ErrorResponse(
            "This verification link has already been used. Please request a new one.",
            status.HTTP_400_BAD_REQUEST,
        )

    payload = token_service.decode_purpose_token(token, token_service.PURPOSE_FORGOT_PASSWORD)
    if str(payload.get("code")) != str(otp).strip():
        raise ErrorResponse("Invalid OTP", status.HTTP_400_BAD_REQUEST)

    user = _find_user_or_404(repo, payload["user"]["email"])

    # Consume before handing out the reset token; a concurrent winner makes this fail
    if not used_tokens.mark_used(
        fingerprint,
        email=user.email,
        purpose=token_service.PURPOSE_FORGOT_PASSWORD,
        expires_at=token_service.token_expiry(payload),
    ):
        raise ErrorResponse(
            "This verification link has already been used. Please request a new one.",
            status.HTTP_400_BAD_REQUEST,
        )

    logger.info("OTP verified", user_id=user.id)
    return OtpVerification(reset_token=token_service.create_reset_token(user), email=user.email)


def reset_password(
    repo: UserRepository,
    used_tokens: UsedTokenRepository,
    token: Optional[str],
    password: Optional[str],
) -> User:
    validate_required_fields({"token": token, "password": password}, ["token", "password"])

    fingerprint = token_service.token_fingerprint(token)
    if used_tokens.is_used(fingerprint):
        raise ErrorResponse("This reset link has already been used", status.HTTP_400_BAD_REQUEST)

    payload = token_service.decode_purpose_token(token, token_service.PURPOSE_PASSWORD_RESET)
    user = _find_user_or_404(repo, payload["user"]["email"])

    # Both repositories share the request session: the token insert commits the
    # staged hash, and a lost race rolls it back
    repo.set_password_hash(user, hash_password(password), commit=False)
    if not used_tokens.mark_used(
        fingerprint,
        email=user.email,
        purpose=token_service.PURPOSE_PASSWORD_RESET,
        expires_at=token_service.token_expiry(payload),
    ):
        raise ErrorResponse("This reset link has already been used", status.HTTP_400_BAD_REQUEST)

    logger.info("Password reset", user_id=user.id)
    return user
