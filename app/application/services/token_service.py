"""Token codec: signs and verifies access, refresh, OTP and reset tokens.

Each token family has its own secret, so a refresh token can never pass as
an access token (and vice versa) even though both carry the same claims.
"""

import hashlib
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import status
from jose import ExpiredSignatureError, JWTError, jwt

from app.config import get_settings
from app.core.exceptions import ErrorResponse
from app.domain.models.user import User

settings = get_settings()

PURPOSE_ACTIVATION = "activation"
PURPOSE_FORGOT_PASSWORD = "forgotPassword"
PURPOSE_PASSWORD_RESET = "passwordReset"

OTP_MIN = 100000
OTP_MAX = 999999


def _encode(claims: dict, secret: str, lifetime: timedelta) -> str:
    now = datetime.now(timezone.utc)
    to_encode = dict(claims)
    to_encode.update({"iat": now, "exp": now + lifetime})
    return jwt.encode(to_encode, secret, algorithm=settings.JWT_ALGORITHM)


def _decode(token: str, secret: str) -> Optional[dict]:
    try:
        return jwt.decode(token, secret, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None


def _identity_claims(user: User) -> dict:
    return {"id": user.id, "email": user.email, "role": user.role}


def _otp_secret(purpose: str) -> str:
    if purpose == PURPOSE_ACTIVATION:
        return settings.ACTIVATION_TOKEN_SECRET
    return settings.FORGOT_PASSWORD_SECRET


# ---------------------------------------------------------------------------
# Session tokens
# ---------------------------------------------------------------------------

def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    return _encode(
        _identity_claims(user),
        settings.ACCESS_TOKEN_SECRET,
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def create_access_token_from_claims(claims: dict) -> str:
    """Mint an access token for identity claims already proven by a refresh token."""
    identity = {key: claims.get(key) for key in ("id", "email", "role")}
    return _encode(
        identity,
        settings.ACCESS_TOKEN_SECRET,
        timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def create_refresh_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    return _encode(
        _identity_claims(user),
        settings.REFRESH_TOKEN_SECRET,
        expires_delta or timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
    )


def decode_access_token(token: str) -> Optional[dict]:
    payload = _decode(token, settings.ACCESS_TOKEN_SECRET)
    if payload is None or payload.get("id") is None:
        return None
    return payload


def decode_refresh_token(token: str) -> Optional[dict]:
    payload = _decode(token, settings.REFRESH_TOKEN_SECRET)
    if payload is None or payload.get("id") is None:
        return None
    return payload


# ---------------------------------------------------------------------------
# One-time tokens
# ---------------------------------------------------------------------------

def generate_otp() -> int:
    return OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1)


def create_otp_token(user: User, purpose: str) -> tuple[str, int]:
    """Sign a token carrying a fresh six digit code. Returns (token, code)."""
    if purpose == PURPOSE_ACTIVATION:
        lifetime = timedelta(hours=settings.ACTIVATION_TOKEN_EXPIRE_HOURS)
    elif purpose == PURPOSE_FORGOT_PASSWORD:
        lifetime = timedelta(minutes=settings.OTP_TOKEN_EXPIRE_MINUTES)
    else:
        raise ValueError(f"Unknown OTP purpose: {purpose}")

    code = generate_otp()
    claims = {
        "user": {"username": user.user_name, "email": user.email, "role": user.role},
        "code": code,
        "type": purpose,
    }
    return _encode(claims, _otp_secret(purpose), lifetime), code


def create_reset_token(user: User) -> str:
    claims = {
        "user": {"username": user.user_name, "email": user.email},
        "type": PURPOSE_PASSWORD_RESET,
    }
    return _encode(
        claims,
        settings.FORGOT_PASSWORD_SECRET,
        timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES),
    )


def decode_purpose_token(token: str, purpose: str) -> dict:
    """Verify signature, expiry and purpose tag of an OTP or reset token."""
    try:
        payload = jwt.decode(token, _otp_secret(purpose), algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise ErrorResponse("Token has expired", status.HTTP_400_BAD_REQUEST)
    except JWTError:
        raise ErrorResponse("Invalid Token", status.HTTP_400_BAD_REQUEST)

    if payload.get("type") != purpose or not (payload.get("user") or {}).get("email"):
        raise ErrorResponse("Invalid Token", status.HTTP_400_BAD_REQUEST)
    return payload


def token_fingerprint(token: str) -> str:
    """Key under which a consumed token is remembered."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def token_expiry(payload: dict) -> datetime:
    return datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
