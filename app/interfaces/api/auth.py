"""Auth API routes: register, login, refresh and the password reset flow."""

from fastapi import APIRouter, Depends, Request, Response, status

from app.application.services import auth_service
from app.config import get_settings
from app.domain.repositories.used_token_repository import UsedTokenRepository
from app.domain.repositories.user_repository import UserRepository
from app.domain.schemas.auth import (
    EmailRequest,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    ResetPasswordRequest,
    UserRead,
    VerifyOtpRequest,
)
from app.interfaces.api.deps import REFRESH_TOKEN_COOKIE, extract_refresh_token
from app.interfaces.deps import get_used_token_repository, get_user_repository

settings = get_settings()
router = APIRouter(prefix="/api/v1/user", tags=["Auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(body: RegisterRequest, users: UserRepository = Depends(get_user_repository)):
    auth_service.register(users, body)
    return {"success": True, "message": "User Created Successfully"}


@router.post("/login")
def login(body: LoginRequest, response: Response, users: UserRepository = Depends(get_user_repository)):
    result = auth_service.login(users, body.email, body.password)

    secure = settings.ENVIRONMENT == "production"
    response.set_cookie(
        "accessToken",
        result.access_token,
        max_age=settings.ACCESS_COOKIE_MAX_AGE_SECONDS,
        httponly=True,
        secure=secure,
        samesite="lax",
        path="/",
    )
    response.set_cookie(
        REFRESH_TOKEN_COOKIE,
        result.refresh_token,
        max_age=settings.REFRESH_COOKIE_MAX_AGE_SECONDS,
        httponly=True,
        secure=secure,
    )

    return {
        "success": True,
        "message": "Login successful",
        "accessToken": result.access_token,
        "refreshToken": result.refresh_token,
        "user": UserRead.model_validate(result.user),
    }


@router.post("/refresh")
def refresh(body: RefreshRequest, request: Request, users: UserRepository = Depends(get_user_repository)):
    token = body.refresh_token or extract_refresh_token(request)
    access_token = auth_service.refresh_access_token(users, token)
    return {
        "success": True,
        "message": "Access token refreshed successfully",
        "accessToken": access_token,
    }


@router.post("/forgot-password")
def forgot_password(body: EmailRequest, users: UserRepository = Depends(get_user_repository)):
    token = auth_service.forgot_password(users, body.email)
    return {
        "success": True,
        "message": "Your Forgot password request successful",
        "token": token,
    }


@router.post("/verify-otp")
def verify_otp(
    body: VerifyOtpRequest,
    users: UserRepository = Depends(get_user_repository),
    used_tokens: UsedTokenRepository = Depends(get_used_token_repository),
):
    result = auth_service.verify_otp(users, used_tokens, body.token, body.otp)
    return {
        "success": True,
        "message": "OTP verified successfully",
        "token": result.reset_token,
        "email": result.email,
    }


@router.post("/reset-password")
def reset_password(
    body: ResetPasswordRequest,
    users: UserRepository = Depends(get_user_repository),
    used_tokens: UsedTokenRepository = Depends(get_used_token_repository),
):
    user = auth_service.reset_password(users, used_tokens, body.token, body.password)
    return {
        "success": True,
        "message": "Password reset successfully",
        "user": UserRead.model_validate(user),
    }


@router.post("/resend-verification-otp")
def resend_verification_otp(body: EmailRequest, users: UserRepository = Depends(get_user_repository)):
    token = auth_service.resend_verification_otp(users, body.email)
    return {
        "success": True,
        "message": "Verification OTP resent successfully",
        "activationToken": token,
    }


@router.post("/resend-forgot-password-otp")
def resend_forgot_password_otp(body: EmailRequest, users: UserRepository = Depends(get_user_repository)):
    token = auth_service.resend_forgot_password_otp(users, body.email)
    return {
        "success": True,
        "message": "Forgot password OTP resent successfully",
        "token": token,
    }
