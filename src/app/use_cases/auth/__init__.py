"""
Authentication Use Cases

All authentication-related business logic.
"""

from .register_use_case import RegisterUseCase, USER_TOKEN_NAME
from .login_use_case import LoginUseCase
from .logout_use_case import LogoutUseCase
from .verify_email_use_case import VerifyEmailUseCase
from .resend_verification_use_case import ResendVerificationUseCase
from .request_password_reset_use_case import RequestPasswordResetUseCase
from .confirm_password_reset_use_case import ConfirmPasswordResetUseCase
from .account_view import build_account_view
from .dtos import (
    AccountView,
    AuthResponse,
    ProfileResponse,
    RegisterCommand,
    RoleInfo,
    UpdateProfileCommand,
)

__all__ = [
    # Use Cases
    "RegisterUseCase",
    "LoginUseCase",
    "LogoutUseCase",
    "VerifyEmailUseCase",
    "ResendVerificationUseCase",
    "RequestPasswordResetUseCase",
    "ConfirmPasswordResetUseCase",
    "build_account_view",
    "USER_TOKEN_NAME",
    # DTOs - Commands
    "RegisterCommand",
    "UpdateProfileCommand",
    # DTOs - Responses
    "AuthResponse",
    "ProfileResponse",
    "AccountView",
    "RoleInfo",
]
