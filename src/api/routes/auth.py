from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel, EmailStr, Field, ValidationInfo, field_validator

from config import ApplicationConfig
from libs.result import Error
from src.api.error import ClientError, ServerError
from src.api.routes.panels import Panel
from src.api.utils.guards import AccessGuard
from src.api.utils.operation import operation_boundary
from src.api.utils.rate_limit import client_ip, enforce_rate_limit
from src.api.utils.responses import envelope
from src.app.services.blob_store import IBlobStore
from src.app.services.notification_service import INotificationService
from src.app.services.passwords import PASSWORD_TOO_LONG, exceeds_bcrypt_limit
from src.app.services.rate_limiter import IRateLimiter
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.verification_link import LinkStatus, VerificationLinkSigner
from src.app.use_cases.access import AuthContext
from src.app.use_cases.auth import (
    ConfirmPasswordResetUseCase,
    LoginUseCase,
    LogoutUseCase,
    RegisterCommand,
    RegisterUseCase,
    RequestPasswordResetUseCase,
    ResendVerificationUseCase,
    VerifyEmailUseCase,
)
from src.depends import (
    get_blob_store,
    get_link_signer,
    get_notifier,
    get_rate_limiter,
    get_unit_of_work,
)

PASSWORD_MISMATCH = "The password confirmation does not match."


class RegisterRequest(BaseModel):
    """Registration payload (user panel only)"""

    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=8)
    password_confirmation: str

    @field_validator("password")
    @classmethod
    def password_fits_hash(cls, value: str) -> str:
        if exceeds_bcrypt_limit(value):
            raise ValueError(PASSWORD_TOO_LONG)
        return value

    @field_validator("password_confirmation")
    @classmethod
    def passwords_match(cls, value: str, info: ValidationInfo) -> str:
        if "password" in info.data and value != info.data["password"]:
            raise ValueError(PASSWORD_MISMATCH)
        return value


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    token: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=8)
    password_confirmation: str

    @field_validator("password")
    @classmethod
    def password_fits_hash(cls, value: str) -> str:
        if exceeds_bcrypt_limit(value):
            raise ValueError(PASSWORD_TOO_LONG)
        return value

    @field_validator("password_confirmation")
    @classmethod
    def passwords_match(cls, value: str, info: ValidationInfo) -> str:
        if "password" in info.data and value != info.data["password"]:
            raise ValueError(PASSWORD_MISMATCH)
        return value


def build_auth_router(panel: Panel) -> APIRouter:
    """
    Authentication routes for one panel.

    Register and password reset exist only on self-service panels. Everything
    else is shared; the panel decides which roles may sign in and which roles
    the guarded routes admit.
    """
    router = APIRouter(prefix="/auth", tags=[f"Authentication ({panel.name})"])
    guard = AccessGuard(panel.roles)

    if panel.self_service:

        @router.post("/register", status_code=status.HTTP_201_CREATED)
        async def register(
            request: Request,
            body: RegisterRequest,
            uow: UnitOfWork = Depends(get_unit_of_work),
            link_signer: VerificationLinkSigner = Depends(get_link_signer),
            notifier: INotificationService = Depends(get_notifier),
            blob_store: IBlobStore = Depends(get_blob_store),
            limiter: IRateLimiter = Depends(get_rate_limiter),
        ):
            """
            Create a USER account, issue a token and send the verification link.

            Raises:
                - 422: Email already registered
                - 429: Too many attempts
            """
            await enforce_rate_limit(limiter, request, "auth", body.email)

            command = RegisterCommand(
                first_name=body.first_name,
                last_name=body.last_name,
                email=body.email,
                password=body.password,
            )

            async with operation_boundary("An error occurred during registration"):
                result = await RegisterUseCase(uow, link_signer, notifier, blob_store).execute(
                    command
                )

            if result.is_err():
                error = result.error
                if error.code == "EMAIL_ALREADY_EXISTS":
                    raise ClientError(
                        error,
                        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                        errors={"email": [error.message]},
                    )
                raise ServerError(error)

            return envelope(
                "Registration successful. Please verify your email.",
                result.value,
                status_code=status.HTTP_201_CREATED,
            )

    @router.post("/sessions")
    async def login(
        request: Request,
        body: LoginRequest,
        uow: UnitOfWork = Depends(get_unit_of_work),
        blob_store: IBlobStore = Depends(get_blob_store),
        limiter: IRateLimiter = Depends(get_rate_limiter),
    ):
        """
        Exchange credentials for a bearer token. Revokes every earlier token.

        Raises:
            - 401: Unknown email, wrong password, or role not allowed here
            - 403: Account suspended
            - 429: Too many attempts
        """
        await enforce_rate_limit(limiter, request, "auth", body.email)

        async with operation_boundary("An error occurred during authentication"):
            result = await LoginUseCase(uow, blob_store).execute(
                body.email, body.password, panel.roles, panel.token_name
            )

        if result.is_err():
            error = result.error
            if error.code == "INVALID_CREDENTIALS":
                raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
            if error.code == "ACCOUNT_SUSPENDED":
                raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
            raise ServerError(error)

        return envelope("Login successful", result.value)

    @router.delete("/sessions")
    async def logout(
        ctx: AuthContext = Depends(guard),
        uow: UnitOfWork = Depends(get_unit_of_work),
    ):
        """Revoke the token used for this request only"""
        async with operation_boundary("An error occurred during logout"):
            result = await LogoutUseCase(uow).execute(ctx.user.id, ctx.token.id)

        if result.is_err():
            raise ServerError(result.error)

        return envelope("Logged out successfully")

    @router.get("/email/verify/{user_id}/{proof}")
    async def verify_email(
        request: Request,
        user_id: str,
        proof: str,
        expires: Optional[int] = None,
        signature: Optional[str] = None,
        uow: UnitOfWork = Depends(get_unit_of_work),
        link_signer: VerificationLinkSigner = Depends(get_link_signer),
        limiter: IRateLimiter = Depends(get_rate_limiter),
    ):
        """
        Consume a signed verification link.

        Signature and expiry are checked here before any lookup.

        Raises:
            - 403: Bad signature or expired link
            - 404: Unknown account
            - 400: Already verified, or link does not match the current email
        """
        await enforce_rate_limit(limiter, request, "verification", client_ip(request))

        if expires is None or signature is None:
            raise ClientError(
                Error("INVALID_SIGNATURE", "Invalid signature."),
                status_code=status.HTTP_403_FORBIDDEN,
            )

        link_status = link_signer.validate(user_id, proof, expires, signature)
        if link_status == LinkStatus.bad_signature:
            raise ClientError(
                Error("INVALID_SIGNATURE", "Invalid signature."),
                status_code=status.HTTP_403_FORBIDDEN,
            )
        if link_status == LinkStatus.expired:
            raise ClientError(
                Error("LINK_EXPIRED", "Verification link has expired."),
                status_code=status.HTTP_403_FORBIDDEN,
            )

        try:
            account_id = UUID(user_id)
        except ValueError:
            raise ClientError(
                Error("USER_NOT_FOUND", "User not found."), status_code=status.HTTP_404_NOT_FOUND
            )

        async with operation_boundary("An error occurred during email verification"):
            result = await VerifyEmailUseCase(uow).execute(account_id, proof)

        if result.is_err():
            error = result.error
            if error.code == "USER_NOT_FOUND":
                raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
            if error.code in ("ALREADY_VERIFIED", "INVALID_VERIFICATION_LINK"):
                raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
            raise ServerError(error)

        return envelope("Email verified successfully")

    @router.post("/email/verification-notification")
    async def resend_verification(
        request: Request,
        ctx: AuthContext = Depends(guard),
        link_signer: VerificationLinkSigner = Depends(get_link_signer),
        notifier: INotificationService = Depends(get_notifier),
        limiter: IRateLimiter = Depends(get_rate_limiter),
    ):
        """Send a fresh verification link to the signed-in account"""
        await enforce_rate_limit(limiter, request, "verification", str(ctx.user.id))

        async with operation_boundary("An error occurred while sending verification email"):
            result = await ResendVerificationUseCase(link_signer, notifier).execute(ctx.user)

        if result.is_err():
            error = result.error
            if error.code == "ALREADY_VERIFIED":
                raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
            raise ServerError(error)

        return envelope("Verification email sent successfully")

    if panel.self_service:

        @router.post("/password/forgot")
        async def forgot_password(
            request: Request,
            body: ForgotPasswordRequest,
            uow: UnitOfWork = Depends(get_unit_of_work),
            notifier: INotificationService = Depends(get_notifier),
            limiter: IRateLimiter = Depends(get_rate_limiter),
        ):
            """
            Email a single-use password reset token.

            Raises:
                - 400: Unknown email (unless hidden by configuration),
                  throttled, or the email could not be delivered
            """
            await enforce_rate_limit(limiter, request, "password", body.email)

            use_case = RequestPasswordResetUseCase(
                uow,
                notifier,
                expire_minutes=ApplicationConfig.PASSWORD_RESET_EXPIRE_MINUTES,
                throttle_seconds=ApplicationConfig.PASSWORD_RESET_THROTTLE_SECONDS,
                hide_unknown_email=ApplicationConfig.PASSWORD_RESET_HIDE_UNKNOWN_EMAIL,
            )
            async with operation_boundary(
                "An error occurred while sending password reset link"
            ):
                result = await use_case.execute(body.email)

            if result.is_err():
                error = result.error
                if error.code == "RESET_LINK_NOT_SENT":
                    raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
                raise ServerError(error)

            return envelope("Password reset link sent to your email.")

        @router.post("/password/reset")
        async def reset_password(
            request: Request,
            body: ResetPasswordRequest,
            uow: UnitOfWork = Depends(get_unit_of_work),
            limiter: IRateLimiter = Depends(get_rate_limiter),
        ):
            """
            Set a new password with a reset token.

            Raises:
                - 400: Token unknown, used, expired or issued for another email
            """
            await enforce_rate_limit(limiter, request, "password", body.email)

            async with operation_boundary("An error occurred while resetting password"):
                result = await ConfirmPasswordResetUseCase(uow).execute(
                    body.email, body.token, body.password
                )

            if result.is_err():
                error = result.error
                if error.code == "INVALID_RESET_TOKEN":
                    raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
                raise ServerError(error)

            return envelope("Password reset successfully.")

    return router
