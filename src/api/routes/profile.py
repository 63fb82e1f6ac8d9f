from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile, status
from pydantic import BaseModel, EmailStr, Field

from config import ApplicationConfig
from libs.result import Error
from src.api.error import ClientError, ServerError
from src.api.routes.panels import Panel
from src.api.utils.guards import AccessGuard
from src.api.utils.operation import operation_boundary
from src.api.utils.responses import envelope
from src.app.services.blob_store import IBlobStore
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.access import AuthContext
from src.app.use_cases.auth import UpdateProfileCommand
from src.app.use_cases.profile import (
    GetProfileUseCase,
    UpdateProfileUseCase,
    UploadAvatarUseCase,
)
from src.depends import get_blob_store, get_unit_of_work

# Leading bytes of each accepted image type
IMAGE_SIGNATURES = (
    (b"\xff\xd8\xff", "jpg"),
    (b"\x89PNG\r\n\x1a\n", "png"),
    (b"GIF87a", "gif"),
    (b"GIF89a", "gif"),
)


class UpdateProfileRequest(BaseModel):
    """Partial profile update; omitted fields are left unchanged"""

    first_name: Optional[str] = Field(None, max_length=255)
    last_name: Optional[str] = Field(None, max_length=255)
    date_of_birth: Optional[date] = None
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=255)
    state: Optional[str] = Field(None, max_length=255)
    email: Optional[EmailStr] = Field(None, max_length=255)


def sniff_image(content: bytes) -> Optional[str]:
    """File extension for jpeg/png/gif content, None for anything else"""
    for signature, extension in IMAGE_SIGNATURES:
        if content.startswith(signature):
            return extension
    return None


def invalid_avatar(message: str) -> ClientError:
    return ClientError(
        Error("INVALID_AVATAR", "The given data was invalid."),
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        errors={"avatar": [message]},
    )


def build_profile_router(panel: Panel) -> APIRouter:
    """Profile routes for one panel; all require a verified email"""
    router = APIRouter(prefix="/profile", tags=[f"Profile ({panel.name})"])
    guard = AccessGuard(panel.roles, require_verified=True)

    @router.get("")
    async def get_profile(
        ctx: AuthContext = Depends(guard),
        uow: UnitOfWork = Depends(get_unit_of_work),
        blob_store: IBlobStore = Depends(get_blob_store),
    ):
        async with operation_boundary("An error occurred while retrieving profile"):
            result = await GetProfileUseCase(uow, blob_store).execute(ctx.user)

        if result.is_err():
            raise ServerError(result.error)

        return envelope("Profile retrieved successfully", result.value)

    @router.put("")
    async def update_profile(
        body: UpdateProfileRequest,
        ctx: AuthContext = Depends(guard),
        uow: UnitOfWork = Depends(get_unit_of_work),
        blob_store: IBlobStore = Depends(get_blob_store),
    ):
        """
        Raises:
            - 422: Email belongs to another account
        """
        changes = body.model_dump(exclude_unset=True)
        # Email is mandatory on the account; an explicit null means "no change"
        if changes.get("email", "") is None:
            del changes["email"]
        command = UpdateProfileCommand(**changes)

        async with operation_boundary("An error occurred while updating profile"):
            result = await UpdateProfileUseCase(uow, blob_store).execute(ctx.user, command)

        if result.is_err():
            error = result.error
            if error.code == "EMAIL_ALREADY_TAKEN":
                raise ClientError(
                    error,
                    status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                    errors={"email": [error.message]},
                )
            raise ServerError(error)

        return envelope("Profile updated successfully", result.value)

    @router.post("/avatar")
    async def upload_avatar(
        avatar: UploadFile = File(...),
        ctx: AuthContext = Depends(guard),
        uow: UnitOfWork = Depends(get_unit_of_work),
        blob_store: IBlobStore = Depends(get_blob_store),
    ):
        """
        Replace the avatar with a jpeg, png or gif of at most AVATAR_MAX_BYTES.

        Raises:
            - 422: Not an accepted image, or too large
        """
        content = await avatar.read(ApplicationConfig.AVATAR_MAX_BYTES + 1)
        if len(content) > ApplicationConfig.AVATAR_MAX_BYTES:
            raise invalid_avatar(
                f"The avatar may not be greater than "
                f"{ApplicationConfig.AVATAR_MAX_BYTES // 1024} kilobytes."
            )

        extension = sniff_image(content)
        if extension is None:
            raise invalid_avatar("The avatar must be a file of type: jpeg, png, jpg, gif.")

        async with operation_boundary("An error occurred while uploading avatar"):
            result = await UploadAvatarUseCase(uow, blob_store).execute(
                ctx.user, content, extension
            )

        if result.is_err():
            raise ServerError(result.error)

        return envelope("Avatar uploaded successfully", result.value)

    return router
