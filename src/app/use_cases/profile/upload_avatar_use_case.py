"""
Upload Avatar Use Case

Replaces the current account's avatar image.
"""

import logging

from libs.result import Result, Return
from src.app.services.blob_store import IBlobStore
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth.account_view import build_account_view
from src.app.use_cases.auth.dtos import ProfileResponse
from src.domain.entities import User

logger = logging.getLogger(__name__)

AVATAR_DIRECTORY = "avatars"


class UploadAvatarUseCase:
    """
    Use case for avatar upload.

    Business Rules:
    - The new blob is stored and the account committed before the old blob
      is deleted, so the account never points at a missing file
    - If anything fails after the new blob was stored, the new blob is
      removed and the account keeps its previous avatar
    """

    def __init__(self, uow: UnitOfWork, blob_store: IBlobStore):
        self.uow = uow
        self.blob_store = blob_store

    async def execute(self, user: User, content: bytes, extension: str) -> Result[ProfileResponse]:
        new_path = await self.blob_store.put(AVATAR_DIRECTORY, content, extension)
        old_path = user.avatar

        try:
            async with self.uow:
                user.avatar = new_path
                user = await self.uow.users.update(user)
                view = await build_account_view(self.uow, user, self.blob_store)
                await self.uow.commit()
        except Exception:
            user.avatar = old_path
            await self.blob_store.delete(new_path)
            raise

        if old_path and old_path != new_path:
            try:
                await self.blob_store.delete(old_path)
            except OSError as e:
                # The account already points at the new file; a stray blob is harmless
                logger.warning(f"Could not delete previous avatar {old_path}: {e}")

        return Return.ok(ProfileResponse(user=view))
