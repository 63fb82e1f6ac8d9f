"""
Update Profile Use Case

Applies a partial set of profile attributes to the current account.
"""

from sqlalchemy.exc import IntegrityError

from libs.result import Error, Result, Return
from src.app.services.blob_store import IBlobStore
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth.account_view import build_account_view
from src.app.use_cases.auth.dtos import ProfileResponse, UpdateProfileCommand
from src.domain.entities import User

EMAIL_ALREADY_TAKEN = Error("EMAIL_ALREADY_TAKEN", "This email address is already taken.")


class UpdateProfileUseCase:
    """
    Use case for profile updates.

    Business Rules:
    - Only fields present in the command are written
    - A new email must not belong to another account (EMAIL_ALREADY_TAKEN)
    - Changing the email leaves email_verified_at untouched, but every
      outstanding verification link stops matching
    """

    def __init__(self, uow: UnitOfWork, blob_store: IBlobStore):
        self.uow = uow
        self.blob_store = blob_store

    async def execute(self, user: User, command: UpdateProfileCommand) -> Result[ProfileResponse]:
        changes = command.model_dump(exclude_unset=True)

        async with self.uow:
            new_email = changes.get("email")
            if new_email is not None and new_email != user.email:
                if await self.uow.users.email_taken(new_email, exclude_user_id=user.id):
                    return Return.err(EMAIL_ALREADY_TAKEN)

            for field, value in changes.items():
                setattr(user, field, value)

            try:
                user = await self.uow.users.update(user)
            except IntegrityError:
                await self.uow.rollback()
                return Return.err(EMAIL_ALREADY_TAKEN)
            view = await build_account_view(self.uow, user, self.blob_store)

            await self.uow.commit()

        return Return.ok(ProfileResponse(user=view))
