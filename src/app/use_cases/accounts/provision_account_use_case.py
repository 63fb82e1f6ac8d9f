"""
Provision Account Use Case

Creates accounts outside the self-service registration flow,
typically administrators and owners.
"""

from typing import Optional

import bcrypt
from pydantic import BaseModel, field_validator
from sqlalchemy.exc import IntegrityError

from libs.result import Error, Result, Return
from src.app.services.passwords import PASSWORD_TOO_LONG, exceeds_bcrypt_limit
from src.app.services.role_registry import sync_role_permissions
from src.app.services.unit_of_work import UnitOfWork
from src.domain.clock import utc_now
from src.domain.entities import AuditEvent, RoleName, User

EMAIL_ALREADY_EXISTS = Error("EMAIL_ALREADY_EXISTS", "This email address is already registered.")


class ProvisionAccountCommand(BaseModel):
    email: str
    password: str
    role: RoleName = RoleName.admin
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    verified: bool = False

    @field_validator("password")
    @classmethod
    def password_fits_hash(cls, value: str) -> str:
        if exceeds_bcrypt_limit(value):
            raise ValueError(PASSWORD_TOO_LONG)
        return value


class ProvisionAccountUseCase:
    """
    Use case for out-of-band provisioning.

    Business Rules:
    - Role permission bundles are synced first, so a fresh database is usable
    - Email must be unique (EMAIL_ALREADY_EXISTS)
    - verified=True pre-sets email_verified_at
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, command: ProvisionAccountCommand) -> Result[User]:
        async with self.uow:
            await sync_role_permissions(self.uow)

            if await self.uow.users.email_taken(command.email):
                return Return.err(EMAIL_ALREADY_EXISTS)

            password_hash = bcrypt.hashpw(command.password.encode(), bcrypt.gensalt(12))
            user = User(
                email=command.email,
                password_hash=password_hash.decode(),
                role=command.role,
                first_name=command.first_name,
                last_name=command.last_name,
                email_verified_at=utc_now() if command.verified else None,
            )
            try:
                user = await self.uow.users.create(user)
            except IntegrityError:
                await self.uow.rollback()
                return Return.err(EMAIL_ALREADY_EXISTS)

            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=user.id,
                    action="account_provisioned",
                    event_metadata={"role": command.role.value},
                )
            )

            await self.uow.commit()

        return Return.ok(user)
