"""
Register Use Case

Self-service registration for regular users.
"""

import logging

import bcrypt
from sqlalchemy.exc import IntegrityError

from libs.result import Error, Result, Return

from src.app.services.access_tokens import TokenIssuer
from src.app.services.blob_store import IBlobStore
from src.app.services.notification_service import INotificationService
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.verification_link import VerificationLinkSigner
from src.domain.entities import AuditEvent, RoleName, User
from .account_view import build_account_view
from .dtos import AuthResponse, RegisterCommand

logger = logging.getLogger(__name__)

EMAIL_ALREADY_EXISTS = Error("EMAIL_ALREADY_EXISTS", "This email address is already registered.")
USER_TOKEN_NAME = "user_auth_token"


class RegisterUseCase:
    """
    Register Use Case

    Business Logic:
    1. Reject the email if it is already registered
    2. Hash password with bcrypt cost factor 12
    3. Create User with role=USER, email_verified_at=None (never auto-verified)
    4. Mint one bearer token
    5. Record AuditEvent action=register, commit atomically
    6. Send the signed verification link (delivery failure does not undo registration)
    """

    def __init__(
        self,
        uow: UnitOfWork,
        link_signer: VerificationLinkSigner,
        notifier: INotificationService,
        blob_store: IBlobStore,
    ):
        self.uow = uow
        self.link_signer = link_signer
        self.notifier = notifier
        self.blob_store = blob_store

    async def execute(self, command: RegisterCommand) -> Result[AuthResponse]:
        """
        Execute register use case

        Returns:
            Result[AuthResponse] with the new account view and bearer token
            or Error(EMAIL_ALREADY_EXISTS) if the email is taken
        """
        async with self.uow:
            if await self.uow.users.email_taken(command.email):
                return Return.err(EMAIL_ALREADY_EXISTS)

            password_hash = bcrypt.hashpw(
                command.password.encode("utf-8"), bcrypt.gensalt(12)
            )

            user = User(
                first_name=command.first_name,
                last_name=command.last_name,
                email=command.email,
                password_hash=password_hash.decode("utf-8"),
                role=RoleName.user,
                email_verified_at=None,
            )
            try:
                user = await self.uow.users.create(user)
            except IntegrityError:
                # A concurrent registration claimed the email after the check
                await self.uow.rollback()
                return Return.err(EMAIL_ALREADY_EXISTS)

            token = await TokenIssuer(self.uow).mint(user, USER_TOKEN_NAME)

            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=user.id,
                    action="register",
                    event_metadata={"email": command.email},
                )
            )

            view = await build_account_view(self.uow, user, self.blob_store)

            await self.uow.commit()

        logger.info(f"Registered user {user.id}")

        link = self.link_signer.create(user)
        if not await self.notifier.send_verification_link(user, link.url):
            logger.warning(f"Verification email for user {user.id} could not be delivered")

        return Return.ok(AuthResponse(user=view, token=token))
