"""
Request Password Reset Use Case

Handles generating and sending password reset tokens.
"""

import hashlib
import logging
import secrets
from datetime import timedelta

from libs.result import Error, Result, Return
from src.app.services.notification_service import INotificationService
from src.app.services.unit_of_work import UnitOfWork
from src.domain.clock import as_utc, utc_now
from src.domain.entities import AuditEvent, PasswordResetToken

logger = logging.getLogger(__name__)

RESET_LINK_NOT_SENT = Error(
    "RESET_LINK_NOT_SENT", "Unable to send password reset link. Please try again."
)


class RequestPasswordResetUseCase:
    """
    Use case for requesting password reset.

    Business Rules:
    - Generate cryptographically secure 32-byte token, store only its SHA-256 hash
    - Token expires after expire_minutes
    - A new token replaces (deletes) the user's earlier tokens
    - A new token cannot be requested within throttle_seconds of the last one
    - Unknown email, throttled request and failed delivery all return
      RESET_LINK_NOT_SENT, unless hide_unknown_email is set, in which case an
      unknown email reports success without sending anything
    """

    def __init__(
        self,
        uow: UnitOfWork,
        notifier: INotificationService,
        expire_minutes: int = 60,
        throttle_seconds: int = 60,
        hide_unknown_email: bool = False,
    ):
        self.uow = uow
        self.notifier = notifier
        self.expire_minutes = expire_minutes
        self.throttle_seconds = throttle_seconds
        self.hide_unknown_email = hide_unknown_email

    async def execute(self, email: str) -> Result[None]:
        """
        Execute request password reset use case.

        Args:
            email: User's email address

        Returns:
            Result with None on success, or Error(RESET_LINK_NOT_SENT)
        """
        async with self.uow:
            user = await self.uow.users.get_by_email(email)

            if user is None:
                if self.hide_unknown_email:
                    return Return.ok(None)
                return Return.err(RESET_LINK_NOT_SENT)

            latest = await self.uow.password_reset_tokens.get_latest_by_user_id(user.id)
            now = utc_now()
            if latest and as_utc(latest.created_at) > now - timedelta(seconds=self.throttle_seconds):
                return Return.err(RESET_LINK_NOT_SENT)

            await self.uow.password_reset_tokens.delete_by_user_id(user.id)

            reset_token = secrets.token_urlsafe(32)
            token_hash = hashlib.sha256(reset_token.encode()).hexdigest()

            password_reset_token = PasswordResetToken(
                user_id=user.id,
                token_hash=token_hash,
                used=False,
                created_at=now,
                expires_at=now + timedelta(minutes=self.expire_minutes),
            )
            await self.uow.password_reset_tokens.create(password_reset_token)

            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=user.id,
                    action="password_reset_requested",
                    event_metadata={"token_id": str(password_reset_token.id)},
                )
            )

            # The token only becomes usable once the email has gone out
            if not await self.notifier.send_password_reset(user, reset_token):
                logger.warning(f"Password reset email for user {user.id} could not be delivered")
                return Return.err(RESET_LINK_NOT_SENT)

            await self.uow.commit()

        return Return.ok(None)
