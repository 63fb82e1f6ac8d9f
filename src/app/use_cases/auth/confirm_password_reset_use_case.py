"""
Confirm Password Reset Use Case

Exchanges a valid reset token for a new password.
"""

import hashlib

import bcrypt

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.clock import as_utc, utc_now
from src.domain.entities import AuditEvent

INVALID_RESET_TOKEN = Error("INVALID_RESET_TOKEN", "Invalid or expired reset token.")


class ConfirmPasswordResetUseCase:
    """
    Use case for confirming password reset.

    Business Rules:
    - Token is bound to the email's account; lookup is by SHA-256 hash
    - Unknown email, unknown token, used token and expired token all return
      the same INVALID_RESET_TOKEN error
    - Password is hashed with bcrypt (cost factor 12) and overwrites the old hash
    - Token is marked as used (single-use)
    - Existing bearer tokens stay valid
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, email: str, token: str, new_password: str) -> Result[None]:
        async with self.uow:
            user = await self.uow.users.get_by_email(email)
            if user is None:
                return Return.err(INVALID_RESET_TOKEN)

            token_hash = hashlib.sha256(token.encode()).hexdigest()
            reset_token = await self.uow.password_reset_tokens.get_by_user_and_token_hash(
                user.id, token_hash
            )

            if reset_token is None or reset_token.used:
                return Return.err(INVALID_RESET_TOKEN)

            if as_utc(reset_token.expires_at) < utc_now():
                return Return.err(INVALID_RESET_TOKEN)

            password_hash = bcrypt.hashpw(new_password.encode(), bcrypt.gensalt(12))
            user.password_hash = password_hash.decode()
            await self.uow.users.update(user)

            reset_token.used = True
            await self.uow.password_reset_tokens.update(reset_token)

            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=user.id,
                    action="password_reset_confirmed",
                    event_metadata={"token_id": str(reset_token.id)},
                )
            )

            await self.uow.commit()

        return Return.ok(None)
