"""
Login Use Case

Handles credential authentication and issues a bearer token.
"""

import logging
from typing import Iterable

import bcrypt

from libs.result import Error, Result, Return
from src.app.services.access_tokens import TokenIssuer
from src.app.services.blob_store import IBlobStore
from src.app.services.passwords import MAX_PASSWORD_BYTES
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent, RoleName
from .account_view import build_account_view
from .dtos import AuthResponse

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = Error("INVALID_CREDENTIALS", "The provided credentials are incorrect.")

# Precomputed so unknown emails cost the same bcrypt work as wrong passwords
_DUMMY_HASH = bcrypt.hashpw(b"dummy_password", bcrypt.gensalt(12))


class LoginUseCase:
    """
    Use case for user login and token issuance.

    Business Rules:
    - Unknown email, wrong password and a role not allowed on this panel all
      return the same INVALID_CREDENTIALS error (no account enumeration)
    - Constant-time password comparison, dummy check for unknown emails
    - Suspended accounts (is_active=False) are refused with ACCOUNT_SUSPENDED
    - All existing tokens are revoked before the new one is minted
      (single active session per login)
    """

    def __init__(self, uow: UnitOfWork, blob_store: IBlobStore):
        self.uow = uow
        self.blob_store = blob_store

    async def execute(
        self,
        email: str,
        password: str,
        allowed_roles: Iterable[RoleName],
        token_name: str,
    ) -> Result[AuthResponse]:
        """
        Execute login use case.

        Args:
            email: User email
            password: Plain text password
            allowed_roles: Roles permitted to sign in on the calling panel
            token_name: Label stored with the minted token

        Returns:
            Result with AuthResponse containing the account view and token, or Error
        """
        async with self.uow:
            user = await self.uow.users.get_by_email(email)

            secret = password.encode()
            if user is None or len(secret) > MAX_PASSWORD_BYTES:
                # No stored hash can match a secret bcrypt refuses to hash
                bcrypt.checkpw(secret[:MAX_PASSWORD_BYTES], _DUMMY_HASH)
                return Return.err(INVALID_CREDENTIALS)

            password_valid = bcrypt.checkpw(secret, user.password_hash.encode())
            if not password_valid:
                return Return.err(INVALID_CREDENTIALS)

            if RoleName(user.role) not in set(allowed_roles):
                return Return.err(INVALID_CREDENTIALS)

            if not user.is_active:
                return Return.err(
                    Error(
                        "ACCOUNT_SUSPENDED",
                        "Your account is suspended. Please contact support.",
                    )
                )

            issuer = TokenIssuer(self.uow)
            revoked = await issuer.revoke_all(user.id)
            token = await issuer.mint(user, token_name)

            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=user.id,
                    action="login",
                    event_metadata={"token_name": token_name, "tokens_revoked": revoked},
                )
            )

            view = await build_account_view(self.uow, user, self.blob_store)

            await self.uow.commit()

        logger.info(f"User {user.id} logged in ({revoked} previous token(s) revoked)")
        return Return.ok(AuthResponse(user=view, token=token))
