"""
Authorize Request Use Case

The access guard chain: decides whether a request may reach its handler.
"""

import logging
from dataclasses import dataclass
from typing import FrozenSet, Iterable, Optional

from libs.result import Error, Result, Return
from src.app.services.access_tokens import TokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AccessToken, AuditEvent, RoleName, User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthContext:
    """Identity bound to an admitted request"""

    user: User
    token: AccessToken


class AuthorizeRequestUseCase:
    """
    Use case evaluating the guard chain for one request.

    Checks run in a fixed order and the first failure wins; each check
    assumes every earlier one passed:
    1. Authentication - the bearer token resolves to a user (UNAUTHENTICATED)
    2. Active status - a suspended user has *all* tokens revoked, then
       ACCOUNT_SUSPENDED
    3. Email verified - only when the route asks for it (EMAIL_NOT_VERIFIED)
    4. Role membership - user's role must be in the route's allow-set
       (ROLE_FORBIDDEN); fine-grained permissions are not consulted

    Nothing is cached between requests.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        plain_token: Optional[str],
        allowed_roles: Optional[Iterable[RoleName]] = None,
        require_verified: bool = False,
    ) -> Result[AuthContext]:
        roles: Optional[FrozenSet[RoleName]] = (
            frozenset(allowed_roles) if allowed_roles is not None else None
        )

        async with self.uow:
            # 1. Authentication
            issuer = TokenIssuer(self.uow)
            token = await issuer.resolve(plain_token) if plain_token else None
            user = await self.uow.users.get_by_id(token.user_id) if token else None

            if token is None or user is None:
                return Return.err(Error("UNAUTHENTICATED", "Authentication required"))

            # 2. Active status
            if not user.is_active:
                revoked = await issuer.revoke_all(user.id)
                await self.uow.audit_events.create(
                    AuditEvent(
                        user_id=user.id,
                        action="account_suspended_token_revoked",
                        event_metadata={"tokens_revoked": revoked},
                    )
                )
                await self.uow.commit()
                logger.warning(f"Suspended user {user.id} presented a token; revoked {revoked}")
                return Return.err(
                    Error(
                        "ACCOUNT_SUSPENDED",
                        "Your account is suspended. Please contact support.",
                    )
                )

            # 3. Email verified
            if require_verified and not user.has_verified_email():
                return Return.err(
                    Error("EMAIL_NOT_VERIFIED", "Your email address is not verified.")
                )

            # 4. Role membership
            if roles is not None and RoleName(user.role) not in roles:
                return Return.err(
                    Error("ROLE_FORBIDDEN", "You Are Unauthorized To Access This Route(s)")
                )

            await self.uow.access_tokens.touch(token)
            await self.uow.commit()

        return Return.ok(AuthContext(user=user, token=token))
