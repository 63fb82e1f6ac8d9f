"""
Access guard

FastAPI dependency running the guard chain for protected routes.
"""

from typing import Iterable, Optional

from fastapi import Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.api.error import ClientError
from src.api.utils.operation import operation_boundary
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.access import AuthContext, AuthorizeRequestUseCase
from src.depends import get_unit_of_work
from src.domain.entities import RoleName

# Missing credentials must reach the guard chain, not fail with FastAPI's 403
bearer = HTTPBearer(auto_error=False)

GUARD_STATUS = {
    "UNAUTHENTICATED": status.HTTP_401_UNAUTHORIZED,
    "ACCOUNT_SUSPENDED": status.HTTP_403_FORBIDDEN,
    "EMAIL_NOT_VERIFIED": status.HTTP_403_FORBIDDEN,
    "ROLE_FORBIDDEN": status.HTTP_403_FORBIDDEN,
}


class AccessGuard:
    """
    Route dependency: ``ctx: AuthContext = Depends(AccessGuard(roles))``

    Args:
        allowed_roles: Roles admitted to the route (None admits any role)
        require_verified: Also require a verified email
    """

    def __init__(
        self,
        allowed_roles: Optional[Iterable[RoleName]] = None,
        require_verified: bool = False,
    ):
        self.allowed_roles = frozenset(allowed_roles) if allowed_roles is not None else None
        self.require_verified = require_verified

    async def __call__(
        self,
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
        uow: UnitOfWork = Depends(get_unit_of_work),
    ) -> AuthContext:
        plain_token = credentials.credentials if credentials else None

        async with operation_boundary("An error occurred while authorizing request"):
            result = await AuthorizeRequestUseCase(uow).execute(
                plain_token,
                allowed_roles=self.allowed_roles,
                require_verified=self.require_verified,
            )

        if result.is_err():
            error = result.error
            raise ClientError(
                error,
                status_code=GUARD_STATUS[error.code],
                error="Unauthenticated" if error.code == "UNAUTHENTICATED" else None,
                success=False,
            )

        return result.value
