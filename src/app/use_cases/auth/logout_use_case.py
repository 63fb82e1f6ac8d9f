"""
Logout Use Case

Revokes only the token used for the current request.
"""

from uuid import UUID

from libs.result import Result, Return
from src.app.services.access_tokens import TokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent


class LogoutUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID, token_id: UUID) -> Result[None]:
        async with self.uow:
            await TokenIssuer(self.uow).revoke(token_id)

            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=user_id,
                    action="logout",
                    event_metadata={"token_id": str(token_id)},
                )
            )

            await self.uow.commit()

        return Return.ok(None)
