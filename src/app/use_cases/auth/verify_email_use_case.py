"""
Verify Email Use Case

Marks an account's email as verified from a signed link.
The link's signature and expiry are checked by the route before this runs.
"""

from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.verification_link import proof_matches
from src.domain.clock import utc_now
from src.domain.entities import AuditEvent


class VerifyEmailUseCase:
    """
    Use case for email verification.

    Business Rules (checked in this order):
    - Account must exist (USER_NOT_FOUND)
    - Account must not already be verified (ALREADY_VERIFIED); the proof is
      irrelevant once verified
    - Proof must match the account's *current* email, compared in constant
      time (INVALID_VERIFICATION_LINK)
    - Sets email_verified_at once and records an email_verified audit event
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID, proof: str) -> Result[None]:
        """
        Execute email verification use case.

        Args:
            user_id: Account id from the link
            proof: Email-derived proof from the link

        Errors:
            - USER_NOT_FOUND: No account with this id
            - ALREADY_VERIFIED: Email was verified before
            - INVALID_VERIFICATION_LINK: Proof does not match the current email
        """
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)

            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found."))

            if user.has_verified_email():
                return Return.err(Error("ALREADY_VERIFIED", "Email already verified."))

            if not proof_matches(user, proof):
                return Return.err(
                    Error("INVALID_VERIFICATION_LINK", "Invalid verification link.")
                )

            user.email_verified_at = utc_now()
            await self.uow.users.update(user)

            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=user.id,
                    action="email_verified",
                    event_metadata={"email": user.email},
                )
            )

            await self.uow.commit()

        return Return.ok(None)
