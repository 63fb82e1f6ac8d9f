"""
Resend Verification Email Use Case

Sends a fresh signed link to the authenticated user.
"""

import logging

from libs.result import Error, Result, Return
from src.app.services.notification_service import INotificationService
from src.app.services.verification_link import VerificationLinkSigner
from src.domain.entities import User

logger = logging.getLogger(__name__)


class ResendVerificationUseCase:
    """
    Use case for resending email verification.

    Business Rules:
    - Already verified accounts get ALREADY_VERIFIED and no email
    - Otherwise a new link is signed for the current email; older links stay
      valid until they expire or the email changes
    - Delivery is fire-and-forget: a failed send is logged, not reported
    """

    def __init__(self, link_signer: VerificationLinkSigner, notifier: INotificationService):
        self.link_signer = link_signer
        self.notifier = notifier

    async def execute(self, user: User) -> Result[None]:
        if user.has_verified_email():
            return Return.err(Error("ALREADY_VERIFIED", "Email already verified."))

        link = self.link_signer.create(user)
        if not await self.notifier.send_verification_link(user, link.url):
            logger.warning(f"Verification email for user {user.id} could not be delivered")

        return Return.ok(None)
